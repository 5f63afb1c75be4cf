"""Account management: profile, preferences and deletion."""

from wellness.services.account.account_service import (
    DELETE_CONFIRMATION,
    AccountService,
    merge_preferences,
)

__all__ = ["AccountService", "DELETE_CONFIRMATION", "merge_preferences"]
