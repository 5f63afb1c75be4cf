"""
Database ORM models package.
"""

from wellness.infrastructure.database.models.user_model import UserModel
from wellness.infrastructure.database.models.chat_session_model import ChatSessionModel
from wellness.infrastructure.database.models.message_model import MessageModel

__all__ = [
    "UserModel",
    "ChatSessionModel",
    "MessageModel",
]
