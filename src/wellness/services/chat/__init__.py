"""
Chat services: message pipeline, canned fallbacks and recommendations.
"""

from wellness.services.chat.chat_service import (
    ChatResult,
    ChatService,
    ServiceStats,
    get_chat_service,
)
from wellness.services.chat.fallback_responses import select_fallback_response
from wellness.services.chat.recommendations import build_recommendations

__all__ = [
    "ChatResult",
    "ChatService",
    "ServiceStats",
    "get_chat_service",
    "select_fallback_response",
    "build_recommendations",
]
