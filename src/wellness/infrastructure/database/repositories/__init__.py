"""
Repository layer for data access.
"""

from wellness.infrastructure.database.repositories.base import BaseRepository
from wellness.infrastructure.database.repositories.chat_session_repository import ChatSessionRepository
from wellness.infrastructure.database.repositories.message_repository import MessageRepository
from wellness.infrastructure.database.repositories.user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "ChatSessionRepository",
    "MessageRepository",
    "UserRepository",
]
