"""
Chat WebSocket Router

Real-time chat channel. Each `chat_message` goes through the same
pipeline as `POST /api/v1/chat/message` and the reply carries the
same payload.

Protocol (JSON frames):
    client -> {"type": "chat_message", "message": str, "session_id"?: str}
    client -> {"type": "typing_start"} / {"type": "typing_stop"}
    server -> {"type": "connected", ...}
    server -> {"type": "chat_response", "session_id", "user_message", "ai_response"}
    server -> {"type": "chat_error", "error", "code"}
    server -> {"type": "user_typing"} / {"type": "user_stopped_typing"}
      (sent to the user's other open connections)

SECURITY: The access token is verified before any frame is handled;
invalid tokens close the socket with code 1008.
"""

import json
from typing import Optional
from uuid import UUID, uuid4

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status

from wellness.api.dependencies import resolve_user
from wellness.config.logging_config import get_logger, short_id
from wellness.domain.clock import utc_now
from wellness.domain.errors import AuthenticationError, ValidationFailedError, WellnessError
from wellness.infrastructure.database import get_db_manager
from wellness.infrastructure.database.repositories import UserRepository
from wellness.infrastructure.metrics import CHAT_MESSAGES_TOTAL, WEBSOCKET_CONNECTIONS
from wellness.services.chat import get_chat_service

logger = get_logger(__name__)

router = APIRouter(prefix="/ws", tags=["websocket"])

MAX_MESSAGE_LENGTH = 2000


class ChatConnectionManager:
    """
    Registry of open chat sockets, grouped by user.

    A user may hold several connections (tabs, devices); typing
    notifications fan out to the others.
    """

    def __init__(self) -> None:
        self._connections: dict[str, dict[str, "ChatConnection"]] = {}

    def add(self, connection: "ChatConnection") -> None:
        self._connections.setdefault(connection.user_key, {})[connection.connection_id] = connection
        WEBSOCKET_CONNECTIONS.inc()
        logger.info(
            "WebSocket connected",
            user_id=short_id(connection.user_id),
            connections=len(self._connections[connection.user_key]),
        )

    def remove(self, connection: "ChatConnection") -> None:
        user_connections = self._connections.get(connection.user_key)
        if not user_connections or connection.connection_id not in user_connections:
            return

        del user_connections[connection.connection_id]
        if not user_connections:
            del self._connections[connection.user_key]
        WEBSOCKET_CONNECTIONS.dec()
        logger.info("WebSocket disconnected", user_id=short_id(connection.user_id))

    def connections_for(self, user_id: UUID) -> list["ChatConnection"]:
        return list(self._connections.get(str(user_id), {}).values())

    async def broadcast_to_others(self, sender: "ChatConnection", payload: dict) -> None:
        for connection in self.connections_for(sender.user_id):
            if connection.connection_id != sender.connection_id:
                await connection.websocket.send_json(payload)

    @property
    def active_count(self) -> int:
        return sum(len(c) for c in self._connections.values())


class ChatConnection:
    """One authenticated socket."""

    def __init__(
        self,
        websocket: WebSocket,
        user_id: UUID,
        manager: ChatConnectionManager,
    ) -> None:
        self.connection_id = str(uuid4())
        self.websocket = websocket
        self.user_id = user_id
        self.manager = manager
        self.connected_at = utc_now()

    @property
    def user_key(self) -> str:
        return str(self.user_id)

    async def handle_message(self, data: dict) -> None:
        """
        Route an incoming frame by its `type`.
        """
        message_type = data.get("type")

        if message_type == "chat_message":
            await self._handle_chat_message(data)
        elif message_type == "typing_start":
            await self.manager.broadcast_to_others(
                self, {"type": "user_typing", "timestamp": utc_now().isoformat()}
            )
        elif message_type == "typing_stop":
            await self.manager.broadcast_to_others(
                self, {"type": "user_stopped_typing", "timestamp": utc_now().isoformat()}
            )
        else:
            logger.warning("Unknown WebSocket frame type", frame_type=message_type)
            await self.send_error("Unknown message type", "UNKNOWN_MESSAGE_TYPE")

    async def _handle_chat_message(self, data: dict) -> None:
        try:
            text, session_id = self._parse_chat_message(data)
            CHAT_MESSAGES_TOTAL.labels(channel="websocket").inc()

            async with get_db_manager().session() as db:
                user = await UserRepository(db).get_active(self.user_id)
                if user is None:
                    raise AuthenticationError("User not found or inactive")
                result = await get_chat_service().process_message(db, user, text, session_id)
                payload = {"type": "chat_response", **result.to_dict()}
        except WellnessError as e:
            await self.send_error(e.message, e.code)
            return
        except Exception:
            logger.exception("WebSocket chat message failed", user_id=short_id(self.user_id))
            await self.send_error("Failed to process message", "CHAT_PROCESSING_ERROR")
            return

        await self.websocket.send_json(payload)

    @staticmethod
    def _parse_chat_message(data: dict) -> tuple[str, Optional[UUID]]:
        """
        Raises:
            ValidationFailedError: Missing/oversized text or malformed session id
        """
        text = data.get("message")
        if isinstance(text, str):
            text = text.strip()
        if not isinstance(text, str) or not text or len(text) > MAX_MESSAGE_LENGTH:
            raise ValidationFailedError(f"Message must be 1-{MAX_MESSAGE_LENGTH} characters")

        raw_session_id = data.get("session_id")
        if raw_session_id in (None, ""):
            return text, None
        try:
            return text, UUID(str(raw_session_id))
        except ValueError:
            raise ValidationFailedError("Invalid session_id")

    async def send_error(self, message: str, code: str) -> None:
        await self.websocket.send_json({
            "type": "chat_error",
            "error": message,
            "code": code,
            "timestamp": utc_now().isoformat(),
        })


# Global connection registry
connection_manager = ChatConnectionManager()


@router.websocket("/chat")
async def chat_websocket(websocket: WebSocket, token: Optional[str] = None) -> None:
    """
    WebSocket endpoint for live chat.

    Authenticates with `?token=<access token>`.
    """
    await websocket.accept()

    try:
        if not token:
            raise AuthenticationError("Access token required")
        async with get_db_manager().session() as db:
            user = await resolve_user(db, token)
            user_id = user.id
    except AuthenticationError as e:
        logger.info("WebSocket authentication rejected", reason=e.message)
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason=e.message)
        return

    connection = ChatConnection(websocket, user_id, connection_manager)
    connection_manager.add(connection)

    try:
        await websocket.send_json({
            "type": "connected",
            "connection_id": connection.connection_id,
            "user_id": str(user_id),
            "timestamp": connection.connected_at.isoformat(),
        })

        # Message loop
        while True:
            raw = await websocket.receive_text()
            try:
                data = json.loads(raw)
            except ValueError:
                await connection.send_error("Frames must be valid JSON", "VALIDATION_ERROR")
                continue
            if not isinstance(data, dict):
                await connection.send_error("Frames must be JSON objects", "VALIDATION_ERROR")
                continue
            await connection.handle_message(data)

    except WebSocketDisconnect as e:
        logger.debug("Client disconnected", code=e.code, connection_id=connection.connection_id)
    except Exception:
        logger.exception("WebSocket error", connection_id=connection.connection_id)
    finally:
        connection_manager.remove(connection)
