"""
Chat Endpoints

Sessions, messaging, history, crisis checks, export and stats.
Every session lookup is filtered by the authenticated owner; other
users' sessions answer 404.
"""

import json
import time
from typing import Annotated, Any, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel, Field, StringConstraints
from sqlalchemy.ext.asyncio import AsyncSession

from wellness.api.dependencies import get_current_user
from wellness.infrastructure.database import get_async_session
from wellness.infrastructure.database.models import UserModel
from wellness.infrastructure.metrics import CHAT_MESSAGES_TOTAL
from wellness.services.chat import ChatService, get_chat_service

router = APIRouter()

# Text is trimmed before the length check
MessageText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=2000)]
InitialMessageText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=1000)]


# Request/Response Models

class CreateSessionRequest(BaseModel):
    """Request to create a new chat session."""

    title: Optional[str] = Field(default=None, max_length=100)
    initial_message: Optional[InitialMessageText] = None


class SendMessageRequest(BaseModel):
    """Request to send a message."""

    message: MessageText = Field(..., description="User message")
    session_id: Optional[UUID] = Field(default=None, description="Omit to start a new session")

    class Config:
        json_schema_extra = {
            "example": {
                "message": "I've been feeling really stressed about exams",
                "session_id": None,
            }
        }


class CrisisCheckRequest(BaseModel):
    message: MessageText


class AIResponse(BaseModel):
    id: str
    content: str
    sender: str
    source: str
    sentiment: dict
    crisis_detected: bool
    crisis_level: str
    crisis_triggers: list[str]
    recommendations: list[dict]
    emergency_resources: Optional[dict] = None
    timestamp: str
    processing_time_ms: int


class ChatMessageResponse(BaseModel):
    """Reply to one user message."""

    session_id: str
    user_message: dict
    ai_response: AIResponse


class CreateSessionResponse(BaseModel):
    session: dict
    initial_response: Optional[ChatMessageResponse] = None


class Pagination(BaseModel):
    page: int
    limit: int
    total_pages: int
    total_count: int
    has_next_page: bool
    has_prev_page: bool


class SessionListResponse(BaseModel):
    sessions: list[dict]
    pagination: Pagination


class MessageListResponse(BaseModel):
    session: dict
    messages: list[dict]
    pagination: Pagination


class CrisisCheckResponse(BaseModel):
    crisis: dict
    sentiment: dict
    recommendations: list[dict]
    emergency_resources: Optional[dict] = None


class StatsResponse(BaseModel):
    user: dict[str, int]
    service: dict[str, Any]


def paginate(page: int, limit: int, total: int) -> Pagination:
    total_pages = (total + limit - 1) // limit
    return Pagination(
        page=page,
        limit=limit,
        total_pages=total_pages,
        total_count=total,
        has_next_page=page < total_pages,
        has_prev_page=page > 1,
    )


@router.post(
    "/sessions",
    response_model=CreateSessionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a chat session",
)
async def create_session(
    request: CreateSessionRequest,
    user: UserModel = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
    chat: ChatService = Depends(get_chat_service),
) -> CreateSessionResponse:
    """
    Create a session, optionally answering a first message in it.
    """
    session = await chat.create_session(db, user, title=request.title)

    initial_response = None
    if request.initial_message:
        CHAT_MESSAGES_TOTAL.labels(channel="rest").inc()
        result = await chat.process_message(db, user, request.initial_message, session.id)
        initial_response = ChatMessageResponse(**result.to_dict())

    return CreateSessionResponse(session=session.to_dict(), initial_response=initial_response)


@router.post(
    "/message",
    response_model=ChatMessageResponse,
    summary="Send a message and receive the companion's reply",
)
async def send_message(
    request: SendMessageRequest,
    user: UserModel = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
    chat: ChatService = Depends(get_chat_service),
) -> ChatMessageResponse:
    """
    Send a message in a session (a new one is created when none is given).

    The message is checked for crisis language and sentiment before a
    reply is generated. Crisis replies include emergency resources.
    """
    CHAT_MESSAGES_TOTAL.labels(channel="rest").inc()
    result = await chat.process_message(db, user, request.message, request.session_id)
    return ChatMessageResponse(**result.to_dict())


@router.get("/sessions", response_model=SessionListResponse, summary="List chat sessions")
async def list_sessions(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=50),
    user: UserModel = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
    chat: ChatService = Depends(get_chat_service),
) -> SessionListResponse:
    sessions, total = await chat.list_sessions(db, user, page=page, limit=limit)
    return SessionListResponse(sessions=sessions, pagination=paginate(page, limit, total))


@router.get(
    "/sessions/{session_id}/messages",
    response_model=MessageListResponse,
    summary="Messages of a session",
)
async def get_session_messages(
    session_id: UUID,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=50, ge=1, le=100),
    user: UserModel = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
    chat: ChatService = Depends(get_chat_service),
) -> MessageListResponse:
    """Chronological message history of a session owned by the caller."""
    session, messages, total = await chat.get_messages(
        db, user, session_id, page=page, limit=limit
    )
    return MessageListResponse(
        session=session.to_dict(),
        messages=[m.to_dict() for m in messages],
        pagination=paginate(page, limit, total),
    )


@router.delete(
    "/sessions/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a session and its messages",
)
async def delete_session(
    session_id: UUID,
    user: UserModel = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
    chat: ChatService = Depends(get_chat_service),
) -> Response:
    await chat.delete_session(db, user, session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/crisis-check", response_model=CrisisCheckResponse, summary="Analyze a message without storing it")
async def crisis_check(
    request: CrisisCheckRequest,
    user: UserModel = Depends(get_current_user),
    chat: ChatService = Depends(get_chat_service),
) -> CrisisCheckResponse:
    return CrisisCheckResponse(**chat.analyze_only(user, request.message))


@router.get("/export", summary="Download all chat data as JSON")
async def export_chats(
    user: UserModel = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
    chat: ChatService = Depends(get_chat_service),
) -> Response:
    data = await chat.export_user_data(db, user)
    filename = f"wellness-chat-export-{str(user.id)[:8]}-{int(time.time())}.json"
    return Response(
        content=json.dumps(data, indent=2),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/stats", response_model=StatsResponse, summary="Chat statistics")
async def chat_stats(
    user: UserModel = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
    chat: ChatService = Depends(get_chat_service),
) -> StatsResponse:
    return StatsResponse(**await chat.user_stats(db, user))
