"""
Messaging routes.

    POST  /api/messages                    send (sender is the caller)
    GET   /api/messages/{conversationId}   thread, oldest first
    PATCH /api/messages/{id}/read          receiver marks read
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from triplink.database import get_db_session
from triplink.dependencies import get_current_user
from triplink.models import User
from triplink.schemas.common import ErrorResponse
from triplink.schemas.message import MessageCreate, MessageResponse
from triplink.services.messaging_service import messaging_service

router = APIRouter(prefix="/api/messages", tags=["Messages"])


@router.post(
    "",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid message", "model": ErrorResponse},
        404: {"description": "Receiver or context not found", "model": ErrorResponse},
    },
)
async def send_message(
    payload: MessageCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await messaging_service.send(
        db,
        sender_id=current_user.id,
        receiver_id=payload.receiver_id,
        body=payload.message,
        message_type=payload.message_type,
        context=payload.context,
    )


@router.get(
    "/{conversation_id}",
    response_model=List[MessageResponse],
    responses={403: {"description": "Not a participant", "model": ErrorResponse}},
)
async def list_conversation(
    conversation_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> List[MessageResponse]:
    return await messaging_service.list_conversation(db, conversation_id, current_user.id)


@router.patch(
    "/{message_id}/read",
    response_model=MessageResponse,
    responses={
        403: {"description": "Not the receiver", "model": ErrorResponse},
        404: {"description": "Message not found", "model": ErrorResponse},
    },
)
async def mark_read(
    message_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await messaging_service.mark_read(db, message_id, current_user.id)
