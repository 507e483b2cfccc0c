"""
TripLink Backend — Messaging Service
======================================

What:  Direct messages between two users, grouped into conversations.
Who:   routes/messages.py, and booking_service for the provider notification
       sent after a booking is created.

Conversation ids:
    Derived, never stored separately: the two participant ids in ascending
    order, plus the context when the message has one.

        conversation_key(7, 3)                           → "3:7"
        conversation_key(7, 3, MessageContext(BOOKING, 12)) → "3:7:booking:12"

    Either participant computes the same key, and messages about different
    bookings between the same two users land in different threads.
"""

import logging
from typing import Dict, List, Optional, Type, Union

from sqlalchemy import exists, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from triplink.database import Base
from triplink.exceptions import ForbiddenError, ValidationError
from triplink.models import Booking, ContextType, Message, MessageStatus, MessageType, Service, Trip, User
from triplink.permissions import can_mark_read
from triplink.repository import conditional_update, ensure_exists, get_or_404, store_errors
from triplink.schemas.message import MessageContext, MessageResponse

logger = logging.getLogger(__name__)

CONTEXT_MODELS: Dict[ContextType, Type[Base]] = {
    ContextType.TRIP: Trip,
    ContextType.BOOKING: Booking,
    ContextType.SERVICE: Service,
}


def conversation_key(
    user_a: int,
    user_b: int,
    context: Optional[MessageContext] = None,
) -> str:
    low, high = sorted((user_a, user_b))
    key = f"{low}:{high}"
    if context is not None:
        key = f"{key}:{context.kind.value}:{context.id}"
    return key


class MessagingService:
    """
    Message operations.

    Error Handling:
        ValidationError — empty body, unknown type, message to self
        NotFoundError   — sender, receiver, or context entity missing
        ForbiddenError  — acting user is not a participant / not the receiver
    """

    async def send(
        self,
        db: AsyncSession,
        sender_id: int,
        receiver_id: int,
        body: str,
        message_type: Union[MessageType, str],
        context: Optional[MessageContext] = None,
    ) -> MessageResponse:
        """
        Store a new unread message.

        Args:
            db: Async database session
            sender_id: Acting user
            receiver_id: Recipient user id
            body: Message text, must not be blank
            message_type: One of MessageType
            context: Optional entity the message is about

        Returns:
            MessageResponse with the derived conversationId
        """
        if sender_id == receiver_id:
            raise ValidationError("You cannot send a message to yourself", field="receiverId")
        if not body or not body.strip():
            raise ValidationError("Message must not be blank", field="message")
        try:
            kind = MessageType(message_type)
        except ValueError as e:
            raise ValidationError(
                f"Unknown message type: {message_type}", field="messageType"
            ) from e

        await ensure_exists(db, User, [sender_id, receiver_id], "user")
        if context is not None:
            await ensure_exists(db, CONTEXT_MODELS[context.kind], [context.id], context.kind.value)

        message = Message(
            sender_id=sender_id,
            receiver_id=receiver_id,
            conversation_id=conversation_key(sender_id, receiver_id, context),
            message=body,
            status=MessageStatus.UNREAD.value,
            message_type=kind.value,
            context_id=context.id if context else None,
            context_type=context.kind.value if context else None,
        )
        with store_errors("send message"):
            db.add(message)
            await db.flush()

        logger.info(
            "Message %s sent in conversation %s (%s)",
            message.id, message.conversation_id, message.message_type,
        )
        return MessageResponse.model_validate(message)

    async def mark_read(
        self,
        db: AsyncSession,
        message_id: int,
        acting_user_id: int,
    ) -> MessageResponse:
        """
        Mark a message read. Only the receiver may do this; marking an
        already-read message again is a no-op.
        """
        message = await get_or_404(db, Message, message_id, "message")
        if not can_mark_read(acting_user_id, message):
            raise ForbiddenError(
                "Only the receiver can mark a message as read",
                context={"message_id": message_id},
            )

        await conditional_update(
            db,
            Message,
            message_id,
            Message.status,
            [MessageStatus.UNREAD.value],
            {"status": MessageStatus.READ.value},
        )
        message = await get_or_404(db, Message, message_id, "message", refresh=True)
        return MessageResponse.model_validate(message)

    async def list_conversation(
        self,
        db: AsyncSession,
        conversation_id: str,
        acting_user_id: int,
    ) -> List[MessageResponse]:
        """
        Return a conversation's messages, oldest first.

        Raises:
            ForbiddenError: the acting user has sent or received none of them
                            (this includes conversations with no messages)
        """
        participant = exists().where(
            Message.conversation_id == conversation_id,
            or_(Message.sender_id == acting_user_id, Message.receiver_id == acting_user_id),
        )
        with store_errors("list conversation"):
            allowed = (await db.execute(select(participant))).scalar()
        if not allowed:
            raise ForbiddenError(
                "You are not a participant in this conversation",
                context={"conversation_id": conversation_id},
            )

        stmt = (
            select(Message)
            .where(Message.conversation_id == conversation_id)
            .order_by(Message.created_at.asc(), Message.id.asc())
        )
        with store_errors("list conversation"):
            result = await db.execute(stmt)
            messages = result.scalars().all()
        return [MessageResponse.model_validate(m) for m in messages]


messaging_service = MessagingService()
