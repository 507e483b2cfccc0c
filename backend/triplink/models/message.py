"""
TripLink Backend — Message SQLAlchemy Model
=============================================

What:  A direct message between two users, optionally tied to a Trip,
       Booking or Service through the (context_type, context_id) column pair.

The pair is written only from a MessageContext value (schemas/message.py),
so either both columns are set or neither is.

Query Patterns:
    - Conversation thread: WHERE conversation_id = :cid ORDER BY created_at, id
      → idx_messages_conversation
    - Unread inbox: WHERE receiver_id = :uid AND status = 'unread'
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from triplink.database import Base
from triplink.models.enums import MessageStatus


class Message(Base):
    __tablename__ = "messages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    sender_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    receiver_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False
    )
    conversation_id: Mapped[str] = mapped_column(String(100), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        default=MessageStatus.UNREAD.value,
        server_default=text("'unread'"),
    )
    message_type: Mapped[str] = mapped_column(String(30), nullable=False)
    context_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    context_type: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_messages_conversation", "conversation_id", "created_at"),
        Index("idx_messages_receiver_status", "receiver_id", "status"),
    )

    def __repr__(self) -> str:
        return (
            f"<Message(id={self.id}, conversation='{self.conversation_id}', "
            f"status='{self.status}')>"
        )
