"""
TripLink Backend — Message Schemas
====================================

What:  Request/response models for direct messages, plus MessageContext.

Context modelling:
    On the wire a message carries a flat (contextId, contextType) pair. At this
    boundary the pair is collapsed into one MessageContext value or None, and
    the messaging service only ever receives that value. A context with a kind
    but no id (or the reverse) cannot be constructed.

        {"contextType": "booking", "contextId": 12}  → MessageContext(kind=BOOKING, id=12)
        {}                                           → None
        {"contextType": "booking"}                   → 400 validation_error
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from triplink.models.enums import ContextType, MessageStatus, MessageType
from triplink.schemas.common import CamelModel


class MessageContext(BaseModel):
    """A message's reference to a Trip, Booking or Service."""

    model_config = ConfigDict(frozen=True)

    kind: ContextType
    id: int = Field(gt=0)


class MessageCreate(CamelModel):
    receiver_id: int = Field(gt=0)
    message: str = Field(min_length=1, max_length=5000)
    message_type: MessageType
    context_id: Optional[int] = Field(default=None, gt=0)
    context_type: Optional[ContextType] = None

    @field_validator("message")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Message must not be blank")
        return v

    @model_validator(mode="after")
    def context_pair(self) -> "MessageCreate":
        if (self.context_id is None) != (self.context_type is None):
            raise ValueError("contextId and contextType must be provided together")
        return self

    @property
    def context(self) -> Optional[MessageContext]:
        if self.context_type is None or self.context_id is None:
            return None
        return MessageContext(kind=self.context_type, id=self.context_id)


class MessageResponse(CamelModel):
    id: int
    sender_id: int
    receiver_id: int
    conversation_id: str
    message: str
    status: MessageStatus
    message_type: MessageType
    context_id: Optional[int] = None
    context_type: Optional[ContextType] = None
    created_at: Optional[datetime] = None
