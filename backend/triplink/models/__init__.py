"""
ORM models. Importing this package registers every table with Base.metadata.
"""

from triplink.models.booking import BOOKING_TRANSITIONS, Booking
from triplink.models.enums import (
    BookingStatus,
    ContextType,
    MessageStatus,
    MessageType,
    Role,
)
from triplink.models.message import Message
from triplink.models.service import Service
from triplink.models.trip import Post, Trip
from triplink.models.user import User

__all__ = [
    "BOOKING_TRANSITIONS",
    "Booking",
    "BookingStatus",
    "ContextType",
    "Message",
    "MessageStatus",
    "MessageType",
    "Post",
    "Role",
    "Service",
    "Trip",
    "User",
]
