"""
Enumerations shared by the ORM models and the Pydantic schemas.

Stored as plain strings in the database; the enums are the single place the
allowed values are spelled out.
"""

from enum import Enum


class Role(str, Enum):
    USER = "user"
    EXPERT = "expert"
    PROVIDER = "provider"
    ADMIN = "admin"


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class MessageStatus(str, Enum):
    READ = "read"
    UNREAD = "unread"


class MessageType(str, Enum):
    EXPERT_INQUIRY = "expert_inquiry"
    TRIP_DISCUSSION = "trip_discussion"
    BOOKING_SUPPORT = "booking_support"
    ADMIN_NOTICE = "admin_notice"


class ContextType(str, Enum):
    TRIP = "trip"
    BOOKING = "booking"
    SERVICE = "service"
