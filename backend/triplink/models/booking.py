"""
TripLink Backend — Booking SQLAlchemy Model
=============================================

What:  A reservation by a user against a Service.

Lifecycle (status column):
    pending ──confirm──▶ confirmed ──complete──▶ completed
       │                     │
       └──cancel──▶ cancelled ◀──cancel──┘

    Bookings are never deleted. Every transition is written as a conditional
    UPDATE keyed on the expected prior status (see services/booking_service.py),
    so two writers racing on one row cannot both succeed.

total_price is computed once at creation (price × units) and no transition
rewrites it.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Optional, Tuple

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Numeric, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from triplink.database import Base
from triplink.models.enums import BookingStatus

# Target status → statuses it may be reached from
BOOKING_TRANSITIONS: Dict[BookingStatus, Tuple[BookingStatus, ...]] = {
    BookingStatus.CONFIRMED: (BookingStatus.PENDING,),
    BookingStatus.CANCELLED: (BookingStatus.PENDING, BookingStatus.CONFIRMED),
    BookingStatus.COMPLETED: (BookingStatus.CONFIRMED,),
}


class Booking(Base):
    __tablename__ = "bookings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    service_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("services.id"), nullable=False
    )

    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=BookingStatus.PENDING.value,
        server_default=text("'pending'"),
    )
    total_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_bookings_user_id", "user_id"),
        Index("idx_bookings_service_id", "service_id"),
    )

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, status='{self.status}', total_price={self.total_price})>"
