"""
TripLink Backend — Booking Service
====================================

What:  Creates bookings, prices them, and drives the status lifecycle.
Who:   routes/bookings.py.

Creation flow:
    1. Load the service (404 if missing)
    2. Check the requested range against the service's availability windows
    3. total_price = price × billable units, rounded to cents
    4. INSERT as 'pending' and COMMIT
    5. Best effort: tell the provider through a booking_support message.
       If that fails it is rolled back and logged; the booking stands.

Transition flow (confirm / cancel / complete):
    1. Load booking and service (404), check the actor's capability (403)
    2. UPDATE bookings SET status = :target
         WHERE id = :id AND status IN (:allowed_from)
    3. Zero rows updated → ConflictError naming the status actually found.
       Two concurrent confirms of one pending booking: exactly one wins.

Pricing:
    With an end date, units are whole days between start and end, rounded
    up, minimum one. Without one, units = quantity (default 1).

        price 49.99, 2024-06-01 → 2024-06-04   → 3 units → 149.97
        price 120.00, no end date, quantity 2  → 240.00
"""

import logging
import math
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from triplink.exceptions import ConflictError, ForbiddenError, TripLinkError, ValidationError
from triplink.models import (
    BOOKING_TRANSITIONS,
    Booking,
    BookingStatus,
    ContextType,
    MessageType,
    Service,
    User,
)
from triplink.permissions import BOOKING_TRANSITION_CHECKS, can_view_booking, is_admin
from triplink.repository import conditional_update, get_or_404, store_errors
from triplink.schemas.booking import BookingCreate, BookingResponse
from triplink.schemas.message import MessageContext
from triplink.schemas.service import AvailabilityWindow
from triplink.services.messaging_service import messaging_service

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")
SECONDS_PER_DAY = 86400

_TRANSITION_VERBS = {
    BookingStatus.CONFIRMED: "confirmed",
    BookingStatus.CANCELLED: "cancelled",
    BookingStatus.COMPLETED: "completed",
}


def billable_units(start: datetime, end: Optional[datetime], quantity: int = 1) -> int:
    if end is None:
        return quantity
    days = (end - start).total_seconds() / SECONDS_PER_DAY
    return max(1, math.ceil(days))


def compute_total(price: Decimal, units: int) -> Decimal:
    return (Decimal(price) * units).quantize(CENTS, rounding=ROUND_HALF_UP)


def is_available(service: Service, start: datetime, end: Optional[datetime]) -> bool:
    """A service with no windows is always available."""
    if not service.availability:
        return True
    windows = [AvailabilityWindow.model_validate(w) for w in service.availability]
    return any(w.covers(start, end or start) for w in windows)


class BookingService:

    async def create_booking(
        self,
        db: AsyncSession,
        actor: User,
        payload: BookingCreate,
    ) -> BookingResponse:
        """
        Create a pending booking for the acting user.

        Raises:
            NotFoundError: the service does not exist
            ValidationError: the range falls outside every availability window
        """
        service = await get_or_404(db, Service, payload.service_id, "service")

        if not is_available(service, payload.start_date, payload.end_date):
            raise ValidationError(
                "Service is not available for the requested dates",
                field="startDate",
                context={"service_id": service.id},
            )

        units = billable_units(payload.start_date, payload.end_date, payload.quantity)
        booking = Booking(
            user_id=actor.id,
            service_id=service.id,
            start_date=payload.start_date,
            end_date=payload.end_date,
            status=BookingStatus.PENDING.value,
            total_price=compute_total(service.price, units),
            notes=payload.notes,
        )
        with store_errors("create booking"):
            db.add(booking)
            await db.flush()
            await db.commit()

        logger.info(
            "Booking %s created: user=%s service=%s units=%s total=%s",
            booking.id, actor.id, service.id, units, booking.total_price,
        )
        response = BookingResponse.model_validate(booking)

        if service.provider_id != actor.id:
            await self._notify_provider(db, actor, service, booking.id)
        return response

    async def _notify_provider(
        self,
        db: AsyncSession,
        actor: User,
        service: Service,
        booking_id: int,
    ) -> None:
        try:
            await messaging_service.send(
                db,
                sender_id=actor.id,
                receiver_id=service.provider_id,
                body=f"New booking request #{booking_id} for '{service.title}'.",
                message_type=MessageType.BOOKING_SUPPORT,
                context=MessageContext(kind=ContextType.BOOKING, id=booking_id),
            )
            await db.commit()
        except TripLinkError as e:
            await db.rollback()
            logger.warning(
                "Booking %s created but provider notification failed: %s",
                booking_id, e.message,
            )
        except Exception as e:
            await db.rollback()
            logger.warning(
                "Booking %s created but provider notification failed unexpectedly: %s",
                booking_id, str(e),
                exc_info=True,
            )

    async def confirm(self, db: AsyncSession, actor: User, booking_id: int) -> BookingResponse:
        return await self._transition(db, actor, booking_id, BookingStatus.CONFIRMED)

    async def cancel(self, db: AsyncSession, actor: User, booking_id: int) -> BookingResponse:
        return await self._transition(db, actor, booking_id, BookingStatus.CANCELLED)

    async def complete(self, db: AsyncSession, actor: User, booking_id: int) -> BookingResponse:
        return await self._transition(db, actor, booking_id, BookingStatus.COMPLETED)

    async def _transition(
        self,
        db: AsyncSession,
        actor: User,
        booking_id: int,
        target: BookingStatus,
    ) -> BookingResponse:
        booking = await get_or_404(db, Booking, booking_id, "booking")
        service = await get_or_404(db, Service, booking.service_id, "service")

        verb = _TRANSITION_VERBS[target]
        if not BOOKING_TRANSITION_CHECKS[target](actor, booking, service):
            raise ForbiddenError(
                f"You are not allowed to mark this booking {verb}",
                context={"booking_id": booking_id},
            )

        allowed_from = [status.value for status in BOOKING_TRANSITIONS[target]]
        updated = await conditional_update(
            db, Booking, booking_id, Booking.status, allowed_from, {"status": target.value}
        )
        current = await get_or_404(db, Booking, booking_id, "booking", refresh=True)

        if not updated:
            raise ConflictError(
                f"Booking {booking_id} cannot be {verb} while it is {current.status}",
                context={"booking_id": booking_id, "current_status": current.status},
            )

        logger.info("Booking %s %s by user %s", booking_id, verb, actor.id)
        return BookingResponse.model_validate(current)

    async def list_bookings(self, db: AsyncSession, actor: User) -> List[BookingResponse]:
        """
        Bookings visible to the actor, newest first: those they made plus
        those on services they provide. Admins see everything.
        """
        stmt = select(Booking)
        if not is_admin(actor):
            provided = select(Service.id).where(Service.provider_id == actor.id)
            stmt = stmt.where(
                or_(Booking.user_id == actor.id, Booking.service_id.in_(provided))
            )
        stmt = stmt.order_by(Booking.created_at.desc(), Booking.id.desc())

        with store_errors("list bookings"):
            result = await db.execute(stmt)
            bookings = result.scalars().all()
        return [BookingResponse.model_validate(b) for b in bookings]

    async def get_booking(self, db: AsyncSession, actor: User, booking_id: int) -> BookingResponse:
        booking = await get_or_404(db, Booking, booking_id, "booking")
        service = await get_or_404(db, Service, booking.service_id, "service")
        if not can_view_booking(actor, booking, service):
            raise ForbiddenError(
                "You are not allowed to view this booking",
                context={"booking_id": booking_id},
            )
        return BookingResponse.model_validate(booking)


booking_service = BookingService()
