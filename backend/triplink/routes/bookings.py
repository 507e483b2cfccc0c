"""
TripLink Backend — Booking Route Handlers
===========================================

What:  Create, list and fetch bookings; PATCH endpoints for each transition.
Who:   Authenticated users. Confirm/complete are for the service's provider;
       cancel is for the booker or the provider. Admins may do all three.

Status codes for transitions:
    200 — transition applied
    403 — actor lacks the capability
    404 — no such booking
    409 — booking is not in a status the transition starts from
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from triplink.database import get_db_session
from triplink.dependencies import get_current_user
from triplink.models import User
from triplink.schemas.booking import BookingCreate, BookingResponse
from triplink.schemas.common import ErrorResponse
from triplink.services.booking_service import booking_service

router = APIRouter(prefix="/api/bookings", tags=["Bookings"])

_TRANSITION_RESPONSES = {
    403: {"description": "Not allowed", "model": ErrorResponse},
    404: {"description": "Booking not found", "model": ErrorResponse},
    409: {"description": "Invalid status transition", "model": ErrorResponse},
}


@router.post(
    "",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid input or unavailable dates", "model": ErrorResponse},
        404: {"description": "Service not found", "model": ErrorResponse},
    },
    summary="Book a service",
)
async def create_booking(
    payload: BookingCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> BookingResponse:
    return await booking_service.create_booking(db, current_user, payload)


@router.get("", response_model=List[BookingResponse], summary="Bookings visible to the caller")
async def list_bookings(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> List[BookingResponse]:
    return await booking_service.list_bookings(db, current_user)


@router.get(
    "/{booking_id}",
    response_model=BookingResponse,
    responses={
        403: {"description": "Not allowed", "model": ErrorResponse},
        404: {"description": "Booking not found", "model": ErrorResponse},
    },
)
async def get_booking(
    booking_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> BookingResponse:
    return await booking_service.get_booking(db, current_user, booking_id)


@router.patch("/{booking_id}/confirm", response_model=BookingResponse, responses=_TRANSITION_RESPONSES)
async def confirm_booking(
    booking_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> BookingResponse:
    return await booking_service.confirm(db, current_user, booking_id)


@router.patch("/{booking_id}/cancel", response_model=BookingResponse, responses=_TRANSITION_RESPONSES)
async def cancel_booking(
    booking_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> BookingResponse:
    return await booking_service.cancel(db, current_user, booking_id)


@router.patch("/{booking_id}/complete", response_model=BookingResponse, responses=_TRANSITION_RESPONSES)
async def complete_booking(
    booking_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> BookingResponse:
    return await booking_service.complete(db, current_user, booking_id)
