"""
Trip and trip-post routes. All require authentication.
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from triplink.database import get_db_session
from triplink.dependencies import get_current_user
from triplink.models import User
from triplink.schemas.common import ErrorResponse
from triplink.schemas.trip import PostCreate, PostResponse, TripCreate, TripResponse
from triplink.services.trip_service import trip_service

router = APIRouter(prefix="/api/trips", tags=["Trips"])

_VISIBILITY_RESPONSES = {
    403: {"description": "Private trip", "model": ErrorResponse},
    404: {"description": "Trip not found", "model": ErrorResponse},
}


@router.post("", response_model=TripResponse, status_code=status.HTTP_201_CREATED)
async def create_trip(
    payload: TripCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> TripResponse:
    return await trip_service.create_trip(db, current_user, payload)


@router.get("", response_model=List[TripResponse])
async def list_trips(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> List[TripResponse]:
    return await trip_service.list_trips(db, current_user)


@router.get("/{trip_id}", response_model=TripResponse, responses=_VISIBILITY_RESPONSES)
async def get_trip(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> TripResponse:
    return await trip_service.get_trip(db, current_user, trip_id)


@router.post(
    "/{trip_id}/posts",
    response_model=PostResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_VISIBILITY_RESPONSES,
)
async def add_post(
    trip_id: int,
    payload: PostCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> PostResponse:
    return await trip_service.add_post(db, current_user, trip_id, payload)


@router.get("/{trip_id}/posts", response_model=List[PostResponse], responses=_VISIBILITY_RESPONSES)
async def list_posts(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> List[PostResponse]:
    return await trip_service.list_posts(db, current_user, trip_id)
