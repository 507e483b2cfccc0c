"""
Trips and trip posts.

A private trip is visible to its owner, its members and admins; only the
owner and members may post to it. Membership lives in a JSON column, so the
list query loads candidate trips and applies can_view_trip in Python.
"""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from triplink.exceptions import ForbiddenError
from triplink.models import Post, Trip, User
from triplink.permissions import can_post_to_trip, can_view_trip
from triplink.repository import ensure_exists, get_or_404, store_errors
from triplink.schemas.trip import PostCreate, PostResponse, TripCreate, TripResponse

logger = logging.getLogger(__name__)


class TripService:

    async def create_trip(self, db: AsyncSession, actor: User, payload: TripCreate) -> TripResponse:
        """Raises NotFoundError if any listed member does not exist."""
        members = [m for m in payload.members if m != actor.id]
        await ensure_exists(db, User, members, "user")

        trip = Trip(
            title=payload.title,
            description=payload.description,
            user_id=actor.id,
            destination=payload.destination,
            start_date=payload.start_date,
            end_date=payload.end_date,
            is_private=payload.is_private,
            members=members,
            itinerary=list(payload.itinerary),
        )
        with store_errors("create trip"):
            db.add(trip)
            await db.flush()

        logger.info("Trip %s created by user %s (private=%s)", trip.id, actor.id, trip.is_private)
        return TripResponse.model_validate(trip)

    async def list_trips(self, db: AsyncSession, actor: User) -> List[TripResponse]:
        stmt = select(Trip).order_by(Trip.created_at.desc(), Trip.id.desc())
        with store_errors("list trips"):
            result = await db.execute(stmt)
            trips = result.scalars().all()
        return [TripResponse.model_validate(t) for t in trips if can_view_trip(actor, t)]

    async def get_trip(self, db: AsyncSession, actor: User, trip_id: int) -> TripResponse:
        trip = await self._visible_trip(db, actor, trip_id)
        return TripResponse.model_validate(trip)

    async def add_post(
        self,
        db: AsyncSession,
        actor: User,
        trip_id: int,
        payload: PostCreate,
    ) -> PostResponse:
        trip = await self._visible_trip(db, actor, trip_id)
        if not can_post_to_trip(actor, trip):
            raise ForbiddenError(
                "Only the trip owner and members can post to this trip",
                context={"trip_id": trip_id},
            )

        post = Post(user_id=actor.id, trip_id=trip.id, content=payload.content, images=list(payload.images))
        with store_errors("add post"):
            db.add(post)
            await db.flush()

        logger.info("Post %s added to trip %s by user %s", post.id, trip.id, actor.id)
        return PostResponse.model_validate(post)

    async def list_posts(self, db: AsyncSession, actor: User, trip_id: int) -> List[PostResponse]:
        """Posts on a trip, oldest first."""
        await self._visible_trip(db, actor, trip_id)
        stmt = (
            select(Post)
            .where(Post.trip_id == trip_id)
            .order_by(Post.created_at.asc(), Post.id.asc())
        )
        with store_errors("list posts"):
            result = await db.execute(stmt)
            posts = result.scalars().all()
        return [PostResponse.model_validate(p) for p in posts]

    async def _visible_trip(self, db: AsyncSession, actor: User, trip_id: int) -> Trip:
        trip = await get_or_404(db, Trip, trip_id, "trip")
        if not can_view_trip(actor, trip):
            raise ForbiddenError("This trip is private", context={"trip_id": trip_id})
        return trip


trip_service = TripService()
