"""
Service catalog: listing, creating and fetching bookable services.
"""

import logging
from typing import AsyncIterator, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from triplink.exceptions import ForbiddenError
from triplink.models import Service, User
from triplink.permissions import can_create_service
from triplink.repository import get_or_404, iterate, store_errors
from triplink.schemas.service import ServiceCreate, ServiceFilter, ServiceResponse

logger = logging.getLogger(__name__)


class CatalogService:

    async def list_services(
        self,
        db: AsyncSession,
        filters: Optional[ServiceFilter] = None,
    ) -> AsyncIterator[ServiceResponse]:
        """
        Yield services matching the filters, newest first.

        The query runs when iteration starts; calling again re-runs it.
        An empty catalog simply yields nothing.
        """
        stmt = select(Service)
        if filters is not None:
            if filters.category:
                stmt = stmt.where(func.lower(Service.category) == filters.category.strip().lower())
            if filters.location:
                stmt = stmt.where(Service.location.ilike(f"%{filters.location.strip()}%"))
            if filters.provider_id is not None:
                stmt = stmt.where(Service.provider_id == filters.provider_id)
            if filters.min_price is not None:
                stmt = stmt.where(Service.price >= filters.min_price)
            if filters.max_price is not None:
                stmt = stmt.where(Service.price <= filters.max_price)
        stmt = stmt.order_by(Service.created_at.desc(), Service.id.desc())

        async for service in iterate(db, stmt):
            yield ServiceResponse.model_validate(service)

    async def create_service(
        self,
        db: AsyncSession,
        actor: User,
        payload: ServiceCreate,
    ) -> ServiceResponse:
        """
        Create a listing owned by the acting provider.

        Raises:
            ForbiddenError: actor is not a provider or admin
        """
        if not can_create_service(actor):
            raise ForbiddenError(
                "Only providers and admins can create services",
                context={"role": actor.role},
            )

        service = Service(
            title=payload.title,
            description=payload.description,
            price=payload.price,
            location=payload.location,
            provider_id=actor.id,
            category=payload.category,
            images=list(payload.images),
            availability=[
                window.model_dump(mode="json", by_alias=True) for window in payload.availability
            ],
        )
        with store_errors("create service"):
            db.add(service)
            await db.flush()

        logger.info("Service %s created by provider %s", service.id, actor.id)
        return ServiceResponse.model_validate(service)

    async def get_service(self, db: AsyncSession, service_id: int) -> ServiceResponse:
        """Raises NotFoundError when no service has this id."""
        service = await get_or_404(db, Service, service_id, "service")
        return ServiceResponse.model_validate(service)


catalog_service = CatalogService()
