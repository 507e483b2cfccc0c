"""
TripLink Backend — Catalog Service Tests
==========================================
"""

from decimal import Decimal

import pytest

from triplink.exceptions import ForbiddenError, NotFoundError
from triplink.schemas.service import ServiceCreate, ServiceFilter
from triplink.services.catalog_service import CatalogService


def make_service(**overrides) -> ServiceCreate:
    data = {
        "title": "Sunset Sailing",
        "price": "120.00",
        "location": "Lisbon, Portugal",
        "category": "boat",
    }
    data.update(overrides)
    return ServiceCreate.model_validate(data)


async def collect(iterator):
    return [item async for item in iterator]


class TestCreateService:

    def setup_method(self):
        self.service = CatalogService()

    @pytest.mark.asyncio
    async def test_provider_can_create(self, db_session, provider):
        created = await self.service.create_service(db_session, provider, make_service())

        assert created.id is not None
        assert created.provider_id == provider.id
        assert created.price == Decimal("120.00")

    @pytest.mark.asyncio
    async def test_admin_can_create(self, db_session, admin):
        created = await self.service.create_service(db_session, admin, make_service())
        assert created.provider_id == admin.id

    @pytest.mark.asyncio
    async def test_plain_user_forbidden(self, db_session, traveler):
        with pytest.raises(ForbiddenError):
            await self.service.create_service(db_session, traveler, make_service())

    @pytest.mark.asyncio
    async def test_availability_windows_round_trip(self, db_session, provider):
        created = await self.service.create_service(
            db_session,
            provider,
            make_service(availability=[{"startDate": "2024-06-01", "endDate": "2024-06-30"}]),
        )

        fetched = await self.service.get_service(db_session, created.id)
        assert len(fetched.availability) == 1
        assert fetched.availability[0].end_date.day == 30


class TestListServices:

    def setup_method(self):
        self.service = CatalogService()

    @pytest.mark.asyncio
    async def test_empty_catalog_yields_nothing(self, db_session):
        assert await collect(self.service.list_services(db_session)) == []

    @pytest.mark.asyncio
    async def test_filters(self, db_session, provider, tour_service):
        await self.service.create_service(db_session, provider, make_service())

        boats = await collect(
            self.service.list_services(db_session, ServiceFilter(category="BOAT"))
        )
        lisbon = await collect(
            self.service.list_services(db_session, ServiceFilter(location="lisbon"))
        )
        cheap = await collect(
            self.service.list_services(db_session, ServiceFilter(max_price=Decimal("50")))
        )

        assert [s.title for s in boats] == ["Sunset Sailing"]
        assert len(lisbon) == 2
        assert [s.id for s in cheap] == [tour_service.id]

    @pytest.mark.asyncio
    async def test_listing_is_restartable(self, db_session, tour_service):
        first = await collect(self.service.list_services(db_session))
        second = await collect(self.service.list_services(db_session))
        assert [s.id for s in first] == [s.id for s in second] == [tour_service.id]


class TestGetService:

    @pytest.mark.asyncio
    async def test_missing_service_not_found(self, db_session):
        with pytest.raises(NotFoundError) as exc_info:
            await CatalogService().get_service(db_session, 424242)
        assert exc_info.value.resource == "service"
