"""
Catalog routes: GET/POST /api/services, GET /api/services/{id}.

Listing is public; creating a service requires a provider or admin token.
"""

from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from triplink.database import get_db_session
from triplink.dependencies import get_current_user
from triplink.models import User
from triplink.schemas.common import ErrorResponse
from triplink.schemas.service import ServiceCreate, ServiceFilter, ServiceResponse
from triplink.services.catalog_service import catalog_service

router = APIRouter(prefix="/api/services", tags=["Services"])


@router.get("", response_model=List[ServiceResponse], summary="List services")
async def list_services(
    category: Optional[str] = Query(default=None),
    location: Optional[str] = Query(default=None, description="Case-insensitive substring"),
    provider_id: Optional[int] = Query(default=None, alias="providerId"),
    min_price: Optional[Decimal] = Query(default=None, ge=0, alias="minPrice"),
    max_price: Optional[Decimal] = Query(default=None, ge=0, alias="maxPrice"),
    db: AsyncSession = Depends(get_db_session),
) -> List[ServiceResponse]:
    filters = ServiceFilter(
        category=category,
        location=location,
        provider_id=provider_id,
        min_price=min_price,
        max_price=max_price,
    )
    return [service async for service in catalog_service.list_services(db, filters)]


@router.post(
    "",
    response_model=ServiceResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid input", "model": ErrorResponse},
        401: {"description": "Not authenticated", "model": ErrorResponse},
        403: {"description": "Not a provider", "model": ErrorResponse},
    },
    summary="Create a service listing",
)
async def create_service(
    payload: ServiceCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ServiceResponse:
    return await catalog_service.create_service(db, current_user, payload)


@router.get(
    "/{service_id}",
    response_model=ServiceResponse,
    responses={404: {"description": "Service not found", "model": ErrorResponse}},
    summary="Get one service",
)
async def get_service(
    service_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> ServiceResponse:
    return await catalog_service.get_service(db, service_id)
