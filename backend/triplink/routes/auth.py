"""
TripLink Backend — Auth Route Handlers
========================================

What:  POST /api/auth/register, POST /api/auth/login, GET /api/auth/me
How:   Validates the body, delegates to AuthService, returns the public
       projection. No route ever serializes an ORM User directly.
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from triplink.database import get_db_session
from triplink.dependencies import get_current_user
from triplink.models import User
from triplink.schemas.common import ErrorResponse
from triplink.schemas.user import (
    AuthResponse,
    LoginRequest,
    UserCreate,
    UserPublic,
    UserResponse,
)
from triplink.services.auth_service import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid input", "model": ErrorResponse},
        409: {"description": "Username or email taken", "model": ErrorResponse},
    },
    summary="Create an account",
)
async def register(
    payload: UserCreate,
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    user = await auth_service.register(db, payload)
    return UserResponse(user=user)


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={401: {"description": "Bad credentials", "model": ErrorResponse}},
    summary="Log in with username or email",
)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> AuthResponse:
    return await auth_service.login(db, payload.identifier, payload.password)


@router.get(
    "/me",
    response_model=UserResponse,
    responses={401: {"description": "Missing or invalid token", "model": ErrorResponse}},
    summary="The authenticated user",
)
async def me(current_user: User = Depends(get_current_user)) -> UserResponse:
    return UserResponse(user=UserPublic.model_validate(current_user))
