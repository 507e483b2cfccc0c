"""
FastAPI dependencies shared by the route modules.

    get_current_user: Authorization: Bearer <jwt> → User row
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from triplink.database import get_db_session
from triplink.exceptions import UnauthorizedError
from triplink.models import User
from triplink.services.auth_service import auth_service

# auto_error=False so a missing header surfaces as our own 401 body
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> User:
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Authentication required")
    return await auth_service.authenticate(db, credentials.credentials)
