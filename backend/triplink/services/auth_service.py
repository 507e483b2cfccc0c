"""
TripLink Backend — Auth Service
=================================

What:  Registration, login, and bearer-token resolution.
Who:   routes/auth.py and the get_current_user dependency.

Flows:
    register(): uniqueness pre-check → hash password → INSERT → public projection
                (a concurrent duplicate that slips past the pre-check is caught
                by the unique constraint at flush and reported as a conflict)
    login():    resolve identifier against username OR email → verify hash →
                public projection + signed JWT. No writes.
    authenticate(): JWT → User row, or UnauthorizedError
"""

import logging

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from triplink.exceptions import ConflictError, UnauthorizedError
from triplink.models import User
from triplink.repository import store_errors
from triplink.schemas.user import AuthResponse, UserCreate, UserPublic
from triplink.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)

# Checked against when the identifier matches nobody, so a miss costs the
# same hash verification as a wrong password
_UNKNOWN_USER_HASH = hash_password("triplink-unknown-user")


class AuthService:
    """
    Account operations.

    Error Handling:
        ConflictError      — username or email already taken
        UnauthorizedError  — unknown identifier, wrong password, bad token
    """

    async def register(self, db: AsyncSession, payload: UserCreate) -> UserPublic:
        """
        Create an account.

        Args:
            db: Async database session
            payload: Validated registration data (email already lowercased)

        Returns:
            UserPublic — never includes the password hash

        Raises:
            ConflictError: username or email is already registered
        """
        with store_errors("register user"):
            result = await db.execute(
                select(User.username, User.email).where(
                    or_(User.username == payload.username, User.email == payload.email)
                )
            )
            existing = result.first()

        if existing is not None:
            field = "username" if existing.username == payload.username else "email"
            raise ConflictError(
                message=f"A user with that {field} already exists",
                context={"field": field},
            )

        user = User(
            username=payload.username,
            email=payload.email,
            password=hash_password(payload.password),
            role=payload.role.value,
            full_name=payload.full_name,
            bio=payload.bio,
            avatar=payload.avatar,
            languages=list(payload.languages),
        )
        with store_errors("register user"):
            db.add(user)
            await db.flush()

        logger.info("Registered user %s (id=%s, role=%s)", user.username, user.id, user.role)
        return UserPublic.model_validate(user)

    async def login(self, db: AsyncSession, identifier: str, password: str) -> AuthResponse:
        """
        Authenticate by username or email.

        The identifier is matched against both columns, so a user can type
        either one into the same field. A username match wins over another
        account whose email happens to equal it.

        Raises:
            UnauthorizedError: no matching user, or the password does not match
        """
        ident = identifier.strip()
        with store_errors("login"):
            result = await db.execute(
                select(User)
                .where(or_(User.username == ident, User.email == ident.lower()))
                .order_by((User.username == ident).desc())
                .limit(1)
            )
            user = result.scalars().first()

        if user is None:
            verify_password(_UNKNOWN_USER_HASH, password)
            logger.info("Login failed: unknown identifier")
            raise UnauthorizedError("Invalid username/email or password")

        if not verify_password(user.password, password):
            logger.info("Login failed: wrong password for user id=%s", user.id)
            raise UnauthorizedError("Invalid username/email or password")

        token = create_access_token(user.id, {"role": user.role})
        logger.info("User %s logged in", user.id)
        return AuthResponse(user=UserPublic.model_validate(user), token=token)

    async def authenticate(self, db: AsyncSession, token: str) -> User:
        """Resolve a bearer token to the acting User row."""
        payload = decode_access_token(token)
        try:
            user_id = int(payload["sub"])
        except (TypeError, ValueError) as e:
            raise UnauthorizedError("Invalid token subject") from e

        with store_errors("authenticate"):
            user = await db.get(User, user_id)
        if user is None:
            raise UnauthorizedError("User for this token no longer exists")
        return user


auth_service = AuthService()
