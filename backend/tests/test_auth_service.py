"""
TripLink Backend — Auth Service Tests
=======================================

What we test:
    ✅ Register returns the public projection (no password) and hashes it
    ✅ Duplicate username / email → ConflictError, no second row
    ✅ Login by username and by email; wrong password → UnauthorizedError
    ✅ Token round trip through authenticate()
"""

from datetime import timedelta

import pytest
from sqlalchemy import func, select

from triplink.exceptions import ConflictError, UnauthorizedError
from triplink.models import Role, User
from triplink.schemas.user import UserCreate
from triplink.security import create_access_token
from triplink.services.auth_service import AuthService


def make_payload(**overrides) -> UserCreate:
    data = {"username": "maria", "email": "maria@example.com", "password": "secret123"}
    data.update(overrides)
    return UserCreate.model_validate(data)


async def count_users(db_session) -> int:
    return (await db_session.execute(select(func.count()).select_from(User))).scalar_one()


class TestRegister:

    def setup_method(self):
        self.service = AuthService()

    @pytest.mark.asyncio
    async def test_register_returns_public_user(self, db_session):
        user = await self.service.register(db_session, make_payload(role="expert"))

        assert user.id is not None
        assert user.username == "maria"
        assert user.role is Role.EXPERT
        assert "password" not in user.model_dump()

    @pytest.mark.asyncio
    async def test_password_is_stored_hashed(self, db_session):
        user = await self.service.register(db_session, make_payload())

        row = await db_session.get(User, user.id)
        assert row.password != "secret123"
        assert row.password

    @pytest.mark.asyncio
    async def test_duplicate_username_conflicts(self, db_session):
        await self.service.register(db_session, make_payload())

        with pytest.raises(ConflictError) as exc_info:
            await self.service.register(db_session, make_payload(email="other@example.com"))

        assert exc_info.value.context["field"] == "username"
        assert await count_users(db_session) == 1

    @pytest.mark.asyncio
    async def test_duplicate_email_conflicts_case_insensitively(self, db_session):
        await self.service.register(db_session, make_payload())

        with pytest.raises(ConflictError) as exc_info:
            await self.service.register(
                db_session, make_payload(username="maria2", email="MARIA@example.com")
            )

        assert exc_info.value.context["field"] == "email"
        assert await count_users(db_session) == 1


class TestLogin:

    def setup_method(self):
        self.service = AuthService()

    @pytest.mark.asyncio
    async def test_login_with_username(self, db_session):
        await self.service.register(db_session, make_payload())

        result = await self.service.login(db_session, "maria", "secret123")

        assert result.user.username == "maria"
        assert result.token
        assert "password" not in result.user.model_dump()

    @pytest.mark.asyncio
    async def test_login_with_email(self, db_session):
        await self.service.register(db_session, make_payload())

        result = await self.service.login(db_session, "Maria@Example.com", "secret123")

        assert result.user.email == "maria@example.com"

    @pytest.mark.asyncio
    async def test_username_match_preferred_over_email(self, db_session):
        await self.service.register(db_session, make_payload())
        await self.service.register(
            db_session,
            make_payload(username="maria@example.com", email="other@example.com", password="other-pass"),
        )

        result = await self.service.login(db_session, "maria@example.com", "other-pass")

        assert result.user.username == "maria@example.com"
        assert result.user.email == "other@example.com"

    @pytest.mark.asyncio
    async def test_wrong_password_unauthorized(self, db_session):
        await self.service.register(db_session, make_payload())

        with pytest.raises(UnauthorizedError):
            await self.service.login(db_session, "maria", "wrong-password")

    @pytest.mark.asyncio
    async def test_unknown_user_unauthorized(self, db_session):
        with pytest.raises(UnauthorizedError):
            await self.service.login(db_session, "nobody", "secret123")


class TestAuthenticate:

    def setup_method(self):
        self.service = AuthService()

    @pytest.mark.asyncio
    async def test_token_from_login_resolves_user(self, db_session):
        registered = await self.service.register(db_session, make_payload())
        result = await self.service.login(db_session, "maria", "secret123")

        user = await self.service.authenticate(db_session, result.token)

        assert user.id == registered.id

    @pytest.mark.asyncio
    async def test_garbage_token_unauthorized(self, db_session):
        with pytest.raises(UnauthorizedError):
            await self.service.authenticate(db_session, "not-a-jwt")

    @pytest.mark.asyncio
    async def test_expired_token_unauthorized(self, db_session, traveler):
        token = create_access_token(traveler.id, expires_delta=timedelta(seconds=-5))

        with pytest.raises(UnauthorizedError):
            await self.service.authenticate(db_session, token)

    @pytest.mark.asyncio
    async def test_token_for_missing_user_unauthorized(self, db_session):
        with pytest.raises(UnauthorizedError):
            await self.service.authenticate(db_session, create_access_token(9999))
