"""
Password hashing and bearer-token primitives.

Both are opaque to the domain services: Werkzeug produces and checks the
password hashes, python-jose signs and verifies the JWTs.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from werkzeug.security import check_password_hash, generate_password_hash

from triplink.config import settings
from triplink.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)

JWTPayload = Dict[str, Any]


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    return check_password_hash(password_hash, password)


def create_access_token(
    subject: int,
    claims: Optional[Dict[str, Any]] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a signed JWT whose `sub` is the user id."""
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode: JWTPayload = dict(claims or {})
    to_encode.update({"sub": str(subject), "exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> JWTPayload:
    """
    Verify signature and expiry and return the payload.

    Raises:
        UnauthorizedError: bad signature, expired, malformed, or missing `sub`
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        logger.info("Rejected bearer token: %s", e)
        raise UnauthorizedError("Could not validate credentials") from e
    if not payload.get("sub"):
        raise UnauthorizedError("Invalid token: missing subject")
    return payload
