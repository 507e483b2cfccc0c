"""
User request/response schemas.

UserPublic is the public-safe projection: it has no password field, so an ORM
User passed through it can never leak the hash.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, Field, field_validator, model_validator

from triplink.models.enums import Role
from triplink.schemas.common import CamelModel


class UserCreate(CamelModel):
    username: str = Field(min_length=3, max_length=150)
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    role: Role = Role.USER
    full_name: Optional[str] = Field(default=None, max_length=255)
    bio: Optional[str] = None
    avatar: Optional[str] = Field(default=None, max_length=500)
    languages: List[str] = Field(default_factory=list)

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        stripped = v.strip()
        if len(stripped) < 3:
            raise ValueError("Username must be at least 3 characters")
        return stripped

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class UserPublic(CamelModel):
    id: int
    username: str
    email: str
    role: Role
    full_name: Optional[str] = None
    bio: Optional[str] = None
    avatar: Optional[str] = None
    languages: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None


class LoginRequest(CamelModel):
    """Either username or email identifies the account; both are matched against either column."""

    username: Optional[str] = None
    email: Optional[str] = None
    password: str = Field(min_length=1)

    @model_validator(mode="after")
    def require_identifier(self) -> "LoginRequest":
        if not (self.username or self.email):
            raise ValueError("Username or email is required")
        return self

    @property
    def identifier(self) -> str:
        return (self.username or self.email or "").strip()


class UserResponse(CamelModel):
    user: UserPublic


class AuthResponse(CamelModel):
    user: UserPublic
    token: str
    token_type: str = "bearer"
