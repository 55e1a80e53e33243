"""
Authentication and user schemas.

This module contains Pydantic schemas for registration, login, profile
updates and the public user projection.

Request schemas declare every field optional so that a missing field is
reported by ``weather_api.core.validation`` with the same message format
as any other input problem.
"""

from typing import Optional
from pydantic import BaseModel

from weather_api.schemas.base import BaseSchema, MessageResponse, TimestampSchema


class UserCreate(BaseModel):
    """Registration payload."""
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    city: Optional[str] = None


class UserLogin(BaseModel):
    """Login payload."""
    email: Optional[str] = None
    password: Optional[str] = None


class UserUpdate(BaseModel):
    """
    Partial profile update.

    Only fields present in the request body are applied
    (``model_fields_set``). A present but empty password means
    "keep the current password".
    """
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    city: Optional[str] = None


class UserPublic(TimestampSchema):
    """User as exposed outside the credential store (no password hash)."""
    id: int
    name: str
    city: str
    email: str


class TokenUser(BaseSchema):
    """User claim carried inside an access token."""
    id: int
    email: str
    name: str
    city: str


class AuthResponse(MessageResponse):
    """Response for register and login."""
    user: UserPublic
    token: str
    token_type: str = "bearer"
    expires_in: int


class UserResponse(MessageResponse):
    """Response wrapping a single user."""
    data: UserPublic
