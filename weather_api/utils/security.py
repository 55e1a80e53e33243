"""
Security utilities.

This module contains password hashing and the stateless JWT helpers used
for bearer authentication.

Tokens are HS256-signed and carry a minimal user claim:

    {"iat": 1700000000, "exp": 1700003600,
     "user": {"id": 1, "email": "...", "name": "...", "city": "..."}}

Nothing is stored server side. A token stays valid until ``exp``; there is
no revocation.
"""

import re
import time
from typing import Any, Mapping, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from weather_api.config import settings
from weather_api.utils.logging_config import get_logger

logger = get_logger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

BEARER_PATTERN = re.compile(r"^\s*Bearer\s+(\S+)\s*$", re.IGNORECASE)

USER_CLAIM_FIELDS = ("id", "email", "name", "city")


def _user_claim(user: Any) -> dict:
    """Pick the claim fields from an ORM object, schema or mapping."""
    if isinstance(user, Mapping):
        return {field: user[field] for field in USER_CLAIM_FIELDS}
    return {field: getattr(user, field) for field in USER_CLAIM_FIELDS}


def create_access_token(user: Any, expires_in: Optional[int] = None) -> str:
    """
    Create JWT access token for a user.

    Args:
        user: User object or mapping with id, email, name and city
        expires_in: Lifetime in seconds (defaults to ACCESS_TOKEN_EXPIRE_SECONDS).
            A negative value produces an already expired token.

    Returns:
        Encoded JWT token
    """
    if expires_in is None:
        expires_in = settings.ACCESS_TOKEN_EXPIRE_SECONDS

    issued_at = int(time.time())
    payload = {
        "iat": issued_at,
        "exp": issued_at + expires_in,
        "user": _user_claim(user),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_token(token: str) -> Optional[dict]:
    """
    Verify and decode JWT token.

    Args:
        token: JWT token to verify

    Returns:
        Decoded claims, or None if the token is malformed, badly signed
        or expired
    """
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            options={"require_exp": True, "leeway": 0},
        )
    except (JWTError, AttributeError, TypeError, ValueError) as exc:
        logger.debug(f"Rejected token: {exc}")
        return None

    # jose accepts exp == now; a token is expired from its exp second on
    if payload.get("exp", 0) <= time.time():
        return None

    return payload


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """
    Extract the token from an ``Authorization: Bearer <token>`` header value.

    The scheme is matched case-insensitively. Returns None when the header
    is missing or has another shape.
    """
    if not authorization:
        return None

    match = BEARER_PATTERN.match(authorization)
    if not match:
        return None
    return match.group(1)


def get_user_from_token(token: str) -> Optional[dict]:
    """Return the ``user`` claim of a valid token, or None."""
    payload = verify_token(token)
    if not payload:
        return None

    user = payload.get("user")
    if not isinstance(user, dict) or "id" not in user:
        return None
    return user


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against its hash.

    Args:
        plain_password: Plain text password
        hashed_password: Hashed password

    Returns:
        True if password matches, False otherwise (including unreadable hashes)
    """
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        return False


def get_password_hash(password: str) -> str:
    """
    Hash a password.

    Args:
        password: Plain text password

    Returns:
        Hashed password
    """
    return pwd_context.hash(password)
