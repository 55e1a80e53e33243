"""
Authentication dependencies.

This module contains dependency injection functions for bearer token
authentication.
"""

from typing import Optional
from fastapi import Header

from weather_api.core.exceptions import AuthError
from weather_api.schemas.auth import TokenUser
from weather_api.utils.security import extract_bearer_token, get_user_from_token


async def get_current_user(
    authorization: Optional[str] = Header(None),
) -> TokenUser:
    """
    Get the user carried by the request's bearer token.

    Missing header, wrong scheme, bad signature and expiry all produce the
    same 401 so callers cannot tell them apart.

    Args:
        authorization: Raw ``Authorization`` header value

    Returns:
        User claim from the token

    Raises:
        AuthError: If the token is missing, invalid or expired
    """
    token = extract_bearer_token(authorization)
    if not token:
        raise AuthError()

    claim = get_user_from_token(token)
    if not claim:
        raise AuthError()

    try:
        return TokenUser.model_validate(claim)
    except ValueError:
        raise AuthError()
