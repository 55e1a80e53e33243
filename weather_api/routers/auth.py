"""
Authentication router.

This module contains the registration and login endpoints. Both return a
signed bearer token; logout is client side (the token is discarded).
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from weather_api.config import settings
from weather_api.core.exceptions import AuthError
from weather_api.core.validation import validate_login, validate_registration
from weather_api.crud.user import user as crud_user
from weather_api.database import get_db
from weather_api.schemas.auth import AuthResponse, UserCreate, UserLogin
from weather_api.schemas.base import ErrorResponse
from weather_api.utils.logging_config import get_logger
from weather_api.utils.security import create_access_token

logger = get_logger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["authentication"],
    responses={400: {"model": ErrorResponse}},
)


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    user_in: UserCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    Register a new user and return an access token.

    Raises:
        ValidationError: If a field is missing or malformed
        DuplicateEmailError: If the email is already registered
    """
    validate_registration(user_in)

    new_user = await crud_user.create(db, obj_in=user_in)

    return AuthResponse(
        message="Usuário cadastrado com sucesso",
        user=new_user,
        token=create_access_token(new_user),
        expires_in=settings.ACCESS_TOKEN_EXPIRE_SECONDS,
    )


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={401: {"model": ErrorResponse}},
)
async def login(
    credentials: UserLogin,
    db: AsyncSession = Depends(get_db),
):
    """
    Authenticate with email and password and return an access token.

    Unknown email and wrong password give the same 401.
    """
    validate_login(credentials)

    user_obj = await crud_user.verify_password(
        db, email=credentials.email, password=credentials.password
    )
    if user_obj is None:
        logger.info("Rejected login attempt")
        raise AuthError("Credenciais inválidas")

    return AuthResponse(
        message="Login realizado com sucesso",
        user=user_obj,
        token=create_access_token(user_obj),
        expires_in=settings.ACCESS_TOKEN_EXPIRE_SECONDS,
    )
