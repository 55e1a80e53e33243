"""
User profile router.

Every endpoint acts on the user identified by the bearer token.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from weather_api.core.exceptions import NotFoundError
from weather_api.core.validation import validate_update
from weather_api.crud.user import user as crud_user
from weather_api.database import get_db
from weather_api.dependencies.auth import get_current_user
from weather_api.schemas.auth import TokenUser, UserResponse, UserUpdate
from weather_api.schemas.base import ErrorResponse, MessageResponse

router = APIRouter(
    prefix="/users",
    tags=["users"],
    responses={
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)


@router.get("/me", response_model=UserResponse)
async def get_profile(
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get the authenticated user's profile."""
    user_obj = await crud_user.get(db, current_user.id)
    if user_obj is None:
        raise NotFoundError()
    return UserResponse(data=user_obj)


@router.put("/me", response_model=UserResponse)
async def update_profile(
    user_in: UserUpdate,
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Update any subset of name, email, password and city.

    Omitted fields are left unchanged; an empty password is ignored.
    Tokens issued before the update keep the old claim until they expire.
    """
    validate_update(user_in)

    user_obj = await crud_user.update(db, id=current_user.id, obj_in=user_in)
    if user_obj is None:
        raise NotFoundError()

    return UserResponse(message="Perfil atualizado com sucesso", data=user_obj)


@router.delete("/me", response_model=MessageResponse)
async def delete_account(
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Permanently delete the authenticated user's account."""
    deleted = await crud_user.remove(db, id=current_user.id)
    if not deleted:
        raise NotFoundError()
    return MessageResponse(message="Conta excluída com sucesso")
