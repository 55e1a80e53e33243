# CRUD operations package

from weather_api.crud.base import CRUDBase
from weather_api.crud.user import CRUDUser, user

__all__ = [
    "CRUDBase",
    "CRUDUser", "user",
]
