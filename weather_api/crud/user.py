"""
User CRUD operations.

This module is the credential store: it persists users, enforces email
uniqueness and hashes and verifies passwords. Only ``get_by_email`` hands
out the ORM record with the password hash; every other method returns the
``UserPublic`` projection.
"""

from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from weather_api.core.exceptions import DuplicateEmailError
from weather_api.crud.base import CRUDBase
from weather_api.models.user import User
from weather_api.schemas.auth import UserCreate, UserPublic, UserUpdate
from weather_api.utils.logging_config import get_logger
from weather_api.utils.security import get_password_hash, verify_password

logger = get_logger(__name__)


class CRUDUser(CRUDBase[User]):
    """
    CRUD operations for User model.
    """

    async def create(self, db: AsyncSession, *, obj_in: UserCreate) -> UserPublic:
        """
        Create a new user with a hashed password.

        The email pre-check leaves a window between read and insert; the
        unique index on ``users.email`` closes it and its violation is
        reported the same way.

        Args:
            db: Database session
            obj_in: Registration data

        Returns:
            Created user (public projection)

        Raises:
            DuplicateEmailError: If the email is already registered
        """
        if await self.get_by_email(db, email=obj_in.email):
            raise DuplicateEmailError()

        db_obj = User(
            name=obj_in.name,
            city=obj_in.city,
            email=obj_in.email,
            password=get_password_hash(obj_in.password),
        )
        db.add(db_obj)
        await self._commit_unique_email(db)
        await db.refresh(db_obj)

        logger.info(f"Created user id={db_obj.id}")
        return UserPublic.model_validate(db_obj)

    async def get_by_email(self, db: AsyncSession, *, email: str) -> Optional[User]:
        """
        Get user by email address, including the password hash.

        Args:
            db: Database session
            email: User email address

        Returns:
            User instance or None if not found
        """
        result = await db.execute(select(User).where(User.email == email))
        return result.scalars().first()

    async def get(self, db: AsyncSession, id: int) -> Optional[UserPublic]:
        """Get the public projection of a user by ID."""
        db_obj = await self.get_record(db, id)
        if db_obj is None:
            return None
        return UserPublic.model_validate(db_obj)

    async def update(
        self,
        db: AsyncSession,
        *,
        id: int,
        obj_in: UserUpdate
    ) -> Optional[UserPublic]:
        """
        Apply a partial update.

        Only fields that were present in ``obj_in`` are written. A present
        but empty password (or any present ``None``) leaves the stored
        value alone.

        Args:
            db: Database session
            id: User ID
            obj_in: Fields to change

        Returns:
            Updated user (public projection) or None if the user does not exist

        Raises:
            DuplicateEmailError: If the new email belongs to another user
        """
        db_obj = await self.get_record(db, id)
        if db_obj is None:
            return None

        update_data = {
            field: value
            for field, value in obj_in.model_dump(exclude_unset=True).items()
            if value is not None
        }
        if not update_data.get("password"):
            update_data.pop("password", None)

        new_email = update_data.get("email")
        if new_email is not None and new_email != db_obj.email:
            other = await self.get_by_email(db, email=new_email)
            if other is not None and other.id != db_obj.id:
                raise DuplicateEmailError()

        if not update_data:
            return UserPublic.model_validate(db_obj)

        if "password" in update_data:
            update_data["password"] = get_password_hash(update_data["password"])

        for field, value in update_data.items():
            setattr(db_obj, field, value)

        db.add(db_obj)
        await self._commit_unique_email(db)
        await db.refresh(db_obj)

        logger.info(f"Updated user id={id} fields={sorted(update_data)}")
        return UserPublic.model_validate(db_obj)

    async def verify_password(
        self,
        db: AsyncSession,
        *,
        email: str,
        password: str
    ) -> Optional[UserPublic]:
        """
        Check a user's credentials.

        Unknown email and wrong password both return None so callers
        cannot tell which one failed.

        Args:
            db: Database session
            email: Login email
            password: Plain text password

        Returns:
            User (public projection) on success, None otherwise
        """
        db_obj = await self.get_by_email(db, email=email)
        if db_obj is None or not verify_password(password, db_obj.password):
            return None
        return UserPublic.model_validate(db_obj)

    async def _commit_unique_email(self, db: AsyncSession) -> None:
        try:
            await db.commit()
        except IntegrityError as exc:
            await db.rollback()
            logger.warning(f"Unique constraint rejected user write: {exc.orig}")
            raise DuplicateEmailError() from exc


# Create instance of CRUDUser
user = CRUDUser(User)
