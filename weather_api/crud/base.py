"""
Base CRUD operations.

This module contains the generic read and delete helpers shared by
model-specific CRUD classes. Writes are model specific and live in the
subclasses.
"""

from typing import Any, Generic, Optional, Type, TypeVar

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from weather_api.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class CRUDBase(Generic[ModelType]):
    """
    Base CRUD operations class.

    Every method receives the session it should use; no CRUD object holds
    a connection of its own.
    """

    def __init__(self, model: Type[ModelType]):
        """
        Initialize CRUD operations for a specific model.

        Args:
            model: The SQLAlchemy model class
        """
        self.model = model

    async def get_record(self, db: AsyncSession, id: Any) -> Optional[ModelType]:
        """
        Get a single ORM record by ID.

        Args:
            db: Database session
            id: Record ID

        Returns:
            Model instance or None if not found
        """
        result = await db.execute(select(self.model).where(self.model.id == id))
        return result.scalars().first()

    async def remove(self, db: AsyncSession, *, id: int) -> bool:
        """
        Remove a record by ID.

        Args:
            db: Database session
            id: Record ID to remove

        Returns:
            True if a record existed and was deleted
        """
        result = await db.execute(delete(self.model).where(self.model.id == id))
        await db.commit()
        return result.rowcount > 0
