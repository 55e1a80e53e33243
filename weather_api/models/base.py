"""
Shared columns for database models.
"""

from sqlalchemy import Column, DateTime, Integer
from sqlalchemy.orm import declared_attr
from sqlalchemy.sql import func

from weather_api.database import Base


class BaseModel(Base):
    """
    Abstract model adding an integer primary key and audit timestamps.

    Both timestamps are filled by the database; ``updated_at`` is refreshed
    on every UPDATE issued through the ORM.
    """

    __abstract__ = True

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    @declared_attr
    def created_at(cls):
        return Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    @declared_attr
    def updated_at(cls):
        return Column(
            DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
            nullable=False,
        )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} id={self.id}>"
