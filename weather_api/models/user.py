"""
User database model.

This module contains the User model backing account registration and login.
"""

from sqlalchemy import Column, String

from weather_api.models.base import BaseModel


class User(BaseModel):
    """
    Registered application user.

    The ``password`` column holds a bcrypt hash and is never returned
    outside the credential store.
    """

    __tablename__ = "users"

    name = Column(String(255), nullable=False)
    city = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)
