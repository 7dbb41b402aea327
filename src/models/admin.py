"""Admin database model.

This module defines the Admin database model using SQLAlchemy.
"""

from sqlalchemy import Column, DateTime, Integer, String

from .base import Base, utcnow


class AdminModel(Base):
    """Admin account, created out-of-band and used to manage channels."""

    __tablename__ = "admins"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)  # bcrypt, never plaintext
    email = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
