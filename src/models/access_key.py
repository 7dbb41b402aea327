"""Access key database model.

This module defines the single-use AccessKey model that lets a tenant
register exactly one channel.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from .base import Base, utcnow


class AccessKeyModel(Base):
    """Access key database model."""

    __tablename__ = "access_keys"

    id = Column(Integer, primary_key=True, index=True)
    key = Column(String(19), unique=True, index=True, nullable=False)  # XXXX-XXXX-XXXX-XXXX
    created_by_admin_id = Column(Integer, ForeignKey("admins.id"), index=True, nullable=False)
    channel_id = Column(Integer, ForeignKey("channels.id"), nullable=True)  # set on redemption
    expires_at = Column(DateTime(timezone=True), nullable=False)
    used_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
