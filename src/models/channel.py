"""Channel database model.

A channel is one tenant's LINE Messaging API integration. Channels are never
deleted, only deactivated through ``is_active``.
"""

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from .base import Base, utcnow


class ChannelModel(Base):
    __tablename__ = "channels"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    line_channel_id = Column(String, nullable=False)
    line_channel_access_token = Column(String, nullable=False)
    line_channel_secret = Column(String, nullable=False)
    liff_id = Column(String, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
