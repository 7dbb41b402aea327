"""Tenant resolution for inbound LINE events.

Maps a LINE group (or room) ID to the active channel whose credentials must
be used to answer it.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from config import (
    DEFAULT_TENANT_POLICY,
    TENANT_POLICY_NONE,
    TENANT_POLICY_OLDEST_ACTIVE,
)
from models.channel import ChannelModel
from models.group import GroupModel

logger = logging.getLogger(__name__)


class TenantResolver:
    """Resolves LINE group IDs to channels.

    ``resolve`` never raises for an unknown group; it returns None when no
    channel may answer, and callers must then stay silent.
    """

    def __init__(self, db: Session, default_policy: str = DEFAULT_TENANT_POLICY):
        if default_policy not in (TENANT_POLICY_OLDEST_ACTIVE, TENANT_POLICY_NONE):
            raise ValueError(f"Unknown default tenant policy: {default_policy}")
        self.db = db
        self.default_policy = default_policy

    def resolve(self, line_group_id: Optional[str]) -> Optional[ChannelModel]:
        """Return the active channel for a LINE group, or the default tenant.

        Args:
            line_group_id: LINE group or room ID from the event source; may be
                None for one-to-one chats.

        Returns:
            The owning active channel, the default tenant, or None.
        """
        if line_group_id:
            channel = self.find_registered(line_group_id)
            if channel is not None:
                return channel

        channel = self.default_tenant()
        if channel is not None:
            logger.info(
                "LINE group %s is not registered; falling back to channel %s",
                line_group_id,
                channel.id,
            )
        return channel

    def find_registered(self, line_group_id: str) -> Optional[ChannelModel]:
        """Active channel owning a registered group, if any."""
        return (
            self.db.query(ChannelModel)
            .join(GroupModel, GroupModel.channel_id == ChannelModel.id)
            .filter(
                GroupModel.line_group_id == line_group_id,
                ChannelModel.is_active.is_(True),
            )
            .order_by(ChannelModel.created_at, ChannelModel.id)
            .first()
        )

    def default_tenant(self) -> Optional[ChannelModel]:
        if self.default_policy == TENANT_POLICY_NONE:
            return None
        return (
            self.db.query(ChannelModel)
            .filter(ChannelModel.is_active.is_(True))
            .order_by(ChannelModel.created_at, ChannelModel.id)
            .first()
        )
