"""Channel management utilities."""

import logging
from typing import Any, Dict, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.exceptions import AccessKeyRejectedError, ChannelNotFoundError
from models.access_key import AccessKeyModel
from models.base import utcnow
from models.channel import ChannelModel

logger = logging.getLogger(__name__)

UPDATABLE_CHANNEL_FIELDS = (
    "name",
    "line_channel_access_token",
    "line_channel_secret",
    "liff_id",
    "is_active",
)


class ChannelManager:
    """Manages channel registration and administration."""

    def __init__(self, db: Session):
        self.db = db

    def register_channel(
        self,
        access_key: str,
        name: str,
        line_channel_id: str,
        line_channel_access_token: str,
        line_channel_secret: str,
        liff_id: str,
    ) -> ChannelModel:
        """Create a channel by redeeming a single-use access key.

        The channel insert and the key claim commit together. The claim is a
        conditional update, so of two concurrent redemptions of one key only
        one can touch the row; the other rolls back its channel.

        Args:
            access_key: Key string, XXXX-XXXX-XXXX-XXXX.
            name: Display name of the channel.
            line_channel_id: LINE Messaging API channel ID.
            line_channel_access_token: Long-lived channel access token.
            line_channel_secret: Channel secret.
            liff_id: LIFF app ID used to build the deep link.

        Returns:
            The created ChannelModel.

        Raises:
            AccessKeyRejectedError: If the key is unknown, used or expired.
        """
        now = utcnow()
        key = access_key.strip().upper()
        channel = ChannelModel(
            name=name,
            line_channel_id=line_channel_id,
            line_channel_access_token=line_channel_access_token,
            line_channel_secret=line_channel_secret,
            liff_id=liff_id,
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        try:
            self.db.add(channel)
            self.db.flush()

            claimed = (
                self.db.query(AccessKeyModel)
                .filter(
                    AccessKeyModel.key == key,
                    AccessKeyModel.used_at.is_(None),
                    AccessKeyModel.expires_at > now,
                )
                .update(
                    {
                        AccessKeyModel.used_at: now,
                        AccessKeyModel.channel_id: channel.id,
                    },
                    synchronize_session=False,
                )
            )
            if claimed != 1:
                self.db.rollback()
                logger.warning("Rejected access key for channel registration: %s", key)
                raise AccessKeyRejectedError()

            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

        self.db.refresh(channel)
        logger.info("Registered channel %s (%s) with access key %s", channel.id, name, key)
        return channel

    def list_channels(self) -> List[ChannelModel]:
        return (
            self.db.query(ChannelModel)
            .order_by(ChannelModel.created_at.desc(), ChannelModel.id.desc())
            .all()
        )

    def get_channel(self, channel_id: int, active_only: bool = False) -> ChannelModel:
        """Get a channel by ID.

        Args:
            channel_id: Channel ID.
            active_only: Treat a deactivated channel as missing.

        Raises:
            ChannelNotFoundError: If no matching channel exists.
        """
        query = self.db.query(ChannelModel).filter(ChannelModel.id == channel_id)
        if active_only:
            query = query.filter(ChannelModel.is_active.is_(True))
        model = query.first()
        if model is None:
            raise ChannelNotFoundError(
                "Channel not found or inactive" if active_only else "Channel not found"
            )
        return model

    def update_channel(self, channel_id: int, changes: Dict[str, Any]) -> ChannelModel:
        """Apply a partial update to a channel.

        Only non-null keys in UPDATABLE_CHANNEL_FIELDS are written; ``updated_at`` moves
        only when at least one of them is present.

        Raises:
            ChannelNotFoundError: If the channel does not exist.
        """
        model = self.get_channel(channel_id)
        applied = {
            k: v
            for k, v in changes.items()
            if k in UPDATABLE_CHANNEL_FIELDS and v is not None
        }
        if not applied:
            return model

        for field, value in applied.items():
            setattr(model, field, value)
        model.updated_at = utcnow()
        self.db.commit()
        self.db.refresh(model)
        logger.info("Updated channel %s: %s", channel_id, ", ".join(sorted(applied)))
        return model
