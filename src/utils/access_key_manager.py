"""Access key management utilities.

Admins issue single-use, time-limited access keys; a tenant redeems one to
register its channel (see ``ChannelManager.register_channel``).
"""

import logging
import secrets
import string
from datetime import timedelta
from typing import List, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, aliased

from config import ACCESS_KEY_DEFAULT_EXPIRES_DAYS, ACCESS_KEY_MAX_EXPIRES_DAYS
from core.exceptions import (
    AccessKeyAlreadyUsedError,
    AccessKeyNotFoundError,
    BadRequestError,
)
from models.access_key import AccessKeyModel
from models.admin import AdminModel
from models.base import utcnow
from models.channel import ChannelModel

logger = logging.getLogger(__name__)

ACCESS_KEY_ALPHABET = string.ascii_uppercase + string.digits
ACCESS_KEY_LENGTH = 16
ACCESS_KEY_BLOCK = 4

# A collision needs two equal draws from 36**16 keys; a few retries is plenty.
MAX_GENERATION_ATTEMPTS = 5


def generate_access_key() -> str:
    """Generate a key formatted as XXXX-XXXX-XXXX-XXXX (uppercase alphanumerics)."""
    raw = "".join(secrets.choice(ACCESS_KEY_ALPHABET) for _ in range(ACCESS_KEY_LENGTH))
    return "-".join(
        raw[i:i + ACCESS_KEY_BLOCK] for i in range(0, ACCESS_KEY_LENGTH, ACCESS_KEY_BLOCK)
    )


class AccessKeyManager:
    """Manages access key issuance, listing and revocation."""

    def __init__(self, db: Session):
        self.db = db

    def issue_access_key(
        self,
        admin_id: int,
        expires_in_days: int = ACCESS_KEY_DEFAULT_EXPIRES_DAYS,
    ) -> AccessKeyModel:
        """Issue a new access key.

        Args:
            admin_id: ID of the issuing admin.
            expires_in_days: Number of days until expiration.

        Returns:
            Created AccessKeyModel instance.

        Raises:
            BadRequestError: If expires_in_days is out of range.
        """
        if expires_in_days < 1 or expires_in_days > ACCESS_KEY_MAX_EXPIRES_DAYS:
            raise BadRequestError(
                f"expiresInDays must be between 1 and {ACCESS_KEY_MAX_EXPIRES_DAYS}"
            )

        expires_at = utcnow() + timedelta(days=expires_in_days)
        for attempt in range(1, MAX_GENERATION_ATTEMPTS + 1):
            model = AccessKeyModel(
                key=generate_access_key(),
                created_by_admin_id=admin_id,
                expires_at=expires_at,
            )
            self.db.add(model)
            try:
                self.db.commit()
            except IntegrityError:
                self.db.rollback()
                logger.warning("Access key collision on attempt %d, regenerating", attempt)
                continue
            self.db.refresh(model)
            logger.info("Issued access key %s by admin %s", model.id, admin_id)
            return model

        raise RuntimeError("Could not generate a unique access key")

    def list_access_keys(self) -> List[Tuple[AccessKeyModel, str, str]]:
        """List every access key, newest first.

        Returns:
            Tuples of (access key, creator username, registered channel name);
            the channel name is None for unused keys.
        """
        creator = aliased(AdminModel)
        channel = aliased(ChannelModel)
        return (
            self.db.query(AccessKeyModel, creator.username, channel.name)
            .outerjoin(creator, creator.id == AccessKeyModel.created_by_admin_id)
            .outerjoin(channel, channel.id == AccessKeyModel.channel_id)
            .order_by(AccessKeyModel.created_at.desc(), AccessKeyModel.id.desc())
            .all()
        )

    def get_access_key(self, key_id: int) -> AccessKeyModel:
        model = self.db.query(AccessKeyModel).filter(AccessKeyModel.id == key_id).first()
        if model is None:
            raise AccessKeyNotFoundError()
        return model

    def delete_access_key(self, key_id: int) -> None:
        """Revoke an unused access key.

        Used keys are kept: they record which admin let a channel in.

        Raises:
            AccessKeyNotFoundError: If the key does not exist.
            AccessKeyAlreadyUsedError: If the key has been redeemed.
        """
        model = self.get_access_key(key_id)
        if model.used_at is not None:
            raise AccessKeyAlreadyUsedError()
        self.db.delete(model)
        self.db.commit()
        logger.info("Deleted access key: %s", key_id)
