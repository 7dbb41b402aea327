"""Group and member management utilities.

Groups and users are created lazily the first time they are seen, so every
write path goes through the ``ensure_*`` look-up-or-create helpers.
"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.exceptions import GroupNotFoundError, UserNotFoundError
from models.group import GroupModel
from models.user import UserModel

logger = logging.getLogger(__name__)


class GroupManager:
    """Manages groups and the users inside them."""

    def __init__(self, db: Session):
        self.db = db

    def find_group(self, channel_id: int, line_group_id: str) -> Optional[GroupModel]:
        return (
            self.db.query(GroupModel)
            .filter(
                GroupModel.channel_id == channel_id,
                GroupModel.line_group_id == line_group_id,
            )
            .first()
        )

    def ensure_group(
        self, channel_id: int, line_group_id: str, name: Optional[str] = None
    ) -> GroupModel:
        """Return the group for (channel, LINE group), creating it on first sight.

        Args:
            channel_id: Owning channel ID. The caller checks it is active.
            line_group_id: LINE group (or room) ID.
            name: Group name stored on creation only.

        Returns:
            The existing or newly created GroupModel.
        """
        group = self.find_group(channel_id, line_group_id)
        if group is not None:
            return group

        group = GroupModel(channel_id=channel_id, line_group_id=line_group_id, name=name)
        try:
            self.db.add(group)
            self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent first sighting; the other row wins.
            self.db.rollback()
            existing = self.find_group(channel_id, line_group_id)
            if existing is None:
                raise
            return existing
        self.db.refresh(group)
        logger.info("Created group %s for channel %s", group.id, channel_id)
        return group

    def get_group(self, group_id: int) -> GroupModel:
        group = self.db.query(GroupModel).filter(GroupModel.id == group_id).first()
        if group is None:
            raise GroupNotFoundError()
        return group

    def find_user(self, line_user_id: str, group_id: int) -> Optional[UserModel]:
        return (
            self.db.query(UserModel)
            .filter(
                UserModel.line_user_id == line_user_id,
                UserModel.group_id == group_id,
            )
            .first()
        )

    def ensure_user(
        self, line_user_id: str, display_name: Optional[str], group_id: int
    ) -> UserModel:
        """Return the user for (LINE user, group), creating it on first sight.

        The display name comes from the LIFF client and is not verified.

        Args:
            line_user_id: LINE user ID.
            display_name: Name stored on creation only.
            group_id: Internal group ID.

        Returns:
            The existing or newly created UserModel.
        """
        user = self.find_user(line_user_id, group_id)
        if user is not None:
            return user

        user = UserModel(
            line_user_id=line_user_id,
            display_name=display_name,
            group_id=group_id,
            points=0,
        )
        try:
            self.db.add(user)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            existing = self.find_user(line_user_id, group_id)
            if existing is None:
                raise
            return existing
        self.db.refresh(user)
        logger.info("Created user %s in group %s", user.id, group_id)
        return user

    def get_user(self, user_id: int) -> UserModel:
        user = self.db.query(UserModel).filter(UserModel.id == user_id).first()
        if user is None:
            raise UserNotFoundError()
        return user
