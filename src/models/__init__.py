"""Database models package.

Importing this package registers every model with ``Base.metadata``.
"""

from .base import Base
from .admin import AdminModel
from .channel import ChannelModel
from .access_key import AccessKeyModel
from .group import GroupModel
from .user import UserModel
from .task import TaskModel
from .schedule_template import ScheduleTemplateModel

__all__ = [
    "Base",
    "AdminModel",
    "ChannelModel",
    "AccessKeyModel",
    "GroupModel",
    "UserModel",
    "TaskModel",
    "ScheduleTemplateModel",
]
