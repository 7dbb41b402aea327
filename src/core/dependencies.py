"""Dependency injection module for FastAPI.

This module provides dependency injection functions for FastAPI routes:
one request-scoped manager per resource, each bound to the request's
database session.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from core.database import get_db
from utils import access_key_manager
from utils import admin_manager
from utils import channel_manager
from utils import group_manager
from utils import schedule_manager
from utils import task_manager
from utils import tenant_resolver


def get_admin_manager(db: Session = Depends(get_db)) -> admin_manager.AdminManager:
    """Get AdminManager instance with request-scoped DB session.

    Args:
        db: Database session.

    Returns:
        AdminManager instance.
    """
    return admin_manager.AdminManager(db)


def get_access_key_manager(
    db: Session = Depends(get_db),
) -> access_key_manager.AccessKeyManager:
    """Get AccessKeyManager instance with request-scoped DB session."""
    return access_key_manager.AccessKeyManager(db)


def get_channel_manager(db: Session = Depends(get_db)) -> channel_manager.ChannelManager:
    """Get ChannelManager instance with request-scoped DB session."""
    return channel_manager.ChannelManager(db)


def get_group_manager(db: Session = Depends(get_db)) -> group_manager.GroupManager:
    """Get GroupManager instance with request-scoped DB session."""
    return group_manager.GroupManager(db)


def get_task_manager(db: Session = Depends(get_db)) -> task_manager.TaskManager:
    """Get TaskManager instance with request-scoped DB session."""
    return task_manager.TaskManager(db)


def get_schedule_manager(db: Session = Depends(get_db)) -> schedule_manager.ScheduleManager:
    """Get ScheduleManager instance with request-scoped DB session."""
    return schedule_manager.ScheduleManager(db)


def get_tenant_resolver(db: Session = Depends(get_db)) -> tenant_resolver.TenantResolver:
    """Get TenantResolver instance with request-scoped DB session."""
    return tenant_resolver.TenantResolver(db)


# Type aliases for dependency injection
AdminManagerDep = Annotated[
    admin_manager.AdminManager, Depends(get_admin_manager)
]
AccessKeyManagerDep = Annotated[
    access_key_manager.AccessKeyManager, Depends(get_access_key_manager)
]
ChannelManagerDep = Annotated[
    channel_manager.ChannelManager, Depends(get_channel_manager)
]
GroupManagerDep = Annotated[
    group_manager.GroupManager, Depends(get_group_manager)
]
TaskManagerDep = Annotated[
    task_manager.TaskManager, Depends(get_task_manager)
]
ScheduleManagerDep = Annotated[
    schedule_manager.ScheduleManager, Depends(get_schedule_manager)
]
TenantResolverDep = Annotated[
    tenant_resolver.TenantResolver, Depends(get_tenant_resolver)
]
