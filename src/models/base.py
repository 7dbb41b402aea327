"""Declarative base shared by all database models."""

from datetime import datetime

import pytz
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow() -> datetime:
    """Timezone-aware current time in UTC, used for every timestamp column."""
    return datetime.now(pytz.utc)
