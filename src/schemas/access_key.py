"""Access key schema definitions."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from config import ACCESS_KEY_DEFAULT_EXPIRES_DAYS


class GenerateAccessKeyRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    expires_in_days: int = Field(
        default=ACCESS_KEY_DEFAULT_EXPIRES_DAYS,
        alias="expiresInDays",
        description="Number of days until the key expires.",
    )


class AccessKeyInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    key: str
    created_by_admin_id: int
    channel_id: Optional[int] = None
    expires_at: datetime
    used_at: Optional[datetime] = None
    created_at: datetime


class AccessKeyListItem(AccessKeyInfo):
    """Access key row joined with its creator and the channel it registered."""

    created_by_username: Optional[str] = None
    channel_name: Optional[str] = None
