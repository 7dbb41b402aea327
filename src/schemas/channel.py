"""Channel schema definitions.

Request bodies use the camelCase names the LIFF frontend sends; responses
mirror the table columns. Channel secrets never appear in a response model.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class RegisterChannelRequest(BaseModel):
    """Self-service channel registration, gated by a single-use access key."""

    model_config = ConfigDict(populate_by_name=True)

    access_key: str = Field(alias="accessKey", min_length=1)
    name: str = Field(min_length=1)
    line_channel_id: str = Field(alias="lineChannelId", min_length=1)
    line_channel_access_token: str = Field(alias="lineChannelAccessToken", min_length=1)
    line_channel_secret: str = Field(alias="lineChannelSecret", min_length=1)
    liff_id: str = Field(alias="liffId", min_length=1)


class UpdateChannelRequest(BaseModel):
    """Partial channel update; only the fields present are written."""

    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(default=None, min_length=1)
    line_channel_access_token: Optional[str] = Field(
        default=None, alias="lineChannelAccessToken", min_length=1
    )
    line_channel_secret: Optional[str] = Field(
        default=None, alias="lineChannelSecret", min_length=1
    )
    liff_id: Optional[str] = Field(default=None, alias="liffId", min_length=1)
    is_active: Optional[bool] = Field(default=None, alias="isActive")


class ChannelInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    line_channel_id: str
    liff_id: str
    is_active: bool
    created_at: datetime
    updated_at: datetime
