"""Group and user schema definitions."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CreateGroupRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    channel_id: int = Field(alias="channelId")
    line_group_id: str = Field(alias="lineGroupId", min_length=1)
    name: Optional[str] = None


class GroupInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    channel_id: int
    line_group_id: str
    name: Optional[str] = None
    created_at: datetime


class UserInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    line_user_id: str
    display_name: Optional[str] = None
    group_id: int
    points: int
    created_at: datetime


class PointsResponse(BaseModel):
    points: int
