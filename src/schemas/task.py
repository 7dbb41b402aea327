"""Task schema definitions."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CreateTaskRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    group_id: int = Field(alias="groupId")
    title: str = Field(min_length=1)
    description: Optional[str] = None
    line_user_id: str = Field(alias="lineUserId", min_length=1)
    display_name: Optional[str] = Field(default=None, alias="displayName")


class TaskActionRequest(BaseModel):
    """Body of the execute and thank transitions: who is acting."""

    model_config = ConfigDict(populate_by_name=True)

    line_user_id: str = Field(alias="lineUserId", min_length=1)
    display_name: Optional[str] = Field(default=None, alias="displayName")
    group_id: Optional[int] = Field(default=None, alias="groupId")


class TaskInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    group_id: int
    title: str
    description: Optional[str] = None
    creator_user_id: int
    executor_user_id: Optional[int] = None
    thanked_user_id: Optional[int] = None
    status: str
    executed_at: Optional[datetime] = None
    thanked_at: Optional[datetime] = None
    created_at: datetime


class TaskListItem(TaskInfo):
    creator_name: Optional[str] = None
    executor_name: Optional[str] = None
    thanked_name: Optional[str] = None
