"""Schedule template schema definitions."""

import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

TIME_SLOT_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def validate_time_slot(value: Optional[str]) -> Optional[str]:
    """Accept "HH:MM" in 24-hour time only."""
    if value is None:
        return value
    value = value.strip()
    if not TIME_SLOT_PATTERN.match(value):
        raise ValueError("timeSlot must be in HH:MM format (00:00-23:59)")
    return value


class CreateScheduleTemplateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    group_id: int = Field(alias="groupId")
    title: str = Field(min_length=1)
    description: Optional[str] = None
    day_of_week: int = Field(alias="dayOfWeek", ge=0, le=6)
    time_slot: str = Field(alias="timeSlot")

    @field_validator("time_slot")
    @classmethod
    def check_time_slot(cls, value: Optional[str]) -> Optional[str]:
        return validate_time_slot(value)


class UpdateScheduleTemplateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    day_of_week: Optional[int] = Field(default=None, alias="dayOfWeek", ge=0, le=6)
    time_slot: Optional[str] = Field(default=None, alias="timeSlot")

    @field_validator("time_slot")
    @classmethod
    def check_time_slot(cls, value: Optional[str]) -> Optional[str]:
        return validate_time_slot(value)


class ScheduleTemplateInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    group_id: int
    title: str
    description: Optional[str] = None
    day_of_week: int
    time_slot: str
    created_at: datetime
