"""Admin and authentication schema definitions."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class AdminInfo(BaseModel):
    """Public view of an admin account (no password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: Optional[str] = None


class LoginResponse(BaseModel):
    token: str
    admin: AdminInfo
