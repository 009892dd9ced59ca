"""Pydantic schemas for user profiles."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class UserProfile(BaseModel):
    """Public projection of a user. Never includes the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    first_name: str
    last_name: str
    created_at: datetime
    updated_at: datetime


class UserResponse(BaseModel):
    """Wrapper used by the /me endpoints."""

    user: UserProfile
