from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=6, max_length=20)
    password: str = Field(..., min_length=7, max_length=32)
    first_name: str = Field(..., min_length=2, max_length=32)
    last_name: str = Field(..., min_length=2, max_length=32)
    birthday: Optional[date] = None
    bio: Optional[str] = Field(None, min_length=1, max_length=300)


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=6, max_length=20)
    password: str = Field(..., min_length=7, max_length=32)


class ProfileUpdate(BaseModel):
    """Partial profile update; fields left out (or null) are not touched."""

    username: Optional[str] = Field(None, min_length=6, max_length=20)
    first_name: Optional[str] = Field(None, min_length=2, max_length=32)
    last_name: Optional[str] = Field(None, min_length=2, max_length=32)
    birthday: Optional[date] = None
    bio: Optional[str] = Field(None, min_length=1, max_length=300)


class PasswordChangeRequest(BaseModel):
    old_password: str = Field(..., min_length=7, max_length=32)
    new_password: str = Field(..., min_length=7, max_length=32)
    confirm_password: str = Field(..., min_length=7, max_length=32)


class UserOut(BaseModel):
    id: int
    username: str
    first_name: str
    last_name: str
    birthday: Optional[date] = None
    bio: Optional[str] = None
    created_at: Optional[datetime] = None
    followers_count: int
    following_count: int

    class Config:
        from_attributes = True
