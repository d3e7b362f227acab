from pydantic import EmailStr, Field, field_validator
from typing import Any, Dict, Optional

from app.schemas.common import CamelModel, UTCDateTime
from app.schemas.user import UserProfile


class RegisterRequest(CamelModel):
    """Social registration request (profile fields only, no password)"""
    name: str = Field(..., min_length=2, max_length=255)
    username: str = Field(..., min_length=3, max_length=50, pattern=r"^[A-Za-z0-9_.]+$")
    email: EmailStr
    image_url: Optional[str] = Field(None, max_length=2048)
    gender: Optional[str] = Field(None, max_length=20)
    food_type: Optional[str] = Field(None, max_length=255)
    place_value: Optional[str] = Field(None, max_length=255)

    @field_validator("name")
    def strip_name(cls, v):
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Name must be at least 2 characters")
        return v


class LoginRequest(CamelModel):
    """Social login request. Name and avatar refresh the stored profile."""
    email: EmailStr
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    image_url: Optional[str] = Field(None, max_length=2048)


class ProfileUpdateRequest(CamelModel):
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    image_url: Optional[str] = Field(None, max_length=2048)
    additional_info: Optional[Dict[str, Any]] = None


class LoginResponseData(CamelModel):
    user: UserProfile
    token: str
    token_type: str = "Bearer"
    expires_at: UTCDateTime
    jwt_token: Optional[str] = None

