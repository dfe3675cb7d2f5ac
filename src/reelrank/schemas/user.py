"""Pydantic schemas for user and authentication API endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class UserCreate(BaseModel):
    """Schema for user registration."""

    username: str = Field(
        min_length=3,
        max_length=50,
        description="Unique username (3-50 characters)",
    )
    email: EmailStr = Field(description="Valid email address")
    password: str = Field(
        min_length=6,
        max_length=100,
        description="Password (6-100 characters)",
    )

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        """Validate username contains only allowed characters."""
        if not v.replace("_", "").isalnum():
            msg = "Username can only contain letters, numbers, and underscores"
            raise ValueError(msg)
        return v.lower()


class UserProfileUpdate(BaseModel):
    """Schema for updating the current user's profile."""

    username: str | None = Field(default=None, min_length=3, max_length=50)
    profile_pic: str | None = Field(default=None, max_length=500)

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str | None) -> str | None:
        """Validate username contains only allowed characters."""
        if v is None:
            return v
        if not v.replace("_", "").isalnum():
            msg = "Username can only contain letters, numbers, and underscores"
            raise ValueError(msg)
        return v.lower()


class UserResponse(BaseModel):
    """Response schema for user data (excludes password)."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(description="User ID")
    username: str = Field(description="Username")
    email: str = Field(description="Email address")
    profile_pic: str | None = Field(default=None, description="Profile picture URL")
    is_admin: bool = Field(description="Whether the user can curate the catalog")
    is_active: bool = Field(description="Whether the user account is active")
    created_at: datetime = Field(description="When the user joined")


class UserLogin(BaseModel):
    """Schema for user login request."""

    username: str = Field(description="Username or email")
    password: str = Field(description="Password")


class Token(BaseModel):
    """Schema for JWT token response."""

    access_token: str = Field(description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
