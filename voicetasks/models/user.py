"""User data model for voicetasks."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class User(BaseModel):
    """User model for voicetasks."""

    id: str = Field(..., description="Unique user identifier (Google user ID)")
    email: str = Field(..., description="User email address")
    name: Optional[str] = Field(None, description="User display name")
    profile_image_url: Optional[str] = Field(None, description="Profile picture URL")
    created_at: datetime = Field(..., description="User creation timestamp")
    updated_at: datetime = Field(..., description="User last update timestamp")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
