"""Request/response models for authentication and profile endpoints."""

from typing import Optional
from pydantic import BaseModel, Field

from voicetasks.models.user import User


class GoogleSignInRequest(BaseModel):
    """Request model for Google sign-in."""
    id_token: str = Field(..., description="Google ID token from the sign-in client")


class AuthResponse(BaseModel):
    """Response model for authentication."""
    access_token: str
    token_type: str = "bearer"
    user: User


class ProfileUpdateRequest(BaseModel):
    """Editable profile fields; omitted fields are left unchanged."""
    name: Optional[str] = Field(None, max_length=200, description="Display name")
    profile_image_url: Optional[str] = Field(None, description="Profile picture URL")
