"""Category data model for voicetasks."""

from datetime import datetime
from pydantic import BaseModel, Field

from voicetasks.models.constants import DEFAULT_CATEGORY_COLOR, HEX_COLOR_PATTERN


class Category(BaseModel):
    """User-owned task category."""

    id: str = Field(..., description="Unique category identifier (UUID v4)")
    user_id: str = Field(..., description="User ID who owns this category")
    name: str = Field(..., min_length=1, max_length=100, description="Category name")
    color: str = Field(DEFAULT_CATEGORY_COLOR, pattern=HEX_COLOR_PATTERN, description="Hex color (#RRGGBB)")
    created_at: datetime = Field(..., description="Category creation timestamp")
    updated_at: datetime = Field(..., description="Category last update timestamp")
