"""Task data model for voicetasks."""

from datetime import datetime
from typing import Optional
from enum import Enum
from pydantic import BaseModel, Field


class TaskPriority(str, Enum):
    """Task priority enumeration."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ReminderType(str, Enum):
    """Reminder scheduling mode."""
    MANUAL = "manual"    # Fixed time of day given by reminder_time ("HH:MM")
    MORNING = "morning"  # Morning of the due date
    DEFAULT = "default"  # Application default lead time


class RecurringPattern(str, Enum):
    """Recurrence pattern enumeration (stored only)."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class Task(BaseModel):
    """Canonical Task model."""

    id: str = Field(..., description="Unique task identifier (UUID v4)")
    user_id: str = Field(..., description="User ID who owns this task")
    title: str = Field(..., min_length=1, description="Task title")
    description: Optional[str] = Field(None, description="Task description")
    priority: TaskPriority = Field(TaskPriority.MEDIUM, description="Task priority")
    completed: bool = Field(False, description="Whether the task is completed")
    due_date: Optional[datetime] = Field(None, description="Task deadline")
    category_id: Optional[str] = Field(None, description="Category ID (null for uncategorized tasks)")
    is_recurring: bool = Field(False, description="Whether the task repeats")
    recurring_pattern: Optional[RecurringPattern] = Field(None, description="Recurrence pattern")
    reminder_enabled: bool = Field(True, description="Whether deadline reminders are enabled")
    reminder_type: ReminderType = Field(ReminderType.DEFAULT, description="Reminder scheduling mode")
    reminder_time: Optional[str] = Field(None, description="Reminder time of day (HH:MM) for manual reminders")
    last_notified: Optional[datetime] = Field(None, description="When the last reminder was sent")
    created_at: datetime = Field(..., description="Task creation timestamp")
    updated_at: datetime = Field(..., description="Task last update timestamp")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
