"""Task creation factory for voicetasks.

This module centralizes task creation logic to eliminate duplication
and ensure consistent default values across the application.
"""

import uuid
from datetime import datetime
from typing import Optional, Dict, Any

from voicetasks.models.task import Task, TaskPriority, ReminderType, RecurringPattern
from voicetasks.models.constants import (
    DEFAULT_PRIORITY,
    DEFAULT_REMINDER_ENABLED,
    DEFAULT_REMINDER_TYPE,
)


def create_task_defaults() -> Dict[str, Any]:
    """Get default task values as a dictionary.

    Returns:
        Dictionary with default task field values using constants
    """
    return {
        "description": None,
        "priority": DEFAULT_PRIORITY,
        "completed": False,
        "due_date": None,
        "category_id": None,
        "is_recurring": False,
        "recurring_pattern": None,
        "reminder_enabled": DEFAULT_REMINDER_ENABLED,
        "reminder_type": DEFAULT_REMINDER_TYPE,
        "reminder_time": None,
    }


def create_task_base(
    user_id: str,
    title: str,
    description: Optional[str] = None,
    priority: Optional[TaskPriority] = None,
    completed: Optional[bool] = None,
    due_date: Optional[datetime] = None,
    category_id: Optional[str] = None,
    is_recurring: Optional[bool] = None,
    recurring_pattern: Optional[RecurringPattern] = None,
    reminder_enabled: Optional[bool] = None,
    reminder_type: Optional[ReminderType] = None,
    reminder_time: Optional[str] = None,
) -> Task:
    """Create a task with defaults, allowing overrides.

    All optional parameters override defaults when provided.

    Args:
        user_id: User ID who owns this task (required)
        title: Task title (required)
        description: Task description
        priority: Task priority (defaults to medium)
        completed: Completion flag (defaults to False)
        due_date: Task deadline
        category_id: Category the task belongs to
        is_recurring: Whether the task repeats
        recurring_pattern: Recurrence pattern when repeating
        reminder_enabled: Whether reminders are enabled (defaults to True)
        reminder_type: Reminder mode (defaults to "default")
        reminder_time: Manual reminder time of day ("HH:MM")

    Returns:
        Task object with defaults applied
    """
    now = datetime.utcnow()
    defaults = create_task_defaults()

    return Task(
        id=str(uuid.uuid4()),
        user_id=user_id,
        title=title,
        description=description if description is not None else defaults["description"],
        priority=priority if priority is not None else defaults["priority"],
        completed=completed if completed is not None else defaults["completed"],
        due_date=due_date if due_date is not None else defaults["due_date"],
        category_id=category_id if category_id is not None else defaults["category_id"],
        is_recurring=is_recurring if is_recurring is not None else defaults["is_recurring"],
        recurring_pattern=recurring_pattern if recurring_pattern is not None else defaults["recurring_pattern"],
        reminder_enabled=reminder_enabled if reminder_enabled is not None else defaults["reminder_enabled"],
        reminder_type=reminder_type if reminder_type is not None else defaults["reminder_type"],
        reminder_time=reminder_time if reminder_time is not None else defaults["reminder_time"],
        created_at=now,
        updated_at=now,
    )
