"""Data models for voicetasks."""

from voicetasks.models.task import Task, TaskPriority, ReminderType, RecurringPattern
from voicetasks.models.category import Category
from voicetasks.models.user import User

__all__ = [
    "Task",
    "TaskPriority",
    "ReminderType",
    "RecurringPattern",
    "Category",
    "User",
]
