"""Deadline reminders for voicetasks.

Decides which pending tasks should produce a reminder at a given moment.
Pure and deterministic for a given `now`; the caller records `last_notified`
for every reminder it delivers.

Reminder types:
- default: once the deadline is within DEFAULT_REMINDER_LEAD_HOURS (or
  already passed, up to REMINDER_LOOKAHEAD_HOURS ago)
- morning: at MORNING_REMINDER_HOUR on the day the task is due
- manual: at the task's `reminder_time` while the task is due today or later
"""

import math
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field

from voicetasks.models.constants import (
    DEFAULT_REMINDER_LEAD_HOURS,
    MORNING_REMINDER_HOUR,
    REMINDER_LOOKAHEAD_HOURS,
    REMINDER_WINDOW_MINUTES,
)
from voicetasks.models.task import ReminderType, Task


class Reminder(BaseModel):
    """A reminder that is due for delivery."""

    task_id: str = Field(..., description="Task the reminder is for")
    title: str = Field(..., description="Short headline")
    description: str = Field(..., description="Reminder text")
    reminder_type: ReminderType = Field(..., description="Reminder mode that fired")
    due_date: datetime = Field(..., description="Task deadline")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True


def _hours_until(task: Task, now: datetime) -> float:
    return (task.due_date - now).total_seconds() / 3600


def is_reminder_candidate(task: Task, now: datetime) -> bool:
    """Pending task with reminders on and a deadline close enough to watch."""
    if task.completed or not task.reminder_enabled or task.due_date is None:
        return False
    hours = _hours_until(task, now)
    if task.reminder_type == ReminderType.DEFAULT:
        return -REMINDER_LOOKAHEAD_HOURS < hours <= REMINDER_LOOKAHEAD_HOURS
    return hours > -REMINDER_LOOKAHEAD_HOURS


def _parse_reminder_time(value: Optional[str]) -> Optional[Tuple[int, int]]:
    if not value:
        return None
    hour, minute = value.split(":")
    return int(hour), int(minute)


def _in_window(now: datetime, hour: int, minute: int) -> bool:
    scheduled = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
    return timedelta(0) <= now - scheduled < timedelta(minutes=REMINDER_WINDOW_MINUTES)


def should_remind(task: Task, now: datetime) -> bool:
    """Whether the task's reminder fires at `now` (ignoring earlier deliveries)."""
    if not is_reminder_candidate(task, now):
        return False

    if task.reminder_type == ReminderType.MORNING:
        return task.due_date.date() == now.date() and _in_window(now, MORNING_REMINDER_HOUR, 0)

    if task.reminder_type == ReminderType.MANUAL:
        reminder_time = _parse_reminder_time(task.reminder_time)
        if reminder_time is None:
            return False
        due_today_or_later = task.due_date.date() == now.date() or task.due_date > now
        return due_today_or_later and _in_window(now, *reminder_time)

    return _hours_until(task, now) <= DEFAULT_REMINDER_LEAD_HOURS


def already_notified(task: Task, now: datetime) -> bool:
    """Default reminders fire once per deadline; morning and manual once per day."""
    if task.last_notified is None:
        return False
    if task.reminder_type == ReminderType.DEFAULT:
        return task.last_notified >= task.due_date - timedelta(hours=REMINDER_LOOKAHEAD_HOURS)
    return task.last_notified.date() == now.date()


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def describe_reminder(task: Task, now: datetime) -> Tuple[str, str]:
    """Headline and text for a reminder."""
    if task.reminder_type == ReminderType.MORNING:
        return "Morning Reminder", f'Task "{task.title}" is due today'
    if task.reminder_type == ReminderType.MANUAL:
        return "Scheduled Reminder", f'Task "{task.title}" reminder'

    seconds = (task.due_date - now).total_seconds()
    hours = math.ceil(seconds / 3600)
    if hours > 1:
        return "Task Deadline Reminder", f'"{task.title}" is due in {_plural(hours, "hour")}!'
    minutes = math.ceil(seconds / 60)
    if minutes <= 0:
        return "Task Deadline Reminder", f'"{task.title}" is due now!'
    return "Task Deadline Reminder", f'"{task.title}" is due in {_plural(minutes, "minute")}!'


def due_reminders(tasks: List[Task], now: Optional[datetime] = None) -> List[Reminder]:
    """Reminders to deliver at `now`, in task order.

    Args:
        tasks: The user's tasks
        now: Reference time (defaults to local now, matching deadline times)

    Returns:
        One Reminder per task whose reminder fires and has not been delivered yet
    """
    if now is None:
        now = datetime.now()

    reminders = []
    for task in tasks:
        if not should_remind(task, now) or already_notified(task, now):
            continue
        title, description = describe_reminder(task, now)
        reminders.append(Reminder(
            task_id=task.id,
            title=title,
            description=description,
            reminder_type=task.reminder_type,
            due_date=task.due_date,
        ))
    return reminders
