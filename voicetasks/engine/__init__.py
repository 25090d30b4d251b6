"""Derived statistics and reminder engines for voicetasks."""

from voicetasks.engine.stats import compute_task_stats, calculate_streaks, TaskStats, PeriodBucket
from voicetasks.engine.reminders import due_reminders, Reminder

__all__ = [
    "compute_task_stats",
    "calculate_streaks",
    "TaskStats",
    "PeriodBucket",
    "due_reminders",
    "Reminder",
]
