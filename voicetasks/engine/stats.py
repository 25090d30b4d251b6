"""Productivity statistics for voicetasks.

Derived on demand from a user's task list; nothing here is stored.
Completion time is approximated by `updated_at` of completed tasks.
"""

import calendar
from datetime import date, datetime, timedelta
from typing import List, Optional, Set, Tuple

from pydantic import BaseModel, Field

from voicetasks.models.constants import DEFAULT_STATS_PERIOD, QUARTER_WEEK_BUCKETS, STATS_PERIODS
from voicetasks.models.task import Task, TaskPriority
from voicetasks.voice.datetime_detection import is_overdue


WEEKDAY_LABELS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


class PeriodBucket(BaseModel):
    """Tasks created within one bucket of the selected period."""

    day: str = Field(..., description="Bucket label (weekday, day of month or week number)")
    completed: int = Field(0, description="Created tasks that are now completed")
    total: int = Field(0, description="Tasks created in the bucket")


class TaskStats(BaseModel):
    """Aggregate statistics over a user's tasks."""

    total: int
    completed: int
    pending: int
    high_priority: int
    medium_priority: int
    low_priority: int
    overdue: int = Field(0, description="Pending tasks whose deadline has passed")
    completion_rate: int = Field(0, description="Completed share of all tasks, rounded percent")
    current_streak: int = Field(0, description="Consecutive days up to today with a completion")
    longest_streak: int = Field(0, description="Longest run of consecutive completion days")
    period: str = DEFAULT_STATS_PERIOD
    period_data: List[PeriodBucket] = Field(default_factory=list)
    completed_today: int = 0
    completed_this_week: int = 0


def start_of_week(day: date) -> date:
    """Sunday on or before `day`."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def _completion_days(tasks: List[Task]) -> Set[date]:
    return {task.updated_at.date() for task in tasks if task.completed and task.updated_at}


def calculate_streaks(tasks: List[Task], today: date) -> Tuple[int, int]:
    """Return (current_streak, longest_streak) in days.

    The current streak counts back from today and is 0 when nothing was
    completed today.
    """
    days = _completion_days(tasks)
    if not days:
        return 0, 0

    current = 0
    check = today
    while check in days:
        current += 1
        check -= timedelta(days=1)

    longest = 0
    run = 0
    previous = None
    for day in sorted(days):
        run = run + 1 if previous is not None and (day - previous).days == 1 else 1
        longest = max(longest, run)
        previous = day

    return current, longest


def _week_buckets(tasks: List[Task], now: datetime) -> List[PeriodBucket]:
    buckets = [PeriodBucket(day=label) for label in WEEKDAY_LABELS]
    week_start = start_of_week(now.date())
    for task in tasks:
        created = task.created_at.date()
        if created < week_start:
            continue
        index = (created.weekday() + 1) % 7
        buckets[index].total += 1
        if task.completed:
            buckets[index].completed += 1
    return buckets


def _month_buckets(tasks: List[Task], now: datetime) -> List[PeriodBucket]:
    days_in_month = calendar.monthrange(now.year, now.month)[1]
    buckets = [PeriodBucket(day=f"{i:02d}") for i in range(1, days_in_month + 1)]
    for task in tasks:
        created = task.created_at
        if created.year != now.year or created.month != now.month:
            continue
        bucket = buckets[created.day - 1]
        bucket.total += 1
        if task.completed:
            bucket.completed += 1
    return buckets


def _quarter_buckets(tasks: List[Task], now: datetime) -> List[PeriodBucket]:
    # W1 is the oldest week, W12 the week ending now
    buckets = [PeriodBucket(day=f"W{i}") for i in range(1, QUARTER_WEEK_BUCKETS + 1)]
    for task in tasks:
        weeks_ago = (now - task.created_at).days // 7
        if weeks_ago < 0 or weeks_ago >= QUARTER_WEEK_BUCKETS:
            continue
        bucket = buckets[QUARTER_WEEK_BUCKETS - 1 - weeks_ago]
        bucket.total += 1
        if task.completed:
            bucket.completed += 1
    return buckets


def compute_period_data(tasks: List[Task], period: str, now: datetime) -> List[PeriodBucket]:
    if period == "month":
        return _month_buckets(tasks, now)
    if period == "quarter":
        return _quarter_buckets(tasks, now)
    return _week_buckets(tasks, now)


def compute_task_stats(
    tasks: List[Task],
    period: str = DEFAULT_STATS_PERIOD,
    now: Optional[datetime] = None,
) -> TaskStats:
    """Compute statistics over a user's tasks.

    Args:
        tasks: All of the user's tasks
        period: "week", "month" or "quarter" (anything else is treated as week)
        now: Reference time (defaults to local now)

    Returns:
        TaskStats
    """
    if now is None:
        now = datetime.now()
    if period not in STATS_PERIODS:
        period = DEFAULT_STATS_PERIOD

    total = len(tasks)
    completed = sum(1 for task in tasks if task.completed)
    current_streak, longest_streak = calculate_streaks(tasks, now.date())
    week_start = start_of_week(now.date())

    return TaskStats(
        total=total,
        completed=completed,
        pending=total - completed,
        high_priority=sum(1 for task in tasks if task.priority == TaskPriority.HIGH),
        medium_priority=sum(1 for task in tasks if task.priority == TaskPriority.MEDIUM),
        low_priority=sum(1 for task in tasks if task.priority == TaskPriority.LOW),
        overdue=sum(
            1 for task in tasks
            if not task.completed and task.due_date is not None and is_overdue(task.due_date, now=now)
        ),
        completion_rate=int(completed * 100 / total + 0.5) if total else 0,
        current_streak=current_streak,
        longest_streak=longest_streak,
        period=period,
        period_data=compute_period_data(tasks, period, now),
        completed_today=sum(
            1 for task in tasks if task.completed and task.updated_at.date() == now.date()
        ),
        completed_this_week=sum(
            1 for task in tasks if task.completed and task.updated_at.date() >= week_start
        ),
    )
