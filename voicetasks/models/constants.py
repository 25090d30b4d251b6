"""Constants for voicetasks.

This module centralizes all magic numbers and default values used throughout the application.
"""

from voicetasks.models.task import TaskPriority, ReminderType


# Task defaults
DEFAULT_PRIORITY = TaskPriority.MEDIUM
DEFAULT_REMINDER_ENABLED = True
DEFAULT_REMINDER_TYPE = ReminderType.DEFAULT

# Category defaults
DEFAULT_CATEGORY_COLOR = "#3B82F6"
HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"
CATEGORY_NAME_MAX_LENGTH = 100

# Reminder time of day ("HH:MM", 24-hour)
REMINDER_TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"

# Voice commands
NO_CATEGORY = "none"  # Ambient category sentinel for "no category selected"
MIN_TASK_NAME_LENGTH = 2
MIN_IDENTIFIER_LENGTH = 2
OUTCOME_TITLE_PREVIEW_LENGTH = 40

# Fuzzy identifier matching
FUZZY_MIN_TOKEN_LENGTH = 3  # Tokens of 2 characters or fewer are ignored
FUZZY_MAX_EDIT_DISTANCE = 1
FUZZY_MIN_OVERLAP_RATIO = 0.5

# Statistics
STATS_PERIODS = ("week", "month", "quarter")
DEFAULT_STATS_PERIOD = "week"
QUARTER_WEEK_BUCKETS = 12

# Deadline reminders
REMINDER_LOOKAHEAD_HOURS = 24  # Default reminders consider deadlines within +/- this window
DEFAULT_REMINDER_LEAD_HOURS = 2
MORNING_REMINDER_HOUR = 8
REMINDER_WINDOW_MINUTES = 30  # Morning and manual reminders fire within this many minutes
