"""Voice command pipeline for voicetasks."""

from voicetasks.voice.types import CommandType, CommandUpdates, Confidence, ParsedCommand, ParsedTask
from voicetasks.voice.datetime_detection import (
    detect_time_from_text,
    detect_date_from_text,
    detect_datetime_from_text,
    format_relative_date,
    get_days_until_due,
    is_overdue,
)
from voicetasks.voice.priority import detect_priority
from voicetasks.voice.task_phrase import parse_task_from_speech
from voicetasks.voice.commands import parse_voice_command, VoiceCommandParser
from voicetasks.voice.resolver import find_task_by_identifier
from voicetasks.voice.executor import (
    CommandExecutor,
    CommandOutcome,
    OutcomeVariant,
    TaskCreateFields,
    TaskStorage,
    VoiceOptions,
    execute_command,
)

__all__ = [
    "CommandType",
    "CommandUpdates",
    "Confidence",
    "ParsedCommand",
    "ParsedTask",
    "detect_time_from_text",
    "detect_date_from_text",
    "detect_datetime_from_text",
    "format_relative_date",
    "get_days_until_due",
    "is_overdue",
    "detect_priority",
    "parse_task_from_speech",
    "parse_voice_command",
    "VoiceCommandParser",
    "find_task_by_identifier",
    "CommandExecutor",
    "CommandOutcome",
    "OutcomeVariant",
    "TaskCreateFields",
    "TaskStorage",
    "VoiceOptions",
    "execute_command",
]
