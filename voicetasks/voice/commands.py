"""Voice command classification.

Classifies an utterance into one of the supported intents (add, delete,
complete, uncomplete, update, list, clear completed) and extracts the task
reference or new values it carries.

Two policies exist for utterances that match no pattern:
- fallback-to-add (default): treat the whole utterance as a new task, at
  low confidence, so every utterance still does something.
- report-unknown (``strict=True``): return an ``unknown`` command.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Dict, List, Optional

from voicetasks.models.constants import MIN_IDENTIFIER_LENGTH
from voicetasks.voice.datetime_detection import detect_datetime_from_text
from voicetasks.voice.task_phrase import parse_task_from_speech
from voicetasks.voice.types import CommandType, CommandUpdates, Confidence, ParsedCommand

logger = logging.getLogger(__name__)

_NOUN = r"(?:(?:task|todo|item)\s+)?"
_NAMED = r"(?:(?:called|named)\s+)?"
_COMPLETED_TASKS = r"(?:all\s+)?(?:the\s+)?(?:completed|finished|done)\s+(?:tasks|todos|items)"
_TRAILING = r"[.!?]?\s*$"


def _patterns(*sources: str) -> List[re.Pattern]:
    return [re.compile(source, re.I) for source in sources]


# Group order is the classification priority; the first group with a matching rule wins.
COMMAND_PATTERNS: Dict[CommandType, List[re.Pattern]] = {
    CommandType.ADD: _patterns(
        rf"^(?:add|create|new|make|save|remind me to|i need to|don'?t forget to|schedule)\s+(?:a\s+)?{_NOUN}(.+)",
        r"^(?:add|create|new|make)\s+(.+)",
    ),
    CommandType.DELETE: _patterns(
        rf"^(?:delete|remove|cancel|erase|get rid of)\s+(?!{_COMPLETED_TASKS}{_TRAILING})(?:the\s+)?{_NOUN}{_NAMED}(.+)",
        rf"^(?:delete|remove|cancel)\s+(?!{_COMPLETED_TASKS}{_TRAILING})(.+)",
    ),
    CommandType.COMPLETE: _patterns(
        rf"^(?:mark|set|check off)\s+(?:the\s+)?{_NOUN}{_NAMED}(.+?)\s+as\s+(?:done|complete|completed|finished){_TRAILING}",
        rf"^(?:complete|finish|done|mark as done|mark as complete|i (?:finished|completed))\s+(?:the\s+)?{_NOUN}{_NAMED}(.+)",
        r"^(?:complete|finish|done|check off)\s+(.+)",
    ),
    CommandType.UNCOMPLETE: _patterns(
        rf"^(?:mark|set)\s+(?:the\s+)?{_NOUN}{_NAMED}(.+?)\s+as\s+(?:not\s+done|not\s+completed?|incomplete|pending|undone|unfinished){_TRAILING}",
        rf"^(?:uncomplete|unfinish|mark as incomplete|mark as not done|reopen)\s+(?:the\s+)?{_NOUN}{_NAMED}(.+)",
    ),
    CommandType.UPDATE: _patterns(
        rf"^(?:rename|change the name of)\s+(?:the\s+)?{_NOUN}(.+?)\s+to\s+(.+)",
        rf"^(?:update|change|modify|edit|postpone|reschedule)\s+(?:the\s+)?{_NOUN}{_NAMED}(.+?)\s+to\s+(.+)",
    ),
    CommandType.LIST: _patterns(
        r"^(?:show|list|display|what are|tell me)\s+(?:me\s+)?(?:all\s+)?(?:of\s+)?(?:my\s+)?(?:tasks|todos|items)",
        r"^(?:what do i have to do|what'?s on my list)",
    ),
    CommandType.CLEAR_COMPLETED: _patterns(
        rf"^(?:clear|delete|remove)\s+{_COMPLETED_TASKS}",
    ),
}

_IDENTIFIER_COMMANDS = (CommandType.DELETE, CommandType.COMPLETE, CommandType.UNCOMPLETE)

_QUOTES = "'\"‘’“”"


def clean_spoken_value(value: Optional[str]) -> str:
    """Trim whitespace, end punctuation and surrounding quotes from a captured value."""
    value = (value or "").strip().rstrip(".!?").strip()
    return value.strip(_QUOTES).strip()


def _parse_add(speech: str, now: Optional[datetime], confidence: Optional[Confidence] = None) -> ParsedCommand:
    parsed = parse_task_from_speech(speech, now=now)
    return ParsedCommand(
        type=CommandType.ADD,
        task_name=parsed.task_name,
        updates=CommandUpdates(title=parsed.task_name, priority=parsed.priority, deadline=parsed.deadline),
        confidence=confidence or parsed.confidence,
        original_text=speech,
    )


def _parse_update(speech: str, identifier: str, new_value: str, now: Optional[datetime]) -> ParsedCommand:
    datetime_result = detect_datetime_from_text(new_value, now=now)
    if datetime_result.detected_date is not None and datetime_result.confidence in (Confidence.HIGH, Confidence.MEDIUM):
        updates = CommandUpdates(deadline=datetime_result.detected_date)
    else:
        updates = CommandUpdates(title=new_value)
    return ParsedCommand(
        type=CommandType.UPDATE,
        task_identifier=identifier,
        updates=updates,
        confidence=Confidence.HIGH,
        original_text=speech,
    )


def _match_group(command_type: CommandType, speech: str, now: Optional[datetime]) -> Optional[ParsedCommand]:
    for pattern in COMMAND_PATTERNS[command_type]:
        m = pattern.match(speech)
        if not m:
            continue

        if command_type == CommandType.ADD:
            if len(m.group(1).strip()) >= MIN_IDENTIFIER_LENGTH:
                return _parse_add(speech, now)
        elif command_type in _IDENTIFIER_COMMANDS:
            identifier = clean_spoken_value(m.group(1))
            if len(identifier) >= MIN_IDENTIFIER_LENGTH:
                return ParsedCommand(
                    type=command_type,
                    task_identifier=identifier,
                    confidence=Confidence.HIGH,
                    original_text=speech,
                )
        elif command_type == CommandType.UPDATE:
            identifier = clean_spoken_value(m.group(1))
            new_value = clean_spoken_value(m.group(2))
            if len(identifier) >= MIN_IDENTIFIER_LENGTH and len(new_value) >= MIN_IDENTIFIER_LENGTH:
                return _parse_update(speech, identifier, new_value, now)
        else:
            return ParsedCommand(type=command_type, confidence=Confidence.HIGH, original_text=speech)
    return None


def parse_voice_command(speech: str, *, strict: bool = False, now: Optional[datetime] = None) -> ParsedCommand:
    """Classify a transcript into a structured command.

    Args:
        speech: Raw transcript
        strict: Report unmatched utterances as ``unknown`` instead of
            treating them as a new task
        now: Reference time for date parsing (defaults to local now)

    Returns:
        ParsedCommand; never raises for unrecognized text
    """
    speech = (speech or "").strip()

    for command_type in COMMAND_PATTERNS:
        command = _match_group(command_type, speech, now)
        if command is not None:
            logger.debug(f"Classified voice command as {command.type.value}: {speech[:50]}")
            return command

    if strict:
        logger.debug(f"Unrecognized voice command: {speech[:50]}")
        return ParsedCommand(type=CommandType.UNKNOWN, confidence=Confidence.LOW, original_text=speech)

    return _parse_add(speech, now, confidence=Confidence.LOW)


class VoiceCommandParser:
    """Intent parser bound to one unmatched-utterance policy."""

    def __init__(self, strict: bool = False):
        self.strict = strict

    def parse(self, speech: str, *, now: Optional[datetime] = None) -> ParsedCommand:
        return parse_voice_command(speech, strict=self.strict, now=now)
