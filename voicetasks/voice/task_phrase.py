"""Turn a spoken "add" request into a clean task title, deadline and priority."""

from __future__ import annotations

import re
from datetime import datetime
from typing import List, Optional, Tuple

from voicetasks.models.constants import MIN_TASK_NAME_LENGTH
from voicetasks.voice.datetime_detection import detect_datetime_from_text
from voicetasks.voice.priority import (
    HIGH_PRIORITY_KEYWORDS,
    LOW_PRIORITY_KEYWORDS,
    detect_priority,
)
from voicetasks.voice.types import ParsedTask


# Longest first so "low priority" is removed before "priority".
_PRIORITY_WORD_PATTERNS: List[re.Pattern] = [
    re.compile(rf"\b{re.escape(word)}\b", re.I)
    for word in sorted(HIGH_PRIORITY_KEYWORDS + LOW_PRIORITY_KEYWORDS, key=len, reverse=True)
]

_CLEANUP_RULES: List[Tuple[re.Pattern, str]] = [
    (re.compile(r"^[\s:;,.!?\-]+|[\s:;,.!?\-]+$"), ""),
    (re.compile(
        r"^(?:add|create|new|make|save|remind me to|i need to|don'?t forget to|schedule|plan|note|write down)\s+",
        re.I,
    ), ""),
    (re.compile(r"^(?:a\s+)?(?:task|todo|item)\s+", re.I), ""),
    (re.compile(r"\s+(?:task|todo|item)$", re.I), ""),
    (re.compile(r"\s+to\s+my\s+(?:task\s+list|tasks|todo\s+list)$", re.I), ""),
    (re.compile(r"\s+by\s*$", re.I), ""),
    (re.compile(r"\s+next\s*$", re.I), ""),
    (re.compile(r"\s+o'clock\s*$", re.I), ""),
    (re.compile(r"\s+"), " "),
]

_FALLBACK_VERB = re.compile(r"^(?:add|create|new|make|save)\s+", re.I)


def strip_priority_words(text: str) -> str:
    for pattern in _PRIORITY_WORD_PATTERNS:
        text = pattern.sub("", text)
    return re.sub(r"\s+", " ", text).strip()


def clean_task_name(text: str) -> str:
    """Strip command verbs and filler words from the edges of a task phrase.

    Rules are re-applied until the text stops changing, so cleaning an
    already-clean name is a no-op.
    """
    previous = None
    name = text.strip()
    while name != previous:
        previous = name
        for pattern, replacement in _CLEANUP_RULES:
            name = pattern.sub(replacement, name)
        name = name.strip()
    return name


def parse_task_from_speech(speech: str, *, now: Optional[datetime] = None) -> ParsedTask:
    """Extract task name, deadline and priority from a spoken request.

    Example: "Add task call John tomorrow at 5 PM" ->
    name "call John", deadline tomorrow 17:00, priority medium.
    """
    speech = speech or ""
    datetime_result = detect_datetime_from_text(speech, now=now)
    priority = detect_priority(speech)

    # Only the first detection sets the deadline; later date/time phrases
    # are still stripped so a cleaned name re-parses to itself.
    task_name = clean_task_name(strip_priority_words(datetime_result.cleaned_text))
    previous = None
    while task_name != previous:
        previous = task_name
        remaining = detect_datetime_from_text(task_name, now=now)
        task_name = clean_task_name(strip_priority_words(remaining.cleaned_text))

    if len(task_name) < MIN_TASK_NAME_LENGTH:
        task_name = _FALLBACK_VERB.sub("", speech.strip()).strip()

    return ParsedTask(
        task_name=task_name,
        deadline=datetime_result.detected_date,
        priority=priority,
        confidence=datetime_result.confidence,
    )
