"""Date and time detection for spoken task input.

Converts casual phrases ("tomorrow at 5 pm", "next friday", "in 3 days",
"monday noon") into concrete deadlines. It is deterministic: the same text
and the same `now` always produce the same result. Nothing here raises on
unrecognized input; a miss is reported as `detected_date=None` with low
confidence.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from voicetasks.voice.types import (
    Confidence,
    DateDetectionResult,
    DetectedTime,
    TimeDetectionResult,
)


# --- time of day -----------------------------------------------------------

@dataclass(frozen=True)
class _TimeRule:
    pattern: re.Pattern
    parse: Callable[[re.Match], Optional[DetectedTime]]
    confidence: Confidence


def _to_24h(hour: int, ampm: str) -> int:
    if ampm == "pm" and hour != 12:
        return hour + 12
    if ampm == "am" and hour == 12:
        return 0
    return hour


def _parse_12h_with_minutes(m: re.Match) -> Optional[DetectedTime]:
    hour, minute = int(m.group(1)), int(m.group(2))
    if 1 <= hour <= 12 and 0 <= minute <= 59:
        return DetectedTime(_to_24h(hour, m.group(3).lower()), minute)
    return None


def _parse_12h(m: re.Match) -> Optional[DetectedTime]:
    hour = int(m.group(1))
    if 1 <= hour <= 12:
        return DetectedTime(_to_24h(hour, m.group(2).lower()), 0)
    return None


def _parse_24h(m: re.Match) -> Optional[DetectedTime]:
    hour, minute = int(m.group(1)), int(m.group(2))
    if 0 <= hour <= 23 and 0 <= minute <= 59:
        return DetectedTime(hour, minute)
    return None


def _parse_bare_hour(m: re.Match) -> Optional[DetectedTime]:
    hour = int(m.group(1))
    if 0 <= hour <= 23:
        return DetectedTime(hour, 0)
    return None


def _parse_oclock(m: re.Match) -> Optional[DetectedTime]:
    hour = int(m.group(1))
    if 1 <= hour <= 12:
        return DetectedTime(hour, 0)
    return None


def _fixed(hour: int) -> Callable[[re.Match], DetectedTime]:
    return lambda _m: DetectedTime(hour, 0)


# Order matters: the first rule producing a valid time wins.
_TIME_RULES: List[_TimeRule] = [
    _TimeRule(re.compile(r"\b(?:at\s+)?(\d{1,2}):(\d{2})\s*(am|pm)\b", re.I), _parse_12h_with_minutes, Confidence.HIGH),
    _TimeRule(re.compile(r"\b(?:at\s+)?(\d{1,2})\s*(am|pm)\b", re.I), _parse_12h, Confidence.HIGH),
    _TimeRule(re.compile(r"\b(?:at\s+)?(\d{1,2}):(\d{2})\b", re.I), _parse_24h, Confidence.MEDIUM),
    _TimeRule(re.compile(r"\bat\s+(\d{1,2})\b", re.I), _parse_bare_hour, Confidence.MEDIUM),
    _TimeRule(re.compile(r"\b(?:at\s+)?(?:noon|midday)\b", re.I), _fixed(12), Confidence.HIGH),
    _TimeRule(re.compile(r"\bmidnight\b", re.I), _fixed(0), Confidence.HIGH),
    _TimeRule(re.compile(r"\btonight\b", re.I), _fixed(20), Confidence.MEDIUM),
    _TimeRule(re.compile(r"\b(?:in\s+the\s+)?morning\b", re.I), _fixed(9), Confidence.MEDIUM),
    _TimeRule(re.compile(r"\b(?:in\s+the\s+)?afternoon\b", re.I), _fixed(14), Confidence.MEDIUM),
    _TimeRule(re.compile(r"\b(?:in\s+the\s+)?evening\b", re.I), _fixed(18), Confidence.MEDIUM),
    _TimeRule(re.compile(r"\b(?:at\s+)?(\d{1,2})\s*o'?clock\b", re.I), _parse_oclock, Confidence.HIGH),
]


def detect_time_from_text(text: str) -> TimeDetectionResult:
    """Detect a clock time in free text.

    Returns the first rule whose match yields a valid hour/minute. A match
    with out-of-range numbers (e.g. "13 pm") is ignored and the next rule is
    tried.
    """
    lower_text = (text or "").lower()
    for rule in _TIME_RULES:
        m = rule.pattern.search(lower_text)
        if not m:
            continue
        detected = rule.parse(m)
        if detected is not None:
            return TimeDetectionResult(
                detected_time=detected,
                time_text=m.group(0),
                confidence=rule.confidence,
                original_text=text,
            )

    return TimeDetectionResult(detected_time=None, time_text="", confidence=Confidence.LOW, original_text=text)


# --- calendar date ---------------------------------------------------------

@dataclass(frozen=True)
class _DateRule:
    pattern: re.Pattern
    confidence: Confidence
    days: Optional[int] = None        # fixed offset from today
    weekday: Optional[int] = None     # target weekday (Monday=0)
    next_week: bool = False           # push weekday/weekend target one more week
    extract_days: bool = False        # "in N days": offset captured in group 2
    weekend: bool = False             # upcoming Saturday


def _weekday_rule(phrase: str, weekday: int, *, next_week: bool = False) -> _DateRule:
    return _DateRule(re.compile(rf"\b({phrase})\b", re.I), Confidence.HIGH, weekday=weekday, next_week=next_week)


# More specific multi-word phrases must come before the generic ones they contain.
_DATE_RULES: List[_DateRule] = [
    _DateRule(re.compile(r"\b(day after tomorrow)\b", re.I), Confidence.HIGH, days=2),
    _DateRule(re.compile(r"\b(by the end of the week|end of the week)\b", re.I), Confidence.MEDIUM, weekday=4),
    _DateRule(re.compile(r"\b(beginning of next week)\b", re.I), Confidence.MEDIUM, weekday=0, next_week=True),

    _DateRule(re.compile(r"\b(today|this afternoon|this evening|tonight)\b", re.I), Confidence.HIGH, days=0),
    _DateRule(re.compile(r"\b(tomorrow|tmrw|tom)\b", re.I), Confidence.HIGH, days=1),
    _DateRule(re.compile(r"\b(yesterday)\b", re.I), Confidence.HIGH, days=-1),

    _weekday_rule("next monday", 0, next_week=True),
    _weekday_rule("next tuesday|next tues", 1, next_week=True),
    _weekday_rule("next wednesday|next wed", 2, next_week=True),
    _weekday_rule("next thursday|next thurs", 3, next_week=True),
    _weekday_rule("next friday|next fri", 4, next_week=True),
    _weekday_rule("next saturday|next sat", 5, next_week=True),
    _weekday_rule("next sunday|next sun", 6, next_week=True),

    _weekday_rule("this monday|monday", 0),
    _weekday_rule("this tuesday|tuesday|tues", 1),
    _weekday_rule("this wednesday|wednesday|wed", 2),
    _weekday_rule("this thursday|thursday|thurs", 3),
    _weekday_rule("this friday|friday|fri", 4),
    _weekday_rule("this saturday|saturday|sat", 5),
    _weekday_rule("this sunday|sunday|sun", 6),

    _DateRule(re.compile(r"\b(next weekend)\b", re.I), Confidence.MEDIUM, weekend=True, next_week=True),
    _DateRule(re.compile(r"\b(this weekend)\b", re.I), Confidence.MEDIUM, weekend=True),

    _DateRule(re.compile(r"\b(next week)\b", re.I), Confidence.MEDIUM, days=7),
    _DateRule(re.compile(r"\b(in (\d+) days?)\b", re.I), Confidence.HIGH, extract_days=True),
    _DateRule(re.compile(r"\b(in a week)\b", re.I), Confidence.MEDIUM, days=7),
    _DateRule(re.compile(r"\b(in two weeks?)\b", re.I), Confidence.MEDIUM, days=14),
]


def end_of_day(value: datetime) -> datetime:
    """Normalize a datetime to 23:59:59.999 on the same day (deadline semantics)."""
    return value.replace(hour=23, minute=59, second=59, microsecond=999000)


def _resolve_offset(rule: _DateRule, m: re.Match, now: datetime) -> int:
    """Number of days from `now` to the date a rule refers to."""
    if rule.days is not None:
        return rule.days
    if rule.weekday is not None:
        days_until = rule.weekday - now.weekday()
        if days_until <= 0:
            days_until += 7  # next occurrence, never today
        if rule.next_week:
            days_until += 7
        return days_until
    if rule.extract_days:
        return int(m.group(2))
    if rule.weekend:
        days_until_saturday = (5 - now.weekday()) % 7
        return days_until_saturday + (7 if rule.next_week else 0)
    return 0


def _remove_phrases(text: str, phrases: List[str]) -> str:
    cleaned = text
    for phrase in phrases:
        if phrase:
            cleaned = re.sub(re.escape(phrase), "", cleaned, flags=re.I)
    return re.sub(r"\s+", " ", cleaned).strip()


def _remove_first_match(text: str, pattern: re.Pattern) -> str:
    """Remove only the first whole-word match of a date rule."""
    return re.sub(r"\s+", " ", pattern.sub("", text, count=1)).strip()


def _no_date(text: str) -> DateDetectionResult:
    return DateDetectionResult(
        detected_date=None,
        date_text="",
        time_text="",
        confidence=Confidence.LOW,
        original_text=text,
        cleaned_text=text,
    )


def detect_date_from_text(text: str, *, now: Optional[datetime] = None) -> DateDetectionResult:
    """Detect a calendar date in free text.

    The first high-confidence rule that matches wins immediately. If no
    high-confidence rule matches, the first lower-confidence match is used.
    Resolved dates are set to end of day.
    """
    now = now or datetime.now()
    lower_text = (text or "").lower()

    fallback: Optional[DateDetectionResult] = None
    for rule in _DATE_RULES:
        m = rule.pattern.search(lower_text)
        if not m:
            continue
        target = end_of_day(now + timedelta(days=_resolve_offset(rule, m, now)))
        result = DateDetectionResult(
            detected_date=target,
            date_text=m.group(0),
            time_text="",
            confidence=rule.confidence,
            original_text=text,
            cleaned_text=_remove_first_match(text, rule.pattern),
        )
        if rule.confidence == Confidence.HIGH:
            return result
        if fallback is None:
            fallback = result

    return fallback or _no_date(text)


def detect_datetime_from_text(text: str, *, now: Optional[datetime] = None) -> DateDetectionResult:
    """Detect a combined date and time, e.g. "tomorrow at 5 pm".

    - Date and time: the date's day with the time's hour/minute.
    - Date only: end of that day.
    - Time only: today at that time, even if it has already passed.
    """
    now = now or datetime.now()
    date_result = detect_date_from_text(text, now=now)
    time_result = detect_time_from_text(text)
    detected_time = time_result.detected_time

    if date_result.detected_date is None and detected_time is None:
        return _no_date(text)

    if date_result.detected_date is not None and detected_time is not None:
        final_date = date_result.detected_date.replace(
            hour=detected_time.hour, minute=detected_time.minute, second=0, microsecond=0
        )
        both_high = date_result.confidence == Confidence.HIGH and time_result.confidence == Confidence.HIGH
        confidence = Confidence.HIGH if both_high else Confidence.MEDIUM
        time_text = time_result.time_text
        cleaned_text = _remove_phrases(text, [date_result.date_text, time_text])
    elif date_result.detected_date is not None:
        final_date = date_result.detected_date
        confidence = date_result.confidence
        time_text = ""
        cleaned_text = date_result.cleaned_text
    else:
        final_date = now.replace(hour=detected_time.hour, minute=detected_time.minute, second=0, microsecond=0)
        confidence = time_result.confidence
        time_text = time_result.time_text
        cleaned_text = _remove_phrases(text, [time_text])

    return DateDetectionResult(
        detected_date=final_date,
        date_text=date_result.date_text,
        time_text=time_text,
        confidence=confidence,
        original_text=text,
        cleaned_text=cleaned_text,
    )


def format_relative_date(value: datetime, *, now: Optional[datetime] = None) -> str:
    """Human-friendly label for a deadline ("Today", "Tomorrow", "In 3 days", "Oct 21")."""
    now = now or datetime.now()
    diff_days = (value.date() - now.date()).days

    if diff_days == 0:
        return "Today"
    if diff_days == 1:
        return "Tomorrow"
    if diff_days == -1:
        return "Yesterday"
    if 1 < diff_days <= 7:
        return f"In {diff_days} days"
    if -7 <= diff_days < -1:
        return f"{abs(diff_days)} days ago"
    label = f"{value.strftime('%b')} {value.day}"
    if value.year != now.year:
        label += f", {value.year}"
    return label


def is_overdue(value: datetime, *, now: Optional[datetime] = None) -> bool:
    return value < (now or datetime.now())


def get_days_until_due(value: datetime, *, now: Optional[datetime] = None) -> int:
    """Whole days left until a deadline, rounded up (negative once overdue by a day or more)."""
    remaining = value - (now or datetime.now())
    return math.ceil(remaining.total_seconds() / 86400)
