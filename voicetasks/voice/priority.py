"""Keyword-based priority detection for spoken task input."""

from typing import Tuple

from voicetasks.models.task import TaskPriority


HIGH_PRIORITY_KEYWORDS: Tuple[str, ...] = (
    "urgent", "asap", "immediately", "emergency", "critical", "important",
    "deadline", "rush", "priority", "crucial", "vital", "essential",
)

LOW_PRIORITY_KEYWORDS: Tuple[str, ...] = (
    "later", "eventually", "sometime", "when possible", "no rush",
    "low priority", "optional", "if time permits", "nice to have",
)


def detect_priority(text: str) -> TaskPriority:
    """Classify urgency from keywords in the text.

    High-priority keywords win over low-priority ones when both occur
    (so "no rush" still reads as high because it contains "rush").
    Text with neither is medium.
    """
    lower_text = (text or "").lower()

    if any(word in lower_text for word in HIGH_PRIORITY_KEYWORDS):
        return TaskPriority.HIGH
    if any(word in lower_text for word in LOW_PRIORITY_KEYWORDS):
        return TaskPriority.LOW
    return TaskPriority.MEDIUM
