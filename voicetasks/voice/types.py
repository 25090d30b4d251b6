"""Transient results produced by the voice parsing pipeline.

None of these are persisted: they are created per utterance and discarded
once the command has been executed.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from voicetasks.models.task import TaskPriority


class Confidence(str, Enum):
    """How certain a pattern match is."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class CommandType(str, Enum):
    """Classified intent of a voice utterance."""
    ADD = "add"
    DELETE = "delete"
    COMPLETE = "complete"
    UNCOMPLETE = "uncomplete"
    UPDATE = "update"
    LIST = "list"
    CLEAR_COMPLETED = "clear_completed"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class DetectedTime:
    hour: int
    minute: int


@dataclass(frozen=True)
class TimeDetectionResult:
    detected_time: Optional[DetectedTime]
    time_text: str
    confidence: Confidence
    original_text: str


@dataclass(frozen=True)
class DateDetectionResult:
    detected_date: Optional[datetime]
    date_text: str
    time_text: str
    confidence: Confidence
    original_text: str
    cleaned_text: str  # original_text with the matched date/time phrases removed


@dataclass(frozen=True)
class ParsedTask:
    task_name: str
    deadline: Optional[datetime]
    priority: TaskPriority
    confidence: Confidence


class CommandUpdates(BaseModel):
    """Field values carried by add/update commands."""

    title: Optional[str] = Field(None, description="New or parsed task title")
    priority: Optional[TaskPriority] = Field(None, description="Parsed priority (add only)")
    deadline: Optional[datetime] = Field(None, description="Parsed or new deadline")

    class Config:
        """Pydantic configuration."""
        frozen = True


class ParsedCommand(BaseModel):
    """Structured intent extracted from a single utterance."""

    type: CommandType = Field(..., description="Classified command intent")
    task_name: Optional[str] = Field(None, description="Task name for add commands")
    task_identifier: Optional[str] = Field(
        None, description="Free-text reference to an existing task (delete/complete/uncomplete/update)"
    )
    updates: Optional[CommandUpdates] = Field(None, description="Field values for add/update commands")
    confidence: Confidence = Field(Confidence.LOW, description="Overall parse confidence")
    original_text: str = Field("", description="Transcript as received")

    class Config:
        """Pydantic configuration."""
        frozen = True

    @property
    def is_deadline_change(self) -> bool:
        return (
            self.type == CommandType.UPDATE
            and self.updates is not None
            and self.updates.deadline is not None
            and self.updates.title is None
        )
