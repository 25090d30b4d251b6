"""Voice command execution.

Takes a transcript, classifies it, resolves any referenced task against the
caller's task snapshot and performs the matching storage operation. Every
call ends in a CommandOutcome for the notification layer; storage errors
are reported as an outcome and never propagate.
"""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Protocol, Sequence

from pydantic import BaseModel, Field

from voicetasks.models.constants import (
    MIN_TASK_NAME_LENGTH,
    NO_CATEGORY,
    OUTCOME_TITLE_PREVIEW_LENGTH,
    REMINDER_TIME_PATTERN,
)
from voicetasks.models.task import ReminderType, Task, TaskPriority
from voicetasks.voice.commands import VoiceCommandParser
from voicetasks.voice.datetime_detection import format_relative_date
from voicetasks.voice.resolver import find_task_by_identifier
from voicetasks.voice.task_phrase import parse_task_from_speech
from voicetasks.voice.types import CommandType, ParsedCommand

logger = logging.getLogger(__name__)


class TaskCreateFields(BaseModel):
    """Fields sent to storage when a voice command creates a task."""

    title: str = Field(..., min_length=1, description="Task title")
    description: Optional[str] = Field(None, description="Task description")
    priority: TaskPriority = Field(TaskPriority.MEDIUM, description="Task priority")
    category_id: Optional[str] = Field(None, description="Category ID")
    due_date: Optional[datetime] = Field(None, description="Task deadline")
    reminder_enabled: bool = Field(True, description="Whether reminders are enabled")
    reminder_type: ReminderType = Field(ReminderType.DEFAULT, description="Reminder scheduling mode")
    reminder_time: Optional[str] = Field(None, description="Manual reminder time (HH:MM)")


class TaskStorage(Protocol):
    """Task mutations the executor needs. Implementations may raise on failure."""

    async def create(self, fields: TaskCreateFields) -> Task:
        ...

    async def update(self, task_id: str, patch: Dict[str, Any]) -> Task:
        ...

    async def delete(self, task_id: str) -> None:
        ...


class VoiceOptions(BaseModel):
    """Ambient selections made in the UI alongside a recording."""

    category_id: str = Field(NO_CATEGORY, description='Selected category ID, or "none"')
    deadline: Optional[datetime] = Field(None, description="Manually picked deadline; overrides a spoken one")
    reminder_enabled: bool = Field(True, description="Enable reminders on created tasks")
    reminder_type: ReminderType = Field(ReminderType.DEFAULT, description="Reminder mode for created tasks")
    reminder_time: str = Field("09:00", pattern=REMINDER_TIME_PATTERN, description="Manual reminder time (HH:MM)")


class OutcomeVariant(str, Enum):
    NORMAL = "normal"
    DESTRUCTIVE = "destructive"


class CommandOutcome(BaseModel):
    """User-facing result of executing one voice command."""

    title: str = Field(..., description="Short headline")
    description: str = Field(..., description="Longer explanation")
    variant: OutcomeVariant = Field(OutcomeVariant.NORMAL, description="Severity flag")
    command_type: Optional[CommandType] = Field(None, description="Classified intent, if any")
    task_id: Optional[str] = Field(None, description="Task created or changed")
    affected_count: int = Field(0, description="Number of tasks mutated")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True


def _failure(title: str, description: str, command_type: Optional[CommandType] = None) -> CommandOutcome:
    return CommandOutcome(
        title=title,
        description=description,
        variant=OutcomeVariant.DESTRUCTIVE,
        command_type=command_type,
    )


def _not_found(command: ParsedCommand) -> CommandOutcome:
    return _failure("Task Not Found", f'Could not find task "{command.task_identifier}"', command.type)


def _preview(title: str) -> str:
    if len(title) > OUTCOME_TITLE_PREVIEW_LENGTH:
        return title[:OUTCOME_TITLE_PREVIEW_LENGTH] + "..."
    return title


_MISSING_IDENTIFIER = {
    CommandType.DELETE: "Please specify which task to delete.",
    CommandType.COMPLETE: "Please specify which task to complete.",
    CommandType.UNCOMPLETE: "Please specify which task to reopen.",
}


class CommandExecutor:
    """Runs voice commands against an injected task storage."""

    def __init__(
        self,
        storage: TaskStorage,
        *,
        parser: Optional[VoiceCommandParser] = None,
        fuzzy_matching: bool = False,
    ):
        self.storage = storage
        self.parser = parser or VoiceCommandParser()
        self.fuzzy_matching = fuzzy_matching

    async def execute(
        self,
        transcript: str,
        tasks: Sequence[Task],
        options: Optional[VoiceOptions] = None,
        *,
        now: Optional[datetime] = None,
    ) -> CommandOutcome:
        """Classify and execute a transcript.

        Args:
            transcript: Speech recognition result
            tasks: Current task snapshot used for identifier resolution (not modified)
            options: Ambient UI selections (defaults applied when None)
            now: Reference time for date parsing

        Returns:
            CommandOutcome describing what happened
        """
        if not (transcript or "").strip():
            return _failure("No Voice Input", "Please speak a command.")

        options = options or VoiceOptions()
        command = self.parser.parse(transcript, now=now)

        try:
            if command.type == CommandType.ADD:
                return await self._add(transcript, options, now)
            if command.type in _MISSING_IDENTIFIER:
                return await self._change(command, tasks)
            if command.type == CommandType.UPDATE:
                return await self._rename(command, tasks)
            if command.type == CommandType.LIST:
                return self._list(tasks)
            if command.type == CommandType.CLEAR_COMPLETED:
                return await self._clear_completed(tasks)
        except Exception as e:
            logger.error(f"Voice command failed ({command.type.value}): {type(e).__name__}: {str(e)}")
            return _failure("Error", "Failed to execute command. Please try again.", command.type)

        return _failure(
            "Unknown Command",
            "I didn't understand that command. Try 'add', 'delete', 'complete', or 'list tasks'.",
            command.type,
        )

    def _find(self, tasks: Sequence[Task], identifier: str) -> Optional[Task]:
        return find_task_by_identifier(tasks or [], identifier, fuzzy=self.fuzzy_matching)

    async def _add(self, transcript: str, options: VoiceOptions, now: Optional[datetime]) -> CommandOutcome:
        # Re-parse the whole transcript; the classifier's capture may be narrower.
        parsed = parse_task_from_speech(transcript, now=now)
        if len(parsed.task_name) < MIN_TASK_NAME_LENGTH:
            return _failure(
                "Invalid Task",
                "Could not understand the task name. Please try again.",
                CommandType.ADD,
            )

        deadline = options.deadline or parsed.deadline
        fields = TaskCreateFields(
            title=parsed.task_name,
            priority=parsed.priority,
            category_id=options.category_id if options.category_id and options.category_id != NO_CATEGORY else None,
            due_date=deadline,
            reminder_enabled=options.reminder_enabled,
            reminder_type=options.reminder_type,
            reminder_time=options.reminder_time if options.reminder_type == ReminderType.MANUAL else None,
        )
        task = await self.storage.create(fields)
        logger.debug(f"Voice command created task {task.id}")

        description = f'Added "{_preview(parsed.task_name)}"'
        if deadline is not None:
            description += f" (due {format_relative_date(deadline, now=now)})"
        return CommandOutcome(
            title="Task Created",
            description=description,
            command_type=CommandType.ADD,
            task_id=task.id,
            affected_count=1,
        )

    async def _change(self, command: ParsedCommand, tasks: Sequence[Task]) -> CommandOutcome:
        if not command.task_identifier:
            return _failure("Error", _MISSING_IDENTIFIER[command.type], command.type)

        task = self._find(tasks, command.task_identifier)
        if task is None:
            return _not_found(command)

        if command.type == CommandType.DELETE:
            await self.storage.delete(task.id)
            title, description = "Task Deleted", f'Deleted "{task.title}"'
        elif command.type == CommandType.COMPLETE:
            await self.storage.update(task.id, {"completed": True})
            title, description = "Task Completed", f'Marked "{task.title}" as complete'
        else:
            await self.storage.update(task.id, {"completed": False})
            title, description = "Task Reopened", f'Reopened "{task.title}"'

        logger.debug(f"Voice command {command.type.value} applied to task {task.id}")
        return CommandOutcome(
            title=title,
            description=description,
            command_type=command.type,
            task_id=task.id,
            affected_count=1,
        )

    async def _rename(self, command: ParsedCommand, tasks: Sequence[Task]) -> CommandOutcome:
        new_title = command.updates.title if command.updates else None
        if not command.task_identifier or not new_title:
            return _failure("Error", "Please specify the task and new name.", CommandType.UPDATE)

        task = self._find(tasks, command.task_identifier)
        if task is None:
            return _not_found(command)

        await self.storage.update(task.id, {"title": new_title})
        logger.debug(f"Voice command renamed task {task.id}")
        return CommandOutcome(
            title="Task Updated",
            description=f'Renamed to "{new_title}"',
            command_type=CommandType.UPDATE,
            task_id=task.id,
            affected_count=1,
        )

    def _list(self, tasks: Sequence[Task]) -> CommandOutcome:
        tasks = tasks or []
        completed_count = sum(1 for task in tasks if task.completed)
        pending_count = len(tasks) - completed_count
        return CommandOutcome(
            title="Your Tasks",
            description=f"You have {pending_count} pending and {completed_count} completed tasks.",
            command_type=CommandType.LIST,
        )

    async def _clear_completed(self, tasks: Sequence[Task]) -> CommandOutcome:
        completed_tasks = [task for task in (tasks or []) if task.completed]
        if not completed_tasks:
            return CommandOutcome(
                title="No Completed Tasks",
                description="There are no completed tasks to clear.",
                command_type=CommandType.CLEAR_COMPLETED,
            )

        for task in completed_tasks:
            await self.storage.delete(task.id)

        logger.debug(f"Voice command cleared {len(completed_tasks)} completed tasks")
        return CommandOutcome(
            title="Completed Tasks Cleared",
            description=f"Deleted {len(completed_tasks)} completed tasks",
            command_type=CommandType.CLEAR_COMPLETED,
            affected_count=len(completed_tasks),
        )


async def execute_command(
    transcript: str,
    tasks: Sequence[Task],
    options: Optional[VoiceOptions],
    storage: TaskStorage,
    *,
    strict: bool = False,
    fuzzy_matching: bool = False,
    now: Optional[datetime] = None,
) -> CommandOutcome:
    """One-shot helper around CommandExecutor."""
    executor = CommandExecutor(storage, parser=VoiceCommandParser(strict=strict), fuzzy_matching=fuzzy_matching)
    return await executor.execute(transcript, tasks, options, now=now)
