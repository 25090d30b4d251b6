"""Database-backed TaskStorage for the voice command executor."""

import asyncio
import logging
from datetime import datetime
from typing import Any, Dict

from voicetasks.database.repository import TaskRepository
from voicetasks.models.task import Task
from voicetasks.models.task_factory import create_task_base
from voicetasks.voice.executor import TaskCreateFields

logger = logging.getLogger(__name__)


class RepositoryTaskStorage:
    """Scopes a TaskRepository to one user behind the executor's async storage interface.

    Repository calls block, so each one runs in a worker thread. The executor
    awaits them one at a time, which keeps the shared session single-threaded.
    """

    def __init__(self, repository: TaskRepository, user_id: str):
        self.repository = repository
        self.user_id = user_id

    async def create(self, fields: TaskCreateFields) -> Task:
        task = create_task_base(
            user_id=self.user_id,
            title=fields.title,
            description=fields.description,
            priority=fields.priority,
            due_date=fields.due_date,
            category_id=fields.category_id,
            reminder_enabled=fields.reminder_enabled,
            reminder_type=fields.reminder_type,
            reminder_time=fields.reminder_time,
        )
        return await asyncio.to_thread(self.repository.create, task)

    def _apply_patch(self, task_id: str, patch: Dict[str, Any]) -> Task:
        task = self.repository.get(self.user_id, task_id)
        if task is None:
            raise ValueError(f"Task {task_id} not found")
        updated = task.model_copy(update={**patch, "updated_at": datetime.utcnow()})
        return self.repository.update(updated)

    async def update(self, task_id: str, patch: Dict[str, Any]) -> Task:
        return await asyncio.to_thread(self._apply_patch, task_id, patch)

    async def delete(self, task_id: str) -> None:
        deleted = await asyncio.to_thread(self.repository.delete, self.user_id, task_id)
        if not deleted:
            raise ValueError(f"Task {task_id} not found")
