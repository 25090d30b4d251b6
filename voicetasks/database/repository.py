"""Repository layer for database operations."""

import logging
from datetime import date, datetime, time, timedelta
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import asc, desc

from voicetasks.models.task import Task
from voicetasks.database.models import TaskDB, enum_to_value

logger = logging.getLogger(__name__)


class TaskRepository:
    """Repository for Task database operations."""

    def __init__(self, db: Session):
        self.db = db

    def _query(self, user_id: str):
        return self.db.query(TaskDB).filter(TaskDB.user_id == user_id)

    def create(self, task: Task) -> Task:
        """Create a new task."""
        try:
            task_db = TaskDB.from_pydantic(task)
            self.db.add(task_db)
            self.db.commit()
            self.db.refresh(task_db)
            logger.debug(f"Created task {task.id}: {task.title[:50]}")
            return task_db.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create task {task.id}: {type(e).__name__}: {str(e)}")
            raise

    def get(self, user_id: str, task_id: str) -> Optional[Task]:
        """Get task by ID for a specific user."""
        task_db = self._query(user_id).filter(TaskDB.id == task_id).first()
        return task_db.to_pydantic() if task_db else None

    def get_all(self, user_id: str) -> List[Task]:
        """Get all tasks for a user sorted by creation date (newest first)."""
        tasks_db = self._query(user_id).order_by(desc(TaskDB.created_at)).all()
        return [task_db.to_pydantic() for task_db in tasks_db]

    def get_due_on(self, user_id: str, day: date) -> List[Task]:
        """Get tasks due within the given calendar day, pending tasks first."""
        start = datetime.combine(day, time.min)
        end = start + timedelta(days=1)
        tasks_db = self._query(user_id).filter(
            TaskDB.due_date >= start,
            TaskDB.due_date < end,
        ).order_by(asc(TaskDB.completed), asc(TaskDB.due_date)).all()
        return [task_db.to_pydantic() for task_db in tasks_db]

    def update(self, task: Task) -> Task:
        """Update an existing task (user_id must match task.user_id)."""
        task_db = self._query(task.user_id).filter(TaskDB.id == task.id).first()
        if not task_db:
            raise ValueError(f"Task {task.id} not found")

        # Handle enum values (Pydantic with use_enum_values=True returns strings)
        task_db.title = task.title
        task_db.description = task.description
        task_db.priority = enum_to_value(task.priority)
        task_db.completed = task.completed
        task_db.due_date = task.due_date
        task_db.category_id = task.category_id
        task_db.is_recurring = task.is_recurring
        task_db.recurring_pattern = enum_to_value(task.recurring_pattern) if task.recurring_pattern else None
        task_db.reminder_enabled = task.reminder_enabled
        task_db.reminder_type = enum_to_value(task.reminder_type)
        task_db.reminder_time = task.reminder_time
        task_db.last_notified = task.last_notified
        task_db.updated_at = task.updated_at

        try:
            self.db.commit()
            self.db.refresh(task_db)
            logger.debug(f"Updated task {task.id}: {task.title[:50]}")
            return task_db.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to update task {task.id}: {type(e).__name__}: {str(e)}")
            raise

    def delete(self, user_id: str, task_id: str) -> bool:
        """Delete a task by ID for a specific user."""
        task_db = self._query(user_id).filter(TaskDB.id == task_id).first()
        if not task_db:
            return False

        try:
            self.db.delete(task_db)
            self.db.commit()
            logger.debug(f"Deleted task {task_id}")
            return True
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to delete task {task_id}: {type(e).__name__}: {str(e)}")
            raise

    def clear_category(self, user_id: str, category_id: str) -> int:
        """Detach all of a user's tasks from a category. Returns the number of tasks changed."""
        try:
            count = self._query(user_id).filter(TaskDB.category_id == category_id).update(
                {TaskDB.category_id: None, TaskDB.updated_at: datetime.utcnow()},
                synchronize_session=False,
            )
            self.db.commit()
            logger.debug(f"Detached {count} tasks from category {category_id}")
            return count
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to detach tasks from category {category_id}: {type(e).__name__}: {str(e)}")
            raise

    def mark_notified(self, user_id: str, task_ids: List[str], when: datetime) -> int:
        """Record a reminder delivery. `updated_at` is left alone so stats are unaffected."""
        if not task_ids:
            return 0
        try:
            count = self._query(user_id).filter(TaskDB.id.in_(task_ids)).update(
                {TaskDB.last_notified: when, TaskDB.updated_at: TaskDB.updated_at},
                synchronize_session=False,
            )
            self.db.commit()
            logger.debug(f"Recorded reminders for {count} tasks")
            return count
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to record reminders: {type(e).__name__}: {str(e)}")
            raise
