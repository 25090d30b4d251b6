"""FastAPI web application for voicetasks."""

import logging
import os
import uuid
from datetime import date, datetime
from typing import List, Optional

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException, Query, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from voicetasks.api.auth_models import AuthResponse, GoogleSignInRequest, ProfileUpdateRequest
from voicetasks.auth.dependencies import get_current_user
from voicetasks.auth.google_oauth import verify_google_token
from voicetasks.auth.jwt import create_access_token
from voicetasks.database.category_repository import CategoryRepository
from voicetasks.database.database import get_db
from voicetasks.database.repository import TaskRepository
from voicetasks.database.task_storage import RepositoryTaskStorage
from voicetasks.database.user_repository import UserRepository
from voicetasks.engine.reminders import Reminder, due_reminders
from voicetasks.engine.stats import TaskStats, compute_task_stats
from voicetasks.models.category import Category
from voicetasks.models.constants import (
    CATEGORY_NAME_MAX_LENGTH,
    DEFAULT_CATEGORY_COLOR,
    DEFAULT_STATS_PERIOD,
    HEX_COLOR_PATTERN,
    NO_CATEGORY,
    REMINDER_TIME_PATTERN,
)
from voicetasks.models.task import RecurringPattern, ReminderType, Task, TaskPriority
from voicetasks.models.task_factory import create_task_base
from voicetasks.models.user import User
from voicetasks.voice.commands import VoiceCommandParser
from voicetasks.voice.executor import CommandExecutor, CommandOutcome, VoiceOptions
from voicetasks.voice.types import ParsedCommand

load_dotenv()

logger = logging.getLogger(__name__)

# Voice command policy
VOICE_STRICT_COMMANDS = os.getenv("VOICE_STRICT_COMMANDS", "False").lower() == "true"
VOICE_FUZZY_MATCHING = os.getenv("VOICE_FUZZY_MATCHING", "False").lower() == "true"

# Task columns that accept an explicit null on PATCH
NULLABLE_TASK_FIELDS = {"description", "due_date", "category_id", "recurring_pattern", "reminder_time"}

app = FastAPI(
    title="voicetasks API",
    description="Personal task manager with productivity stats and voice commands",
    version="0.1.0",
)


# Request/response models
class TaskCreateRequest(BaseModel):
    """Request model for creating a task."""
    title: str = Field(..., min_length=1, description="Task title")
    description: Optional[str] = None
    priority: TaskPriority = TaskPriority.MEDIUM
    completed: bool = False
    due_date: Optional[datetime] = None
    category_id: Optional[str] = None
    is_recurring: bool = False
    recurring_pattern: Optional[RecurringPattern] = None
    reminder_enabled: bool = True
    reminder_type: ReminderType = ReminderType.DEFAULT
    reminder_time: Optional[str] = Field(None, pattern=REMINDER_TIME_PATTERN)


class TaskUpdateRequest(BaseModel):
    """Request model for updating a task (partial)."""
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    priority: Optional[TaskPriority] = None
    completed: Optional[bool] = None
    due_date: Optional[datetime] = None
    category_id: Optional[str] = None
    is_recurring: Optional[bool] = None
    recurring_pattern: Optional[RecurringPattern] = None
    reminder_enabled: Optional[bool] = None
    reminder_type: Optional[ReminderType] = None
    reminder_time: Optional[str] = Field(None, pattern=REMINDER_TIME_PATTERN)

    class Config:
        """Pydantic configuration."""
        use_enum_values = True


class TaskResponse(BaseModel):
    task: Task


class TaskListResponse(BaseModel):
    tasks: List[Task]


class CategoryCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=CATEGORY_NAME_MAX_LENGTH)
    color: str = Field(DEFAULT_CATEGORY_COLOR, pattern=HEX_COLOR_PATTERN)


class CategoryUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=CATEGORY_NAME_MAX_LENGTH)
    color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)


class CategoryResponse(BaseModel):
    category: Category


class CategoryListResponse(BaseModel):
    categories: List[Category]


class ReminderListResponse(BaseModel):
    reminders: List[Reminder]


class VoiceParseRequest(BaseModel):
    transcript: str = Field(..., description="Speech recognition result")


class VoiceCommandRequest(BaseModel):
    transcript: str = Field(..., description="Speech recognition result")
    options: VoiceOptions = Field(default_factory=VoiceOptions, description="Ambient UI selections")


def _require_category(db: Session, user_id: str, category_id: Optional[str]) -> None:
    """Reject category IDs the user does not own."""
    if category_id and CategoryRepository(db).get(user_id, category_id) is None:
        raise HTTPException(status_code=400, detail=f"Category {category_id} not found")


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": "0.1.0"}


# Authentication
@app.post("/auth/google", response_model=AuthResponse)
async def google_sign_in(request: GoogleSignInRequest, db: Session = Depends(get_db)):
    """Exchange a verified Google ID token for an API access token."""
    user_info = verify_google_token(request.id_token)
    if not user_info:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid Google ID token")

    user_repo = UserRepository(db)
    existing = user_repo.get(user_info["id"])
    now = datetime.utcnow()
    user = User(
        id=user_info["id"],
        email=user_info["email"],
        name=user_info.get("name"),
        profile_image_url=user_info.get("picture"),
        created_at=existing.created_at if existing else now,
        updated_at=now,
    )
    try:
        user = user_repo.create_or_update(user)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to save user: {str(e)}")

    return AuthResponse(access_token=create_access_token(user.id, user.email), user=user)


@app.get("/api/auth/user", response_model=User)
async def get_auth_user(current_user: User = Depends(get_current_user)):
    """Return the signed-in user."""
    return current_user


@app.patch("/api/profile", response_model=User)
async def update_profile(
    request: ProfileUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update display name and profile picture."""
    updates = request.model_dump(exclude_unset=True)
    user = current_user.model_copy(update={**updates, "updated_at": datetime.utcnow()})
    try:
        return UserRepository(db).create_or_update(user)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to update profile: {str(e)}")


# Categories
@app.get("/api/categories", response_model=CategoryListResponse)
async def list_categories(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return CategoryListResponse(categories=CategoryRepository(db).get_all(current_user.id))


@app.post("/api/categories", response_model=CategoryResponse, status_code=201)
async def create_category(
    request: CategoryCreateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    now = datetime.utcnow()
    category = Category(
        id=str(uuid.uuid4()),
        user_id=current_user.id,
        name=request.name,
        color=request.color,
        created_at=now,
        updated_at=now,
    )
    try:
        return CategoryResponse(category=CategoryRepository(db).create(category))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to create category: {str(e)}")


@app.patch("/api/categories/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: str,
    request: CategoryUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    category_repo = CategoryRepository(db)
    category = category_repo.get(current_user.id, category_id)
    if category is None:
        raise HTTPException(status_code=404, detail=f"Category {category_id} not found")

    updates = {key: value for key, value in request.model_dump(exclude_unset=True).items() if value is not None}
    updated = category.model_copy(update={**updates, "updated_at": datetime.utcnow()})
    try:
        return CategoryResponse(category=category_repo.update(updated))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@app.delete("/api/categories/{category_id}", status_code=204)
async def delete_category(
    category_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Delete a category. Its tasks are kept without a category."""
    if not CategoryRepository(db).delete(current_user.id, category_id):
        raise HTTPException(status_code=404, detail=f"Category {category_id} not found")
    return None


# Tasks
@app.get("/api/tasks", response_model=TaskListResponse)
async def list_tasks(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """List all tasks, newest first."""
    return TaskListResponse(tasks=TaskRepository(db).get_all(current_user.id))


@app.get("/api/tasks/today", response_model=TaskListResponse)
async def list_tasks_due_today(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """List tasks due today, pending first."""
    return TaskListResponse(tasks=TaskRepository(db).get_due_on(current_user.id, date.today()))


@app.post("/api/tasks", response_model=TaskResponse, status_code=201)
async def create_task(
    request: TaskCreateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    _require_category(db, current_user.id, request.category_id)
    task = create_task_base(
        user_id=current_user.id,
        title=request.title,
        description=request.description,
        priority=request.priority,
        completed=request.completed,
        due_date=request.due_date,
        category_id=request.category_id,
        is_recurring=request.is_recurring,
        recurring_pattern=request.recurring_pattern,
        reminder_enabled=request.reminder_enabled,
        reminder_type=request.reminder_type,
        reminder_time=request.reminder_time,
    )
    try:
        return TaskResponse(task=TaskRepository(db).create(task))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to create task: {str(e)}")


@app.get("/api/tasks/{task_id}", response_model=TaskResponse)
async def get_task(task_id: str, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    task = TaskRepository(db).get(current_user.id, task_id)
    if task is None:
        raise HTTPException(status_code=404, detail=f"Task {task_id} not found")
    return TaskResponse(task=task)


@app.patch("/api/tasks/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: str,
    request: TaskUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    task_repo = TaskRepository(db)
    task = task_repo.get(current_user.id, task_id)
    if task is None:
        raise HTTPException(status_code=404, detail=f"Task {task_id} not found")

    updates = {
        key: value for key, value in request.model_dump(exclude_unset=True).items()
        if value is not None or key in NULLABLE_TASK_FIELDS
    }
    _require_category(db, current_user.id, updates.get("category_id"))

    updated = task.model_copy(update={**updates, "updated_at": datetime.utcnow()})
    try:
        return TaskResponse(task=task_repo.update(updated))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to update task: {str(e)}")


@app.delete("/api/tasks/{task_id}", status_code=204)
async def delete_task(task_id: str, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    if not TaskRepository(db).delete(current_user.id, task_id):
        raise HTTPException(status_code=404, detail=f"Task {task_id} not found")
    return None


# Statistics
@app.get("/api/stats", response_model=TaskStats)
async def get_stats(
    period: str = Query(DEFAULT_STATS_PERIOD, description="week, month or quarter"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Completion statistics over all of the user's tasks."""
    return compute_task_stats(TaskRepository(db).get_all(current_user.id), period)


# Reminders
@app.post("/api/reminders/due", response_model=ReminderListResponse)
async def deliver_due_reminders(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Return reminders that fire now and record them as delivered."""
    task_repo = TaskRepository(db)
    now = datetime.now()
    reminders = due_reminders(task_repo.get_all(current_user.id), now)
    try:
        task_repo.mark_notified(current_user.id, [reminder.task_id for reminder in reminders], now)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to record reminders: {str(e)}")
    return ReminderListResponse(reminders=reminders)


# Voice commands
@app.post("/api/voice/parse", response_model=ParsedCommand)
async def parse_voice(request: VoiceParseRequest, current_user: User = Depends(get_current_user)):
    """Classify a transcript without executing it."""
    return VoiceCommandParser(strict=VOICE_STRICT_COMMANDS).parse(request.transcript)


@app.post("/api/voice/command", response_model=CommandOutcome)
async def run_voice_command(
    request: VoiceCommandRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Execute a transcript against the user's tasks and report the outcome."""
    if request.options.category_id != NO_CATEGORY:
        _require_category(db, current_user.id, request.options.category_id)

    task_repo = TaskRepository(db)
    executor = CommandExecutor(
        RepositoryTaskStorage(task_repo, current_user.id),
        parser=VoiceCommandParser(strict=VOICE_STRICT_COMMANDS),
        fuzzy_matching=VOICE_FUZZY_MATCHING,
    )
    outcome = await executor.execute(request.transcript, task_repo.get_all(current_user.id), request.options)
    logger.debug(f"Voice command for user {current_user.id}: {outcome.title}")
    return outcome
