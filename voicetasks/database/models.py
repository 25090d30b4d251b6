"""SQLAlchemy database models for voicetasks."""

from datetime import datetime
from typing import Union, TypeVar, Type
import uuid
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey

from voicetasks.database.database import Base
from voicetasks.models.task import TaskPriority, ReminderType, RecurringPattern
from voicetasks.models.constants import DEFAULT_CATEGORY_COLOR

T = TypeVar('T')


def enum_to_value(enum_obj: Union[str, T]) -> str:
    """Convert enum to string value (handles both enum and string).

    Args:
        enum_obj: Enum instance or string value

    Returns:
        String value of the enum, or the string itself if already a string
    """
    if hasattr(enum_obj, 'value'):
        return enum_obj.value
    return str(enum_obj)


def value_to_enum(value: str, enum_class: Type[T], default: T) -> T:
    """Convert string to enum with fallback to default.

    Args:
        value: String value to convert
        enum_class: Enum class to convert to
        default: Default enum value if conversion fails

    Returns:
        Enum instance, or default if conversion fails
    """
    if not value:
        return default
    try:
        return enum_class(value.lower())
    except (ValueError, AttributeError):
        return default


class TaskDB(Base):
    """Database model for Task."""

    __tablename__ = "tasks"

    # Primary key
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))

    # Ownership
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    category_id = Column(String, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True)

    # Basic fields
    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    priority = Column(String, nullable=False, default=TaskPriority.MEDIUM.value)
    completed = Column(Boolean, nullable=False, default=False)
    due_date = Column(DateTime, nullable=True, index=True)

    # Recurrence (stored only)
    is_recurring = Column(Boolean, nullable=False, default=False)
    recurring_pattern = Column(String, nullable=True)

    # Reminders
    reminder_enabled = Column(Boolean, nullable=False, default=True)
    reminder_type = Column(String, nullable=False, default=ReminderType.DEFAULT.value)
    reminder_time = Column(String, nullable=True)
    last_notified = Column(DateTime, nullable=True)

    # Timestamps
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from voicetasks.models.task import Task

        return Task(
            id=self.id,
            user_id=self.user_id,
            title=self.title,
            description=self.description,
            priority=value_to_enum(self.priority, TaskPriority, TaskPriority.MEDIUM),
            completed=self.completed,
            due_date=self.due_date,
            category_id=self.category_id,
            is_recurring=self.is_recurring,
            recurring_pattern=value_to_enum(self.recurring_pattern, RecurringPattern, None),
            reminder_enabled=self.reminder_enabled,
            reminder_type=value_to_enum(self.reminder_type, ReminderType, ReminderType.DEFAULT),
            reminder_time=self.reminder_time,
            last_notified=self.last_notified,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    @classmethod
    def from_pydantic(cls, task):
        """Create database model from Pydantic model."""
        # Pydantic with use_enum_values=True returns strings
        return cls(
            id=task.id,
            user_id=task.user_id,
            title=task.title,
            description=task.description,
            priority=enum_to_value(task.priority),
            completed=task.completed,
            due_date=task.due_date,
            category_id=task.category_id,
            is_recurring=task.is_recurring,
            recurring_pattern=enum_to_value(task.recurring_pattern) if task.recurring_pattern else None,
            reminder_enabled=task.reminder_enabled,
            reminder_type=enum_to_value(task.reminder_type),
            reminder_time=task.reminder_time,
            last_notified=task.last_notified,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )


class CategoryDB(Base):
    """Database model for Category."""

    __tablename__ = "categories"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    name = Column(String(100), nullable=False)
    color = Column(String, nullable=False, default=DEFAULT_CATEGORY_COLOR)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from voicetasks.models.category import Category
        return Category(
            id=self.id,
            user_id=self.user_id,
            name=self.name,
            color=self.color,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    @classmethod
    def from_pydantic(cls, category):
        """Create database model from Pydantic model."""
        return cls(
            id=category.id,
            user_id=category.user_id,
            name=category.name,
            color=category.color,
            created_at=category.created_at,
            updated_at=category.updated_at,
        )


class UserDB(Base):
    """Database model for User."""

    __tablename__ = "users"

    # Primary key (Google user ID)
    id = Column(String, primary_key=True)

    # User profile
    email = Column(String, nullable=False, unique=True)
    name = Column(String, nullable=True)
    profile_image_url = Column(String, nullable=True)

    # Timestamps
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from voicetasks.models.user import User
        return User(
            id=self.id,
            email=self.email,
            name=self.name,
            profile_image_url=self.profile_image_url,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    @classmethod
    def from_pydantic(cls, user):
        """Create database model from Pydantic model."""
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            profile_image_url=user.profile_image_url,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
