"""Repository for Category database operations."""

import logging
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import asc

from voicetasks.models.category import Category
from voicetasks.database.models import CategoryDB
from voicetasks.database.repository import TaskRepository

logger = logging.getLogger(__name__)


class CategoryRepository:
    """Repository for Category database operations."""

    def __init__(self, db: Session):
        self.db = db

    def get_all(self, user_id: str) -> List[Category]:
        """Get all categories for a user sorted by name."""
        categories_db = self.db.query(CategoryDB).filter(
            CategoryDB.user_id == user_id,
        ).order_by(asc(CategoryDB.name)).all()
        return [category_db.to_pydantic() for category_db in categories_db]

    def get(self, user_id: str, category_id: str) -> Optional[Category]:
        """Get category by ID for a specific user."""
        category_db = self.db.query(CategoryDB).filter(
            CategoryDB.id == category_id,
            CategoryDB.user_id == user_id,
        ).first()
        return category_db.to_pydantic() if category_db else None

    def create(self, category: Category) -> Category:
        """Create a new category."""
        try:
            category_db = CategoryDB.from_pydantic(category)
            self.db.add(category_db)
            self.db.commit()
            self.db.refresh(category_db)
            logger.debug(f"Created category {category.id}: {category.name}")
            return category_db.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create category {category.id}: {type(e).__name__}: {str(e)}")
            raise

    def update(self, category: Category) -> Category:
        """Update name and color of an existing category."""
        category_db = self.db.query(CategoryDB).filter(
            CategoryDB.id == category.id,
            CategoryDB.user_id == category.user_id,
        ).first()
        if not category_db:
            raise ValueError(f"Category {category.id} not found")

        category_db.name = category.name
        category_db.color = category.color
        category_db.updated_at = category.updated_at

        try:
            self.db.commit()
            self.db.refresh(category_db)
            logger.debug(f"Updated category {category.id}: {category.name}")
            return category_db.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to update category {category.id}: {type(e).__name__}: {str(e)}")
            raise

    def delete(self, user_id: str, category_id: str) -> bool:
        """Delete a category; its tasks are kept and become uncategorized."""
        category_db = self.db.query(CategoryDB).filter(
            CategoryDB.id == category_id,
            CategoryDB.user_id == user_id,
        ).first()
        if not category_db:
            return False

        TaskRepository(self.db).clear_category(user_id, category_id)

        try:
            self.db.delete(category_db)
            self.db.commit()
            logger.debug(f"Deleted category {category_id}")
            return True
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to delete category {category_id}: {type(e).__name__}: {str(e)}")
            raise
