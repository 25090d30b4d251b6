"""Persistence for signed-in users."""

import logging
from typing import Optional
from sqlalchemy.orm import Session

from voicetasks.models.user import User
from voicetasks.database.models import UserDB

logger = logging.getLogger(__name__)


class UserRepository:
    """Looks up users by Google ID and upserts their profile on sign-in."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: str) -> Optional[User]:
        user_db = self.db.get(UserDB, user_id)
        return user_db.to_pydantic() if user_db else None

    def create_or_update(self, user: User) -> User:
        """Insert a new user or refresh the profile of an existing one.

        The stored `created_at` is never overwritten, so it keeps the first
        sign-in time.
        """
        user_db = self.db.get(UserDB, user.id)
        action = "update" if user_db else "create"
        if user_db is None:
            user_db = UserDB.from_pydantic(user)
            self.db.add(user_db)
        else:
            user_db.email = user.email
            user_db.name = user.name
            user_db.profile_image_url = user.profile_image_url
            user_db.updated_at = user.updated_at

        try:
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to {action} user {user.id}: {type(e).__name__}: {str(e)}")
            raise

        self.db.refresh(user_db)
        logger.debug(f"Saved user {user.id} ({action})")
        return user_db.to_pydantic()
