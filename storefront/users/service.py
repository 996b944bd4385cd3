from sqlalchemy.orm import Session
from typing import Optional
import logging

from .models import User
from ..auth.models import TokenData

logger = logging.getLogger(__name__)


class UserService:

    @staticmethod
    def get_user_by_id(db: Session, user_id: str) -> Optional[User]:
        """Get user by ID"""
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def ensure_user(db: Session, identity: TokenData) -> User:
        """Get the local user row for a verified caller, creating it on first sight.

        Runs inside the caller's transaction; nothing is committed here.
        """
        user = UserService.get_user_by_id(db, identity.user_id)
        if user:
            if identity.email and user.email != identity.email:
                user.email = identity.email
            return user

        user = User(id=identity.user_id, email=identity.email, full_name=identity.full_name or "")
        db.add(user)
        db.flush()
        logger.info(f"Registered local user record for {identity.user_id}")
        return user
