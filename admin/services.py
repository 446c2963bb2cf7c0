# src/admin/services.py
import logging
from fastapi import HTTPException
from sqlalchemy.orm import Session
from typing import List
from auth.models import User
from auth.schemas import UserResponse

logger = logging.getLogger(__name__)


class AdminService:
    @staticmethod
    def list_users(db: Session) -> List[UserResponse]:
        """All member profiles, oldest first."""
        users = db.query(User).order_by(User.created_at.asc()).all()
        return [UserResponse.model_validate(u) for u in users]

    @staticmethod
    def set_disabled(user_id: str, disabled: bool, admin_id: str, db: Session) -> UserResponse:
        """Block or unblock a member. Setting the current value again is fine."""
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        user.disabled = disabled
        db.commit()
        db.refresh(user)
        logger.info(f"Admin {admin_id} set disabled={disabled} on user {user_id}")
        return UserResponse.model_validate(user)

    @staticmethod
    def delete_user(user_id: str, admin_id: str, db: Session) -> bool:
        """Hard-delete the profile. Credentials, posts and comments stay."""
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            return False
        db.delete(user)
        db.commit()
        logger.info(f"Admin {admin_id} deleted user {user_id}")
        return True
