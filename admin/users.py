# src/admin/users.py
import logging
from typing import List, Optional
from fastapi import HTTPException
from admin.services import AdminService
from auth.permissions import can_act_on_user, can_moderate_users
from auth.schemas import UserResponse
from database import SessionLocal

logger = logging.getLogger(__name__)


class AdminUserList:
    """The user-management screen.

    The list is loaded once and has no live subscription, so every
    successful write is patched into ``users`` right away. A failed write
    leaves the list as it was and sets ``error``.
    """

    def __init__(self, identity, role: str, session_factory=SessionLocal):
        self.identity = identity
        self.role = role
        self._session_factory = session_factory
        self.users: List[UserResponse] = []
        self.error: Optional[str] = None

    def load(self) -> None:
        if not can_moderate_users(self.role):
            self.users = []
            return
        db = self._session_factory()
        try:
            self.users = AdminService.list_users(db)
        except Exception as e:
            logger.error(f"Loading users failed: {str(e)}")
            self.error = "Could not load users"
        finally:
            db.close()

    def actions_for(self, user: UserResponse) -> List[str]:
        """Buttons to show on a row; none on the admin's own row."""
        if not can_act_on_user(user.id, self.identity, self.role):
            return []
        return ["unblock" if user.disabled else "block", "delete"]

    def block(self, user_id: str) -> bool:
        return self._set_disabled(user_id, True)

    def unblock(self, user_id: str) -> bool:
        return self._set_disabled(user_id, False)

    def delete(self, user_id: str) -> bool:
        if not self._allowed(user_id):
            return False
        db = self._session_factory()
        try:
            AdminService.delete_user(user_id, self.identity.id, db)
        except Exception as e:
            return self._failed(f"delete {user_id}", e)
        finally:
            db.close()
        self.users = [u for u in self.users if u.id != user_id]
        return True

    def _set_disabled(self, user_id: str, disabled: bool) -> bool:
        if not self._allowed(user_id):
            return False
        db = self._session_factory()
        try:
            AdminService.set_disabled(user_id, disabled, self.identity.id, db)
        except Exception as e:
            return self._failed(f"set disabled={disabled} on {user_id}", e)
        finally:
            db.close()
        self.users = [u.model_copy(update={"disabled": disabled}) if u.id == user_id else u
                      for u in self.users]
        return True

    def _allowed(self, user_id: str) -> bool:
        self.error = None
        if can_act_on_user(user_id, self.identity, self.role):
            return True
        self.error = "Not allowed"
        return False

    def _failed(self, action: str, error: Exception) -> bool:
        logger.error(f"Admin could not {action}: {str(error)}")
        self.error = error.detail if isinstance(error, HTTPException) else "Action failed"
        return False
