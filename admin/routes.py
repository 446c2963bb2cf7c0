# src/admin/routes.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
from admin.services import AdminService
from auth.permissions import can_moderate_users
from auth.routes import get_current_user
from auth.schemas import UserResponse
from database import get_db

router = APIRouter(prefix="/admin", tags=["admin"])


def check_admin_role(current_user: UserResponse = Depends(get_current_user)) -> UserResponse:
    """Ensure the user has admin role."""
    if not can_moderate_users(current_user.role):
        raise HTTPException(status_code=403, detail="Admin access required")
    return current_user


def check_not_self(user_id: str, current_user: UserResponse) -> None:
    if user_id == current_user.id:
        raise HTTPException(status_code=400, detail="Admins cannot act on their own account")


@router.get("/users", response_model=List[UserResponse])
def get_users(db: Session = Depends(get_db), current_user: UserResponse = Depends(check_admin_role)):
    """Retrieve all users."""
    return AdminService.list_users(db)


@router.post("/users/{user_id}/block", response_model=UserResponse)
def block_user(user_id: str, db: Session = Depends(get_db),
               current_user: UserResponse = Depends(check_admin_role)):
    """Block a user; they are signed out on their next session check."""
    check_not_self(user_id, current_user)
    return AdminService.set_disabled(user_id, True, current_user.id, db)


@router.post("/users/{user_id}/unblock", response_model=UserResponse)
def unblock_user(user_id: str, db: Session = Depends(get_db),
                 current_user: UserResponse = Depends(check_admin_role)):
    check_not_self(user_id, current_user)
    return AdminService.set_disabled(user_id, False, current_user.id, db)


@router.delete("/users/{user_id}")
def delete_user(user_id: str, db: Session = Depends(get_db),
                current_user: UserResponse = Depends(check_admin_role)):
    """Delete a user profile."""
    check_not_self(user_id, current_user)
    if not AdminService.delete_user(user_id, current_user.id, db):
        raise HTTPException(status_code=404, detail="User not found")
    return {"message": "User deleted"}
