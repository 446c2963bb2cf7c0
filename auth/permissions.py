# src/auth/permissions.py
"""Who may edit, delete or moderate what.

Every check returns a plain bool for any input, including a missing
identity or a resource without an author.
"""
from typing import Any, Optional
from auth.schemas import ADMIN


def _identity_id(identity: Any) -> Optional[str]:
    return getattr(identity, "id", None) if identity is not None else None


def _author_id(resource: Any) -> Optional[str]:
    return getattr(resource, "author_id", None) if resource is not None else None


def is_author(resource: Any, identity: Any) -> bool:
    uid = _identity_id(identity)
    return uid is not None and _author_id(resource) == uid


def can_edit_post(post: Any, identity: Any) -> bool:
    """Only the author edits a post; admins do not."""
    return is_author(post, identity)


def can_delete_post(post: Any, identity: Any, role: Optional[str]) -> bool:
    return _identity_id(identity) is not None and (is_author(post, identity) or role == ADMIN)


def can_delete_comment(comment: Any, identity: Any, role: Optional[str]) -> bool:
    return _identity_id(identity) is not None and (is_author(comment, identity) or role == ADMIN)


def can_moderate_users(role: Optional[str]) -> bool:
    return role == ADMIN


def can_act_on_user(target_id: Optional[str], identity: Any, role: Optional[str]) -> bool:
    """Block, unblock and delete are offered to admins, never on themselves."""
    uid = _identity_id(identity)
    return uid is not None and can_moderate_users(role) and target_id is not None and target_id != uid
