# src/auth/exceptions.py
from typing import Dict, Optional
from fastapi import HTTPException, status

USER_NOT_FOUND = "user-not-found"
WRONG_PASSWORD = "wrong-password"
INVALID_EMAIL = "invalid-email"
EMAIL_IN_USE = "email-already-in-use"
WEAK_PASSWORD = "weak-password"
USER_DISABLED = "user-disabled"
USER_DELETED = "user-deleted"
NOT_SIGNED_IN = "not-signed-in"

AUTH_ERROR_MESSAGES: Dict[str, str] = {
    USER_NOT_FOUND: "This account does not exist.",
    WRONG_PASSWORD: "Wrong password.",
    INVALID_EMAIL: "Invalid email address.",
    EMAIL_IN_USE: "This email is already registered.",
    WEAK_PASSWORD: "The password is too weak.",
    USER_DISABLED: "Your account has been blocked. Contact the site administrator for details.",
    USER_DELETED: "This account has been deleted and cannot be registered again.",
    NOT_SIGNED_IN: "Please sign in first.",
}
DEFAULT_AUTH_MESSAGE = "Sign-in failed, please try again."

_STATUS_BY_CODE = {
    INVALID_EMAIL: status.HTTP_400_BAD_REQUEST,
    EMAIL_IN_USE: status.HTTP_400_BAD_REQUEST,
    WEAK_PASSWORD: status.HTTP_400_BAD_REQUEST,
    USER_DISABLED: status.HTTP_403_FORBIDDEN,
    USER_DELETED: status.HTTP_403_FORBIDDEN,
}


class AuthError(HTTPException):
    """Identity provider failure with a machine-readable ``code``."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(
            status_code=_STATUS_BY_CODE.get(code, status.HTTP_401_UNAUTHORIZED),
            detail=auth_error_message(code),
        )


def auth_error_message(code: Optional[str]) -> str:
    return AUTH_ERROR_MESSAGES.get(code, DEFAULT_AUTH_MESSAGE)


class FormError(Exception):
    """Validation failure caught before any I/O, keyed by field."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")
