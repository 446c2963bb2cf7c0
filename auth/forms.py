# src/auth/forms.py
import logging
from typing import Optional
from auth import exceptions
from auth.exceptions import AuthError, auth_error_message
from auth.identity import IdentityProvider
from auth.schemas import is_valid_email
from config import settings

logger = logging.getLogger(__name__)

MISSING_CREDENTIALS = "Please enter email and password"


class LoginForm:
    """Sign-in form; every failure becomes a one-shot ``error`` message.

    Deleted and blocked profiles are refused by the provider before any
    auth listener hears of them, so nothing downstream sees them signed in.
    """

    def __init__(self, provider: IdentityProvider):
        self._provider = provider
        self.email = ""
        self.password = ""
        self.error: Optional[str] = None
        self.loading = False

    def submit(self) -> bool:
        self.error = None
        if not self.email or not self.password:
            self.error = MISSING_CREDENTIALS
            return False

        self.loading = True
        try:
            self._provider.sign_in(self.email.strip(), self.password)
            return True
        except AuthError as e:
            self.error = auth_error_message(e.code)
        except Exception as e:
            logger.error(f"Sign-in failed: {str(e)}", exc_info=True)
            self._provider.sign_out()
            self.error = auth_error_message(None)
        finally:
            self.loading = False
        return False


class RegisterForm:
    """Registration with inline email and password errors."""

    def __init__(self, provider: IdentityProvider):
        self._provider = provider
        self.username = ""
        self.email = ""
        self.password = ""
        self.email_error: Optional[str] = None
        self.password_error: Optional[str] = None
        self.error: Optional[str] = None
        self.loading = False

    def set_email(self, email: str) -> None:
        self.email = email
        self.email_error = None

    def set_password(self, password: str) -> None:
        self.password = password
        self.password_error = None

    def validate(self) -> bool:
        if not is_valid_email(self.email.strip()):
            self.email_error = auth_error_message(exceptions.INVALID_EMAIL)
            return False
        if len(self.password) < settings.MIN_PASSWORD_LENGTH:
            self.password_error = f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters"
            return False
        return True

    def submit(self) -> bool:
        self.email_error = None
        self.password_error = None
        self.error = None
        if not self.username or not self.email or not self.password:
            return False
        if not self.validate():
            return False

        self.loading = True
        try:
            self._provider.sign_up(self.email, self.password, self.username)
            return True
        except AuthError as e:
            if e.code in (exceptions.EMAIL_IN_USE, exceptions.INVALID_EMAIL):
                self.email_error = auth_error_message(e.code)
            elif e.code == exceptions.WEAK_PASSWORD:
                self.password_error = auth_error_message(e.code)
            else:
                self.error = auth_error_message(e.code)
        except Exception as e:
            logger.error(f"Registration failed: {str(e)}", exc_info=True)
            self.error = "Registration failed, please try again"
        finally:
            self.loading = False
        return False
