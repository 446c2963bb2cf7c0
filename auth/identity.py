# src/auth/identity.py
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional
from auth import exceptions
from auth.exceptions import AuthError
from auth.services import AuthService
from database import SessionLocal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """The signed-in actor as seen by the rest of the client."""
    id: str
    email: str
    display_name: Optional[str] = None


AuthListener = Callable[[Optional[Identity]], None]


class IdentityProvider:
    """Client handle on sign-up, sign-in and sign-out.

    Listeners registered with ``on_auth_state_changed`` are called with the
    current identity right away and again after every state change.
    """

    def __init__(self, session_factory=SessionLocal):
        self._session_factory = session_factory
        self._listeners: List[AuthListener] = []
        self.current: Optional[Identity] = None

    def on_auth_state_changed(self, listener: AuthListener) -> Callable[[], None]:
        self._listeners.append(listener)
        listener(self.current)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_current(self, identity: Optional[Identity]) -> None:
        self.current = identity
        for listener in list(self._listeners):
            listener(identity)

    def sign_up(self, email: str, password: str, display_name: str) -> Identity:
        db = self._session_factory()
        try:
            account = AuthService.create_account(email, password, display_name, db)
            identity = Identity(id=account.id, email=account.email, display_name=account.display_name)
        finally:
            db.close()
        self._set_current(identity)
        return identity

    def sign_in(self, email: str, password: str) -> Identity:
        """Deleted and blocked profiles are refused before anyone is notified."""
        db = self._session_factory()
        try:
            account = AuthService.authenticate(email, password, db)
            AuthService.check_profile(account.id, db)
            identity = Identity(id=account.id, email=account.email, display_name=account.display_name)
        finally:
            db.close()
        logger.info(f"Signed in {identity.id}")
        self._set_current(identity)
        return identity

    def sign_out(self) -> None:
        if self.current is None:
            return
        logger.info(f"Signing out {self.current.id}")
        self._set_current(None)

    def refresh(self) -> None:
        """Re-announce the current identity, as a token refresh does."""
        self._set_current(self.current)

    def update_display_name(self, display_name: str) -> None:
        if self.current is None:
            raise AuthError(exceptions.NOT_SIGNED_IN)
        db = self._session_factory()
        try:
            AuthService.update_display_name(self.current.id, display_name, db)
        finally:
            db.close()
        self.current = Identity(id=self.current.id, email=self.current.email, display_name=display_name.strip())

    def send_verification_email(self) -> bool:
        if self.current is None:
            raise AuthError(exceptions.NOT_SIGNED_IN)
        db = self._session_factory()
        try:
            account = AuthService.get_account(self.current.id, db)
            return bool(account) and AuthService.send_verification_email(account)
        finally:
            db.close()
