# src/auth/session.py
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional
from auth.identity import Identity, IdentityProvider
from auth.schemas import UserResponse, USER, ADMIN
from auth.services import AuthService
from database import SessionLocal

logger = logging.getLogger(__name__)

ProfileLoader = Callable[[str], Optional[UserResponse]]


@dataclass(frozen=True)
class SessionState:
    identity: Optional[Identity] = None
    role: str = USER
    username: Optional[str] = None
    ready: bool = False

    @property
    def is_admin(self) -> bool:
        return self.identity is not None and self.role == ADMIN


SessionListener = Callable[[SessionState], None]


class SessionContext:
    """Single owner of who is signed in, with which role and name.

    Built once at start-up; views subscribe instead of reading profiles
    themselves. A blocked profile is signed out before anyone can observe
    it as signed in.
    """

    def __init__(self, provider: IdentityProvider, profile_loader: Optional[ProfileLoader] = None,
                 session_factory=SessionLocal):
        self._provider = provider
        self._session_factory = session_factory
        self._profile_loader = profile_loader or self._load_profile
        self._listeners: List[SessionListener] = []
        self._unsubscribe: Optional[Callable[[], None]] = None
        self.state = SessionState()

    def start(self) -> None:
        if self._unsubscribe is None:
            self._unsubscribe = self._provider.on_auth_state_changed(self._resolve)

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._listeners.clear()

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        self._listeners.append(listener)
        if self.state.ready:
            listener(self.state)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _load_profile(self, user_id: str) -> Optional[UserResponse]:
        db = self._session_factory()
        try:
            return AuthService.get_profile(user_id, db)
        finally:
            db.close()

    def _publish(self, state: SessionState) -> None:
        self.state = state
        for listener in list(self._listeners):
            listener(state)

    def _resolve(self, identity: Optional[Identity]) -> None:
        if identity is None:
            self._publish(SessionState(ready=True))
            return

        try:
            profile = self._profile_loader(identity.id)
        except Exception as e:
            # Stay signed in with defaults rather than spin forever.
            logger.error(f"Profile lookup failed for {identity.id}: {str(e)}")
            self._publish(SessionState(identity=identity, role=USER, username=None, ready=True))
            return

        if profile is not None and profile.disabled:
            # sign_out is a no-op once the provider is already signed out.
            logger.info(f"Profile {identity.id} is blocked, signing out")
            self._provider.sign_out()
            if self.state.identity is not None or not self.state.ready:
                self._publish(SessionState(ready=True))
            return

        if profile is None:
            self._publish(SessionState(identity=identity, role=USER, username=None, ready=True))
            return

        self._publish(SessionState(identity=identity, role=profile.role, username=profile.username, ready=True))
