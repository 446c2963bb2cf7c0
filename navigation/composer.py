# src/navigation/composer.py
"""Which screen is showing, and what the home screen has open.

The home screen's own state (an open post, or a post being edited) lives
in a ``HomeState`` stamped with a generation. Whenever home is re-entered
the generation goes up and a fresh ``HomeState`` replaces the old one.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional
from auth.schemas import ADMIN
from auth.session import SessionContext, SessionState

logger = logging.getLogger(__name__)


class Screen(str, Enum):
    HOME = "home"
    LOGIN = "login"
    REGISTER = "register"
    CREATE = "create"
    ADMIN_USERS = "adminUsers"
    PROFILE = "profile"
    NEWS = "news"


@dataclass
class HomeState:
    generation: int
    open_post_id: Optional[str] = None
    editing_post_id: Optional[str] = None

    def open_post(self, post_id: str) -> None:
        self.open_post_id = post_id
        self.editing_post_id = None

    def edit_post(self, post_id: str) -> None:
        self.editing_post_id = post_id
        self.open_post_id = None

    def close(self) -> None:
        self.open_post_id = None
        self.editing_post_id = None

    @property
    def showing_feed(self) -> bool:
        return self.open_post_id is None and self.editing_post_id is None


class Navigator:
    def __init__(self, session: Optional[SessionContext] = None):
        self.screen = Screen.HOME
        self.profile_user_id: Optional[str] = None
        self.home_generation = 0
        self.home = HomeState(generation=0)
        self.session_state = SessionState()
        self._last_identity_id: Optional[str] = None
        self._unsubscribe: Optional[Callable[[], None]] = None
        if session is not None:
            self._unsubscribe = session.subscribe(self._on_session)

    @property
    def identity(self):
        return self.session_state.identity

    @property
    def role(self) -> str:
        return self.session_state.role

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_session(self, state: SessionState) -> None:
        self.session_state = state
        identity_id = state.identity.id if state.identity else None
        if identity_id is not None and identity_id != self._last_identity_id:
            self.on_sign_in()
        elif identity_id is None and self.screen in (Screen.CREATE, Screen.ADMIN_USERS):
            self.back_to_home()
        self._last_identity_id = identity_id

    def reset_home(self) -> None:
        self.home_generation += 1
        self.home = HomeState(generation=self.home_generation)

    def on_sign_in(self) -> None:
        self.screen = Screen.HOME
        self.reset_home()

    def navigate(self, screen, user_id: Optional[str] = None) -> bool:
        """Move to ``screen``. Returns False when a guard keeps us where we are."""
        screen = Screen(screen)
        if screen == Screen.CREATE and self.identity is None:
            return False
        if screen == Screen.ADMIN_USERS and (self.identity is None or self.role != ADMIN):
            return False
        if screen == Screen.PROFILE:
            if not user_id:
                return False
            self.profile_user_id = user_id
        if screen == Screen.HOME:
            self.reset_home()
        logger.debug(f"Navigate {self.screen.value} -> {screen.value}")
        self.screen = screen
        return True

    def open_profile(self, user_id: Optional[str]) -> bool:
        return self.navigate(Screen.PROFILE, user_id)

    def back_to_home(self) -> None:
        self.reset_home()
        self.screen = Screen.HOME

    def switch_auth(self) -> None:
        if self.screen == Screen.LOGIN:
            self.screen = Screen.REGISTER
        elif self.screen == Screen.REGISTER:
            self.screen = Screen.LOGIN

    def sign_out(self, sign_out: Callable[[], None]) -> None:
        """The header's logout: sign out, then show the plain feed."""
        sign_out()
        self.navigate(Screen.HOME)
