# src/client.py
"""Client-side wiring: one identity provider, one session, one navigator."""
from typing import Optional
from admin.users import AdminUserList
from auth.forms import LoginForm, RegisterForm
from auth.identity import IdentityProvider
from auth.profile import ProfileView
from auth.session import SessionContext
from content.feed import HomeFeed, NewsView, PostDetailView
from content.forms import PostForm
from content.services import PostService
from database import SessionLocal
from navigation.composer import Navigator, Screen


class ForumClient:
    def __init__(self, session_factory=SessionLocal, provider: IdentityProvider = None):
        self.session_factory = session_factory
        self.provider = provider or IdentityProvider(session_factory)
        self.session = SessionContext(self.provider, session_factory=session_factory)
        self.navigator: Optional[Navigator] = None

    def start(self) -> "ForumClient":
        self.session.start()
        self.navigator = Navigator(self.session)
        return self

    def close(self) -> None:
        if self.navigator is not None:
            self.navigator.close()
        self.session.close()

    @property
    def identity(self):
        return self.session.state.identity

    @property
    def role(self) -> str:
        return self.session.state.role

    def logout(self) -> None:
        self.navigator.sign_out(self.provider.sign_out)

    def home_feed(self, **kwargs) -> HomeFeed:
        return HomeFeed(self.session_factory, **kwargs)

    def news_view(self, **kwargs) -> Optional[NewsView]:
        if self.navigator.screen != Screen.NEWS:
            return None
        return NewsView(**kwargs)

    def post_detail(self, post_id: str) -> PostDetailView:
        return PostDetailView(post_id, self.session_factory)

    def profile_view(self) -> Optional[ProfileView]:
        if self.navigator.screen != Screen.PROFILE or not self.navigator.profile_user_id:
            return None
        return ProfileView(self.navigator.profile_user_id, self.identity, self.session_factory)

    def admin_users(self) -> Optional[AdminUserList]:
        if self.navigator.screen != Screen.ADMIN_USERS:
            return None
        return AdminUserList(self.identity, self.role, self.session_factory)

    def login_form(self) -> LoginForm:
        return LoginForm(self.provider)

    def register_form(self) -> RegisterForm:
        return RegisterForm(self.provider)

    def create_form(self) -> Optional[PostForm]:
        if self.identity is None:
            return None
        return PostForm(self.identity, session_factory=self.session_factory)

    def edit_form(self) -> Optional[PostForm]:
        """The edit form for the post home has open for editing, if any."""
        post_id = self.navigator.home.editing_post_id
        if self.identity is None or post_id is None:
            return None
        db = self.session_factory()
        try:
            post = PostService.get_post(post_id, db)
        finally:
            db.close()
        if post is None:
            return None
        return PostForm(self.identity, post, session_factory=self.session_factory)
