"""
Credentials, the login and registration forms, and email verification.
"""

import pytest

from auth import exceptions
from auth.exceptions import AuthError, auth_error_message
from auth.forms import MISSING_CREDENTIALS, LoginForm, RegisterForm
from auth.identity import IdentityProvider
from auth.models import Account, User
from auth.services import AuthService

PASSWORD = "secret123"


@pytest.fixture
def provider(session_factory):
    return IdentityProvider(session_factory)


@pytest.fixture
def registered(provider):
    identity = provider.sign_up("Carol@Example.com", PASSWORD, "carol")
    provider.sign_out()
    return identity


def login(provider, email="carol@example.com", password=PASSWORD):
    form = LoginForm(provider)
    form.email = email
    form.password = password
    return form, form.submit()


def test_sign_up_creates_account_and_profile(provider, db):
    identity = provider.sign_up("dave@example.com", PASSWORD, " dave ")

    assert provider.current == identity
    assert identity.display_name == "dave"
    profile = db.query(User).filter(User.id == identity.id).one()
    assert profile.username == "dave"
    assert profile.role == "USER"
    assert profile.disabled is False
    assert profile.needs_profile_setup is True


def test_sign_up_sends_verification_email(provider, db, sent_emails):
    identity = provider.sign_up("dave@example.com", PASSWORD, "dave")

    assert len(sent_emails) == 1
    assert sent_emails[0]["to"] == ["dave@example.com"]
    token = db.query(Account).filter(Account.id == identity.id).one().verification_token
    assert token in sent_emails[0]["body"]

    account = AuthService.verify_email(token, db)
    assert account.email_verified is True


@pytest.mark.parametrize("email,password,code", [
    ("not-an-email", PASSWORD, exceptions.INVALID_EMAIL),
    ("erin@example.com", "12345", exceptions.WEAK_PASSWORD),
])
def test_sign_up_rejections(provider, email, password, code):
    with pytest.raises(AuthError) as exc:
        provider.sign_up(email, password, "erin")

    assert exc.value.code == code
    assert provider.current is None


def test_email_can_only_register_once(provider, registered):
    with pytest.raises(AuthError) as exc:
        provider.sign_up("carol@example.com", PASSWORD, "carol2")

    assert exc.value.code == exceptions.EMAIL_IN_USE


def test_sign_in_error_codes(provider, registered):
    with pytest.raises(AuthError) as exc:
        provider.sign_in("nobody@example.com", PASSWORD)
    assert exc.value.code == exceptions.USER_NOT_FOUND

    with pytest.raises(AuthError) as exc:
        provider.sign_in("carol@example.com", "wrong-pass")
    assert exc.value.code == exceptions.WRONG_PASSWORD


def test_sign_out_twice_is_harmless(provider, registered):
    events = []
    provider.sign_in("carol@example.com", PASSWORD)
    provider.on_auth_state_changed(events.append)

    provider.sign_out()
    provider.sign_out()

    assert [e is None for e in events] == [False, True]


def test_login_form_success(provider, session_factory, registered):
    form, ok = login(provider)

    assert ok is True
    assert form.error is None
    assert form.loading is False
    assert provider.current.id == registered.id


def test_login_form_requires_both_fields(provider, session_factory):
    form, ok = login(provider, password="")

    assert ok is False
    assert form.error == MISSING_CREDENTIALS


def test_login_wrong_password_message(provider, session_factory, registered):
    form, ok = login(provider, password="nope-nope")

    assert ok is False
    assert form.error == auth_error_message(exceptions.WRONG_PASSWORD)


def test_login_of_deleted_profile_signs_out(provider, session_factory, registered, db):
    db.query(User).filter(User.id == registered.id).delete()
    db.commit()

    form, ok = login(provider)

    assert ok is False
    assert provider.current is None
    assert form.error == auth_error_message(exceptions.USER_DELETED)


def test_login_of_blocked_profile_signs_out(provider, session_factory, registered, db):
    db.query(User).filter(User.id == registered.id).update({"disabled": True})
    db.commit()

    form, ok = login(provider)

    assert ok is False
    assert provider.current is None
    assert form.error == auth_error_message(exceptions.USER_DISABLED)


def test_deleted_profile_cannot_register_again(provider, registered, db):
    db.query(User).filter(User.id == registered.id).delete()
    db.commit()

    form = RegisterForm(provider)
    form.username, form.email, form.password = "carol", "carol@example.com", PASSWORD

    assert form.submit() is False
    assert form.email_error == auth_error_message(exceptions.EMAIL_IN_USE)


def test_register_form_empty_fields_do_nothing(provider):
    form = RegisterForm(provider)
    form.email = "x@example.com"

    assert form.submit() is False
    assert form.email_error is None
    assert form.password_error is None
    assert form.error is None


def test_register_form_inline_errors(provider):
    form = RegisterForm(provider)
    form.username = "frank"
    form.set_email("frank@")
    form.set_password(PASSWORD)

    assert form.submit() is False
    assert form.email_error == auth_error_message(exceptions.INVALID_EMAIL)

    form.set_email("frank@example.com")
    assert form.email_error is None
    form.set_password("123")
    assert form.submit() is False
    assert form.password_error == "Password must be at least 6 characters"


def test_register_form_success_signs_in(provider):
    form = RegisterForm(provider)
    form.username, form.email, form.password = "gina", "gina@example.com", PASSWORD

    assert form.submit() is True
    assert provider.current.email == "gina@example.com"


def test_verification_failure_does_not_block_sign_up(provider, monkeypatch):
    from notifications.services import EmailService

    def broken(*args, **kwargs):
        raise OSError("smtp down")

    monkeypatch.setattr(EmailService, "send_email", broken)

    identity = provider.sign_up("hank@example.com", PASSWORD, "hank")

    assert provider.current == identity
    assert provider.send_verification_email() is False


def test_update_display_name(provider, db):
    identity = provider.sign_up("lee@example.com", PASSWORD, "lee")

    provider.update_display_name("  Lee S ")

    assert provider.current.display_name == "Lee S"
    assert provider.current.id == identity.id
    assert db.query(Account).filter(Account.id == identity.id).one().display_name == "Lee S"


def test_update_display_name_requires_sign_in(provider):
    with pytest.raises(AuthError) as exc:
        provider.update_display_name("nobody")

    assert exc.value.code == exceptions.NOT_SIGNED_IN


@pytest.mark.parametrize("change", [
    lambda q: q.delete(),
    lambda q: q.update({"disabled": True}),
])
def test_refused_login_is_never_seen_downstream(provider, session_factory, registered, db, change):
    from auth.session import SessionContext
    from navigation.composer import Navigator, Screen

    change(db.query(User).filter(User.id == registered.id))
    db.commit()
    session = SessionContext(provider, session_factory=session_factory)
    seen = []
    session.subscribe(lambda state: seen.append(state.identity))
    session.start()
    navigator = Navigator(session)
    navigator.navigate(Screen.LOGIN)

    form, ok = login(provider)

    assert ok is False
    assert form.error is not None
    assert seen == [None]
    assert navigator.screen == Screen.LOGIN
