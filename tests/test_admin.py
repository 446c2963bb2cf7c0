"""
User moderation: the admin list and its local patching.
"""

import pytest

from admin.services import AdminService
from admin.users import AdminUserList
from auth.models import User


@pytest.fixture
def admin(make_user):
    return make_user("root", role="ADMIN")


@pytest.fixture
def screen(admin, session_factory):
    return AdminUserList(admin, "ADMIN", session_factory)


def row(screen, user_id):
    return next(u for u in screen.users if u.id == user_id)


def test_non_admin_sees_nothing(make_user, session_factory):
    alice = make_user("alice")
    screen = AdminUserList(alice, "USER", session_factory)

    screen.load()

    assert screen.users == []


def test_own_row_has_no_actions(screen, admin, make_user):
    alice = make_user("alice")
    screen.load()

    assert screen.actions_for(row(screen, admin.id)) == []
    assert screen.actions_for(row(screen, alice.id)) == ["block", "delete"]


def test_block_patches_list_without_reload(screen, make_user, db):
    alice = make_user("alice")
    screen.load()

    assert screen.block(alice.id) is True

    assert row(screen, alice.id).disabled is True
    assert screen.actions_for(row(screen, alice.id)) == ["unblock", "delete"]
    assert db.query(User).filter(User.id == alice.id).one().disabled is True


def test_block_is_idempotent(screen, make_user):
    alice = make_user("alice")
    screen.load()

    screen.block(alice.id)
    screen.block(alice.id)

    assert row(screen, alice.id).disabled is True
    assert screen.error is None


def test_unblock(screen, make_user):
    alice = make_user("alice", disabled=True)
    screen.load()

    assert screen.unblock(alice.id) is True
    assert row(screen, alice.id).disabled is False


def test_delete_removes_row_and_profile(screen, make_user, db):
    alice = make_user("alice")
    screen.load()

    assert screen.delete(alice.id) is True

    assert alice.id not in [u.id for u in screen.users]
    assert db.query(User).filter(User.id == alice.id).first() is None


def test_admin_cannot_act_on_self(screen, admin):
    screen.load()

    assert screen.block(admin.id) is False
    assert screen.error == "Not allowed"
    assert row(screen, admin.id).disabled is False


def test_failed_write_keeps_list(screen, make_user, monkeypatch):
    alice = make_user("alice")
    screen.load()
    before = list(screen.users)

    def broken(*args):
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(AdminService, "set_disabled", broken)

    assert screen.block(alice.id) is False
    assert screen.users == before
    assert screen.error == "Action failed"


def test_block_unknown_user_reports_not_found(screen):
    screen.load()

    assert screen.block("nobody") is False
    assert screen.error == "User not found"
