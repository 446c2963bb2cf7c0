"""
The post composer and the profile screen.
"""

import pytest

from auth.profile import ProfileView
from content.forms import TITLE_REQUIRED, PostForm
from content.services import PostService


class FakeBlobStore:
    def __init__(self, fail=False):
        self.fail = fail
        self.uploads = []

    async def upload_image(self, data, user_id, mime_type="image/jpeg"):
        if self.fail:
            raise RuntimeError("storage unavailable")
        self.uploads.append(("image", user_id, data))
        return f"https://cdn.example/images/{user_id}/1"

    async def upload_file(self, data, name, user_id, mime_type="application/octet-stream"):
        self.uploads.append(("file", user_id, name))
        return f"https://cdn.example/files/{user_id}/1-{name}"


@pytest.mark.asyncio
async def test_blank_title_stops_before_upload(session_factory, make_user):
    alice = make_user()
    store = FakeBlobStore()
    form = PostForm(alice, session_factory=session_factory, blob_store=store)
    form.set_title("   ")
    form.pick_image(b"png")

    assert await form.submit() is None
    assert form.title_error == TITLE_REQUIRED
    assert store.uploads == []

    form.set_title("Now titled")
    assert form.title_error is None


@pytest.mark.asyncio
async def test_create_with_attachments(session_factory, make_user, db):
    alice = make_user()
    store = FakeBlobStore()
    form = PostForm(alice, session_factory=session_factory, blob_store=store)
    form.set_title("With files")
    form.content = "see attached"
    form.pick_image(b"png")
    form.pick_file(b"%PDF", "report.pdf", "application/pdf")

    post = await form.submit()

    assert post.image_url == f"https://cdn.example/images/{alice.id}/1"
    assert post.file_name == "report.pdf"
    assert [kind for kind, _, _ in store.uploads] == ["image", "file"]
    assert form.loading is False
    assert PostService.get_post(post.id, db).title == "With files"


@pytest.mark.asyncio
async def test_upload_failure_is_reported_and_loading_reset(session_factory, make_user, db):
    alice = make_user()
    form = PostForm(alice, session_factory=session_factory, blob_store=FakeBlobStore(fail=True))
    form.set_title("Doomed")
    form.pick_image(b"png")

    assert await form.submit() is None
    assert form.error == "Could not save the post"
    assert form.loading is False
    assert PostService.get_posts(None, db) == []


@pytest.mark.asyncio
async def test_submit_without_identity_does_nothing(session_factory):
    form = PostForm(None, session_factory=session_factory, blob_store=FakeBlobStore())
    form.set_title("Anonymous")

    assert await form.submit() is None
    assert form.error is None


@pytest.mark.asyncio
async def test_edit_prefills_and_updates(session_factory, make_user, make_post):
    alice = make_user()
    original = PostService.get_post(make_post(alice, title="Draft", content="v1").id, session_factory())
    form = PostForm(alice, original, session_factory=session_factory, blob_store=FakeBlobStore())

    assert form.editing
    assert (form.title, form.content) == ("Draft", "v1")

    form.content = "v2"
    updated = await form.submit()

    assert updated.content == "v2"
    assert updated.id == original.id


@pytest.mark.asyncio
async def test_edit_by_someone_else_is_refused(session_factory, make_user, make_post):
    alice = make_user("alice")
    bob = make_user("bob")
    original = PostService.get_post(make_post(alice).id, session_factory())
    form = PostForm(bob, original, session_factory=session_factory, blob_store=FakeBlobStore())

    assert await form.submit() is None
    assert form.error == "Only the author can edit this post"


def test_profile_view_owner_and_visitor(session_factory, make_user, make_post):
    alice = make_user("alice")
    bob = make_user("bob")
    make_post(alice, title="a1")

    own = ProfileView(alice.id, alice, session_factory)
    own.mount()
    visiting = ProfileView(alice.id, bob, session_factory)
    visiting.mount()

    assert own.is_me and not visiting.is_me
    assert [p.title for p in visiting.posts] == ["a1"]
    visiting.start_editing()
    assert visiting.editing is False
    assert visiting.save() is False


def test_profile_save(session_factory, make_user):
    alice = make_user("alice")
    view = ProfileView(alice.id, alice, session_factory)
    view.mount()
    view.start_editing()

    view.username = "Alice"
    view.age = "30"
    view.bio = "Python person"
    assert view.save() is True

    assert view.editing is False
    assert view.profile.username == "Alice"
    assert view.profile.age == 30


def test_profile_age_must_be_a_number(session_factory, make_user):
    alice = make_user("alice")
    view = ProfileView(alice.id, alice, session_factory)
    view.mount()

    view.age = "thirty"

    assert view.save() is False
    assert view.error == "Age must be a number"


@pytest.mark.asyncio
async def test_profile_photo_upload(session_factory, make_user):
    alice = make_user("alice")
    store = FakeBlobStore()
    view = ProfileView(alice.id, alice, session_factory, blob_store=store)
    view.mount()

    await view.change_photo(b"jpeg")

    assert view.photo_url == f"https://cdn.example/images/{alice.id}/1"
