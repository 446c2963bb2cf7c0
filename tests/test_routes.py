"""
HTTP surface, exercised through FastAPI's TestClient.
"""

import pytest
from fastapi.testclient import TestClient

from auth.models import User
from database import get_db
from main import app
from news.services import NewsService

PASSWORD = "secret123"


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    # No context manager: startup would touch the real database and scheduler.
    yield TestClient(app)
    app.dependency_overrides.clear()


def register(client, username, email=None):
    email = email or f"{username}@example.com"
    response = client.post("/auth/register", json={"username": username, "email": email, "password": PASSWORD})
    assert response.status_code == 200, response.text
    return response.json()


def token_for(client, email):
    response = client.post("/auth/login", json={"email": email, "password": PASSWORD})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def alice(client):
    profile = register(client, "alice")
    return profile, token_for(client, "alice@example.com")


@pytest.fixture
def admin(client, db):
    profile = register(client, "root")
    db.query(User).filter(User.id == profile["id"]).update({"role": "ADMIN"})
    db.commit()
    return profile, token_for(client, "root@example.com")


def test_root(client):
    assert client.get("/").json() == {"message": "Welcome to CodeShareForum!"}


def test_register_and_me(client, alice):
    profile, headers = alice

    me = client.get("/auth/me", headers=headers)

    assert me.status_code == 200
    assert me.json()["id"] == profile["id"]
    assert me.json()["username"] == "alice"
    assert me.json()["role"] == "USER"


def test_me_requires_token(client):
    assert client.get("/auth/me").status_code == 401


def test_duplicate_email(client, alice):
    response = client.post("/auth/register",
                           json={"username": "again", "email": "alice@example.com", "password": PASSWORD})

    assert response.status_code == 400


def test_wrong_password(client, alice):
    response = client.post("/auth/login", json={"email": "alice@example.com", "password": "nope-nope"})

    assert response.status_code == 401


def test_update_profile(client, alice):
    _, headers = alice

    response = client.put("/auth/me", json={"username": "Alice B", "age": "31", "bio": "hi"}, headers=headers)

    assert response.status_code == 200
    assert response.json()["age"] == 31
    assert response.json()["needs_profile_setup"] is False


def test_post_and_comment_flow(client, alice):
    _, headers = alice

    created = client.post("/content/posts", data={"title": "First post", "content": ""}, headers=headers)
    assert created.status_code == 200, created.text
    post = created.json()
    assert post["content"] is None
    assert post["author_name"] == "alice"

    listed = client.get("/content/posts").json()
    assert [p["id"] for p in listed] == [post["id"]]

    comment = client.post(f"/content/posts/{post['id']}/comments", json={"text": "welcome"}, headers=headers)
    assert comment.status_code == 200

    comments = client.get(f"/content/posts/{post['id']}/comments").json()
    assert [c["text"] for c in comments] == ["welcome"]

    hot = client.get("/content/hot").json()
    assert hot[0]["post_title"] == "First post"


def test_post_requires_sign_in(client):
    assert client.post("/content/posts", data={"title": "x"}).status_code == 401


def test_only_author_edits(client, alice, admin):
    _, alice_headers = alice
    _, admin_headers = admin
    post = client.post("/content/posts", data={"title": "Mine"}, headers=alice_headers).json()

    forbidden = client.put(f"/content/posts/{post['id']}", json={"title": "Taken"}, headers=admin_headers)
    assert forbidden.status_code == 403

    deleted = client.delete(f"/content/posts/{post['id']}", headers=admin_headers)
    assert deleted.status_code == 200
    assert client.get(f"/content/posts/{post['id']}").status_code == 404


def test_admin_endpoints(client, alice, admin):
    alice_profile, alice_headers = alice
    admin_profile, admin_headers = admin

    assert client.get("/admin/users", headers=alice_headers).status_code == 403

    users = client.get("/admin/users", headers=admin_headers).json()
    assert {u["id"] for u in users} == {alice_profile["id"], admin_profile["id"]}

    blocked = client.post(f"/admin/users/{alice_profile['id']}/block", headers=admin_headers)
    assert blocked.json()["disabled"] is True
    assert client.get("/auth/me", headers=alice_headers).status_code == 403

    own = client.post(f"/admin/users/{admin_profile['id']}/block", headers=admin_headers)
    assert own.status_code == 400

    removed = client.delete(f"/admin/users/{alice_profile['id']}", headers=admin_headers)
    assert removed.status_code == 200
    login = client.post("/auth/login", json={"email": "alice@example.com", "password": PASSWORD})
    assert login.status_code == 403
    assert login.json()["detail"] == "This account has been deleted and cannot be registered again."


def test_news_preview(client, monkeypatch):
    from news.schemas import NewsArticle

    articles = [NewsArticle(article_id=str(n), title=f"t{n}", link=f"https://n.example/{n}") for n in range(5)]
    monkeypatch.setattr(NewsService, "fetch_news", staticmethod(lambda: articles))

    response = client.get("/news", params={"preview": True})

    assert [a["article_id"] for a in response.json()] == ["0", "1", "2"]
