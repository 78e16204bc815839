import pytest

from extensions import db, mail
from models import User
from tests.conftest import make_user, login

NEW_USER = {
    "email": "Carol@Example.com",
    "name": "Carol",
    "password": "hunter22",
    "confirm_password": "hunter22",
    "role": "owner",
    "birthday": "1990-04-02",
}


def _verify(client, email, purpose, code):
    return client.post("/auth/verify", json={"email": email, "purpose": purpose, "code": code})


def test_register_then_verify_creates_account(app, client, fixed_code):
    with mail.record_messages() as outbox:
        resp = client.post("/auth/register", json=NEW_USER)
    assert resp.status_code == 200
    assert len(outbox) == 1

    with app.app_context():
        assert User.query.count() == 0

    resp = _verify(client, "carol@example.com", "register", fixed_code)
    assert resp.status_code == 200
    with app.app_context():
        user = User.query.filter_by(email="carol@example.com").one()
        assert user.role == "owner"
        assert user.birthday.isoformat() == "1990-04-02"
        assert user.check_password("hunter22")


@pytest.mark.parametrize("change, message", [
    ({"confirm_password": "other"}, "do not match"),
    ({"password": "abc", "confirm_password": "abc"}, "at least"),
    ({"role": "admin"}, "owner or a tenant"),
    ({"email": "not-an-email"}, "valid email"),
])
def test_register_validation(client, change, message):
    resp = client.post("/auth/register", json={**NEW_USER, **change})
    assert resp.status_code == 400
    assert message in resp.get_json()["message"]


def test_register_existing_email(app, client, people):
    resp = client.post("/auth/register", json={**NEW_USER, "email": people["tenant"]})
    assert resp.status_code == 400


def test_wrong_register_code(client, fixed_code):
    client.post("/auth/register", json=NEW_USER)
    assert _verify(client, "carol@example.com", "register", "000000").status_code == 400


def test_login_is_two_step(app, client, people, fixed_code):
    resp = client.post("/auth/login", json={"email": people["tenant"], "password": "secret1"})
    assert resp.status_code == 200

    # not logged in yet
    assert client.get("/account/profile", headers={"Accept": "application/json"}).status_code == 302

    resp = _verify(client, people["tenant"], "login", fixed_code)
    assert resp.status_code == 200
    assert resp.get_json()["role"] == "tenant"

    profile = client.get("/account/profile")
    assert profile.status_code == 200
    assert profile.get_json()["email"] == people["tenant"]


def test_login_bad_password(client, people):
    resp = client.post("/auth/login", json={"email": people["tenant"], "password": "nope"})
    assert resp.status_code == 400


def test_restricted_user_cannot_log_in(app, client):
    with app.app_context():
        make_user("mallory@example.com", status="restricted")
    resp = client.post("/auth/login", json={"email": "mallory@example.com", "password": "secret1"})
    assert resp.status_code == 403


def test_password_reset_flow(app, client, people, fixed_code):
    email = people["other_tenant"]
    new = {"email": email, "password": "newpass1", "confirm_password": "newpass1"}

    # no verified code yet
    assert client.post("/auth/reset-password", json=new).status_code == 400

    assert client.post("/auth/forgot-password", json={"email": email}).status_code == 200
    assert _verify(client, email, "reset", fixed_code).status_code == 200
    assert client.post("/auth/reset-password", json=new).status_code == 200

    with app.app_context():
        assert User.query.filter_by(email=email).one().check_password("newpass1")

    # the verified window is used up
    assert client.post("/auth/reset-password", json=new).status_code == 400


def test_forgot_password_unknown_email(client):
    resp = client.post("/auth/forgot-password", json={"email": "ghost@example.com"})
    assert resp.status_code == 404


def test_change_password(app, client, people):
    login(client, app, people["tenant"])
    bad = client.post("/auth/change-password", json={
        "current_password": "wrong", "password": "abcdef", "confirm_password": "abcdef",
    })
    assert bad.status_code == 400

    ok = client.post("/auth/change-password", json={
        "current_password": "secret1", "password": "abcdef", "confirm_password": "abcdef",
    })
    assert ok.status_code == 200
    with app.app_context():
        assert db.session.query(User).filter_by(email=people["tenant"]).one().check_password("abcdef")
