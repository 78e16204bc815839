from datetime import date
from decimal import Decimal

import pytest

from app import create_app
from config import TestingConfig
from extensions import db
from models import User, House


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def ctx(app):
    """Keep an app context open for tests that call services directly."""
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def fixed_code(monkeypatch):
    monkeypatch.setattr("services.verification.generate_code", lambda: "123456")
    return "123456"


def make_user(email, role="tenant", password="secret1", name=None, **kwargs):
    user = User(email=email, name=name or email.split("@")[0], role=role, **kwargs)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    return user


def make_house(owner_email, price=100, start=date(2024, 1, 1), end=date(2024, 1, 5), **kwargs):
    fields = dict(
        room_name="Sunny Studio",
        room_type="Studio",
        address="12 Jalan Ampang",
        price=Decimal(str(price)),
        start_date=start,
        end_date=end,
    )
    fields.update(kwargs)
    house = House(owner_email=owner_email, **fields)
    db.session.add(house)
    db.session.commit()
    return house


def login(client, app, email):
    with app.app_context():
        user_id = User.query.filter_by(email=email).one().id
    with client.session_transaction() as sess:
        sess["_user_id"] = str(user_id)
        sess["_fresh"] = True


@pytest.fixture
def people(app):
    """An owner, two tenants and an admin; returns their emails."""
    with app.app_context():
        make_user("owner@example.com", role="owner", photo_url="photos/owner.jpg")
        make_user("alice@example.com", role="tenant", photo_url="photos/alice.jpg")
        make_user("bob@example.com", role="tenant")
        make_user("admin@example.com", role="admin")
    return {
        "owner": "owner@example.com",
        "tenant": "alice@example.com",
        "other_tenant": "bob@example.com",
        "admin": "admin@example.com",
    }


@pytest.fixture
def house_id(app, people):
    with app.app_context():
        return make_house(people["owner"]).id
