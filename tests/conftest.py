import pytest

from config import TestConfig
from wanderlust import create_app
from wanderlust.extensions import db
from wanderlust.models import Listing, User


@pytest.fixture()
def app(tmp_path):
    class _Config(TestConfig):
        UPLOAD_FOLDER = str(tmp_path / "uploads")

    app = create_app(_Config)

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def make_user(app):
    """Insert a user directly; returns its id."""

    def _make(username="alice", password="pw", email=None):
        with app.app_context():
            u = User(username=username, email=email or f"{username}@example.com")
            u.set_password(password)
            db.session.add(u)
            db.session.commit()
            return u.id

    return _make


@pytest.fixture()
def make_listing(app):
    """Insert a listing directly; returns its id."""

    def _make(owner_id, title="Cozy Cottage", **fields):
        with app.app_context():
            listing = Listing(title=title, owner_id=owner_id, **fields)
            db.session.add(listing)
            db.session.commit()
            return listing.id

    return _make
