from datetime import datetime, timedelta, timezone
from email.utils import parsedate_to_datetime

from werkzeug.security import check_password_hash

from wanderlust.extensions import db
from wanderlust.models import User

from .helpers import flashes, location_path, login, logout


def test_signup_form_renders(client):
    r = client.get("/signup")
    assert r.status_code == 200
    assert b"Sign up" in r.data


def test_signup_creates_user_and_logs_in(client, app):
    r = client.post("/signup", data={"username": "bob", "email": "bob@example.com", "password": "s3cret"})
    assert r.status_code == 302
    assert location_path(r) == "/listings"
    assert ("success", "Welcome to Wanderlust!") in flashes(client)

    with app.app_context():
        user = User.query.filter_by(username="bob").one()
        assert user.email == "bob@example.com"
        assert user.password_hash != "s3cret"
        assert check_password_hash(user.password_hash, "s3cret")

    # Logged in: the new-listing form is reachable
    assert client.get("/listings/new").status_code == 200


def test_signup_duplicate_username(client, make_user):
    make_user("bob")
    r = client.post("/signup", data={"username": "bob", "email": "x@example.com", "password": "pw"})
    assert r.status_code == 302
    assert location_path(r) == "/signup"
    assert ("error", "A user with the given username is already registered") in flashes(client)


def test_signup_requires_all_fields(client, app):
    r = client.post("/signup", data={"username": "bob", "email": "", "password": "pw"})
    assert location_path(r) == "/signup"
    assert flashes(client)[0][0] == "error"
    with app.app_context():
        assert User.query.count() == 0


def test_login_success_redirects_to_listings(client, make_user):
    make_user("alice", "pw")
    r = login(client)
    assert r.status_code == 302
    assert location_path(r) == "/listings"
    assert ("success", "Welcome back to Wanderlust!") in flashes(client)


def test_login_bad_password(client, make_user):
    make_user("alice", "pw")
    r = login(client, password="wrong")
    assert location_path(r) == "/login"
    assert ("error", "Password or username is incorrect") in flashes(client)
    assert location_path(client.get("/listings/new")) == "/login"


def test_login_unknown_user(client):
    r = login(client, username="ghost")
    assert location_path(r) == "/login"
    assert ("error", "Password or username is incorrect") in flashes(client)


def test_login_form_redirects_when_authenticated(client, make_user):
    make_user("alice")
    login(client)
    r = client.get("/login")
    assert location_path(r) == "/listings"


def test_login_required_saves_url_and_redirects_back(client, make_user):
    make_user("alice")

    r = client.get("/listings/new")
    assert r.status_code == 302
    assert location_path(r) == "/login"
    assert ("error", "You must be logged in!") in flashes(client)

    r = login(client)
    assert location_path(r) == "/listings/new"

    # The saved URL is consumed by the login
    logout(client)
    r = login(client)
    assert location_path(r) == "/listings"


def test_login_required_on_post_saves_referring_page(client, make_user, make_listing):
    owner = make_user("alice")
    make_user("bob")
    listing_id = make_listing(owner)

    r = client.post(
        f"/listings/{listing_id}/reviews",
        data={"rating": "4", "comment": "nice"},
        headers={"Referer": f"http://localhost/listings/{listing_id}"},
    )
    assert location_path(r) == "/login"

    r = login(client, "bob")
    assert location_path(r) == f"/listings/{listing_id}"


def test_login_ignores_external_redirect_target(client, make_user):
    make_user("alice")
    with client.session_transaction() as sess:
        sess["redirect_url"] = "//evil.example.com/phish"
    r = login(client)
    assert location_path(r) == "/listings"


def test_logout(client, make_user):
    make_user("alice")
    login(client)
    r = logout(client)
    assert location_path(r) == "/listings"
    assert ("success", "You are logged out!") in flashes(client)
    assert location_path(client.get("/listings/new")) == "/login"


def test_session_cookie_is_permanent_and_httponly(client, app, make_user):
    assert app.permanent_session_lifetime == timedelta(days=7)

    make_user("alice")
    r = login(client)
    cookie = next(h for h in r.headers.getlist("Set-Cookie") if h.startswith("session="))
    assert "HttpOnly" in cookie

    expires_raw = next(p.split("=", 1)[1] for p in cookie.split("; ") if p.startswith("Expires="))
    remaining = parsedate_to_datetime(expires_raw) - datetime.now(timezone.utc)
    assert timedelta(days=6, hours=23) < remaining <= timedelta(days=7)


def test_user_loader_handles_deleted_user(client, app, make_user):
    user_id = make_user("alice")
    login(client)
    with app.app_context():
        db.session.delete(db.session.get(User, user_id))
        db.session.commit()
    # Stale session cookie: treated as anonymous
    assert location_path(client.get("/listings/new")) == "/login"
