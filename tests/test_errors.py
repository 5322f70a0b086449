import pytest

from config import TestConfig
from wanderlust import create_app
from wanderlust.errors import AppError
from wanderlust.middleware import MethodOverrideMiddleware
from wanderlust.security import safe_next_url


def test_unknown_route_renders_404_page(client):
    r = client.get("/definitely/not/here")
    assert r.status_code == 404
    assert b"Page Not Found!" in r.data


def test_non_integer_listing_id_is_404(client):
    assert client.get("/listings/abc").status_code == 404


def test_wrong_method_uses_error_page(client):
    r = client.delete("/signup")
    assert r.status_code == 405
    assert b"405" in r.data


def test_app_error_renders_status_and_message(app, client):
    @app.route("/_teapot")
    def _teapot():
        raise AppError(418, "I'm a teapot")

    r = client.get("/_teapot")
    assert r.status_code == 418
    assert b"I&#39;m a teapot" in r.data


def test_app_error_defaults():
    err = AppError()
    assert err.status_code == 500
    assert err.message == "Something went wrong!"


def test_unhandled_exception_renders_generic_500(app, client):
    @app.route("/_boom")
    def _boom():
        raise RuntimeError("kaboom")

    r = client.get("/_boom")
    assert r.status_code == 500
    assert b"Something went wrong!" in r.data
    assert b"kaboom" not in r.data


def test_csrf_enforced_when_enabled(tmp_path):
    class _CsrfConfig(TestConfig):
        WTF_CSRF_ENABLED = True
        UPLOAD_FOLDER = str(tmp_path / "uploads")

    app = create_app(_CsrfConfig)
    r = app.test_client().post("/signup", data={"username": "a", "email": "a@b.c", "password": "pw"})
    assert r.status_code == 400
    assert b"CSRF" in r.data


def test_forms_carry_csrf_token(client):
    assert b'name="csrf_token"' in client.get("/signup").data
    assert b'name="csrf_token"' in client.get("/login").data


# ---------------------------------------------------------------------
# Method override middleware
# ---------------------------------------------------------------------
def _run_middleware(method, query):
    seen = {}

    def inner(environ, start_response):
        seen["method"] = environ["REQUEST_METHOD"]
        return []

    MethodOverrideMiddleware(inner)({"REQUEST_METHOD": method, "QUERY_STRING": query}, None)
    return seen["method"]


@pytest.mark.parametrize(
    "method, query, expected",
    [
        ("POST", "_method=DELETE", "DELETE"),
        ("POST", "_method=put", "PUT"),
        ("POST", "_method=PATCH&x=1", "PATCH"),
        ("POST", "_method=GET", "POST"),
        ("POST", "", "POST"),
        ("GET", "_method=DELETE", "GET"),
    ],
)
def test_method_override(method, query, expected):
    assert _run_middleware(method, query) == expected


# ---------------------------------------------------------------------
# Redirect target sanitising
# ---------------------------------------------------------------------
@pytest.mark.parametrize(
    "raw, expected",
    [
        ("/listings/3", "/listings/3"),
        ("/listings?x=1", "/listings?x=1"),
        (None, "/listings"),
        ("", "/listings"),
        ("https://evil.example.com/", "/listings"),
        ("//evil.example.com/", "/listings"),
        ("/\\evil.example.com", "/listings"),
        ("listings/3", "/listings"),
        ("javascript:alert(1)", "/listings"),
    ],
)
def test_safe_next_url(app, raw, expected):
    with app.test_request_context():
        assert safe_next_url(raw, fallback_endpoint="listings.index") == expected
