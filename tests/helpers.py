"""Small helpers shared by the test modules."""

import io
from urllib.parse import urlparse


def login(client, username="alice", password="pw", **kwargs):
    return client.post("/login", data={"username": username, "password": password}, **kwargs)


def logout(client):
    return client.get("/logout")


def location_path(response) -> str:
    """Path (+query) of a redirect response's Location header."""
    parsed = urlparse(response.headers["Location"])
    return f"{parsed.path}?{parsed.query}" if parsed.query else parsed.path


def flashes(client):
    """Pending (category, message) flashes in the client's session."""
    with client.session_transaction() as sess:
        return list(sess.get("_flashes", []))


def image_file(name="house.png", payload=b"\x89PNG fake image bytes"):
    return (io.BytesIO(payload), name)
