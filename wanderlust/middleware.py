"""
HTML-form method override.

Browsers can only submit GET/POST. Forms that update or delete post to
e.g. /listings/3?_method=DELETE and this WSGI middleware rewrites the
request method before Flask routes it. Only the query string is inspected
(reading the body here would consume the upload stream).
"""

from __future__ import annotations

from urllib.parse import parse_qs

OVERRIDE_PARAM = "_method"
ALLOWED_OVERRIDES = frozenset({"PUT", "PATCH", "DELETE"})


class MethodOverrideMiddleware:
    def __init__(self, wsgi_app):
        self.wsgi_app = wsgi_app

    def __call__(self, environ, start_response):
        if environ.get("REQUEST_METHOD", "").upper() == "POST":
            query = parse_qs(environ.get("QUERY_STRING", ""))
            values = query.get(OVERRIDE_PARAM)
            if values:
                method = values[0].strip().upper()
                if method in ALLOWED_OVERRIDES:
                    environ["REQUEST_METHOD"] = method
        return self.wsgi_app(environ, start_response)
