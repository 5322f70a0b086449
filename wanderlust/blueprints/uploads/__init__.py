"""
Uploads blueprint package.

Exposes uploads_bp (serves stored listing images under /uploads) for app factory
registration. The route lives in routes.py.
"""

from .routes import uploads_bp  # noqa: F401
