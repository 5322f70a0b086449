"""
Reviews blueprint package.

Exposes reviews_bp (nested under /listings/<listing_id>/reviews) for app factory
registration. The routes live in routes.py.
"""

from .routes import reviews_bp  # noqa: F401
