"""
wanderlust/blueprints/listings/__init__.py

Blueprint package export.

IMPORTANT:
- Must expose listings_bp for app factory registration.
- Keep import minimal to avoid side effects.
"""

from __future__ import annotations

from .routes import listings_bp  # noqa: F401
