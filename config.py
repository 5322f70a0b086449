"""
Application configuration.

This module defines the configuration settings for the Flask application: database connection, secret key,
session lifetime and upload storage. Sensitive values come from environment variables (a local .env file is
loaded when present), with defaults for development. In production, set SECRET_KEY and DATABASE_URL.
"""

import os
from datetime import timedelta
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent

load_dotenv(BASE_DIR / ".env")


class Config:
    """Base configuration shared by all environments."""

    # IMPORTANT: change this in production
    SECRET_KEY = os.environ.get("SECRET_KEY", "mySupersecretcode")

    # Database: SQLite for development (simple file in project folder)
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL",
        f"sqlite:///{BASE_DIR / 'wanderlust.db'}"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Session cookie: seven days, not readable from JS
    PERMANENT_SESSION_LIFETIME = timedelta(days=7)
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"

    # CSRF protection for forms
    WTF_CSRF_ENABLED = True

    # Uploads (listing images) are stored on local disk and served under /uploads
    UPLOAD_FOLDER = os.environ.get("UPLOAD_FOLDER", str(BASE_DIR / "uploads"))
    MAX_CONTENT_LENGTH = 5 * 1024 * 1024
    ALLOWED_IMAGE_EXTENSIONS = {"png", "jpg", "jpeg", "gif", "webp"}
    DEFAULT_LISTING_IMAGE_URL = (
        "https://images.unsplash.com/photo-1625505826533-5c80aca7d157"
        "?auto=format&fit=crop&w=800&q=60"
    )

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # App UI name (used in templates and flash messages)
    APP_NAME = "Wanderlust"


class TestConfig(Config):
    """Configuration used by the test-suite."""

    TESTING = True
    SECRET_KEY = "test-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    WTF_CSRF_ENABLED = False
    LOG_LEVEL = "WARNING"
