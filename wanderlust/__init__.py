"""
wanderlust/__init__.py

Flask application factory for the Wanderlust listings marketplace.

Request pipeline:
- MethodOverrideMiddleware (HTML forms reach PUT/DELETE routes)
- session (7-day permanent cookie) + Flask-Login + CSRF + flash
- blueprints: users (signup/login/logout), listings, reviews, uploads
- central error handlers (404 catch-all + generic error page)

UI is never trusted; ownership is enforced server-side (security.py).
"""

from __future__ import annotations

import logging
from pathlib import Path

import click
from flask import Flask, redirect, session, url_for
from flask_login import current_user

from .errors import register_error_handlers
from .extensions import csrf, db, login_manager, migrate
from .middleware import MethodOverrideMiddleware
from .models import User, get_by_id
from .security import handle_unauthorized

# Blueprint imports kept inside create_app() to reduce import side effects.


def _configure_logging(app: Flask) -> None:
    """Level from LOG_LEVEL; Flask's default handler is kept."""
    level = logging.getLevelName(str(app.config.get("LOG_LEVEL", "INFO")).upper())
    if not isinstance(level, int):
        level = logging.INFO

    app.logger.setLevel(level)
    # Module loggers (wanderlust.*) share the level and reach the root handler
    logging.getLogger(__name__).setLevel(level)
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


def create_app(config_object: object = "config.Config") -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_object)

    _configure_logging(app)
    Path(app.config["UPLOAD_FOLDER"]).mkdir(parents=True, exist_ok=True)

    app.wsgi_app = MethodOverrideMiddleware(app.wsgi_app)

    # Extensions
    db.init_app(app)
    migrate.init_app(app, db)
    csrf.init_app(app)

    login_manager.init_app(app)
    login_manager.login_view = "users.login_form"
    login_manager.unauthorized_handler(handle_unauthorized)

    @login_manager.user_loader
    def load_user(user_id: str) -> User | None:
        """Load user for Flask-Login."""
        try:
            return get_by_id(User, int(user_id))
        except (TypeError, ValueError):
            return None

    @app.before_request
    def _permanent_session():
        """Session cookie lives PERMANENT_SESSION_LIFETIME (7 days)."""
        session.permanent = True

    # ----------------------------------------------------------------------
    # Blueprints
    # ----------------------------------------------------------------------
    from .blueprints.users import users_bp
    from .blueprints.listings import listings_bp
    from .blueprints.reviews import reviews_bp
    from .blueprints.uploads import uploads_bp

    app.register_blueprint(users_bp)
    app.register_blueprint(listings_bp)
    app.register_blueprint(reviews_bp)
    app.register_blueprint(uploads_bp)

    register_error_handlers(app)

    # ----------------------------------------------------------------------
    # Context globals
    # ----------------------------------------------------------------------
    @app.context_processor
    def inject_globals():
        """Current user + app name for the layout (navbar, flash area)."""
        return {"curr_user": current_user, "app_name": app.config["APP_NAME"]}

    # ----------------------------------------------------------------------
    # CLI
    # ----------------------------------------------------------------------
    @app.cli.command("init-db")
    def init_db_command():
        """Create all tables (dev shortcut; use `flask db upgrade` with migrations)."""
        db.create_all()
        click.echo("Database tables created.")

    @app.cli.command("seed-listings")
    def seed_listings_command():
        """Seed a demo user and sample listings."""
        from .seed import seed_sample_listings

        created = seed_sample_listings()
        if created:
            click.echo(f"Seeded {created} sample listings.")
        else:
            click.echo("Listings already present; nothing seeded.")

    # ----------------------------------------------------------------------
    # Home
    # ----------------------------------------------------------------------
    @app.route("/")
    def index():
        """Home: the listings page."""
        return redirect(url_for("listings.index"))

    app.logger.debug("App created (uploads in %s)", app.config["UPLOAD_FOLDER"])
    return app
