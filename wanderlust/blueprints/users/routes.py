"""
Authentication Routes

Provides:
- /signup  (GET form, POST create account + log in)
- /login   (GET form, POST authenticate, redirect back to the saved URL)
- /logout

Rules:
- Passwords are stored as Werkzeug hashes only.
- Usernames are unique; duplicates are reported with a flash, not a 500.
- Redirect-after-login only follows local URLs (see security.safe_next_url).
"""

import logging

from flask import (
    Blueprint,
    current_app,
    render_template,
    redirect,
    url_for,
    flash,
    request,
)
from flask_login import (
    login_user,
    logout_user,
    current_user,
)
from sqlalchemy.exc import IntegrityError

from ...extensions import db
from ...models import User
from ...security import pop_redirect_target, safe_next_url

logger = logging.getLogger(__name__)

users_bp = Blueprint("users", __name__)

DUPLICATE_USERNAME_MESSAGE = "A user with the given username is already registered"
BAD_CREDENTIALS_MESSAGE = "Password or username is incorrect"


# ============================================================
# SIGNUP
# ============================================================

@users_bp.route("/signup", methods=["GET"])
def signup_form():
    """Render the signup form."""
    return render_template("users/signup.html")


@users_bp.route("/signup", methods=["POST"])
def signup():
    """
    Register a new user and log them in.

    Required: username, email, password.
    """
    username = (request.form.get("username") or "").strip()
    email = (request.form.get("email") or "").strip()
    password = request.form.get("password") or ""

    if not username or not email or not password:
        flash("Username, email and password are required.", "error")
        return redirect(url_for("users.signup_form"))

    if "@" not in email:
        flash("Please enter a valid email address.", "error")
        return redirect(url_for("users.signup_form"))

    if User.query.filter_by(username=username).first():
        flash(DUPLICATE_USERNAME_MESSAGE, "error")
        return redirect(url_for("users.signup_form"))

    user = User(username=username, email=email)
    user.set_password(password)
    db.session.add(user)

    try:
        db.session.commit()
    except IntegrityError:
        # Lost a race with a concurrent signup for the same username
        db.session.rollback()
        flash(DUPLICATE_USERNAME_MESSAGE, "error")
        return redirect(url_for("users.signup_form"))

    logger.info("New user registered: %s (id=%s)", user.username, user.id)

    login_user(user)
    flash(f"Welcome to {current_app.config['APP_NAME']}!", "success")
    return redirect(url_for("listings.index"))


# ============================================================
# LOGIN
# ============================================================

@users_bp.route("/login", methods=["GET"])
def login_form():
    """Render the login form (already logged-in users go to the listings)."""
    if current_user.is_authenticated:
        return redirect(url_for("listings.index"))
    return render_template("users/login.html")


@users_bp.route("/login", methods=["POST"])
def login():
    """
    Authenticate a user.

    On success the URL saved by the login-required guard (if any) is consumed
    and used as the redirect target.
    """
    username = (request.form.get("username") or "").strip()
    password = request.form.get("password") or ""

    user = User.query.filter_by(username=username).first()

    if not user or not user.check_password(password):
        logger.info("Failed login for username %r", username)
        flash(BAD_CREDENTIALS_MESSAGE, "error")
        return redirect(url_for("users.login_form"))

    # Read before login_user(): the saved target lives in the pre-login session
    redirect_target = pop_redirect_target()

    login_user(user)
    logger.info("User %s logged in", user.username)
    flash(f"Welcome back to {current_app.config['APP_NAME']}!", "success")

    return redirect(safe_next_url(redirect_target, fallback_endpoint="listings.index"))


# ============================================================
# LOGOUT
# ============================================================

@users_bp.route("/logout")
def logout():
    """Log out the current user (no-op for anonymous visitors)."""
    if current_user.is_authenticated:
        logger.info("User %s logged out", current_user.username)
    logout_user()
    flash("You are logged out!", "success")
    return redirect(url_for("listings.index"))
