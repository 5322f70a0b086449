"""
wanderlust/security.py

Access control helpers.

Key rules:
- UI is never trusted; ownership/authorship checks are server-side.
- Anonymous users hitting a login-required route are sent to /login, and the
  URL they wanted is remembered in the session so login can send them back.
- Only the owner of a Listing may edit/update/delete it.
- Only the author of a Review may delete it.

Failures are reported with a flash message + redirect (not a bare 403), so the
user lands on a page that explains what happened.

IMPORTANT:
- Decorators must preserve wrapped function metadata to avoid Flask endpoint collisions.
  We use functools.wraps everywhere.
"""

from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Callable, Optional
from urllib.parse import urlparse

from flask import flash, redirect, request, session, url_for
from flask_login import current_user

logger = logging.getLogger(__name__)

REDIRECT_SESSION_KEY = "redirect_url"


# ---------------------------------------------------------------------
# Redirect-after-login
# ---------------------------------------------------------------------
def safe_next_url(raw_next: str | None, fallback_endpoint: str) -> str:
    """
    Return a safe local next URL.

    Rules:
    - Only allow relative URLs (no scheme/netloc).
    - Fall back to an internal endpoint if invalid/empty.
    """
    if not raw_next:
        return url_for(fallback_endpoint)

    try:
        parsed = urlparse(raw_next)
    except ValueError:
        return url_for(fallback_endpoint)

    # Disallow external redirects
    if parsed.scheme or parsed.netloc:
        return url_for(fallback_endpoint)

    # Must be a path on this site ("//host" and "/\host" are protocol-relative in browsers)
    if not raw_next.startswith("/") or raw_next.startswith("//") or "\\" in raw_next:
        return url_for(fallback_endpoint)

    return raw_next


def _local_referrer() -> Optional[str]:
    """Path (+query) of the Referer header, only when it points at this host."""
    referrer = request.referrer
    if not referrer:
        return None
    parsed = urlparse(referrer)
    if parsed.netloc and parsed.netloc != request.host:
        return None
    path = parsed.path or "/"
    return f"{path}?{parsed.query}" if parsed.query else path


def remember_redirect_target() -> None:
    """
    Store where the user should land after logging in.

    GET requests are replayable, so the requested URL is stored as-is.
    A POST/PUT/DELETE cannot be replayed by a redirect; the referring page
    (e.g. the listing the review form lives on) is stored instead.
    """
    if request.method == "GET":
        target = request.full_path if request.query_string else request.path
    else:
        target = _local_referrer()

    if target:
        session[REDIRECT_SESSION_KEY] = target


def pop_redirect_target() -> Optional[str]:
    return session.pop(REDIRECT_SESSION_KEY, None)


def handle_unauthorized():
    """Flask-Login unauthorized handler (wired in create_app)."""
    remember_redirect_target()
    flash("You must be logged in!", "error")
    return redirect(url_for("users.login"))


# ---------------------------------------------------------------------
# Ownership guards
# ---------------------------------------------------------------------
def listing_owner_required(get_listing_func: Callable[..., Any]) -> Callable[..., Any]:
    """
    Decorator factory: only the listing owner may continue.

    Must be stacked *below* @login_required (so current_user is authenticated).

    Usage:
        @listing_owner_required(lambda listing_id: get_by_id(Listing, listing_id))
        def edit_listing(listing_id): ...
    """
    def decorator(view_func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(view_func)
        def wrapper(*args: Any, **kwargs: Any):
            listing = get_listing_func(**kwargs)

            if listing is None:
                flash("Listing you requested for does not exist!", "error")
                return redirect(url_for("listings.index"))

            if not listing.is_owned_by(current_user):
                logger.warning(
                    "User %s denied owner action on listing %s", current_user.get_id(), listing.id
                )
                flash("You are not the owner of this listing", "error")
                return redirect(url_for("listings.show", listing_id=listing.id))

            return view_func(*args, **kwargs)

        return wrapper

    return decorator


def review_author_required(get_review_func: Callable[..., Any]) -> Callable[..., Any]:
    """
    Decorator factory: only the review author may continue.

    The loader receives the route kwargs (listing_id, review_id). A review that
    exists but belongs to another listing is treated as missing.
    """
    def decorator(view_func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(view_func)
        def wrapper(*args: Any, **kwargs: Any):
            listing_id = kwargs.get("listing_id")
            review = get_review_func(**kwargs)

            if review is None or review.listing_id != listing_id:
                flash("Review you requested for does not exist!", "error")
                return redirect(url_for("listings.show", listing_id=listing_id))

            if not review.is_written_by(current_user):
                logger.warning(
                    "User %s denied delete on review %s", current_user.get_id(), review.id
                )
                flash("You are not the author of this review", "error")
                return redirect(url_for("listings.show", listing_id=listing_id))

            return view_func(*args, **kwargs)

        return wrapper

    return decorator
