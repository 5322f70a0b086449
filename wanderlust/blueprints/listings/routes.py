"""
wanderlust/blueprints/listings/routes.py

Listing routes

Includes:
- index / show (public)
- new / create (login required)
- edit / update / delete (login + owner)

Update and delete are reached from HTML forms through ?_method=PUT / ?_method=DELETE
(see middleware.MethodOverrideMiddleware).

IMPORTANT:
- UI is never trusted. Ownership and validations are server-side.
"""

from __future__ import annotations

import logging

from flask import Blueprint, render_template, request, redirect, url_for, flash
from flask_login import login_required, current_user
from sqlalchemy.orm import joinedload, selectinload

from ...extensions import db
from ...models import MAX_INTEGER, MAX_PRICE, Listing, Review, get_by_id
from ...security import listing_owner_required
from ...storage import UploadError, delete_image, save_image

logger = logging.getLogger(__name__)

listings_bp = Blueprint("listings", __name__, url_prefix="/listings")

LISTING_FIELDS = ("title", "description", "price", "location", "country")


# ---------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------
def _load_listing(listing_id: int, **_: object) -> Listing | None:
    """Loader for decorator factories."""
    return get_by_id(Listing, listing_id)


def _parse_price(value: str | None) -> int | None:
    """
    Parse an optional whole price in [0, MAX_PRICE]. Raises ValueError when invalid.

    Plain ASCII digits only: signs, separators ("1,000", "1_000") and decimals are rejected.
    """
    if value is None:
        return None
    raw = str(value).strip()
    if raw == "":
        return None
    if not (raw.isascii() and raw.isdigit()):
        raise ValueError("price must be digits only")
    price = int(raw)
    if price > MAX_PRICE:
        raise ValueError("price too large")
    return price


def _read_listing_form() -> tuple[dict, list[str]]:
    """
    Read listing fields from request.form.

    Returns (cleaned_values, errors). Empty optional strings become None.
    """
    form = {name: (request.form.get(name) or "").strip() for name in LISTING_FIELDS}
    errors: list[str] = []

    if not form["title"]:
        errors.append("Title is required.")

    try:
        price = _parse_price(form["price"])
    except ValueError:
        errors.append(f"Price must be a whole number between 0 and {MAX_PRICE:,}.")
        price = None

    cleaned = {
        "title": form["title"],
        "description": form["description"] or None,
        "price": price,
        "location": form["location"] or None,
        "country": form["country"] or None,
    }
    return cleaned, errors


# ---------------------------------------------------------------------
# Public pages
# ---------------------------------------------------------------------
@listings_bp.route("", methods=["GET"])
def index():
    """All listings."""
    all_listings = Listing.query.order_by(Listing.id.asc()).all()
    return render_template("listings/index.html", all_listings=all_listings)


@listings_bp.route("/<int:listing_id>", methods=["GET"])
def show(listing_id: int):
    """Listing detail with owner and reviews (each with its author)."""
    listing = None
    if listing_id <= MAX_INTEGER:
        listing = (
            Listing.query
            .options(
                joinedload(Listing.owner),
                selectinload(Listing.reviews).joinedload(Review.author),
            )
            .filter(Listing.id == listing_id)
            .first()
        )
    if listing is None:
        flash("Listing you requested for does not exist!", "error")
        return redirect(url_for("listings.index"))

    return render_template("listings/show.html", listing=listing)


# ---------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------
@listings_bp.route("/new", methods=["GET"])
@login_required
def new():
    """Creation form."""
    return render_template("listings/new.html", form={})


@listings_bp.route("", methods=["POST"])
@login_required
def create():
    """Create a listing owned by the current user (optional image upload)."""
    values, errors = _read_listing_form()
    if errors:
        for message in errors:
            flash(message, "error")
        return render_template("listings/new.html", form=request.form), 400

    try:
        stored = save_image(request.files.get("image"))
    except UploadError as exc:
        flash(str(exc), "error")
        return render_template("listings/new.html", form=request.form), 400

    listing = Listing(owner_id=current_user.id, **values)
    if stored:
        listing.image_url = stored.url
        listing.image_filename = stored.filename

    db.session.add(listing)
    db.session.commit()

    logger.info("Listing %s created by user %s", listing.id, current_user.id)
    flash("New Listing Created!", "success")
    return redirect(url_for("listings.index"))


# ---------------------------------------------------------------------
# Edit / update / delete (owner only)
# ---------------------------------------------------------------------
@listings_bp.route("/<int:listing_id>/edit", methods=["GET"])
@login_required
@listing_owner_required(_load_listing)
def edit(listing_id: int):
    """Edit form (owner only)."""
    listing = db.get_or_404(Listing, listing_id)
    return render_template("listings/edit.html", listing=listing, form=None)


@listings_bp.route("/<int:listing_id>", methods=["PUT", "PATCH"])
@login_required
@listing_owner_required(_load_listing)
def update(listing_id: int):
    """Apply edits; a new upload replaces (and deletes) the previous image."""
    listing = db.get_or_404(Listing, listing_id)

    values, errors = _read_listing_form()
    if errors:
        for message in errors:
            flash(message, "error")
        return render_template("listings/edit.html", listing=listing, form=request.form), 400

    try:
        stored = save_image(request.files.get("image"))
    except UploadError as exc:
        flash(str(exc), "error")
        return render_template("listings/edit.html", listing=listing, form=request.form), 400

    for field, value in values.items():
        setattr(listing, field, value)

    replaced_filename = None
    if stored:
        replaced_filename = listing.image_filename
        listing.image_url = stored.url
        listing.image_filename = stored.filename

    db.session.commit()
    delete_image(replaced_filename)

    logger.info("Listing %s updated by user %s", listing.id, current_user.id)
    flash("Listing Updated!", "success")
    return redirect(url_for("listings.show", listing_id=listing.id))


@listings_bp.route("/<int:listing_id>", methods=["DELETE"])
@login_required
@listing_owner_required(_load_listing)
def delete(listing_id: int):
    """Delete a listing; its reviews go with it (ORM cascade) and so does its image file."""
    listing = db.get_or_404(Listing, listing_id)
    image_filename = listing.image_filename

    db.session.delete(listing)
    db.session.commit()
    delete_image(image_filename)

    logger.info("Listing %s deleted by user %s", listing_id, current_user.id)
    flash("Listing Deleted!", "success")
    return redirect(url_for("listings.index"))
