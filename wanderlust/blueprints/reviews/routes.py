"""
Review routes, nested under a listing.

- POST   /listings/<listing_id>/reviews              (login required)
- DELETE /listings/<listing_id>/reviews/<review_id>  (login + author)
"""

from __future__ import annotations

import logging

from flask import Blueprint, request, redirect, url_for, flash
from flask_login import login_required, current_user

from ...extensions import db
from ...models import Listing, Review, MIN_RATING, MAX_RATING, get_by_id
from ...security import review_author_required

logger = logging.getLogger(__name__)

reviews_bp = Blueprint("reviews", __name__, url_prefix="/listings/<int:listing_id>/reviews")


def _load_review(review_id: int, **_: object) -> Review | None:
    """Loader for decorator factories."""
    return get_by_id(Review, review_id)


def _parse_rating(value: str | None) -> int | None:
    """Rating must be a whole number in [MIN_RATING, MAX_RATING]; None otherwise."""
    try:
        rating = int((value or "").strip())
    except ValueError:
        return None
    if rating < MIN_RATING or rating > MAX_RATING:
        return None
    return rating


@reviews_bp.route("", methods=["POST"])
@login_required
def create(listing_id: int):
    """Append a review written by the current user."""
    listing = get_by_id(Listing, listing_id)
    if listing is None:
        flash("Listing you requested for does not exist!", "error")
        return redirect(url_for("listings.index"))

    rating = _parse_rating(request.form.get("rating"))
    comment = (request.form.get("comment") or "").strip()

    if rating is None:
        flash(f"Rating must be between {MIN_RATING} and {MAX_RATING}.", "error")
        return redirect(url_for("listings.show", listing_id=listing.id))
    if not comment:
        flash("Comment is required.", "error")
        return redirect(url_for("listings.show", listing_id=listing.id))

    review = Review(rating=rating, comment=comment, author_id=current_user.id)
    listing.reviews.append(review)
    db.session.commit()

    logger.info("Review %s added to listing %s by user %s", review.id, listing.id, current_user.id)
    flash("New Review Created!", "success")
    return redirect(url_for("listings.show", listing_id=listing.id))


@reviews_bp.route("/<int:review_id>", methods=["DELETE"])
@login_required
@review_author_required(_load_review)
def delete(listing_id: int, review_id: int):
    """Detach the review from its listing and delete it (single transaction)."""
    review = db.get_or_404(Review, review_id)
    listing = review.listing

    listing.reviews.remove(review)
    db.session.commit()

    logger.info("Review %s deleted from listing %s by user %s", review_id, listing_id, current_user.id)
    flash("Review Deleted!", "success")
    return redirect(url_for("listings.show", listing_id=listing_id))
