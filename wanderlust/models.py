"""
Wanderlust domain models

- User: login account (username unique, email, hashed password)
- Listing: a rentable property, owned by a User, with an optional uploaded image
- Review: a rating/comment on a Listing, written by a User

IMPORTANT:
- Ownership/authorship is enforced server-side in security.py, never in templates.
- Deleting a Listing deletes its Reviews (ORM cascade, same transaction).
"""

from __future__ import annotations

from datetime import datetime

from flask import current_app
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash

from .extensions import db


MIN_RATING = 1
MAX_RATING = 5

# db.Integer is a signed 32-bit INTEGER on PostgreSQL; keep ids and prices inside it
MAX_INTEGER = 2**31 - 1
MAX_PRICE = MAX_INTEGER


def get_by_id(model, ident: int):
    """Primary-key lookup that treats ids the column cannot hold as missing."""
    if ident is None or ident < 1 or ident > MAX_INTEGER:
        return None
    return db.session.get(model, ident)


# ---------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------
class User(UserMixin, db.Model):
    """Marketplace user (owner of listings, author of reviews)."""

    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)

    username = db.Column(db.String(80), unique=True, nullable=False, index=True)
    email = db.Column(db.String(255), nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    listings = db.relationship("Listing", back_populates="owner", lazy=True)
    reviews = db.relationship("Review", back_populates="author", lazy=True)

    def set_password(self, password: str):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    def __repr__(self):
        return f"<User {self.username}>"


# ---------------------------------------------------------------------
# Listings & reviews
# ---------------------------------------------------------------------
class Listing(db.Model):
    """A rentable property record."""

    __tablename__ = "listings"

    id = db.Column(db.Integer, primary_key=True)

    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    price = db.Column(db.Integer, nullable=True)
    location = db.Column(db.String(200), nullable=True)
    country = db.Column(db.String(120), nullable=True)

    # Uploaded image: public URL + stored filename (both None when no upload)
    image_url = db.Column(db.String(500), nullable=True)
    image_filename = db.Column(db.String(255), nullable=True)

    owner_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    owner = db.relationship("User", back_populates="listings")

    reviews = db.relationship(
        "Review",
        back_populates="listing",
        order_by="Review.id",
        cascade="all, delete-orphan",
        lazy=True,
    )

    @property
    def image_src(self) -> str:
        """URL to render: uploaded image or the configured placeholder."""
        return self.image_url or current_app.config["DEFAULT_LISTING_IMAGE_URL"]

    def is_owned_by(self, user) -> bool:
        return bool(user is not None and getattr(user, "is_authenticated", False) and self.owner_id == user.id)

    def average_rating(self) -> float | None:
        if not self.reviews:
            return None
        return round(sum(r.rating for r in self.reviews) / len(self.reviews), 1)

    def __repr__(self):
        return f"<Listing {self.id} {self.title!r}>"


class Review(db.Model):
    """A rating/comment attached to a Listing."""

    __tablename__ = "reviews"

    id = db.Column(db.Integer, primary_key=True)

    rating = db.Column(db.Integer, nullable=False)
    comment = db.Column(db.Text, nullable=False)

    author_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    listing_id = db.Column(
        db.Integer,
        db.ForeignKey("listings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    __table_args__ = (
        db.CheckConstraint(
            f"rating >= {MIN_RATING} AND rating <= {MAX_RATING}",
            name="ck_reviews_rating_range",
        ),
    )

    author = db.relationship("User", back_populates="reviews")
    listing = db.relationship("Listing", back_populates="reviews")

    def is_written_by(self, user) -> bool:
        return bool(user is not None and getattr(user, "is_authenticated", False) and self.author_id == user.id)

    def __repr__(self):
        return f"<Review {self.id} rating={self.rating}>"
