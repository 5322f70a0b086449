"""
wanderlust/seed.py

Seed demo data for local development.

Rules:
- Safe to run multiple times (idempotent).
- Creates a demo owner account (if missing) and the sample listings only
  when the listings table is empty, so real data is never duplicated.
"""

from __future__ import annotations

import logging

from .extensions import db
from .models import Listing, User

logger = logging.getLogger(__name__)

DEMO_USERNAME = "demo"
DEMO_EMAIL = "demo@wanderlust.test"
DEMO_PASSWORD = "demo-password"


SAMPLE_LISTINGS = [
    # title, description, price, location, country
    (
        "Cozy Beachfront Cottage",
        "Escape to this charming beachfront cottage for a relaxing getaway.",
        1500,
        "Malibu",
        "United States",
    ),
    (
        "Modern Loft in Downtown",
        "Stay in the heart of the city in this stylish loft apartment.",
        1200,
        "New York City",
        "United States",
    ),
    (
        "Mountain Retreat",
        "Unplug and unwind in this peaceful mountain cabin.",
        1000,
        "Aspen",
        "United States",
    ),
    (
        "Historic Villa in Tuscany",
        "Experience the charm of Tuscany in this beautifully restored villa.",
        2500,
        "Florence",
        "Italy",
    ),
    (
        "Secluded Treehouse Getaway",
        "Live among the treetops in this unique treehouse retreat.",
        800,
        "Portland",
        "United States",
    ),
]


def _get_or_create_demo_user() -> User:
    user = User.query.filter_by(username=DEMO_USERNAME).first()
    if user:
        return user

    user = User(username=DEMO_USERNAME, email=DEMO_EMAIL)
    user.set_password(DEMO_PASSWORD)
    db.session.add(user)
    db.session.flush()
    logger.info("Created demo user %r", DEMO_USERNAME)
    return user


def seed_sample_listings() -> int:
    """
    Insert the sample listings (owned by the demo user) if none exist.

    Returns the number of listings created.
    """
    if Listing.query.count() > 0:
        return 0

    owner = _get_or_create_demo_user()

    for title, description, price, location, country in SAMPLE_LISTINGS:
        db.session.add(
            Listing(
                title=title,
                description=description,
                price=price,
                location=location,
                country=country,
                owner_id=owner.id,
            )
        )

    db.session.commit()
    logger.info("Seeded %d sample listings", len(SAMPLE_LISTINGS))
    return len(SAMPLE_LISTINGS)
