"""Route blueprints (users/auth, listings, reviews, uploads)."""
