"""SQLAlchemy ORM models."""

from reelrank.models.movie import Movie
from reelrank.models.review import Review
from reelrank.models.user import User
from reelrank.models.watchlist import WatchlistEntry

__all__ = [
    "Movie",
    "Review",
    "User",
    "WatchlistEntry",
]
