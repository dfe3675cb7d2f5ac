"""Watchlist ORM model."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from reelrank.database import Base
from reelrank.utils.clock import utcnow

if TYPE_CHECKING:
    from reelrank.models.movie import Movie
    from reelrank.models.user import User


class WatchlistEntry(Base):
    """Membership marker for a movie on a user's watchlist."""

    __tablename__ = "watchlist_entries"
    __table_args__ = (UniqueConstraint("user_id", "movie_id", name="uq_watchlist_user_movie"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    movie_id: Mapped[int] = mapped_column(ForeignKey("movies.id", ondelete="CASCADE"), index=True)
    added_at: Mapped[datetime] = mapped_column(default=utcnow)

    # Relationships
    user: Mapped[User] = relationship(back_populates="watchlist_entries")
    movie: Mapped[Movie] = relationship(back_populates="watchlist_entries")
