"""Movie ORM model."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from reelrank.database import Base
from reelrank.utils.clock import utcnow

if TYPE_CHECKING:
    from reelrank.models.review import Review
    from reelrank.models.watchlist import WatchlistEntry


class Movie(Base):
    """A catalog movie curated by administrators."""

    __tablename__ = "movies"
    __table_args__ = (
        CheckConstraint("avg_rating >= 0 AND avg_rating <= 5", name="ck_movie_avg_rating_range"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(200), index=True)
    genre: Mapped[str] = mapped_column(String(100), index=True)
    release_year: Mapped[int] = mapped_column()
    director: Mapped[str] = mapped_column(String(100))
    cast: Mapped[str | None] = mapped_column(Text, nullable=True)  # Free text
    synopsis: Mapped[str | None] = mapped_column(Text, nullable=True)
    poster_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    # Projection of the review set, written only by the rating aggregator
    avg_rating: Mapped[Decimal] = mapped_column(Numeric(3, 2), default=Decimal("0.00"))
    created_at: Mapped[datetime] = mapped_column(default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow)

    # Relationships
    reviews: Mapped[list[Review]] = relationship(
        back_populates="movie", cascade="all, delete-orphan", passive_deletes=True
    )
    watchlist_entries: Mapped[list[WatchlistEntry]] = relationship(
        back_populates="movie", cascade="all, delete-orphan", passive_deletes=True
    )
