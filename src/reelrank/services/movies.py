"""Movie catalog management and browsing."""

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from reelrank.models.movie import Movie
from reelrank.models.review import Review
from reelrank.services.errors import InvalidInputError, NotFoundError
from reelrank.utils.clock import utcnow

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = {
    "created_at": Movie.created_at,
    "title": Movie.title,
    "release_year": Movie.release_year,
    "avg_rating": Movie.avg_rating,
}

# Fields an administrator may set; avg_rating is owned by the rating aggregator
EDITABLE_FIELDS = frozenset(
    {"title", "genre", "release_year", "director", "cast", "synopsis", "poster_url"}
)


@dataclass(frozen=True)
class MovieDetail:
    """A movie with its reviews, newest first."""

    movie: Movie
    reviews: list[Review]

    @property
    def review_count(self) -> int:
        return len(self.reviews)


def _contains_pattern(text: str) -> str:
    """Case-insensitive substring pattern with LIKE wildcards taken literally."""
    escaped = text.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _editable(values: dict[str, Any]) -> dict[str, Any]:
    unknown = set(values) - EDITABLE_FIELDS
    if unknown:
        raise InvalidInputError(f"Fields cannot be set: {', '.join(sorted(unknown))}")
    return values


async def get_movie_or_404(db: AsyncSession, movie_id: int) -> Movie:
    """Load a movie by id.

    Raises:
        NotFoundError: If the movie does not exist.
    """
    result = await db.execute(select(Movie).where(Movie.id == movie_id))
    movie = result.scalar_one_or_none()
    if movie is None:
        raise NotFoundError("Movie not found")
    return movie


async def create_movie(db: AsyncSession, values: dict[str, Any]) -> Movie:
    """Add a movie to the catalog. Its rating starts at 0.00."""
    now = utcnow()
    movie = Movie(**_editable(values), created_at=now, updated_at=now)
    db.add(movie)
    await db.flush()
    await db.refresh(movie)
    logger.info("Created movie %s (%s)", movie.id, movie.title)
    return movie


async def update_movie(db: AsyncSession, movie_id: int, values: dict[str, Any]) -> Movie:
    """Apply a partial update to a movie's catalog fields.

    Raises:
        NotFoundError: If the movie does not exist.
        InvalidInputError: If a field outside the catalog fields is given.
    """
    movie = await get_movie_or_404(db, movie_id)
    for name, value in _editable(values).items():
        setattr(movie, name, value)
    movie.updated_at = utcnow()
    await db.flush()
    await db.refresh(movie)
    logger.info("Updated movie %s", movie_id)
    return movie


async def delete_movie(db: AsyncSession, movie_id: int) -> None:
    """Delete a movie; its reviews and watchlist entries go with it.

    Raises:
        NotFoundError: If the movie does not exist.
    """
    movie = await get_movie_or_404(db, movie_id)
    await db.delete(movie)
    await db.flush()
    logger.info("Deleted movie %s", movie_id)


async def get_movie_detail(db: AsyncSession, movie_id: int) -> MovieDetail:
    """Load a movie together with its reviews and their authors.

    Raises:
        NotFoundError: If the movie does not exist.
    """
    movie = await get_movie_or_404(db, movie_id)
    result = await db.execute(
        select(Review)
        .where(Review.movie_id == movie_id)
        .options(selectinload(Review.user))
        .order_by(Review.created_at.desc(), Review.id.desc())
    )
    return MovieDetail(movie=movie, reviews=list(result.scalars().all()))


async def list_movies(
    db: AsyncSession,
    search: str | None = None,
    genre: str | None = None,
    sort_by: str = "created_at",
    sort_order: str = "desc",
    page: int = 1,
    page_size: int = 10,
) -> tuple[int, list[Movie]]:
    """List catalog movies with optional search and genre filter.

    ``search`` matches title, director or cast; ``genre`` matches any part of
    the genre. Both are case-insensitive.

    Raises:
        InvalidInputError: If the sort field or order is not supported.
    """
    if sort_by not in SORTABLE_FIELDS:
        valid = ", ".join(SORTABLE_FIELDS)
        raise InvalidInputError(f"Invalid sort field. Available fields: {valid}")
    if sort_order.lower() not in ("asc", "desc"):
        raise InvalidInputError("Sort order must be 'asc' or 'desc'")

    base_query = select(Movie)
    if search:
        pattern = _contains_pattern(search)
        base_query = base_query.where(
            or_(
                func.lower(Movie.title).like(pattern, escape="\\"),
                func.lower(Movie.director).like(pattern, escape="\\"),
                func.lower(Movie.cast).like(pattern, escape="\\"),
            )
        )
    if genre:
        base_query = base_query.where(
            func.lower(Movie.genre).like(_contains_pattern(genre), escape="\\")
        )

    count_query = select(func.count()).select_from(base_query.subquery())
    total_result = await db.execute(count_query)
    total = total_result.scalar_one()

    column = SORTABLE_FIELDS[sort_by]
    ordering = column.asc() if sort_order.lower() == "asc" else column.desc()
    offset = (page - 1) * page_size
    results = await db.execute(
        base_query.order_by(ordering, Movie.id.asc()).offset(offset).limit(page_size)
    )
    return total, list(results.scalars().all())
