"""Rating aggregation.

``Movie.avg_rating`` is a cached projection of the movie's reviews. This
module is the only code that writes it.
"""

import logging
from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from reelrank.models.movie import Movie
from reelrank.models.review import Review
from reelrank.services.errors import AggregationError

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")
ZERO_RATING = Decimal("0.00")


def round_rating(value: Decimal | float | int | None) -> Decimal:
    """Round a mean rating to exactly two decimal places, half up.

    ``None`` (the SQL average of an empty set) becomes 0.00.
    """
    if value is None:
        return ZERO_RATING
    return Decimal(str(value)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def mean_rating(ratings: Iterable[int]) -> Decimal:
    """Arithmetic mean of the ratings rounded to two places, 0.00 when empty."""
    values = list(ratings)
    if not values:
        return ZERO_RATING
    return round_rating(Decimal(sum(values)) / Decimal(len(values)))


async def _current_ratings(db: AsyncSession, movie_id: int) -> list[int]:
    result = await db.execute(select(Review.rating).where(Review.movie_id == movie_id))
    return list(result.scalars().all())


async def recompute(db: AsyncSession, movie_id: int) -> Decimal | None:
    """Recompute and store the cached average rating of a movie.

    Must be called after every review create, update or delete, inside the
    same session so the new value commits together with the review change.

    Returns:
        The stored rating, or None when the movie no longer exists.

    Raises:
        AggregationError: If the new value could not be written.
    """
    await db.flush()

    movie_result = await db.execute(select(Movie.id).where(Movie.id == movie_id))
    if movie_result.scalar_one_or_none() is None:
        logger.debug("Skipping aggregation for deleted movie %s", movie_id)
        return None

    avg = mean_rating(await _current_ratings(db, movie_id))

    try:
        result = await db.execute(
            update(Movie)
            .where(Movie.id == movie_id)
            .values(avg_rating=avg)
            .execution_options(synchronize_session="evaluate")
        )
    except SQLAlchemyError as e:
        logger.exception(
            "Rating consistency violation: could not store avg_rating for movie %s", movie_id
        )
        raise AggregationError(f"Failed to update rating for movie {movie_id}") from e

    if result.rowcount != 1:
        logger.error(
            "Rating consistency violation: avg_rating update for movie %s touched %s rows",
            movie_id,
            result.rowcount,
        )
        raise AggregationError(f"Failed to update rating for movie {movie_id}")

    logger.debug("Movie %s avg_rating is now %s", movie_id, avg)
    return avg


async def verify(db: AsyncSession, movie_id: int) -> bool:
    """Check that the cached rating matches a fresh computation.

    Returns False (and logs a warning) when the cached value has drifted.
    """
    movie_result = await db.execute(select(Movie.avg_rating).where(Movie.id == movie_id))
    cached = movie_result.scalar_one_or_none()
    if cached is None:
        return True

    expected = mean_rating(await _current_ratings(db, movie_id))
    if round_rating(cached) != expected:
        logger.warning(
            "Movie %s avg_rating drifted: cached=%s expected=%s", movie_id, cached, expected
        )
        return False
    return True
