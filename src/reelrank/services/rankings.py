"""Ranking queries derived from the review corpus.

All ranking modes go through ``query_ranking``. Each mode is described by a
``RankingPolicy``: whether reviews are restricted to a recent window, the
minimum review count a movie needs, and the ordering. Keeping the policies in
one table keeps the ordering and tie-break rules in one place.
"""

import enum
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal

from sqlalchemy import ColumnElement, and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from reelrank.config import get_settings
from reelrank.models.movie import Movie
from reelrank.models.review import Review
from reelrank.services.errors import InvalidInputError
from reelrank.services.ratings import round_rating
from reelrank.utils.clock import utcnow


class RankingMode(enum.StrEnum):
    """Named ranking queries."""

    TOP_RATED = "top-rated"
    TRENDING = "trending"
    LATEST = "latest"
    MOST_REVIEWED = "most-reviewed"
    HIGHEST_RATED = "highest-rated"


# Modes reachable through the category endpoint
CATEGORY_MODES = (RankingMode.LATEST, RankingMode.HIGHEST_RATED, RankingMode.MOST_REVIEWED)


class SortKey(enum.Enum):
    """Columns a policy can order by, all descending."""

    AVG_RATING = "avg_rating"
    REVIEW_COUNT = "review_count"
    CREATED_AT = "created_at"


@dataclass(frozen=True)
class RankingParams:
    """Optional per-query parameters.

    Attributes:
        min_reviews: Review count threshold for top-rated. Ignored by other modes.
        window_days: Size of the trending window in days. Ignored by other modes.
        now: Reference time for the trending window. Defaults to the current time.
    """

    min_reviews: int | None = None
    window_days: int | None = None
    now: datetime | None = None


@dataclass(frozen=True)
class RankingPolicy:
    """How one ranking mode filters and orders movies."""

    order_by: tuple[SortKey, ...]
    min_reviews: int = 0
    windowed: bool = False


@dataclass(frozen=True)
class MovieWithStats:
    """A movie annotated with statistics over the reviews a query counted."""

    movie: Movie
    avg_rating: Decimal
    review_count: int


def _policy(mode: RankingMode, params: RankingParams) -> RankingPolicy:
    settings = get_settings()

    if mode is RankingMode.TOP_RATED:
        min_reviews = (
            params.min_reviews if params.min_reviews is not None else settings.top_rated_min_reviews
        )
        return RankingPolicy(
            order_by=(SortKey.AVG_RATING, SortKey.REVIEW_COUNT), min_reviews=min_reviews
        )
    if mode is RankingMode.HIGHEST_RATED:
        return RankingPolicy(
            order_by=(SortKey.AVG_RATING, SortKey.REVIEW_COUNT),
            min_reviews=settings.highest_rated_min_reviews,
        )
    if mode is RankingMode.TRENDING:
        return RankingPolicy(
            order_by=(SortKey.REVIEW_COUNT, SortKey.AVG_RATING), min_reviews=1, windowed=True
        )
    if mode is RankingMode.MOST_REVIEWED:
        return RankingPolicy(order_by=(SortKey.REVIEW_COUNT, SortKey.AVG_RATING), min_reviews=1)
    return RankingPolicy(order_by=(SortKey.CREATED_AT,))


def parse_mode(name: str, allowed: tuple[RankingMode, ...] = tuple(RankingMode)) -> RankingMode:
    """Resolve a mode name case-insensitively.

    Raises:
        InvalidInputError: If the name is not one of ``allowed``, listing the valid names.
    """
    normalized = name.strip().lower()
    for mode in allowed:
        if mode.value == normalized:
            return mode
    valid = ", ".join(mode.value for mode in allowed)
    raise InvalidInputError(f"Invalid category. Available categories: {valid}")


def _validate(limit: int, params: RankingParams) -> None:
    if limit < 0:
        raise InvalidInputError("Limit must not be negative")
    if params.min_reviews is not None and params.min_reviews < 0:
        raise InvalidInputError("Minimum review count must not be negative")
    if params.window_days is not None and params.window_days < 1:
        raise InvalidInputError("Trending window must be at least one day")


async def query_ranking(
    db: AsyncSession,
    mode: RankingMode,
    limit: int,
    params: RankingParams | None = None,
) -> list[MovieWithStats]:
    """Rank movies by statistics computed from their reviews.

    Returns at most ``limit`` movies; fewer (down to none) when not enough
    qualify. Mean ratings are rounded to two places and are 0.00 for movies
    with no counted reviews. Movies that tie on every policy key are ordered
    by id.

    Raises:
        InvalidInputError: If ``limit`` or a parameter is out of range.
    """
    params = params or RankingParams()
    _validate(limit, params)
    policy = _policy(mode, params)

    join_condition: ColumnElement[bool] = Review.movie_id == Movie.id
    if policy.windowed:
        window_days = params.window_days or get_settings().trending_window_days
        since = (params.now or utcnow()) - timedelta(days=window_days)
        join_condition = and_(join_condition, Review.created_at >= since)

    review_count = func.count(Review.id)
    avg_rating = func.coalesce(func.avg(Review.rating), 0)
    sort_columns = {
        SortKey.AVG_RATING: avg_rating,
        SortKey.REVIEW_COUNT: review_count,
        SortKey.CREATED_AT: Movie.created_at,
    }

    stmt = (
        select(Movie, avg_rating.label("avg_rating"), review_count.label("review_count"))
        .outerjoin(Review, join_condition)
        .group_by(Movie.id)
    )
    if policy.min_reviews > 0:
        stmt = stmt.having(review_count >= policy.min_reviews)

    stmt = stmt.order_by(
        *(sort_columns[key].desc() for key in policy.order_by), Movie.id.asc()
    ).limit(limit)

    result = await db.execute(stmt)
    return [
        MovieWithStats(movie=movie, avg_rating=round_rating(avg), review_count=int(count))
        for movie, avg, count in result.all()
    ]


async def query_category(db: AsyncSession, category: str, limit: int) -> list[MovieWithStats]:
    """Run one of the browsing categories: latest, highest-rated or most-reviewed.

    Raises:
        InvalidInputError: If the category is not recognized.
    """
    mode = parse_mode(category, allowed=CATEGORY_MODES)
    return await query_ranking(db, mode, limit)
