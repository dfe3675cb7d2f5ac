"""Business logic: rating aggregation, guards and ranking queries."""

from reelrank.services.errors import (
    AggregationError,
    AlreadyExistsError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    ServiceError,
)
from reelrank.services.rankings import MovieWithStats, RankingMode, RankingParams

__all__ = [
    "AggregationError",
    "AlreadyExistsError",
    "ForbiddenError",
    "InvalidInputError",
    "NotFoundError",
    "ServiceError",
    "MovieWithStats",
    "RankingMode",
    "RankingParams",
]
