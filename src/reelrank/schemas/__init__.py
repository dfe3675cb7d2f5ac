"""Pydantic schemas for request/response validation."""

from reelrank.schemas.movie import (
    MovieCreate,
    MovieListResponse,
    MovieResponse,
    MovieSummary,
    MovieUpdate,
    RankedMovie,
    RankingMetadata,
    RankingResponse,
)
from reelrank.schemas.review import (
    MovieDetailResponse,
    ReviewCreate,
    ReviewDeletionResponse,
    ReviewListResponse,
    ReviewResponse,
    ReviewSubmissionResponse,
    ReviewWithMovie,
    UserReviewListResponse,
)
from reelrank.schemas.user import Token, UserCreate, UserLogin, UserProfileUpdate, UserResponse
from reelrank.schemas.watchlist import (
    WatchlistEntryResponse,
    WatchlistListResponse,
    WatchlistStatsResponse,
    WatchlistStatusResponse,
    WatchlistToggle,
    WatchlistToggleResponse,
)

__all__ = [
    # Movie schemas
    "MovieCreate",
    "MovieUpdate",
    "MovieResponse",
    "MovieSummary",
    "MovieListResponse",
    "MovieDetailResponse",
    "RankedMovie",
    "RankingMetadata",
    "RankingResponse",
    # Review schemas
    "ReviewCreate",
    "ReviewResponse",
    "ReviewWithMovie",
    "ReviewSubmissionResponse",
    "ReviewDeletionResponse",
    "ReviewListResponse",
    "UserReviewListResponse",
    # User schemas
    "UserCreate",
    "UserLogin",
    "UserProfileUpdate",
    "UserResponse",
    "Token",
    # Watchlist schemas
    "WatchlistEntryResponse",
    "WatchlistListResponse",
    "WatchlistStatusResponse",
    "WatchlistToggle",
    "WatchlistToggleResponse",
    "WatchlistStatsResponse",
]
