"""Pydantic schemas for watchlist API endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from reelrank.schemas.movie import MovieSummary


class WatchlistEntryResponse(BaseModel):
    """A movie on a user's watchlist."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(description="Watchlist entry ID")
    movie_id: int = Field(description="Movie ID")
    added_at: datetime = Field(description="When the movie was added")
    movie: MovieSummary = Field(description="Movie details")


class WatchlistListResponse(BaseModel):
    """Paginated response for a user's watchlist."""

    total: int = Field(description="Total number of movies on the watchlist")
    page: int = Field(description="Current page number")
    page_size: int = Field(description="Number of items per page")
    results: list[WatchlistEntryResponse] = Field(default_factory=list, description="Entries")


class WatchlistStatusResponse(BaseModel):
    """Whether a movie is on the current user's watchlist."""

    movie_id: int = Field(description="Movie ID")
    in_watchlist: bool = Field(description="Whether the movie is on the watchlist")


class WatchlistToggle(BaseModel):
    """Schema for toggling a movie on the watchlist."""

    currently_present: bool = Field(
        description="Whether the caller believes the movie is on the watchlist"
    )


class WatchlistToggleResponse(BaseModel):
    """Response after toggling a movie on the watchlist."""

    movie_id: int = Field(description="Movie ID")
    action: str = Field(description="'added' or 'removed'")
    in_watchlist: bool = Field(description="Whether the movie is now on the watchlist")
    entry: WatchlistEntryResponse | None = Field(default=None, description="New entry, if added")


class WatchlistStatsResponse(BaseModel):
    """Summary of the current user's watchlist."""

    total_movies: int = Field(description="Number of movies on the watchlist")
    genres: dict[str, int] = Field(default_factory=dict, description="Movie count per genre")
    recent_additions: list[WatchlistEntryResponse] = Field(
        default_factory=list, description="Most recently added movies"
    )
