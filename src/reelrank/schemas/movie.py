"""Pydantic schemas for movie API endpoints."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from reelrank.utils.clock import utcnow

MIN_RELEASE_YEAR = 1900


def _validate_release_year(v: int | None) -> int | None:
    if v is None:
        return v
    max_year = utcnow().year + 5
    if not MIN_RELEASE_YEAR <= v <= max_year:
        msg = f"Release year must be between {MIN_RELEASE_YEAR} and {max_year}"
        raise ValueError(msg)
    return v


def _validate_poster_url(v: str | None) -> str | None:
    if v is None or v == "":
        return None
    if not v.startswith(("http://", "https://")):
        msg = "Poster URL must be a valid http(s) URL"
        raise ValueError(msg)
    return v


class MovieCreate(BaseModel):
    """Schema for adding a movie to the catalog."""

    title: str = Field(min_length=1, max_length=200, description="Movie title")
    genre: str = Field(min_length=1, max_length=100, description="Genre")
    release_year: int = Field(description="Release year")
    director: str = Field(min_length=1, max_length=100, description="Director name")
    cast: str | None = Field(default=None, description="Cast, free text")
    synopsis: str | None = Field(default=None, description="Plot synopsis")
    poster_url: str | None = Field(default=None, max_length=500, description="Poster image URL")

    check_release_year = field_validator("release_year")(_validate_release_year)
    check_poster_url = field_validator("poster_url")(_validate_poster_url)


class MovieUpdate(BaseModel):
    """Schema for a partial movie update. Omitted fields are left unchanged."""

    title: str | None = Field(default=None, min_length=1, max_length=200)
    genre: str | None = Field(default=None, min_length=1, max_length=100)
    release_year: int | None = Field(default=None)
    director: str | None = Field(default=None, min_length=1, max_length=100)
    cast: str | None = Field(default=None)
    synopsis: str | None = Field(default=None)
    poster_url: str | None = Field(default=None, max_length=500)

    check_release_year = field_validator("release_year")(_validate_release_year)
    check_poster_url = field_validator("poster_url")(_validate_poster_url)

    @field_validator("title", "genre", "release_year", "director")
    @classmethod
    def reject_null(cls, v):
        """Required catalog fields may be omitted but not cleared."""
        if v is None:
            msg = "Field cannot be null"
            raise ValueError(msg)
        return v


class MovieResponse(BaseModel):
    """Catalog movie as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(description="Movie ID")
    title: str = Field(description="Movie title")
    genre: str = Field(description="Genre")
    release_year: int = Field(description="Release year")
    director: str = Field(description="Director name")
    cast: str | None = Field(default=None, description="Cast, free text")
    synopsis: str | None = Field(default=None, description="Plot synopsis")
    poster_url: str | None = Field(default=None, description="Poster image URL")
    avg_rating: Decimal = Field(description="Average review rating (0.00 when unreviewed)")
    created_at: datetime = Field(description="When the movie was added")
    updated_at: datetime = Field(description="When the movie was last updated")


class MovieSummary(BaseModel):
    """Minimal movie info embedded in reviews and watchlists."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(description="Movie ID")
    title: str = Field(description="Movie title")
    genre: str = Field(description="Genre")
    release_year: int = Field(description="Release year")
    director: str = Field(description="Director name")
    poster_url: str | None = Field(default=None, description="Poster image URL")
    avg_rating: Decimal = Field(description="Average review rating")


class MovieListResponse(BaseModel):
    """Paginated response for listing movies."""

    model_config = ConfigDict(extra="ignore")

    total: int = Field(description="Total number of matching movies")
    page: int = Field(description="Current page number")
    page_size: int = Field(description="Number of items per page")
    results: list[MovieResponse] = Field(default_factory=list, description="Movie results")


class RankedMovie(MovieResponse):
    """A movie annotated with statistics computed by a ranking query."""

    review_count: int = Field(description="Number of reviews the ranking counted")


class RankingMetadata(BaseModel):
    """Parameters a ranking was computed with."""

    mode: str = Field(description="Ranking mode or category name")
    limit: int = Field(description="Maximum number of results requested")
    min_reviews: int | None = Field(default=None, description="Minimum review count applied")
    window_days: int | None = Field(default=None, description="Trending window in days")
    total_returned: int = Field(description="Number of movies returned")


class RankingResponse(BaseModel):
    """Response for ranking and category endpoints."""

    results: list[RankedMovie] = Field(default_factory=list, description="Ranked movies")
    metadata: RankingMetadata = Field(description="Ranking parameters")
