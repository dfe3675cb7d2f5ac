"""Pydantic schemas for review API endpoints."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from reelrank.schemas.movie import MovieResponse, MovieSummary


class ReviewCreate(BaseModel):
    """Schema for submitting a review. Resubmitting replaces the previous one."""

    rating: int = Field(strict=True, description="Rating from 1 to 5")
    review_text: str | None = Field(default=None, description="Optional review text")


class ReviewAuthor(BaseModel):
    """Minimal user info for review authorship display."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(description="User ID")
    username: str = Field(description="Username")
    profile_pic: str | None = Field(default=None, description="Profile picture URL")


class ReviewResponse(BaseModel):
    """A review with its author."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(description="Review ID")
    user_id: int = Field(description="Author user ID")
    movie_id: int = Field(description="Reviewed movie ID")
    rating: int = Field(description="Rating from 1 to 5")
    review_text: str | None = Field(default=None, description="Review text")
    created_at: datetime = Field(description="When the review was first submitted")
    updated_at: datetime = Field(description="When the review was last changed")
    user: ReviewAuthor | None = Field(default=None, description="Author")


class ReviewWithMovie(BaseModel):
    """A review with the movie it is about."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(description="Review ID")
    user_id: int = Field(description="Author user ID")
    movie_id: int = Field(description="Reviewed movie ID")
    rating: int = Field(description="Rating from 1 to 5")
    review_text: str | None = Field(default=None, description="Review text")
    created_at: datetime = Field(description="When the review was first submitted")
    updated_at: datetime = Field(description="When the review was last changed")
    movie: MovieSummary = Field(description="Reviewed movie")


class ReviewSubmissionResponse(BaseModel):
    """Response after submitting a review."""

    kind: str = Field(description="'created' or 'updated'")
    review: ReviewResponse = Field(description="The stored review")
    movie_avg_rating: Decimal = Field(description="The movie's average rating after the change")


class ReviewDeletionResponse(BaseModel):
    """Response after deleting a review."""

    review_id: int = Field(description="Deleted review ID")
    movie_id: int = Field(description="Movie the review belonged to")
    by_admin_override: bool = Field(description="Deleted by an admin on another user's behalf")
    movie_avg_rating: Decimal | None = Field(
        default=None, description="The movie's average rating after the change"
    )


class ReviewListResponse(BaseModel):
    """Paginated list of a movie's reviews."""

    total: int = Field(description="Total number of reviews")
    page: int = Field(description="Current page number")
    page_size: int = Field(description="Number of items per page")
    results: list[ReviewResponse] = Field(default_factory=list, description="Reviews")


class UserReviewListResponse(BaseModel):
    """Paginated list of a user's reviews."""

    total: int = Field(description="Total number of reviews")
    page: int = Field(description="Current page number")
    page_size: int = Field(description="Number of items per page")
    results: list[ReviewWithMovie] = Field(default_factory=list, description="Reviews")


class MovieDetailResponse(MovieResponse):
    """A movie with all of its reviews."""

    review_count: int = Field(description="Number of reviews")
    reviews: list[ReviewResponse] = Field(default_factory=list, description="Reviews, newest first")
