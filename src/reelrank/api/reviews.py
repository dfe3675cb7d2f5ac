"""Review API endpoints."""

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from reelrank.database import get_db
from reelrank.schemas.review import (
    ReviewCreate,
    ReviewDeletionResponse,
    ReviewListResponse,
    ReviewResponse,
    ReviewSubmissionResponse,
    ReviewWithMovie,
    UserReviewListResponse,
)
from reelrank.services import reviews as review_service
from reelrank.services.reviews import SubmissionKind
from reelrank.utils.security import CurrentUser

router = APIRouter(tags=["reviews"])


@router.get("/movies/{movie_id}/reviews", response_model=ReviewListResponse)
async def list_movie_reviews(
    movie_id: int,
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(10, ge=1, le=100, description="Items per page"),
    db: AsyncSession = Depends(get_db),
) -> ReviewListResponse:
    """List a movie's reviews, newest first."""
    total, reviews = await review_service.list_for_movie(db, movie_id, page, page_size)
    return ReviewListResponse(
        total=total,
        page=page,
        page_size=page_size,
        results=[ReviewResponse.model_validate(review) for review in reviews],
    )


@router.post("/movies/{movie_id}/reviews", response_model=ReviewSubmissionResponse)
async def submit_review(
    movie_id: int,
    current_user: CurrentUser,
    review_data: ReviewCreate,
    response: Response,
    db: AsyncSession = Depends(get_db),
) -> ReviewSubmissionResponse:
    """Create or replace the current user's review of a movie.

    Answers 201 when a review was created and 200 when the user's existing
    review was updated.
    """
    outcome = await review_service.submit(
        db, current_user.id, movie_id, review_data.rating, review_data.review_text
    )
    response.status_code = 201 if outcome.kind is SubmissionKind.CREATED else 200
    return ReviewSubmissionResponse(
        kind=outcome.kind.value,
        review=ReviewResponse.model_validate(outcome.review),
        movie_avg_rating=outcome.avg_rating,
    )


@router.delete("/reviews/{review_id}", response_model=ReviewDeletionResponse)
async def delete_review(
    review_id: int,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> ReviewDeletionResponse:
    """Delete a review. Only its author or an administrator may do this."""
    deletion = await review_service.delete(
        db, current_user.id, current_user.is_admin, review_id
    )
    return ReviewDeletionResponse(
        review_id=deletion.review_id,
        movie_id=deletion.movie_id,
        by_admin_override=deletion.by_admin_override,
        movie_avg_rating=deletion.avg_rating,
    )


@router.get("/reviews/mine", response_model=UserReviewListResponse)
async def list_my_reviews(
    current_user: CurrentUser,
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(10, ge=1, le=100, description="Items per page"),
    db: AsyncSession = Depends(get_db),
) -> UserReviewListResponse:
    """List the current user's reviews, newest first."""
    total, reviews = await review_service.list_for_user(db, current_user.id, page, page_size)
    return UserReviewListResponse(
        total=total,
        page=page,
        page_size=page_size,
        results=[ReviewWithMovie.model_validate(review) for review in reviews],
    )


@router.get("/users/{user_id}/reviews", response_model=UserReviewListResponse)
async def list_user_reviews(
    user_id: int,
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(10, ge=1, le=100, description="Items per page"),
    db: AsyncSession = Depends(get_db),
) -> UserReviewListResponse:
    """List another user's reviews, newest first."""
    total, reviews = await review_service.list_for_user(db, user_id, page, page_size)
    return UserReviewListResponse(
        total=total,
        page=page,
        page_size=page_size,
        results=[ReviewWithMovie.model_validate(review) for review in reviews],
    )
