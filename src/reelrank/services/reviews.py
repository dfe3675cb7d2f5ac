"""Review submission and deletion with ownership and uniqueness guards."""

import enum
import logging
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from reelrank.config import get_settings
from reelrank.models.movie import Movie
from reelrank.models.review import Review
from reelrank.models.user import User
from reelrank.services import ratings
from reelrank.services.access import ensure_can_mutate, is_admin_override
from reelrank.services.errors import InvalidInputError, NotFoundError
from reelrank.utils.clock import utcnow

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


class SubmissionKind(enum.StrEnum):
    """Whether a submission created a review or updated the existing one."""

    CREATED = "created"
    UPDATED = "updated"


@dataclass(frozen=True)
class ReviewOutcome:
    """Result of submitting a review."""

    review: Review
    kind: SubmissionKind
    avg_rating: Decimal


@dataclass(frozen=True)
class ReviewDeletion:
    """Result of deleting a review."""

    review_id: int
    movie_id: int
    by_admin_override: bool
    avg_rating: Decimal | None


def validate_review_input(rating: object, review_text: str | None) -> None:
    """Reject out-of-range ratings and over-long review text.

    Raises:
        InvalidInputError: If the rating is not an integer in [1, 5] or the
            text exceeds the configured maximum length.
    """
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise InvalidInputError("Rating must be an integer between 1 and 5")
    if not MIN_RATING <= rating <= MAX_RATING:
        raise InvalidInputError("Rating must be between 1 and 5")

    max_length = get_settings().review_text_max_length
    if review_text is not None and len(review_text) > max_length:
        raise InvalidInputError(f"Review text must be at most {max_length} characters")


async def lock_movie(db: AsyncSession, movie_id: int) -> bool:
    """Take the movie's row lock until the transaction ends.

    Review writes for one movie queue here, so every recompute sees the
    committed reviews of the writers before it.

    Returns:
        False if the movie does not exist.
    """
    result = await db.execute(select(Movie.id).where(Movie.id == movie_id).with_for_update())
    return result.scalar_one_or_none() is not None


async def _find_review(db: AsyncSession, user_id: int, movie_id: int) -> Review | None:
    result = await db.execute(
        select(Review).where(Review.user_id == user_id, Review.movie_id == movie_id)
    )
    return result.scalar_one_or_none()


async def submit(
    db: AsyncSession,
    user_id: int,
    movie_id: int,
    rating: int,
    review_text: str | None = None,
) -> ReviewOutcome:
    """Create the user's review of a movie, or update it if one exists.

    A user has at most one review per movie; resubmitting overwrites the
    rating and text of the existing review and keeps its id. The movie's
    cached average is recomputed before returning. The movie's row lock is
    held until the caller commits or rolls back.

    Raises:
        InvalidInputError: If the rating or text is invalid.
        NotFoundError: If the movie does not exist.
    """
    validate_review_input(rating, review_text)

    if not await lock_movie(db, movie_id):
        raise NotFoundError("Movie not found")

    review = await _find_review(db, user_id, movie_id)
    kind = SubmissionKind.UPDATED

    if review is None:
        now = utcnow()
        review = Review(
            user_id=user_id,
            movie_id=movie_id,
            rating=rating,
            review_text=review_text,
            created_at=now,
            updated_at=now,
        )
        try:
            async with db.begin_nested():
                db.add(review)
                await db.flush()
            kind = SubmissionKind.CREATED
        except IntegrityError:
            # Another writer inserted the row first; fall back to updating it
            logger.info(
                "Concurrent review insert for user %s movie %s, updating instead",
                user_id,
                movie_id,
            )
            review = await _find_review(db, user_id, movie_id)
            if review is None:
                raise

    if kind is SubmissionKind.UPDATED:
        review.rating = rating
        review.review_text = review_text
        review.updated_at = utcnow()

    avg = await ratings.recompute(db, movie_id)

    await db.refresh(review, attribute_names=["user"])
    logger.info(
        "Review %s %s by user %s for movie %s (rating=%s, avg=%s)",
        review.id,
        kind.value,
        user_id,
        movie_id,
        rating,
        avg,
    )
    return ReviewOutcome(review=review, kind=kind, avg_rating=avg)


async def delete(
    db: AsyncSession,
    requester_id: int,
    requester_is_admin: bool,
    review_id: int,
) -> ReviewDeletion:
    """Delete a review as its owner or as an administrator.

    Like ``submit``, holds the movie's row lock until the transaction ends.

    Raises:
        NotFoundError: If the review does not exist.
        ForbiddenError: If the requester is neither the owner nor an admin.
    """
    movie_result = await db.execute(select(Review.movie_id).where(Review.id == review_id))
    movie_id = movie_result.scalar_one_or_none()
    if movie_id is None:
        raise NotFoundError("Review not found")

    await lock_movie(db, movie_id)

    # Re-read under the lock; a concurrent delete may have won
    result = await db.execute(
        select(Review)
        .where(Review.id == review_id)
        .execution_options(populate_existing=True)
    )
    review = result.scalar_one_or_none()
    if review is None:
        raise NotFoundError("Review not found")

    ensure_can_mutate(
        requester_id,
        requester_is_admin,
        review.user_id,
        message="Not authorized to delete this review",
    )
    owner_id = review.user_id
    override = is_admin_override(requester_id, requester_is_admin, owner_id)

    await db.delete(review)
    avg = await ratings.recompute(db, movie_id)

    if override:
        logger.warning(
            "Admin %s deleted review %s owned by user %s (movie %s)",
            requester_id,
            review_id,
            owner_id,
            movie_id,
        )
    else:
        logger.info("User %s deleted own review %s (movie %s)", requester_id, review_id, movie_id)

    return ReviewDeletion(
        review_id=review_id,
        movie_id=movie_id,
        by_admin_override=override,
        avg_rating=avg,
    )


async def list_for_movie(
    db: AsyncSession, movie_id: int, page: int = 1, page_size: int = 10
) -> tuple[int, list[Review]]:
    """List a movie's reviews, newest first, with their authors loaded.

    Raises:
        NotFoundError: If the movie does not exist.
    """
    movie_result = await db.execute(select(Movie.id).where(Movie.id == movie_id))
    if movie_result.scalar_one_or_none() is None:
        raise NotFoundError("Movie not found")

    count_result = await db.execute(
        select(func.count()).select_from(Review).where(Review.movie_id == movie_id)
    )
    total = count_result.scalar_one()

    offset = (page - 1) * page_size
    result = await db.execute(
        select(Review)
        .where(Review.movie_id == movie_id)
        .options(selectinload(Review.user))
        .order_by(Review.created_at.desc(), Review.id.desc())
        .offset(offset)
        .limit(page_size)
    )
    return total, list(result.scalars().all())


async def list_for_user(
    db: AsyncSession, user_id: int, page: int = 1, page_size: int = 10
) -> tuple[int, list[Review]]:
    """List a user's reviews, newest first, with their movies loaded.

    Raises:
        NotFoundError: If the user does not exist.
    """
    user_result = await db.execute(select(User.id).where(User.id == user_id))
    if user_result.scalar_one_or_none() is None:
        raise NotFoundError("User not found")

    count_result = await db.execute(
        select(func.count()).select_from(Review).where(Review.user_id == user_id)
    )
    total = count_result.scalar_one()

    offset = (page - 1) * page_size
    result = await db.execute(
        select(Review)
        .where(Review.user_id == user_id)
        .options(selectinload(Review.movie))
        .order_by(Review.created_at.desc(), Review.id.desc())
        .offset(offset)
        .limit(page_size)
    )
    return total, list(result.scalars().all())
