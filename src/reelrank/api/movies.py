"""Movie catalog and ranking API endpoints."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from reelrank.config import get_settings
from reelrank.database import get_db
from reelrank.schemas.movie import (
    MovieCreate,
    MovieListResponse,
    MovieResponse,
    MovieUpdate,
    RankedMovie,
    RankingMetadata,
    RankingResponse,
)
from reelrank.schemas.review import MovieDetailResponse, ReviewResponse
from reelrank.services import movies as movie_service
from reelrank.services import rankings
from reelrank.services.rankings import MovieWithStats, RankingMode, RankingParams
from reelrank.utils.security import AdminUser

router = APIRouter(prefix="/movies", tags=["movies"])

settings = get_settings()


def ranked_movie(item: MovieWithStats) -> RankedMovie:
    """Convert a ranking row to its response schema.

    The rating reported is the one the ranking computed, which for trending
    covers only the reviews inside the window.
    """
    base = MovieResponse.model_validate(item.movie).model_dump(exclude={"avg_rating"})
    return RankedMovie(**base, avg_rating=item.avg_rating, review_count=item.review_count)


@router.get("", response_model=MovieListResponse)
async def list_movies(
    search: str | None = Query(None, description="Search title, director and cast"),
    genre: str | None = Query(None, description="Filter by genre"),
    sort_by: str = Query("created_at", description="created_at, title, release_year, avg_rating"),
    sort_order: str = Query("desc", description="asc or desc"),
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(10, ge=1, le=100, description="Items per page"),
    db: AsyncSession = Depends(get_db),
) -> MovieListResponse:
    """List catalog movies with search, genre filter, sorting and pagination."""
    total, movies = await movie_service.list_movies(
        db,
        search=search,
        genre=genre,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        page_size=page_size,
    )
    return MovieListResponse(
        total=total,
        page=page,
        page_size=page_size,
        results=[MovieResponse.model_validate(movie) for movie in movies],
    )


@router.get("/top-rated", response_model=RankingResponse)
async def top_rated_movies(
    limit: int = Query(settings.default_ranking_limit, ge=1, le=100, description="Max results"),
    min_reviews: int = Query(
        settings.top_rated_min_reviews, ge=1, description="Minimum number of reviews"
    ),
    db: AsyncSession = Depends(get_db),
) -> RankingResponse:
    """Movies with at least ``min_reviews`` reviews, best average first."""
    results = await rankings.query_ranking(
        db, RankingMode.TOP_RATED, limit, RankingParams(min_reviews=min_reviews)
    )
    return RankingResponse(
        results=[ranked_movie(item) for item in results],
        metadata=RankingMetadata(
            mode=RankingMode.TOP_RATED.value,
            limit=limit,
            min_reviews=min_reviews,
            total_returned=len(results),
        ),
    )


@router.get("/trending", response_model=RankingResponse)
async def trending_movies(
    limit: int = Query(settings.default_ranking_limit, ge=1, le=100, description="Max results"),
    days: int = Query(
        settings.trending_window_days, ge=1, le=3650, description="Only count recent reviews"
    ),
    db: AsyncSession = Depends(get_db),
) -> RankingResponse:
    """Movies with the most reviews in the last ``days`` days."""
    results = await rankings.query_ranking(
        db, RankingMode.TRENDING, limit, RankingParams(window_days=days)
    )
    return RankingResponse(
        results=[ranked_movie(item) for item in results],
        metadata=RankingMetadata(
            mode=RankingMode.TRENDING.value,
            limit=limit,
            window_days=days,
            total_returned=len(results),
        ),
    )


@router.get("/category/{category}", response_model=RankingResponse)
async def movies_by_category(
    category: str,
    limit: int = Query(settings.default_ranking_limit, ge=1, le=100, description="Max results"),
    db: AsyncSession = Depends(get_db),
) -> RankingResponse:
    """Browse a category: latest, highest-rated or most-reviewed.

    Unknown categories are rejected with 400.
    """
    results = await rankings.query_category(db, category, limit)
    return RankingResponse(
        results=[ranked_movie(item) for item in results],
        metadata=RankingMetadata(
            mode=category.strip().lower(), limit=limit, total_returned=len(results)
        ),
    )


@router.get("/genre/{genre}", response_model=MovieListResponse)
async def movies_by_genre(
    genre: str,
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(10, ge=1, le=100, description="Items per page"),
    db: AsyncSession = Depends(get_db),
) -> MovieListResponse:
    """List movies whose genre contains ``genre``, newest first."""
    total, movies = await movie_service.list_movies(
        db, genre=genre, page=page, page_size=page_size
    )
    return MovieListResponse(
        total=total,
        page=page,
        page_size=page_size,
        results=[MovieResponse.model_validate(movie) for movie in movies],
    )


@router.get("/{movie_id}", response_model=MovieDetailResponse)
async def get_movie(
    movie_id: int,
    db: AsyncSession = Depends(get_db),
) -> MovieDetailResponse:
    """Get a movie with all of its reviews."""
    detail = await movie_service.get_movie_detail(db, movie_id)
    base = MovieResponse.model_validate(detail.movie).model_dump()
    return MovieDetailResponse(
        **base,
        review_count=detail.review_count,
        reviews=[ReviewResponse.model_validate(review) for review in detail.reviews],
    )


@router.post("", response_model=MovieResponse, status_code=201)
async def create_movie(
    current_user: AdminUser,  # noqa: ARG001 - Required for admin enforcement
    movie_data: MovieCreate,
    db: AsyncSession = Depends(get_db),
) -> MovieResponse:
    """Add a movie to the catalog. Admin only."""
    movie = await movie_service.create_movie(db, movie_data.model_dump())
    return MovieResponse.model_validate(movie)


@router.put("/{movie_id}", response_model=MovieResponse)
async def update_movie(
    movie_id: int,
    current_user: AdminUser,  # noqa: ARG001 - Required for admin enforcement
    movie_data: MovieUpdate,
    db: AsyncSession = Depends(get_db),
) -> MovieResponse:
    """Update a movie's catalog fields. Admin only."""
    values = movie_data.model_dump(exclude_unset=True)
    movie = await movie_service.update_movie(db, movie_id, values)
    return MovieResponse.model_validate(movie)


@router.delete("/{movie_id}", status_code=204)
async def delete_movie(
    movie_id: int,
    current_user: AdminUser,  # noqa: ARG001 - Required for admin enforcement
    db: AsyncSession = Depends(get_db),
) -> None:
    """Delete a movie with its reviews and watchlist entries. Admin only."""
    await movie_service.delete_movie(db, movie_id)
