"""Watchlist API endpoints. All of them act on the current user's watchlist."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from reelrank.database import get_db
from reelrank.schemas.watchlist import (
    WatchlistEntryResponse,
    WatchlistListResponse,
    WatchlistStatsResponse,
    WatchlistStatusResponse,
    WatchlistToggle,
    WatchlistToggleResponse,
)
from reelrank.services import watchlist as watchlist_service
from reelrank.utils.security import CurrentUser

router = APIRouter(prefix="/watchlist", tags=["watchlist"])


@router.get("", response_model=WatchlistListResponse)
async def list_watchlist(
    current_user: CurrentUser,
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(10, ge=1, le=100, description="Items per page"),
    db: AsyncSession = Depends(get_db),
) -> WatchlistListResponse:
    """List the movies on the watchlist, most recently added first."""
    total, entries = await watchlist_service.list_entries(db, current_user.id, page, page_size)
    return WatchlistListResponse(
        total=total,
        page=page,
        page_size=page_size,
        results=[WatchlistEntryResponse.model_validate(entry) for entry in entries],
    )


@router.get("/stats", response_model=WatchlistStatsResponse)
async def watchlist_stats(
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> WatchlistStatsResponse:
    """Count the watchlist by genre and show the latest additions."""
    stats = await watchlist_service.stats(db, current_user.id)
    return WatchlistStatsResponse(
        total_movies=stats.total_movies,
        genres=stats.genres,
        recent_additions=[
            WatchlistEntryResponse.model_validate(entry) for entry in stats.recent_additions
        ],
    )


@router.get("/check/{movie_id}", response_model=WatchlistStatusResponse)
async def check_watchlist(
    movie_id: int,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> WatchlistStatusResponse:
    """Check whether a movie is on the watchlist.

    Unknown movies report ``in_watchlist: false`` rather than 404.
    """
    present = await watchlist_service.status(db, current_user.id, movie_id)
    return WatchlistStatusResponse(movie_id=movie_id, in_watchlist=present)


@router.post("/{movie_id}", response_model=WatchlistEntryResponse, status_code=201)
async def add_to_watchlist(
    movie_id: int,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> WatchlistEntryResponse:
    """Add a movie to the watchlist. Adding it twice answers 409."""
    entry = await watchlist_service.add(db, current_user.id, movie_id)
    return WatchlistEntryResponse.model_validate(entry)


@router.delete("/{movie_id}", status_code=204)
async def remove_from_watchlist(
    movie_id: int,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> None:
    """Remove a movie from the watchlist. Answers 404 if it is not there."""
    await watchlist_service.remove(db, current_user.id, movie_id)


@router.post("/{movie_id}/toggle", response_model=WatchlistToggleResponse)
async def toggle_watchlist(
    movie_id: int,
    current_user: CurrentUser,
    toggle_data: WatchlistToggle,
    db: AsyncSession = Depends(get_db),
) -> WatchlistToggleResponse:
    """Add or remove a movie based on the caller's view of its presence.

    A stale ``currently_present`` flag answers 404 or 409; re-check the
    status and try again.
    """
    result = await watchlist_service.toggle(
        db, current_user.id, movie_id, toggle_data.currently_present
    )
    return WatchlistToggleResponse(
        movie_id=movie_id,
        action=result.action.value,
        in_watchlist=result.in_watchlist,
        entry=WatchlistEntryResponse.model_validate(result.entry) if result.entry else None,
    )
