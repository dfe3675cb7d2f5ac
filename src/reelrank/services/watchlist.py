"""Watchlist membership with one entry per user and movie."""

import enum
import logging
from collections import Counter
from dataclasses import dataclass, field

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from reelrank.models.movie import Movie
from reelrank.models.watchlist import WatchlistEntry
from reelrank.services.errors import AlreadyExistsError, NotFoundError
from reelrank.utils.clock import utcnow

logger = logging.getLogger(__name__)

RECENT_ADDITIONS_LIMIT = 5


class ToggleAction(enum.StrEnum):
    """What a toggle did."""

    ADDED = "added"
    REMOVED = "removed"


@dataclass(frozen=True)
class ToggleResult:
    """Result of toggling a movie on a watchlist."""

    action: ToggleAction
    entry: WatchlistEntry | None = None

    @property
    def in_watchlist(self) -> bool:
        return self.action is ToggleAction.ADDED


@dataclass
class WatchlistStats:
    """Summary of a user's watchlist."""

    total_movies: int
    genres: dict[str, int] = field(default_factory=dict)
    recent_additions: list[WatchlistEntry] = field(default_factory=list)


async def _find_entry(db: AsyncSession, user_id: int, movie_id: int) -> WatchlistEntry | None:
    result = await db.execute(
        select(WatchlistEntry).where(
            WatchlistEntry.user_id == user_id, WatchlistEntry.movie_id == movie_id
        )
    )
    return result.scalar_one_or_none()


async def add(db: AsyncSession, user_id: int, movie_id: int) -> WatchlistEntry:
    """Add a movie to the user's watchlist.

    A second add of the same movie is an error, not a no-op.

    Raises:
        NotFoundError: If the movie does not exist.
        AlreadyExistsError: If the movie is already on the watchlist.
    """
    movie_result = await db.execute(select(Movie.id).where(Movie.id == movie_id))
    if movie_result.scalar_one_or_none() is None:
        raise NotFoundError("Movie not found")

    if await _find_entry(db, user_id, movie_id) is not None:
        raise AlreadyExistsError("Movie already in watchlist")

    # The unique constraint settles concurrent adds of the same pair
    entry = WatchlistEntry(user_id=user_id, movie_id=movie_id, added_at=utcnow())
    try:
        async with db.begin_nested():
            db.add(entry)
            await db.flush()
    except IntegrityError as e:
        raise AlreadyExistsError("Movie already in watchlist") from e

    await db.refresh(entry, attribute_names=["movie"])
    logger.info("User %s added movie %s to watchlist", user_id, movie_id)
    return entry


async def remove(db: AsyncSession, user_id: int, movie_id: int) -> None:
    """Remove a movie from the user's watchlist.

    Raises:
        NotFoundError: If the movie is not on the watchlist.
    """
    result = await db.execute(
        delete(WatchlistEntry)
        .where(WatchlistEntry.user_id == user_id, WatchlistEntry.movie_id == movie_id)
        .execution_options(synchronize_session="evaluate")
    )
    if result.rowcount == 0:
        raise NotFoundError("Movie not found in watchlist")

    logger.info("User %s removed movie %s from watchlist", user_id, movie_id)


async def status(db: AsyncSession, user_id: int, movie_id: int) -> bool:
    """Return whether the movie is on the user's watchlist.

    Never fails: a movie that does not exist is simply not on the watchlist.
    """
    return await _find_entry(db, user_id, movie_id) is not None


async def toggle(
    db: AsyncSession, user_id: int, movie_id: int, currently_present: bool
) -> ToggleResult:
    """Remove the movie if the caller says it is present, otherwise add it.

    Presence is taken from the caller as-is. A stale flag surfaces the
    NotFoundError or AlreadyExistsError of the underlying operation; callers
    should re-fetch the status and retry.
    """
    if currently_present:
        await remove(db, user_id, movie_id)
        return ToggleResult(action=ToggleAction.REMOVED)

    entry = await add(db, user_id, movie_id)
    return ToggleResult(action=ToggleAction.ADDED, entry=entry)


async def list_entries(
    db: AsyncSession, user_id: int, page: int = 1, page_size: int = 10
) -> tuple[int, list[WatchlistEntry]]:
    """List the user's watchlist, most recently added first."""
    count_result = await db.execute(
        select(func.count()).select_from(WatchlistEntry).where(WatchlistEntry.user_id == user_id)
    )
    total = count_result.scalar_one()

    offset = (page - 1) * page_size
    result = await db.execute(
        select(WatchlistEntry)
        .where(WatchlistEntry.user_id == user_id)
        .options(selectinload(WatchlistEntry.movie))
        .order_by(WatchlistEntry.added_at.desc(), WatchlistEntry.id.desc())
        .offset(offset)
        .limit(page_size)
    )
    return total, list(result.scalars().all())


async def stats(db: AsyncSession, user_id: int) -> WatchlistStats:
    """Count the user's watchlist, broken down by genre, with recent additions."""
    genre_result = await db.execute(
        select(Movie.genre)
        .join(WatchlistEntry, WatchlistEntry.movie_id == Movie.id)
        .where(WatchlistEntry.user_id == user_id)
    )
    genres = Counter(genre_result.scalars().all())

    _, recent = await list_entries(db, user_id, page=1, page_size=RECENT_ADDITIONS_LIMIT)

    return WatchlistStats(
        total_movies=sum(genres.values()),
        genres=dict(genres),
        recent_additions=recent,
    )
