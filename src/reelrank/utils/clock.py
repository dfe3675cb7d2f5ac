"""Time helpers."""

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, the form stored in the database."""
    return datetime.now(UTC).replace(tzinfo=None)
