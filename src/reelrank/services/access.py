"""Ownership checks for user-owned resources."""

from reelrank.services.errors import ForbiddenError


def can_mutate(requester_id: int, requester_is_admin: bool, owner_id: int) -> bool:
    """Return True when the requester owns the resource or is an administrator."""
    return requester_is_admin or requester_id == owner_id


def is_admin_override(requester_id: int, requester_is_admin: bool, owner_id: int) -> bool:
    """Return True when access is granted only because the requester is an admin."""
    return requester_is_admin and requester_id != owner_id


def ensure_can_mutate(
    requester_id: int,
    requester_is_admin: bool,
    owner_id: int,
    message: str = "Not authorized to modify this resource",
) -> None:
    """Raise ForbiddenError unless the requester may mutate the resource."""
    if not can_mutate(requester_id, requester_is_admin, owner_id):
        raise ForbiddenError(message)
