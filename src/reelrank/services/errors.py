"""Domain errors raised by the core services.

Every error carries the HTTP status code the API layer should answer with,
so route handlers can let them propagate to the global exception handlers.
"""


class ServiceError(Exception):
    """Base exception for service errors."""

    default_message = "Service error"
    default_status_code = 500

    def __init__(self, message: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message or self.default_message)
        self.status_code = status_code or self.default_status_code


class NotFoundError(ServiceError):
    """Raised when a referenced movie, review, user or watchlist entry is absent."""

    default_message = "Resource not found"
    default_status_code = 404


class InvalidInputError(ServiceError):
    """Raised when input is rejected before any write happens."""

    default_message = "Invalid input"
    default_status_code = 400


class ForbiddenError(ServiceError):
    """Raised when a requester may not mutate a resource they do not own."""

    default_message = "Not authorized to modify this resource"
    default_status_code = 403


class AlreadyExistsError(ServiceError):
    """Raised when a uniqueness guard rejects a duplicate."""

    default_message = "Resource already exists"
    default_status_code = 409


class AggregationError(ServiceError):
    """Raised when a movie's cached rating could not be brought up to date.

    This is a consistency failure, never a retryable condition.
    """

    default_message = "Failed to update movie rating"
    default_status_code = 500
