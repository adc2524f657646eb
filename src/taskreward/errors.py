"""Error taxonomy shared by the services and the HTTP layer.

Every failure a caller can observe is one of:

- ``ValidationError``: malformed or out-of-range input, not retriable as-is
- ``NotFoundError``: a referenced entity does not exist
- ``ConflictError``: duplicate task, duplicate completion, referral already set
- ``InternalError``: store or transport failure, safe to retry
"""


class RewardServiceError(Exception):
    """Base class for service errors."""

    kind = "internal"
    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(RewardServiceError):
    """Raised when input is malformed or out of range."""

    kind = "validation"
    status_code = 422


class NotFoundError(RewardServiceError):
    """Raised when a referenced entity is absent."""

    kind = "not_found"
    status_code = 404

    def __init__(self, resource: str, message: str | None = None):
        self.resource = resource
        super().__init__(message or f"{resource} not found")


class ConflictError(RewardServiceError):
    """Raised when the request clashes with existing state."""

    kind = "conflict"
    status_code = 409


class InternalError(RewardServiceError):
    """Raised when the store fails."""

    kind = "internal"
    status_code = 500


class DeadlineExceededError(InternalError):
    """Raised when a settlement runs past its deadline before commit."""

    kind = "deadline_exceeded"
    status_code = 504


class AuthenticationError(RewardServiceError):
    """Raised when credentials are missing or invalid."""

    kind = "unauthenticated"
    status_code = 401
