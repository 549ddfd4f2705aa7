"""Error taxonomy shared by services and the HTTP layer."""


class MessTrackerError(Exception):
    """Base class for errors that map to an HTTP response."""

    status_code = 500
    category = "Server Error"

    def __init__(self, message: str, details: object | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationFailed(MessTrackerError):
    """Input was rejected before any write."""

    status_code = 400
    category = "Validation Error"


class AuthenticationFailed(MessTrackerError):
    """Missing, invalid or expired credentials."""

    status_code = 401
    category = "Access Denied"


class TokenExpired(AuthenticationFailed):
    """Bearer token signature is valid but its lifetime has ended."""


class PermissionDenied(MessTrackerError):
    """Caller lacks the role or ownership required."""

    status_code = 403
    category = "Forbidden"


class NotFound(MessTrackerError):
    """Referenced record does not exist or is inactive."""

    status_code = 404
    category = "Not Found"


class Conflict(MessTrackerError):
    """Write would violate a uniqueness rule."""

    status_code = 409
    category = "Conflict"
