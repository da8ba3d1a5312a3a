"""Domain exceptions raised by the service layer.

Services raise these instead of HTTP errors; the application maps each class
to a status code in a single exception handler.
"""

from fastapi import status


class AuraError(RuntimeError):
    """Base exception for all service-level failures."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class ValidationFailed(AuraError):
    """Raised when input is well-formed but violates a business rule."""


class AuthenticationFailed(AuraError):
    """Raised when credentials are missing or wrong."""

    status_code = status.HTTP_401_UNAUTHORIZED


class PermissionDenied(AuraError):
    """Raised when the caller is known but not allowed to act."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFound(AuraError):
    """Raised when the requested entity does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class Conflict(AuraError):
    """Raised when the request clashes with existing state."""

    status_code = status.HTTP_409_CONFLICT
