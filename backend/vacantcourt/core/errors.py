"""
Centralized error types and the error -> HTTP mapping used by routes.

Job-side errors (configuration, store, email) are raised by services and caught by the court
notify job; request-side errors carry their own status code so routes stay thin.
"""
from __future__ import annotations

from fastapi.responses import JSONResponse

# ---------------------------------------------------------------------------
# Constants: status codes and user-facing messages
# ---------------------------------------------------------------------------

STATUS_BAD_REQUEST = 400
STATUS_UNAUTHORIZED = 401
STATUS_FORBIDDEN = 403
STATUS_NOT_FOUND = 404
STATUS_INTERNAL_ERROR = 500

MSG_NO_TOKEN = "You must be logged in to perform this action. (No token found)"
MSG_INVALID_TOKEN = "Invalid or expired credentials. Please log in again."
MSG_TRANSFER_FIELDS_REQUIRED = "Court ID and new owner email are required."
MSG_INVALID_EMAIL = "Please use a valid email address."
MSG_USER_NOT_FOUND = "No user found with that email address."
MSG_COURT_NOT_FOUND = "Court not found."
MSG_NOT_OWNER = "You are not the owner of this court."
MSG_SELF_TRANSFER = "You cannot transfer ownership to yourself."
MSG_INTERNAL_ERROR = "An internal error occurred."
MSG_REQUEST_NOT_FOUND = "Notification request not found."
MSG_NO_NOTIFY_EMAIL = "Your account has no email address to notify."


# ---------------------------------------------------------------------------
# Job-side errors
# ---------------------------------------------------------------------------


class ConfigurationError(Exception):
    """Required settings are missing. Carries the env var names."""

    def __init__(self, missing: list[str]):
        self.missing = list(missing)
        super().__init__(f"Missing required configuration: {', '.join(self.missing)}")


class StoreError(Exception):
    """The facility store could not complete a read or write."""


class InvalidRecordError(ValueError):
    """A stored record is missing required fields or has the wrong shape."""


class EmailDispatchError(Exception):
    """The email provider rejected or failed to deliver one message."""


# ---------------------------------------------------------------------------
# Request-side errors: each carries the status code and message returned to the caller
# ---------------------------------------------------------------------------


class RequestError(Exception):
    status_code: int = STATUS_INTERNAL_ERROR

    def __init__(self, detail: str, status_code: int | None = None):
        super().__init__(detail)
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code


class AuthError(RequestError):
    """Missing, malformed, invalid or expired bearer credential."""

    status_code = STATUS_UNAUTHORIZED


class OwnershipTransferError(RequestError):
    """One of the ownership-transfer rejections (bad input, unknown user/court, not owner, self)."""

    status_code = STATUS_BAD_REQUEST


class NotFoundError(RequestError):
    status_code = STATUS_NOT_FOUND


def error_response(exc: Exception) -> JSONResponse:
    """
    Map an exception raised while handling a request into a JSON error response.
    RequestError subclasses keep their status and message; anything else is a generic 500.
    """
    if isinstance(exc, RequestError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})
    return JSONResponse(status_code=STATUS_INTERNAL_ERROR, content={"error": MSG_INTERNAL_ERROR})
