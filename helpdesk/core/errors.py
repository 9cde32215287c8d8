from __future__ import annotations


class HelpdeskError(Exception):
    """Base error carrying the HTTP status and the message shown to clients.

    The message is always a fixed string chosen at the raise site; details
    from the storage layer belong in the log, not here.
    """

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(HelpdeskError):
    status_code = 400
    default_message = "Invalid request"


class AuthError(HelpdeskError):
    status_code = 401
    default_message = "Unauthorized"


class ForbiddenError(HelpdeskError):
    status_code = 403
    default_message = "Forbidden"


class NotFoundError(HelpdeskError):
    status_code = 404
    default_message = "Not found"


class StorageError(HelpdeskError):
    status_code = 500
    default_message = "Storage error"


class UploadError(HelpdeskError):
    status_code = 502
    default_message = "Failed to upload file"


class NetworkError(HelpdeskError):
    status_code = 502
    default_message = "Network error"
