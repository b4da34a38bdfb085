"""Error types surfaced by the admin API as `{success: false, message}` bodies."""
from typing import Optional


class AdminAPIError(Exception):
    """Base error carrying a user-visible message and an HTTP status code."""
    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class Unauthorized(AdminAPIError):
    """Raised when the admin secret or session credential is rejected."""
    status_code = 401


class StoreError(AdminAPIError):
    """Raised when the underlying data store fails."""
    status_code = 500


class ValidationError(AdminAPIError):
    """Raised for malformed request input."""
    status_code = 400
