# ── src/errors.py ─────────────────────────────────────────────────────────────
"""
Error taxonomy shared by the table adapter and the resource handlers.

Nothing below the HTTP boundary writes a response; handlers raise one of
these and main.py maps it to a JSON body with the matching status code.
"""


class AppError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str = ""):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Missing required fields"


class Unauthorized(AppError):
    status_code = 401
    default_message = "Unauthorized"


class Forbidden(AppError):
    status_code = 403
    default_message = "Forbidden"


class NotFound(AppError):
    status_code = 404
    default_message = "Record not found"


class Conflict(AppError):
    status_code = 409
    default_message = "Duplicate record"


class StoreError(AppError):
    """Any failure talking to the remote spreadsheet (credentials, HTTP, quota)."""

    status_code = 500
    default_message = "Spreadsheet store unavailable"


__all__ = [
    "AppError",
    "ValidationError",
    "Unauthorized",
    "Forbidden",
    "NotFound",
    "Conflict",
    "StoreError",
]
