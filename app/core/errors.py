"""Application errors rendered by the handlers in app.main as {"error": message}."""


class AppError(Exception):
    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInput(AppError):
    """Malformed or missing request parameters. The caller must fix the request."""

    status_code = 400


class NotFound(AppError):
    status_code = 404


class Conflict(AppError):
    status_code = 409


class SlotUnavailable(Conflict):
    """The requested time is taken or no longer offered."""


class UpstreamDataUnavailable(AppError):
    """A schedule or booking lookup failed. Reads are idempotent, so callers may retry."""

    status_code = 503
    retry_after_seconds = 5


class TimeParseError(ValueError):
    pass
