from __future__ import annotations


class SpinBookError(RuntimeError):
    """Base error carrying the HTTP status and a customer-safe message.

    ``detail`` holds operator-facing information (upstream status, raw error text)
    and is never shown to customers outside development mode.
    """

    status_code = 500
    code = "INTERNAL_ERROR"
    default_message = "Internal server error. Please try again."

    def __init__(self, message: str | None = None, *, detail: str | None = None, code: str | None = None) -> None:
        self.message = message or self.default_message
        self.detail = detail
        if code:
            self.code = code
        super().__init__(self.message)


class ValidationError(SpinBookError):
    """Raised when request input is missing or malformed."""

    status_code = 400
    code = "VALIDATION_ERROR"
    default_message = "Invalid request."

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(message)


class ConflictError(SpinBookError):
    """Raised when requested slots are already taken."""

    status_code = 409
    code = "SLOT_CONFLICT"
    default_message = "One of the selected slots is no longer available. Please refresh the page."

    def __init__(
        self,
        slots: list[int] | None = None,
        *,
        at_write: bool = False,
        message: str | None = None,
        detail: str | None = None,
    ) -> None:
        self.slots = sorted(slots or [])
        self.at_write = at_write
        super().__init__(message, detail=detail)


class ConfigurationError(SpinBookError):
    """Raised when credentials, calendar id or timezone are missing or invalid."""

    status_code = 500
    code = "CONFIGURATION_ERROR"
    default_message = "Server configuration error. Please contact the studio."

    def __init__(
        self,
        message: str | None = None,
        *,
        setting: str | None = None,
        detail: str | None = None,
        code: str | None = None,
    ) -> None:
        self.setting = setting
        super().__init__(message, detail=detail, code=code)


class UpstreamAuthError(ConfigurationError):
    """Raised when the calendar service rejects our credentials."""

    code = "AUTH_ERROR"
    default_message = "Calendar authentication error."


class CalendarNotFoundError(ConfigurationError):
    """Raised when the configured calendar does not exist or is not shared with us."""

    code = "CALENDAR_NOT_FOUND"
    default_message = "Calendar not found. Please check the configuration."


class UpstreamPermissionError(SpinBookError):
    """Raised when the service account lacks access to the calendar."""

    status_code = 500
    code = "PERMISSION_DENIED"
    default_message = "No permission to access the calendar."


class UpstreamRateLimitError(SpinBookError):
    """Raised when the calendar service throttles us. Retryable after backoff."""

    status_code = 429
    code = "RATE_LIMIT_EXCEEDED"
    default_message = "Calendar API limit exceeded. Please try again in a few minutes."


class UpstreamTimeoutError(SpinBookError):
    """Raised when the calendar service is too slow. Retryable."""

    status_code = 504
    code = "TIMEOUT_ERROR"
    default_message = "The calendar took too long to respond. Please try again."


class UpstreamConnectionError(SpinBookError):
    """Raised when the calendar service cannot be reached."""

    status_code = 503
    code = "NETWORK_ERROR"
    default_message = "Could not reach the calendar service. Please try again."


class InternalError(SpinBookError):
    """Catch-all for anything not classified above."""
