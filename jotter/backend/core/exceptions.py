"""
Application Exceptions.

Every error the services raise derives from ApplicationError. Each class
declares the error code clients see and the HTTP status it maps to, so the
exception handlers never keep a separate lookup table.
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    code = "SYS_INTERNAL_ERROR"
    status_code = 500
    default_message = "An unexpected error occurred"

    def __init__(self, message: str | None = None, code: str | None = None) -> None:
        self.message = message or self.default_message
        if code is not None:
            self.code = code
        super().__init__(self.message)


class NotFoundError(ApplicationError):
    """Entry, category, bookmark or user missing or not visible to the caller."""

    code = "RES_NOT_FOUND"
    status_code = 404
    default_message = "Resource not found"


class ValidationError(ApplicationError):
    code = "VAL_VALIDATION_ERROR"
    status_code = 400
    default_message = "Validation failed"

    def __init__(self, message: str | None = None, details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message)


class AuthenticationError(ApplicationError):
    code = "AUTH_UNAUTHORIZED"
    status_code = 401
    default_message = "Authentication required"


class ConflictError(ApplicationError):
    """Duplicate username, email, category name or similar unique value."""

    code = "RES_CONFLICT"
    status_code = 409
    default_message = "Resource conflict"


class ExternalServiceError(ApplicationError):
    """The note writer model failed or timed out."""

    code = "SYS_EXTERNAL_SERVICE_ERROR"
    status_code = 502
    default_message = "External service error"


class DatabaseError(ApplicationError):
    code = "SYS_DATABASE_ERROR"
    status_code = 503
    default_message = "Database error"


class ShareTokenExhaustedError(ApplicationError):
    """
    No free public share token was found within the attempt limit.

    The message is safe to show to clients. The attempt count stays on the
    exception for operator logs only.
    """

    code = "SYS_SHARE_TOKEN_EXHAUSTED"
    status_code = 500
    default_message = "Unable to publish entry"

    def __init__(self, attempts: int, message: str | None = None) -> None:
        self.attempts = attempts
        super().__init__(message)
