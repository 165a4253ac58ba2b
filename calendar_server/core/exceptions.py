"""
Custom Exceptions.

Application-specific exception classes for consistent error handling.
The HTTP status each one maps to lives in core/exception_handlers.py.
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class NotFoundError(ApplicationError):
    """Raised when a referenced event does not exist."""

    def __init__(self, message: str = "event not found") -> None:
        super().__init__(message, code="RES_NOT_FOUND")


class ValidationError(ApplicationError):
    """Raised when request fields are malformed."""

    def __init__(self, message: str = "invalid body", details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message, code="VAL_VALIDATION_ERROR")


class ConflictError(ApplicationError):
    """Raised when there is a state conflict."""

    def __init__(self, message: str = "Resource conflict", code: str = "RES_CONFLICT") -> None:
        super().__init__(message, code=code)


class DuplicateEventError(ConflictError):
    """Raised when a user already has an event with the same date and title."""

    def __init__(
        self,
        message: str = "duplicate event (same user, date, and title)",
    ) -> None:
        super().__init__(message, code="RES_DUPLICATE")


class InternalError(ApplicationError):
    """Raised when a store invariant is violated."""

    def __init__(self, message: str = "internal error") -> None:
        super().__init__(message, code="SYS_INTERNAL_ERROR")


class AlreadyExistsError(InternalError):
    """Raised when an event ID is inserted twice."""

    def __init__(self, message: str = "id already exists") -> None:
        super().__init__(message)
