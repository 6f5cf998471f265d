"""Domain exceptions for the prize wheel codes service.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.

Expected redemption outcomes (not found, already used, expired) travel through
the application layer as typed results; the API boundary converts them into
the exceptions below only when building the HTTP response.
"""

from typing import Any


class PrizeWheelException(Exception):
    """Base exception for all prize wheel application errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body used by the exception handlers."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(PrizeWheelException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(PrizeWheelException):
    """Raised when authentication fails (e.g. missing or invalid token)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class ResourceNotFoundException(PrizeWheelException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'code').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class CodeAlreadyUsedException(PrizeWheelException):
    """Raised at the API boundary when a redemption hits an already consumed code."""

    def __init__(self, code: str) -> None:
        super().__init__(
            "Code has already been used",
            "CODE_ALREADY_USED",
            {"code": code},
        )


class CodeExpiredException(PrizeWheelException):
    """Raised at the API boundary when a redemption hits an expired code."""

    def __init__(self, code: str) -> None:
        super().__init__(
            "Code has expired",
            "CODE_EXPIRED",
            {"code": code},
        )


class CodeGenerationFailedException(PrizeWheelException):
    """Raised when every generation attempt collided with an existing code.

    Server-side fault: the generator keeps producing taken codes, which means
    the code space is exhausted or the generator is broken.
    """

    def __init__(self, prize_id: int, attempts: int) -> None:
        """Initialize with the prize and the number of attempts made.

        Args:
            prize_id: Prize the code was being issued for.
            attempts: Number of candidates that collided.
        """
        super().__init__(
            f"Could not generate a unique code after {attempts} attempts",
            "CODE_GENERATION_FAILED",
            {"prize_id": prize_id, "attempts": attempts},
        )


class SqlNotConfiguredException(PrizeWheelException):
    """Raised when an operation requires Postgres but the backend is not configured."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )
