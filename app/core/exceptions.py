"""
Base exception classes for application-wide error handling.

Exception Hierarchy:
    BaseApplicationError (base)
    └── ValidationError - Input validation failures

Usage:
    from core.exceptions import ValidationError

    raise ValidationError("chatId is required", error_code="MISSING_FIELD")

    try:
        ...
    except BaseApplicationError as e:
        logger.debug(f"Ignoring frame: {e}")

Note:
    These exceptions are for domain errors. DRF handles API-layer exceptions
    (serialization, authentication) on its own.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (field errors, metadata, etc.)
    """

    default_error_code: str = "APPLICATION_ERROR"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ValidationError(BaseApplicationError):
    """
    Raised when input validation fails outside of DRF serializers.

    Example:
        raise ValidationError("chatId is required", error_code="MISSING_FIELD")
    """

    default_error_code: str = "VALIDATION_ERROR"
