"""
Base service layer patterns for business logic encapsulation.

This module provides foundational patterns for the service layer:
- ServiceResult: Standard result wrapper for consistent success/failure handling
- BaseService: Base class with common service utilities

Pattern Comparison:
    - ServiceResult: Use for expected failures (validation, business rules)
    - Exceptions: Use for unexpected failures (database errors, bugs)

Usage:
    from core.services import BaseService, ServiceResult

    class MessageService(BaseService):
        @classmethod
        def send_message(cls, chat, sender, content) -> ServiceResult[Message]:
            if not content:
                return ServiceResult.failure(
                    "Message cannot be empty",
                    error_code="EMPTY_CONTENT",
                )

            with cls.atomic():
                message = Message.objects.create(chat=chat, sender=sender, content=content)

            cls.get_logger().info(f"Stored message {message.id}")
            return ServiceResult.success(message)

    # In view
    result = MessageService.send_message(chat, request.user, content)
    if result.success:
        return Response(MessageSerializer(result.data).data, status=201)
    return Response(result.to_response(), status=400)

Related:
    - core.exceptions: For unexpected/exceptional errors
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Generic, TypeVar

from django.db import transaction

if TYPE_CHECKING:
    from collections.abc import Generator
    from typing import Any

T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """
    Standard result wrapper for service operations.

    Provides consistent success/failure handling without exceptions.
    Use this for expected failures (validation errors, business rule violations).

    Attributes:
        success: Whether the operation succeeded
        data: Result data if successful (None if failed)
        error: Error message if failed (None if successful)
        error_code: Machine-readable error code for client handling
        errors: Field-level errors for validation failures

    Usage:
        return ServiceResult.success(message)
        return ServiceResult.failure("Chat not found", "CHAT_NOT_FOUND")

        result = MessageService.send_message(chat, user, "hi")
        if result.success:
            message = result.data
    """

    success: bool
    data: T | None = None
    error: str | None = None
    error_code: str | None = None
    errors: dict[str, list[str]] | None = field(default=None)

    @classmethod
    def success(cls, data: T) -> ServiceResult[T]:
        """Create a successful result carrying data."""
        return cls(success=True, data=data)

    @classmethod
    def failure(
        cls,
        error: str,
        error_code: str | None = None,
        errors: dict[str, list[str]] | None = None,
    ) -> ServiceResult[T]:
        """
        Create a failed result.

        Args:
            error: Human-readable error message
            error_code: Machine-readable error code for client handling
            errors: Field-level errors (for validation failures)
        """
        return cls(
            success=False,
            error=error,
            error_code=error_code,
            errors=errors,
        )

    def to_response(self) -> dict[str, Any]:
        """
        Convert to API response format.

        Returns:
            Dict with success status and data or error details
        """
        if self.success:
            return {"success": True, "data": self.data}

        response: dict[str, Any] = {
            "success": False,
            "error": self.error,
        }
        if self.error_code:
            response["error_code"] = self.error_code
        if self.errors:
            response["errors"] = self.errors
        return response


class BaseService:
    """
    Base class for service layer classes.

    Provides common utilities for services:
    - Logging setup per service
    - Database transaction management

    Design Notes:
        - Use @classmethod (no instance state)
        - Use ServiceResult for expected failures
        - Raise exceptions for unexpected failures
    """

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """Get a logger named after the service class."""
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    @contextmanager
    def atomic(cls) -> Generator[None, None, None]:
        """
        Execute operations in a database transaction.

        Thin wrapper around Django's transaction.atomic() that makes
        transaction boundaries explicit in service code.
        """
        with transaction.atomic():
            yield
