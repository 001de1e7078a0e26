"""
Custom exceptions for service layer.

Provides specific exception types for business logic errors
that can be translated to appropriate HTTP responses.
"""

from typing import Any, Optional


class ServiceError(Exception):
    """Base exception for service layer errors."""
    pass


class NotFoundError(ServiceError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: Any):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} {identifier} not found")


class ValidationError(ServiceError):
    """Raised when input validation fails."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.message = message
        self.field = field
        super().__init__(message)


class PermissionDeniedError(ServiceError):
    """Raised when the acting user's role does not allow an operation."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class DispatchError(ServiceError):
    """
    Raised when a multicast push send fails as a whole.

    Covers transport-level failures (network unreachable, rejected
    credentials, malformed message). Individual token failures are not
    errors; they are reported in the per-token delivery results.
    """

    def __init__(self, message: str, token_count: int = 0):
        self.message = message
        self.token_count = token_count
        super().__init__(message)
