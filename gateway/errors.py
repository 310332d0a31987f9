"""
Gateway error taxonomy.

Every failure a tool call can hit is one of the kinds below. The dispatcher
turns each of them into an error envelope; none of them ever reaches the
channel as a raised exception.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    UNKNOWN_TOOL = "unknown_tool"
    VALIDATION = "validation"
    REMOTE_REJECTION = "remote_rejection"
    OPERATION_FAILED = "operation_failed"
    UNEXPECTED = "unexpected"


class GatewayError(Exception):
    """Base class for failures raised inside the gateway."""

    kind = ErrorKind.UNEXPECTED


class UnknownToolError(GatewayError):
    """Raised when a call names a tool that is not in the catalog."""

    kind = ErrorKind.UNKNOWN_TOOL

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class ValidationError(GatewayError):
    """Raised when call arguments do not satisfy the tool's input schema."""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, property_name: str | None = None) -> None:
        super().__init__(message)
        self.property_name = property_name


class RemoteRejectionError(GatewayError):
    """Raised when the backend refuses or fails a synchronous request."""

    kind = ErrorKind.REMOTE_REJECTION


class ListingTooLargeError(RemoteRejectionError):
    """Raised when a listing yields more entities than the configured cap."""


class OperationFailedError(GatewayError):
    """Raised when a long-running operation ends in a failed state."""

    kind = ErrorKind.OPERATION_FAILED

    def __init__(self, message: str, status: str | None = None) -> None:
        super().__init__(message)
        self.status = status


class ConfigError(Exception):
    """Raised at startup when required configuration is missing or invalid."""
