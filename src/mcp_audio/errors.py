"""
Error types for the audio device MCP server.

Hard faults raised while routing a request are expressed as ToolError (or a
subclass). They are caught at the request boundary and turned into JSON-RPC
error objects. Business-level outcomes such as an unknown tool or a missing
device are not errors here; they travel back as ordinary results.
"""

from __future__ import annotations

from typing import Any


class ToolError(Exception):
    """
    Base exception class for request-level faults.

    Attributes:
        error_code: Internal error code string (e.g., "invalid_argument",
            "internal").
        message: Human-readable error message.
        details: Optional structured details (e.g., the offending parameter).

    Example:
        >>> raise ToolError(
        ...     error_code="invalid_argument",
        ...     message="Parameter 'id' is required",
        ...     details={"parameter": "id"},
        ... )
    """

    def __init__(
        self,
        error_code: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.error_code = error_code
        self.message = message
        self.details = details or {}

    def __repr__(self) -> str:
        """Return a detailed string representation."""
        return (
            f"{self.__class__.__name__}("
            f"error_code={self.error_code!r}, "
            f"message={self.message!r}, "
            f"details={self.details!r})"
        )

    def to_dict(self) -> dict[str, Any]:
        """
        Convert the error to a dictionary for serialization.

        Returns:
            Dictionary with error_code, message, and details.
        """
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class InvalidArgumentError(ToolError):
    """
    Raised when a required field is missing or has the wrong type.

    Covers both envelope parameters (``protocolVersion``, ``name``,
    ``arguments``) and tool arguments declared as required by a tool's
    input schema.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            error_code="invalid_argument", message=message, details=details
        )


class InternalError(ToolError):
    """
    Error raised for unexpected internal errors.

    Tool handlers that fail with anything other than a ToolError are wrapped
    in this class so the boundary can log and report them uniformly.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(error_code="internal", message=message, details=details)
