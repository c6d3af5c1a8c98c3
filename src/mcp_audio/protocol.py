"""
JSON-RPC envelope handling for the audio device MCP server.

This module decodes inbound request envelopes and encodes outbound response
envelopes. The dialect is deliberately small:

- The request ``jsonrpc`` tag is not checked; only ``method`` is mandatory.
- A missing or non-integer ``id`` becomes ``0``.
- Successful responses always carry ``{"jsonrpc", "id", "result"}``. Soft
  errors (unknown method, ...) are nested inside ``result`` as
  ``{"error": "<message>"}``.
- Hard faults (undecodable body, missing ``method``, invalid params) use a
  regular JSON-RPC error object under ``error``.

Error codes:
- -32700: Parse error (malformed JSON)
- -32600: Invalid Request (body is not an object, missing ``method``)
- -32602: Invalid params (missing or mistyped required field)
- -32603: Internal error
- -32000: Server error (unmapped ToolError)
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from mcp_audio.errors import ToolError

JSONRPC_VERSION = "2.0"

# Request id used when the client omits one
DEFAULT_REQUEST_ID = 0

# =============================================================================
# JSON-RPC Error Codes
# =============================================================================

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

ERROR_CODE_MAP: dict[str, int] = {
    "invalid_argument": INVALID_PARAMS,
    "internal": INTERNAL_ERROR,
}

DEFAULT_SERVER_ERROR = -32000


# =============================================================================
# Data Classes
# =============================================================================


class JSONRPCError(Exception):
    """
    Represents a JSON-RPC 2.0 error object.

    This class is both an Exception (so it can be raised) and a data container
    for JSON-RPC error information.

    Attributes:
        code: Integer error code.
        message: Human-readable error message.
        data: Optional structured error data.
    """

    def __init__(
        self,
        code: int,
        message: str,
        data: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data

    def to_dict(self) -> dict[str, Any]:
        """
        Convert the error to a dictionary for JSON serialization.

        Returns:
            Dictionary with code, message, and optionally data.
        """
        result: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.data is not None:
            result["data"] = self.data
        return result

    def __repr__(self) -> str:
        """Return a detailed string representation."""
        return (
            f"JSONRPCError(code={self.code}, "
            f"message={self.message!r}, "
            f"data={self.data!r})"
        )


@dataclass
class JSONRPCRequest:
    """
    A decoded request envelope.

    Attributes:
        method: The RPC method to invoke.
        params: Raw params value, passed through untyped (None when absent).
        id: Correlation id (``DEFAULT_REQUEST_ID`` when absent or not an int).
    """

    method: str
    params: Any = None
    id: int = DEFAULT_REQUEST_ID


@dataclass
class JSONRPCResponse:
    """
    A response envelope.

    Either ``result`` or ``error`` is present in the encoded form, never both.

    Attributes:
        id: Request identifier echoed from the request.
        result: Result payload (may itself carry a soft ``error`` field).
        error: Protocol-level error for hard faults.
        jsonrpc: Protocol version tag, always "2.0".
    """

    id: int
    result: Any = None
    error: JSONRPCError | None = None
    jsonrpc: str = JSONRPC_VERSION

    @property
    def is_error(self) -> bool:
        """Check if this is a hard-fault response."""
        return self.error is not None

    def to_dict(self) -> dict[str, Any]:
        """
        Convert the response to a dictionary for JSON serialization.

        Returns:
            Dictionary with jsonrpc, id, and either result or error.
        """
        response: dict[str, Any] = {
            "jsonrpc": self.jsonrpc,
            "id": self.id,
        }
        if self.error is not None:
            response["error"] = self.error.to_dict()
        else:
            response["result"] = self.result
        return response

    def to_json(self) -> str:
        """Serialize the response to a compact JSON string."""
        return json.dumps(self.to_dict(), separators=(",", ":"))


# =============================================================================
# Decoding
# =============================================================================


def _reject_constant(token: str) -> Any:
    # NaN and Infinity are not JSON and cannot be rendered back to clients
    raise ValueError(f"Invalid JSON constant: {token}")


def _load_json_object(raw: str | bytes) -> dict[str, Any]:
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise JSONRPCError(
                code=PARSE_ERROR,
                message="Parse error: Request body must be UTF-8 encoded",
            ) from e

    try:
        data = json.loads(raw, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise JSONRPCError(
            code=PARSE_ERROR,
            message=f"Parse error: Invalid JSON - {e.msg}",
        ) from e
    except ValueError as e:
        raise JSONRPCError(
            code=PARSE_ERROR,
            message=f"Parse error: {e}",
        ) from e

    if not isinstance(data, dict):
        raise JSONRPCError(
            code=INVALID_REQUEST,
            message="Invalid Request: Request must be a JSON object",
        )
    return data


def _coerce_id(value: Any) -> int:
    # bool is an int subclass but never a valid id
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return DEFAULT_REQUEST_ID


def parse_request(raw: str | bytes) -> JSONRPCRequest:
    """
    Decode a request envelope.

    Args:
        raw: Raw request body.

    Returns:
        Parsed JSONRPCRequest.

    Raises:
        JSONRPCError: If the body is not a JSON object or has no string
            ``method`` field.

    Example:
        >>> request = parse_request('{"method":"tools/list","id":7}')
        >>> request.method, request.id
        ('tools/list', 7)
    """
    data = _load_json_object(raw)

    method = data.get("method")
    if method is None:
        raise JSONRPCError(
            code=INVALID_REQUEST,
            message="Invalid Request: Missing 'method' field",
        )
    if not isinstance(method, str):
        raise JSONRPCError(
            code=INVALID_REQUEST,
            message="Invalid Request: 'method' must be a string",
        )

    return JSONRPCRequest(
        method=method,
        params=data.get("params"),
        id=_coerce_id(data.get("id")),
    )


def parse_response(raw: str | bytes) -> JSONRPCResponse:
    """
    Decode a response envelope produced by ``JSONRPCResponse.to_json``.

    Raises:
        JSONRPCError: If the body is not a JSON object, carries neither
            ``result`` nor ``error``, or has a non-object ``error``.
    """
    data = _load_json_object(raw)

    request_id = _coerce_id(data.get("id"))
    if "error" in data:
        error = data["error"]
        if not isinstance(error, dict):
            raise JSONRPCError(
                code=INVALID_REQUEST,
                message="Invalid Response: 'error' must be an object",
            )
        return JSONRPCResponse(
            id=request_id,
            error=JSONRPCError(
                code=error.get("code", INTERNAL_ERROR),
                message=error.get("message", ""),
                data=error.get("data"),
            ),
            jsonrpc=data.get("jsonrpc", JSONRPC_VERSION),
        )
    if "result" not in data:
        raise JSONRPCError(
            code=INVALID_REQUEST,
            message="Invalid Response: Missing 'result' field",
        )
    return JSONRPCResponse(
        id=request_id,
        result=data["result"],
        jsonrpc=data.get("jsonrpc", JSONRPC_VERSION),
    )


# =============================================================================
# Encoding
# =============================================================================


def format_response(request_id: int, result: Any) -> JSONRPCResponse:
    """
    Build a response envelope around a result payload.

    Example:
        >>> format_response(1, {"status": "ok"}).to_json()
        '{"jsonrpc":"2.0","id":1,"result":{"status":"ok"}}'
    """
    return JSONRPCResponse(id=request_id, result=result)


def format_error_response(request_id: int, error: JSONRPCError) -> JSONRPCResponse:
    """Build a hard-fault response envelope."""
    return JSONRPCResponse(id=request_id, error=error)


def tool_error_to_jsonrpc_error(tool_error: ToolError) -> JSONRPCError:
    """
    Convert a ToolError to a JSONRPCError.

    Example:
        >>> from mcp_audio.errors import InvalidArgumentError
        >>> err = InvalidArgumentError("Parameter 'id' is required")
        >>> tool_error_to_jsonrpc_error(err).code
        -32602
    """
    return JSONRPCError(
        code=ERROR_CODE_MAP.get(tool_error.error_code, DEFAULT_SERVER_ERROR),
        message=tool_error.message,
        data=tool_error.to_dict(),
    )


def create_internal_error(
    message: str, details: dict[str, Any] | None = None
) -> JSONRPCError:
    """Create an internal error for unexpected exceptions."""
    return JSONRPCError(
        code=INTERNAL_ERROR,
        message=message,
        data={
            "error_code": "internal",
            "message": message,
            "details": details or {},
        },
    )
