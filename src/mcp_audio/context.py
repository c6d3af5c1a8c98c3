"""
Request context for the audio device MCP server.

A RequestContext is created for every inbound request and handed to the
method router and tool handlers. It carries only metadata for logging; no
state survives the request.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from mcp_audio.protocol import JSONRPCRequest


@dataclass
class RequestContext:
    """
    Encapsulates the context of a single RPC call.

    Attributes:
        method: RPC method name (e.g., "tools/call").
        request_id: Correlation id from the request envelope.
        client: Client address, when known.
        tool_name: Tool being invoked, set by ``tools/call``.
        timestamp: When the request was received (UTC).
        metadata: Additional context.
    """

    method: str
    request_id: int
    client: str | None = None
    tool_name: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert the context to a dictionary for logging.

        Returns:
            Dictionary with context information.
        """
        return {
            "method": self.method,
            "request_id": self.request_id,
            "client": self.client,
            "tool_name": self.tool_name,
            "timestamp": self.timestamp.isoformat(),
            "metadata": self.metadata,
        }

    @classmethod
    def from_request(
        cls,
        request: JSONRPCRequest,
        client: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> RequestContext:
        """
        Create a RequestContext from a parsed request envelope.

        Example:
            >>> from mcp_audio.protocol import parse_request
            >>> req = parse_request('{"id":1,"method":"tools/list"}')
            >>> RequestContext.from_request(req, client="127.0.0.1").method
            'tools/list'
        """
        return cls(
            method=request.method,
            request_id=request.id,
            client=client,
            metadata=metadata or {},
        )
