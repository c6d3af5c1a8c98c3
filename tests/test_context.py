"""
Tests for the request context module.
"""

from __future__ import annotations

from datetime import UTC, datetime

from mcp_audio.context import RequestContext
from mcp_audio.protocol import parse_request


class TestRequestContext:
    """Tests for RequestContext."""

    def test_defaults(self) -> None:
        """Test default field values."""
        ctx = RequestContext(method="tools/list", request_id=1)

        assert ctx.client is None
        assert ctx.tool_name is None
        assert ctx.metadata == {}
        assert ctx.timestamp.tzinfo is UTC

    def test_from_request(self) -> None:
        """Test building a context from a parsed request."""
        request = parse_request('{"id":8,"method":"tools/call","params":{}}')

        ctx = RequestContext.from_request(
            request, client="10.0.0.2", metadata={"user_agent": "pytest"}
        )

        assert ctx.method == "tools/call"
        assert ctx.request_id == 8
        assert ctx.client == "10.0.0.2"
        assert ctx.metadata == {"user_agent": "pytest"}

    def test_to_dict(self) -> None:
        """Test serialization for logging."""
        timestamp = datetime(2026, 1, 2, 3, 4, 5, tzinfo=UTC)
        ctx = RequestContext(
            method="tools/call",
            request_id=2,
            tool_name="get_devices",
            timestamp=timestamp,
        )

        assert ctx.to_dict() == {
            "method": "tools/call",
            "request_id": 2,
            "client": None,
            "tool_name": "get_devices",
            "timestamp": "2026-01-02T03:04:05+00:00",
            "metadata": {},
        }

    def test_contexts_are_independent(self) -> None:
        """Test that metadata is not shared between contexts."""
        first = RequestContext(method="a", request_id=1)
        second = RequestContext(method="b", request_id=2)
        first.metadata["k"] = "v"

        assert second.metadata == {}
