"""
Tool registration and dispatch for the audio device MCP server.

This module provides:
- ToolDescriptor: immutable name/description/input schema of a tool
- ToolRegistry: ordered catalog binding descriptors to handler functions
- Tool dispatch with uniform content-envelope wrapping

Every successful tool call produces ``{"content": [{"type": "text", ...}]}``.
Handlers return either text, which is wrapped as is, or structured data,
which is serialized to JSON text first. Calling an unknown tool is not an
error: it yields the text ``"Unknown tool: <name>"``.
"""

from __future__ import annotations

import copy
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from mcp_audio.errors import InternalError, ToolError
from mcp_audio.logging import get_logger
from mcp_audio.results import json_content, text_content

if TYPE_CHECKING:
    from mcp_audio.context import RequestContext

logger = get_logger(__name__)

# Handlers receive the request context and the raw argument mapping
ToolHandler = Callable[["RequestContext", dict[str, Any]], Awaitable[Any]]


def object_schema(
    properties: dict[str, dict[str, str]] | None = None,
    required: list[str] | None = None,
) -> dict[str, Any]:
    """
    Build a JSON-Schema-like object descriptor.

    Example:
        >>> object_schema({"id": {"type": "string", "description": "Device id"}}, ["id"])["required"]
        ['id']
    """
    return {
        "type": "object",
        "properties": properties or {},
        "required": required or [],
    }


@dataclass(frozen=True)
class ToolDescriptor:
    """
    Describes an invocable tool.

    Attributes:
        name: Unique tool name.
        description: Human-readable description.
        input_schema: JSON-Schema-like object describing the arguments.
    """

    name: str
    description: str
    input_schema: dict[str, Any] = field(default_factory=object_schema)

    @property
    def required(self) -> list[str]:
        """Names of required arguments."""
        return list(self.input_schema.get("required", []))

    def to_dict(self) -> dict[str, Any]:
        """Serialize the descriptor in wire form (``inputSchema`` key)."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": copy.deepcopy(self.input_schema),
        }


class ToolRegistry:
    """
    Ordered registry of tools and their handlers.

    Tools are registered at startup, then the registry is frozen. A frozen
    registry is read-only and can be shared by concurrent requests.

    Example:
        >>> registry = ToolRegistry()
        >>> registry.register(ToolDescriptor("ping", "Replies pong"), ping_handler)
        >>> registry.freeze()
        >>> result = await registry.call("ping", {}, ctx)
    """

    def __init__(self) -> None:
        self._descriptors: Mapping[str, ToolDescriptor] = {}
        self._handlers: Mapping[str, ToolHandler] = {}
        self._frozen = False

    def register(self, descriptor: ToolDescriptor, handler: ToolHandler) -> None:
        """
        Register a tool.

        Raises:
            ValueError: If a tool with the same name is already registered.
            RuntimeError: If the registry has been frozen.
        """
        if self._frozen:
            raise RuntimeError("Tool registry is frozen")
        if descriptor.name in self._handlers:
            raise ValueError(f"Tool '{descriptor.name}' is already registered")
        self._descriptors = {**self._descriptors, descriptor.name: descriptor}
        self._handlers = {**self._handlers, descriptor.name: handler}

    def freeze(self) -> ToolRegistry:
        """Make the registry read-only. Returns self for chaining."""
        self._descriptors = MappingProxyType(dict(self._descriptors))
        self._handlers = MappingProxyType(dict(self._handlers))
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def has_tool(self, name: str) -> bool:
        return name in self._handlers

    def get_handler(self, name: str) -> ToolHandler | None:
        return self._handlers.get(name)

    def get_descriptor(self, name: str) -> ToolDescriptor | None:
        return self._descriptors.get(name)

    def list_tools(self) -> tuple[ToolDescriptor, ...]:
        """Return all descriptors in registration order."""
        return tuple(self._descriptors.values())

    def describe(self) -> dict[str, Any]:
        """Return the ``tools/list`` payload."""
        return {"tools": [descriptor.to_dict() for descriptor in self.list_tools()]}

    async def call(
        self,
        name: str,
        arguments: dict[str, Any],
        ctx: RequestContext,
    ) -> dict[str, Any]:
        """
        Invoke a tool and wrap its result in a content envelope.

        Args:
            name: Tool name.
            arguments: Raw argument mapping from the client.
            ctx: RequestContext for the call.

        Returns:
            Content envelope with a single text item.

        Raises:
            ToolError: If the handler rejects its arguments.
            InternalError: If the handler fails unexpectedly.
        """
        handler = self.get_handler(name)
        if handler is None:
            logger.info(
                "Unknown tool requested",
                extra={"tool": name, "request_id": ctx.request_id},
            )
            return text_content(f"Unknown tool: {name}")

        try:
            result = await handler(ctx, arguments)
        except ToolError:
            raise
        except Exception as e:
            raise InternalError(
                message=f"Internal error in tool '{name}': {e!s}",
                details={"tool": name, "exception_type": type(e).__name__},
            ) from e

        if isinstance(result, str):
            return text_content(result)
        return json_content(result)

    def __contains__(self, name: str) -> bool:
        return name in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)
