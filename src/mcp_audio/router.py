"""
RPC method routing for the audio device MCP server.

MethodRouter maps each supported RPC method to a handler through a table
built once at construction. Routed methods never raise for business-level
problems: an unknown method yields a SoftError. Missing or mistyped required
params raise InvalidArgumentError, which the request boundary turns into a
protocol-level error.

Supported methods:
- initialize
- notifications/initialized
- notifications/cancelled
- tools/list
- tools/call
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from mcp_audio.errors import InvalidArgumentError
from mcp_audio.logging import get_logger
from mcp_audio.results import MethodResult, SoftError, Success, status_ok

if TYPE_CHECKING:
    from mcp_audio.context import RequestContext
    from mcp_audio.routing import ToolRegistry

logger = get_logger(__name__)

MethodHandler = Callable[["RequestContext", Any], Awaitable[MethodResult]]

DEFAULT_SERVER_NAME = "vanilla-mcp"
DEFAULT_SERVER_VERSION = "1.0.0"

SERVER_CAPABILITIES: dict[str, Any] = {
    "resources": {"subscribe": True},
    "tools": {"listChanged": True},
}


def _require_params_object(method: str, params: Any) -> dict[str, Any]:
    if not isinstance(params, dict):
        raise InvalidArgumentError(
            f"Method '{method}' requires an object 'params'",
            details={"method": method},
        )
    return params


def _require_field(
    method: str, params: dict[str, Any], name: str, expected: type
) -> Any:
    value = params.get(name)
    if value is None:
        raise InvalidArgumentError(
            f"Parameter '{name}' is required for '{method}'",
            details={"method": method, "parameter": name},
        )
    if not isinstance(value, expected):
        raise InvalidArgumentError(
            f"Parameter '{name}' for '{method}' must be of type {expected.__name__}",
            details={"method": method, "parameter": name},
        )
    return value


class MethodRouter:
    """
    Dispatches RPC methods to their handlers.

    Attributes:
        tools: Frozen ToolRegistry used by ``tools/list`` and ``tools/call``.
        server_name: Name reported in ``serverInfo``.
        server_version: Version reported in ``serverInfo``.

    Example:
        >>> router = MethodRouter(create_tool_registry(backend))
        >>> result = await router.route("tools/list", None, ctx)
        >>> result.to_payload()["tools"][0]["name"]
        'get_system_status'
    """

    def __init__(
        self,
        tools: ToolRegistry,
        *,
        server_name: str = DEFAULT_SERVER_NAME,
        server_version: str = DEFAULT_SERVER_VERSION,
    ) -> None:
        self.tools = tools
        self.server_name = server_name
        self.server_version = server_version
        self._methods: MappingProxyType[str, MethodHandler] = MappingProxyType(
            {
                "initialize": self._on_initialize,
                "notifications/initialized": self._on_initialized,
                "notifications/cancelled": self._on_cancelled,
                "tools/list": self._on_tools_list,
                "tools/call": self._on_tools_call,
            }
        )

    @property
    def methods(self) -> list[str]:
        """Names of the supported RPC methods."""
        return list(self._methods)

    async def route(
        self, method: str, params: Any, ctx: RequestContext
    ) -> MethodResult:
        """
        Route one RPC call.

        Args:
            method: RPC method name.
            params: Untyped params value from the request envelope.
            ctx: RequestContext for the call.

        Returns:
            Success with the result payload, or SoftError for unknown methods.

        Raises:
            ToolError: If required params are missing or invalid.
        """
        handler = self._methods.get(method)
        if handler is None:
            logger.info(
                "Unknown method requested",
                extra={"method": method, "request_id": ctx.request_id},
            )
            return SoftError(f"Unknown method: {method}")
        return await handler(ctx, params)

    async def _on_initialize(self, ctx: RequestContext, params: Any) -> MethodResult:
        params = _require_params_object("initialize", params)
        protocol_version = _require_field(
            "initialize", params, "protocolVersion", str
        )
        logger.info(
            "Client initialized session",
            extra={"protocol_version": protocol_version, "client": ctx.client},
        )
        return Success(
            {
                "protocolVersion": protocol_version,
                "capabilities": {
                    "resources": dict(SERVER_CAPABILITIES["resources"]),
                    "tools": dict(SERVER_CAPABILITIES["tools"]),
                },
                "serverInfo": {
                    "name": self.server_name,
                    "version": self.server_version,
                },
            }
        )

    async def _on_initialized(self, ctx: RequestContext, params: Any) -> MethodResult:
        return status_ok()

    async def _on_cancelled(self, ctx: RequestContext, params: Any) -> MethodResult:
        # Acknowledged only; in-flight work is not cancelled
        logger.debug(
            "Cancellation notification received",
            extra={"request_id": ctx.request_id, "params": params},
        )
        return status_ok()

    async def _on_tools_list(self, ctx: RequestContext, params: Any) -> MethodResult:
        return Success(self.tools.describe())

    async def _on_tools_call(self, ctx: RequestContext, params: Any) -> MethodResult:
        params = _require_params_object("tools/call", params)
        name = _require_field("tools/call", params, "name", str)
        arguments = _require_field("tools/call", params, "arguments", dict)

        ctx.tool_name = name
        logger.debug(
            "Calling tool",
            extra={"tool": name, "request_id": ctx.request_id},
        )
        return Success(await self.tools.call(name, arguments, ctx))
