"""
HTTP server for the audio device MCP server.

A single POST endpoint accepts a JSON-RPC envelope, routes it, and writes
the response envelope back. Request flow:

1. Decode the envelope (protocol.parse_request)
2. Create a RequestContext
3. Route the method (router.MethodRouter)
4. Encode the response

Successful calls and soft errors are answered with HTTP 200. Hard faults
(undecodable body, missing method, missing or mistyped required params) are
answered with HTTP 400 and a JSON-RPC error object; unexpected failures with
HTTP 500.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from mcp_audio import __version__
from mcp_audio.backends import DeviceBackend, StaticDeviceBackend
from mcp_audio.config import AppConfig, load_config
from mcp_audio.context import RequestContext
from mcp_audio.errors import ToolError
from mcp_audio.logging import get_logger, setup_logging
from mcp_audio.protocol import (
    DEFAULT_REQUEST_ID,
    INTERNAL_ERROR,
    JSONRPCError,
    JSONRPCResponse,
    create_internal_error,
    format_error_response,
    format_response,
    parse_request,
    tool_error_to_jsonrpc_error,
)
from mcp_audio.router import MethodRouter
from mcp_audio.tools import create_tool_registry

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = get_logger(__name__)


async def process_request(
    raw: str | bytes,
    router: MethodRouter,
    client: str | None = None,
) -> JSONRPCResponse:
    """
    Process a single request body and build the response envelope.

    Args:
        raw: Raw request body.
        router: MethodRouter to dispatch with.
        client: Optional client address for logging.

    Returns:
        The response envelope. Hard faults are reported through its
        ``error`` field and never raised.
    """
    request_id = DEFAULT_REQUEST_ID

    try:
        request = parse_request(raw)
        request_id = request.id

        ctx = RequestContext.from_request(request, client=client)
        logger.debug("Routing request", extra=ctx.to_dict())

        result = await router.route(request.method, request.params, ctx)
        return format_response(request_id, result.to_payload())

    except JSONRPCError as e:
        logger.warning(
            "Rejected malformed request",
            extra={"request_id": request_id, "error": e.message, "client": client},
        )
        return format_error_response(request_id, e)

    except ToolError as e:
        logger.warning(
            "Request failed",
            extra={
                "request_id": request_id,
                "error_code": e.error_code,
                "error": e.message,
                "client": client,
            },
        )
        return format_error_response(request_id, tool_error_to_jsonrpc_error(e))

    except Exception as e:
        logger.exception(
            "Unexpected error processing request",
            extra={"request_id": request_id, "error": str(e)},
        )
        jsonrpc_error = create_internal_error(
            message=f"Internal server error: {type(e).__name__}",
            details={"exception": str(e)},
        )
        return format_error_response(request_id, jsonrpc_error)


def http_status_for(response: JSONRPCResponse) -> int:
    """
    Map a response envelope to an HTTP status code.

    Returns:
        200 for results (including soft errors), 500 for internal errors and
        400 for every other hard fault.
    """
    if response.error is None:
        return 200
    if response.error.code == INTERNAL_ERROR:
        return 500
    return 400


def create_router(
    config: AppConfig,
    backend: DeviceBackend | None = None,
) -> MethodRouter:
    """Build a MethodRouter with the device tools bound to a backend."""
    if backend is None:
        backend = StaticDeviceBackend.from_config(config)
    return MethodRouter(
        create_tool_registry(backend),
        server_name=config.server.name,
        server_version=config.server.version,
    )


def create_app(
    config: AppConfig | None = None,
    backend: DeviceBackend | None = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        config: Application config. Defaults are used when omitted.
        backend: Device backend. A StaticDeviceBackend built from the config
            is used when omitted.

    Returns:
        FastAPI app serving the JSON-RPC endpoint on ``config.server.path``.
    """
    config = config if config is not None else AppConfig()

    app = FastAPI(
        title="Audio Device MCP Server",
        version=__version__,
    )
    app.state.config = config
    app.state.router = create_router(config, backend)

    async def handle_rpc(request: Request) -> JSONResponse:
        body = await request.body()
        client = request.client.host if request.client else None
        response = await process_request(body, request.app.state.router, client)
        return JSONResponse(
            status_code=http_status_for(response),
            content=response.to_dict(),
        )

    app.add_api_route(config.server.path, handle_rpc, methods=["POST"])
    return app


def main(argv: Sequence[str] | None = None) -> None:
    """
    Console entry point: load config, set up logging and serve over HTTP.

    Args:
        argv: Command-line arguments. If None, uses sys.argv.
    """
    config = load_config(cli_args=list(argv) if argv is not None else None)
    setup_logging(config.logging)

    app = create_app(config)
    logger.info(
        "MCP server starting",
        extra={
            "listen": config.server.listen,
            "path": config.server.path,
            "tools_count": len(app.state.router.tools),
        },
    )
    uvicorn.run(
        app,
        host=config.server.host,
        port=config.server.port,
        log_level=config.server.log_level,
    )
    logger.info("MCP server stopped")
