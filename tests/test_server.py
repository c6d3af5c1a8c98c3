"""
Tests for the HTTP server.

This test module validates:
- process_request handles the full request/response cycle
- Hard faults become JSON-RPC error objects, soft errors stay in result
- The FastAPI endpoint maps outcomes to HTTP status codes
"""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from mcp_audio.backends import DeviceBackend
from mcp_audio.config import AppConfig, ServerConfig
from mcp_audio.protocol import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    PARSE_ERROR,
    parse_response,
)
from mcp_audio.router import MethodRouter
from mcp_audio.server import (
    create_app,
    create_router,
    http_status_for,
    process_request,
)

# =============================================================================
# Tests for process_request
# =============================================================================


class TestProcessRequest:
    """Tests for the process_request function."""

    @pytest.mark.asyncio
    async def test_tools_call(self, router: MethodRouter) -> None:
        """Test a complete tools/call round trip."""
        body = json.dumps(
            {
                "jsonrpc": "2.0",
                "id": 9,
                "method": "tools/call",
                "params": {"name": "get_device_volume", "arguments": {"id": "3"}},
            }
        )

        response = await process_request(body, router)

        assert response.to_dict() == {
            "jsonrpc": "2.0",
            "id": 9,
            "result": {
                "content": [{"type": "text", "text": "Volume for device 3 is 15"}]
            },
        }

    @pytest.mark.asyncio
    async def test_missing_id_defaults_to_zero(self, router: MethodRouter) -> None:
        """Test that responses echo 0 when the request has no id."""
        response = await process_request('{"method":"notifications/initialized"}', router)

        assert response.id == 0
        assert response.result == {"status": "ok"}

    @pytest.mark.asyncio
    async def test_unknown_method_is_soft(self, router: MethodRouter) -> None:
        """Test that unknown methods stay in the result slot."""
        response = await process_request('{"id":2,"method":"prompts/list"}', router)

        assert not response.is_error
        assert response.result == {"error": "Unknown method: prompts/list"}

    @pytest.mark.asyncio
    async def test_missing_method_is_hard_fault(self, router: MethodRouter) -> None:
        """Test that a missing method yields an error object."""
        response = await process_request('{"id":4}', router)

        assert response.is_error
        assert response.error is not None
        assert response.error.code == INVALID_REQUEST
        assert response.id == 0

    @pytest.mark.asyncio
    async def test_malformed_json(self, router: MethodRouter) -> None:
        """Test that malformed JSON yields a parse error."""
        response = await process_request("{oops", router)

        assert response.error is not None
        assert response.error.code == PARSE_ERROR

    @pytest.mark.asyncio
    async def test_invalid_params_keep_request_id(self, router: MethodRouter) -> None:
        """Test that invalid params are reported with the request id."""
        response = await process_request(
            '{"id":5,"method":"initialize","params":{}}', router
        )

        assert response.id == 5
        assert response.error is not None
        assert response.error.code == INVALID_PARAMS
        assert response.error.data is not None
        assert response.error.data["details"]["parameter"] == "protocolVersion"

    @pytest.mark.asyncio
    async def test_backend_failure_is_internal_error(self, app_config: AppConfig) -> None:
        """Test that a failing backend yields an internal error."""
        backend = AsyncMock(spec=DeviceBackend)
        backend.list_devices.side_effect = ConnectionError("speaker offline")

        router = create_router(app_config, backend)
        body = json.dumps(
            {
                "id": 6,
                "method": "tools/call",
                "params": {"name": "get_devices", "arguments": {}},
            }
        )

        response = await process_request(body, router)

        assert response.error is not None
        assert response.error.code == INTERNAL_ERROR
        assert "speaker offline" in response.error.message

    @pytest.mark.asyncio
    async def test_unexpected_router_failure(self) -> None:
        """Test that exceptions escaping the router are contained."""
        router = AsyncMock(spec=MethodRouter)
        router.route.side_effect = KeyError("boom")

        response = await process_request('{"id":1,"method":"tools/list"}', router)

        assert response.error is not None
        assert response.error.code == INTERNAL_ERROR
        assert response.error.message == "Internal server error: KeyError"

    @pytest.mark.asyncio
    async def test_response_round_trip(self, router: MethodRouter) -> None:
        """Test that the encoded response decodes to the same envelope."""
        response = await process_request('{"id":11,"method":"tools/list"}', router)

        decoded = parse_response(response.to_json())

        assert decoded.id == 11
        assert decoded.result == response.result


class TestHttpStatus:
    """Tests for http_status_for."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("body", "status"),
        [
            ('{"id":1,"method":"tools/list"}', 200),
            ('{"id":1,"method":"unknown"}', 200),
            ('{"id":1}', 400),
            ("not json", 400),
            ('{"id":1,"method":"tools/call","params":{"name":"x"}}', 400),
        ],
    )
    async def test_status_mapping(
        self, router: MethodRouter, body: str, status: int
    ) -> None:
        """Test the status code for each outcome."""
        response = await process_request(body, router)

        assert http_status_for(response) == status


# =============================================================================
# Tests for the FastAPI Application
# =============================================================================


@pytest.fixture
def client() -> TestClient:
    """Test client for the default application."""
    return TestClient(create_app(AppConfig()))


def _post(client: TestClient, payload: Any, path: str = "/mcp") -> Any:
    return client.post(path, content=json.dumps(payload))


@pytest.mark.integration
class TestHttpEndpoint:
    """Tests for the JSON-RPC HTTP endpoint."""

    def test_initialize(self, client: TestClient) -> None:
        """Test the initialize handshake over HTTP."""
        response = _post(
            client,
            {
                "jsonrpc": "2.0",
                "id": 1,
                "method": "initialize",
                "params": {"protocolVersion": "2024-11-05"},
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["jsonrpc"] == "2.0"
        assert body["id"] == 1
        assert body["result"]["protocolVersion"] == "2024-11-05"
        assert body["result"]["serverInfo"] == {"name": "vanilla-mcp", "version": "1.0.0"}

    def test_session_flow(self, client: TestClient) -> None:
        """Test a typical client session."""
        steps = [
            {"id": 1, "method": "initialize", "params": {"protocolVersion": "1"}},
            {"method": "notifications/initialized"},
            {"id": 2, "method": "tools/list"},
            {
                "id": 3,
                "method": "tools/call",
                "params": {
                    "name": "set_device_volume",
                    "arguments": {"id": "9", "volume": 50},
                },
            },
        ]

        responses = [_post(client, step) for step in steps]

        assert [r.status_code for r in responses] == [200, 200, 200, 200]
        assert responses[1].json() == {
            "jsonrpc": "2.0",
            "id": 0,
            "result": {"status": "ok"},
        }
        assert len(responses[2].json()["result"]["tools"]) == 4
        assert responses[3].json()["result"] == {
            "content": [{"type": "text", "text": "Volume for device 9 set to 50"}]
        }

    def test_get_devices(self, client: TestClient) -> None:
        """Test that device data is returned as text content."""
        response = _post(
            client,
            {
                "id": 4,
                "method": "tools/call",
                "params": {"name": "get_devices", "arguments": {}},
            },
        )

        text = response.json()["result"]["content"][0]["text"]
        assert [device["Id"] for device in json.loads(text)] == ["1", "2", "3"]

    def test_unknown_method_is_200(self, client: TestClient) -> None:
        """Test that unknown methods succeed at the transport level."""
        response = _post(client, {"id": 5, "method": "resources/subscribe"})

        assert response.status_code == 200
        assert response.json() == {
            "jsonrpc": "2.0",
            "id": 5,
            "result": {"error": "Unknown method: resources/subscribe"},
        }

    def test_missing_method_is_400(self, client: TestClient) -> None:
        """Test that a missing method fails the request."""
        response = _post(client, {"id": 6, "params": {}})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == INVALID_REQUEST

    def test_missing_argument_is_400(self, client: TestClient) -> None:
        """Test that a missing tool argument fails the request."""
        response = _post(
            client,
            {
                "id": 7,
                "method": "tools/call",
                "params": {"name": "set_device_volume", "arguments": {"id": "1"}},
            },
        )

        assert response.status_code == 400
        body = response.json()
        assert body["id"] == 7
        assert body["error"]["code"] == INVALID_PARAMS
        assert "volume" in body["error"]["message"]

    def test_invalid_json_is_400(self, client: TestClient) -> None:
        """Test that an undecodable body fails the request."""
        response = client.post("/mcp", content=b"{broken")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == PARSE_ERROR

    def test_get_not_allowed(self, client: TestClient) -> None:
        """Test that only POST is served."""
        assert client.get("/mcp").status_code == 405

    def test_configured_path(self) -> None:
        """Test serving on a configured path."""
        config = AppConfig(server=ServerConfig(path="/rpc"))
        client = TestClient(create_app(config))

        assert _post(client, {"id": 1, "method": "tools/list"}, "/rpc").status_code == 200
        assert _post(client, {"id": 1, "method": "tools/list"}).status_code == 404

    def test_custom_backend(self) -> None:
        """Test that a custom backend replaces the static one."""
        backend = AsyncMock(spec=DeviceBackend)
        backend.get_volume.return_value = 77
        client = TestClient(create_app(AppConfig(), backend=backend))

        response = _post(
            client,
            {
                "id": 8,
                "method": "tools/call",
                "params": {"name": "get_device_volume", "arguments": {"id": "abc"}},
            },
        )

        assert response.json()["result"]["content"][0]["text"] == (
            "Volume for device abc is 77"
        )
        backend.get_volume.assert_awaited_once_with("abc")

    @pytest.mark.parametrize("token", ["NaN", "Infinity", "-Infinity"])
    def test_non_finite_number_is_parse_error(
        self, client: TestClient, token: str
    ) -> None:
        """Test that NaN and Infinity arguments get a JSON-RPC error body."""
        body = (
            '{"id":1,"method":"tools/call","params":{"name":"set_device_volume",'
            '"arguments":{"id":"1","volume":' + token + "}}}"
        )

        response = client.post("/mcp", content=body)

        assert response.status_code == 400
        assert response.headers["content-type"].startswith("application/json")
        assert response.json()["error"]["code"] == PARSE_ERROR
