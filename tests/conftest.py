"""
Pytest configuration for the audio device MCP server tests.
"""

from __future__ import annotations

import pytest

from mcp_audio.backends import StaticDeviceBackend
from mcp_audio.config import AppConfig
from mcp_audio.context import RequestContext
from mcp_audio.router import MethodRouter
from mcp_audio.routing import ToolRegistry
from mcp_audio.tools import create_tool_registry

pytest_plugins = ["pytest_asyncio"]


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (deselect with '-m \"not integration\"')",
    )


@pytest.fixture
def app_config() -> AppConfig:
    """Default application config with the three demo devices."""
    return AppConfig()


@pytest.fixture
def backend(app_config: AppConfig) -> StaticDeviceBackend:
    """Static backend built from the default config."""
    return StaticDeviceBackend.from_config(app_config)


@pytest.fixture
def tool_registry(backend: StaticDeviceBackend) -> ToolRegistry:
    """Frozen registry with the device tools."""
    return create_tool_registry(backend)


@pytest.fixture
def router(tool_registry: ToolRegistry) -> MethodRouter:
    """Method router over the device tools."""
    return MethodRouter(tool_registry)


@pytest.fixture
def ctx() -> RequestContext:
    """A request context for tools/call."""
    return RequestContext(method="tools/call", request_id=1, client="127.0.0.1")
