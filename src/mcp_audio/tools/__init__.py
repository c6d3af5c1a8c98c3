"""
MCP tools for the audio device MCP server.

Modules:
- devices: system status and audio device volume tools
"""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING

from mcp_audio.routing import ToolRegistry
from mcp_audio.tools.devices import (
    GET_DEVICE_VOLUME,
    GET_DEVICES,
    GET_SYSTEM_STATUS,
    SET_DEVICE_VOLUME,
    handle_get_device_volume,
    handle_get_devices,
    handle_get_system_status,
    handle_set_device_volume,
)

if TYPE_CHECKING:
    from mcp_audio.backends import DeviceBackend


def create_tool_registry(backend: DeviceBackend) -> ToolRegistry:
    """
    Build the frozen registry of device tools bound to a backend.

    Tools are listed in the order they are registered here.
    """
    registry = ToolRegistry()
    registry.register(GET_SYSTEM_STATUS, handle_get_system_status)
    registry.register(
        GET_DEVICES, functools.partial(handle_get_devices, backend=backend)
    )
    registry.register(
        GET_DEVICE_VOLUME,
        functools.partial(handle_get_device_volume, backend=backend),
    )
    registry.register(
        SET_DEVICE_VOLUME,
        functools.partial(handle_set_device_volume, backend=backend),
    )
    return registry.freeze()


__all__ = [
    "create_tool_registry",
    "handle_get_system_status",
    "handle_get_devices",
    "handle_get_device_volume",
    "handle_set_device_volume",
]
