"""
Audio device tools for the audio device MCP server.

This module implements:
- get_system_status: Report that the server is running
- get_devices: List the devices known to the backend
- get_device_volume: Read the volume of a device by id
- set_device_volume: Set the volume of a device by id

Handlers depend only on the DeviceBackend interface. The backend is bound
with functools.partial when the registry is built.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from mcp_audio.errors import InvalidArgumentError
from mcp_audio.logging import get_logger
from mcp_audio.routing import ToolDescriptor, object_schema

if TYPE_CHECKING:
    from mcp_audio.backends import DeviceBackend
    from mcp_audio.context import RequestContext

logger = get_logger(__name__)

SYSTEM_STATUS_TEXT = "System is running"

_DEVICE_ID_PROPERTY = {"type": "string", "description": "The ID of the device"}

# =============================================================================
# Descriptors
# =============================================================================

GET_SYSTEM_STATUS = ToolDescriptor(
    name="get_system_status",
    description="Checks the status of the system",
    input_schema=object_schema(),
)

GET_DEVICES = ToolDescriptor(
    name="get_devices",
    description="Retrieves the list of sonos devices in the system",
    input_schema=object_schema(),
)

GET_DEVICE_VOLUME = ToolDescriptor(
    name="get_device_volume",
    description="Retrieves the current volume level of a device by ID",
    input_schema=object_schema(
        properties={"id": dict(_DEVICE_ID_PROPERTY)},
        required=["id"],
    ),
)

SET_DEVICE_VOLUME = ToolDescriptor(
    name="set_device_volume",
    description="Sets the volume level of a device by ID",
    input_schema=object_schema(
        properties={
            "id": dict(_DEVICE_ID_PROPERTY),
            "volume": {
                "type": "integer",
                "description": "The new volume level (0–100)",
            },
        },
        required=["id", "volume"],
    ),
)


# =============================================================================
# Argument Extraction
# =============================================================================


def _require_string(arguments: dict[str, Any], name: str) -> str:
    """
    Extract a required string argument.

    Raises:
        InvalidArgumentError: If the argument is missing or not a string.
    """
    value = arguments.get(name)
    if value is None:
        raise InvalidArgumentError(
            f"Parameter '{name}' is required",
            details={"parameter": name},
        )
    if not isinstance(value, str):
        raise InvalidArgumentError(
            f"Parameter '{name}' must be a string",
            details={"parameter": name, "type": type(value).__name__},
        )
    return value


def _require_int(arguments: dict[str, Any], name: str) -> int:
    """
    Extract a required integer argument.

    Raises:
        InvalidArgumentError: If the argument is missing or not an integer.
    """
    value = arguments.get(name)
    if value is None:
        raise InvalidArgumentError(
            f"Parameter '{name}' is required",
            details={"parameter": name},
        )
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(
            f"Parameter '{name}' must be an integer",
            details={"parameter": name, "type": type(value).__name__},
        )
    return value


# =============================================================================
# Handlers
# =============================================================================


async def handle_get_system_status(
    ctx: RequestContext,
    arguments: dict[str, Any],
) -> str:
    """Handle the get_system_status tool call."""
    return SYSTEM_STATUS_TEXT


async def handle_get_devices(
    ctx: RequestContext,
    arguments: dict[str, Any],
    *,
    backend: DeviceBackend,
) -> list[dict[str, Any]]:
    """
    Handle the get_devices tool call.

    Returns:
        List of device dictionaries keyed ``Id``, ``Name``, ``Room`` and
        ``Model``, serialized to JSON text by the dispatcher.
    """
    devices = await backend.list_devices()
    return [device.model_dump(by_alias=True) for device in devices]


async def handle_get_device_volume(
    ctx: RequestContext,
    arguments: dict[str, Any],
    *,
    backend: DeviceBackend,
) -> str:
    """
    Handle the get_device_volume tool call.

    Args:
        ctx: The RequestContext for this call.
        arguments: Tool arguments:
            - id: Device identifier (required)
        backend: Device backend to query.

    Returns:
        Confirmation text, or a not-found message when the backend has no
        device with this id.

    Raises:
        InvalidArgumentError: If ``id`` is missing or not a string.
    """
    device_id = _require_string(arguments, "id")

    volume = await backend.get_volume(device_id)
    if volume is None:
        logger.debug(
            "Volume requested for unknown device",
            extra={"device_id": device_id, "request_id": ctx.request_id},
        )
        return f"No device found with id {device_id}"

    return f"Volume for device {device_id} is {volume}"


async def handle_set_device_volume(
    ctx: RequestContext,
    arguments: dict[str, Any],
    *,
    backend: DeviceBackend,
) -> str:
    """
    Handle the set_device_volume tool call.

    The device id is not checked against the backend before confirming; the
    backend decides what an unknown id means.

    Args:
        ctx: The RequestContext for this call.
        arguments: Tool arguments:
            - id: Device identifier (required)
            - volume: New volume level (required integer)
        backend: Device backend to update.

    Raises:
        InvalidArgumentError: If ``id`` or ``volume`` is missing or mistyped.
    """
    device_id = _require_string(arguments, "id")
    volume = _require_int(arguments, "volume")

    await backend.set_volume(device_id, volume)

    return f"Volume for device {device_id} set to {volume}"
