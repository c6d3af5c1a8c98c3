"""
Device backend abstraction for the audio device MCP server.

Tool handlers talk to audio hardware only through DeviceBackend. A real
implementation would perform network I/O against the speakers; the static
backend in this package serves configured values from memory.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_pascal


class AudioDevice(BaseModel):
    """
    An audio device known to a backend.

    The dispatcher treats every field as opaque and only compares ``id``.
    Serialized with ``by_alias=True`` the keys are PascalCase (``Id``,
    ``Name``, ``Room``, ``Model``), the wire form clients of ``get_devices``
    expect.

    Attributes:
        id: Device identifier.
        name: Display name.
        room: Room the device is placed in.
        model: Hardware model.
    """

    model_config = ConfigDict(
        frozen=True, alias_generator=to_pascal, populate_by_name=True
    )

    id: str = Field(..., description="Device identifier")
    name: str = Field(..., description="Display name")
    room: str = Field(..., description="Room the device is placed in")
    model: str = Field(..., description="Hardware model")


class DeviceBackend(ABC):
    """
    Abstract base class for device backends.

    Backends decide their own semantics for unknown ids on writes; the
    dispatcher does not check existence before calling ``set_volume``.
    Ordering of overlapping calls for the same device is left to the backend.
    """

    @abstractmethod
    async def list_devices(self) -> list[AudioDevice]:
        """
        List every device the backend knows about.

        Returns:
            Devices in a stable order.
        """

    @abstractmethod
    async def get_volume(self, device_id: str) -> int | None:
        """
        Read the current volume of a device.

        Args:
            device_id: Device identifier.

        Returns:
            Volume level, or None if no device has this id.
        """

    @abstractmethod
    async def set_volume(self, device_id: str, volume: int) -> None:
        """
        Change the volume of a device.

        Args:
            device_id: Device identifier.
            volume: New volume level.
        """
