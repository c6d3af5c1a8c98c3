"""
In-memory device backend serving a fixed device table.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from mcp_audio.backends.base import AudioDevice, DeviceBackend
from mcp_audio.logging import get_logger

if TYPE_CHECKING:
    from mcp_audio.config import AppConfig, DeviceEntryConfig

logger = get_logger(__name__)


class StaticDeviceBackend(DeviceBackend):
    """
    Backend answering from a device table fixed at construction time.

    Volume writes are acknowledged and logged but never change what
    ``get_volume`` reports, since device state is not persisted.
    """

    def __init__(self, entries: Iterable[DeviceEntryConfig]) -> None:
        entries = list(entries)
        self._devices: tuple[AudioDevice, ...] = tuple(
            AudioDevice(id=e.id, name=e.name, room=e.room, model=e.model)
            for e in entries
        )
        self._volumes: dict[str, int] = {e.id: e.volume for e in entries}

    @classmethod
    def from_config(cls, config: AppConfig) -> StaticDeviceBackend:
        """Build a backend from the ``devices`` section of the config."""
        return cls(config.devices)

    async def list_devices(self) -> list[AudioDevice]:
        return list(self._devices)

    async def get_volume(self, device_id: str) -> int | None:
        return self._volumes.get(device_id)

    async def set_volume(self, device_id: str, volume: int) -> None:
        logger.info(
            "Volume change acknowledged",
            extra={
                "device_id": device_id,
                "volume": volume,
                "known_device": device_id in self._volumes,
            },
        )
