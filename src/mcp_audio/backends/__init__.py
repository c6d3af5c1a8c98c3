"""
Device backends for the audio device MCP server.

- DeviceBackend: abstract interface used by the tool handlers
- AudioDevice: device model returned by backends
- StaticDeviceBackend: in-memory backend driven by configuration
"""

from mcp_audio.backends.base import AudioDevice, DeviceBackend
from mcp_audio.backends.static import StaticDeviceBackend

__all__ = [
    "AudioDevice",
    "DeviceBackend",
    "StaticDeviceBackend",
]
