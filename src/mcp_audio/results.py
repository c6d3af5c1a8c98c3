"""
Result values returned by the method router.

Every routed method yields either a ``Success`` carrying the payload to place
in the response's ``result`` slot, or a ``SoftError`` carrying a message that
is reported as ``{"error": message}`` inside that same slot. Hard faults are
raised as exceptions instead (see ``mcp_audio.errors``).
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, TypeAlias


@dataclass(frozen=True)
class Success:
    """A successful method result."""

    payload: Any

    def to_payload(self) -> Any:
        return self.payload


@dataclass(frozen=True)
class SoftError:
    """A business-level failure reported as ordinary result data."""

    message: str

    def to_payload(self) -> dict[str, str]:
        return {"error": self.message}


MethodResult: TypeAlias = Success | SoftError


def status_ok() -> Success:
    """Acknowledgement payload for notifications."""
    return Success({"status": "ok"})


def text_content(text: str) -> dict[str, Any]:
    """
    Wrap text in a content envelope.

    Example:
        >>> text_content("System is running")
        {'content': [{'type': 'text', 'text': 'System is running'}]}
    """
    return {"content": [{"type": "text", "text": text}]}


def json_content(data: Any) -> dict[str, Any]:
    """Serialize structured data and wrap it as a single text content item."""
    return text_content(json.dumps(data, separators=(",", ":")))
