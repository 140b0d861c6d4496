"""CoAP message helpers shared by the floor and building nodes."""

from __future__ import annotations

import enum
import math
import re
import struct
from dataclasses import dataclass

APPLICATION_OCTET_STREAM = 42
APPLICATION_JSON = 50

_FLOAT_PATTERN = re.compile(
    r"[ \t\n\v\f\r]*[+-]?"
    r"(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)


class Status(enum.IntEnum):
    """CoAP response codes used by the resources (class * 32 + detail)."""

    CHANGED = 68
    CONTENT = 69
    BAD_REQUEST = 128
    NOT_FOUND = 132

    @property
    def dotted(self) -> str:
        return f"{self.value >> 5}.{self.value & 0x1F:02d}"


@dataclass(frozen=True)
class Response:
    """A CoAP response: status, payload bytes and optional content format."""

    status: Status
    payload: bytes = b""
    content_format: int | None = None

    @property
    def text(self) -> str:
        return self.payload.decode("utf-8")


class LedColor(enum.IntEnum):
    DISABLE = -1
    GREEN = 0
    YELLOW = 1
    RED = 2


class Leds:
    """A bank of three coloured LEDs of which at most one is lit."""

    def __init__(self) -> None:
        self.lit: LedColor | None = None

    def set_color(self, color: int) -> None:
        """Turn every LED off, then light the one for ``color`` if it names one."""
        self.lit = None
        try:
            chosen = LedColor(color)
        except ValueError:
            return
        if chosen is not LedColor.DISABLE:
            self.lit = chosen


def query_variable(query: str | None, name: str) -> str | None:
    """Return the value of ``name`` in an ``a=1&b=2`` query, or None if absent."""
    if not query:
        return None
    for part in query.split("&"):
        key, sep, value = part.partition("=")
        if sep and key == name:
            return value
    return None


def _to_float32(value: float) -> float:
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def parse_float(text: str) -> float:
    """Parse a whole string as a single-precision float.

    Leading whitespace is allowed; any trailing character makes it invalid.
    """
    if not _FLOAT_PATTERN.fullmatch(text):
        raise ValueError(f"not a float: {text!r}")
    return _to_float32(float(text.strip(" \t\n\v\f\r")))


def describe_reply(response: Response | None) -> str:
    """Describe the reply to a blocking request; None means it timed out."""
    if response is None:
        return "Request timed out"
    return response.text