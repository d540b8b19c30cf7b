"""Shared types and parsing helpers for host metrics."""

from __future__ import annotations

import math
import re
import struct
from dataclasses import dataclass
from typing import Dict, Optional

DEFAULT_CPU_THRESHOLD = 0.8
DEFAULT_MEM_THRESHOLD = 0.8
DEFAULT_DISK_THRESHOLD = 0.95
DEFAULT_LOAD_THRESHOLD = 0.8

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1
_DECIMAL_INT = re.compile(r"[+-]?[0-9]+")


@dataclass
class ResourceUsage:
    """Used and total amounts of a resource with its usage percentage."""

    used: int = 0
    total: int = 0
    usage: float = 0.0
    tag: str = ""


@dataclass
class Threshold:
    """Alert thresholds for cpu, memory, disk and load average."""

    cpu: float = 0.0
    mem: float = 0.0
    disk: float = 0.0
    load: Optional[Dict[str, float]] = None

    def __str__(self) -> str:
        load = "/".join(f"{v:.2f}" for v in (self.load or {}).values())
        return (
            f"CPU: {self.cpu:.2f}, Mem: {self.mem:.2f}, "
            f"Disk: {self.disk:.2f}, Load: {load}"
        )


def first(text: str) -> str:
    """Return the first space-separated field of the trimmed text."""
    return text.strip().split(" ")[0]


def str_float(text: str) -> float:
    """Parse a single-precision float, returning 0 when the text is not a number."""
    text = text.strip()
    if "_" in text:
        return 0.0
    try:
        value = float(text)
    except ValueError:
        return 0.0
    if math.isinf(value) or math.isnan(value):
        return value
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def str_int(text: str) -> int:
    """Parse a 32-bit decimal integer; invalid text gives 0, overflow is clamped."""
    text = text.strip()
    if not _DECIMAL_INT.fullmatch(text):
        return 0
    return max(_INT32_MIN, min(_INT32_MAX, int(text)))


def add_message(msg: str, message: str) -> str:
    """Join two messages with a separator when both are present."""
    if not msg or not message:
        return message
    return f"{msg} | {message}"