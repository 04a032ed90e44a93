"""Minimal levelled diagnostic output written to standard error."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import IntEnum

__all__ = ["Level", "is_active", "write", "write_hex", "flush", "set_level"]


class Level(IntEnum):
    """Severity of a diagnostic message, lowest first."""

    TRACE = 0  # Detailed flow through the library
    INFO = 1  # Data flow and major state changes
    WARNING = 2  # Problems with data going in or out of the bus
    ERROR = 3  # Problems in the library itself


_HEX_COLUMNS = 32


@dataclass
class _Settings:
    level: int = Level.WARNING


_settings = _Settings()


def is_active(level: int) -> bool:
    """Return True when messages of ``level`` are currently shown."""
    return level >= _settings.level


def write(level: int, msg: str, *args: object) -> None:
    """Write a printf-style message to stderr if ``level`` is active."""
    if not is_active(level):
        return
    sys.stderr.write(msg % args if args else msg)
    flush()


def write_hex(level: int, prefix: str, data: bytes | bytearray | memoryview | str) -> None:
    """Write ``data`` as rows of hex octets, each row aligned under ``prefix``."""
    if not is_active(level):
        return
    if isinstance(data, str):
        data = data.encode("utf-8")
    octets = bytes(data)

    parts = [prefix]
    partial_last_row = len(octets) % _HEX_COLUMNS != 0
    for column, octet in enumerate(octets, start=1):
        parts.append(f"{octet:02x} ")
        if column % _HEX_COLUMNS == 0:
            parts.append("\n")
            if partial_last_row:
                parts.append(" " * len(prefix))
    if partial_last_row:
        parts.append("\n")

    sys.stderr.write("".join(parts))
    flush()


def flush() -> None:
    """Flush standard error."""
    sys.stderr.flush()


def set_level(level: int) -> None:
    """Set the lowest level that is shown."""
    _settings.level = int(level)