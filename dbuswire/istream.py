"""Aligned reading of marshalled message data."""

from __future__ import annotations

import struct
import sys

from dbuswire.octetbuffer import OctetBuffer

__all__ = ["MessageIStream"]


class MessageIStream:
    """Reads values from message data, tracking the offset for alignment."""

    def __init__(
        self,
        data: bytes | bytearray | memoryview,
        swap_byte_order: bool,
    ) -> None:
        self._buffer = OctetBuffer(data)
        self.offset = 0
        self.swap_byte_order = swap_byte_order
        native = sys.byteorder
        if swap_byte_order:
            self._byteorder = "big" if native == "little" else "little"
        else:
            self._byteorder = native

    def sub_stream(self, size: int) -> MessageIStream:
        """Split off the next ``size`` octets as a stream of their own."""
        chunk = self._buffer.data[:size]
        self._buffer.remove_prefix(size)
        sub = MessageIStream(chunk, self.swap_byte_order)
        sub.offset = self.offset
        self.offset += size
        return sub

    def empty(self) -> bool:
        """Return True when the stream holds no more data."""
        return self._buffer.empty()

    def align(self, alignment: int) -> None:
        """Skip padding so the offset becomes a multiple of ``alignment``."""
        remainder = self.offset % alignment
        if remainder:
            skip = alignment - remainder
            self._buffer.remove_prefix(skip)
            self.offset += skip

    def read_byte(self) -> int:
        """Read a single octet."""
        value = self._buffer[0]
        self._buffer.remove_prefix(1)
        self.offset += 1
        return value

    def read_bytes(self, size: int) -> bytes:
        """Read ``size`` raw octets."""
        value = self._buffer.copy(size)
        self._buffer.remove_prefix(size)
        self.offset += size
        return value

    def read_integer(self, size: int, signed: bool = False) -> int:
        """Align to ``size`` and read an integer of that many octets."""
        self.align(size)
        return int.from_bytes(self.read_bytes(size), self._byteorder, signed=signed)

    def read_double(self) -> float:
        """Read an 8-octet IEEE double at the current position, without aligning."""
        raw = self.read_bytes(8)
        fmt = "<d" if self._byteorder == "little" else ">d"
        return struct.unpack(fmt, raw)[0]

    def read_string(self, size: int) -> str:
        """Read ``size`` octets as UTF-8 text."""
        if size > len(self._buffer):
            raise ValueError("Read string error: Not enough data in stream")
        return self.read_bytes(size).decode("utf-8")