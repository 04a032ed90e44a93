"""A non-owning, shrinking view over a run of octets."""

from __future__ import annotations

__all__ = ["OctetBuffer"]


class OctetBuffer:
    """A read-only view of bytes whose front can be consumed."""

    def __init__(self, data: bytes | bytearray | memoryview) -> None:
        self._view = memoryview(data).cast("B")

    @property
    def data(self) -> memoryview:
        """The octets still in view."""
        return self._view

    def __bytes__(self) -> bytes:
        return self._view.tobytes()

    def __len__(self) -> int:
        return len(self._view)

    def __getitem__(self, index: int) -> int:
        if not 0 <= index < len(self._view):
            raise IndexError("OctetBuffer index out of range error")
        return self._view[index]

    def remove_prefix(self, count: int) -> None:
        """Drop ``count`` octets from the front of the view."""
        if count < 0 or count > len(self._view):
            raise IndexError("OctetBuffer.remove_prefix error: Not enough data in buffer")
        self._view = self._view[count:]

    def empty(self) -> bool:
        """Return True when no octets remain."""
        return len(self._view) == 0

    def copy(self, size: int) -> bytes:
        """Return the first ``size`` octets without consuming them."""
        if size < 0 or size > len(self._view):
            raise IndexError("OctetBuffer copy error: Not enough data in buffer")
        return self._view[:size].tobytes()

    def find(self, byte: int | bytes | str) -> int:
        """Return the index of the first occurrence of ``byte``, or -1."""
        if isinstance(byte, str):
            byte = byte.encode("latin-1")
        if isinstance(byte, (bytes, bytearray)):
            if len(byte) != 1:
                raise ValueError("find expects a single octet")
            byte = byte[0]
        return next((i for i, octet in enumerate(self._view) if octet == byte), -1)