"""Stream socket transport that carries the bus protocol."""

from __future__ import annotations

import socket
import threading
from dataclasses import dataclass
from typing import Callable

from dbuswire import log
from dbuswire.octetbuffer import OctetBuffer

__all__ = ["TransportStats", "Transport"]

_BUFFER_SIZE = 1024
_JOIN_TIMEOUT = 30.0

DataHandler = Callable[[OctetBuffer], None]


def _as_bytes(data: bytes | bytearray | str) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


@dataclass
class TransportStats:
    """Counters kept by a transport."""

    count_messagessent: int = 0
    count_messagesqueued: int = 0
    count_messagespumped: int = 0
    bytes_sent: int = 0
    bytes_read: int = 0


class Transport:
    """A connection to the bus that reads in a background thread.

    Messages sent with :meth:`send_string` are held back until
    :meth:`on_auth_complete` is called; :meth:`send_string_direct` bypasses
    that queue and is used by the authentication handshake.
    """

    def __init__(self, path: str, sock: socket.socket | None = None) -> None:
        self.busname = path
        self.stats = TransportStats()
        self._ready_to_send = False
        self._shutting_down = False
        self._buffered_messages: list[bytes] = []
        self._send_lock = threading.RLock()
        self._callback_lock = threading.RLock()
        self._receive_callback: DataHandler = self._on_receive_data

        if sock is None:
            sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
            try:
                sock.connect(path)
            except OSError:
                sock.close()
                raise
        self._socket = sock

        # The credentials-passing NUL byte is required before anything else.
        self._send_raw(b"\0")

        self._reader = threading.Thread(
            target=self._read_loop, name="dbuswire-transport", daemon=True
        )
        self._reader.start()

    def _read_loop(self) -> None:
        while True:
            try:
                chunk = self._socket.recv(_BUFFER_SIZE)
            except OSError as exc:
                if not self._shutting_down:
                    log.write(
                        log.Level.ERROR,
                        "DBus :: Transport error. %s (%d)\n",
                        exc.strerror or str(exc),
                        exc.errno or 0,
                    )
                return

            with self._callback_lock:
                self.stats.bytes_read += len(chunk)
                self._receive_callback(OctetBuffer(chunk))

            if not chunk:
                if not self._shutting_down:
                    log.write(
                        log.Level.ERROR,
                        "DBus :: Transport received slightly unexpected end of stream\n",
                    )
                return

    def _send_raw(self, data: bytes) -> None:
        with self._send_lock:
            try:
                self._socket.sendall(data)
            except OSError as exc:
                log.write(log.Level.ERROR, "DBus :: ERROR in write : %s\n", str(exc))
                raise

    def _on_receive_data(self, buffer: OctetBuffer) -> None:
        """Discard data that arrives before a real handler has been set."""
        if buffer.empty():
            return
        log.write(
            log.Level.WARNING,
            "DBus :: Transport : onReceiveData is processing data, "
            "whereas it should really have been directed elsewhere via "
            "setDataHandler\n",
        )
        buffer.remove_prefix(len(buffer))

    def send_string(self, data: bytes | bytearray | str) -> None:
        """Send a message, or queue it until authentication has completed."""
        payload = _as_bytes(data)
        log.write(log.Level.TRACE, "DBus :: SEND: %r\n", payload)
        log.write_hex(log.Level.TRACE, "DBus :: DATA: ", payload)
        with self._send_lock:
            if self._ready_to_send:
                self.send_string_direct(payload)
            else:
                self.add_to_message_queue(payload)

    def send_string_direct(self, data: bytes | bytearray | str) -> None:
        """Send data immediately, bypassing the pre-authentication queue."""
        payload = _as_bytes(data)
        log.write(log.Level.TRACE, "DBus :: SENDDIRECT: %r\n", payload)
        log.write_hex(log.Level.TRACE, "DBus :: SENDDIRECT: \n", payload)
        with self._send_lock:
            self._send_raw(payload)
            self.stats.count_messagessent += 1
            self.stats.bytes_sent += len(payload)

    def set_data_handler(self, callback: DataHandler) -> None:
        """Direct all incoming data to ``callback``."""
        with self._callback_lock:
            self._receive_callback = callback

    def on_auth_complete(self) -> None:
        """Send every queued message and let further messages go straight out."""
        log.write(log.Level.INFO, "DBus :: Transport :: Authorisation has completed.\n")
        with self._send_lock:
            for message in self._buffered_messages:
                self.send_string_direct(message)
                self.stats.count_messagespumped += 1
            self._buffered_messages.clear()
            self._ready_to_send = True

    def add_to_message_queue(self, data: bytes | bytearray | str) -> None:
        """Hold a message back until authentication has completed."""
        log.write(
            log.Level.INFO,
            "DBus :: Transport :: No BEGIN has been received, so message is queued.\n",
        )
        with self._send_lock:
            self._buffered_messages.append(_as_bytes(data))
            self.stats.count_messagesqueued += 1

    def get_stats(self) -> str:
        """Return the counters as readable text."""
        s = self.stats
        return (
            "Transport stats:\n"
            f" count_messages_sent: {s.count_messagessent}\n"
            f" count_messages_queued: {s.count_messagesqueued}\n"
            f" count_messages_pumped: {s.count_messagespumped}\n"
            f" bytes_sent: {s.bytes_sent}\n"
            f" bytes_read: {s.bytes_read}\n"
        )

    def close(self) -> None:
        """Shut the connection down and wait for the reader thread to finish."""
        if self._shutting_down:
            return
        self._shutting_down = True
        with self._send_lock:
            self._ready_to_send = False

        with self._callback_lock:
            try:
                self._socket.shutdown(socket.SHUT_RDWR)
            except OSError as exc:
                log.write(
                    log.Level.ERROR,
                    'DBus :: Transport :: Socket shutdown failed: (%d) "%s"\n',
                    exc.errno or 0,
                    exc.strerror or str(exc),
                )

        if threading.current_thread() is not self._reader:
            self._reader.join(_JOIN_TIMEOUT)
            if self._reader.is_alive():
                log.write(log.Level.ERROR, "DBus :: Transport :: IO service thread cannot join\n")
                raise RuntimeError("Transport reader thread cannot join")
        self._socket.close()

    def __enter__(self) -> Transport:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()