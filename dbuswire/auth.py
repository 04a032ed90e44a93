"""Client side of the SASL authentication handshake."""

from __future__ import annotations

import threading
from enum import Enum
from typing import Callable, Optional, Protocol

from dbuswire import log
from dbuswire.octetbuffer import OctetBuffer
from dbuswire.platform import get_uid

__all__ = ["AuthRequired", "AuthenticationProtocol"]

# The handshake:
#
#   Server        Client
#           <---  AUTH
#   OK      ---->
#           <---  (1) BEGIN (or)
#           <---  (2) NEGOTIATE_UNIX_FD
#   AGREE   ---->
#           <---  BEGIN


class AuthRequired(Enum):
    """How far the handshake should go before BEGIN is sent."""

    BASIC = 0
    NEGOTIATE_UNIX_FD = 1


class _Wire(Protocol):
    def send_string_direct(self, data: bytes | str) -> None: ...

    def on_auth_complete(self) -> None: ...


class AuthenticationProtocol:
    """Drives the line-based authentication exchange over a transport."""

    def __init__(self, transport: _Wire) -> None:
        self._transport = transport
        self._data = ""
        self._auth_type = AuthRequired.BASIC
        self._auth_type_lock = threading.RLock()
        self.server_guid = ""
        # Commands mapped to None are recognised but never complete the
        # handshake (the server-side commands and DATA, which EXTERNAL
        # does not use).
        self._commands: list[tuple[str, Optional[Callable[[str], bool]]]] = [
            ("OK", self._on_ok),
            ("ERROR", self._on_error),
            ("REJECTED", self._on_rejected),
            ("AGREE_UNIX_FD", lambda _arg: self._on_agree_unix_fd()),
            ("DATA", None),
            ("AUTH", None),
            ("NEGOTIATE_UNIX_FD", None),
            ("CANCEL", None),
        ]

    def reset(self) -> None:
        """Drop any partial input and start the handshake again."""
        self._data = ""
        self.send_auth(self._auth_type)

    def send_auth_list_methods(self) -> None:
        """Ask the server which mechanisms it supports."""
        self._send_wire("AUTH\r\n")

    def send_auth(self, auth_type: AuthRequired = AuthRequired.BASIC) -> None:
        """Start EXTERNAL authentication as the current user."""
        with self._auth_type_lock:
            self._auth_type = auth_type
        uid_hex = str(get_uid()).encode("ascii").hex()
        self._send_wire(f"AUTH EXTERNAL {uid_hex}\r\n")

    def send_data(self, data: bytes | str) -> None:
        """Send a DATA line carrying ``data`` hex encoded."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._send_wire(f"DATA {bytes(data).hex()}\r\n")

    def on_receive_data(self, buffer: OctetBuffer) -> bool:
        """Consume handshake lines from ``buffer``.

        Returns True once authentication is complete; any data after the
        final line is left in ``buffer``.
        """
        authenticated = False
        while not buffer.empty() and not authenticated:
            pos = buffer.find(b"\n")
            take = len(buffer) if pos == -1 else pos + 1
            self._data += buffer.copy(take).decode("latin-1")
            buffer.remove_prefix(take)
            authenticated = self._process_data()
        return authenticated

    def on_command(self, command: str) -> bool:
        """Handle one complete line; return True once authenticated."""
        log.write(log.Level.TRACE, "DBus :: CMD: %s\n", command)
        log.write_hex(log.Level.TRACE, "DBus :: CMD: ", command)

        line = command.rstrip("\r\n")
        for keyword, handler in self._commands:
            if line.startswith(keyword):
                if handler is None:
                    return False
                return handler(line[len(keyword) + 1:])

        log.write(
            log.Level.WARNING,
            "DBus :: CMD: %s did not execute anything, so please implement the method.\n",
            command,
        )
        return False

    def _process_data(self) -> bool:
        pos = self._data.find("\r\n")
        if pos == -1:
            return False
        command = self._data[:pos + 2]
        self._data = self._data[pos + 2:]
        return self.on_command(command)

    def _on_ok(self, guid: str) -> bool:
        self.server_guid = guid
        with self._auth_type_lock:
            send_begin = self._auth_type is AuthRequired.BASIC
        if send_begin:
            self._send_begin()
            return True
        self._send_wire("NEGOTIATE_UNIX_FD\r\n")
        return False

    def _on_error(self, error_message: str) -> bool:
        log.write(log.Level.ERROR, "DBus :: onError : %s\n", error_message)
        return False

    def _on_rejected(self, error_message: str) -> bool:
        log.write(log.Level.WARNING, "DBus :: Reject : %s\n", error_message)
        return False

    def _on_agree_unix_fd(self) -> bool:
        log.write(log.Level.INFO, "DBus :: onAgreeUnixFD\n")
        self._send_begin()
        return True

    def _send_begin(self) -> None:
        self._send_wire("BEGIN\r\n")
        self._transport.on_auth_complete()

    def _send_wire(self, data: str) -> None:
        self._transport.send_string_direct(data)