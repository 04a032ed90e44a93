"""Bus address discovery and process identity."""

from __future__ import annotations

import os

__all__ = ["get_uid", "get_system_bus", "get_session_bus"]

_UNIX_PATH_PREFIX = "unix:path="
_UNIX_ABSTRACT_PATH_PREFIX = "unix:abstract="
_DEFAULT_SYSTEM_BUS = "/var/run/dbus/system_bus_socket"


class _FromEnvironment:
    def __repr__(self) -> str:
        return "<from environment>"


_FROM_ENVIRONMENT = _FromEnvironment()


def _abstract_path(address: str) -> str:
    if not address.startswith(_UNIX_ABSTRACT_PATH_PREFIX):
        return address
    path = "\0" + address[len(_UNIX_ABSTRACT_PATH_PREFIX):]
    guid_pos = path.find(",guid=")
    if guid_pos != -1:
        path = path[:guid_pos]
    return path


def _socket_path(address: str) -> str:
    if address.startswith(_UNIX_PATH_PREFIX):
        return address[len(_UNIX_PATH_PREFIX):]
    return _abstract_path(address)


def get_uid() -> int:
    """Return the real user id of this process."""
    return os.getuid()


def get_system_bus(address: str | None | _FromEnvironment = _FROM_ENVIRONMENT) -> str:
    """Return the socket path of the system bus.

    Without an argument the address is read from DBUS_SYSTEM_BUS_ADDRESS.
    A missing address yields the conventional system socket path.
    """
    if address is _FROM_ENVIRONMENT:
        address = os.environ.get("DBUS_SYSTEM_BUS_ADDRESS")
    if address is not None:
        return _socket_path(address)
    return _DEFAULT_SYSTEM_BUS


def get_session_bus(address: str | None | _FromEnvironment = _FROM_ENVIRONMENT) -> str:
    """Return the socket path of the session bus.

    Without an argument the address is read from DBUS_SESSION_BUS_ADDRESS.
    A missing address yields an empty string.
    """
    if address is _FROM_ENVIRONMENT:
        address = os.environ.get("DBUS_SESSION_BUS_ADDRESS")
    if address is not None:
        return _socket_path(address)
    return ""