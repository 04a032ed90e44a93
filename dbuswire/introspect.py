"""Building of introspection XML documents for exported objects."""

from __future__ import annotations

from enum import IntEnum

from dbuswire import log
from dbuswire.signature import split_signature

__all__ = ["Access", "Introspection", "Interface", "Method", "Property", "Signal"]

_DOCTYPE = (
    '<!DOCTYPE node PUBLIC "-//freedesktop//DTD D-BUS Object Introspection 1.0//EN"\n'
    '"http://www.freedesktop.org/standards/dbus/1.0/introspect.dtd">\n'
)


class Access(IntEnum):
    """Access rights of an exported property."""

    READ = 0
    WRITE = 1
    READWRITE = 2


_ACCESS_NAMES = {
    Access.READ: "read",
    Access.WRITE: "write",
    Access.READWRITE: "readwrite",
}


class Method:
    """A method with its input and output argument signatures."""

    def __init__(self, name: str, in_params: str, out_params: str) -> None:
        self.name = name
        self.in_params = in_params
        self.out_params = out_params

    def serialize(self) -> str:
        """Return the XML element describing this method."""
        parts = [f"<method name='{self.name}'>"]
        parts.extend(
            f"<arg direction='in' type='{sig}'/>\n"
            for sig in split_signature(self.in_params)
        )
        parts.extend(
            f"<arg direction='out' type='{sig}'/>\n"
            for sig in split_signature(self.out_params)
        )
        parts.append("</method>")
        return "".join(parts)


class Property:
    """A property with its type and access rights."""

    def __init__(self, name: str, type: str, access: int = Access.READ) -> None:
        self.name = name
        self.type = type
        try:
            self.access = Access(access)
        except ValueError:
            log.write(
                log.Level.WARNING,
                "Invalid access passed to property. Assuming read only.",
            )
            self.access = Access.READ

    def serialize(self) -> str:
        """Return the XML element describing this property."""
        return (
            f"<property name='{self.name}' "
            f"type='{self.type}' "
            f"access='{_ACCESS_NAMES[self.access]}' "
            "/>"
        )


class Signal:
    """A signal whose arguments are given one type code per character."""

    def __init__(self, name: str, type: str) -> None:
        self.name = name
        self.type = type

    def serialize(self) -> str:
        """Return the XML element describing this signal."""
        args = "".join(f"<arg type='{code}'/>" for code in self.type)
        return f"<signal name='{self.name}'>{args}</signal>"


class Interface:
    """A named interface holding methods, properties and signals."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.methods: list[Method] = []
        self.properties: list[Property] = []
        self.signals: list[Signal] = []

    def add_method(self, method: Method) -> None:
        """Add a method to the interface."""
        self.methods.append(method)

    def add_property(self, prop: Property) -> None:
        """Add a property to the interface."""
        self.properties.append(prop)

    def add_signal(self, signal: Signal) -> None:
        """Add a signal to the interface."""
        self.signals.append(signal)

    def serialize(self) -> str:
        """Return the XML element describing this interface."""
        members = [*self.properties, *self.methods, *self.signals]
        body = "".join(member.serialize() for member in members)
        return f"<interface name='{self.name}'>{body}</interface>"


class Introspection:
    """A complete introspection document for one object."""

    def __init__(self) -> None:
        self.interfaces: list[Interface] = []

    def add_interface(self, interface: Interface) -> None:
        """Add an interface to the document."""
        self.interfaces.append(interface)

    def serialize(self) -> str:
        """Return the whole XML document."""
        body = "".join(interface.serialize() for interface in self.interfaces)
        return f"{_DOCTYPE}<node>{body}</node>"