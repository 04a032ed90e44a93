"""Building blocks for the D-Bus wire protocol: logging, bus addresses, buffers, signatures, introspection, match rules, transport and authentication."""

__version__ = "1.0.0"

__all__ = [
    "log",
    "platform",
    "octetbuffer",
    "istream",
    "signature",
    "introspect",
    "matchrule",
    "transport",
    "auth",
]