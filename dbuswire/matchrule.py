"""Match rules that select incoming signals by their header fields."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

__all__ = ["SignalHeader", "MatchRule"]


@dataclass
class SignalHeader:
    """The header fields of a signal that match rules look at."""

    sender: str = ""
    interface: str = ""
    member: str = ""
    destination: str = ""
    path: str = ""


_KEYS = ("type", "sender", "interface", "member", "path", "path_namespace", "destination")


class MatchRule:
    """A parsed match rule with the handler to call for matching signals.

    Rules are comma separated ``key='value'`` pairs. The ``eavesdrop`` and
    ``arg`` keys are accepted but not checked.
    """

    def __init__(self, rule: str, handler: Callable[[Any], None]) -> None:
        self.type = ""
        self.sender = ""
        self.interface = ""
        self.member = ""
        self.path = ""
        self.path_namespace = ""
        self.destination = ""

        for param in filter(None, rule.split(",")):
            keyvalue = param.split("=")
            if len(keyvalue) < 2 or len(keyvalue[1]) < 2:
                raise ValueError(f"Malformed match rule element: {param!r}")
            key, value = keyvalue[0], keyvalue[1][1:-1]
            if key in _KEYS:
                setattr(self, key, value)

        if self.path and self.path_namespace:
            raise ValueError(
                "Match rules with both 'path' and 'path_namespace' are not allowed."
            )

        self.callback = handler

    def is_matched(self, signal: Any) -> bool:
        """Return True when every field set in the rule agrees with ``signal``."""
        checks = (
            (self.sender, signal.sender),
            (self.interface, signal.interface),
            (self.member, signal.member),
            (self.destination, signal.destination),
            (self.path, signal.path),
        )
        if any(wanted and wanted != actual for wanted, actual in checks):
            return False

        if self.path_namespace:
            signal_path = signal.path
            if not signal_path.startswith(self.path_namespace):
                return False
            rest = signal_path[len(self.path_namespace):]
            if rest and not rest.startswith("/"):
                return False

        return True

    def invoke(self, signal: Any) -> None:
        """Call the rule's handler with ``signal``."""
        self.callback(signal)