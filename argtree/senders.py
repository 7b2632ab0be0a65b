"""
argtree senders.

A sender is whoever a command runs on behalf of. The engine treats it as
opaque: it is handed to requirement predicates, kept on the context, and
given feedback through send(message). Nothing else is inspected.

- Sender: the protocol (send, plus an optional has_permission).
- ConsoleSender: a terminal sender printing through a rich Console; faults
  are rendered with their own __rich__ (header, message, hint).
"""
from typing import Protocol, runtime_checkable

from rich.console import Console
from rich.text import Text

from .faults import CommandFault
from .utils import *


@runtime_checkable
class Sender(Protocol):
    def send(self, message, /): ...


class ConsoleSender:
    """
    Sender writing to a rich console.

    Parameters
    - name: str
      Display name of the sender.
    - permissions: Iterable[str]
      Granted permission nodes; "*" grants everything and "a.b.*" grants
      every node under "a.b.".
    - console: rich.console.Console
      Where feedback goes (a stderr console by default).
    - colorful / fancy: bool
      Rendering switches for faults.
    """
    name = mirror("name")
    permissions = mirror("permissions")

    def __init__(self, name="console", /, permissions=("*",), *, console=Unset, colorful=True, fancy=False):
        if not isinstance(name, str) or not name:
            raise TypeError("ConsoleSender 'name' must be a non-empty string")
        if isinstance(permissions, str):
            raise TypeError("ConsoleSender 'permissions' must be an iterable of strings")
        self._name = name
        self._permissions = set(permissions)
        self._console = Console(stderr=True) if console is Unset else console
        self._colorful = bool(colorful)
        self._fancy = bool(fancy)

    def has_permission(self, node, /):
        if "*" in self._permissions or node in self._permissions:
            return True
        parts = node.split(".")
        return any(".".join(parts[:index]) + ".*" in self._permissions for index in range(1, len(parts)))

    def send(self, message, /):
        if isinstance(message, CommandFault):
            self._console.print(message.__replace__(colorful=self._colorful, fancy=self._fancy))
        elif isinstance(message, Text):
            self._console.print(message)
        else:
            self._console.print(Text(str(message)))

    def __repr__(self):
        return "ConsoleSender(%r)" % self._name


__all__ = (
    "Sender",
    "ConsoleSender",
)
