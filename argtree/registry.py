"""
argtree registry: labels to commands, for a host that routes raw input.

Lifecycle
- Registry() starts closed for business: open() it (or use it as a context
  manager) before registering. close() drops every command; a closed
  registry cannot be reopened and any further use raises RuntimeError.

Labels
- A command is reachable under its own name and any aliases given at
  registration. Labels are case-insensitive and must be unique across the
  registry.

Routing
- dispatch(label, args, sender) / suggest(label, args, sender) forward to
  the command's on_command / on_tab_complete.
- execute(line, sender) / complete(line, sender) split a raw line first.

Threading
- Registration and removal hold a lock and publish a fresh table; routing
  reads whatever table is current and never blocks.
"""
import logging
import threading

from .commands import Command
from .faults import UnknownCommand
from .utils import *

logger = logging.getLogger(__name__)


class Registry:
    def __init__(self):
        self._lock = threading.Lock()
        self._state = "new"
        # label key -> (label, command), in registration order
        self._table = {}

    @property
    def opened(self):
        return self._state == "open"

    @property
    def closed(self):
        return self._state == "closed"

    def open(self):
        with self._lock:
            if self._state == "closed":
                raise RuntimeError("Registry cannot be reopened once closed")
            self._state = "open"
        return self

    def close(self):
        with self._lock:
            self._state = "closed"
            self._table = {}

    def __enter__(self):
        return self.open()

    def __exit__(self, *exc_info):
        self.close()

    def _ensure_open(self):
        if self._state != "open":
            raise RuntimeError("Registry is %s" % ("closed" if self._state == "closed" else "not open yet"))

    def register(self, command, /, *aliases):
        """
        Make command reachable under its name and every alias.

        Raises ValueError when one of the labels is already taken, in which
        case nothing is registered.
        """
        if not isinstance(command, Command):
            raise TypeError("register() argument must be a command")
        for alias in aliases:
            if not isinstance(alias, str) or not alias or any(char.isspace() for char in alias):
                raise TypeError("register() aliases must be single non-empty words")
        labels = (command.name, *aliases)

        with self._lock:
            self._ensure_open()
            table = dict(self._table)
            for label in labels:
                if (key := label.casefold()) in table:
                    raise ValueError(f"register() label {label!r} is already in use")
                table[key] = (label, command)
            self._table = table
        logger.debug("registered %r under %r", command.name, labels)
        return command

    def unregister(self, name, /):
        """
        Remove the command reachable under name, with all of its labels.
        """
        with self._lock:
            self._ensure_open()
            try:
                _, command = self._table[name.casefold()]
            except KeyError:
                raise KeyError(name) from None
            self._table = {
                key: entry for key, entry in self._table.items() if entry[1] is not command
            }
        logger.debug("unregistered %r", command.name)
        return command

    def get(self, name, default=None, /):
        self._ensure_open()
        entry = self._table.get(name.casefold())
        return default if entry is None else entry[1]

    def labels(self):
        """
        Every registered label (names and aliases), in registration order.
        """
        self._ensure_open()
        return [label for label, _ in self._table.values()]

    def __contains__(self, name, /):
        return isinstance(name, str) and self.get(name) is not None

    def __iter__(self):
        self._ensure_open()
        seen = []
        for _, command in self._table.values():
            if command not in seen:
                seen.append(command)
        return iter(seen)

    def __len__(self):
        return sum(1 for _ in self)

    def dispatch(self, label, args, sender, /):
        """
        Run the command registered under label; False when it is unknown
        or did not execute.
        """
        if (command := self.get(label)) is None:
            fault = UnknownCommand("Unknown command: %s" % label, command=label, index=0, token=label)
            logger.debug("no command for %r: %s", label, fault)
            sender.send(fault.message)
            return False
        return command.on_command(sender, label, args)

    def suggest(self, label, args, sender, /):
        if (command := self.get(label)) is None:
            return []
        return command.on_tab_complete(sender, label, args)

    def execute(self, line, sender, /):
        """
        Split line and dispatch it. A blank line does nothing (False).
        """
        if not (tokens := tokenize(line)):
            return False
        return self.dispatch(tokens[0], tokens[1:], sender)

    def complete(self, line, sender, /):
        """
        Split line and collect completions for its last token. While the
        label itself is being typed, registered labels are suggested.
        """
        tokens = tokenize(line, partial=True)
        if len(tokens) <= 1:
            return list(prefixed(self.labels(), "".join(tokens), ignorecase=True))
        return self.suggest(tokens[0], tokens[1:], sender)

    def __repr__(self):
        return "Registry(state=%r, labels=%r)" % (self._state, [label for label, _ in self._table.values()])


__all__ = (
    "Registry",
)
