"""
argtree invocation contexts.

A context is the per-call state threaded through one traversal of a command
tree. It is created fresh by every dispatch/suggest call, handed to
requirement predicates, executors, argument suggestions and the failure
handler, and dropped when the call returns. Trees never keep a reference to
one; that is what lets many calls walk the same tree at once.

Shared base (Context)
- sender: who invoked the command (see senders.Sender).
- label: the raw label the command was invoked with (may be an alias).
- args: the raw argument tokens, as a tuple.
- arguments: read-only mapping of node name -> parsed value, in parse order.
  context["x"] and context.get("x") read from it.
- fault: the fault that halted the walk, or None.

Variants
- ExecutionContext: adds outcome (Outcome.PENDING / EXECUTED / FAILED).
- SuggestionContext: adds partial (the token being completed) and an ordered,
  duplicate-free list of suggestions fed through suggest(text).
"""
from collections.abc import Iterable
from enum import IntEnum

from .utils import *


class Outcome(IntEnum):
    """
    how an execution ended.

    - PENDING: the walk has not reached an executor (yet).
    - EXECUTED: an executor ran to completion.
    - FAILED: the walk halted on a fault.
    """
    PENDING = 0
    EXECUTED = 1
    FAILED = 2


class Context:
    sender = mirror("sender")
    label = mirror("label")
    args = mirror("args")
    arguments = mirror("arguments")

    def __init__(self, sender, label, args=(), /):
        if not isinstance(label, str):
            raise TypeError(f"{type(self).__name__} 'label' must be a string")
        if isinstance(args, str) or not isinstance(args, Iterable):
            raise TypeError(f"{type(self).__name__} 'args' must be an iterable of strings")
        args = tuple(args)
        if not all(isinstance(arg, str) for arg in args):
            raise TypeError(f"{type(self).__name__} 'args' must be an iterable of strings")
        self._sender = sender
        self._label = label
        self._args = args
        self._arguments = {}
        self.fault = None

    @property
    def tokens(self):
        """
        The full raw token sequence: label first, then the arguments.
        """
        return (self.label, *self.args)

    def bind(self, name, value, /):
        """
        Record a parsed value under its node name (used by the dispatcher).
        """
        self._arguments[name] = value

    def get(self, name, default=None, /):
        return self._arguments.get(name, default)

    def __getitem__(self, name, /):
        return self._arguments[name]

    def __contains__(self, name, /):
        return name in self._arguments

    def __repr__(self):
        return "%s(%s)" % (type(self).__name__, ", ".join("%s=%r" % pair for pair in self.__rich_repr__()))

    def __rich_repr__(self):
        yield "sender", self.sender
        yield "label", self.label
        yield "args", self.args
        yield "arguments", dict(self._arguments)


class ExecutionContext(Context):
    def __init__(self, sender, label, args=(), /):
        super().__init__(sender, label, args)
        self.outcome = Outcome.PENDING

    @property
    def succeeded(self):
        return self.outcome is Outcome.EXECUTED

    def __rich_repr__(self):
        yield from super().__rich_repr__()
        yield "outcome", self.outcome


class SuggestionContext(Context):
    suggestions = mirror("suggestions")

    def __init__(self, sender, label, args=(), /):
        super().__init__(sender, label, args)
        self.partial = ""
        self._suggestions = []
        self._seen = set()

    def suggest(self, text, /):
        """
        Append a candidate unless it was already suggested.
        """
        if not isinstance(text, str):
            raise TypeError("suggest() argument must be a string")
        if text not in self._seen:
            self._seen.add(text)
            self._suggestions.append(text)

    add_suggestion = suggest

    def __rich_repr__(self):
        yield from super().__rich_repr__()
        yield "partial", self.partial
        yield "suggestions", self.suggestions


__all__ = (
    "Outcome",
    "Context",
    "ExecutionContext",
    "SuggestionContext",
)
