"""
argtree command layer: build a tree under a command name and run it.

What this module provides
- CommandBuilder: the root builder of a command. It is an ArgumentBuilder for
  the command's own (case-insensitive) literal, plus the failure handler.
  • on_fail(handler): set the failure handler (once).
  • auto_fail(): use autofail as the handler.
  • build(): freeze into a Command.
  • register(registry, *aliases): build, hand to a Registry, return it.

- Command: the frozen, shareable result.
  • on_command(sender, label, args) -> bool
  • on_tab_complete(sender, label, args) -> list[str]
  • execute(...) / complete(...): the same walks returning the full context.
  • usages: one usage line per executable path.

- Failure handlers, called as handler(context, message) where message may be
  None (requirements without a message):
  • autofail: forward the message to the sender; silent while completing.
  • strict: raise the context's fault; silent while completing.

Quick start
    from argtree import command, literal, argument, Integer, ConsoleSender

    def here(context):
        context.sender.send("teleported here")

    def there(context):
        context.sender.send("teleported to %d %d" % (context["x"], context["y"]))

    tp = (
        command("tp")
        .then(literal("here").executes(here))
        .then(argument("x", Integer(min=0)).then(argument("y", Integer(min=0)).executes(there)))
        .auto_fail()
        .build()
    )

    tp.on_command(ConsoleSender(), "tp", ["3", "4"])      # teleported to 3 4
    tp.on_tab_complete(ConsoleSender(), "tp", ["he"])    # ["here"]
"""
from .arguments import Literal
from .contexts import ExecutionContext, SuggestionContext
from .dispatcher import Dispatcher
from .faults import trigger
from .nodes import ArgumentBuilder, ArgumentNode
from .utils import *


def autofail(context, message, /):
    """
    Forward a failure message to the sender.

    Does nothing for a None message or while completing (nothing should be
    shown to someone who is still typing).
    """
    if message is None or isinstance(context, SuggestionContext):
        return
    context.sender.send(message)


def strict(context, message, /):
    """
    Raise the fault that halted an execution (via faults.trigger).

    Completion failures are ignored, like in autofail.
    """
    if isinstance(context, SuggestionContext) or context.fault is None:
        return
    trigger(context.fault)


def _sanitize_args(cls, args, /):
    if isinstance(args, str):
        raise TypeError(f"{cls.__name__} 'args' must be an iterable of strings, not a string")
    return tuple(args)


class Command:
    """
    A registered-ready command: name, frozen tree and failure handler.

    Immutable and stateless between calls; every invocation builds its own
    context, so one Command may serve concurrent callers.
    """
    name = mirror("name")
    root = mirror("root")
    failure = mirror("failure")

    def __init__(self, name, root, /, failure=None):
        if not isinstance(name, str) or not name:
            raise TypeError("Command 'name' must be a non-empty string")
        if not isinstance(root, ArgumentNode):
            raise TypeError("Command 'root' must be a node")
        if failure is not None and not callable(failure):
            raise TypeError("Command 'failure' must be callable")
        self._name = name
        self._root = root
        self._failure = failure
        self._dispatcher = Dispatcher(failure)

    @property
    def usages(self):
        return tuple(self._root.usages())

    def execute(self, sender, label, args=(), /):
        """
        Dispatch label + args and return the ExecutionContext.
        """
        args = _sanitize_args(type(self), args)
        context = ExecutionContext(sender, label, args)
        return self._dispatcher.dispatch(self._root, (label, *args), context)

    def complete(self, sender, label, args=(), /):
        """
        Collect suggestions for the last of args and return the SuggestionContext.
        """
        args = _sanitize_args(type(self), args)
        context = SuggestionContext(sender, label, args)
        return self._dispatcher.suggest(self._root, (label, *args), context)

    def on_command(self, sender, label, args=(), /):
        return self.execute(sender, label, args).succeeded

    def on_tab_complete(self, sender, label, args=(), /):
        return list(self.complete(sender, label, args).suggestions)

    def __repr__(self):
        return "Command(%r, usages=%r)" % (self._name, self.usages)

    def __rich_repr__(self):
        yield "name", self._name
        yield "usages", self.usages
        yield "failure", self._failure


class CommandBuilder(ArgumentBuilder):
    """
    Root builder of a command (see the module documentation).
    """
    failure = mirror("failure")

    def __init__(self, name, /):
        super().__init__(name, Literal(name, ignorecase=True))
        self._failure = None

    def on_fail(self, handler, /):
        if not callable(handler):
            raise TypeError("on_fail() argument must be callable")
        if self._failure is not None:
            raise TypeError(f"on_fail() cannot override the failure handler of {self._name!r}")
        self._failure = handler
        return self

    def auto_fail(self):
        return self.on_fail(autofail)

    def build(self):
        return Command(self._name, super().build(), self._failure)

    def register(self, registry, /, *aliases):
        command = self.build()
        registry.register(command, *aliases)
        return command


def command(name, /):
    """
    Start building a command called name.
    """
    return CommandBuilder(name)


__all__ = (
    "Command",
    "CommandBuilder",
    "command",
    "autofail",
    "strict",
)
