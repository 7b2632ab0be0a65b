"""
argtree faults and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every way a dispatch or
  a suggestion walk can halt abnormally.
- CommandFault: base type carrying a message + read-only options that knows how
  to render itself (plain or fancy, colorful or not) through rich.
- ParseError / RequirementFailure / DispatchExhausted / IncompleteCommand /
  UnknownCommand: the engine taxonomy.
- trigger(): surface a fault (raise it, or render it in shell mode).
- getdoc(): optional description lookup for a code from the host application.

Faults are values first: the dispatcher builds one, stores it on the context
and hands its message to the failure handler. Nothing in the engine raises
them; handlers decide (see commands.strict).

Host configuration (attributes on __main__)
- __codes__: {FaultCode: str} remaps the displayed code.
- __docs__: {FaultCode: str} documentation shown by getdoc().
- __styles__: {style-name: rich style} overrides the palette.
"""
import copy
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the engine (stable identifiers).

    grouping
    - traversal (201xx)
      • PARSE_ERROR, DISPATCH_EXHAUSTED, INCOMPLETE_COMMAND
    - gating (202xx)
      • REQUIREMENT_FAILURE
    - routing (203xx)
      • UNKNOWN_COMMAND
    """
    # --- traversal (201xx) ---
    PARSE_ERROR                 = 20101
    DISPATCH_EXHAUSTED          = 20102
    INCOMPLETE_COMMAND          = 20103

    # --- gating (202xx) ---
    REQUIREMENT_FAILURE         = 20201

    # --- routing (203xx) ---
    UNKNOWN_COMMAND             = 20301

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class CommandFault(Exception):
    """
    base fault: a message (possibly None) plus read-only options.

    common options
    - code: FaultCode
    - title: short lowercase title for the header
    - hint: one actionable sentence
    - command: name of the command the fault belongs to
    - index: 1-based position of the offending token (label is 0)
    - token: the offending token, when there is one
    - fancy / colorful: rendering switches
    - shell: when True trigger() renders instead of raising
    """
    __faultcode__ = None
    __title__ = "command fault"

    def __init__(self, message=None, /, **options):
        assert isinstance(message, str | None)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType({
            "code": type(self).__faultcode__,
            "title": type(self).__title__,
        } | options)

    @property
    def code(self):
        return self.options["code"]

    @property
    def title(self):
        return self.options["title"]

    def __str__(self):
        return self.message or self.title

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white command name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), styles[style] if colorful else "")

        header = Text.assemble(
            "[ ",
            text(self.options.get("command", "command"), "prog-name"),
            " - ",
            text(self.code.normalize() if self.code else "?", "code"),
            " | ",
            text(self.title.title(), "error-title"),
            " ]"
        )
        body = [text(self.message or self.title, "error-message")]
        if hint := self.options.get("hint"):
            body.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))

        if fancy:
            return Panel(Group(*body), title=header, title_align="left")
        return Group(header, *body)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class RequirementFailure(CommandFault):
    __faultcode__ = FaultCode.REQUIREMENT_FAILURE
    __title__ = "requirement not met"


class DispatchExhausted(CommandFault):
    __faultcode__ = FaultCode.DISPATCH_EXHAUSTED
    __title__ = "no matching argument"


class ParseError(DispatchExhausted):
    """
    the only argument that could follow rejected its token.
    """
    __faultcode__ = FaultCode.PARSE_ERROR
    __title__ = "invalid argument"


class IncompleteCommand(CommandFault):
    __faultcode__ = FaultCode.INCOMPLETE_COMMAND
    __title__ = "incomplete command"


class UnknownCommand(CommandFault):
    __faultcode__ = FaultCode.UNKNOWN_COMMAND
    __title__ = "unknown command"


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see CommandFault).
    - options are merged into a copy of the fault before triggering.
    - shell=True renders to the stderr console; otherwise the fault is raised.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code from the host __docs__ mapping.

    returns None when the host does not document the code.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "CommandFault",
    "ParseError",
    "RequirementFailure",
    "DispatchExhausted",
    "IncompleteCommand",
    "UnknownCommand",
    "trigger",
    "getdoc",
)
