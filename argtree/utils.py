"""
argtree utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the arguments, nodes and commands layers.

Overview
- UnsetType / Unset
  • Singleton sentinel for “value not provided”, distinct from None.
  • Falsey, printable as "Unset", non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default; None/0/""/[] are preserved.

- rename(callable, name) / @rename("name")
  • Stable __name__/__qualname__ for generated callables.

- mirror("attr")
  • Read-only property exposing a private backing field (self._attr); lists,
    dicts and sets come back as tuple, MappingProxyType and frozenset.

- prefixed(candidates, partial, ignorecase=False)
  • Filter completion candidates by the partially typed token.

- tokenize(line, partial=False)
  • Split a raw command line into tokens; in partial mode a trailing blank
    yields an empty last token (the one being typed).

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> list(prefixed(["spawn", "speed", "stop"], "sp"))
    ['spawn', 'speed']
    >>> tokenize("tp here ", partial=True)
    ['tp', 'here', '']
"""
import builtins
import functools
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    Used where None is a legitimate user value (e.g., a requirement without a
    message) but the API still needs to tell “not provided” apart.

    Characteristics
    - Boolean-false, distinct from None and 0.
    - repr(Unset) -> "Unset".
    - Singleton per process; sealed against subclassing.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in annotations (e.g., str | UnsetType).
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Returns object unless it is Unset, in which case default is returned.
    Falsey values like None, 0 or "" are kept as they are.
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - rename(callable, name) -> callable
    - rename(name) -> decorator
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def mirror(name, /):
    """
    Define a read-only property that mirrors a private backing attribute.

    The property reads "_{name}" on the instance. Mutable containers are
    returned as read-only snapshots so the public surface of a built object
    cannot be used to change it.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        value = getattr(self, "_" + name)
        if isinstance(value, list):
            return tuple(value)
        if isinstance(value, dict):
            return MappingProxyType(value)
        if isinstance(value, set):
            return frozenset(value)
        return value

    return property(getter)


def prefixed(candidates, partial, /, ignorecase=False):
    """
    Yield the candidates that start with the partially typed token.

    Parameters
    - candidates: Iterable[str]
      Completion candidates, yielded in their original order.
    - partial: str
      The token being typed; the empty string matches everything.
    - ignorecase: bool
      Compare case-insensitively (casefold on both sides).

    Notes
    - Candidates are yielded unchanged (original casing), only the comparison
      is affected by ignorecase.
    """
    if not isinstance(partial, str):
        raise TypeError("prefixed() partial must be a string")
    if ignorecase:
        partial = partial.casefold()
    for candidate in candidates:
        if (candidate.casefold() if ignorecase else candidate).startswith(partial):
            yield candidate


def tokenize(line, /, partial=False):
    """
    Split a raw command line into whitespace-separated tokens.

    Tokens are split on whitespace only: quotes are kept inside the tokens so
    that variable-arity types (e.g., Phrase) decide how to join them. When
    partial is True and the line ends with whitespace, an empty token is
    appended: it is the token the user is about to type, which the suggestion
    walk completes against.

    Examples
    - tokenize("tp 3 4")               -> ["tp", "3", "4"]
    - tokenize("say \"hi there\"")     -> ["say", "\"hi", "there\""]
    - tokenize("tp ", partial=True)    -> ["tp", ""]
    """
    if not isinstance(line, str):
        raise TypeError("tokenize() argument must be a string")
    tokens = line.split()
    if partial and (not line or line[-1].isspace()):
        tokens.append("")
    return tokens


Unset = UnsetType()
"""
Internal sentinel for “not provided”.

Use Unset as a default when None is a valid value; materialize with
coalesce(value, default).
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "prefixed",
    "tokenize",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
