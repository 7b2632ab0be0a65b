r"""
argtree argument types.

Overview
- ArgumentType[_T]: the capability every token type provides.
  • parse(tokens) -> Ok(value) | Err(message)
    Consumes the tokens it matched from the front of the sequence on success;
    leaves the sequence untouched on failure so that a sibling can retry.
  • suggestions(context)
    Contributes completion candidates through context.suggest(text). It never
    touches the token sequence; context.partial holds the token being typed.

- Built-in types
  • Literal(text, ignorecase=False): a fixed word (subcommand names).
  • Integer(min, max, predicate, error, suggest=False, ceiling=...): ranged int.
  • Float(min, max, predicate, error): ranged finite decimal.
  • Boolean(): true / false.
  • Choice(*choices, ignorecase=False): one word among a fixed set.
  • Word(): any single token.
  • Phrase(): a single token, or a "quoted phrase" spanning several tokens.
  • Greedy(): everything that remains.

Token sequences
- Any mutable sequence supporting tokens[0] and del tokens[0] works (list or
  collections.deque); the dispatcher hands a deque.

Immutability
- Types validate their configuration on construction and expose it through
  read-only properties (listed in __introspectable__). A type instance holds
  no per-call state, so one instance may be shared by many nodes and threads.

Suggestion ceiling
- Integer(suggest=True) enumerates its whole range. Ranges wider than the
  ceiling are rejected at construction. The ceiling defaults to
  DEFAULT_CEILING and can be raised by the host with a __ceiling__ attribute
  on __main__, or per type with ceiling=....

Public API
- Classes: ArgumentType, Literal, Integer, Float, Boolean, Choice, Word,
  Phrase, Greedy
- Constants: DEFAULT_CEILING, INT_MIN, INT_MAX
"""
import functools
import math
import operator
import re
from abc import ABCMeta, abstractmethod

from .results import Ok, Err
from .utils import *

INT_MIN = -2 ** 31
INT_MAX = 2 ** 31 - 1

DEFAULT_CEILING = 1024


def _ceiling():
    """
    Host-configured suggestion ceiling (falls back to DEFAULT_CEILING).
    """
    ceiling = getattr(__import__("__main__"), "__ceiling__", DEFAULT_CEILING)
    if not isinstance(ceiling, int) or isinstance(ceiling, bool) or ceiling < 0:
        raise TypeError("__ceiling__ must be a non-negative integer")
    return ceiling


def _template(cls, error, /):
    """
    Validate a predicate failure message.

    The message is a printf-style template formatted with the rejected value
    (a literal percent sign is written "%%"). A message without any
    conversion is used as is.
    """
    if not isinstance(error, str):
        raise TypeError(f"{cls.__typename__} 'error' must be a string")
    try:
        _render(error, 0)
    except (TypeError, ValueError):
        raise ValueError(f"{cls.__typename__} 'error' is not a valid message template: {error!r}") from None
    return error


def _render(error, value, /):
    try:
        return error % value
    except TypeError:
        # no conversion to fill in
        return error % ()


def _consume(tokens, count, /):
    """
    Remove the first count tokens (works for lists and deques alike).
    """
    for _ in range(count):
        del tokens[0]


class ArgumentMeta(ABCMeta):
    """
    Metaclass of all argument types.

    Responsibilities
    - Derive __typename__ from the class name (camel-case split with hyphens),
      used in messages and usage strings.
    - Publish every name listed in the class' __introspectable__ as a
      read-only property over its "_name" backing field.
    """

    def __new__(cls, name, bases, namespace, /, **options):
        return super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                field: mirror(field) for field in namespace.get("__introspectable__", ())
            },
            **options
        )


class ArgumentType[_T](metaclass=ArgumentMeta):
    """
    Base of every token type.

    Subclasses implement parse() and may override suggestions(). The class
    attribute __expected__ names what the type expects in the message returned
    when no token is left.
    """
    __introspectable__ = ()
    __expected__ = "argument"

    @abstractmethod
    def parse(self, tokens, /):
        """
        Match the front of tokens.

        Returns Ok(value) after removing the consumed tokens, or Err(message)
        with tokens unchanged.
        """

    def suggestions(self, context, /):
        """
        Contribute completions to context (no-op by default).
        """

    @property
    def arity(self):
        """
        How many tokens a successful parse consumes: an int, "+" (one or
        more) or "*" (everything that remains).
        """
        return 1

    def _missing(self):
        return Err("Expected %s" % self.__expected__)

    def __repr__(self):
        return f"{type(self).__typename__}({
            ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
        })"

    def __rich_repr__(self):
        for name in type(self).__introspectable__:
            yield name, getattr(self, name)


class Literal(ArgumentType[str]):
    """
    A fixed word, e.g. a subcommand name.

    The parsed value is the declared text (not the typed spelling), so a
    case-insensitive literal always yields its canonical form.
    """
    __introspectable__ = ("text", "ignorecase")
    __expected__ = "literal"

    def __new__(cls, text, /, ignorecase=False):
        if not isinstance(text, str):
            raise TypeError(f"{cls.__typename__} 'text' must be a string")
        if not text or any(char.isspace() for char in text):
            raise ValueError(f"{cls.__typename__} 'text' must be a single non-empty word")
        self = super().__new__(cls)
        self._text = text
        self._ignorecase = bool(ignorecase)
        return self

    def matches(self, token, /):
        if self.ignorecase:
            return token.casefold() == self.text.casefold()
        return token == self.text

    def parse(self, tokens, /):
        if not tokens:
            return Err("Expected %s" % self.text)
        if not self.matches(token := tokens[0]):
            return Err("Unknown argument: %s" % token)
        _consume(tokens, 1)
        return Ok(self.text)

    def suggestions(self, context, /):
        for candidate in prefixed((self.text,), context.partial, ignorecase=self.ignorecase):
            context.suggest(candidate)


class Integer(ArgumentType[int]):
    """
    A whole number within [min, max] (inclusive), optionally checked by a
    predicate.

    Failure messages
    - "Invalid integer: <token>" when the token is not a base-10 integer
      that fits in 32 bits.
    - "Integer <v> is less than the minimum value <min>"
    - "Integer <v> is greater than the maximum value <max>"
    - error % v when the predicate rejects v (error defaults to
      "Integer %d is invalid"; write "%%" for a literal percent sign).

    Suggestions are opt-in (suggest=True) and list every accepted value in
    the range that starts with the partial token.
    """
    __introspectable__ = ("min", "max", "predicate", "error", "suggest", "ceiling")
    __expected__ = "integer"

    def __new__(
            cls,
            min=INT_MIN,
            max=INT_MAX,
            predicate=None,
            error="Integer %d is invalid",
            *,
            suggest=False,
            ceiling=Unset
    ):
        for name, bound in (("min", min), ("max", max)):
            if not isinstance(bound, int) or isinstance(bound, bool):
                raise TypeError(f"{cls.__typename__} '{name}' must be an integer")
            if not INT_MIN <= bound <= INT_MAX:
                raise ValueError(f"{cls.__typename__} '{name}' must fit in 32 bits")
        if min > max:
            raise ValueError(f"{cls.__typename__} 'min' cannot be greater than 'max'")
        if predicate is not None and not callable(predicate):
            raise TypeError(f"{cls.__typename__} 'predicate' must be callable")
        error = _template(cls, error)

        ceiling = _ceiling() if ceiling is Unset else ceiling
        if not isinstance(ceiling, int) or isinstance(ceiling, bool) or ceiling < 0:
            raise TypeError(f"{cls.__typename__} 'ceiling' must be a non-negative integer")
        if suggest and max - min + 1 > ceiling:
            raise ValueError(
                f"{cls.__typename__} range [{min}, {max}] is too wide to suggest"
                f" ({max - min + 1} values, ceiling is {ceiling})"
            )

        self = super().__new__(cls)
        self._min = min
        self._max = max
        self._predicate = predicate
        self._error = error
        self._suggest = bool(suggest)
        self._ceiling = ceiling
        return self

    def accepts(self, value, /):
        """
        Return None when value is accepted, otherwise the failure message.
        """
        if value < self.min:
            return "Integer %d is less than the minimum value %d" % (value, self.min)
        if value > self.max:
            return "Integer %d is greater than the maximum value %d" % (value, self.max)
        if self.predicate is not None and not self.predicate(value):
            return _render(self.error, value)
        return None

    def parse(self, tokens, /):
        if not tokens:
            return self._missing()
        token = tokens[0]
        # anything longer than ten significant digits cannot be a 32-bit integer
        if not re.fullmatch(r"[+-]?[0-9]+", token) or len(token.lstrip("+-").lstrip("0")) > 10:
            return Err("Invalid integer: %s" % token)
        if not INT_MIN <= (value := int(token)) <= INT_MAX:
            return Err("Invalid integer: %s" % token)
        if message := self.accepts(value):
            return Err(message)
        _consume(tokens, 1)
        return Ok(value)

    def suggestions(self, context, /):
        if not self.suggest:
            return
        for value in range(self.min, self.max + 1):
            if self.predicate is not None and not self.predicate(value):
                continue
            if (text := str(value)).startswith(context.partial):
                context.suggest(text)


class Float(ArgumentType[float]):
    """
    A finite decimal within [min, max] (inclusive); exponents are allowed,
    "nan" and "inf" are not.
    """
    __introspectable__ = ("min", "max", "predicate", "error")
    __expected__ = "float"

    def __new__(cls, min=-math.inf, max=math.inf, predicate=None, error="Float %s is invalid"):
        for name, bound in (("min", min), ("max", max)):
            if not isinstance(bound, int | float) or isinstance(bound, bool) or math.isnan(bound):
                raise TypeError(f"{cls.__typename__} '{name}' must be a number")
        if min > max:
            raise ValueError(f"{cls.__typename__} 'min' cannot be greater than 'max'")
        if predicate is not None and not callable(predicate):
            raise TypeError(f"{cls.__typename__} 'predicate' must be callable")
        error = _template(cls, error)
        self = super().__new__(cls)
        self._min = min
        self._max = max
        self._predicate = predicate
        self._error = error
        return self

    def parse(self, tokens, /):
        if not tokens:
            return self._missing()
        token = tokens[0]
        if not re.fullmatch(r"[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?", token):
            return Err("Invalid float: %s" % token)
        if not math.isfinite(value := float(token)):
            return Err("Invalid float: %s" % token)
        if value < self.min:
            return Err("Float %s is less than the minimum value %s" % (value, self.min))
        if value > self.max:
            return Err("Float %s is greater than the maximum value %s" % (value, self.max))
        if self.predicate is not None and not self.predicate(value):
            return Err(_render(self.error, value))
        _consume(tokens, 1)
        return Ok(value)


class Boolean(ArgumentType[bool]):
    __expected__ = "boolean"

    def __new__(cls):
        return super().__new__(cls)

    def parse(self, tokens, /):
        if not tokens:
            return self._missing()
        match tokens[0].casefold():
            case "true":
                value = True
            case "false":
                value = False
            case _:
                return Err("Invalid boolean: %s" % tokens[0])
        _consume(tokens, 1)
        return Ok(value)

    def suggestions(self, context, /):
        for candidate in prefixed(("true", "false"), context.partial, ignorecase=True):
            context.suggest(candidate)


class Choice(ArgumentType[str]):
    """
    One word among a fixed, ordered set of choices.

    The parsed value is the declared choice (canonical casing).
    """
    __introspectable__ = ("choices", "ignorecase")
    __expected__ = "choice"

    def __new__(cls, *choices, ignorecase=False):
        if not choices:
            raise TypeError(f"{cls.__typename__} must specify at least one choice")
        seen = set()
        for choice in choices:
            if not isinstance(choice, str):
                raise TypeError(f"{cls.__typename__} choices must be strings")
            if not choice or any(char.isspace() for char in choice):
                raise ValueError(f"{cls.__typename__} choices must be single non-empty words")
            if (key := choice.casefold() if ignorecase else choice) in seen:
                raise ValueError(f"{cls.__typename__} choices cannot contain duplicates")
            seen.add(key)
        self = super().__new__(cls)
        self._choices = list(choices)
        self._ignorecase = bool(ignorecase)
        return self

    def parse(self, tokens, /):
        if not tokens:
            return self._missing()
        token = tokens[0]
        for choice in self.choices:
            if choice == token or (self.ignorecase and choice.casefold() == token.casefold()):
                _consume(tokens, 1)
                return Ok(choice)
        return Err("Invalid choice: %s" % token)

    def suggestions(self, context, /):
        for candidate in prefixed(self.choices, context.partial, ignorecase=self.ignorecase):
            context.suggest(candidate)


class Word(ArgumentType[str]):
    """
    Any single non-empty token, taken verbatim.
    """
    __expected__ = "word"

    def __new__(cls):
        return super().__new__(cls)

    def parse(self, tokens, /):
        if not tokens or not tokens[0]:
            return self._missing()
        value = tokens[0]
        _consume(tokens, 1)
        return Ok(value)


class Phrase(ArgumentType[str]):
    """
    A single token, or a double-quoted phrase spanning several tokens.

    Tokens arrive already split on whitespace, so a quoted phrase is
    re-assembled: the opening token starts with '"', the closing one ends
    with '"', and the value is the words in between joined with one space.
    """
    __expected__ = "text"

    def __new__(cls):
        return super().__new__(cls)

    @property
    def arity(self):
        return "+"

    def parse(self, tokens, /):
        if not tokens or not tokens[0]:
            return self._missing()
        first = tokens[0]
        if not first.startswith('"'):
            _consume(tokens, 1)
            return Ok(first)
        if len(first) > 1 and first.endswith('"'):
            _consume(tokens, 1)
            return Ok(first[1:-1])

        words = [first[1:]]
        for index in range(1, len(tokens)):
            if (token := tokens[index]).endswith('"'):
                words.append(token[:-1])
                _consume(tokens, index + 1)
                return Ok(" ".join(words))
            words.append(token)
        return Err("Unterminated quoted string")


class Greedy(ArgumentType[str]):
    """
    Everything that remains, joined with one space (a trailing message).
    """
    __expected__ = "text"

    def __new__(cls):
        return super().__new__(cls)

    @property
    def arity(self):
        return "*"

    def parse(self, tokens, /):
        if not tokens:
            return self._missing()
        value = " ".join(tokens)
        _consume(tokens, len(tokens))
        return Ok(value)


__all__ = (
    # Base
    "ArgumentType",

    # Built-in types
    "Literal",
    "Integer",
    "Float",
    "Boolean",
    "Choice",
    "Word",
    "Phrase",
    "Greedy",

    # Constants
    "DEFAULT_CEILING",
    "INT_MIN",
    "INT_MAX",
)
