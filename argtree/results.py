"""
argtree parse results.

Every fallible parse step returns one of two immutable variants:

- Ok(value): the step succeeded and produced value.
- Err(message): the step failed; message is user-facing.

Both variants support structural pattern matching:

    match Integer(min=0).parse(tokens):
        case Ok(value):
            ...
        case Err(message):
            ...

Ok is truthy and Err is falsy, so `if result:` reads naturally.
"""
from typing import final

from rich.text import Text


class Result:
    """
    Common base of Ok and Err (not instantiable by itself).
    """
    __slots__ = ()

    def __new__(cls, *args, **kwargs):
        if cls is Result:
            raise TypeError("type 'Result' cannot be instantiated directly, use Ok or Err")
        return super().__new__(cls)

    def __setattr__(self, name, value, /):
        raise AttributeError(f"{type(self).__name__!r} object is immutable")

    def __delattr__(self, name, /):
        raise AttributeError(f"{type(self).__name__!r} object is immutable")

    def is_ok(self):
        return isinstance(self, Ok)

    def is_err(self):
        return isinstance(self, Err)


@final
class Ok(Result):
    __slots__ = ("value",)
    __match_args__ = ("value",)

    def __init__(self, value=None, /):
        object.__setattr__(self, "value", value)

    def __bool__(self):
        return True

    def __eq__(self, other, /):
        if not isinstance(other, Ok):
            return NotImplemented
        return self.value == other.value

    def __hash__(self):
        return hash((Ok, self.value))

    def __repr__(self):
        return f"Ok({self.value!r})"

    def __rich__(self):
        return Text.assemble(("Ok", "bold green"), "(", repr(self.value), ")")

    def unwrap(self):
        return self.value

    def unwrap_or(self, default, /):
        return self.value

    def map(self, function, /):
        """
        Apply function to the value and wrap the outcome in a new Ok.
        """
        return Ok(function(self.value))


@final
class Err(Result):
    __slots__ = ("message",)
    __match_args__ = ("message",)

    def __init__(self, message, /):
        if not isinstance(message, str):
            raise TypeError("Err() message must be a string")
        object.__setattr__(self, "message", message)

    def __bool__(self):
        return False

    def __eq__(self, other, /):
        if not isinstance(other, Err):
            return NotImplemented
        return self.message == other.message

    def __hash__(self):
        return hash((Err, self.message))

    def __repr__(self):
        return f"Err({self.message!r})"

    def __rich__(self):
        return Text.assemble(("Err", "bold red"), "(", repr(self.message), ")")

    def unwrap(self):
        raise ValueError(self.message)

    def unwrap_or(self, default, /):
        return default

    def map(self, function, /):
        return self


__all__ = (
    "Result",
    "Ok",
    "Err",
)
