"""
argtree command tree: requirements, nodes and builders.

Overview
- Requirement(message, predicate)
  • A named gate: predicate(context) must hold before the walk may go past
    the node that owns it. message is shown on failure and may be None
    (silent gating, e.g. hiding what a sender may not even see).
  • permission(node) builds one that asks the sender.

- ArgumentNode
  • One position in the grammar: a name, an ArgumentType, an ordered tuple of
    requirements, an optional executor and an ordered tuple of children.
  • Children are tried in declaration order and the first match wins, so
    literals must be declared before open-ended typed siblings.
  • Immutable once built: attributes are read-only, collections are tuples
    and assignments raise AttributeError.

- ArgumentBuilder
  • The mutable, construction-time side: then(), requires() and executes()
    return the builder for chaining; build() freezes the whole subtree.
  • literal(text) and argument(name, type) are the usual entry points.

Example
    tree = (
        literal("tp")
        .then(literal("here").executes(on_here))
        .then(
            argument("x", Integer(min=0))
            .then(argument("y", Integer(min=0)).executes(on_xy))
        )
        .build()
    )
"""
from collections.abc import Callable
from typing import NamedTuple

from .arguments import ArgumentType, Literal
from .utils import *


class Requirement(NamedTuple):
    message: str | None
    predicate: Callable

    def test(self, context, /):
        """
        Evaluate the predicate against a context.
        """
        return bool(self.predicate(context))


def _requirement(message, predicate, /):
    if isinstance(message, Requirement) and predicate is Unset:
        return message
    if not isinstance(message, str | None):
        raise TypeError("requirement 'message' must be a string or None")
    if not callable(predicate):
        raise TypeError("requirement 'predicate' must be callable")
    return Requirement(message, predicate)


def permission(node, /, message="You do not have permission to use this command"):
    """
    Build a requirement satisfied when context.sender.has_permission(node).

    Senders without a has_permission method never satisfy it.
    """
    if not isinstance(node, str) or not node.strip():
        raise TypeError("permission() node must be a non-empty string")

    @rename("has_permission")
    def predicate(context):
        check = getattr(context.sender, "has_permission", None)
        return callable(check) and bool(check(node))

    return _requirement(message, predicate)


def _validate_name(cls, name, /):
    if not isinstance(name, str):
        raise TypeError(f"{cls.__name__} 'name' must be a string")
    if not name or any(char.isspace() for char in name):
        raise ValueError(f"{cls.__name__} 'name' must be a single non-empty word")


class ArgumentNode:
    """
    Immutable grammar node (see the module documentation).
    """
    __slots__ = ("_name", "_type", "_requirements", "_executor", "_children")

    name = mirror("name")
    type = mirror("type")
    requirements = mirror("requirements")
    executor = mirror("executor")
    children = mirror("children")

    def __init__(self, name, type, /, requirements=(), executor=None, children=()):
        _validate_name(ArgumentNode, name)
        if not isinstance(type, ArgumentType):
            raise TypeError("ArgumentNode 'type' must be an argument type")
        requirements = tuple(requirements)
        if not all(isinstance(requirement, Requirement) for requirement in requirements):
            raise TypeError("ArgumentNode 'requirements' must contain requirements")
        if executor is not None and not callable(executor):
            raise TypeError("ArgumentNode 'executor' must be callable")
        children = tuple(children)
        if not all(isinstance(child, ArgumentNode) for child in children):
            raise TypeError("ArgumentNode 'children' must contain nodes")
        names = [child.name for child in children]
        if len(set(names)) != len(names):
            raise ValueError(f"ArgumentNode {name!r} children names must be unique")

        object.__setattr__(self, "_name", name)
        object.__setattr__(self, "_type", type)
        object.__setattr__(self, "_requirements", requirements)
        object.__setattr__(self, "_executor", executor)
        object.__setattr__(self, "_children", children)

    def __setattr__(self, name, value, /):
        raise AttributeError("ArgumentNode is immutable")

    def __delattr__(self, name, /):
        raise AttributeError("ArgumentNode is immutable")

    @property
    def executable(self):
        return self._executor is not None

    @property
    def usage(self):
        """
        This node's own usage fragment: the literal text, or <name>
        (<name...> for types taking a variable number of tokens).
        """
        if isinstance(self._type, Literal):
            return self._type.text
        return "<%s%s>" % (self._name, "" if self._type.arity == 1 else "...")

    def child(self, name, /):
        """
        Return the direct child called name (KeyError when absent).
        """
        for child in self._children:
            if child.name == name:
                return child
        raise KeyError(name)

    def usages(self):
        """
        Yield a usage line for every executable path starting at this node,
        depth-first in declaration order.
        """
        stack = [(self, ())]
        while stack:
            node, path = stack.pop()
            path += (node.usage,)
            if node.executable:
                yield " ".join(path)
            stack.extend((child, path) for child in reversed(node.children))

    def __iter__(self):
        return iter(self._children)

    def __repr__(self):
        return "ArgumentNode(name=%r, type=%r, requirements=%d, executable=%r, children=%r)" % (
            self._name, self._type, len(self._requirements), self.executable, [child.name for child in self._children]
        )

    def __rich_repr__(self):
        yield "name", self._name
        yield "type", self._type
        yield "requirements", self._requirements
        yield "executable", self.executable
        yield "children", self._children


class ArgumentBuilder:
    """
    Mutable construction-time counterpart of ArgumentNode.

    Chaining
    - then(*children): append child builders (or prebuilt nodes), in
      precedence order.
    - requires(message, predicate) / requires(requirement): append a gate.
    - executes(executor): set the terminal executor; works as a decorator too
      (the decorator returns the builder).
    - build(): freeze into an ArgumentNode graph. The builder stays usable
      and every build() produces a new, independent graph.
    """
    name = mirror("name")
    type = mirror("type")
    requirements = mirror("requirements")
    executor = mirror("executor")
    children = mirror("children")

    def __init__(self, name, type, /):
        _validate_name(self.__class__, name)
        if not isinstance(type, ArgumentType):
            raise TypeError("ArgumentBuilder 'type' must be an argument type")
        self._name = name
        self._type = type
        self._requirements = []
        self._executor = None
        self._children = []

    def then(self, *children):
        for child in children:
            if not isinstance(child, ArgumentBuilder | ArgumentNode):
                raise TypeError("then() arguments must be builders or nodes")
            if child is self:
                raise ValueError("then() cannot attach a builder to itself")
            if any(sibling.name == child.name for sibling in self._children):
                raise ValueError(f"then() child name {child.name!r} is already in use under {self._name!r}")
            self._children.append(child)
        return self

    def requires(self, message, predicate=Unset, /):
        self._requirements.append(_requirement(message, predicate))
        return self

    def executes(self, executor, /):
        if not callable(executor):
            raise TypeError("executes() argument must be callable")
        if self._executor is not None:
            raise TypeError(f"executes() cannot override the executor of {self._name!r}")
        self._executor = executor
        return self

    def build(self):
        return self._build(set())

    def _build(self, ancestors, /):
        if id(self) in ancestors:
            raise ValueError(f"build() found a cycle through {self._name!r}")
        ancestors = ancestors | {id(self)}
        return ArgumentNode(
            self._name,
            self._type,
            self._requirements,
            self._executor,
            (child._build(ancestors) if isinstance(child, ArgumentBuilder) else child for child in self._children),
        )

    def __repr__(self):
        return "ArgumentBuilder(name=%r, type=%r, children=%r)" % (
            self._name, self._type, [child.name for child in self._children]
        )


def literal(text, /, ignorecase=False):
    """
    Start a builder for a literal word; the node is named after the word.
    """
    return ArgumentBuilder(text, Literal(text, ignorecase))


def argument(name, type, /):
    """
    Start a builder for a typed argument stored under name.
    """
    return ArgumentBuilder(name, type)


__all__ = (
    "Requirement",
    "ArgumentNode",
    "ArgumentBuilder",
    "literal",
    "argument",
    "permission",
)
