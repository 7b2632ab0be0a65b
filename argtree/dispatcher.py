"""
argtree dispatcher: the tree walk behind execution and completion.

phases (both modes, per node, starting at the root)
- gate
  • evaluate the node's requirements in order; the first one that does not
    hold halts the walk with a RequirementFailure carrying its message
    (possibly None). nothing past that node is looked at.
- terminal
  • dispatch: no token left → run the executor (outcome EXECUTED), or halt
    with IncompleteCommand when the node is not executable.
  • suggest: exactly one token left → it is the one being typed; every child
    whose requirements hold contributes suggestions for it, in declaration
    order, and the walk stops. gated children are skipped silently.
    no token left → nothing to complete.
- selection
  • children parse the remaining tokens in declaration order; the first Ok
    wins, its value is bound on the context under the child's name and the
    walk moves into that child. no backtracking into later siblings.
  • a failed parse must leave the tokens untouched; the dispatcher restores
    them anyway so a misbehaving type cannot corrupt the siblings' attempt.
  • no child matches → DispatchExhausted with the last parse message, or
    "Unknown or incomplete command" when the node has no children. with a
    single child the fault is a ParseError (a DispatchExhausted as well).

reporting
- a halted walk stores the fault on context.fault, marks an execution
  context FAILED and calls the failure handler once with
  (context, fault.message).

threading
- the dispatcher keeps no per-call state: tokens and the context are local
  to the call and nodes are immutable, so any number of threads may share
  one dispatcher and one tree.
"""
import logging
from collections import deque

from .contexts import ExecutionContext, Outcome
from .faults import RequirementFailure, IncompleteCommand, DispatchExhausted, ParseError
from .results import Ok, Err
from .utils import *

logger = logging.getLogger(__name__)


class Dispatcher:
    failure = mirror("failure")

    def __init__(self, failure=None, /):
        if failure is not None and not callable(failure):
            raise TypeError("Dispatcher 'failure' must be callable")
        self._failure = failure

    def dispatch(self, root, tokens, context, /):
        """
        Parse tokens (label first) against the tree at root and run the
        executor they lead to. Returns the context.
        """
        tokens = deque(tokens)
        if tokens:
            tokens.popleft()
        node, index, path = root, 1, []

        while True:
            if fault := self._gate(root, node, index, context):
                return self._fail(context, fault)

            if not tokens:
                if node.executable:
                    logger.debug("executing %r for %r", node.name, context.tokens)
                    node.executor(context)
                    if context.outcome is Outcome.PENDING:
                        context.outcome = Outcome.EXECUTED
                    return context
                return self._fail(context, IncompleteCommand(
                    "Incomplete command",
                    command=root.name,
                    index=index,
                    hint=self._hint(path, node),
                ))

            match self._select(node, tokens, context):
                case Ok(child):
                    index = len(context.tokens) - len(tokens)
                    path.append(node.usage)
                    node = child
                case Err(message):
                    return self._fail(context, self._exhausted(node)(
                        message,
                        command=root.name,
                        index=index,
                        token=tokens[0],
                        hint=self._hint(path, node),
                    ))

    def suggest(self, root, tokens, context, /):
        """
        Walk tokens (label first) against the tree at root up to the last
        token and collect completions for it. Returns the context.
        """
        tokens = deque(tokens)
        if tokens:
            tokens.popleft()
        node, index = root, 1

        while True:
            if fault := self._gate(root, node, index, context):
                return self._fail(context, fault)

            if not tokens:
                return context

            if len(tokens) == 1:
                context.partial = tokens[0]
                for child in node.children:
                    if all(requirement.test(context) for requirement in child.requirements):
                        child.type.suggestions(context)
                logger.debug("suggesting %r for %r", context.suggestions, context.tokens)
                return context

            match self._select(node, tokens, context):
                case Ok(child):
                    index = len(context.tokens) - len(tokens)
                    node = child
                case Err(message):
                    return self._fail(context, self._exhausted(node)(
                        message,
                        command=root.name,
                        index=index,
                        token=tokens[0],
                    ))

    def _gate(self, root, node, index, context, /):
        for requirement in node.requirements:
            if not requirement.test(context):
                return RequirementFailure(
                    requirement.message,
                    command=root.name,
                    node=node.name,
                    index=index,
                )
        return None

    def _select(self, node, tokens, context, /):
        message = None
        for child in node.children:
            snapshot = tuple(tokens)
            match child.type.parse(tokens):
                case Ok(value):
                    context.bind(child.name, value)
                    return Ok(child)
                case Err(message):
                    if tuple(tokens) != snapshot:
                        logger.warning("%r changed the tokens on a failed parse, restoring them", child.type)
                        tokens.clear()
                        tokens.extend(snapshot)
                case result:
                    raise TypeError("%r parse() must return Ok or Err, not %r" % (child.type, result))
        return Err(message or "Unknown or incomplete command")

    @staticmethod
    def _exhausted(node, /):
        # a lone child failing is that argument's parse error
        return ParseError if len(node.children) == 1 else DispatchExhausted

    @staticmethod
    def _hint(path, node, /):
        try:
            usage = next(node.usages())
        except StopIteration:
            return None
        return "usage: %s" % " ".join((*path, usage))

    def _fail(self, context, fault, /):
        logger.debug("halting %r: %s", context.tokens, fault)
        context.fault = fault
        if isinstance(context, ExecutionContext):
            context.outcome = Outcome.FAILED
        if self._failure is not None:
            self._failure(context, fault.message)
        return context


__all__ = (
    "Dispatcher",
)
