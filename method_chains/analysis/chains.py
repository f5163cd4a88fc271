"""
Method-chain length detection over a coarse token stream.

A chain is a run of call sites ``name(...)`` joined by dots at one nesting
level, e.g. ``builder.a().b(x.c()).d()`` holds a chain of 3 plus an inner
chain of 1 inside the arguments of ``b``.

Scopes opened by ``(`` / ``[`` are tracked on an explicit stack of frames
rather than by recursion, so pathological nesting cannot exhaust the
interpreter's call stack. Each frame holds its own state and counter;
completed chains from every frame go to one flat output list, which keeps
the order a recursive walk would produce (inner results appear where the
inner scope closed).
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterable, List

from .tokenizer import Token


class ChainState(enum.Enum):
    START = "start"
    POTENTIAL = "potential"  # just saw a name
    PAREN_END = "paren_end"  # just closed a call / index
    CHAIN = "chain"  # just saw a dot


OPENERS = frozenset({Token.OPEN_PAREN, Token.OPEN_BRACKET})
CLOSERS = frozenset({Token.CLOSE_PAREN, Token.CLOSE_BRACKET})


@dataclass
class _Scope:
    state: ChainState = ChainState.START
    counter: int = 0


def detect_chain_lengths(tokens: Iterable[Token]) -> List[int]:
    """Return the length of every completed chain, in completion order.

    Unbalanced input is not an error: a closer always ends the current
    scope, and a closer with no open scope ends the analysis.
    """
    lengths: List[int] = []
    stack: List[_Scope] = [_Scope()]

    def finish(scope: _Scope) -> None:
        if scope.counter != 0:
            lengths.append(scope.counter)
            scope.counter = 0

    for token in tokens:
        scope = stack[-1]
        state = scope.state

        if token in CLOSERS:
            finish(scope)
            stack.pop()
            if not stack:
                return lengths
            continue

        if token in OPENERS:
            if state is ChainState.POTENTIAL:
                scope.state = ChainState.PAREN_END
                if token is Token.OPEN_PAREN:
                    scope.counter += 1  # call site; indexing doesn't count
            elif state is not ChainState.START:
                # PAREN_END / CHAIN: the pending counter stays unflushed here
                scope.state = ChainState.START
            stack.append(_Scope())
            continue

        if state is ChainState.START:
            if token is Token.STRING:
                scope.state = ChainState.POTENTIAL
        elif state is ChainState.CHAIN:
            if token is Token.STRING:
                scope.state = ChainState.POTENTIAL
            else:
                finish(scope)
                scope.state = ChainState.START
        else:  # POTENTIAL, PAREN_END
            if token is Token.DOT:
                scope.state = ChainState.CHAIN
            else:
                finish(scope)
                scope.state = ChainState.START

    while stack:
        finish(stack.pop())
    return lengths
