# pegcomb/combinators.py
"""Combinator constructors.

Grammars are values built bottom-up:

    num  = digits().tagged("num")
    sum_ = left(num, seq(exactly("+").tagged("op"), num), tag="sum")
    sum_.parse("1+2+3")

Each call mints a fresh parser identity, so two identical-looking parsers
never share cache entries.
"""

from __future__ import annotations
from typing import Optional, Tuple

from .ast import (
    Matcher, Seq, Choice, Opt, Repeat, And, Not, Left, Indirect, Node, _Ops,
)


def _check(parsers: Tuple[object, ...]) -> Tuple[Node, ...]:
    for p in parsers:
        if not isinstance(p, _Ops):
            raise TypeError(f"expected a parser, got {p!r}")
    return parsers  # type: ignore[return-value]


def seq(*parsers: Node) -> Seq:
    """All of `parsers`, left to right; fails as a whole if any fails."""
    return Seq(_check(parsers))


def first_of(*parsers: Node) -> Choice:
    """First of `parsers` that succeeds, in declared order."""
    return Choice(_check(parsers))


def opt(parser: Node) -> Opt:
    return Opt(_check((parser,))[0])


def _body(parsers: Tuple[Node, ...]) -> Node:
    _check(parsers)
    if not parsers:
        raise TypeError("repetition needs at least one parser")
    if len(parsers) == 1:
        return parsers[0]
    return Seq(parsers)


def star(*parsers: Node) -> Node:
    """Zero or more; several parsers repeat as one sequence."""
    body = _body(parsers)
    if isinstance(body, (Matcher, Repeat)):
        return body.star()
    return Repeat(body, 0)


def plus(*parsers: Node) -> Repeat:
    return Repeat(_body(parsers), 1)


def looking_at(parser: Node) -> And:
    """Empty match if `parser` would match here; consumes nothing."""
    return And(_check((parser,))[0])


def not_(parser: Node) -> Not:
    """Empty match if `parser` would fail here. not_(any_char()) is end of input."""
    return Not(_check((parser,))[0])


def indirect(name: str = "") -> Indirect:
    return Indirect(name)


def left(base: Node, continuation: Node, tag: Optional[str] = None) -> Left:
    """Left-associative fold: base (continuation)*.

    Each continuation match wraps the tree built so far:
    children = [accumulated, *continuation's own children]. A tag on the
    continuation itself is not kept; tag its parts instead.
    """
    _check((base, continuation))
    return Left(base, continuation, tag)


def tagged(parser: Node, tag: str) -> Node:
    return _check((parser,))[0].tagged(tag)


def omit(parser: Node) -> Node:
    return _check((parser,))[0].omit()


def token(parser: Node) -> Node:
    return _check((parser,))[0].token()
