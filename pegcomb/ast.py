# pegcomb/ast.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Optional, Tuple, Union, TYPE_CHECKING
from uuid import UUID, uuid4

from .errors import UnboundParserError

if TYPE_CHECKING:
    from .context import Context
    from .tree import Tree

# ---- Parser node definitions ----
#
# Every node mints its own ident at construction; the ident (not structural
# equality) keys the packrat cache, hence eq=False. Nodes are immutable except
# for Indirect, which is bound once while the grammar is being built.

# fn(text, pos) -> length of the match at pos, or None
MatchFn = Callable[[str, int], Optional[int]]


def _ident() -> UUID:
    return uuid4()


class _Ops:
    """Parse entry point and fluent wrappers shared by all nodes."""

    # Seq and Left may re-enter themselves at an unchanged position; every
    # other composite is guarded when reached through an Indirect
    guarded = False

    def parse(self, text: str, start: int = 0,
              ctx: Optional["Context"] = None) -> Optional["Tree"]:
        # local imports: engine depends on this module
        from .context import Context
        from .engine import evaluate
        if ctx is None:
            ctx = Context()
        return evaluate(self, text, start, ctx)  # type: ignore[arg-type]

    def tagged(self, tag: str) -> "Node":
        return Tagged(self, tag)

    def omit(self) -> "Node":
        return Omit(self)

    def token(self) -> "Node":
        return Token(self)

    def star(self) -> "Node":
        return Repeat(self, 0)

    def plus(self) -> "Node":
        return Repeat(self, 1)

    def opt(self) -> "Node":
        return Opt(self)


@dataclass(frozen=True, eq=False)
class Matcher(_Ops):
    fn: MatchFn
    name: str = "matcher"
    tag: Optional[str] = None
    ident: UUID = field(default_factory=_ident, init=False, repr=False)

    def tagged(self, tag: str) -> "Matcher":
        return Matcher(self.fn, self.name, tag)

    def star(self) -> "Node":
        """Zero-or-more closure as a single matcher; never fails.

        A tagged matcher repeats as a Repeat so each match stays a child.
        """
        if self.tag is not None:
            return Repeat(self, 0)
        fn = self.fn

        def closure(text: str, pos: int) -> Optional[int]:
            cur = pos
            while cur < len(text):
                n = fn(text, cur)
                if not n:
                    break
                cur += n
            return cur - pos

        return Matcher(closure, f"{self.name}*")

    def __str__(self) -> str:
        return f"{self.name}:{self.tag}" if self.tag else self.name


@dataclass(frozen=True, eq=False)
class Seq(_Ops):
    items: Tuple["Node", ...]
    ident: UUID = field(default_factory=_ident, init=False, repr=False)

    guarded = True

    def __str__(self) -> str:
        return "(seq %s)" % " ".join(str(p) for p in self.items)


@dataclass(frozen=True, eq=False)
class Choice(_Ops):
    alts: Tuple["Node", ...]
    ident: UUID = field(default_factory=_ident, init=False, repr=False)

    def __str__(self) -> str:
        return "(or %s)" % " ".join(str(p) for p in self.alts)


@dataclass(frozen=True, eq=False)
class Opt(_Ops):
    node: "Node"
    ident: UUID = field(default_factory=_ident, init=False, repr=False)

    def __str__(self) -> str:
        return f"opt({self.node})"


@dataclass(frozen=True, eq=False)
class Repeat(_Ops):
    node: "Node"
    min: int  # 0 = star, 1 = plus
    ident: UUID = field(default_factory=_ident, init=False, repr=False)

    def star(self) -> "Node":
        if self.min == 0:
            return self
        return Repeat(self.node, 0)

    def __str__(self) -> str:
        return f"{'star' if self.min == 0 else 'plus'}({self.node})"


@dataclass(frozen=True, eq=False)
class And(_Ops):
    node: "Node"  # positive lookahead
    ident: UUID = field(default_factory=_ident, init=False, repr=False)

    def __str__(self) -> str:
        return f"&{self.node}"


@dataclass(frozen=True, eq=False)
class Not(_Ops):
    node: "Node"  # negative lookahead
    ident: UUID = field(default_factory=_ident, init=False, repr=False)

    def __str__(self) -> str:
        return f"!{self.node}"


@dataclass(frozen=True, eq=False)
class Tagged(_Ops):
    node: "Node"
    tag: str
    ident: UUID = field(default_factory=_ident, init=False, repr=False)

    def __str__(self) -> str:
        return f"{self.node}:{self.tag}"


@dataclass(frozen=True, eq=False)
class Omit(_Ops):
    node: "Node"
    ident: UUID = field(default_factory=_ident, init=False, repr=False)

    def omit(self) -> "Node":
        return self

    def __str__(self) -> str:
        return f"omit({self.node})"


@dataclass(frozen=True, eq=False)
class Token(_Ops):
    node: "Node"
    ident: UUID = field(default_factory=_ident, init=False, repr=False)

    def token(self) -> "Node":
        return self

    def __str__(self) -> str:
        return f"token({self.node})"


@dataclass(frozen=True, eq=False)
class Left(_Ops):
    """base (continuation)*, folded to the left."""
    base: "Node"
    cont: "Node"
    tag: Optional[str] = None
    ident: UUID = field(default_factory=_ident, init=False, repr=False)

    guarded = True

    def tagged(self, tag: str) -> "Left":
        # the tag goes on every fold node, not only the outermost one
        return Left(self.base, self.cont, tag)

    def __str__(self) -> str:
        head = f"left:{self.tag}" if self.tag else "left"
        return f"({head} {self.base} {self.cont})"


class Indirect(_Ops):
    """Forward reference for recursive grammars.

        expr = indirect("expr")
        term = seq(expr, exactly("*"), expr)
        expr.bind(term)
    """

    def __init__(self, name: str = ""):
        self.name = name
        self.target: Optional[Node] = None

    @property
    def ident(self) -> Optional[UUID]:
        if self.target is None:
            return None
        return self.target.ident

    def bind(self, parser: "Node") -> "Indirect":
        if self.target is not None:
            raise ValueError(f"indirect parser {self} is already bound")
        if parser is self:
            raise ValueError("indirect parser cannot be bound to itself")
        self.target = parser
        return self

    def resolve(self) -> "Node":
        """Follow proxy chains to the real parser."""
        node: Node = self
        seen = set()
        while isinstance(node, Indirect):
            if node.target is None:
                raise UnboundParserError(f"indirect parser {node} invoked before bind()")
            if id(node) in seen:
                raise UnboundParserError(f"indirect parser {self} only reaches other proxies")
            seen.add(id(node))
            node = node.target
        return node

    def __str__(self) -> str:
        return f"[&{self.name}]"

    def __repr__(self) -> str:
        state = "bound" if self.target is not None else "unbound"
        return f"Indirect({self.name!r}, {state})"


Node = Union[Matcher, Seq, Choice, Opt, Repeat, And, Not, Tagged, Omit, Token, Left, Indirect]
