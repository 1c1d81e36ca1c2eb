# pegcomb/tree.py
from __future__ import annotations
import json
from dataclasses import dataclass
from typing import Optional, Tuple

# ---- Parse result ----

@dataclass(frozen=True)
class Tree:
    """Result of one successful match.

    `matched` is always `text[start:start + len(matched)]`. Only tagged
    sub-results end up in `children` (see engine._retained). `omit` is set by
    omit() and lookahead parsers so enclosing parsers skip the tree.
    """
    start: int
    matched: str = ""
    children: Tuple["Tree", ...] = ()
    tag: Optional[str] = None
    omit: bool = False

    @property
    def end(self) -> int:
        return self.start + len(self.matched)

    def __str__(self) -> str:
        return render(self)


def _quote(s: str) -> str:
    return json.dumps(s, ensure_ascii=False)


def render(tree: Optional[Tree]) -> str:
    """S-expression form: `"m"`, `(tag "m")`, `(c1 c2)` or `(tag c1 c2)`."""
    if tree is None:
        return "<nil>"
    if not tree.children:
        if tree.tag:
            return f"({tree.tag} {_quote(tree.matched)})"
        return _quote(tree.matched)
    inner = " ".join(render(c) for c in tree.children)
    if tree.tag:
        return f"({tree.tag} {inner})"
    return f"({inner})"
