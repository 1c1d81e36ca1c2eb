# pegcomb/context.py
"""Per-parse state: packrat cache, recursion guard stack and options.

A Context is created for one top-level parse and threaded by reference
through every call. Never share one between concurrent parses; grammars
themselves hold no per-call state, so separate Contexts are independent.
"""

from __future__ import annotations
import copy
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple
from uuid import UUID

from .tree import Tree

# (parser ident, start position)
Key = Tuple[UUID, int]


@dataclass
class CacheStats:
    hits: int = 0
    misses: int = 0
    left_recursions: int = 0


@dataclass
class _GuardState:
    # shared between a Context and its flat view
    active: List[Key] = field(default_factory=list)
    # lowest stack index whose frame hit the guard, while that frame is open
    taint: Optional[int] = None


class Context:
    def __init__(self, *, strict: bool = False, debug: bool = False):
        self.cache: Dict[Key, Optional[Tree]] = {}
        # results of childless nodes (matchers, lookahead, omit, token) are the
        # same in both views, so the flat view shares this one
        self.leaf_cache: Dict[Key, Optional[Tree]] = {}
        self.with_children = True
        self.strict = strict
        self.debug = debug
        self.stats = CacheStats()
        self._guard = _GuardState()
        self._flat: Optional[Context] = None

    @property
    def active(self) -> List[Key]:
        return self._guard.active

    def without_children(self) -> "Context":
        """View used by token/omit/lookahead parsers.

        Shares the guard stack, stats, options and leaf cache; keeps a separate
        cache for everything else so a childless tree is never served to a
        call site that wants children.
        """
        if not self.with_children:
            return self
        if self._flat is None:
            flat = copy.copy(self)
            flat.cache = {}
            flat.with_children = False
            flat._flat = None
            self._flat = flat
        return self._flat

    # ---- Recursion guard ----
    def is_active(self, key: Key) -> bool:
        return key in self._guard.active

    @contextmanager
    def activate(self, key: Key) -> Iterator[None]:
        self._guard.active.append(key)
        try:
            yield
        finally:
            self._guard.active.pop()

    def mark_left_recursion(self, key: Key) -> None:
        self.stats.left_recursions += 1
        idx = self._guard.active.index(key)
        g = self._guard
        if g.taint is None or idx < g.taint:
            g.taint = idx

    def may_cache(self, depth: Optional[int] = None) -> bool:
        """Whether a result completing now can be memoized.

        `depth` is the stack index of a guarded frame that just popped. While
        a frame that hit the guard is open, results computed under it rely on
        the provisional failure and stay out of the cache; the frame itself
        settles the taint.
        """
        g = self._guard
        if g.taint is None:
            return True
        if depth is not None and depth == g.taint:
            g.taint = None
            return True
        return False
