# pegcomb/runtime.py
from __future__ import annotations
from typing import Optional

from .ast import Node
from .context import Context
from .engine import evaluate
from .tree import Tree


class Runner:
    """Run one grammar over many inputs.

    Every run gets a fresh Context, so a Runner can be shared between threads.
    """
    def __init__(self, parser: Node, *, strict: bool = False, debug: bool = False):
        self.parser = parser
        self.strict = strict
        self.debug = debug

    def new_context(self) -> Context:
        return Context(strict=self.strict, debug=self.debug)

    def run(self, text: str, pos: int = 0) -> Optional[Tree]:
        return evaluate(self.parser, text, pos, self.new_context())

    def run_all(self, text: str) -> Optional[Tree]:
        """Like run(), but only succeeds when the whole input is consumed."""
        tree = self.run(text)
        if tree is None or tree.end != len(text):
            return None
        return tree


def parse(parser: Node, text: str, pos: int = 0, *,
          strict: bool = False, debug: bool = False) -> Optional[Tree]:
    return Runner(parser, strict=strict, debug=debug).run(text, pos)


def parse_all(parser: Node, text: str, *,
              strict: bool = False, debug: bool = False) -> Optional[Tree]:
    return Runner(parser, strict=strict, debug=debug).run_all(text)
