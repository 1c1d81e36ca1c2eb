# pegcomb/__init__.py
"""Packrat parser combinators.

This package provides:
- Primitive matchers over text (letters, digits, literals, classes, regex)
- Combinators: sequence, ordered choice, optional, repetition, lookahead,
  indirection for recursive grammars, and a left-associative fold
- Output shaping: tagging, omission and tokenizing
- A memoizing engine with a left-recursion guard, driven by a per-parse Context

Parsing never raises for ordinary failure; a parser returns a Tree or None.
"""

from .tree import Tree, render
from .errors import UnboundParserError, LeftRecursionError, LeftRecursionWarning
from .context import Context, CacheStats
from .ast import (
    Matcher, Seq, Choice, Opt, Repeat, And, Not, Tagged, Omit, Token, Left,
    Indirect, Node,
)
from .matchers import (
    matcher, any_char, letter, letters, digit, digits, space, whitespace,
    exactly, exactly_ci, pattern, char_class,
)
from .combinators import (
    seq, first_of, opt, star, plus, looking_at, not_, indirect, left,
    tagged, omit, token,
)
from .runtime import Runner, parse, parse_all
