# pegcomb/matchers.py
"""Primitive matchers: leaf parsers over raw text.

Each primitive wraps a pure function `fn(text, pos) -> length | None` in a
`Matcher`; caching and tagging come from the engine. Unicode classification
goes through `regex` (`\\p{L}`, `\\p{Nd}`, `\\p{White_Space}`).
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import FrozenSet, Optional, Tuple

import regex

from .ast import Matcher, MatchFn

_FLAG_MAP = {
    'i': regex.IGNORECASE,
    'm': regex.MULTILINE,
    's': regex.DOTALL,
    'x': regex.VERBOSE,
    'A': regex.ASCII,
    # 'U' is the default for str patterns
}

_LETTER = regex.compile(r"\p{L}")
_LETTERS = regex.compile(r"\p{L}+")
_DIGIT = regex.compile(r"\p{Nd}")
_DIGITS = regex.compile(r"\p{Nd}+")
_SPACE = regex.compile(r"\p{White_Space}")
_SPACES = regex.compile(r"\p{White_Space}+")


def _compile_regex(pat: str, flags: str) -> "regex.Pattern":
    f = 0
    for ch in flags:
        if ch == 'U':
            continue
        if ch not in _FLAG_MAP:
            raise ValueError(f"unknown regex flag {ch!r}")
        f |= _FLAG_MAP[ch]
    return regex.compile(pat, f)


def _from_regex(rx: "regex.Pattern", name: str) -> Matcher:
    def fn(text: str, pos: int) -> Optional[int]:
        m = rx.match(text, pos)
        if m is None:
            return None
        return m.end() - pos
    return Matcher(fn, name)


def matcher(fn: MatchFn, name: str = "matcher") -> Matcher:
    """Custom primitive. Distinct calls give distinct identities."""
    if not callable(fn):
        raise TypeError(f"matching function must be callable, got {fn!r}")
    return Matcher(fn, name)


def any_char() -> Matcher:
    """Any single character; fails only at end of input."""
    def fn(text: str, pos: int) -> Optional[int]:
        return 1 if pos < len(text) else None
    return Matcher(fn, "any")


def letter() -> Matcher:
    return _from_regex(_LETTER, "letter")


def letters() -> Matcher:
    return _from_regex(_LETTERS, "letter+")


def digit() -> Matcher:
    return _from_regex(_DIGIT, "digit")


def digits() -> Matcher:
    return _from_regex(_DIGITS, "digit+")


def space() -> Matcher:
    return _from_regex(_SPACE, "space")


def whitespace() -> Matcher:
    return _from_regex(_SPACES, "space+")


def exactly(s: str) -> Matcher:
    """Case-sensitive literal. exactly("") always matches empty."""
    n = len(s)

    def fn(text: str, pos: int) -> Optional[int]:
        return n if text.startswith(s, pos) else None
    return Matcher(fn, f"`{s}`")


def exactly_ci(s: str) -> Matcher:
    """Case-insensitive literal using full case folding.

    The matched span can differ in length from `s` ("STRASSE" vs "straße").
    """
    rx = regex.compile(regex.escape(s), regex.IGNORECASE | regex.FULLCASE)
    return _from_regex(rx, f"`{s}`i")


def pattern(pat: str, flags: str = "") -> Matcher:
    """Regex anchored at the current position, e.g. pattern(r"[0-9]+", "i")."""
    return _from_regex(_compile_regex(pat, flags), f"/{pat}/{flags}")


# ---- Character classes ----

@dataclass(frozen=True)
class _CharClass:
    negated: bool
    # ranges are inclusive codepoints (lo..hi)
    ranges: Tuple[Tuple[int, int], ...]
    singles: FrozenSet[str]


def _class_match(cc: _CharClass, ch: str) -> bool:
    ok = ch in cc.singles
    if not ok:
        cp = ord(ch)
        for (lo, hi) in cc.ranges:
            if lo <= cp <= hi:
                ok = True
                break
    return (not ok) if cc.negated else ok


def _parse_class(body: str) -> _CharClass:
    """Parse a class body such as "a-zA-Z_" or "^0-9" (no brackets)."""
    i = 0
    n = len(body)
    neg = body.startswith("^")
    if neg:
        i = 1

    def hexval(digits: str, width: int) -> int:
        if len(digits) != width:
            raise ValueError(f"short hex escape {digits!r} in class {body!r}")
        try:
            return int(digits, 16)
        except ValueError:
            raise ValueError(f"invalid hex escape {digits!r} in class {body!r}")

    def read_char() -> str:
        nonlocal i
        c = body[i]
        i += 1
        if c != "\\":
            return c
        if i >= n:
            raise ValueError(f"dangling escape in class {body!r}")
        e = body[i]
        i += 1
        if e == "n": return "\n"
        if e == "r": return "\r"
        if e == "t": return "\t"
        if e == "x":
            h = body[i:i + 2]
            i += 2
            return chr(hexval(h, 2))
        if e == "u":
            h = body[i:i + 4]
            i += 4
            return chr(hexval(h, 4))
        # \\ \] \- \^ and anything else: the character itself
        return e

    ranges = []
    singles = []
    while i < n:
        a = read_char()
        # a trailing '-' is literal
        if i < n - 1 and body[i] == "-":
            i += 1
            b = read_char()
            if ord(a) > ord(b):
                a, b = b, a
            ranges.append((ord(a), ord(b)))
        else:
            singles.append(a)
    if not ranges and not singles:
        raise ValueError("empty character class")
    return _CharClass(negated=neg, ranges=tuple(ranges), singles=frozenset(singles))


def char_class(body: str) -> Matcher:
    """One character in (or, with a leading '^', not in) the class.

    Use `.star()` on the result for the zero-or-more closure.
    """
    cc = _parse_class(body)

    def fn(text: str, pos: int) -> Optional[int]:
        if pos < len(text) and _class_match(cc, text[pos]):
            return 1
        return None
    return Matcher(fn, f"[{body}]")
