# pegcomb/errors.py
"""Programmer errors. Ordinary parse failure is never an exception (None)."""

from __future__ import annotations


class UnboundParserError(RuntimeError):
    """An indirect() proxy was invoked before bind()."""


class LeftRecursionError(RuntimeError):
    """A guarded parser re-entered itself at the same position (strict mode)."""

    def __init__(self, parser: object, pos: int):
        super().__init__(f"left recursion in {parser} at {pos}")
        self.parser = parser
        self.pos = pos


class LeftRecursionWarning(UserWarning):
    """Issued when the recursion guard fails a branch in non-strict mode."""
