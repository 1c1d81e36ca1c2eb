# pegcomb/engine.py
from __future__ import annotations
import logging
import warnings
from dataclasses import replace
from typing import List, Optional, Tuple

from .ast import (
    Matcher, Seq, Choice, Opt, Repeat, And, Not, Tagged, Omit, Token, Left,
    Indirect, Node,
)
from .context import Context
from .errors import LeftRecursionError, LeftRecursionWarning
from .tree import Tree

# Packrat engine:
# - Every (node ident, pos) is evaluated at most once per Context.
# - Seq, Left and any composite reached through an Indirect guard against
#   re-entry at the same position; a re-entry fails that branch (or raises
#   in strict mode). No seed growing.
# - Trees are never mutated once built; shaping wrappers copy.

log = logging.getLogger("pegcomb")

# never produce children, whatever ctx.with_children says
_LEAVES = (Matcher, And, Not, Omit, Token)


def _retained(tree: Tree) -> Tuple[Tree, ...]:
    """What a sub-result contributes to its parent's children."""
    if tree.omit:
        return ()
    if tree.tag:
        return (tree,)
    return tree.children


def evaluate(node: Node, text: str, pos: int, ctx: Context) -> Optional[Tree]:
    guarded = node.guarded
    if isinstance(node, Indirect):
        # no cache entry of its own; ident belongs to the bound parser
        node = node.resolve()
        # any cycle runs through a proxy, so the target is guarded here
        guarded = not isinstance(node, Matcher)

    key = (node.ident, pos)
    cache = ctx.leaf_cache if isinstance(node, _LEAVES) else ctx.cache
    if key in cache:
        ctx.stats.hits += 1
        if ctx.debug:
            log.debug("cache hit %s @%d", node, pos)
        return cache[key]
    ctx.stats.misses += 1

    if guarded or node.guarded:
        if ctx.is_active(key):
            return _left_recursion(node, pos, ctx)
        depth = len(ctx.active)
        with ctx.activate(key):
            result = _eval(node, text, pos, ctx)
        cacheable = ctx.may_cache(depth)
    else:
        result = _eval(node, text, pos, ctx)
        # a matcher never sees a provisional failure
        cacheable = isinstance(node, Matcher) or ctx.may_cache()

    if ctx.debug:
        log.debug("%s @%d -> %s", node, pos,
                  "fail" if result is None else repr(result.matched))
    if cacheable:
        cache[key] = result
    return result


def _left_recursion(node: Node, pos: int, ctx: Context) -> None:
    ctx.mark_left_recursion((node.ident, pos))
    if ctx.debug:
        log.debug("left recursion %s @%d", node, pos)
    if ctx.strict:
        raise LeftRecursionError(node, pos)
    warnings.warn(f"left recursion in {node} at {pos}; branch fails",
                  LeftRecursionWarning, stacklevel=2)
    return None


# ---- Evaluator for each node kind ----
def _eval(node: Node, text: str, pos: int, ctx: Context) -> Optional[Tree]:
    if isinstance(node, Matcher):
        n = node.fn(text, pos)
        if n is None:
            return None
        return Tree(pos, text[pos:pos + n], tag=node.tag)

    if isinstance(node, Seq):
        cur = pos
        children: List[Tree] = []
        for item in node.items:
            sub = evaluate(item, text, cur, ctx)
            if sub is None:
                return None
            cur = sub.end
            if ctx.with_children:
                children.extend(_retained(sub))
        return Tree(pos, text[pos:cur], tuple(children))

    if isinstance(node, Choice):
        for alt in node.alts:
            sub = evaluate(alt, text, pos, ctx)
            if sub is not None:
                return sub
        return None

    if isinstance(node, Opt):
        sub = evaluate(node.node, text, pos, ctx)
        if sub is None:
            return Tree(pos)
        return sub

    if isinstance(node, Repeat):
        cur = pos
        count = 0
        children = []
        while True:
            sub = evaluate(node.node, text, cur, ctx)
            if sub is None:
                break
            count += 1
            if not sub.matched:
                break
            cur = sub.end
            if ctx.with_children:
                children.extend(_retained(sub))
            if cur >= len(text):
                break
        if count < node.min:
            return None
        return Tree(pos, text[pos:cur], tuple(children))

    if isinstance(node, And):
        sub = evaluate(node.node, text, pos, ctx.without_children())
        if sub is None:
            return None
        return Tree(pos, omit=True)

    if isinstance(node, Not):
        sub = evaluate(node.node, text, pos, ctx.without_children())
        if sub is not None:
            return None
        return Tree(pos, omit=True)

    if isinstance(node, Tagged):
        sub = evaluate(node.node, text, pos, ctx)
        if sub is None:
            return None
        return replace(sub, tag=node.tag)

    if isinstance(node, Omit):
        sub = evaluate(node.node, text, pos, ctx.without_children())
        if sub is None:
            return None
        return replace(sub, children=(), omit=True)

    if isinstance(node, Token):
        sub = evaluate(node.node, text, pos, ctx.without_children())
        if sub is None:
            return None
        if sub.children:
            return replace(sub, children=())
        return sub

    if isinstance(node, Left):
        return _eval_left(node, text, pos, ctx)

    raise AssertionError(f"unknown node: {node!r}")


def _eval_left(node: Left, text: str, pos: int, ctx: Context) -> Optional[Tree]:
    acc = evaluate(node.base, text, pos, ctx)
    if acc is None:
        return None
    cur = acc.end
    while cur < len(text):
        cont = evaluate(node.cont, text, cur, ctx)
        if cont is None or not cont.matched:
            break
        cur = cont.end
        children: Tuple[Tree, ...] = ()
        if ctx.with_children:
            children = (acc,) + cont.children
        acc = Tree(pos, text[pos:cur], children, tag=node.tag)
    return acc
