import pytest

from pegcomb import (
    Context, Tree, digit, digits, exactly, first_of, letter, letters, matcher,
    omit, render, seq, star, tagged, token,
)


def test_tag_overwrites():
    inner = seq(digits().tagged("n"))
    tree = tagged(tagged(inner, "a"), "b").parse("12")
    assert tree.tag == "b"
    assert tree.children == (Tree(0, "12", tag="n"),)


def test_tagging_does_not_touch_cached_inner_result():
    inner = seq(digits().tagged("n"))
    outer = inner.tagged("wrapped")
    ctx = Context()
    wrapped = outer.parse("12", 0, ctx)
    plain = inner.parse("12", 0, ctx)
    assert wrapped.tag == "wrapped"
    assert plain.tag is None
    assert wrapped.children == plain.children
    assert outer.ident != inner.ident


def test_tagged_failure():
    assert seq(digit()).tagged("x").parse("a") is None


def test_omit_in_sequence():
    parens = seq(exactly("(").omit(), digits().tagged("n"), exactly(")").omit())
    tree = parens.parse("(12)")
    assert tree.matched == "(12)"
    assert tree.children == (Tree(1, "12", tag="n"),)


def test_omit_tagged_child():
    tree = seq(digits().tagged("n").omit(), letters().tagged("l")).parse("1a")
    assert tree.children == (Tree(1, "a", tag="l"),)


def test_omit_keeps_span_and_failure():
    o = omit(letters().tagged("w"))
    assert o.parse("ab1") == Tree(0, "ab", tag="w", omit=True)
    assert o.parse("1") is None
    assert o.omit() is o


def test_omit_in_repetition():
    items = star(digit().tagged("d"), exactly(",").omit())
    assert [c.tag for c in items.parse("1,2,").children] == ["d", "d"]


@pytest.mark.parametrize("parser, text, expected", [
    (token(letters()), "abc def", '"abc"'),
    (token(digits()), "123 abc", '"123"'),
    (token(seq(letter(), star(first_of(letter(), digit())))), "xyz123 ", '"xyz123"'),
    (token(first_of(exactly("+"), exactly("-"))), "-", '"-"'),
    (seq(token(letters()).tagged("a"), token(exactly("+")), token(letters()).tagged("b")),
     "abc+def", '((a "abc") (b "def"))'),
    (token(seq(letter().tagged("a"), digits().tagged("b"))).tagged("id"), "x12", '(id "x12")'),
])
def test_token(parser, text, expected):
    assert render(parser.parse(text)) == expected


def test_token_keeps_inner_tag():
    tree = token(seq(letter().tagged("a"), digits().tagged("b")).tagged("id")).parse("x1")
    assert tree == Tree(0, "x1", tag="id")


def test_token_does_not_starve_other_call_sites():
    inner = seq(letter().tagged("a"), digits().tagged("b"))
    ctx = Context()
    assert token(inner).parse("x1", 0, ctx).children == ()
    assert len(inner.parse("x1", 0, ctx).children) == 2


def test_leaf_results_shared_between_views():
    calls = []

    def fn(text, pos):
        calls.append(pos)
        return 1 if text[pos:pos + 1].isalpha() else None

    m = matcher(fn, "counted")
    ctx = Context()
    seq(token(m), m).parse("ab", 0, ctx)
    token(m).parse("ab", 0, ctx)
    m.parse("ab", 0, ctx)
    assert calls == [0, 1]


def test_token_is_idempotent():
    t = token(letters())
    assert t.token() is t
