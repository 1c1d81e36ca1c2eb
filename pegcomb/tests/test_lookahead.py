import pytest

from pegcomb import (
    Tree, any_char, digit, digits, exactly, letter, letters, looking_at, not_,
    render, seq,
)


@pytest.mark.parametrize("parser, text, start, expected", [
    (looking_at(exactly("")), "", 0, '""'),
    (looking_at(exactly("foo")), "foobar", 0, '""'),
    (looking_at(exactly("bar")), "foobar", 0, "<nil>"),
    (looking_at(exactly("bar")), "foobar", 3, '""'),
    (not_(letter()), "1", 0, '""'),
    (not_(digits()), "abc", 0, '""'),
    (not_(digits()), "123", 0, "<nil>"),
    (not_(any_char()), "", 0, '""'),
])
def test_lookahead(parser, text, start, expected):
    assert render(parser.parse(text, start)) == expected


def test_lookahead_consumes_nothing():
    assert looking_at(letters()).parse("abc", 1) == Tree(1, omit=True)
    assert not_(digit()).parse("abc", 2) == Tree(2, omit=True)


def test_end_of_input():
    word = seq(letters().tagged("w"), not_(any_char()))
    assert word.parse("abc") == Tree(0, "abc", (Tree(0, "abc", tag="w"),))
    assert word.parse("abc1") is None


def test_lookahead_does_not_pollute_children():
    number = seq(looking_at(digit().tagged("d")), digits().tagged("n"))
    assert number.parse("12") == Tree(0, "12", (Tree(0, "12", tag="n"),))


def test_not_followed_by():
    keyword = seq(exactly("if").tagged("kw"), not_(letter()))
    assert keyword.parse("if x").children == (Tree(0, "if", tag="kw"),)
    assert keyword.parse("iffy") is None
