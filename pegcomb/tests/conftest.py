import pytest

from pegcomb import digits, exactly, first_of, indirect, left, letters, seq


def _walk(tree):
    yield tree
    for child in tree.children:
        yield from _walk(child)


@pytest.fixture
def walk():
    return _walk


@pytest.fixture
def expr_grammar():
    """Arithmetic with the usual precedence, operators tagged "op"."""
    expr = indirect("expr")
    var = letters().tagged("var")
    num = digits().tagged("num")
    factor = first_of(
        var,
        num,
        seq(exactly("(").omit(), expr, exactly(")").omit()).tagged("expr"),
    )
    term = left(
        factor,
        seq(first_of(exactly("*"), exactly("/")).tagged("op"), factor),
        tag="prod",
    )
    sum_ = left(
        term,
        seq(first_of(exactly("+"), exactly("-")).tagged("op"), term),
        tag="sum",
    )
    expr.bind(sum_)
    return sum_
