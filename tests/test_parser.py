import pytest

from simplex_explorer.errors import ParseError
from simplex_explorer.lp.constraints import Constraint, Operator
from simplex_explorer.lp.expression import LinearExpression
from simplex_explorer.lp.parser import parse_expression, parse_relation, tokenize


def test_parser_reads_constraint_with_constant_on_left():
    constraint = Constraint.parse("25 -8x + 12y + 3z <= 12")

    assert constraint.left == LinearExpression(25.0, {"x": -8.0, "y": 12.0, "z": 3.0})
    assert constraint.operator is Operator.LESS_EQUAL
    assert constraint.right == LinearExpression(12.0)


def test_bare_variables_default_to_unit_coefficients():
    e = parse_expression("x - y + z")
    assert e == LinearExpression(0.0, {"x": 1.0, "y": -1.0, "z": 1.0})


def test_whitespace_is_insignificant_and_terms_accumulate():
    assert parse_expression("  2 x+3   -x  ") == parse_expression("3 + x")


def test_decimals_and_explicit_multiplication():
    e = parse_expression("0.5*x + .25y - 1.")
    assert e == LinearExpression(-1.0, {"x": 0.5, "y": 0.25})


def test_empty_expression_is_zero():
    assert parse_expression("") == LinearExpression()


@pytest.mark.parametrize(
    "symbol,operator",
    [
        ("<=", Operator.LESS_EQUAL),
        (">=", Operator.GREATER_EQUAL),
        ("<", Operator.LESS),
        (">", Operator.GREATER),
        ("=", Operator.EQUAL),
        ("==", Operator.EQUAL),
    ],
)
def test_operators_match_longest_symbol_first(symbol, operator):
    constraint = Constraint.parse(f"x + y {symbol} 4")
    assert constraint.operator is operator
    assert constraint.right == LinearExpression(4.0)


@pytest.mark.parametrize(
    "text",
    [
        "x + - y",
        "3 * ",
        "* x",
        "x + $",
        "4 +",
    ],
)
def test_malformed_expressions_raise(text):
    with pytest.raises(ParseError):
        parse_expression(text)


@pytest.mark.parametrize("text", ["x + y", "x <= 3 <= 4", "<= 4", "x >="])
def test_malformed_constraints_raise(text):
    with pytest.raises(ParseError):
        parse_relation(text)


def test_reserved_prefix_is_rejected_in_user_input():
    with pytest.raises(ParseError, match="reserved"):
        parse_expression("x + @0")
    assert parse_expression("x + @0", allow_reserved=True).coefficient("@0") == 1.0


def test_parse_error_reports_position():
    with pytest.raises(ParseError) as info:
        parse_expression("2x + ? y")
    assert info.value.position == 5


def test_tokenize_keeps_positions():
    tokens = tokenize("3x <= 4")
    assert [(t.kind, t.text, t.position) for t in tokens] == [
        ("number", "3", 0),
        ("name", "x", 1),
        ("operator", "<=", 3),
        ("number", "4", 6),
    ]
