import pytest

from simplex_explorer.errors import ParseError
from simplex_explorer.lp.constraints import Constraint, ConstraintSet, Operator, compile_constraints
from simplex_explorer.lp.expression import LinearExpression

TEXTBOOK = "x <= 200\ny <= 300\nx + y + z <= 400\ny + 3z <= 600"


def expr(text: str) -> LinearExpression:
    return LinearExpression.parse(text, allow_reserved=True)


def test_operator_inverse_is_involutive():
    assert Operator.EQUAL.inverse is Operator.EQUAL
    assert Operator.LESS.inverse is Operator.GREATER_EQUAL
    assert Operator.GREATER.inverse is Operator.LESS_EQUAL
    for operator in Operator:
        assert operator.inverse.inverse is operator


def test_constraint_inverse_and_satisfaction():
    constraint = Constraint.parse("x + y < 4")
    point = {"x": 1.0, "y": 3.0}

    assert not constraint.is_satisfied(point, tolerance=0.0)
    assert constraint.inverse().is_satisfied(point, tolerance=0.0)
    assert str(constraint.inverse()) == "x + y >= 4"


def test_constraint_is_stored_as_given():
    constraint = Constraint.parse("2x >= y - 1")
    assert constraint.left == expr("2x")
    assert constraint.right == expr("y - 1")
    assert not constraint.is_canonical()
    assert constraint.basic_variable is None


@pytest.mark.parametrize(
    "text,rows",
    [
        ("x + 2y <= 14", ["@0 = 14 - x - 2y"]),
        ("x + 2y < 14", ["@0 = 14 - x - 2y"]),
        ("3x - y >= 2", ["@0 = -2 + 3x - y"]),
        ("3x > y", ["@0 = 3x - y"]),
        ("x + y = 4", ["@0 = 4 - x - y", "@1 = -4 + x + y"]),
    ],
)
def test_add_constraint_standardises_with_slacks(text, rows):
    constraint_set = ConstraintSet()
    names = constraint_set.add_constraint(Constraint.parse(text))

    assert [str(row) for row in constraint_set] == rows
    assert names == [f"@{idx}" for idx in range(len(rows))]
    assert constraint_set.is_valid()


def test_slack_counter_continues_across_rows():
    constraint_set = compile_constraints("x = 1\ny <= 2\nx + y >= 0")

    assert len(constraint_set) == 4
    assert constraint_set.basic_variables() == ["@0", "@1", "@2", "@3"]
    assert constraint_set.slack_counter == 4


def test_compile_ignores_blank_lines():
    constraint_set = compile_constraints("\n" + TEXTBOOK + "\n\n   \n")
    assert len(constraint_set) == 4
    assert constraint_set.structural_variables() == ["x", "y", "z"]


def test_compile_reports_line_of_parse_error():
    with pytest.raises(ParseError) as info:
        compile_constraints("x <= 1\n\nx + + y <= 3")
    assert info.value.line == 3
    assert str(info.value).startswith("Line 3:")


def test_most_restrictive_picks_tightest_row():
    constraint_set = compile_constraints(TEXTBOOK)

    assert constraint_set.most_restrictive("x") == 0
    assert constraint_set.most_restrictive("y") == 1
    assert constraint_set.most_restrictive("z") == 3
    assert constraint_set.most_restrictive("w") is None


def test_most_restrictive_ignores_rows_that_loosen():
    constraint_set = compile_constraints("y - x <= 5")
    # @0 = 5 + x - y: x only relaxes the row
    assert constraint_set.most_restrictive("x") is None
    assert constraint_set.most_restrictive("y") == 0


def test_pivot_isolates_entering_variable_and_substitutes():
    constraint_set = compile_constraints(TEXTBOOK)
    value = constraint_set.pivot(0, "x")

    assert value == expr("200 - @0")
    assert str(constraint_set[0]) == "x = 200 - @0"
    assert constraint_set[2].right == expr("200 + @0 - y - z")
    assert constraint_set[1].right == expr("300 - y")
    assert constraint_set.is_valid()
    assert constraint_set.basic_variables() == ["x", "@1", "@2", "@3"]


def test_pivot_rejects_absent_variable():
    constraint_set = compile_constraints(TEXTBOOK)
    with pytest.raises(ValueError):
        constraint_set.pivot(1, "x")


def test_is_valid_detects_non_canonical_rows():
    constraint_set = ConstraintSet([Constraint.parse("x + y <= 3")])
    assert not constraint_set.is_valid()

    self_referencing = ConstraintSet([Constraint(expr("@0"), Operator.EQUAL, expr("1 + @0"))])
    assert not self_referencing.is_valid()


def test_feasibility_of_slack_basis():
    assert compile_constraints(TEXTBOOK).is_feasible()
    assert not compile_constraints("x + y >= 2").is_feasible()


def test_copy_is_deep():
    original = compile_constraints(TEXTBOOK)
    duplicate = original.copy()
    duplicate.pivot(0, "x")

    assert original != duplicate
    assert str(original[0]) == "@0 = 200 - x"
    assert duplicate.slack_counter == original.slack_counter
