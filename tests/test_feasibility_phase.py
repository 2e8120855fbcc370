import pytest

from simplex_explorer.errors import InfeasibleError
from simplex_explorer.lp.constraints import Constraint, compile_constraints
from simplex_explorer.lp.expression import LinearExpression
from simplex_explorer.lp.program import AUX_VARIABLE
from simplex_explorer.lp.reference import solve_with_highs
from simplex_explorer.lp.solve import solve_text


def start(objective: str, constraints: str):
    return compile_constraints(constraints).maximize(LinearExpression.parse(objective))


def test_feasible_slack_basis_skips_feasibility_phase():
    simplex = start("x + y", "x <= 3\ny <= 3")
    assert not simplex.current().in_feasibility_phase


def test_greater_equal_rows_start_feasibility_phase():
    simplex = start("x + y", "x + y >= 2\nx <= 3\ny <= 3")
    initial = simplex.current()

    assert initial.in_feasibility_phase
    assert initial.objective == LinearExpression(0.0, {AUX_VARIABLE: -1.0})
    assert not initial.is_optimal()
    assert str(initial).splitlines()[0] == "max -@aux"

    first = simplex.advance()
    assert first.constraints[0].basic_variable == AUX_VARIABLE
    assert first.constraints.is_feasible()


def test_two_phase_reaches_optimum():
    simplex = start("x + y", "x + y >= 2\nx <= 3\ny <= 3")
    program = simplex.run_to_optimum()

    assert not program.in_feasibility_phase
    assert program.objective_value == pytest.approx(6.0)
    assert program.current_point() == pytest.approx({"x": 3.0, "y": 3.0})
    assert all(AUX_VARIABLE not in row.right.variables() for row in program.constraints)
    phases = [snapshot.in_feasibility_phase for snapshot in simplex.history]
    assert phases == sorted(phases, reverse=True)


def test_equality_is_enforced():
    simplex = start("x + 2y", "x + y = 4\nx <= 3")
    program = simplex.run_to_optimum()

    point = program.current_point()
    assert point["x"] + point["y"] == pytest.approx(4.0)
    assert program.objective_value == pytest.approx(8.0)


def test_contradictory_rows_are_infeasible():
    simplex = start("x", "x <= 1\nx >= 2")
    with pytest.raises(InfeasibleError) as info:
        simplex.run_to_optimum()
    assert info.value.residual == pytest.approx(-0.5)


def test_diet_problem_matches_known_optimum():
    report = solve_text("3x + 2y", "x + 2y >= 8\n3x + y >= 6", sense="min")

    assert report.status == "optimal"
    assert report.objective_value == pytest.approx(9.6, rel=1e-6)
    assert report.x["x"] == pytest.approx(0.8, rel=1e-6)
    assert report.x["y"] == pytest.approx(3.6, rel=1e-6)


@pytest.mark.parametrize(
    "objective,constraints",
    [
        ("x + 6y + 13z", "x <= 200\ny <= 300\nx + y + z <= 400\ny + 3z <= 600"),
        ("3x + 2y", "x + 2y <= 14\n3x - y >= 0\nx - y <= 2"),
        ("x + y", "x + y >= 2\nx <= 3\ny <= 3"),
        ("2a - b + c", "a + b + c = 10\na - c >= 1\nb >= 2\na <= 6"),
        ("-x - y", "x + y >= 5\nx - y = 1"),
    ],
)
def test_simplex_agrees_with_highs(objective, constraints):
    simplex = start(objective, constraints)
    expected = solve_with_highs(simplex.current())
    program = simplex.run_to_optimum()

    assert expected.status == "optimal"
    assert program.objective_value == pytest.approx(expected.objective_value, abs=1e-6)

    point = program.current_point()
    for line in constraints.splitlines():
        assert Constraint.parse(line).is_satisfied(point, tolerance=1e-6)


def test_highs_reports_unbounded_and_infeasible():
    assert solve_with_highs(start("x", "y <= 5").current()).status == "unbounded"
    assert solve_with_highs(start("x", "x <= 1\nx >= 2").current()).status == "infeasible"


def test_highs_agrees_on_any_snapshot():
    simplex = start("x + 6y + 13z", "x <= 200\ny <= 300\nx + y + z <= 400\ny + 3z <= 600")
    simplex.advance()
    simplex.advance()
    report = solve_with_highs(simplex.current())
    assert report.objective_value == pytest.approx(3100.0)
    assert report.x["y"] == pytest.approx(300.0)
