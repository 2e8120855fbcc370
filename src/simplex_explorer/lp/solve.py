from __future__ import annotations

import json
from pathlib import Path
from typing import Optional, Union

from ..errors import InfeasibleError, IterationLimitError, UnboundedError
from ..schemas import ProblemText, Sense, SimplexOptions, SolutionReport, Status
from .constraints import compile_constraints
from .expression import LinearExpression
from .program import Simplex


def build_simplex(problem: ProblemText, options: Optional[SimplexOptions] = None) -> Simplex:
    """Parse ``problem`` and wrap it in a fresh ``Simplex``; raises ``ParseError`` on bad text."""

    constraints = compile_constraints(problem.constraint_text())
    objective = LinearExpression.parse(problem.objective)
    if problem.sense == "max":
        return constraints.maximize(objective, options)
    return constraints.minimize(objective, options)


def solve_problem(problem: ProblemText, options: Optional[SimplexOptions] = None) -> SolutionReport:
    """
    Run the simplex method to termination and summarise the outcome.

    Unbounded, infeasible and step-limited runs come back as report statuses; only
    malformed text raises.
    """

    opts = options or SimplexOptions()
    simplex = build_simplex(problem, opts)

    try:
        program = simplex.run_to_optimum()
    except UnboundedError as exc:
        return _failed("unbounded", simplex, str(exc))
    except InfeasibleError as exc:
        return _failed("infeasible", simplex, str(exc))
    except IterationLimitError as exc:
        return _failed("iteration_limit", simplex, str(exc))

    objective_value = program.objective_value
    if problem.sense == "min":
        objective_value = -objective_value

    return SolutionReport(
        status="optimal",
        objective_value=objective_value,
        x=program.current_point(),
        iterations=simplex.position,
        message="",
    )


def solve_text(
    objective: str,
    constraints: str,
    sense: Sense = "max",
    options: Optional[SimplexOptions] = None,
) -> SolutionReport:
    problem = ProblemText(objective=objective, constraints=constraints.splitlines(), sense=sense)
    return solve_problem(problem, options)


def load_problem(path: Union[str, Path]) -> ProblemText:
    return ProblemText.model_validate(json.loads(Path(path).read_text()))


def _failed(status: Status, simplex: Simplex, message: str) -> SolutionReport:
    return SolutionReport(
        status=status,
        objective_value=None,
        x=None,
        iterations=simplex.position,
        message=message,
    )
