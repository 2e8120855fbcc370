from __future__ import annotations

from typing import Dict, List, Tuple

import numpy as np
from scipy.optimize import linprog

from ..schemas import SolutionReport, Status
from .expression import LinearExpression, is_structural
from .program import AUX_VARIABLE, LinearProgram


def solve_with_highs(program: LinearProgram) -> SolutionReport:
    """
    Solve the problem a snapshot represents with SciPy's HiGHS backend.

    Every variable, slack or structural, is non-negative and every row is the equality
    ``left - right = 0``, so any snapshot of a run describes the same optimum. The
    feasibility-phase variable is pinned to zero.
    """

    objective = program.pending_objective if program.pending_objective is not None else program.objective
    names = _collect_variables(program, objective)

    if not names:
        return SolutionReport(
            status="optimal",
            objective_value=objective.constant,
            x={},
            iterations=0,
        )

    c = _coefficient_vector(objective, names)
    A_eq, b_eq = _equality_rows(program, names)
    bounds = [(0.0, 0.0) if name == AUX_VARIABLE else (0.0, None) for name in names]

    res = linprog(
        -c,
        A_eq=A_eq if A_eq.size else None,
        b_eq=b_eq if b_eq.size else None,
        bounds=bounds,
        method="highs",
    )

    if not res.success:
        return SolutionReport(
            status=_map_status(res.status),
            objective_value=None,
            x=None,
            iterations=res.nit,
            message=res.message,
        )

    values = {name: float(value) for name, value in zip(names, res.x) if is_structural(name)}
    return SolutionReport(
        status="optimal",
        objective_value=float(-res.fun + objective.constant),
        x=values,
        iterations=res.nit,
        message=res.message or "",
    )


def _collect_variables(program: LinearProgram, objective: LinearExpression) -> List[str]:
    names = set(objective.variables())
    for row in program.constraints:
        names.update(row.left.variables())
        names.update(row.right.variables())
    return sorted(names)


def _coefficient_vector(expression: LinearExpression, names: List[str]) -> np.ndarray:
    return np.array([expression.coefficient(name) for name in names], dtype=float)


def _equality_rows(program: LinearProgram, names: List[str]) -> Tuple[np.ndarray, np.ndarray]:
    rows: List[np.ndarray] = []
    rhs: List[float] = []
    for row in program.constraints:
        difference = row.left.minus(row.right)
        rows.append(_coefficient_vector(difference, names))
        rhs.append(-difference.constant)
    if not rows:
        return np.empty((0, len(names))), np.empty(0)
    return np.array(rows, dtype=float), np.array(rhs, dtype=float)


def _map_status(code: int) -> Status:
    mapping: Dict[int, Status] = {
        0: "optimal",
        1: "iteration_limit",
        2: "infeasible",
        3: "unbounded",
    }
    return mapping.get(code, "iteration_limit")
