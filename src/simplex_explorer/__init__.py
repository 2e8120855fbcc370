"""Simplex Explorer: a two-phase simplex solver with a navigable pivot history."""

from .errors import InfeasibleError, IterationLimitError, ParseError, SimplexError, UnboundedError
from .lp import (
    Constraint,
    ConstraintSet,
    LinearExpression,
    LinearProgram,
    Operator,
    Simplex,
    compile_constraints,
    solve_problem,
    solve_text,
)
from .schemas import ProblemText, SimplexOptions, SolutionReport

__all__ = [
    "Constraint",
    "ConstraintSet",
    "LinearExpression",
    "LinearProgram",
    "Operator",
    "Simplex",
    "compile_constraints",
    "solve_problem",
    "solve_text",
    "ParseError",
    "SimplexError",
    "UnboundedError",
    "InfeasibleError",
    "IterationLimitError",
    "ProblemText",
    "SimplexOptions",
    "SolutionReport",
]
