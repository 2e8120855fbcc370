"""Stepwise simplex method over symbolic linear expressions."""

from .expression import LinearExpression
from .constraints import Constraint, ConstraintSet, Operator, compile_constraints
from .program import LinearProgram, Simplex
from .solve import solve_problem, solve_text

__all__ = [
    "LinearExpression",
    "Constraint",
    "ConstraintSet",
    "Operator",
    "compile_constraints",
    "LinearProgram",
    "Simplex",
    "solve_problem",
    "solve_text",
]
