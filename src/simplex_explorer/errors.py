from __future__ import annotations

from typing import Optional


class ParseError(ValueError):
    """Raised when expression or constraint text is malformed."""

    def __init__(
        self,
        reason: str,
        text: str = "",
        position: Optional[int] = None,
        line: Optional[int] = None,
    ) -> None:
        message = reason
        if position is not None:
            message = f"{message} (at column {position + 1} of '{text}')"
        if line is not None:
            message = f"Line {line}: {message}"
        super().__init__(message)
        self.reason = reason
        self.text = text
        self.position = position
        self.line = line


class SimplexError(Exception):
    """Base class for failures of a simplex step."""


class UnboundedError(SimplexError):
    def __init__(self, variable: str) -> None:
        super().__init__(f"Objective is unbounded: '{variable}' can grow without limit.")
        self.variable = variable


class InfeasibleError(SimplexError):
    def __init__(self, residual: float) -> None:
        super().__init__(f"Constraints are infeasible (auxiliary optimum {residual:g} < 0).")
        self.residual = residual


class IterationLimitError(SimplexError):
    def __init__(self, steps: int) -> None:
        super().__init__(f"Hit the step limit ({steps}) before reaching an optimum.")
        self.steps = steps
