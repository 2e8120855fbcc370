from __future__ import annotations

from numbers import Real
from typing import Dict, List, Mapping, Optional, Tuple

SLACK_PREFIX = "@"


def is_structural(name: str) -> bool:
    """Structural variables are the user's own; synthesized ones carry the slack prefix."""
    return not name.startswith(SLACK_PREFIX)


def format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.6f}".rstrip("0").rstrip(".")


class LinearExpression:
    """
    Sparse affine function ``constant + sum(coefficient * variable)`` over named variables.

    Missing variables read as a zero coefficient, and a variable stored with a zero
    coefficient is indistinguishable from an absent one (equality ignores it).
    The named arithmetic methods return new expressions; the ``*_in_place`` variants
    mutate the receiver. Python operators delegate to the named methods.
    """

    __slots__ = ("constant", "_coefficients")

    def __init__(self, constant: float = 0.0, coefficients: Optional[Mapping[str, float]] = None) -> None:
        self.constant = float(constant)
        self._coefficients: Dict[str, float] = {
            var: float(coef) for var, coef in (coefficients or {}).items()
        }

    @classmethod
    def single_variable(cls, var: str) -> "LinearExpression":
        return cls(0.0, {var: 1.0})

    @classmethod
    def parse(cls, text: str, allow_reserved: bool = False) -> "LinearExpression":
        from .parser import parse_expression  # local import to avoid cycle

        return parse_expression(text, allow_reserved=allow_reserved)

    # -- coefficient access -------------------------------------------------

    def coefficient(self, var: str) -> float:
        return self._coefficients.get(var, 0.0)

    def set_coefficient(self, var: str, value: float) -> None:
        self._coefficients[var] = float(value)

    def discard(self, var: str) -> None:
        self._coefficients.pop(var, None)

    def terms(self) -> List[Tuple[str, float]]:
        return [(var, coef) for var, coef in sorted(self._coefficients.items()) if coef != 0]

    def variables(self) -> List[str]:
        return [var for var, _ in self.terms()]

    def structural_variables(self) -> List[str]:
        return [var for var in self.variables() if is_structural(var)]

    def is_constant(self) -> bool:
        return not self.terms()

    def copy(self) -> "LinearExpression":
        return LinearExpression(self.constant, self._coefficients)

    def evaluate(self, assignment: Mapping[str, float]) -> float:
        return self.constant + sum(coef * assignment.get(var, 0.0) for var, coef in self._coefficients.items())

    # -- in-place arithmetic ------------------------------------------------

    def _accumulate(self, other: "LinearExpression", factor: float) -> None:
        self.constant += factor * other.constant
        for var, coef in other._coefficients.items():
            self._coefficients[var] = self.coefficient(var) + factor * coef

    def add_in_place(self, other: "LinearExpression") -> None:
        self._accumulate(other, 1.0)

    def subtract_in_place(self, other: "LinearExpression") -> None:
        self._accumulate(other, -1.0)

    def scale_in_place(self, factor: float) -> None:
        self.constant *= factor
        for var in self._coefficients:
            self._coefficients[var] *= factor

    def divide_in_place(self, divisor: float) -> None:
        self.constant /= divisor
        for var in self._coefficients:
            self._coefficients[var] /= divisor

    # -- value arithmetic ---------------------------------------------------

    def plus(self, other: "LinearExpression") -> "LinearExpression":
        result = self.copy()
        result.add_in_place(other)
        return result

    def minus(self, other: "LinearExpression") -> "LinearExpression":
        result = self.copy()
        result.subtract_in_place(other)
        return result

    def scaled_by(self, factor: float) -> "LinearExpression":
        result = self.copy()
        result.scale_in_place(factor)
        return result

    def divided_by(self, divisor: float) -> "LinearExpression":
        result = self.copy()
        result.divide_in_place(divisor)
        return result

    def negated(self) -> "LinearExpression":
        return self.scaled_by(-1.0)

    # -- simplex helpers ----------------------------------------------------

    def substitute(self, var: str, replacement: "LinearExpression") -> None:
        """Replace ``var`` by ``replacement`` in place; no-op when ``var`` is absent."""
        coefficient = self._coefficients.pop(var, 0.0)
        if coefficient == 0:
            return
        self._accumulate(replacement, coefficient)

    def scale_to_unit_coefficient(self, var: str) -> None:
        coefficient = self.coefficient(var)
        if coefficient != 0:
            self.divide_in_place(coefficient)

    def first_positive_coefficient_variable(self, deterministic: bool = True, tolerance: float = 0.0) -> Optional[str]:
        """
        Candidate entering variable for a maximisation objective.

        With ``deterministic`` the lexicographically first positive variable is returned
        (Bland's rule); otherwise the one with the largest coefficient (Dantzig's rule,
        ties by name). ``None`` means no coefficient is positive.
        """

        candidates = [(var, coef) for var, coef in self._coefficients.items() if coef > tolerance]
        if not candidates:
            return None
        if deterministic:
            return min(var for var, _ in candidates)
        return min(candidates, key=lambda item: (-item[1], item[0]))[0]

    def has_only_non_positive_coefficients(self, tolerance: float = 0.0) -> bool:
        return self.first_positive_coefficient_variable(True, tolerance) is None

    def chop(self, tolerance: float) -> None:
        """Drop coefficients (and zero the constant) whose magnitude is within ``tolerance``."""
        self._coefficients = {var: coef for var, coef in self._coefficients.items() if abs(coef) > tolerance}
        if abs(self.constant) <= tolerance:
            self.constant = 0.0

    def is_close(self, other: "LinearExpression", tolerance: float = 1e-9) -> bool:
        if abs(self.constant - other.constant) > tolerance:
            return False
        names = set(self._coefficients) | set(other._coefficients)
        return all(abs(self.coefficient(var) - other.coefficient(var)) <= tolerance for var in names)

    # -- operators ----------------------------------------------------------

    @staticmethod
    def _coerce(value: object) -> Optional["LinearExpression"]:
        if isinstance(value, LinearExpression):
            return value
        if isinstance(value, Real):
            return LinearExpression(float(value))
        return None

    def __add__(self, other: object) -> "LinearExpression":
        operand = self._coerce(other)
        if operand is None:
            return NotImplemented
        return self.plus(operand)

    __radd__ = __add__

    def __sub__(self, other: object) -> "LinearExpression":
        operand = self._coerce(other)
        if operand is None:
            return NotImplemented
        return self.minus(operand)

    def __rsub__(self, other: object) -> "LinearExpression":
        operand = self._coerce(other)
        if operand is None:
            return NotImplemented
        return operand.minus(self)

    def __mul__(self, factor: object) -> "LinearExpression":
        if not isinstance(factor, Real):
            return NotImplemented
        return self.scaled_by(float(factor))

    __rmul__ = __mul__

    def __truediv__(self, divisor: object) -> "LinearExpression":
        if not isinstance(divisor, Real):
            return NotImplemented
        return self.divided_by(float(divisor))

    def __neg__(self) -> "LinearExpression":
        return self.negated()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LinearExpression):
            return NotImplemented
        return self.constant == other.constant and self.terms() == other.terms()

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        pieces: List[Tuple[bool, str]] = []
        if self.constant != 0:
            pieces.append((self.constant < 0, format_number(abs(self.constant))))
        for var, coef in self.terms():
            magnitude = abs(coef)
            body = var if magnitude == 1 else f"{format_number(magnitude)}{var}"
            pieces.append((coef < 0, body))
        if not pieces:
            return "0"

        negative, body = pieces[0]
        text = f"-{body}" if negative else body
        for negative, body in pieces[1:]:
            text += f" {'-' if negative else '+'} {body}"
        return text

    def __repr__(self) -> str:
        return f"LinearExpression({str(self)!r})"
