from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Iterable, Iterator, List, Mapping, Optional

from ..errors import ParseError
from .expression import SLACK_PREFIX, LinearExpression
from .parser import parse_relation

if TYPE_CHECKING:  # pragma: no cover
    from ..schemas import SimplexOptions
    from .program import Simplex

log = logging.getLogger(__name__)


class Operator(Enum):
    EQUAL = "="
    LESS = "<"
    GREATER = ">"
    LESS_EQUAL = "<="
    GREATER_EQUAL = ">="

    @property
    def symbol(self) -> str:
        return self.value

    @property
    def inverse(self) -> "Operator":
        return _INVERSES[self]

    @classmethod
    def from_symbol(cls, symbol: str) -> "Operator":
        return cls.EQUAL if symbol == "==" else cls(symbol)

    def holds(self, left: float, right: float, tolerance: float = 0.0) -> bool:
        if self is Operator.EQUAL:
            return abs(left - right) <= tolerance
        if self is Operator.LESS:
            return left < right + tolerance
        if self is Operator.GREATER:
            return left > right - tolerance
        if self is Operator.LESS_EQUAL:
            return left <= right + tolerance
        return left >= right - tolerance


_INVERSES = {
    Operator.EQUAL: Operator.EQUAL,
    Operator.LESS: Operator.GREATER_EQUAL,
    Operator.GREATER_EQUAL: Operator.LESS,
    Operator.GREATER: Operator.LESS_EQUAL,
    Operator.LESS_EQUAL: Operator.GREATER,
}


class Constraint:
    """``left operator right``; stored exactly as given, standardised by ``ConstraintSet``."""

    def __init__(self, left: LinearExpression, operator: Operator, right: LinearExpression) -> None:
        self.left = left
        self.operator = operator
        self.right = right

    @classmethod
    def parse(cls, text: str, allow_reserved: bool = False) -> "Constraint":
        left, symbol, right = parse_relation(text, allow_reserved=allow_reserved)
        return cls(left, Operator.from_symbol(symbol), right)

    @classmethod
    def row(cls, var: str, right: LinearExpression) -> "Constraint":
        return cls(LinearExpression.single_variable(var), Operator.EQUAL, right)

    def is_canonical(self) -> bool:
        terms = self.left.terms()
        return (
            self.operator is Operator.EQUAL
            and self.left.constant == 0
            and len(terms) == 1
            and terms[0][1] == 1
        )

    @property
    def basic_variable(self) -> Optional[str]:
        if not self.is_canonical():
            return None
        return self.left.terms()[0][0]

    def inverse(self) -> "Constraint":
        return Constraint(self.left.copy(), self.operator.inverse, self.right.copy())

    def is_satisfied(self, assignment: Mapping[str, float], tolerance: float = 1e-9) -> bool:
        return self.operator.holds(self.left.evaluate(assignment), self.right.evaluate(assignment), tolerance)

    def copy(self) -> "Constraint":
        return Constraint(self.left.copy(), self.operator, self.right.copy())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Constraint):
            return NotImplemented
        return self.operator is other.operator and self.left == other.left and self.right == other.right

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return f"{self.left} {self.operator.symbol} {self.right}"

    def __repr__(self) -> str:
        return f"Constraint({str(self)!r})"


class ConstraintSet:
    """
    Ordered rows of a program in equality form.

    Every row added through ``add_constraint`` reads ``slack = expression``; the
    slack counter is a field of the set, so names are unique per set only.
    """

    def __init__(self, rows: Optional[Iterable[Constraint]] = None) -> None:
        self._rows: List[Constraint] = list(rows or [])
        self.slack_counter = len(self._rows)

    @classmethod
    def compile(cls, text: str) -> "ConstraintSet":
        constraint_set = cls()
        for number, line in enumerate(text.splitlines(), start=1):
            if not line.strip():
                continue
            try:
                constraint = Constraint.parse(line)
            except ParseError as exc:
                raise ParseError(exc.reason, exc.text, exc.position, line=number) from exc
            constraint_set.add_constraint(constraint)
        return constraint_set

    def _fresh_slack(self) -> str:
        name = f"{SLACK_PREFIX}{self.slack_counter}"
        self.slack_counter += 1
        return name

    def add_constraint(self, constraint: Constraint) -> List[str]:
        """Standardise ``constraint`` into slack rows; returns the new slack names."""

        gap = constraint.right.minus(constraint.left)
        if constraint.operator in (Operator.LESS_EQUAL, Operator.LESS):
            expressions = [gap]
        elif constraint.operator in (Operator.GREATER_EQUAL, Operator.GREATER):
            expressions = [gap.negated()]
        else:
            # s1 = right - left and s2 = left - right, both >= 0, pin left == right
            expressions = [gap, gap.negated()]

        names: List[str] = []
        for expression in expressions:
            name = self._fresh_slack()
            self._rows.append(Constraint.row(name, expression))
            names.append(name)
        log.debug("Standardised '%s' into %s", constraint, ", ".join(names))
        return names

    def most_restrictive(self, var: str, tolerance: float = 0.0) -> Optional[int]:
        """
        Ratio test for ``var`` entering the basis.

        Only rows where ``var`` has a negative coefficient limit its growth; among them
        the row maximising ``constant / coefficient`` (the tightest bound, as a negative
        number) wins, first in row order on ties. ``None`` means ``var`` is unbounded.
        """

        best_index: Optional[int] = None
        best_ratio = 0.0
        for index, row in enumerate(self._rows):
            coefficient = row.right.coefficient(var)
            if coefficient >= -tolerance:
                continue
            ratio = row.right.constant / coefficient
            if best_index is None or ratio > best_ratio:
                best_index, best_ratio = index, ratio
        return best_index

    def pivot(self, row_index: int, var: str, tolerance: float = 0.0) -> LinearExpression:
        """Make ``var`` basic in row ``row_index`` and eliminate it from every other row."""

        row = self._rows[row_index]
        if row.basic_variable is None:
            raise ValueError(f"Row {row_index} ('{row}') is not in 'variable = expression' form.")
        if row.right.coefficient(var) == 0:
            raise ValueError(f"'{var}' does not appear in row {row_index} ('{row}').")

        # 0 = right - basic, normalised so that var has coefficient 1
        equation = row.right.minus(row.left)
        equation.scale_to_unit_coefficient(var)
        equation.discard(var)
        value = equation.negated()
        value.chop(tolerance)

        self._rows[row_index] = Constraint.row(var, value)
        for index, other in enumerate(self._rows):
            if index == row_index:
                continue
            other.right.substitute(var, value)
            other.right.chop(tolerance)
        return value

    def is_valid(self) -> bool:
        for row in self._rows:
            basic = row.basic_variable
            if basic is None or row.right.coefficient(basic) != 0:
                return False
        return True

    def is_feasible(self, tolerance: float = 0.0) -> bool:
        """True when the basic solution (non-basic variables at zero) is non-negative."""
        return all(row.right.constant >= -tolerance for row in self._rows)

    def basic_variables(self) -> List[Optional[str]]:
        return [row.basic_variable for row in self._rows]

    def nonbasic_variables(self) -> List[str]:
        names = set()
        for row in self._rows:
            names.update(row.right.variables())
        return sorted(names)

    def structural_variables(self) -> List[str]:
        names = set()
        for row in self._rows:
            names.update(row.left.structural_variables())
            names.update(row.right.structural_variables())
        return sorted(names)

    def maximize(self, objective: LinearExpression, options: Optional["SimplexOptions"] = None) -> "Simplex":
        from .program import LinearProgram, Simplex  # local import to avoid cycle
        from ..schemas import SimplexOptions

        opts = options or SimplexOptions()
        return Simplex(LinearProgram.initial(objective, self, opts.tolerance), opts)

    def minimize(self, objective: LinearExpression, options: Optional["SimplexOptions"] = None) -> "Simplex":
        """Maximise ``-objective``; reported objective values are those of the negation."""
        return self.maximize(objective.negated(), options)

    def copy(self) -> "ConstraintSet":
        duplicate = ConstraintSet(row.copy() for row in self._rows)
        duplicate.slack_counter = self.slack_counter
        return duplicate

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[Constraint]:
        return iter(self._rows)

    def __getitem__(self, index: int) -> Constraint:
        return self._rows[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConstraintSet):
            return NotImplemented
        return self._rows == other._rows

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return "\n".join(str(row) for row in self._rows)


def compile_constraints(text: str) -> ConstraintSet:
    """Parse one constraint per non-blank line into a standardised ``ConstraintSet``."""
    return ConstraintSet.compile(text)
