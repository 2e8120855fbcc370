from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from ..errors import InfeasibleError, IterationLimitError, UnboundedError
from ..schemas import SimplexOptions, SnapshotView
from .constraints import ConstraintSet
from .expression import SLACK_PREFIX, LinearExpression

log = logging.getLogger(__name__)

AUX_VARIABLE = f"{SLACK_PREFIX}aux"


class LinearProgram:
    """
    One dictionary (tableau) of the simplex method: maximise ``objective`` subject to
    ``constraints``, every variable non-negative.

    While ``pending_objective`` is set the program is in the feasibility phase: the
    objective is ``-@aux`` and the real objective waits until the auxiliary variable
    has been driven to zero.
    """

    def __init__(
        self,
        objective: LinearExpression,
        constraints: ConstraintSet,
        pending_objective: Optional[LinearExpression] = None,
    ) -> None:
        self.objective = objective
        self.constraints = constraints
        self.pending_objective = pending_objective

    @classmethod
    def initial(cls, objective: LinearExpression, constraints: ConstraintSet, tolerance: float = 0.0) -> "LinearProgram":
        if constraints.is_feasible(tolerance):
            return cls(objective.copy(), constraints.copy())

        rows = constraints.copy()
        for row in rows:
            row.right.set_coefficient(AUX_VARIABLE, 1.0)
        log.info("Slack basis is infeasible; starting with the feasibility phase")
        return cls(LinearExpression(0.0, {AUX_VARIABLE: -1.0}), rows, pending_objective=objective.copy())

    @property
    def in_feasibility_phase(self) -> bool:
        return self.pending_objective is not None

    @property
    def objective_value(self) -> float:
        return self.objective.constant

    def is_optimal(self, tolerance: float = 0.0) -> bool:
        return not self.in_feasibility_phase and self.objective.has_only_non_positive_coefficients(tolerance)

    def pivot(self, deterministic: bool = True, tolerance: float = 0.0) -> None:
        """Perform one simplex iteration in place; a no-op once optimal."""

        if (
            self.in_feasibility_phase
            and AUX_VARIABLE not in self.constraints.basic_variables()
            and not self.constraints.is_feasible(tolerance)
        ):
            # first step of the phase: @aux enters on the most violated row
            row_index = min(range(len(self.constraints)), key=lambda idx: self.constraints[idx].right.constant)
            self.exchange(row_index, AUX_VARIABLE, tolerance)
            return

        entering = self.objective.first_positive_coefficient_variable(deterministic, tolerance)
        if entering is None:
            if self.in_feasibility_phase:
                self._finish_feasibility_phase(tolerance)
            return

        row_index = self.constraints.most_restrictive(entering, tolerance)
        if row_index is None:
            log.info("No row limits '%s'; program is unbounded", entering)
            raise UnboundedError(entering)
        self.exchange(row_index, entering, tolerance)

    def exchange(self, row_index: int, entering: str, tolerance: float = 0.0) -> None:
        leaving = self.constraints[row_index].basic_variable
        value = self.constraints.pivot(row_index, entering, tolerance)
        self.objective.substitute(entering, value)
        self.objective.chop(tolerance)
        log.debug("Pivot on row %d: '%s' enters, '%s' leaves", row_index, entering, leaving)

    def _finish_feasibility_phase(self, tolerance: float) -> None:
        if self.objective.constant < -tolerance:
            raise InfeasibleError(self.objective.constant)

        basics = self.constraints.basic_variables()
        if AUX_VARIABLE in basics:
            row_index = basics.index(AUX_VARIABLE)
            candidates = self.constraints[row_index].right.variables()
            if candidates:
                self.constraints.pivot(row_index, candidates[0], tolerance)
            else:
                log.debug("Row %d is redundant; '%s' stays basic at zero", row_index, AUX_VARIABLE)

        objective = self.pending_objective
        assert objective is not None
        for row in self.constraints:
            if row.basic_variable != AUX_VARIABLE:
                row.right.discard(AUX_VARIABLE)
        for row in self.constraints:
            objective.substitute(row.basic_variable, row.right)
        objective.chop(tolerance)

        self.objective = objective
        self.pending_objective = None
        log.info("Feasibility phase complete; maximising %s", objective)

    def structural_variables(self) -> List[str]:
        names = set(self.constraints.structural_variables())
        names.update(self.objective.structural_variables())
        if self.pending_objective is not None:
            names.update(self.pending_objective.structural_variables())
        return sorted(names)

    def current_point(self) -> Dict[str, float]:
        """Basic solution over the structural variables; non-basic ones read zero."""

        if not self.constraints.is_valid():
            raise ValueError("current_point() needs every row in 'variable = expression' form.")
        point = {var: 0.0 for var in self.structural_variables()}
        for row in self.constraints:
            if row.basic_variable in point:
                point[row.basic_variable] = row.right.constant
        return point

    def basic_feasible_solution_enumeration(self, options: Optional[SimplexOptions] = None) -> List[Dict[str, float]]:
        from .enumeration import basic_feasible_solution_enumeration

        return basic_feasible_solution_enumeration(self, options)

    def copy(self) -> "LinearProgram":
        pending = self.pending_objective.copy() if self.pending_objective is not None else None
        return LinearProgram(self.objective.copy(), self.constraints.copy(), pending)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LinearProgram):
            return NotImplemented
        return (
            self.objective == other.objective
            and self.constraints == other.constraints
            and self.pending_objective == other.pending_objective
        )

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        lines = [f"max {self.objective}"]
        lines.extend(str(row) for row in self.constraints)
        return "\n".join(lines)


class Simplex:
    """
    Stepwise execution of the simplex method with a scrubbable history.

    ``history[0]`` is the initial program. Advancing past the last snapshot computes
    and appends a new one; advancing inside the recorded history and retreating only
    move ``position``, so revisited steps are never recomputed.
    """

    def __init__(self, initial: LinearProgram, options: Optional[SimplexOptions] = None) -> None:
        self.options = options or SimplexOptions()
        self._history: List[LinearProgram] = [initial]
        self._position = 0

    @property
    def position(self) -> int:
        return self._position

    @property
    def history(self) -> Tuple[LinearProgram, ...]:
        return tuple(self._history)

    @property
    def at_frontier(self) -> bool:
        return self._position == len(self._history) - 1

    def current(self) -> LinearProgram:
        return self._history[self._position]

    def is_optimal(self) -> bool:
        return self.current().is_optimal(self.options.tolerance)

    def advance(self, use_bland: Optional[bool] = None) -> LinearProgram:
        current = self.current()
        if current.is_optimal(self.options.tolerance):
            return current

        if self.at_frontier:
            deterministic = self.options.bland_rule if use_bland is None else use_bland
            following = current.copy()
            following.pivot(deterministic, self.options.tolerance)
            self._history.append(following)
        self._position += 1

        if self.is_optimal():
            log.info("Optimum %g reached at step %d", self.current().objective_value, self._position)
        return self.current()

    def retreat(self) -> LinearProgram:
        if self._position != 0:
            self._position -= 1
        return self.current()

    def run_to_optimum(self, max_steps: Optional[int] = None) -> LinearProgram:
        limit = self.options.max_steps if max_steps is None else max_steps
        steps = 0
        while not self.is_optimal():
            if steps >= limit:
                raise IterationLimitError(limit)
            self.advance()
            steps += 1
        return self.current()

    def view(self) -> SnapshotView:
        program = self.current()
        if program.in_feasibility_phase:
            phase = "feasibility"
        elif program.is_optimal(self.options.tolerance):
            phase = "optimal"
        else:
            phase = "improvable"
        return SnapshotView(
            objective=str(program.objective),
            rows=[str(row) for row in program.constraints],
            point=program.current_point() if program.constraints.is_valid() else None,
            objective_value=program.objective_value,
            phase=phase,
            position=self._position,
            history_length=len(self._history),
        )
