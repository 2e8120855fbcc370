from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

Sense = Literal["min", "max"]
Status = Literal["optimal", "infeasible", "unbounded", "iteration_limit"]
Phase = Literal["feasibility", "improvable", "optimal"]


class SimplexOptions(BaseModel):
    tolerance: float = 1e-9
    bland_rule: bool = True
    point_tolerance: float = 1e-3
    max_enumeration_nodes: int = 10_000
    max_steps: int = 10_000


class ProblemText(BaseModel):
    name: str = "problem"
    sense: Sense = "max"
    objective: str
    constraints: List[str] = Field(default_factory=list)

    def constraint_text(self) -> str:
        return "\n".join(self.constraints)


class SolutionReport(BaseModel):
    status: Status
    objective_value: Optional[float]
    x: Dict[str, float] | None
    iterations: int
    message: str = ""


class SnapshotView(BaseModel):
    objective: str
    rows: List[str]
    point: Dict[str, float] | None
    objective_value: float
    phase: Phase
    position: int
    history_length: int
