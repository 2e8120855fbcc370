from __future__ import annotations

import logging
import os
import uuid
from typing import Dict, List, Optional

from mcp.server.fastmcp import FastMCP

from .geometry import points_to_array, to_3d
from .lp.constraints import compile_constraints
from .lp.program import Simplex
from .lp.reference import solve_with_highs
from .lp.solve import build_simplex, solve_problem
from .schemas import ProblemText, Sense, SimplexOptions

log = logging.getLogger(__name__)


class SessionStore:
    """Simplex runs kept alive between tool calls, keyed by an opaque id."""

    def __init__(self, options: Optional[SimplexOptions] = None) -> None:
        self.options = options or SimplexOptions()
        self._sessions: Dict[str, Simplex] = {}

    def start(self, objective: str, constraints: str, sense: Sense = "max") -> str:
        problem = ProblemText(objective=objective, constraints=constraints.splitlines(), sense=sense)
        simplex = build_simplex(problem, self.options)
        session_id = uuid.uuid4().hex[:12]
        self._sessions[session_id] = simplex
        log.info("Started session %s (%d rows)", session_id, len(simplex.current().constraints))
        return session_id

    def get(self, session_id: str) -> Simplex:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise ValueError(f"Unknown session '{session_id}'.") from None

    def close(self, session_id: str) -> None:
        self.get(session_id)
        del self._sessions[session_id]

    def __len__(self) -> int:
        return len(self._sessions)


app = FastMCP("Simplex Explorer")
store = SessionStore()


@app.tool()
def compile_constraint_text(text: str) -> dict:
    """Standardise constraint lines into slack rows ('@k = expression')."""
    constraints = compile_constraints(text)
    return {
        "rows": [str(row) for row in constraints],
        "structural_variables": constraints.structural_variables(),
    }


@app.tool()
def start_session(objective: str, constraints: str, sense: Sense = "max") -> dict:
    """Create a stepwise simplex run and return its id with the initial state."""
    session_id = store.start(objective, constraints, sense)
    return {"session_id": session_id, "state": store.get(session_id).view().model_dump()}


@app.tool()
def step_forward(session_id: str, use_bland: bool | None = None) -> dict:
    """Advance one pivot (replaying recorded steps when available)."""
    simplex = store.get(session_id)
    simplex.advance(use_bland)
    return simplex.view().model_dump()


@app.tool()
def step_back(session_id: str) -> dict:
    """Move back one recorded step."""
    simplex = store.get(session_id)
    simplex.retreat()
    return simplex.view().model_dump()


@app.tool()
def current_state(session_id: str) -> dict:
    """Return the dictionary at the current position."""
    return store.get(session_id).view().model_dump()


@app.tool()
def list_vertices(session_id: str, axes: List[str] | None = None) -> dict:
    """Enumerate vertices of the feasible region reachable from the current dictionary."""
    simplex = store.get(session_id)
    program = simplex.current()
    points = program.basic_feasible_solution_enumeration(simplex.options)
    chosen = axes or program.structural_variables()[:3]
    return {
        "points": points,
        "axes": chosen,
        "coordinates": to_3d(points_to_array(points, chosen)).tolist(),
    }


@app.tool()
def cross_check(session_id: str) -> dict:
    """Solve the session's problem with SciPy HiGHS for comparison."""
    return solve_with_highs(store.get(session_id).current()).model_dump()


@app.tool()
def close_session(session_id: str) -> dict:
    """Forget a session."""
    store.close(session_id)
    return {"closed": session_id}


@app.tool()
def solve_linear_program(problem: ProblemText, options: SimplexOptions | None = None) -> dict:
    """Solve a text LP to optimality and return the report."""
    return solve_problem(problem, options or store.options).model_dump()


if __name__ == "__main__":
    import sys

    logging.basicConfig(level=os.environ.get("SIMPLEX_LOG_LEVEL", "WARNING"))
    transport = os.environ.get("MCP_TRANSPORT", "stdio")

    if transport == "stdio" or "--stdio" in sys.argv:
        app.run(transport="stdio")
    else:
        app.settings.host = "0.0.0.0"
        app.settings.port = int(os.environ.get("PORT", "8081"))
        app.settings.streamable_http_path = "/mcp"
        app.run(transport="streamable-http")
