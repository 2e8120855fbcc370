from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, List, Optional

import numpy as np

from ..schemas import SimplexOptions

if TYPE_CHECKING:  # pragma: no cover
    from .program import LinearProgram

log = logging.getLogger(__name__)


def basic_feasible_solution_enumeration(
    program: "LinearProgram",
    options: Optional[SimplexOptions] = None,
) -> List[Dict[str, float]]:
    """
    Depth-first walk over the vertices reachable from ``program`` by single pivots.

    Every variable on a right-hand side is tried as the entering variable (the ratio
    test keeps each neighbour feasible). Vertices are deduplicated by coordinates within
    ``options.point_tolerance``. Exponential in the worst case, so the walk stops after
    ``options.max_enumeration_nodes`` programs. Meant for drawing the feasible region.
    """

    opts = options or SimplexOptions()
    if program.in_feasibility_phase:
        raise ValueError("Vertex enumeration needs a feasible program; finish the feasibility phase first.")

    axes = program.structural_variables()
    visited = np.empty((0, len(axes)))
    points: List[Dict[str, float]] = []
    stack = [program]
    explored = 0

    while stack:
        if explored >= opts.max_enumeration_nodes:
            log.warning(
                "Stopped vertex enumeration after %d programs (%d vertices found)",
                explored,
                len(points),
            )
            break
        current = stack.pop()
        explored += 1

        point = current.current_point()
        coords = np.array([point.get(axis, 0.0) for axis in axes])
        if visited.shape[0] and np.any(np.all(np.abs(visited - coords) <= opts.point_tolerance, axis=1)):
            continue
        visited = np.vstack([visited, coords])
        points.append({axis: float(value) for axis, value in zip(axes, coords)})

        for var in current.constraints.nonbasic_variables():
            row_index = current.constraints.most_restrictive(var, opts.tolerance)
            if row_index is None:
                continue
            neighbour = current.copy()
            neighbour.exchange(row_index, var, opts.tolerance)
            stack.append(neighbour)

    log.debug("Enumerated %d vertices from %d programs", len(points), explored)
    return points
