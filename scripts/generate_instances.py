#!/usr/bin/env python3
import argparse
import json
import random
from pathlib import Path
from typing import List, Optional

from simplex_explorer.schemas import ProblemText


def _term(coef: int, name: str, first: bool) -> str:
    if first:
        return f"{coef}{name}"
    return f" + {coef}{name}"


def generate_random_lp(num_vars: int, num_constraints: int, seed: Optional[int] = None) -> ProblemText:
    """Random packing LP: positive coefficients and right-hand sides, so the origin is feasible."""
    rng = random.Random(seed)
    names = [f"x{i}" for i in range(num_vars)]
    constraints: List[str] = []
    for _ in range(num_constraints):
        lhs = "".join(_term(rng.randint(1, 5), name, idx == 0) for idx, name in enumerate(names))
        rhs = rng.randint(num_vars * 2, num_vars * 6)
        constraints.append(f"{lhs} <= {rhs}")
    objective = "".join(_term(rng.randint(1, 4), name, idx == 0) for idx, name in enumerate(names))
    return ProblemText(name="random-lp", sense="max", objective=objective, constraints=constraints)


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate random feasible LP instances as text.")
    parser.add_argument("--vars", type=int, default=3, help="Number of variables")
    parser.add_argument("--constraints", type=int, default=3, help="Number of constraints")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--count", type=int, default=1, help="Number of instances")
    parser.add_argument("--out", type=Path, default=None, help="Optional output file")
    args = parser.parse_args()

    instances = [
        generate_random_lp(args.vars, args.constraints, (args.seed or 0) + idx)
        for idx in range(args.count)
    ]
    payload = [instance.model_dump() for instance in instances]

    if args.out:
        Path(args.out).write_text(json.dumps(payload, indent=2))
    else:
        print(json.dumps(payload, indent=2))


if __name__ == "__main__":
    main()
