#!/usr/bin/env python3
import time
from pathlib import Path

from simplex_explorer.lp.solve import load_problem, solve_problem
from simplex_explorer.schemas import SimplexOptions
from scripts.generate_instances import generate_random_lp


def main() -> None:
    examples = Path(__file__).resolve().parent.parent / "examples"
    cases = [(path.name, load_problem(path)) for path in sorted(examples.glob("*.json"))]
    for seed in range(3):
        cases.append((f"random-{seed}", generate_random_lp(4, 4, seed)))

    print("name,rule,status,objective,steps,time_ms")
    for name, problem in cases:
        for rule, bland in (("bland", True), ("dantzig", False)):
            start = time.perf_counter()
            report = solve_problem(problem, SimplexOptions(bland_rule=bland))
            elapsed_ms = (time.perf_counter() - start) * 1000
            print(f"{name},{rule},{report.status},{report.objective_value},{report.iterations},{elapsed_ms:.2f}")


if __name__ == "__main__":
    main()
