"""Independent check of the search optimum with an OR-Tools binary program.

x[i] in {0, 1} funds project i. With r = p/q the year-2 rule

    spend2 <= (2 + r) * budget - (1 + r) * spend1

is multiplied through by q so every coefficient is an integer and the
boundary case stays exact:

    q * spend2 + (q + p) * spend1 <= (2q + p) * budget
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from ortools.linear_solver import pywraplp

from capital_budget_search.catalogue import Catalogue
from capital_budget_search.optimisation.encoding import encode

SOLVER_BACKENDS: Tuple[str, ...] = ("SCIP", "CBC")


@dataclass
class CrosscheckResult:
    status: str
    npv: Optional[int]
    mask: Optional[int]


def _create_solver(backends: Tuple[str, ...]) -> pywraplp.Solver:
    for backend in backends:
        solver = pywraplp.Solver.CreateSolver(backend)
        if solver:
            return solver
    raise RuntimeError(f"Could not create an OR-Tools solver with any backend of {backends}")


def solve_max_npv(catalogue: Catalogue,
                  backends: Tuple[str, ...] = SOLVER_BACKENDS,
                  time_limit_seconds: float = 30.0) -> CrosscheckResult:
    solver = _create_solver(backends)
    solver.SetTimeLimit(int(time_limit_seconds * 1000))

    n = catalogue.size
    spend1 = [-int(c) for c in catalogue.column("cost_year1")]
    spend2 = [-int(c) for c in catalogue.column("cost_year2")]
    npv = [int(v) for v in catalogue.column("npv")]
    rate = catalogue.reinvestment_rate
    p, q = rate.numerator, rate.denominator

    x: List[pywraplp.Variable] = [solver.BoolVar(f"x_{i}") for i in range(n)]

    solver.Add(solver.Sum([spend1[i] * x[i] for i in range(n)]) <= catalogue.budget)
    solver.Add(
        solver.Sum([(q * spend2[i] + (q + p) * spend1[i]) * x[i] for i in range(n)])
        <= (2 * q + p) * catalogue.budget
    )
    # the search only reports non-empty funding sets
    solver.Add(solver.Sum(x) >= 1)

    solver.Maximize(solver.Sum([npv[i] * x[i] for i in range(n)]))
    status_code = solver.Solve()

    status_map = {
        pywraplp.Solver.OPTIMAL: "OPTIMAL",
        pywraplp.Solver.FEASIBLE: "FEASIBLE",
        pywraplp.Solver.INFEASIBLE: "INFEASIBLE",
        pywraplp.Solver.UNBOUNDED: "UNBOUNDED",
        pywraplp.Solver.ABNORMAL: "ABNORMAL",
        pywraplp.Solver.NOT_SOLVED: "NOT_SOLVED",
    }
    status = status_map.get(status_code, "UNKNOWN")
    if status not in ("OPTIMAL", "FEASIBLE"):
        return CrosscheckResult(status=status, npv=None, mask=None)

    chosen = [i for i in range(n) if x[i].solution_value() > 0.5]
    return CrosscheckResult(
        status=status,
        npv=sum(npv[i] for i in chosen),
        mask=encode(chosen),
    )


__all__ = ["CrosscheckResult", "SOLVER_BACKENDS", "solve_max_npv"]
