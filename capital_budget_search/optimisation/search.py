"""Exhaustive funding search by include/exclude recursion on the minimum project.

Every non-empty subset of projects has a well-defined lowest index. The outer
loop seeds the search with each singleton ``{s}``; ``_extend`` then adds
higher-indexed projects one at a time. An infeasible seed skips its whole
subtree, and an infeasible candidate is not extended further. With the two
budget rules adding a project never turns an infeasible mask feasible, so the
pruning does not lose solutions.

The exclude branch of ``_extend`` regenerates masks that the include loop of
its parent already produced. The visited set holds every evaluated seed and
every feasible mask; rejected candidates are kept apart in ``rejected``.
Together they make sure each mask is checked for feasibility at most once.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Set

from capital_budget_search.catalogue import Catalogue
from capital_budget_search.optimisation.constraints import FeasibilityChecker
from capital_budget_search.optimisation.encoding import indices, project_id
from capital_budget_search.optimisation.tracker import BestTracker

STATUS_FUNDED = "FUNDED"
STATUS_NO_FEASIBLE_FUNDING = "NO_FEASIBLE_FUNDING"

ProgressCallback = Callable[[str, Dict[str, object]], None]


def _log(msg: str, verbose: int, level: int = 1) -> None:
    if verbose >= level:
        print(msg)


@dataclass
class SearchResult:
    status: str
    catalogue: Catalogue
    best: List[int]
    best_npv: Optional[int]
    feasible: List[int] = field(default_factory=list)
    visited: Set[int] = field(default_factory=set)
    rejected: Set[int] = field(default_factory=set)
    skipped_seeds: List[int] = field(default_factory=list)
    max_depth: int = 0
    solve_time: float = 0.0

    @property
    def is_funded(self) -> bool:
        return self.status == STATUS_FUNDED

    @property
    def evaluated(self) -> int:
        return len(self.visited) + len(self.rejected)


class SearchEngine:
    """Owns the visited set, the rejected set and the best tracker for one catalogue.

    ``run()`` resets all three, so an engine can be reused and independent engines
    never share state.
    """

    def __init__(self,
                 catalogue: Catalogue,
                 checker: Optional[FeasibilityChecker] = None,
                 listener: Optional[ProgressCallback] = None,
                 verbose: int = 0):
        self.catalogue = catalogue
        self.checker = checker or FeasibilityChecker(catalogue)
        self.tracker = BestTracker(catalogue)
        self.listener = listener
        self.verbose = verbose
        self.visited: Set[int] = set()
        self.rejected: Set[int] = set()
        self.feasible: List[int] = []
        self._max_depth = 0

    def _notify(self, stage: str, **payload: object) -> None:
        if self.listener is not None:
            self.listener(stage, payload)

    def _seen(self, mask: int) -> bool:
        return mask in self.visited or mask in self.rejected

    def _evaluate(self, mask: int) -> bool:
        feasible = self.checker.is_feasible(mask)
        if feasible:
            self.visited.add(mask)
        else:
            self.rejected.add(mask)
        return feasible

    def _register(self, mask: int, depth: int) -> None:
        self.feasible.append(mask)
        self._max_depth = max(self._max_depth, depth)
        npv = self.tracker.consider(mask)
        _log(f"  feasible {indices(mask, self.catalogue.size)}  best NPV so far={npv}", self.verbose, level=2)

    def _extend(self, proj_inx: int, funded: int, depth: int) -> None:
        n = self.catalogue.size
        if proj_inx >= n:
            return

        self._extend(proj_inx + 1, funded, depth)

        for p in range(proj_inx, n):
            candidate = funded | project_id(p)
            if self._seen(candidate):
                continue
            if not self._evaluate(candidate):
                continue
            self._register(candidate, depth + 1)
            self._extend(p + 1, candidate, depth + 1)

    def run(self) -> SearchResult:
        n = self.catalogue.size
        self.visited = set()
        self.rejected = set()
        self.feasible = []
        self.tracker.reset()
        self._max_depth = 0
        skipped: List[int] = []

        start_time = time.perf_counter()
        _log(f"Searching {n} projects of '{self.catalogue.name}' with budget {self.catalogue.budget}",
             self.verbose)
        self._notify("search_started", projects=n, budget=self.catalogue.budget)

        for s in range(n):
            seed = project_id(s)
            if self._seen(seed):
                continue
            # seeds count as visited whether or not they fit
            self.visited.add(seed)
            if not self.checker.is_feasible(seed):
                skipped.append(s)
                _log(f"  project {s} alone breaks the budget; skipping its subtree", self.verbose)
                self._notify("seed_skipped", seed=s)
                continue
            self._register(seed, 0)
            self._extend(s + 1, seed, 0)
            self._notify("seed_done", seed=s, evaluated=len(self.visited) + len(self.rejected),
                         best_npv=self.tracker.best_npv)

        elapsed = time.perf_counter() - start_time
        status = STATUS_NO_FEASIBLE_FUNDING if self.tracker.is_empty else STATUS_FUNDED
        result = SearchResult(
            status=status,
            catalogue=self.catalogue,
            best=list(self.tracker.best),
            best_npv=self.tracker.best_npv,
            feasible=list(self.feasible),
            visited=set(self.visited),
            rejected=set(self.rejected),
            skipped_seeds=skipped,
            max_depth=self._max_depth,
            solve_time=elapsed,
        )
        _log(f"Evaluated {result.evaluated} masks, {len(result.feasible)} feasible; "
             f"status={status} best NPV={result.best_npv} ({len(result.best)} tied) in {elapsed:.4f} s",
             self.verbose)
        self._notify("search_finished", status=status, evaluated=result.evaluated,
                     best_npv=result.best_npv, ties=len(result.best))
        return result


def search(catalogue: Catalogue,
           checker: Optional[FeasibilityChecker] = None,
           listener: Optional[ProgressCallback] = None,
           verbose: int = 0) -> SearchResult:
    return SearchEngine(catalogue, checker=checker, listener=listener, verbose=verbose).run()


__all__ = [
    "STATUS_FUNDED",
    "STATUS_NO_FEASIBLE_FUNDING",
    "ProgressCallback",
    "SearchEngine",
    "SearchResult",
    "search",
]
