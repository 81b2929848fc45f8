"""Best-NPV bookkeeping with ties."""
from __future__ import annotations

from typing import List, Optional

from capital_budget_search.catalogue import Catalogue
from capital_budget_search.optimisation.totals import total


class BestTracker:
    """Every feasible mask seen so far whose NPV equals the best NPV seen so far.

    Masks are kept in discovery order. A strictly better mask resets the list,
    an equal one is appended, a worse one is ignored.
    """

    def __init__(self, catalogue: Catalogue):
        self.catalogue = catalogue
        self.best: List[int] = []
        self.best_npv: Optional[int] = None

    @property
    def is_empty(self) -> bool:
        return not self.best

    def reset(self) -> None:
        self.best = []
        self.best_npv = None

    def consider(self, mask: int) -> Optional[int]:
        npv = total(mask, "npv", self.catalogue)
        if self.is_empty:
            self.best = [mask]
            self.best_npv = npv
        elif npv > self.best_npv:
            self.best = [mask]
            self.best_npv = npv
        elif npv == self.best_npv:
            self.best.append(mask)
        return self.best_npv


__all__ = ["BestTracker"]
