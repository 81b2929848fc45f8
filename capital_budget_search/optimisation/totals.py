"""Per-mask sums of the project cost and NPV columns."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from capital_budget_search.catalogue import Catalogue
from capital_budget_search.optimisation.encoding import decode


@dataclass(frozen=True)
class MaskTotals:
    cost_year1: int
    cost_year2: int
    npv: int

    @property
    def spend_year1(self) -> int:
        return -self.cost_year1

    @property
    def spend_year2(self) -> int:
        return -self.cost_year2


def total_selected(selected: Sequence[bool], values: Sequence[int]) -> int:
    sel = np.asarray(selected, dtype=bool)
    vals = np.asarray(values, dtype=np.int64)
    if sel.shape != vals.shape:
        raise ValueError(f"Selection of length {sel.size} does not match {vals.size} values.")
    return int(vals[sel].sum())


def total(mask: int, attribute: str, catalogue: Catalogue) -> int:
    """Sum ``attribute`` (cost_year1, cost_year2 or npv) over the funded projects."""
    return total_selected(decode(mask, catalogue.size), catalogue.column(attribute))


def summarise(mask: int, catalogue: Catalogue) -> MaskTotals:
    selected = decode(mask, catalogue.size)
    return MaskTotals(
        cost_year1=total_selected(selected, catalogue.column("cost_year1")),
        cost_year2=total_selected(selected, catalogue.column("cost_year2")),
        npv=total_selected(selected, catalogue.column("npv")),
    )


__all__ = ["MaskTotals", "summarise", "total", "total_selected"]
