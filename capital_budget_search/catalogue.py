"""Project catalogue: the static inputs of a funding search."""
from __future__ import annotations

from dataclasses import dataclass, field
from fractions import Fraction
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from capital_budget_search.errors import ConfigurationError
from capital_budget_search.optimisation.encoding import mask_dtype

ATTRIBUTES: Tuple[str, ...] = ("cost_year1", "cost_year2", "npv")
DEFAULT_REINVESTMENT_RATE = Fraction(1, 10)


@dataclass(frozen=True)
class Project:
    index: int
    cost_year1: int
    cost_year2: int
    npv: int
    name: str = ""

    @property
    def label(self) -> str:
        return self.name or f"P{self.index}"


@dataclass(frozen=True)
class Catalogue:
    """N projects, the per-year budget and the rollover reinvestment rate.

    Costs are stored as non-positive numbers (cash out), NPVs as non-negative.
    Construct through :func:`build_catalogue` so the inputs are validated.
    """

    projects: Tuple[Project, ...]
    budget: int
    reinvestment_rate: Fraction = DEFAULT_REINVESTMENT_RATE
    name: str = "catalogue"
    _columns: Dict[str, np.ndarray] = field(default_factory=dict, repr=False, compare=False)

    def __post_init__(self) -> None:
        for attr in ATTRIBUTES:
            col = np.array([int(getattr(p, attr)) for p in self.projects], dtype=np.int64)
            col.setflags(write=False)
            self._columns[attr] = col

    @property
    def size(self) -> int:
        return len(self.projects)

    @property
    def mask_dtype(self) -> np.dtype:
        return mask_dtype(self.size)

    def column(self, attribute: str) -> np.ndarray:
        if attribute not in self._columns:
            raise KeyError(f"Unknown project attribute: {attribute!r} (expected one of {ATTRIBUTES})")
        return self._columns[attribute]

    def labels(self) -> List[str]:
        return [p.label for p in self.projects]

    def with_budget(self, budget: int) -> "Catalogue":
        return build_catalogue(
            self.column("cost_year1"),
            self.column("cost_year2"),
            self.column("npv"),
            budget=budget,
            reinvestment_rate=self.reinvestment_rate,
            names=[p.name for p in self.projects],
            name=self.name,
        )

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            {
                "Project": self.labels(),
                "Cost year 1": self.column("cost_year1"),
                "Cost year 2": self.column("cost_year2"),
                "NPV": self.column("npv"),
            }
        )


def _as_int_list(values: Iterable[Any], label: str) -> List[int]:
    out: List[int] = []
    for v in values:
        try:
            f = float(v)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"{label}: non-numeric value {v!r}") from exc
        if not np.isfinite(f) or f != int(f):
            raise ConfigurationError(f"{label}: expected whole numbers, got {v!r}")
        out.append(int(f))
    return out


def _as_rate(value: Any) -> Fraction:
    # str() first so 0.1 becomes exactly 1/10 rather than its binary expansion
    try:
        rate = Fraction(str(value))
    except (TypeError, ValueError, ZeroDivisionError) as exc:
        raise ConfigurationError(f"Invalid reinvestment rate: {value!r}") from exc
    if rate < 0:
        raise ConfigurationError(f"Reinvestment rate must be non-negative, got {value!r}")
    return rate


def build_catalogue(cost_year1: Sequence[Any],
                    cost_year2: Sequence[Any],
                    npv: Sequence[Any],
                    budget: Any,
                    reinvestment_rate: Any = DEFAULT_REINVESTMENT_RATE,
                    names: Optional[Sequence[str]] = None,
                    name: str = "catalogue",
                    ) -> Catalogue:
    """Validate the three project columns and the budget, then build a Catalogue.

    Raises ConfigurationError when the columns differ in length, the project
    count does not fit a 64-bit funding mask, a cost is positive, an NPV is
    negative, or the budget is negative. Costs, NPVs and the budget must all be
    whole numbers (10.5 is rejected, 10.0 is read as 10). A zero budget is
    accepted; it simply leaves nothing fundable.
    """
    c1 = _as_int_list(cost_year1, "cost_year1")
    c2 = _as_int_list(cost_year2, "cost_year2")
    nv = _as_int_list(npv, "npv")

    lengths = {"cost_year1": len(c1), "cost_year2": len(c2), "npv": len(nv)}
    if len(set(lengths.values())) != 1:
        raise ConfigurationError(f"Project columns differ in length: {lengths}")
    n = len(c1)
    mask_dtype(n)  # raises for n == 0 or n wider than a machine word

    if names is not None and len(names) != n:
        raise ConfigurationError(f"Expected {n} project names, got {len(names)}.")

    bad_costs = [i for i in range(n) if c1[i] > 0 or c2[i] > 0]
    if bad_costs:
        raise ConfigurationError(f"Costs must be stored as non-positive values; offending projects: {bad_costs}")
    bad_npv = [i for i in range(n) if nv[i] < 0]
    if bad_npv:
        raise ConfigurationError(f"NPV must be non-negative; offending projects: {bad_npv}")

    (budget_i,) = _as_int_list([budget], "budget")
    if budget_i < 0:
        raise ConfigurationError(f"Budget must be non-negative, got {budget!r}")

    projects = tuple(
        Project(
            index=i,
            cost_year1=c1[i],
            cost_year2=c2[i],
            npv=nv[i],
            name=str(names[i]).strip() if names is not None and names[i] is not None else "",
        )
        for i in range(n)
    )
    return Catalogue(
        projects=projects,
        budget=budget_i,
        reinvestment_rate=_as_rate(reinvestment_rate),
        name=name,
    )


__all__ = [
    "ATTRIBUTES",
    "DEFAULT_REINVESTMENT_RATE",
    "Catalogue",
    "Project",
    "build_catalogue",
]
