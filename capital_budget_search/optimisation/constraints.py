"""Budget rules a funding mask has to satisfy.

Each rule is an independent callable ``rule(selected, catalogue) -> bool``
taking the decoded per-project selection and the catalogue's cost tables.
A mask is feasible when every rule in the checker holds; rules are evaluated
in order and the first failure stops the evaluation.

Costs are non-positive in the catalogue, hence the negated totals below.
Arithmetic is exact (Fraction) so a mask sitting on the year-2 boundary is
feasible for any reinvestment rate and budget, not only for the ones that
happen to round cleanly in binary floating point.
"""
from __future__ import annotations

from fractions import Fraction
from typing import Callable, List, Sequence, Tuple

from capital_budget_search.catalogue import Catalogue
from capital_budget_search.optimisation.encoding import decode
from capital_budget_search.optimisation.totals import total_selected

BudgetRule = Callable[[Sequence[bool], Catalogue], bool]


def spend(selected: Sequence[bool], catalogue: Catalogue, attribute: str) -> int:
    return -total_selected(selected, catalogue.column(attribute))


def year1_budget(selected: Sequence[bool], catalogue: Catalogue) -> bool:
    """First year's total cost must be within budget."""
    return spend(selected, catalogue, "cost_year1") <= catalogue.budget


def year2_available(spend_year1: int, catalogue: Catalogue) -> Fraction:
    """Year-2 budget plus the unspent year-1 budget reinvested at the rollover rate.

    budget + (1 + r) * (budget - spend1) == (2 + r) * budget - (1 + r) * spend1
    """
    r = catalogue.reinvestment_rate
    return (2 + r) * catalogue.budget - (1 + r) * spend_year1


def year2_budget_with_rollover(selected: Sequence[bool], catalogue: Catalogue) -> bool:
    """Second year's total cost must be within budget plus reinvested year-1 leftovers."""
    spend1 = spend(selected, catalogue, "cost_year1")
    return spend(selected, catalogue, "cost_year2") <= year2_available(spend1, catalogue)


DEFAULT_RULES: Tuple[BudgetRule, ...] = (year1_budget, year2_budget_with_rollover)


class FeasibilityChecker:
    def __init__(self, catalogue: Catalogue, rules: Sequence[BudgetRule] = DEFAULT_RULES):
        if not rules:
            raise ValueError("A feasibility checker needs at least one rule.")
        self.catalogue = catalogue
        self.rules: Tuple[BudgetRule, ...] = tuple(rules)

    def is_feasible(self, mask: int) -> bool:
        selected = decode(mask, self.catalogue.size)
        return all(rule(selected, self.catalogue) for rule in self.rules)

    __call__ = is_feasible

    def violations(self, mask: int) -> List[str]:
        """Names of every rule the mask breaks, for diagnostics."""
        selected = decode(mask, self.catalogue.size)
        return [getattr(rule, "__name__", repr(rule)) for rule in self.rules
                if not rule(selected, self.catalogue)]


__all__ = [
    "BudgetRule",
    "DEFAULT_RULES",
    "FeasibilityChecker",
    "spend",
    "year1_budget",
    "year2_available",
    "year2_budget_with_rollover",
]
