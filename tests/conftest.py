import itertools

import pytest

from capital_budget_search.catalogue import build_catalogue
from capital_budget_search.optimisation.constraints import FeasibilityChecker
from capital_budget_search.optimisation.encoding import encode
from capital_budget_search.optimisation.totals import total

REFERENCE_COST_YEAR1 = [-90, -80, -50, -20, -40, -80, -80]
REFERENCE_COST_YEAR2 = [-58, -80, -100, -64, -50, -20, -100]
REFERENCE_NPV = [150, 200, 100, 100, 120, 150, 240]
REFERENCE_BUDGET = 250


@pytest.fixture
def reference_catalogue():
    """The seven-project reference instance."""
    return build_catalogue(
        REFERENCE_COST_YEAR1,
        REFERENCE_COST_YEAR2,
        REFERENCE_NPV,
        budget=REFERENCE_BUDGET,
        name="reference",
    )


@pytest.fixture
def toy_catalogue():
    """Two identical projects, only one of which fits the budget."""
    return build_catalogue([-10, -10], [-10, -10], [5, 5], budget=10, name="toy")


@pytest.fixture
def unconstrained_catalogue():
    """Five projects and a budget large enough to fund all of them."""
    return build_catalogue(
        [-1, -2, -3, -4, -5],
        [-5, -4, -3, -2, -1],
        [3, 1, 4, 1, 5],
        budget=1000,
        name="unconstrained",
    )


def brute_force_feasible(catalogue):
    """Every feasible non-empty mask, found with itertools instead of the search."""
    checker = FeasibilityChecker(catalogue)
    n = catalogue.size
    masks = []
    for k in range(1, n + 1):
        for combo in itertools.combinations(range(n), k):
            mask = encode(combo)
            if checker.is_feasible(mask):
                masks.append(mask)
    return masks


def brute_force_best(catalogue):
    feasible = brute_force_feasible(catalogue)
    if not feasible:
        return None, set()
    best = max(total(m, "npv", catalogue) for m in feasible)
    return best, {m for m in feasible if total(m, "npv", catalogue) == best}
