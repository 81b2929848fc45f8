"""
Tests for optimisation.search

Test Coverage:
- Reference scenarios: toy ties, seven-project reference data, zero budget
- Exhaustiveness and single evaluation per mask
- Seed short-circuit for an infeasible singleton
- Engine-owned state, progress listener and verbose logging
"""

from collections import Counter

import pytest

from capital_budget_search.catalogue import build_catalogue
from capital_budget_search.optimisation.constraints import FeasibilityChecker
from capital_budget_search.optimisation.encoding import encode
from capital_budget_search.optimisation.search import (
    STATUS_FUNDED,
    STATUS_NO_FEASIBLE_FUNDING,
    SearchEngine,
    search,
)
from capital_budget_search.optimisation.totals import total
from conftest import brute_force_best, brute_force_feasible


class CountingChecker(FeasibilityChecker):
    def __init__(self, catalogue):
        super().__init__(catalogue)
        self.calls = Counter()

    def is_feasible(self, mask):
        self.calls[mask] += 1
        return super().is_feasible(mask)


def test_toy_scenario_ties_two_singletons(toy_catalogue):
    result = search(toy_catalogue)

    assert result.status == STATUS_FUNDED
    assert result.visited == {encode([0]), encode([1])}
    assert result.rejected == {encode([0, 1])}
    assert result.evaluated == 3
    assert result.best == [encode([0]), encode([1])]
    assert result.best_npv == 5


def test_reference_scenario_best_npv_and_known_ties(reference_catalogue):
    result = search(reference_catalogue)

    assert result.best_npv == 610
    assert encode([0, 3, 4, 6]) in result.best
    assert encode([3, 4, 5, 6]) in result.best
    assert all(total(m, "npv", reference_catalogue) == 610 for m in result.best)


def test_reference_scenario_matches_brute_force(reference_catalogue):
    result = search(reference_catalogue)
    best_npv, best_masks = brute_force_best(reference_catalogue)

    assert result.best_npv == best_npv
    assert set(result.best) == best_masks
    assert len(result.best) == len(best_masks)
    assert set(result.feasible) == set(brute_force_feasible(reference_catalogue))


def test_no_feasible_mask_for_zero_budget(reference_catalogue):
    result = search(reference_catalogue.with_budget(0))

    assert result.status == STATUS_NO_FEASIBLE_FUNDING
    assert not result.is_funded
    assert result.best == []
    assert result.best_npv is None
    assert result.skipped_seeds == list(range(7))
    assert result.visited == {encode([i]) for i in range(7)}


def test_unconstrained_search_visits_whole_power_set(unconstrained_catalogue):
    result = search(unconstrained_catalogue)
    n = unconstrained_catalogue.size

    assert result.evaluated == 2 ** n - 1
    assert len(result.feasible) == 2 ** n - 1
    assert result.best == [encode(range(n))]
    assert result.max_depth == n - 1


def test_no_mask_is_checked_twice(reference_catalogue):
    checker = CountingChecker(reference_catalogue)
    result = SearchEngine(reference_catalogue, checker=checker).run()

    assert checker.calls
    assert max(checker.calls.values()) == 1
    assert set(checker.calls) == result.visited | result.rejected
    assert not result.visited & result.rejected


def test_visited_holds_feasible_masks_plus_evaluated_seeds(reference_catalogue):
    result = search(reference_catalogue)

    assert len(result.feasible) == len(set(result.feasible))
    assert len(result.visited) == len(result.feasible) + len(result.skipped_seeds)
    assert set(result.feasible) <= result.visited


def test_visited_size_counts_infeasible_seed_once():
    cat = build_catalogue([-50, -5, -5, -6], [-1, -1, -1, -1], [100, 1, 2, 3], budget=10)
    result = search(cat)

    assert result.skipped_seeds == [0]
    assert len(result.visited) == len(result.feasible) + 1
    assert result.rejected
    checker = FeasibilityChecker(cat)
    assert not any(checker.is_feasible(m) for m in result.rejected)


def test_infeasible_seed_skips_its_subtree():
    """Project 0 alone breaks the budget, so no mask containing it is tried."""
    cat = build_catalogue([-50, -5, -5], [-1, -1, -1], [100, 1, 2], budget=10)
    result = search(cat)

    assert result.skipped_seeds == [0]
    assert encode([0]) in result.visited
    assert not any(m & 1 for m in (result.visited | result.rejected) - {encode([0])})
    assert result.best == [encode([1, 2])]
    assert result.best_npv == 3


def test_every_best_mask_beats_all_feasible_masks(reference_catalogue):
    result = search(reference_catalogue)
    assert all(total(m, "npv", reference_catalogue) <= result.best_npv for m in result.feasible)


def test_engine_run_is_repeatable(reference_catalogue):
    engine = SearchEngine(reference_catalogue)
    first = engine.run()
    second = engine.run()

    assert first.best == second.best
    assert first.visited == second.visited
    assert first.feasible == second.feasible


def test_independent_engines_do_not_share_state(reference_catalogue, toy_catalogue):
    ref_engine = SearchEngine(reference_catalogue)
    toy_engine = SearchEngine(toy_catalogue)
    ref_engine.run()
    toy = toy_engine.run()

    assert toy.best_npv == 5
    assert toy_engine.visited is not ref_engine.visited


def test_listener_receives_stages(toy_catalogue):
    events = []
    search(toy_catalogue, listener=lambda stage, payload: events.append((stage, payload)))

    stages = [stage for stage, _ in events]
    assert stages[0] == "search_started"
    assert stages[-1] == "search_finished"
    assert stages.count("seed_done") == 2
    assert events[-1][1]["ties"] == 2


def test_listener_reports_skipped_seeds(reference_catalogue):
    stages = []
    search(reference_catalogue.with_budget(0), listener=lambda stage, payload: stages.append(stage))
    assert stages.count("seed_skipped") == 7


@pytest.mark.parametrize("verbose,expect_output", [(0, False), (1, True)])
def test_verbose_logging(toy_catalogue, capsys, verbose, expect_output):
    search(toy_catalogue, verbose=verbose)
    out = capsys.readouterr().out
    assert ("Evaluated" in out) is expect_output
