"""Exhaustive capital budget selection over a small project catalogue."""

from capital_budget_search.catalogue import Catalogue, Project, build_catalogue
from capital_budget_search.errors import ConfigurationError
from capital_budget_search.optimisation.search import SearchEngine, SearchResult, search

__all__ = [
    "Catalogue",
    "ConfigurationError",
    "Project",
    "SearchEngine",
    "SearchResult",
    "build_catalogue",
    "search",
]
