"""Exception types raised before a search is allowed to start."""
from __future__ import annotations


class ConfigurationError(ValueError):
    """The project catalogue or settings cannot be searched as given."""


__all__ = ["ConfigurationError"]
