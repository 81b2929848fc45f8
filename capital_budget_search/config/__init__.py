"""Configuration loading utilities."""

from .loader import (
    load_settings,
    Settings,
    CatalogueConfig,
    PathsConfig,
    ProjectEntry,
    SearchConfig,
    DEFAULT_SETTINGS_PATH,
)
