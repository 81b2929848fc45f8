from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from capital_budget_search.catalogue import DEFAULT_REINVESTMENT_RATE, Catalogue, build_catalogue
from capital_budget_search.data.loader import load_catalogue_table
from capital_budget_search.errors import ConfigurationError


@dataclass
class ProjectEntry:
    cost_year1: int
    cost_year2: int
    npv: int
    name: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProjectEntry":
        try:
            return cls(
                cost_year1=data["cost_year1"],
                cost_year2=data["cost_year2"],
                npv=data["npv"],
                name=str(data.get("name", "") or ""),
            )
        except KeyError as exc:
            raise ConfigurationError(f"Project entry {data!r} is missing {exc.args[0]!r}") from exc


@dataclass
class CatalogueConfig:
    name: str
    budget: int
    reinvestment_rate: str = str(DEFAULT_REINVESTMENT_RATE)
    projects: List[ProjectEntry] = field(default_factory=list)
    table: Optional[Path] = None
    sheet: Optional[str] = None


@dataclass
class SearchConfig:
    verbose: int = 1


@dataclass
class PathsConfig:
    output_dir: Path = Path("output")
    workbook_name: str = ""


@dataclass
class Settings:
    root: Path
    catalogue_cfg: CatalogueConfig
    search: SearchConfig = field(default_factory=SearchConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)

    def output_dir(self) -> Path:
        return (self.root / self.paths.output_dir).resolve()

    def table_path(self) -> Optional[Path]:
        if self.catalogue_cfg.table is None:
            return None
        return (self.root / self.catalogue_cfg.table).resolve()

    def catalogue(self,
                  budget: Optional[int] = None,
                  reinvestment_rate: Optional[Any] = None) -> Catalogue:
        """Build the validated catalogue, optionally overriding budget and rate."""
        cfg = self.catalogue_cfg
        budget = cfg.budget if budget is None else budget
        rate = cfg.reinvestment_rate if reinvestment_rate is None else reinvestment_rate

        table = self.table_path()
        if table is not None:
            return load_catalogue_table(table, budget, sheet=cfg.sheet, reinvestment_rate=rate, name=cfg.name)

        if not cfg.projects:
            raise ConfigurationError("Settings define neither inline projects nor a project table.")
        return build_catalogue(
            [p.cost_year1 for p in cfg.projects],
            [p.cost_year2 for p in cfg.projects],
            [p.npv for p in cfg.projects],
            budget=budget,
            reinvestment_rate=rate,
            names=[p.name for p in cfg.projects],
            name=cfg.name,
        )


DEFAULT_SETTINGS_PATH = Path(__file__).with_name("settings.yaml")


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")
    with path.open("r", encoding="utf-8") as fh:
        return yaml.safe_load(fh) or {}


def load_settings(path: Optional[Path] = None) -> Settings:
    cfg_path = Path(path) if path is not None else DEFAULT_SETTINGS_PATH
    raw = _load_yaml(cfg_path)

    cat_raw = raw.get("catalogue")
    if not isinstance(cat_raw, dict):
        raise ConfigurationError(f"{cfg_path}: missing 'catalogue' section")
    if "budget" not in cat_raw:
        raise ConfigurationError(f"{cfg_path}: catalogue needs a 'budget'")

    projects = [ProjectEntry.from_dict(p or {}) for p in cat_raw.get("projects", []) or []]
    table = cat_raw.get("table")
    cat_cfg = CatalogueConfig(
        name=str(cat_raw.get("name", cfg_path.stem)),
        budget=cat_raw["budget"],
        reinvestment_rate=str(cat_raw.get("reinvestment_rate", DEFAULT_REINVESTMENT_RATE)),
        projects=projects,
        table=Path(table) if table else None,
        sheet=cat_raw.get("sheet"),
    )

    search_raw = raw.get("search", {}) or {}
    search_cfg = SearchConfig(verbose=int(search_raw.get("verbose", 1)))

    paths_raw = raw.get("paths", {}) or {}
    paths_cfg = PathsConfig(
        output_dir=Path(paths_raw.get("output_dir", "output")),
        workbook_name=str(paths_raw.get("workbook_name", "") or ""),
    )

    # relative roots resolve against the settings file, not the working directory
    root = Path(raw.get("root", ".")).expanduser()
    if not root.is_absolute():
        root = cfg_path.resolve().parent / root

    return Settings(
        root=root,
        catalogue_cfg=cat_cfg,
        search=search_cfg,
        paths=paths_cfg,
    )
