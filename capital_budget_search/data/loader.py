"""Load a project catalogue from a CSV or Excel table."""
from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Iterable, Optional

import pandas as pd

from capital_budget_search.catalogue import DEFAULT_REINVESTMENT_RATE, Catalogue, build_catalogue
from capital_budget_search.errors import ConfigurationError

COLUMN_ALIASES = {
    "project": ("project", "name", "project name"),
    "cost_year1": ("cost year 1", "cost_year1", "costyr1", "cost yr1", "year 1 cost"),
    "cost_year2": ("cost year 2", "cost_year2", "costyr2", "cost yr2", "year 2 cost"),
    "npv": ("npv", "net present value"),
}


def clean(s: Any) -> str:
    return re.sub(r"\s+", " ", str(s or "").replace("\xa0", " ")).strip()


def _find_column(columns: Iterable[Any], *candidates: str) -> Optional[str]:
    lookup = {clean(c).lower(): c for c in columns}
    for cand in candidates:
        key = clean(cand).lower()
        if key in lookup:
            return lookup[key]
    return None


def read_table(path: Path, sheet: Optional[str] = None) -> pd.DataFrame:
    if not path.exists():
        raise FileNotFoundError(f"Project table not found: {path}")
    suffix = path.suffix.lower()
    if suffix == ".xls":
        raise ConfigurationError(f"Legacy .xls workbooks are not supported, save {path.name} as .xlsx")
    if suffix in (".xlsx", ".xlsm"):
        return pd.read_excel(path, sheet_name=sheet or 0, engine="openpyxl")
    return pd.read_csv(path)


def catalogue_from_frame(df: pd.DataFrame,
                         budget: Any,
                         reinvestment_rate: Any = DEFAULT_REINVESTMENT_RATE,
                         name: str = "catalogue") -> Catalogue:
    """Build a catalogue from a frame with Project / Cost year 1 / Cost year 2 / NPV columns.

    Row order defines the project index. The Project column is optional.
    """
    cols = {key: _find_column(df.columns, *aliases) for key, aliases in COLUMN_ALIASES.items()}
    missing = [key for key in ("cost_year1", "cost_year2", "npv") if cols[key] is None]
    if missing:
        raise ConfigurationError(f"Missing expected columns in project table: {missing}")

    frame = df.dropna(how="all").reset_index(drop=True)
    numeric = {}
    for key in ("cost_year1", "cost_year2", "npv"):
        series = pd.to_numeric(frame[cols[key]], errors="coerce")
        if series.isna().any():
            bad = series[series.isna()].index.tolist()
            raise ConfigurationError(f"Non-numeric {key} values in rows {bad}")
        numeric[key] = series.tolist()

    names = frame[cols["project"]].map(clean).tolist() if cols["project"] is not None else None
    return build_catalogue(
        numeric["cost_year1"],
        numeric["cost_year2"],
        numeric["npv"],
        budget=budget,
        reinvestment_rate=reinvestment_rate,
        names=names,
        name=name,
    )


def load_catalogue_table(path: Path,
                         budget: Any,
                         sheet: Optional[str] = None,
                         reinvestment_rate: Any = DEFAULT_REINVESTMENT_RATE,
                         name: Optional[str] = None) -> Catalogue:
    df = read_table(Path(path), sheet)
    df.columns = [clean(c) for c in df.columns]
    return catalogue_from_frame(df, budget, reinvestment_rate=reinvestment_rate, name=name or Path(path).stem)


__all__ = ["catalogue_from_frame", "clean", "load_catalogue_table", "read_table"]
