"""Console and workbook output for a finished funding search."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, List

import pandas as pd

from capital_budget_search.optimisation.encoding import decode, format_bits
from capital_budget_search.optimisation.search import SearchResult
from capital_budget_search.optimisation.totals import summarise

NO_FUNDING_MESSAGE = "Cannot fund any project"


def format_mask(mask: int, result: SearchResult) -> str:
    cat = result.catalogue
    t = summarise(mask, cat)
    return (
        f"Funded projects: {format_bits(mask, cat.size)}"
        f"  /  CostYr1: {t.cost_year1:4d}"
        f"  /  CostYr2: {t.cost_year2:4d}"
        f"  /  NPV: {t.npv:4d}"
    )


def format_result(result: SearchResult) -> str:
    if not result.is_funded:
        return NO_FUNDING_MESSAGE
    return "\n".join(format_mask(mask, result) for mask in result.best)


def format_summary(result: SearchResult) -> str:
    cat = result.catalogue
    return (
        f"=== {cat.name}: {cat.size} projects, budget {cat.budget}, "
        f"reinvestment {float(cat.reinvestment_rate):.2%} ===\n"
        f"Masks evaluated: {result.evaluated}  (feasible {len(result.feasible)}, "
        f"seeds skipped {len(result.skipped_seeds)})\n"
        f"Best NPV: {result.best_npv if result.best_npv is not None else '-'}"
        f"  ({len(result.best)} tied)  in {result.solve_time:.4f} s"
    )


def result_frame(result: SearchResult) -> pd.DataFrame:
    """One row per best mask: per-project funding flags and the three totals."""
    cat = result.catalogue
    labels = cat.labels()
    rows: List[Dict[str, object]] = []
    for rank, mask in enumerate(result.best, start=1):
        t = summarise(mask, cat)
        row: Dict[str, object] = {"Solution": rank, "Mask": mask}
        row.update({label: bool(flag) for label, flag in zip(labels, decode(mask, cat.size))})
        row.update({
            "Spend year 1": t.spend_year1,
            "Spend year 2": t.spend_year2,
            "NPV": t.npv,
        })
        rows.append(row)
    columns = ["Solution", "Mask", *labels, "Spend year 1", "Spend year 2", "NPV"]
    return pd.DataFrame(rows, columns=columns)


def export_workbook(result: SearchResult, output_file: Path) -> Path:
    output_file = Path(output_file)
    output_file.parent.mkdir(parents=True, exist_ok=True)
    summary = pd.DataFrame(
        [
            {"Field": "Catalogue", "Value": result.catalogue.name},
            {"Field": "Budget", "Value": result.catalogue.budget},
            {"Field": "Reinvestment rate", "Value": float(result.catalogue.reinvestment_rate)},
            {"Field": "Status", "Value": result.status},
            {"Field": "Best NPV", "Value": result.best_npv},
            {"Field": "Tied solutions", "Value": len(result.best)},
            {"Field": "Masks evaluated", "Value": result.evaluated},
        ]
    )
    with pd.ExcelWriter(output_file, engine="xlsxwriter") as writer:
        summary.to_excel(writer, sheet_name="Summary", index=False)
        result_frame(result).to_excel(writer, sheet_name="Best funding", index=False)
        result.catalogue.to_frame().to_excel(writer, sheet_name="Projects", index=False)
    return output_file


__all__ = [
    "NO_FUNDING_MESSAGE",
    "export_workbook",
    "format_mask",
    "format_result",
    "format_summary",
    "result_frame",
]
