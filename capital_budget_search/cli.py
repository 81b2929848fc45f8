"""Command line interface for the capital budget search."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Iterable

from capital_budget_search.catalogue import Catalogue
from capital_budget_search.config import Settings, load_settings
from capital_budget_search.data.loader import load_catalogue_table
from capital_budget_search.errors import ConfigurationError
from capital_budget_search.optimisation.crosscheck import solve_max_npv
from capital_budget_search.optimisation.search import search
from capital_budget_search.report import export_workbook, format_result, format_summary


def _settings(args: argparse.Namespace) -> Settings:
    return load_settings(Path(args.settings) if args.settings else None)


def _catalogue(settings: Settings, args: argparse.Namespace) -> Catalogue:
    rate = getattr(args, "rate", None)
    table = getattr(args, "table", None)
    if table:
        cfg = settings.catalogue_cfg
        return load_catalogue_table(
            Path(table),
            cfg.budget if args.budget is None else args.budget,
            sheet=getattr(args, "sheet", None),
            reinvestment_rate=cfg.reinvestment_rate if rate is None else rate,
        )
    return settings.catalogue(budget=args.budget, reinvestment_rate=rate)


def cmd_solve(args: argparse.Namespace) -> None:
    settings = _settings(args)
    catalogue = _catalogue(settings, args)
    verbose = 0 if args.quiet else settings.search.verbose

    result = search(catalogue, verbose=verbose)
    if verbose >= 1:
        print(format_summary(result))
    print(format_result(result))

    if args.export:
        output_file = Path(args.export)
    elif settings.paths.workbook_name:
        output_file = settings.output_dir() / settings.paths.workbook_name
    else:
        output_file = None
    if output_file is not None:
        written = export_workbook(result, output_file)
        print(f"Workbook written to {written}")


def cmd_check_config(args: argparse.Namespace) -> None:
    settings = _settings(args)
    catalogue = _catalogue(settings, args)
    print(
        f"Catalogue: {catalogue.name}\n"
        f"Projects: {catalogue.size}  (mask dtype {catalogue.mask_dtype.name})\n"
        f"Budget: {catalogue.budget}  reinvestment rate: {catalogue.reinvestment_rate}"
    )


def cmd_crosscheck(args: argparse.Namespace) -> None:
    settings = _settings(args)
    catalogue = _catalogue(settings, args)
    result = search(catalogue, verbose=0)
    mip = solve_max_npv(catalogue)
    print(f"Search best NPV: {result.best_npv}  ({len(result.best)} tied)")
    print(f"OR-Tools [{mip.status}] best NPV: {mip.npv}")
    if result.best_npv != mip.npv:
        raise SystemExit("Mismatch between search and OR-Tools optimum.")
    print("OK")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Capital budget search CLI")
    sub = parser.add_subparsers(dest="command", required=True)

    def add_common(p: argparse.ArgumentParser) -> None:
        p.add_argument("--settings", help="Path to a settings YAML file (defaults to the packaged reference)")
        p.add_argument("--budget", type=int, help="Override the per-year budget")
        p.add_argument("--rate", help="Override the rollover reinvestment rate, e.g. 0.10")
        p.add_argument("--table", help="Read projects from a CSV/Excel table instead of the settings")
        p.add_argument("--sheet", help="Sheet name when --table is an Excel workbook")

    p_solve = sub.add_parser("solve", help="Search for the maximal-NPV funding sets")
    add_common(p_solve)
    p_solve.add_argument("--export", help="Write the result to this .xlsx workbook")
    p_solve.add_argument("--quiet", action="store_true", help="Only print the best funding sets")
    p_solve.set_defaults(func=cmd_solve)

    p_check = sub.add_parser("check-config", help="Validate the catalogue without searching")
    add_common(p_check)
    p_check.set_defaults(func=cmd_check_config)

    p_cross = sub.add_parser("crosscheck", help="Compare the search optimum with an OR-Tools binary program")
    add_common(p_cross)
    p_cross.set_defaults(func=cmd_crosscheck)

    return parser


def main(argv: Iterable[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        args.func(args)
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        raise SystemExit(2) from exc


if __name__ == "__main__":
    main()
