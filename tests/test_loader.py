import pandas as pd
import pytest

from capital_budget_search.data.loader import catalogue_from_frame, clean, load_catalogue_table
from capital_budget_search.errors import ConfigurationError
from capital_budget_search.optimisation.search import search


@pytest.fixture
def reference_frame():
    return pd.DataFrame(
        {
            " project ": ["P0", "P1", "P2", "P3", "P4", "P5", "P6"],
            "COST YEAR 1": [-90, -80, -50, -20, -40, -80, -80],
            "Cost\xa0year 2": [-58, -80, -100, -64, -50, -20, -100],
            "npv": [150, 200, 100, 100, 120, 150, 240],
        }
    )


def test_clean_collapses_whitespace():
    assert clean("  Cost\xa0 year   1 ") == "Cost year 1"
    assert clean(None) == ""


def test_columns_matched_case_insensitively(reference_frame):
    cat = catalogue_from_frame(reference_frame, budget=250)
    assert cat.size == 7
    assert cat.labels()[0] == "P0"
    assert search(cat).best_npv == 610


def test_missing_column_is_configuration_error(reference_frame):
    with pytest.raises(ConfigurationError, match="npv"):
        catalogue_from_frame(reference_frame.drop(columns=["npv"]), budget=250)


def test_non_numeric_value_is_configuration_error(reference_frame):
    frame = reference_frame.astype({"npv": object})
    frame.loc[2, "npv"] = "lots"
    with pytest.raises(ConfigurationError, match="Non-numeric npv"):
        catalogue_from_frame(frame, budget=250)


def test_project_column_is_optional(reference_frame):
    cat = catalogue_from_frame(reference_frame.drop(columns=[" project "]), budget=250)
    assert cat.labels() == [f"P{i}" for i in range(7)]


def test_load_csv(tmp_path, reference_frame):
    path = tmp_path / "projects.csv"
    reference_frame.to_csv(path, index=False)
    cat = load_catalogue_table(path, budget=250)
    assert cat.name == "projects"
    assert cat.column("npv").tolist() == [150, 200, 100, 100, 120, 150, 240]


def test_load_excel_sheet(tmp_path, reference_frame):
    path = tmp_path / "projects.xlsx"
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        reference_frame.to_excel(writer, sheet_name="Projects", index=False)
    cat = load_catalogue_table(path, budget=250, sheet="Projects")
    assert cat.size == 7


def test_legacy_xls_is_configuration_error(tmp_path):
    path = tmp_path / "projects.xls"
    path.write_bytes(b"")
    with pytest.raises(ConfigurationError, match="xls"):
        load_catalogue_table(path, budget=10)


def test_missing_table(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_catalogue_table(tmp_path / "missing.csv", budget=10)
