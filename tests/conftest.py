"""Shared fixtures: small in-memory PSC datasets and CSV files on disk."""

from __future__ import annotations

import csv
from pathlib import Path

import pytest

from psc_pipeline.domains.deficiencies.analytics import DeficiencyAnalyzer
from psc_pipeline.domains.deficiencies.transform import classify

HEADER = [
    "Nature of deficiency",
    "Reference Code1",
    "Port Name",
    "Country",
    "Inspection - From Date",
    "Vessel Type",
]


def raw(nature=None, code=None, port=None, country=None, date=None, vessel=None) -> dict[str, str]:
    """Build a raw row, leaving out any field passed as ``None``."""
    values = dict(zip(HEADER, [nature, code, port, country, date, vessel]))
    return {k: v for k, v in values.items() if v is not None}


@pytest.fixture()
def scenario_rows() -> list[dict[str, str]]:
    return [
        raw("Fire doors", "45", "Rotterdam", "NL"),
        raw("Fire doors", "30", "Rotterdam", "NL"),
        raw("Charts", "10", "Singapore", "SG"),
    ]


@pytest.fixture()
def scenario_analyzer(scenario_rows) -> DeficiencyAnalyzer:
    return DeficiencyAnalyzer(classify(scenario_rows))


@pytest.fixture()
def fleet_rows() -> list[dict[str, str]]:
    """A mixed dataset with ties, blanks, unknown codes and several detentions."""
    return [
        raw("Oil record book", "17", "Houston", "US", "2024-01-10", "Tanker"),
        raw("Fire doors", "30", "Rotterdam", "NL", "2024-02-01", "Bulk Carrier"),
        raw("Charts not updated", "10", "Singapore", "SG", "2024-02-15", "Container"),
        raw("Oil record book", "99", "Houston", "US", "2024-03-02", "Tanker"),
        raw("", "30", "Antwerp", "BE", "2024-03-20", "Tanker"),
        raw("Lifeboat davits", "77", "Rotterdam", "DE", "2024-04-04", "Ro-Ro"),
        raw("Fire doors", "45", "Rotterdam", "NL", "2024-04-18", "Bulk Carrier"),
        raw(None, "10", None, "PA", "2024-05-01", "General Cargo"),
        raw("FIRE DETECTION system", "30", "Houston", "US", "2024-05-12", "Container"),
        raw("Charts not updated", "18", "Singapore", "SG", "2024-06-30", "Container"),
    ]


@pytest.fixture()
def fleet_analyzer(fleet_rows) -> DeficiencyAnalyzer:
    return DeficiencyAnalyzer(classify(fleet_rows))


@pytest.fixture()
def write_csv(tmp_path: Path):
    """Write rows under ``HEADER`` (or a custom header) to a CSV in ``tmp_path``."""

    def _write(rows: list[list[str]], header: list[str] | None = None, name: str = "psc.csv") -> Path:
        path = tmp_path / name
        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(header or HEADER)
            writer.writerows(rows)
        return path

    return _write
