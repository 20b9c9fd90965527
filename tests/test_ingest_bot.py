# tests/test_ingest_bot.py

import os

import pandas as pd
import pytest

from conftest import NOW
from config import Settings
from engines.priority_engine import PriorityEngine
from ingest_bot import (
    ingest_job,
    normalize_category,
    normalize_column,
    parse_flag,
    row_to_input,
    safe_to_int,
)
from models import DayOfWeek, IssueCategory


@pytest.fixture
def folders(tmp_path):
    incoming = tmp_path / "incoming"
    processed = tmp_path / "processed"
    incoming.mkdir()
    settings = Settings(
        ingest_enabled=False,
        incoming_dir=str(incoming),
        processed_dir=str(processed),
    )
    return incoming, processed, settings


@pytest.mark.parametrize("header,expected", [
    ("Category", "category"),
    ("Issue Category", "category"),
    ("Safety Risk", "safety_risk"),
    ("safetyRisk", "safety_risk"),
    ("blocks-access", "blocks_access"),
    ("Area (m2)", "affected_area"),
    ("Votes", "vote_count"),
    ("\xa0Reported At ", "reported_at"),
])
def test_normalize_column(header, expected):
    assert normalize_column(header) == expected


@pytest.mark.parametrize("label,expected", [
    ("Safety", IssueCategory.SAFETY),
    ("  plumbing ", IssueCategory.PLUMBING),
    ("AC", IssueCategory.HVAC),
    ("wifi", IssueCategory.NETWORK),
    ("broken vending machine", IssueCategory.OTHER),
    (None, IssueCategory.OTHER),
])
def test_normalize_category(label, expected):
    assert normalize_category(label) is expected


@pytest.mark.parametrize("value,expected", [
    ("yes", True), ("TRUE", True), (1, True), ("no", False), (0, False),
    (float("nan"), None), (None, None), ("maybe", None), (True, True),
])
def test_parse_flag(value, expected):
    assert parse_flag(value) is expected


def test_safe_to_int_handles_thousands_and_floats():
    assert safe_to_int("1,200") == 1200
    assert safe_to_int(150.0) == 150
    assert safe_to_int("n/a") is None


def test_safe_to_int_rejects_non_finite_numbers():
    assert safe_to_int("1e400") is None
    assert safe_to_int("nan") is None
    assert safe_to_int("-inf") is None


def test_row_to_input():
    row = {
        "category": "fire",
        "severity": "8",
        "occupancy": 120.0,
        "safety_risk": "yes",
        "day_of_week": "Weekend",
        "time_of_day": "lunch",
        "reported_at": float("nan"),
    }
    inp = row_to_input(row, NOW)

    assert inp.category is IssueCategory.SAFETY
    assert inp.severity == 8.0
    assert inp.occupancy == 120
    assert inp.safety_risk is True
    assert inp.day_of_week is DayOfWeek.WEEKEND
    assert inp.time_of_day is None
    assert inp.reported_at == NOW


def test_row_without_category_is_skipped():
    assert row_to_input({"category": float("nan"), "severity": 5}, NOW) is None


def test_ingest_scores_csv_and_archives_it(folders):
    incoming, processed, settings = folders
    pd.DataFrame([
        {"Issue Category": "Safety", "Severity": 10, "Safety Risk": "yes", "People Affected": 200},
        {"Issue Category": "Furniture", "Severity": 3, "Safety Risk": "", "People Affected": 10},
        {"Issue Category": None, "Severity": 4, "Safety Risk": "", "People Affected": 1},
    ]).to_csv(incoming / "week12.csv", index=False)

    assert ingest_job(PriorityEngine(), settings) == 1
    assert os.listdir(incoming) == []

    files = sorted(os.listdir(processed))
    assert len(files) == 2
    report = next(f for f in files if f.endswith("__week12__scored.csv"))

    scored = pd.read_csv(processed / report)
    assert len(scored) == 2
    assert list(scored["category"]) == ["Safety", "Furniture"]
    assert scored.loc[1, "priority"] == "LOW"
    assert scored.loc[0, "score"] > scored.loc[1, "score"]
    assert {"recommended_sla_hours", "vote_score", "reasoning"} <= set(scored.columns)


def test_sheet_without_category_stays_in_incoming(folders):
    incoming, processed, settings = folders
    pd.DataFrame([{"Severity": 5}]).to_csv(incoming / "broken.csv", index=False)

    assert ingest_job(PriorityEngine(), settings) == 0
    assert os.listdir(incoming) == ["broken.csv"]


def test_missing_incoming_folder_is_reported(tmp_path):
    settings = Settings(incoming_dir=str(tmp_path / "nope"), processed_dir=str(tmp_path / "out"))
    assert ingest_job(PriorityEngine(), settings) == 0


def test_overflowing_cell_does_not_stop_the_run(folders):
    incoming, processed, settings = folders
    pd.DataFrame([
        {"Category": "Plumbing", "Occupancy": "1e400"},
    ]).to_csv(incoming / "a_overflow.csv", index=False)
    pd.DataFrame([
        {"Category": "Electrical", "Occupancy": 30},
    ]).to_csv(incoming / "b_regular.csv", index=False)

    assert ingest_job(PriorityEngine(), settings) == 2
    assert os.listdir(incoming) == []

    reports = sorted(f for f in os.listdir(processed) if f.endswith("__scored.csv"))
    assert len(reports) == 2
    overflow = pd.read_csv(processed / next(f for f in reports if "a_overflow" in f))
    assert overflow.loc[0, "impact_score"] == 0
