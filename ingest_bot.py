# ingest_bot.py
#
# Bulk scoring of issue spreadsheets. Sheets dropped into the incoming folder
# are scored row by row and a "<name>__scored.csv" report is written next to
# the archived source in the processed folder.
import logging
import math
import os
import re
import shutil
from datetime import datetime, timezone
from typing import Optional

import pandas as pd
from apscheduler.schedulers.background import BackgroundScheduler

from config import Settings, configure_logging, get_settings
from engines.priority_engine import PriorityEngine
from models import DayOfWeek, IssueCategory, PriorityBreakdown, PriorityInput, TimeOfDay

logger = logging.getLogger(__name__)

SHEET_EXTENSIONS = (".xlsx", ".xls", ".csv")

# ------------------------------
# Column / value normalization
# ------------------------------
# header (after snake-casing) -> PriorityInput field
COLUMN_ALIASES = {
    "issue_category": "category",
    "category_name": "category",
    "type": "category",
    "reported": "reported_at",
    "reported_on": "reported_at",
    "created_at": "reported_at",
    "people_affected": "occupancy",
    "area": "affected_area",
    "area_m2": "affected_area",
    "affected_area_m2": "affected_area",
    "votes": "vote_count",
    "upvotes": "vote_count",
    "recurring": "is_recurring",
    "occurrences": "previous_occurrences",
}

# free-text category labels seen in facilities sheets
CATEGORY_MAP = {
    "fire": IssueCategory.SAFETY,
    "fire safety": IssueCategory.SAFETY,
    "crack": IssueCategory.STRUCTURAL,
    "power": IssueCategory.ELECTRICAL,
    "power outage": IssueCategory.ELECTRICAL,
    "water leak": IssueCategory.PLUMBING,
    "leak": IssueCategory.PLUMBING,
    "ac": IssueCategory.HVAC,
    "air conditioning": IssueCategory.HVAC,
    "wifi": IssueCategory.NETWORK,
    "internet": IssueCategory.NETWORK,
    "cleaning": IssueCategory.CLEANLINESS,
    "chair": IssueCategory.FURNITURE,
    "desk": IssueCategory.FURNITURE,
}

TRUE_VALUES = {"true", "yes", "y", "1", "x"}
FALSE_VALUES = {"false", "no", "n", "0", ""}

NUMERIC_FIELDS = {"severity", "affected_area", "avg_resolution_time", "historical_cost_avg", "escalation_rate"}
INT_FIELDS = {"occupancy", "previous_occurrences", "vote_count"}
FLAG_FIELDS = {
    "is_recurring",
    "blocks_access",
    "safety_risk",
    "critical_infrastructure",
    "affects_academics",
    "weather_sensitive",
    "current_semester",
    "exam_period",
}
TEXT_FIELDS = {"description", "building_id", "room_id", "zone_id", "room_type"}


def normalize_column(col) -> str:
    """'Safety Risk', 'safetyRisk' and 'safety-risk' all become 'safety_risk'."""
    s = str(col).replace("\xa0", " ").strip()
    s = re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", s)
    s = re.sub(r"[^0-9a-zA-Z]+", "_", s).strip("_").lower()
    return COLUMN_ALIASES.get(s, s)


def is_blank(x) -> bool:
    try:
        return x is None or bool(pd.isna(x)) or str(x).strip() == ""
    except (TypeError, ValueError):
        return False


def normalize_category(val) -> IssueCategory:
    if not isinstance(val, str):
        return IssueCategory.OTHER
    s = val.replace("\xa0", " ").strip().lower()
    return CATEGORY_MAP.get(s) or IssueCategory(s)


def safe_to_float(x) -> Optional[float]:
    if is_blank(x):
        return None
    try:
        value = float(str(x).replace(",", "").strip())
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def safe_to_int(x) -> Optional[int]:
    value = safe_to_float(x)
    return None if value is None else int(value)


def parse_flag(x) -> Optional[bool]:
    if isinstance(x, bool):
        return x
    if is_blank(x):
        return None
    s = str(x).strip().lower()
    if s in TRUE_VALUES:
        return True
    if s in FALSE_VALUES:
        return False
    return None


def parse_choice(x, enum_cls):
    if is_blank(x):
        return None
    try:
        return enum_cls(str(x).strip().lower())
    except ValueError:
        return None


def parse_timestamp(x, default: datetime) -> datetime:
    if is_blank(x):
        return default
    ts = pd.to_datetime(x, utc=True, errors="coerce")
    if pd.isna(ts):
        return default
    return ts.to_pydatetime()


def row_to_input(row: dict, now: datetime) -> Optional[PriorityInput]:
    if is_blank(row.get("category")):
        return None

    fields = {
        "category": normalize_category(row["category"]),
        "reported_at": parse_timestamp(row.get("reported_at"), now),
        "time_of_day": parse_choice(row.get("time_of_day"), TimeOfDay),
        "day_of_week": parse_choice(row.get("day_of_week"), DayOfWeek),
    }
    for name in NUMERIC_FIELDS:
        fields[name] = safe_to_float(row.get(name))
    for name in INT_FIELDS:
        fields[name] = safe_to_int(row.get(name))
    for name in FLAG_FIELDS:
        fields[name] = parse_flag(row.get(name))
    for name in TEXT_FIELDS:
        value = row.get(name)
        fields[name] = None if is_blank(value) else str(value).strip()

    return PriorityInput(**fields)


# ------------------------------
# Sheet processing
# ------------------------------
def read_sheet(filepath: str) -> pd.DataFrame:
    if filepath.lower().endswith(".csv"):
        return pd.read_csv(filepath)
    return pd.read_excel(filepath, engine="openpyxl")


def score_frame(df: pd.DataFrame, engine: PriorityEngine, now: datetime) -> pd.DataFrame:
    """Score every usable row of a normalized sheet.

    Returns the scored rows only, with the score columns appended.
    """
    kept, inputs = [], []
    for idx, row in df.iterrows():
        inp = row_to_input(row.to_dict(), now)
        if inp is None:
            continue
        kept.append(idx)
        inputs.append(inp)

    results = engine.batch_calculate(inputs, now)

    out = df.loc[kept].copy()
    out["category"] = [inp.category.value for inp in inputs]
    out["score"] = [r.score for r in results]
    out["priority"] = [r.priority.value for r in results]
    out["confidence"] = [r.confidence for r in results]
    out["recommended_sla_hours"] = [r.recommended_sla for r in results]
    for name in PriorityBreakdown.model_fields:
        out[name] = [getattr(r.breakdown, name) for r in results]
    out["reasoning"] = [" | ".join(r.reasoning) for r in results]
    return out


def process_sheet(filepath: str, engine: PriorityEngine, processed_dir: str) -> bool:
    logger.info("Processing: %s", filepath)
    try:
        df = read_sheet(filepath)
    except Exception:
        logger.exception("❌ Failed to read sheet %s", filepath)
        return False

    df.columns = [normalize_column(c) for c in df.columns]
    if "category" not in df.columns:
        logger.error("❌ Missing column 'category' in %s", filepath)
        return False

    try:
        scored = score_frame(df, engine, datetime.now(timezone.utc))
    except Exception:
        logger.exception("❌ Failed to score sheet %s", filepath)
        return False

    stem = os.path.splitext(os.path.basename(filepath))[0]
    stamp = datetime.now().strftime("%Y%m%d%H%M%S")
    os.makedirs(processed_dir, exist_ok=True)
    report = os.path.join(processed_dir, f"{stamp}__{stem}__scored.csv")
    scored.to_csv(report, index=False)

    logger.info("✅ Scored %d of %d rows from %s -> %s", len(scored), len(df), os.path.basename(filepath), report)
    return True


# ------------------------------
# Ingest job (scans incoming folder)
# ------------------------------
def ingest_job(engine: PriorityEngine, settings: Settings) -> int:
    """Score every sheet waiting in the incoming folder; returns how many succeeded."""
    try:
        files = sorted(
            f for f in os.listdir(settings.incoming_dir) if f.lower().endswith(SHEET_EXTENSIONS)
        )
    except OSError:
        logger.exception("❌ Could not list incoming folder %s", settings.incoming_dir)
        return 0

    done = 0
    for fn in files:
        if fn.startswith("~$"):
            continue
        full = os.path.join(settings.incoming_dir, fn)
        if not process_sheet(full, engine, settings.processed_dir):
            continue
        dest_name = f"{datetime.now().strftime('%Y%m%d%H%M%S')}__{fn}"
        dest = os.path.join(settings.processed_dir, dest_name)
        try:
            shutil.move(full, dest)
            logger.info("➡ Moved %s -> %s", fn, dest)
        except OSError:
            logger.exception("❌ Failed to move processed file %s", fn)
        done += 1
    return done


# ------------------------------
# scheduler wrapper
# ------------------------------
def start_ingest_bot(engine: PriorityEngine, settings: Settings) -> BackgroundScheduler:
    os.makedirs(settings.incoming_dir, exist_ok=True)
    os.makedirs(settings.processed_dir, exist_ok=True)

    scheduler = BackgroundScheduler()
    scheduler.add_job(
        ingest_job,
        "interval",
        args=[engine, settings],
        seconds=settings.ingest_interval_seconds,
        next_run_time=datetime.now(),
    )
    scheduler.start()
    logger.info(
        "📥 Ingest Bot started (every %ss). Folder: %s",
        settings.ingest_interval_seconds,
        os.path.abspath(settings.incoming_dir),
    )
    return scheduler


# manual run
if __name__ == "__main__":
    configure_logging()
    settings = get_settings()
    logger.info("Manual run: processing existing files in %s/", settings.incoming_dir)
    ingest_job(PriorityEngine(max_workers=settings.batch_max_workers), settings)
