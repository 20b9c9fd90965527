import os
import sys
from datetime import datetime, timedelta, timezone

os.environ["PRIORITY_INGEST_ENABLED"] = "false"

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from engines.priority_engine import PriorityEngine
from models import PriorityInput

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


def make_input(**fields) -> PriorityInput:
    """Issue reported two hours before NOW (no freshness or staleness adjustment)."""
    fields.setdefault("reported_at", NOW - timedelta(hours=2))
    return PriorityInput(**fields)


@pytest.fixture
def engine():
    return PriorityEngine()


@pytest.fixture
def now():
    return NOW
