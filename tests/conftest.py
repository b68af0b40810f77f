"""
Pytest Configuration and Fixtures

Shared fixtures for diagnosis engine and API tests.
"""
import pytest
from datetime import datetime, timedelta, timezone
from pathlib import Path
import sys

# Add app to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.core.diagnosis import DiagnosisMarker


BASE_DATE = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def base_date() -> datetime:
    """Reference exam date; later exams add days to it."""
    return BASE_DATE


@pytest.fixture
def make_marker():
    """Factory for lab markers, dated `days` after the reference date."""
    def _make(name: str, value=None, days: int = 0, **kwargs) -> DiagnosisMarker:
        return DiagnosisMarker(
            name=name,
            value=value,
            exam_date=BASE_DATE + timedelta(days=days),
            **kwargs,
        )
    return _make


@pytest.fixture
def complete_normal_panel(make_marker):
    """One in-range reading for every analyte the rules look at."""
    return [
        make_marker("Vitamin D", 45, unit="ng/mL"),
        make_marker("Ferritin", 80, unit="ng/mL"),
        make_marker("hs-CRP", 1.2, unit="mg/L"),
        make_marker("HbA1c", 5.2, unit="%"),
        make_marker("Fasting glucose", 88, unit="mg/dL"),
        make_marker("TSH", 2.1, unit="mIU/L"),
        make_marker("Free T4", 1.1, unit="ng/dL"),
    ]
