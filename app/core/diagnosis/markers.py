"""
Lab Marker Resolver

Finds the reading a rule should look at: among all markers whose normalized
name contains one of the rule's aliases, the one from the most recent exam.
"""
from __future__ import annotations

import math
from datetime import timezone
from typing import Any, Iterable, Optional, Sequence

from .base import DiagnosisMarker
from .text import format_number, normalize_text


def matches_marker_name(marker_name: str, aliases: Iterable[str]) -> bool:
    """Substring match of any normalized alias inside the normalized name."""
    normalized = normalize_text(marker_name)
    return any(normalize_text(alias) in normalized for alias in aliases)


def _exam_timestamp(marker: DiagnosisMarker) -> float:
    exam_date = marker.exam_date
    if exam_date.tzinfo is None:
        exam_date = exam_date.replace(tzinfo=timezone.utc)
    return exam_date.timestamp()


def get_latest_marker(
    markers: Sequence[DiagnosisMarker],
    aliases: Sequence[str],
) -> Optional[DiagnosisMarker]:
    """
    Most recent marker matching any alias, or None.

    Ties on exam date keep the first marker encountered.
    """
    latest: Optional[DiagnosisMarker] = None
    latest_ts = -math.inf
    for marker in markers:
        if not matches_marker_name(marker.name, aliases):
            continue
        ts = _exam_timestamp(marker)
        if latest is None or ts > latest_ts:
            latest, latest_ts = marker, ts
    return latest


def as_number(value: Any) -> Optional[float]:
    """None, NaN, booleans and non-numeric values all mean "no reading"."""
    if value is None or isinstance(value, bool):
        return None
    if not isinstance(value, (int, float)):
        return None
    if math.isnan(value):
        return None
    return value


def format_marker(marker: DiagnosisMarker) -> str:
    """Evidence line, e.g. ``Vitamin D: 15 ng/mL (ref 30-100)``."""
    value = as_number(marker.value)
    text = f"{marker.name}: {format_number(value) if value is not None else 'n/a'}"
    if marker.unit:
        text += f" {marker.unit}"
    if marker.reference_min is not None and marker.reference_max is not None:
        text += (
            f" (ref {format_number(marker.reference_min)}"
            f"-{format_number(marker.reference_max)})"
        )
    return text
