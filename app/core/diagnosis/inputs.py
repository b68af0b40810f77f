"""
Analysis Input Assembly

Selection rules the calling service applies before running the engine:
which anamnesis submission counts and which exams contribute markers.
Upstream records arrive already authorized and fetched.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from app import config
from .base import DiagnosisMarker, MarkerStatus

SUBMISSION_COMPLETED = "completed"
EXAM_READY = "ready"


@dataclass(frozen=True)
class AnamnesisSubmission:
    """A patient's answers to an anamnesis form."""
    id: str
    status: str                                  # draft / completed / ...
    responses: Optional[Mapping[str, Any]] = None


@dataclass(frozen=True)
class ExamMarkerRecord:
    """Marker as stored on an exam, before it is dated for analysis."""
    name: str
    value: Optional[float] = None
    unit: Optional[str] = None
    reference_min: Optional[float] = None
    reference_max: Optional[float] = None
    status: Optional[MarkerStatus] = None


@dataclass(frozen=True)
class LabExam:
    """An uploaded exam and the markers extracted from it."""
    id: str
    status: str                                  # pending / processing / ready / failed
    created_at: datetime
    markers: Tuple[ExamMarkerRecord, ...] = field(default_factory=tuple)


def select_latest_completed_submission(
    submissions: Sequence[AnamnesisSubmission],
) -> Optional[AnamnesisSubmission]:
    """First completed submission with answers; input is newest first."""
    for submission in submissions:
        if submission.status == SUBMISSION_COMPLETED and submission.responses:
            return submission
    return None


def collect_ready_exam_markers(
    exams: Sequence[LabExam],
    limit: int = config.READY_EXAM_LIMIT,
) -> Tuple[List[DiagnosisMarker], List[str]]:
    """
    Flatten the markers of the `limit` most recent ready exams.

    Exams must be ordered newest first.  Every marker is dated with the
    creation time of the exam it came from.

    Returns:
        (markers, analyzed exam ids)
    """
    ready = [exam for exam in exams if exam.status == EXAM_READY][:limit]

    markers: List[DiagnosisMarker] = []
    for exam in ready:
        for record in exam.markers:
            markers.append(DiagnosisMarker(
                name=record.name,
                exam_date=exam.created_at,
                value=record.value,
                unit=record.unit,
                reference_min=record.reference_min,
                reference_max=record.reference_max,
                status=record.status,
            ))
    return markers, [exam.id for exam in ready]


def build_input_snapshot(
    submission: Optional[AnamnesisSubmission],
    exam_ids: Sequence[str],
    marker_count: int,
    analyzed_at: datetime,
) -> Dict[str, Any]:
    """What an analysis looked at, stored next to its result."""
    return {
        "submission_id": submission.id if submission is not None else None,
        "analyzed_exam_ids": list(exam_ids),
        "analyzed_markers_count": marker_count,
        "analyzed_at": analyzed_at.isoformat(),
    }
