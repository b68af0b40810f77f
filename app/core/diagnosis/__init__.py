"""
Diagnosis Inference Layer

Turns anamnesis answers and lab markers into ranked clinical hypotheses.

Usage:
    from app.core.diagnosis import DiagnosisEngine, DiagnosisInput

    engine = DiagnosisEngine()
    result = engine.analyze(DiagnosisInput(markers=markers, responses=answers))
"""
from .base import (
    ConditionHypothesis,
    DiagnosisInput,
    DiagnosisMarker,
    DiagnosisResult,
    MarkerStatus,
    Severity,
)
from .engine import DiagnosisEngine, analyze_diagnosis
from .inputs import (
    AnamnesisSubmission,
    ExamMarkerRecord,
    LabExam,
    build_input_snapshot,
    collect_ready_exam_markers,
    select_latest_completed_submission,
)

__all__ = [
    "ConditionHypothesis",
    "DiagnosisInput",
    "DiagnosisMarker",
    "DiagnosisResult",
    "MarkerStatus",
    "Severity",
    "DiagnosisEngine",
    "analyze_diagnosis",
    "AnamnesisSubmission",
    "ExamMarkerRecord",
    "LabExam",
    "build_input_snapshot",
    "collect_ready_exam_markers",
    "select_latest_completed_submission",
]
