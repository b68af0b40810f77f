"""
Diagnosis API Models

Request/response shapes for the diagnosis endpoints, plus conversion into
the engine's dataclasses.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from app.core.diagnosis import (
    AnamnesisSubmission,
    DiagnosisInput,
    DiagnosisMarker,
    DiagnosisResult,
    ExamMarkerRecord,
    LabExam,
    MarkerStatus,
    Severity,
)
from app.services.diagnosis import DiagnosisRecord


# ---- Requests ----

class MarkerInput(BaseModel):
    """Lab reading attached to an exam."""
    name: str = Field(..., min_length=1, description="Label as recorded, e.g. 'Vitamina D'")
    value: Optional[float] = None
    unit: Optional[str] = None
    reference_min: Optional[float] = None
    reference_max: Optional[float] = None
    status: Optional[MarkerStatus] = None


class DatedMarkerInput(MarkerInput):
    """Lab reading with the date of the exam it came from."""
    exam_date: datetime


class EvaluateRequest(BaseModel):
    """Direct engine call: answers and markers already selected by the caller."""
    responses: Optional[Dict[str, Any]] = None
    markers: List[DatedMarkerInput] = []

    model_config = {"json_schema_extra": {"example": {
        "responses": {"q1": "estou com muita fadiga"},
        "markers": [
            {"name": "Vitamin D", "value": 15, "unit": "ng/mL",
             "reference_min": 30, "reference_max": 100,
             "exam_date": "2026-05-02T10:00:00Z"},
        ],
    }}}

    def to_input(self) -> DiagnosisInput:
        return DiagnosisInput(
            markers=tuple(
                DiagnosisMarker(
                    name=m.name,
                    exam_date=m.exam_date,
                    value=m.value,
                    unit=m.unit,
                    reference_min=m.reference_min,
                    reference_max=m.reference_max,
                    status=m.status,
                )
                for m in self.markers
            ),
            responses=self.responses,
        )


class SubmissionInput(BaseModel):
    id: str
    status: str
    responses: Optional[Dict[str, Any]] = None

    def to_submission(self) -> AnamnesisSubmission:
        return AnamnesisSubmission(id=self.id, status=self.status, responses=self.responses)


class ExamInput(BaseModel):
    id: str
    status: str
    created_at: datetime
    markers: List[MarkerInput] = []

    def to_exam(self) -> LabExam:
        return LabExam(
            id=self.id,
            status=self.status,
            created_at=self.created_at,
            markers=tuple(
                ExamMarkerRecord(
                    name=m.name,
                    value=m.value,
                    unit=m.unit,
                    reference_min=m.reference_min,
                    reference_max=m.reference_max,
                    status=m.status,
                )
                for m in self.markers
            ),
        )


class AnalyzePatientRequest(BaseModel):
    """Patient's anamnesis submissions (newest first) and exams (newest first)."""
    patient_id: str = Field(..., min_length=1)
    submissions: List[SubmissionInput] = []
    exams: List[ExamInput] = []


class ReviewRequest(BaseModel):
    clinical_notes: Optional[str] = None


# ---- Responses ----

class ConditionResponse(BaseModel):
    name: str
    probability: int = Field(..., ge=0, le=100)
    severity: Severity
    supporting_evidence: List[str] = []
    contradicting_evidence: List[str] = []


class DiagnosisResultResponse(BaseModel):
    conditions: List[ConditionResponse]
    confidence: int = Field(..., ge=30, le=95)
    summary: str
    reasoning: str
    recommended_exams: List[str]

    @classmethod
    def from_result(cls, result: DiagnosisResult) -> "DiagnosisResultResponse":
        return cls(**result.to_dict())


class DiagnosisResponse(BaseModel):
    id: str
    patient_id: str
    organization_id: str
    status: str
    confidence: int
    summary: str
    reasoning: str
    suggested_conditions: List[ConditionResponse]
    recommended_exams: List[str]
    input_snapshot: Dict[str, Any] = {}
    clinical_notes: Optional[str] = None
    created_by: str
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, record: DiagnosisRecord) -> "DiagnosisResponse":
        return cls(**record.to_dict())


class ListDiagnosesResponse(BaseModel):
    items: List[DiagnosisResponse]
    total: int


class HealthResponse(BaseModel):
    status: str
    version: str
    timestamp: datetime
