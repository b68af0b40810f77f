"""
Diagnosis Records Service

Runs the inference engine for a patient and keeps the resulting records,
scoped per organization.  Records live in process memory (replace with a
database in production).
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

from app import config
from app.core.diagnosis import (
    AnamnesisSubmission,
    DiagnosisEngine,
    DiagnosisInput,
    LabExam,
    build_input_snapshot,
    collect_ready_exam_markers,
    select_latest_completed_submission,
)
from app.core.diagnosis.base import ConditionHypothesis
from app.utils import AuthContextError, DiagnosisNotFoundError, InvalidArgumentError, get_logger

logger = get_logger(__name__)

STATUS_DRAFT = "draft"
STATUS_REVIEWED = "reviewed"
DIAGNOSIS_STATUSES = (STATUS_DRAFT, STATUS_REVIEWED)


@dataclass(frozen=True)
class AuthContext:
    """Identity of the caller, resolved upstream."""
    org_id: str
    user_id: str


def require_auth_context(org_id: Optional[str], user_id: Optional[str]) -> AuthContext:
    if not org_id or not user_id:
        raise AuthContextError()
    return AuthContext(org_id=org_id, user_id=user_id)


@dataclass
class DiagnosisRecord:
    """A stored analysis awaiting (or past) professional review."""
    id: str
    patient_id: str
    organization_id: str
    status: str
    confidence: int
    summary: str
    reasoning: str
    suggested_conditions: List[ConditionHypothesis]
    recommended_exams: List[str]
    created_by: str
    created_at: datetime
    updated_at: datetime
    input_snapshot: Dict[str, Any] = field(default_factory=dict)
    clinical_notes: Optional[str] = None
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "patient_id": self.patient_id,
            "organization_id": self.organization_id,
            "status": self.status,
            "confidence": self.confidence,
            "summary": self.summary,
            "reasoning": self.reasoning,
            "suggested_conditions": [c.to_dict() for c in self.suggested_conditions],
            "recommended_exams": list(self.recommended_exams),
            "input_snapshot": self.input_snapshot,
            "clinical_notes": self.clinical_notes,
            "created_by": self.created_by,
            "reviewed_by": self.reviewed_by,
            "reviewed_at": self.reviewed_at,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


def normalize_limit(limit: Optional[int]) -> int:
    if not limit or limit <= 0:
        return config.DEFAULT_PAGE_LIMIT
    return min(limit, config.MAX_PAGE_LIMIT)


def normalize_offset(offset: Optional[int]) -> int:
    if not offset or offset < 0:
        return 0
    return offset


class DiagnosisService:
    """Analyze patients and manage their diagnosis records."""

    def __init__(self, engine: Optional[DiagnosisEngine] = None):
        self.engine = engine or DiagnosisEngine()
        self._records: Dict[str, DiagnosisRecord] = {}

    def analyze_patient(
        self,
        ctx: AuthContext,
        patient_id: str,
        submissions: Sequence[AnamnesisSubmission],
        exams: Sequence[LabExam],
    ) -> DiagnosisRecord:
        """
        Run a new analysis and store it as a draft.

        Args:
            ctx: Caller identity
            patient_id: Patient being analyzed
            submissions: Patient's anamnesis submissions, newest first
            exams: Patient's exams, most recently created first
        """
        if not patient_id or not patient_id.strip():
            raise InvalidArgumentError("patient_id is required", field="patient_id")

        submission = select_latest_completed_submission(submissions)
        markers, exam_ids = collect_ready_exam_markers(exams, limit=config.READY_EXAM_LIMIT)

        analysis = self.engine.analyze(DiagnosisInput(
            markers=tuple(markers),
            responses=submission.responses if submission is not None else None,
        ))

        now = datetime.now(timezone.utc)
        record = DiagnosisRecord(
            id=str(uuid.uuid4()),
            patient_id=patient_id,
            organization_id=ctx.org_id,
            status=STATUS_DRAFT,
            confidence=analysis.confidence,
            summary=analysis.summary,
            reasoning=analysis.reasoning,
            suggested_conditions=list(analysis.conditions),
            recommended_exams=list(analysis.recommended_exams),
            input_snapshot=build_input_snapshot(submission, exam_ids, len(markers), now),
            created_by=ctx.user_id,
            created_at=now,
            updated_at=now,
        )
        self._records[record.id] = record

        logger.info(
            f"diagnosis generated: id={record.id} patient={patient_id} "
            f"org={ctx.org_id} user={ctx.user_id} confidence={record.confidence}"
        )
        return record

    def list_diagnoses(
        self,
        ctx: AuthContext,
        patient_id: Optional[str] = None,
        status: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> Tuple[List[DiagnosisRecord], int]:
        """Organization records, newest first.  Returns (page, total)."""
        if status and status not in DIAGNOSIS_STATUSES:
            raise InvalidArgumentError(f"unknown status '{status}'", field="status")

        matching = [
            r for r in self._records.values()
            if r.organization_id == ctx.org_id
            and (not patient_id or r.patient_id == patient_id)
            and (not status or r.status == status)
        ]
        matching.sort(key=lambda r: r.created_at, reverse=True)

        start = normalize_offset(offset)
        return matching[start:start + normalize_limit(limit)], len(matching)

    def get_diagnosis(self, ctx: AuthContext, diagnosis_id: str) -> DiagnosisRecord:
        record = self._records.get(diagnosis_id)
        if record is None or record.organization_id != ctx.org_id:
            raise DiagnosisNotFoundError(diagnosis_id)
        return record

    def review_diagnosis(
        self,
        ctx: AuthContext,
        diagnosis_id: str,
        clinical_notes: Optional[str] = None,
    ) -> DiagnosisRecord:
        """Mark a record as reviewed; blank notes keep the existing ones."""
        record = self.get_diagnosis(ctx, diagnosis_id)

        notes = clinical_notes.strip() if clinical_notes else ""
        now = datetime.now(timezone.utc)
        record.status = STATUS_REVIEWED
        if notes:
            record.clinical_notes = notes
        record.reviewed_by = ctx.user_id
        record.reviewed_at = now
        record.updated_at = now

        logger.info(
            f"diagnosis reviewed: id={record.id} patient={record.patient_id} "
            f"org={ctx.org_id} user={ctx.user_id}"
        )
        return record


diagnosis_service = DiagnosisService()
