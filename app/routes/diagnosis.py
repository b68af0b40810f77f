"""
FastAPI endpoints for diagnosis support
Rule-based hypotheses from anamnesis answers and lab markers
"""
from typing import Optional

from fastapi import APIRouter, Header, Query

from app.models.diagnosis import (
    AnalyzePatientRequest,
    DiagnosisResponse,
    DiagnosisResultResponse,
    EvaluateRequest,
    ListDiagnosesResponse,
    ReviewRequest,
)
from app.services.diagnosis import diagnosis_service, require_auth_context

router = APIRouter(prefix="/api/v1/diagnosis", tags=["Diagnosis"])


@router.post("/evaluate", response_model=DiagnosisResultResponse)
async def evaluate(request: EvaluateRequest):
    """Run the engine on already-selected inputs; nothing is stored."""
    result = diagnosis_service.engine.analyze(request.to_input())
    return DiagnosisResultResponse.from_result(result)


@router.post("/analyze", response_model=DiagnosisResponse)
async def analyze_patient(
    request: AnalyzePatientRequest,
    x_organization_id: Optional[str] = Header(None),
    x_user_id: Optional[str] = Header(None),
):
    """Run a new diagnosis analysis for a patient and store it as a draft."""
    ctx = require_auth_context(x_organization_id, x_user_id)
    record = diagnosis_service.analyze_patient(
        ctx,
        request.patient_id,
        submissions=[s.to_submission() for s in request.submissions],
        exams=[e.to_exam() for e in request.exams],
    )
    return DiagnosisResponse.from_record(record)


@router.get("", response_model=ListDiagnosesResponse)
async def list_diagnoses(
    patient_id: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    limit: Optional[int] = Query(None),
    offset: Optional[int] = Query(None),
    x_organization_id: Optional[str] = Header(None),
    x_user_id: Optional[str] = Header(None),
):
    """List the organization's diagnosis records, newest first."""
    ctx = require_auth_context(x_organization_id, x_user_id)
    items, total = diagnosis_service.list_diagnoses(
        ctx, patient_id=patient_id, status=status, limit=limit, offset=offset
    )
    return ListDiagnosesResponse(
        items=[DiagnosisResponse.from_record(r) for r in items],
        total=total,
    )


@router.get("/{diagnosis_id}", response_model=DiagnosisResponse)
async def get_diagnosis(
    diagnosis_id: str,
    x_organization_id: Optional[str] = Header(None),
    x_user_id: Optional[str] = Header(None),
):
    ctx = require_auth_context(x_organization_id, x_user_id)
    return DiagnosisResponse.from_record(diagnosis_service.get_diagnosis(ctx, diagnosis_id))


@router.put("/{diagnosis_id}/review", response_model=DiagnosisResponse)
async def review_diagnosis(
    diagnosis_id: str,
    request: ReviewRequest,
    x_organization_id: Optional[str] = Header(None),
    x_user_id: Optional[str] = Header(None),
):
    """Mark a diagnosis as reviewed by a professional."""
    ctx = require_auth_context(x_organization_id, x_user_id)
    record = diagnosis_service.review_diagnosis(ctx, diagnosis_id, request.clinical_notes)
    return DiagnosisResponse.from_record(record)
