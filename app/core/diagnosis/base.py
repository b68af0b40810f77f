"""
Diagnosis Engine: Base Types

Data contracts shared by the text normalizer, marker resolver, rule table
and aggregator. Inputs are read-only; outputs are plain values the calling
service persists on its own.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, List, Mapping, Optional, Tuple


class Severity(str, Enum):
    """Clinical weight of a hypothesis."""
    LOW    = "low"
    MEDIUM = "medium"
    HIGH   = "high"


class MarkerStatus(str, Enum):
    """Qualitative flag attached to a lab reading upstream."""
    NORMAL   = "normal"
    LOW      = "low"
    HIGH     = "high"
    CRITICAL = "critical"


@dataclass(frozen=True)
class DiagnosisMarker:
    """
    One measured analyte from a past exam.

    `name` is the label as recorded on the lab report ("Vitamina D Total",
    "25-OH", ...).  `value` may be absent when the lab only reported a
    qualitative status.
    """
    name: str
    exam_date: datetime
    value: Optional[float] = None
    unit: Optional[str] = None
    reference_min: Optional[float] = None
    reference_max: Optional[float] = None
    status: Optional[MarkerStatus] = None


@dataclass(frozen=True)
class DiagnosisInput:
    """Everything one analysis looks at."""
    markers: Tuple[DiagnosisMarker, ...] = ()
    # Answers of the most recent completed anamnesis submission
    responses: Optional[Mapping[str, Any]] = None


@dataclass(frozen=True)
class ConditionHypothesis:
    """
    One ranked clinical hypothesis.

    Instances are immutable; adjustments (e.g. the symptom boost) produce a
    new hypothesis through `dataclasses.replace`.
    """
    name: str
    probability: int                     # 0-100
    severity: Severity
    supporting_evidence: Tuple[str, ...] = ()
    # Reserved for negative evidence; no rule fills it yet
    contradicting_evidence: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "probability": self.probability,
            "severity": self.severity.value,
            "supporting_evidence": list(self.supporting_evidence),
            "contradicting_evidence": list(self.contradicting_evidence),
        }


@dataclass
class DiagnosisResult:
    """Outcome of a single analysis, ready to be stored by the caller."""
    conditions: List[ConditionHypothesis] = field(default_factory=list)
    confidence: int = 30                 # 30-95
    summary: str = ""
    reasoning: str = ""
    recommended_exams: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "conditions": [c.to_dict() for c in self.conditions],
            "confidence": self.confidence,
            "summary": self.summary,
            "reasoning": self.reasoning,
            "recommended_exams": list(self.recommended_exams),
        }
