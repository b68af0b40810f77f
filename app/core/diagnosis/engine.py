"""
Diagnosis Inference Engine

Deterministic rule evaluator.  Takes a patient's latest completed anamnesis
answers plus their lab markers and returns ranked hypotheses, a confidence
score, a narrative and the follow-up exams worth ordering.

Usage:
    from app.core.diagnosis import DiagnosisInput, analyze_diagnosis

    result = analyze_diagnosis(DiagnosisInput(markers=markers, responses=answers))
    for c in result.conditions:
        print(c.name, c.probability, c.severity)

Pipeline:
    normalize text → resolve markers per rule → evaluate rules
        → symptom adjustments → sort → confidence / summary
"""
from __future__ import annotations

import dataclasses
import logging
from typing import List, Optional, Sequence

from .base import ConditionHypothesis, DiagnosisInput, DiagnosisResult
from .rules import (
    FATIGUE_BOOST,
    FATIGUE_SIGNAL,
    INSUFFICIENT_DATA_HYPOTHESIS,
    MARKER_RULES,
    SLEEP_SIGNAL,
    MarkerRule,
    clamp_probability,
    evaluate_rule,
    insufficient_data_hypothesis,
    stress_recovery_hypothesis,
)
from .text import extract_response_text, has_any_keyword

logger = logging.getLogger(__name__)

MIN_CONFIDENCE = 30
MAX_CONFIDENCE = 95
BASE_CONFIDENCE = 35
CONFIDENCE_PER_HYPOTHESIS = 10
CONFIDENCE_PER_EVIDENCE = 4
INSUFFICIENT_DATA_CONFIDENCE = 40

NO_HYPOTHESIS_SUMMARY = "No high-signal hypothesis detected."


def apply_fatigue_boost(
    conditions: Sequence[ConditionHypothesis],
) -> List[ConditionHypothesis]:
    """
    Raise the first hypothesis in insertion order (not the most probable one)
    and record the symptom as evidence.
    """
    if not conditions:
        return list(conditions)
    first = conditions[0]
    boosted = dataclasses.replace(
        first,
        probability=clamp_probability(first.probability + FATIGUE_BOOST),
        supporting_evidence=first.supporting_evidence + (FATIGUE_SIGNAL.evidence,),
    )
    return [boosted, *conditions[1:]]


def compute_confidence(conditions: Sequence[ConditionHypothesis]) -> int:
    """Score from hypothesis count and evidence volume, expects sorted input."""
    if conditions and INSUFFICIENT_DATA_HYPOTHESIS in conditions[0].name:
        return INSUFFICIENT_DATA_CONFIDENCE

    evidence_count = sum(len(c.supporting_evidence) for c in conditions)
    score = (
        BASE_CONFIDENCE
        + CONFIDENCE_PER_HYPOTHESIS * len(conditions)
        + CONFIDENCE_PER_EVIDENCE * evidence_count
    )
    return max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, score))


def build_summary(conditions: Sequence[ConditionHypothesis]) -> str:
    top = [c.name for c in conditions[:2]]
    if not top:
        return NO_HYPOTHESIS_SUMMARY
    return f"Top hypothesis: {' / '.join(top)}."


def build_reasoning(marker_count: int) -> str:
    return (
        f"Analysis used {marker_count} lab marker(s) and anamnesis pattern matching. "
        "This output is clinical decision support and requires professional validation."
    )


class DiagnosisEngine:
    """
    Maps (anamnesis answers, lab markers) to a DiagnosisResult.

    Stateless, safe to call from multiple threads / concurrent requests.
    """

    def __init__(self, rules: Optional[Sequence[MarkerRule]] = None):
        self.rules = tuple(rules) if rules is not None else MARKER_RULES

    def analyze(self, diagnosis_input: DiagnosisInput) -> DiagnosisResult:
        """
        Run every rule, adjust for anamnesis symptoms and rank the outcome.

        Never raises: absent or non-numeric values count as missing data and
        an empty input degrades to the insufficient-data hypothesis.
        """
        markers = tuple(diagnosis_input.markers)
        response_text = extract_response_text(diagnosis_input.responses)
        fatigue = has_any_keyword(response_text, FATIGUE_SIGNAL.keywords)
        sleep = has_any_keyword(response_text, SLEEP_SIGNAL.keywords)

        conditions: List[ConditionHypothesis] = []
        # dict keeps first-insertion order and drops repeats
        recommended = {}
        for rule in self.rules:
            outcome = evaluate_rule(rule, markers)
            if outcome.hypothesis is not None:
                conditions.append(outcome.hypothesis)
            for exam in outcome.recommended_exams:
                recommended.setdefault(exam, None)

        if fatigue and conditions:
            conditions = apply_fatigue_boost(conditions)

        if sleep and not conditions:
            conditions.append(stress_recovery_hypothesis())

        if not markers and not conditions:
            conditions.append(insufficient_data_hypothesis())

        # sorted() is stable: equal probabilities keep rule order
        ranked = sorted(conditions, key=lambda c: -c.probability)

        result = DiagnosisResult(
            conditions=ranked,
            confidence=compute_confidence(ranked),
            summary=build_summary(ranked),
            reasoning=build_reasoning(len(markers)),
            recommended_exams=list(recommended),
        )

        logger.info(
            f"DiagnosisEngine: {len(markers)} marker(s), "
            f"{len(ranked)} hypothesis(es), confidence={result.confidence}"
            + (": " + ", ".join(c.name for c in ranked) if ranked else "")
        )
        if result.recommended_exams:
            logger.debug(
                "DiagnosisEngine: recommending " + ", ".join(result.recommended_exams)
            )
        return result


_default_engine = DiagnosisEngine()


def analyze_diagnosis(diagnosis_input: DiagnosisInput) -> DiagnosisResult:
    """Analyze with the built-in rule table."""
    return _default_engine.analyze(diagnosis_input)
