"""
Diagnosis Rules: Lab Markers and Anamnesis Signals

Immutable rule table evaluated by the diagnosis engine.

Marker rules (evaluated in this order):
    1. Vitamin D        < 30 ng/mL        (severe < 20)
    2. Ferritin         < 30 ng/mL        (severe < 15)
    3. CRP / hs-CRP     > 5 mg/L          (severe > 10)
    4. Glycemia         HbA1c >= 5.7 % or fasting glucose >= 100 mg/dL
                        (severe: HbA1c >= 6.5 or glucose >= 126)
    5. Thyroid axis     TSH > 4.5 or < 0.3 mIU/L (severe > 10 or < 0.1)

An analyte that has no reading at all adds its exam(s) to the recommendation
list.  A present reading, whatever its value, never recommends itself.

Anamnesis signals (applied after the marker rules, see engine.py):
    - fatigue  → boosts the first hypothesis by +4
    - sleep    → standalone stress-recovery hypothesis when nothing else fired
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from .base import ConditionHypothesis, DiagnosisMarker, Severity
from .markers import as_number, format_marker, get_latest_marker


# ── Analytes ──────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Analyte:
    """A logical lab analyte and the labels it is recorded under."""
    key: str
    aliases: Tuple[str, ...]
    # Exams to order when no reading exists
    recommend_if_missing: Tuple[str, ...] = ()


VITAMIN_D = Analyte(
    "vitamin_d",
    ("vitamin d", "vitamina d", "25-oh", "25 oh"),
    ("25-OH Vitamin D",),
)
FERRITIN = Analyte("ferritin", ("ferritin", "ferritina"), ("Ferritin",))
CRP = Analyte(
    "crp",
    ("crp", "c-reactive protein", "proteina c reativa", "pcr"),
    ("hs-CRP",),
)
HBA1C = Analyte(
    "hba1c",
    ("hba1c", "hemoglobina glicada", "glycated hemoglobin"),
    ("HbA1c",),
)
FASTING_GLUCOSE = Analyte(
    "fasting_glucose",
    ("glucose", "glicose", "fasting glucose", "glicemia"),
    ("Fasting glucose",),
)
TSH = Analyte("tsh", ("tsh",), ("TSH", "Free T4"))
# Ordered together with TSH, so its own absence recommends nothing
FREE_T4 = Analyte("free_t4", ("free t4", "t4 livre"))


# ── Thresholds ────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Threshold:
    """
    Breach test on one analyte.

    `below` / `above` trigger the rule; `severe_below` / `severe_above` mark
    the breach as severe.  Comparisons are strict unless `inclusive`.
    """
    analyte: str
    below: Optional[float] = None
    above: Optional[float] = None
    severe_below: Optional[float] = None
    severe_above: Optional[float] = None
    inclusive: bool = False

    def _crosses(self, value: float, low: Optional[float], high: Optional[float]) -> bool:
        if self.inclusive:
            return (low is not None and value <= low) or (high is not None and value >= high)
        return (low is not None and value < low) or (high is not None and value > high)

    def breached(self, value: float) -> bool:
        return self._crosses(value, self.below, self.above)

    def severe(self, value: float) -> bool:
        return self._crosses(value, self.severe_below, self.severe_above)


@dataclass(frozen=True)
class MarkerRule:
    """One hypothesis driven by one or more analytes."""
    hypothesis: str
    analytes: Tuple[Analyte, ...]          # also the evidence order
    thresholds: Tuple[Threshold, ...]      # any breach fires the rule
    probability: int
    severe_probability: int


MARKER_RULES: Tuple[MarkerRule, ...] = (
    MarkerRule(
        hypothesis="Vitamin D insufficiency tendency",
        analytes=(VITAMIN_D,),
        thresholds=(Threshold("vitamin_d", below=30, severe_below=20),),
        probability=74,
        severe_probability=88,
    ),
    MarkerRule(
        hypothesis="Iron reserve depletion tendency",
        analytes=(FERRITIN,),
        thresholds=(Threshold("ferritin", below=30, severe_below=15),),
        probability=72,
        severe_probability=86,
    ),
    MarkerRule(
        hypothesis="Systemic inflammatory activity",
        analytes=(CRP,),
        thresholds=(Threshold("crp", above=5, severe_above=10),),
        probability=73,
        severe_probability=87,
    ),
    MarkerRule(
        hypothesis="Glycemic dysregulation tendency",
        analytes=(HBA1C, FASTING_GLUCOSE),
        thresholds=(
            Threshold("hba1c", above=5.7, severe_above=6.5, inclusive=True),
            Threshold("fasting_glucose", above=100, severe_above=126, inclusive=True),
        ),
        probability=76,
        severe_probability=90,
    ),
    MarkerRule(
        hypothesis="Thyroid axis dysregulation tendency",
        analytes=(TSH, FREE_T4),
        thresholds=(
            Threshold("tsh", below=0.3, above=4.5, severe_below=0.1, severe_above=10),
        ),
        probability=69,
        severe_probability=84,
    ),
)


# ── Anamnesis signals ─────────────────────────────────────────────────────────

@dataclass(frozen=True)
class KeywordSignal:
    """Symptom detected by keyword scan of the anamnesis text (pt-BR / en)."""
    name: str
    keywords: Tuple[str, ...]
    evidence: str


FATIGUE_SIGNAL = KeywordSignal(
    "fatigue",
    ("fadiga", "cansaco", "fatigue", "baixa energia", "cansada", "cansado"),
    "Anamnesis reports fatigue/low energy.",
)
SLEEP_SIGNAL = KeywordSignal(
    "sleep",
    ("insonia", "dificuldade para dormir", "sono ruim", "sleep"),
    "Anamnesis reports sleep disturbance symptoms.",
)

FATIGUE_BOOST = 4

STRESS_RECOVERY_HYPOTHESIS = "Stress-recovery imbalance tendency"
STRESS_RECOVERY_PROBABILITY = 55

INSUFFICIENT_DATA_HYPOTHESIS = "Insufficient laboratory data for robust hypothesis"
INSUFFICIENT_DATA_PROBABILITY = 42
INSUFFICIENT_DATA_EVIDENCE = "No ready exam markers available for analysis."


# ── Evaluation ────────────────────────────────────────────────────────────────

def clamp_probability(value: float) -> int:
    """Round half up and keep inside 0-100."""
    return max(0, min(100, math.floor(value + 0.5)))


@dataclass(frozen=True)
class RuleOutcome:
    hypothesis: Optional[ConditionHypothesis]
    recommended_exams: Tuple[str, ...]


def evaluate_rule(rule: MarkerRule, markers: Sequence[DiagnosisMarker]) -> RuleOutcome:
    """Resolve the rule's analytes, then test its thresholds."""
    resolved: Dict[str, Optional[DiagnosisMarker]] = {}
    recommended: List[str] = []
    for analyte in rule.analytes:
        marker = get_latest_marker(markers, analyte.aliases)
        resolved[analyte.key] = marker
        if marker is None:
            recommended.extend(analyte.recommend_if_missing)

    fired = severe = False
    for threshold in rule.thresholds:
        marker = resolved.get(threshold.analyte)
        value = as_number(marker.value) if marker is not None else None
        if value is None or not threshold.breached(value):
            continue
        fired = True
        severe = severe or threshold.severe(value)

    if not fired:
        return RuleOutcome(None, tuple(recommended))

    evidence = tuple(
        format_marker(resolved[analyte.key])
        for analyte in rule.analytes
        if resolved[analyte.key] is not None
    )
    hypothesis = ConditionHypothesis(
        name=rule.hypothesis,
        probability=clamp_probability(rule.severe_probability if severe else rule.probability),
        severity=Severity.HIGH if severe else Severity.MEDIUM,
        supporting_evidence=evidence,
    )
    return RuleOutcome(hypothesis, tuple(recommended))


def stress_recovery_hypothesis() -> ConditionHypothesis:
    return ConditionHypothesis(
        name=STRESS_RECOVERY_HYPOTHESIS,
        probability=STRESS_RECOVERY_PROBABILITY,
        severity=Severity.LOW,
        supporting_evidence=(SLEEP_SIGNAL.evidence,),
    )


def insufficient_data_hypothesis() -> ConditionHypothesis:
    return ConditionHypothesis(
        name=INSUFFICIENT_DATA_HYPOTHESIS,
        probability=INSUFFICIENT_DATA_PROBABILITY,
        severity=Severity.LOW,
        supporting_evidence=(INSUFFICIENT_DATA_EVIDENCE,),
    )
