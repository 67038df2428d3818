# ============================================================================
# src/biomarker_ingestion/insights/local_insights.py
# ============================================================================
"""
Local Rule-Based Insights

Used when no inference client is available. Simple heuristics over the
classified measurements:
- Health summary from a short list of high-impact markers
- Biological age as a status-weighted offset from a base age
- Recommendations for inflammation, vitamin D and LDL, then a general habit
"""

import logging
from typing import List, Optional, Sequence, Tuple

from ..core.context import (
    ActionType,
    HealthSummary,
    Impact,
    MeasurementRecord,
    MeasurementStatus,
    Recommendation,
)
from .response_parsers import round_half_up


logger = logging.getLogger(__name__)

SUMMARY_SIZE = 3
MAX_RECOMMENDATIONS = 3

BASE_BIOLOGICAL_AGE = 45
BIOLOGICAL_AGE_FLOOR = 30
BIOLOGICAL_AGE_CEILING = 80

AGE_OFFSETS = {
    MeasurementStatus.OPTIMAL: -0.5,
    MeasurementStatus.SUBOPTIMAL: 1.0,
    MeasurementStatus.CONCERNING: 2.0,
}

# (marker fragment, message template)
POSITIVE_MARKERS: Tuple[Tuple[str, str], ...] = (
    ("HbA1c", "Excellent blood sugar control (HbA1c: {value}{unit}) - reducing diabetes risk"),
    ("HDL", "Good HDL cholesterol levels ({value} {unit}) - supporting cardiovascular health"),
    ("Testosterone", "Healthy testosterone levels ({value} {unit}) - maintaining energy and vitality"),
    ("Hemoglobin", "Healthy hemoglobin levels ({value} {unit}) - good oxygen transport"),
    ("eGFR", "Good kidney function (eGFR: {value} {unit}) - supporting overall health"),
    ("TSH", "Normal thyroid function (TSH: {value} {unit}) - supporting metabolism"),
)

PRIORITY_MARKERS: Tuple[Tuple[str, str], ...] = (
    ("CRP", "Elevated inflammation (CRP: {value} {unit}) - focus on anti-inflammatory diet and stress management"),
    ("C-Reactive Protein", "Elevated inflammation (CRP: {value} {unit}) - focus on anti-inflammatory diet and stress management"),
    ("Vitamin D", "Vitamin D deficiency ({value} {unit}) - consider supplementation to reach optimal levels ({min}-{max} {unit})"),
    ("LDL", "LDL cholesterol above optimal ({value} {unit}) - implement dietary changes and regular exercise"),
    ("Total Cholesterol", "Total cholesterol elevated ({value} {unit}) - focus on heart-healthy diet and lifestyle"),
    ("Glucose", "Blood glucose needs attention ({value} {unit}) - consider dietary modifications and regular monitoring"),
    ("Creatinine", "{name} needs attention ({value} {unit}) - discuss kidney function with your doctor"),
)

INFLAMMATION_RECOMMENDATION = (
    "Reduce Inflammation",
    "Focus on anti-inflammatory foods: increase omega-3 intake (fatty fish, walnuts), add turmeric "
    "and ginger to your diet, and practice stress-reduction techniques like meditation.",
    ActionType.LIFESTYLE,
    Impact.HIGH,
)

VITAMIN_D_RECOMMENDATION = (
    "Optimize Vitamin D Levels",
    "Take 2000-4000 IU of Vitamin D3 daily with a meal containing fat. Get 15-20 minutes of sun "
    "exposure daily when possible. Re-test in 3 months.",
    ActionType.SUPPLEMENTATION,
    Impact.HIGH,
)

CHOLESTEROL_RECOMMENDATION = (
    "Improve Cholesterol Profile",
    "Reduce saturated fats, increase soluble fiber (oats, beans, apples), add plant sterols, and "
    "engage in 150 minutes of moderate exercise weekly.",
    ActionType.LIFESTYLE,
    Impact.HIGH,
)

EXERCISE_RECOMMENDATION = (
    "Maintain Regular Exercise",
    "Continue your current exercise routine. Aim for a mix of strength training (2-3x/week) and "
    "cardiovascular exercise (150 minutes/week) to support overall longevity.",
    ActionType.HABIT,
    Impact.MEDIUM,
)


def generate_health_summary(measurements: Sequence[MeasurementRecord]) -> HealthSummary:
    """
    Up to three positives and three priorities.

    Positives come from optimal high-impact markers, priorities from
    concerning then suboptimal high-impact markers. Both lists are topped up
    from the remaining markers of the same statuses.
    """
    optimal = _with_status(measurements, MeasurementStatus.OPTIMAL)
    needs_attention = (
        _with_status(measurements, MeasurementStatus.CONCERNING)
        + _with_status(measurements, MeasurementStatus.SUBOPTIMAL)
    )

    positives = _pick(
        optimal,
        POSITIVE_MARKERS,
        fallback=lambda m: f"{m.name} within optimal range" + (f" - {m.description}" if m.description else ""),
    )
    priorities = _pick(
        needs_attention,
        PRIORITY_MARKERS,
        fallback=lambda m: f"{m.name} needs attention ({_fmt(m.value)} {m.unit})"
        + (f" - {m.description}" if m.description else ""),
    )

    return HealthSummary(positives=positives, priorities=priorities)


def calculate_biological_age(measurements: Sequence[MeasurementRecord]) -> int:
    """Base 45, minus 0.5 per optimal, plus 1 per suboptimal and 2 per concerning; clamped to [30, 80]."""
    score = BASE_BIOLOGICAL_AGE + sum(AGE_OFFSETS[m.status] for m in measurements)
    return max(BIOLOGICAL_AGE_FLOOR, min(BIOLOGICAL_AGE_CEILING, round_half_up(score)))


def generate_recommendations(measurements: Sequence[MeasurementRecord]) -> List[Recommendation]:
    """
    Rule-based recommendations, at most three, priorities 1..n.

    Rules: concerning CRP, suboptimal vitamin D, suboptimal LDL. A general
    exercise habit is appended when fewer than three rules fired.
    """
    selected = []

    crp = _find(measurements, ("C-Reactive Protein", "CRP"))
    if crp is not None and crp.status is MeasurementStatus.CONCERNING:
        selected.append(INFLAMMATION_RECOMMENDATION)

    vitamin_d = _find(measurements, ("Vitamin D",))
    if vitamin_d is not None and vitamin_d.status is MeasurementStatus.SUBOPTIMAL:
        selected.append(VITAMIN_D_RECOMMENDATION)

    ldl = _find(measurements, ("LDL",))
    if ldl is not None and ldl.status is MeasurementStatus.SUBOPTIMAL:
        selected.append(CHOLESTEROL_RECOMMENDATION)

    logger.debug(f"Local recommendation rules fired: {len(selected)}")

    if len(selected) < MAX_RECOMMENDATIONS:
        selected.append(EXERCISE_RECOMMENDATION)

    return [
        Recommendation(
            title=title,
            description=description,
            action_type=action_type,
            impact=impact,
            priority=index,
        )
        for index, (title, description, action_type, impact) in enumerate(
            selected[:MAX_RECOMMENDATIONS], start=1
        )
    ]


def _pick(candidates, rules, fallback) -> List[str]:
    """High-impact matches first (in candidate order), then the rest via fallback."""
    messages = []
    used = set()

    for index, measurement in enumerate(candidates):
        template = _matching_template(measurement, rules)
        if template is None:
            continue
        messages.append(template.format(
            name=measurement.name,
            value=_fmt(measurement.value),
            unit=measurement.unit,
            min=_fmt(measurement.optimal_range.min),
            max=_fmt(measurement.optimal_range.max),
        ))
        used.add(index)
        if len(messages) == SUMMARY_SIZE:
            return messages

    for index, measurement in enumerate(candidates):
        if len(messages) == SUMMARY_SIZE:
            break
        if index not in used:
            messages.append(fallback(measurement))

    return messages


def _matching_template(measurement: MeasurementRecord, rules) -> Optional[str]:
    name = measurement.name.lower()
    for fragment, template in rules:
        if fragment.lower() in name:
            return template
    return None


def _find(measurements: Sequence[MeasurementRecord], fragments: Sequence[str]) -> Optional[MeasurementRecord]:
    for measurement in measurements:
        name = measurement.name.lower()
        if any(fragment.lower() in name for fragment in fragments):
            return measurement
    return None


def _with_status(measurements: Sequence[MeasurementRecord], status: MeasurementStatus) -> List[MeasurementRecord]:
    return [m for m in measurements if m.status is status]


def _fmt(number: float) -> str:
    # 35.0 -> "35", 4.5 -> "4.5"
    return f"{number:g}"
