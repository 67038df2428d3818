# ============================================================================
# src/biomarker_ingestion/insights/response_parsers.py
# ============================================================================
"""
Insight Response Parsers

Validate what the model returned for summary, biological age and
recommendation requests. Malformed entries are dropped. Nothing is filled in
with defaults; a short answer stays short.
"""

import json
import logging
import math
import re
from typing import Any, List, Optional

from ..core.context import ActionType, HealthSummary, Impact, Recommendation
from ..parsing.numbers import is_valid_number, parse_locale_number
from ..parsing.recovery_parser import strip_code_fences
from ..utils.exceptions import InferenceError


logger = logging.getLogger(__name__)

MAX_SUMMARY_ITEMS = 3
MAX_RECOMMENDATIONS = 3

BIOLOGICAL_AGE_MIN = 20
BIOLOGICAL_AGE_MAX = 100
MAX_AGE_RESPONSE_CHARS = 1000

_AGE_KEYS = ("biologicalAge", "age", "biological_age")
_PLAUSIBLE_AGE = re.compile(r'\b([2-9][0-9]|100)\b')
_ANY_INTEGER = re.compile(r'\d+')


def parse_health_summary(payload: Any) -> HealthSummary:
    """
    Keep non-empty strings, at most three positives and three priorities.
    """
    if not isinstance(payload, dict):
        return HealthSummary()

    return HealthSummary(
        positives=_non_empty_strings(payload.get("positives"))[:MAX_SUMMARY_ITEMS],
        priorities=_non_empty_strings(payload.get("priorities"))[:MAX_SUMMARY_ITEMS],
    )


def parse_recommendations(payload: Any) -> List[Recommendation]:
    """
    Validate recommendation entries.

    Accepts the {"recommendations": [...]} envelope or a bare list. An entry
    survives when it has a title, a description, a known actionType and
    impact, and a numeric priority. Survivors are cut to three and their
    priorities renumbered 1..n in the order given.
    """
    if isinstance(payload, dict):
        payload = payload.get("recommendations")
    if not isinstance(payload, list):
        return []

    valid = [entry for entry in payload if _is_valid_recommendation(entry)]
    dropped = len(payload) - len(valid)
    if dropped:
        logger.debug(f"Dropped {dropped} malformed recommendations")

    return [
        Recommendation(
            title=str(entry["title"]).strip(),
            description=str(entry["description"]).strip(),
            action_type=ActionType(entry["actionType"]),
            impact=Impact(entry["impact"]),
            priority=index,
        )
        for index, entry in enumerate(valid[:MAX_RECOMMENDATIONS], start=1)
    ]


def parse_biological_age(response_text: str) -> int:
    """
    Read a biological age out of a model response.

    Order of attempts:
    1. JSON object with biologicalAge / age / biological_age
    2. first two-digit number between 20 and 100 in the text
    3. any integer in the text, if it lies in range

    Raises:
        InferenceError: suspicious response (only zeros, or over 1000
            characters), no age found, or age outside [20, 100]
    """
    if not isinstance(response_text, str):
        raise InferenceError("Invalid AI response for biological age calculation")

    stripped = response_text.strip()
    if re.fullmatch(r'0+', stripped) or len(response_text) > MAX_AGE_RESPONSE_CHARS:
        raise InferenceError(
            "Invalid AI response for biological age calculation: "
            "response contains only zeros or is too long"
        )

    cleaned = strip_code_fences(response_text)
    age = _age_from_json(cleaned)
    if age is None:
        age = _age_from_text(cleaned)

    if age is None:
        raise InferenceError(
            f"Invalid biological age calculated. AI response: {cleaned[:200]}"
        )

    if not BIOLOGICAL_AGE_MIN <= age <= BIOLOGICAL_AGE_MAX:
        raise InferenceError(
            f"Invalid biological age calculated: {age} "
            f"(must be between {BIOLOGICAL_AGE_MIN}-{BIOLOGICAL_AGE_MAX})"
        )

    return round_half_up(age)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _age_from_json(cleaned: str) -> Optional[float]:
    try:
        payload = json.loads(cleaned)
    except (ValueError, RecursionError):
        return None

    if isinstance(payload, dict):
        for key in _AGE_KEYS:
            value = payload.get(key)
            if _is_number(value) and value:
                return float(value)
        return None

    if _is_number(payload):
        return float(payload)

    return None


def _age_from_text(cleaned: str) -> Optional[float]:
    match = _PLAUSIBLE_AGE.search(cleaned)
    if match:
        return float(match.group(1))

    match = _ANY_INTEGER.search(cleaned)
    if match:
        value = int(match.group(0))
        if BIOLOGICAL_AGE_MIN <= value <= BIOLOGICAL_AGE_MAX:
            return float(value)

    return None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and is_valid_number(parse_locale_number(value))


def _non_empty_strings(items: Any) -> List[str]:
    if not isinstance(items, list):
        return []
    return [item for item in items if isinstance(item, str) and item.strip()]


def _is_valid_recommendation(entry: Any) -> bool:
    if not isinstance(entry, dict):
        return False

    return bool(
        entry.get("title")
        and entry.get("description")
        and entry.get("actionType") in {a.value for a in ActionType}
        and entry.get("impact") in {i.value for i in Impact}
        and _is_number(entry.get("priority"))
    )
