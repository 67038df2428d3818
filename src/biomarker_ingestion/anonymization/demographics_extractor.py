# ============================================================================
# src/biomarker_ingestion/anonymization/demographics_extractor.py
# ============================================================================
"""
Demographics Extraction

Pulls the few fields the analysis needs from raw document text, before any
redaction happens:
- Age (years)
- Weight (kg)
- Height (cm)
- Sex
- Test date

Each field has an ordered list of patterns. Patterns are tried in order; the
first match whose value passes the field's plausibility check wins. Values
that fail plausibility leave the field empty, they never raise.
"""

import logging
import re
from datetime import date
from enum import Enum
from typing import Any, Callable, Dict, Optional, Pattern, Sequence, Tuple, TypeVar

from ..config import anonymization_settings
from ..core.context import DemographicProfile, Sex
from ..parsing.numbers import parse_locale_number, is_valid_number


logger = logging.getLogger(__name__)

T = TypeVar("T")


# "Wiek: 42", "Age 42" / "42 lata", "42 years"
AGE_PATTERNS = [
    re.compile(r'\b(?:wiek|age|lat|years?)\b[\s:]*(\d{1,3})\b', re.IGNORECASE),
    re.compile(r'\b(\d{1,3})\s*(?:lata|lat|years?|roku)\b', re.IGNORECASE),
]

# "Masa ciała: 83,5 kg", "Weight: 83 kg" / "83 kg"
WEIGHT_PATTERNS = [
    re.compile(
        r'\b(?:masa(?:\s+ciała)?|weight|waga)\b[\s:]*(\d+(?:[.,]\d+)?)\s*(?:kg|kilogram)',
        re.IGNORECASE
    ),
    re.compile(r'(?<![\d.,])(\d+(?:[.,]\d+)?)\s*kg\b', re.IGNORECASE),
]

# "Wzrost: 181 cm", "Height: 181 cm" / "181 cm"
HEIGHT_PATTERNS = [
    re.compile(r'\b(?:wzrost|height|wysokość)\b[\s:]*(\d{2,3})\s*(?:cm|centymetr)', re.IGNORECASE),
    re.compile(r'(?<![\d.,])(\d{2,3})\s*cm\b', re.IGNORECASE),
]

MALE_PATTERNS = [
    re.compile(r'\b(?:płeć|gender|sex)\b[\s:]*(?:m|male|mężczyzna)\b', re.IGNORECASE),
    re.compile(r'\b(?:mężczyzna|male)\b', re.IGNORECASE),
]

FEMALE_PATTERNS = [
    re.compile(r'\b(?:płeć|gender|sex)\b[\s:]*(?:f|k|female|kobieta)\b', re.IGNORECASE),
    re.compile(r'\b(?:kobieta|female)\b', re.IGNORECASE),
]


class DateOrder(Enum):
    """How the three captured groups of a date pattern map to a date"""
    DAY_MONTH_YEAR = "dmy"
    YEAR_MONTH_DAY = "ymd"


DATE_PATTERNS = [
    (re.compile(r'(\d{1,2})\.(\d{1,2})\.(\d{4})'), DateOrder.DAY_MONTH_YEAR),
    (re.compile(r'(\d{4})-(\d{1,2})-(\d{1,2})'), DateOrder.YEAR_MONTH_DAY),
    (re.compile(r'(\d{1,2})/(\d{1,2})/(\d{4})'), DateOrder.DAY_MONTH_YEAR),
]


def calendar_date(year: int, month: int, day: int) -> Optional[date]:
    """
    Build a date only if it round-trips.

    The date built from (year, month, day) must read back as exactly the same
    numbers, which rules out e.g. 31.04 or 29.02 in a non-leap year.
    """
    try:
        candidate = date(year, month, day)
    except ValueError:
        return None

    if (candidate.year, candidate.month, candidate.day) != (year, month, day):
        return None
    return candidate


class DemographicsExtractor:
    """
    Regex-based demographics extraction.

    Config keys override the plausibility bounds from AnonymizationSettings:
    age_min, age_max, weight_min_kg, weight_max_kg, height_min_cm,
    height_max_cm, min_year, max_year.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or {}

        self.age_bounds = (
            self.config.get('age_min', anonymization_settings.AGE_MIN),
            self.config.get('age_max', anonymization_settings.AGE_MAX),
        )
        self.weight_bounds = (
            self.config.get('weight_min_kg', anonymization_settings.WEIGHT_MIN_KG),
            self.config.get('weight_max_kg', anonymization_settings.WEIGHT_MAX_KG),
        )
        self.height_bounds = (
            self.config.get('height_min_cm', anonymization_settings.HEIGHT_MIN_CM),
            self.config.get('height_max_cm', anonymization_settings.HEIGHT_MAX_CM),
        )
        self.year_bounds = (
            self.config.get('min_year', anonymization_settings.TEST_DATE_MIN_YEAR),
            self.config.get('max_year', anonymization_settings.TEST_DATE_MAX_YEAR),
        )

    def extract(self, text: str) -> DemographicProfile:
        """
        Extract every demographic field from text.

        Args:
            text: Raw (not yet redacted) document text

        Returns:
            DemographicProfile, fields left as None when not found
        """
        profile = DemographicProfile(
            age=self.extract_age(text),
            weight_kg=self.extract_weight(text),
            height_cm=self.extract_height(text),
            sex=self.extract_sex(text),
            test_date=self.extract_test_date(text),
        )

        found = [key for key, value in profile.to_dict().items() if value not in (None, Sex.UNKNOWN.value)]
        logger.debug(f"Demographics found: {', '.join(found) or 'none'}")

        return profile

    def extract_age(self, text: str) -> Optional[int]:
        return _first_plausible(AGE_PATTERNS, text, int, self.age_bounds)

    def extract_weight(self, text: str) -> Optional[float]:
        return _first_plausible(WEIGHT_PATTERNS, text, parse_locale_number, self.weight_bounds)

    def extract_height(self, text: str) -> Optional[int]:
        return _first_plausible(HEIGHT_PATTERNS, text, int, self.height_bounds)

    def extract_sex(self, text: str) -> Sex:
        """Male patterns are tried before female ones; no match is UNKNOWN."""
        if any(pattern.search(text) for pattern in MALE_PATTERNS):
            return Sex.MALE
        if any(pattern.search(text) for pattern in FEMALE_PATTERNS):
            return Sex.FEMALE
        return Sex.UNKNOWN

    def extract_test_date(self, text: str) -> Optional[str]:
        """
        Find the test date.

        Returns:
            ISO date string (YYYY-MM-DD) or None
        """
        min_year, max_year = self.year_bounds

        for pattern, order in DATE_PATTERNS:
            for match in pattern.finditer(text):
                first, second, third = (int(group) for group in match.groups())

                if order is DateOrder.DAY_MONTH_YEAR:
                    day, month, year = first, second, third
                else:
                    year, month, day = first, second, third

                if not min_year <= year <= max_year:
                    continue

                parsed = calendar_date(year, month, day)
                if parsed is not None:
                    return parsed.isoformat()

        return None


def _first_plausible(
    patterns: Sequence[Pattern[str]],
    text: str,
    convert: Callable[[str], T],
    bounds: Tuple[float, float]
) -> Optional[T]:
    """First converted match, over patterns in order, that lies within bounds."""
    low, high = bounds

    for pattern in patterns:
        for match in pattern.finditer(text):
            value = convert(match.group(1))
            if isinstance(value, float) and not is_valid_number(value):
                continue
            if low <= value <= high:
                return value

    return None


def extract_demographics(text: str, config: Optional[Dict[str, Any]] = None) -> DemographicProfile:
    """
    Convenience function to extract demographics from raw text.
    """
    return DemographicsExtractor(config).extract(text)
