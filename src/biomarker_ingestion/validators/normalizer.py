# ============================================================================
# FILE: src/biomarker_ingestion/validators/normalizer.py
# ============================================================================
"""
Measurement Normalizer & Classifier

Turns raw candidate records from model output into validated
MeasurementRecords:
- value and range bounds go through the locale-aware number parser
- open-ended upper bounds are clamped to a ceiling
- name and unit must be non-empty after trimming
- status comes from a tolerance margin around the optimal range

Status rule (margin = range width * OPTIMAL_MARGIN_RATIO):
    [min - margin, max + margin]         -> optimal
    [min - 2*margin, max + 2*margin]     -> suboptimal
    anything else                        -> concerning

A zero-width range (min == max, or no range given at all) has a zero margin,
so any deviation is concerning.
"""

import logging
import math
from typing import Any, Dict, Iterable, List, Optional

from ..config import threshold_settings
from ..core.context import (
    MeasurementRecord,
    MeasurementStatus,
    OptimalRange,
    RawCandidateRecord,
)
from ..parsing.numbers import parse_locale_number, is_valid_number


logger = logging.getLogger(__name__)


def classify_status(
    value: float,
    optimal_range: OptimalRange,
    margin_ratio: Optional[float] = None,
    suboptimal_factor: Optional[float] = None
) -> MeasurementStatus:
    """
    Classify a value against its optimal range.

    Args:
        value: Measured value
        optimal_range: Expected [min, max]
        margin_ratio: Fraction of range width tolerated (default from settings)
        suboptimal_factor: Multiplier for the suboptimal band (default from settings)

    Returns:
        MeasurementStatus
    """
    if margin_ratio is None:
        margin_ratio = threshold_settings.OPTIMAL_MARGIN_RATIO
    if suboptimal_factor is None:
        suboptimal_factor = threshold_settings.SUBOPTIMAL_MARGIN_FACTOR

    margin = optimal_range.width * margin_ratio

    if optimal_range.min - margin <= value <= optimal_range.max + margin:
        return MeasurementStatus.OPTIMAL

    wide_margin = margin * suboptimal_factor
    if optimal_range.min - wide_margin <= value <= optimal_range.max + wide_margin:
        return MeasurementStatus.SUBOPTIMAL

    return MeasurementStatus.CONCERNING


class MeasurementNormalizer:
    """
    Validate raw candidates and build MeasurementRecords.

    Rejected candidates are dropped (logged at DEBUG), never replaced by a
    placeholder record.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or {}

        self.margin_ratio = self.config.get('margin_ratio', threshold_settings.OPTIMAL_MARGIN_RATIO)
        self.suboptimal_factor = self.config.get(
            'suboptimal_factor', threshold_settings.SUBOPTIMAL_MARGIN_FACTOR
        )
        self.range_ceiling = self.config.get('range_ceiling', threshold_settings.RANGE_MAX_CEILING)

    def classify(self, value: float, optimal_range: OptimalRange) -> MeasurementStatus:
        return classify_status(value, optimal_range, self.margin_ratio, self.suboptimal_factor)

    def normalize(self, raw: RawCandidateRecord) -> Optional[MeasurementRecord]:
        """
        Normalize one candidate.

        Returns:
            MeasurementRecord, or None when the candidate is rejected
        """
        value = parse_locale_number(raw.value)
        if not is_valid_number(value):
            logger.debug("Rejected candidate: value is not a finite number")
            return None

        name = self._clean_text(raw.name)
        unit = self._clean_text(raw.unit)
        if not name or not unit:
            logger.debug("Rejected candidate: empty name or unit")
            return None

        optimal_range = self.normalize_range(raw.range_min, raw.range_max)

        return MeasurementRecord(
            name=name,
            value=value,
            unit=unit,
            optimal_range=optimal_range,
            status=self.classify(value, optimal_range),
            description=str(raw.description) if raw.description else "",
        )

    def normalize_range(self, raw_min: Any, raw_max: Any) -> OptimalRange:
        """
        Parse range bounds; unparsable or absent bounds become 0.

        Upper bounds above the ceiling come from "> X" ranges where the model
        invented a huge maximum, so they are clamped. A maximum below the
        minimum is read the same way and becomes the ceiling.
        """
        low = self._parse_bound(raw_min)
        high = self._parse_bound(raw_max)

        # "> X" with no usable maximum
        if low > high:
            logger.debug(f"Range maximum below minimum ({high} < {low}), treating it as open-ended")
            high = self.range_ceiling

        if high > self.range_ceiling:
            high = self.range_ceiling
        low = min(low, high)

        return OptimalRange(min=low, max=high)

    def normalize_all(self, payloads: Iterable[Any]) -> List[MeasurementRecord]:
        """
        Normalize decoded records, dropping anything invalid.

        Args:
            payloads: Decoded JSON values from the recovery parser

        Returns:
            Valid MeasurementRecords in input order
        """
        records = []
        rejected = 0

        for payload in payloads:
            raw = RawCandidateRecord.from_json(payload)
            record = self.normalize(raw) if raw is not None else None
            if record is None:
                rejected += 1
                continue
            records.append(record)

        if rejected:
            logger.info(f"Normalized {len(records)} records, rejected {rejected}")

        return records

    @staticmethod
    def _parse_bound(raw: Any) -> float:
        bound = parse_locale_number(raw)
        if math.isnan(bound) or bound == -math.inf:
            return 0.0
        return bound

    @staticmethod
    def _clean_text(raw: Any) -> str:
        if raw is None:
            return ""
        return str(raw).strip()


def normalize_measurements(
    payloads: Iterable[Any],
    config: Optional[Dict[str, Any]] = None
) -> List[MeasurementRecord]:
    """
    Convenience function to normalize decoded records.

    Args:
        payloads: Decoded records
        config: Optional normalizer config

    Returns:
        Valid MeasurementRecords
    """
    return MeasurementNormalizer(config).normalize_all(payloads)
