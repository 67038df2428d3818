# ============================================================================
# FILE: tests/unit/test_normalizer.py
# ============================================================================
"""
Unit tests for measurement normalization and status classification
"""

import math

import pytest

from biomarker_ingestion.core.context import MeasurementStatus, OptimalRange, RawCandidateRecord
from biomarker_ingestion.validators import (
    MeasurementNormalizer,
    classify_status,
    normalize_measurements,
)


def test_polish_decimal_record():
    """Test "184,0" with range {"0", "190,0"}"""
    records = normalize_measurements([{
        "name": "Total Cholesterol",
        "value": "184,0",
        "unit": "mg/dL",
        "optimalRange": {"min": "0", "max": "190,0"},
    }])

    assert len(records) == 1
    record = records[0]
    assert record.value == 184.0
    assert record.optimal_range == OptimalRange(min=0.0, max=190.0)
    assert record.status == MeasurementStatus.OPTIMAL


@pytest.mark.parametrize("value,expected", [
    (70, MeasurementStatus.OPTIMAL),     # inside
    (68, MeasurementStatus.OPTIMAL),     # within 10% margin (width 30 -> margin 3)
    (102.5, MeasurementStatus.OPTIMAL),
    (65, MeasurementStatus.SUBOPTIMAL),  # within 2x margin
    (105, MeasurementStatus.SUBOPTIMAL),
    (63.9, MeasurementStatus.CONCERNING),
    (120, MeasurementStatus.CONCERNING),
])
def test_classify_status_bands(value, expected):
    """Test margin bands around [70, 100]"""
    assert classify_status(value, OptimalRange(min=70, max=100)) == expected


def test_zero_width_range_is_strict():
    """Test min == max: only the exact value is optimal"""
    point = OptimalRange(min=5, max=5)

    assert classify_status(5, point) == MeasurementStatus.OPTIMAL
    assert classify_status(5.01, point) == MeasurementStatus.CONCERNING
    assert classify_status(4.99, point) == MeasurementStatus.CONCERNING


def test_missing_range_defaults_to_zero():
    """Test absent range becomes {0, 0}"""
    records = normalize_measurements([{"name": "Ferritin", "value": 50, "unit": "ng/mL"}])

    assert records[0].optimal_range == OptimalRange(min=0.0, max=0.0)
    assert records[0].status == MeasurementStatus.CONCERNING


def test_unparsable_bounds_default_to_zero():
    """Test garbage bounds"""
    normalizer = MeasurementNormalizer()
    assert normalizer.normalize_range("n/a", "190,0") == OptimalRange(min=0.0, max=190.0)
    assert normalizer.normalize_range(None, None) == OptimalRange(min=0.0, max=0.0)


def test_open_ended_upper_bound_clamped():
    """Test '> 40' ranges with huge maxima"""
    normalizer = MeasurementNormalizer()
    assert normalizer.normalize_range("40,0", 1e12) == OptimalRange(min=40.0, max=999999.0)
    assert normalizer.normalize_range(40, math.inf).max == 999999.0


def test_maximum_below_minimum_is_open_ended():
    """Test '> 40' with the maximum missing or below the minimum"""
    normalizer = MeasurementNormalizer()

    assert normalizer.normalize_range("40,0", None) == OptimalRange(min=40.0, max=999999.0)
    assert normalizer.normalize_range(10, 2) == OptimalRange(min=10.0, max=999999.0)
    assert normalizer.normalize_range(2e6, 0) == OptimalRange(min=999999.0, max=999999.0)


def test_lower_bound_only_range_classification():
    """Test a lower-bound-only range keeps high values optimal"""
    records = normalize_measurements([
        {"name": "HDL", "value": 75, "unit": "mg/dL", "optimalRange": {"min": "40,0", "max": None}},
    ])

    assert records[0].optimal_range == OptimalRange(min=40.0, max=999999.0)
    assert records[0].status == MeasurementStatus.OPTIMAL


def test_range_ceiling_configurable():
    """Test range_ceiling config"""
    normalizer = MeasurementNormalizer({"range_ceiling": 500})
    assert normalizer.normalize_range(0, 1000).max == 500


@pytest.mark.parametrize("payload", [
    {"name": "X", "value": "abc", "unit": "u"},
    {"name": "X", "value": None, "unit": "u"},
    {"name": "X", "value": "inf", "unit": "u"},
    {"name": "   ", "value": 1, "unit": "u"},
    {"name": "X", "value": 1, "unit": ""},
    {"name": "X", "value": 1},
    "not an object",
    42,
])
def test_invalid_candidates_dropped(payload):
    """Test rejection instead of placeholder records"""
    assert normalize_measurements([payload]) == []


def test_name_and_unit_trimmed():
    """Test whitespace trimming"""
    records = normalize_measurements([{"name": "  HDL ", "value": 55, "unit": " mg/dL ",
                                       "optimalRange": {"min": 40, "max": 60}}])
    assert records[0].name == "HDL"
    assert records[0].unit == "mg/dL"


def test_snake_case_range_key_accepted():
    """Test optimal_range spelling"""
    raw = RawCandidateRecord.from_json({"name": "A", "value": 1, "unit": "u",
                                        "optimal_range": {"min": 0, "max": 2}})
    assert raw.has_range
    assert raw.range_max == 2


def test_valid_records_keep_order():
    """Test order is preserved and invalid ones skipped"""
    records = normalize_measurements([
        {"name": "A", "value": 1, "unit": "u"},
        {"name": "B", "value": "bad", "unit": "u"},
        {"name": "C", "value": "3,5", "unit": "u"},
    ])
    assert [r.name for r in records] == ["A", "C"]
    assert records[1].value == 3.5


def test_margin_ratio_configurable():
    """Test margin_ratio config"""
    normalizer = MeasurementNormalizer({"margin_ratio": 0.0})
    assert normalizer.classify(101, OptimalRange(min=70, max=100)) == MeasurementStatus.CONCERNING
