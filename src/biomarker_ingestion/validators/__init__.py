# ============================================================================
# FILE: src/biomarker_ingestion/validators/__init__.py
# ============================================================================
"""
Validators Package

- Measurement normalization and status classification
- Conflict resolution when several documents report the same measurement
"""

from .normalizer import (
    MeasurementNormalizer,
    classify_status,
    normalize_measurements,
)

from .conflict_resolver import (
    ConflictResolver,
    ConflictResolution,
    merge_measurements,
)

__all__ = [
    # Normalization
    'MeasurementNormalizer',
    'classify_status',
    'normalize_measurements',

    # Conflict resolution
    'ConflictResolver',
    'ConflictResolution',
    'merge_measurements',
]
