# ============================================================================
# src/biomarker_ingestion/utils/__init__.py
# ============================================================================
"""
Utility modules for the biomarker ingestion core.
"""

from .exceptions import (
    BiomarkerIngestionError,
    InvalidInputError,
    ValidationError,
    AnonymizationValidationError,
    ExtractionError,
    RecoveryExhaustedError,
    NoValidMeasurementsError,
    InferenceError,
    InvalidFileFormatError,
    ConfigurationError,
)

from .logging import (
    setup_logging,
    log_performance,
    JsonFormatter,
)

__all__ = [
    # Exceptions
    'BiomarkerIngestionError',
    'InvalidInputError',
    'ValidationError',
    'AnonymizationValidationError',
    'ExtractionError',
    'RecoveryExhaustedError',
    'NoValidMeasurementsError',
    'InferenceError',
    'InvalidFileFormatError',
    'ConfigurationError',
    # Logging
    'setup_logging',
    'log_performance',
    'JsonFormatter',
]
