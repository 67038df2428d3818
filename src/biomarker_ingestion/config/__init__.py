# ============================================================================
# src/biomarker_ingestion/config/__init__.py
# ============================================================================
"""
Convenient imports for all settings
"""

from .anonymization_config import anonymization_settings, AnonymizationSettings
from .thresholds_config import threshold_settings, ThresholdSettings
from .extraction_config import extraction_settings, ExtractionSettings
from .logging_config import logging_settings, LoggingSettings
