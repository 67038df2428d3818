# src/biomarker_ingestion/processors/__init__.py

from .measurement_extractor import MeasurementExtractor, extract_measurements

__all__ = [
    "MeasurementExtractor",
    "extract_measurements",
]
