# src/biomarker_ingestion/core/context/__init__.py

from .enums import MeasurementStatus, Sex
from .measurement import OptimalRange, MeasurementRecord, RawCandidateRecord
from .demographics import DemographicProfile
from .document import SourceMetadata, AnonymizedDocument
from .insights import (
    ActionType,
    Impact,
    HealthSummary,
    Recommendation,
    AnalysisInsights,
)

__all__ = [
    "MeasurementStatus",
    "Sex",
    "OptimalRange",
    "MeasurementRecord",
    "RawCandidateRecord",
    "DemographicProfile",
    "SourceMetadata",
    "AnonymizedDocument",
    "ActionType",
    "Impact",
    "HealthSummary",
    "Recommendation",
    "AnalysisInsights",
]
