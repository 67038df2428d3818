# ============================================================================
# src/biomarker_ingestion/__init__.py
# ============================================================================
"""
Biomarker Ingestion

Anonymization and measurement extraction core for lab test documents:
- anonymize(): demographics, identifier redaction, leak validation
- extract_measurements(): tolerant parsing of model responses
- merge_measurements(): cross-document deduplication
- AnalysisPipeline: the whole flow for several uploads
"""

__version__ = "0.1.0"

from .anonymization import anonymize, Anonymizer
from .core.pipeline import AnalysisPipeline, AnalysisResult, UploadedDocument, validate_upload
from .inference import BaseInferenceClient, InferenceRequest
from .insights import InsightGenerator
from .parsing import parse_locale_number
from .processors import extract_measurements
from .validators import merge_measurements

__all__ = [
    "anonymize",
    "Anonymizer",
    "AnalysisPipeline",
    "AnalysisResult",
    "UploadedDocument",
    "validate_upload",
    "BaseInferenceClient",
    "InferenceRequest",
    "InsightGenerator",
    "parse_locale_number",
    "extract_measurements",
    "merge_measurements",
]
