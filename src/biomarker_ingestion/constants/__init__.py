# ============================================================================
# src/biomarker_ingestion/constants/__init__.py
# ============================================================================

from .document_types import SourceKind, SUPPORTED_MIME_TYPES, source_kind
from .institutions import KNOWN_INSTITUTION_FRAGMENTS

__all__ = [
    "SourceKind",
    "SUPPORTED_MIME_TYPES",
    "source_kind",
    "KNOWN_INSTITUTION_FRAGMENTS",
]
