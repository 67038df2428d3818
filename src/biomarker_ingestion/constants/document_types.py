# ============================================================================
# src/biomarker_ingestion/constants/document_types.py
# ============================================================================
"""
Supported upload types
- MIME types accepted by the pipeline
- Which of them the vision fallback can read
"""

from enum import Enum

class SourceKind(str, Enum):
    """Broad kind of an uploaded document."""
    PDF = "pdf"
    IMAGE = "image"
    UNKNOWN = "unknown"

SUPPORTED_MIME_TYPES = {
    "application/pdf": SourceKind.PDF,
    "image/jpeg": SourceKind.IMAGE,
    "image/jpg": SourceKind.IMAGE,
    "image/png": SourceKind.IMAGE,
    "image/webp": SourceKind.IMAGE,
}

def source_kind(content_type: str) -> SourceKind:
    """Map a MIME type to its SourceKind (UNKNOWN when unsupported)."""
    return SUPPORTED_MIME_TYPES.get((content_type or "").lower(), SourceKind.UNKNOWN)
