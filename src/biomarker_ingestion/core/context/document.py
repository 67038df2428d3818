# ============================================================================
# src/biomarker_ingestion/core/context/document.py
# ============================================================================
"""
Anonymized document representation
- Redacted text (placeholder tokens instead of personal data)
- Demographics extracted before redaction
- Source metadata
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .demographics import DemographicProfile


@dataclass(frozen=True)
class SourceMetadata:
    content_type: str = "unknown"
    size_bytes: int = 0
    processed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_mapping(cls, metadata: Optional[Dict[str, Any]]) -> "SourceMetadata":
        """Build from a loose mapping with 'type' and 'size' keys."""
        metadata = metadata or {}
        content_type = metadata.get("type") or metadata.get("content_type") or "unknown"
        size = metadata.get("size") or 0
        return cls(content_type=str(content_type), size_bytes=int(size))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fileType": self.content_type,
            "fileSize": self.size_bytes,
            "anonymizedAt": self.processed_at.isoformat(),
        }


@dataclass(frozen=True)
class AnonymizedDocument:
    redacted_text: str
    demographics: DemographicProfile
    source_meta: SourceMetadata

    def to_dict(self) -> Dict[str, Any]:
        return {
            "anonymizedContent": self.redacted_text,
            "medicalData": self.demographics.to_dict(),
            "metadata": self.source_meta.to_dict(),
        }
