# ============================================================================
# src/biomarker_ingestion/anonymization/anonymizer.py
# ============================================================================
"""
Anonymizer

Entry point for making document text safe to send to an inference service:
1. Extract demographics from the raw text (needs the unredacted text)
2. Redact personal identifiers
3. Re-scan the result with the leak validator (fails closed)

Only text that passed step 3 ever leaves this module.
"""

import logging
from typing import Any, Dict, Optional

from ..core.context import AnonymizedDocument, SourceMetadata
from ..utils.exceptions import InvalidInputError
from .demographics_extractor import DemographicsExtractor
from .leak_validator import LeakValidator
from .redactor import Redactor


logger = logging.getLogger(__name__)


class Anonymizer:
    """
    Combine demographics extraction, redaction and leak validation.

    Each collaborator can be swapped, e.g. a Redactor with a custom rule
    table.
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        redactor: Optional[Redactor] = None,
        leak_validator: Optional[LeakValidator] = None,
        demographics_extractor: Optional[DemographicsExtractor] = None
    ):
        self.config = config or {}
        self.redactor = redactor or Redactor()
        self.leak_validator = leak_validator or LeakValidator()
        self.demographics_extractor = demographics_extractor or DemographicsExtractor(self.config)

    def anonymize(
        self,
        raw_text: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> AnonymizedDocument:
        """
        Anonymize document text.

        Args:
            raw_text: Plain text extracted from the uploaded file
            metadata: Optional file metadata ('type', 'size')

        Returns:
            AnonymizedDocument

        Raises:
            InvalidInputError: raw_text is not a non-empty string
            AnonymizationValidationError: an identifier survived redaction
        """
        if not isinstance(raw_text, str) or not raw_text.strip():
            raise InvalidInputError("Content must be a non-empty string")

        demographics = self.demographics_extractor.extract(raw_text)
        redacted_text = self.redactor.redact(raw_text)
        self.leak_validator.validate(redacted_text)

        logger.info(f"Anonymized document ({len(raw_text)} -> {len(redacted_text)} chars)")

        return AnonymizedDocument(
            redacted_text=redacted_text,
            demographics=demographics,
            source_meta=SourceMetadata.from_mapping(metadata),
        )


def anonymize(raw_text: str, metadata: Optional[Dict[str, Any]] = None) -> AnonymizedDocument:
    """
    Convenience function to anonymize document text with default rules.
    """
    return Anonymizer().anonymize(raw_text, metadata)
