# ============================================================================
# src/biomarker_ingestion/utils/exceptions.py
# ============================================================================
"""
Custom exceptions for the biomarker ingestion core.
"""

from typing import List, Optional


class BiomarkerIngestionError(Exception):
    """Base exception for all biomarker ingestion errors."""
    pass


class InvalidInputError(BiomarkerIngestionError):
    """Input violates the caller contract (wrong type or empty)."""
    pass


class ValidationError(BiomarkerIngestionError):
    """Error during data validation."""
    pass


class AnonymizationValidationError(ValidationError):
    """Personal data survived redaction. The redacted text is withheld."""
    def __init__(self, message: str, leaked_categories: Optional[List[str]] = None):
        super().__init__(message)
        self.leaked_categories = list(leaked_categories or [])


class ExtractionError(BiomarkerIngestionError):
    """Error turning a model response into measurement records."""
    pass


class RecoveryExhaustedError(ExtractionError):
    """No complete record could be recovered from the response text."""
    def __init__(self, message: str, tail: str = ""):
        super().__init__(message)
        self.tail = tail


class NoValidMeasurementsError(ExtractionError):
    """Records were recovered but every one was rejected by normalization."""
    def __init__(self, message: str, rejected: int = 0):
        super().__init__(message)
        self.rejected = rejected


class InferenceError(BiomarkerIngestionError):
    """Error reported by an inference collaborator."""
    pass


class InvalidFileFormatError(BiomarkerIngestionError):
    """Uploaded file has an unsupported type or size."""
    def __init__(self, message: str, content_type: Optional[str] = None, size: int = 0):
        super().__init__(message)
        self.content_type = content_type
        self.size = size


class ConfigurationError(BiomarkerIngestionError):
    """Invalid configuration."""
    pass
