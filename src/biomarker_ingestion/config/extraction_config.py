# ============================================================================
# src/biomarker_ingestion/config/extraction_config.py
# ============================================================================
"""
Extraction Settings
- Response envelope shape
- Prompt and generation limits
- Upload limits and the unanonymized vision fallback switch
"""

from pydantic import Field
from pydantic_settings import BaseSettings

class ExtractionSettings(BaseSettings):
    RECORDS_FIELD: str = Field(
        default="biomarkers",
        min_length=1,
        description="Name of the array holding measurement records in the model response"
    )
    ERROR_TAIL_CHARS: int = Field(
        default=500,
        ge=0,
        description="How much of an unparsable response tail to keep for diagnostics"
    )
    PROMPT_MAX_CHARS: int = Field(
        default=8000,
        gt=0,
        description="Document text beyond this length is cut from the extraction prompt"
    )
    MIN_TEXT_LENGTH: int = Field(
        default=50,
        ge=0,
        description="Extracted text shorter than this is treated as a failed text extraction"
    )
    MAX_OUTPUT_TOKENS: int = Field(
        default=16384,
        gt=0,
        description="Generation limit for measurement extraction (long biomarker lists)"
    )
    EXTRACTION_TEMPERATURE: float = Field(
        default=0.1,
        ge=0.0, le=2.0,
        description="Sampling temperature for measurement extraction"
    )
    ALLOW_UNANONYMIZED_VISION_FALLBACK: bool = Field(
        default=False,
        description="Send the original file to the model when text extraction failed. The file is NOT anonymized."
    )
    MAX_UPLOAD_BYTES: int = Field(
        default=10 * 1024 * 1024,
        gt=0,
        description="Largest accepted upload"
    )

extraction_settings = ExtractionSettings()
