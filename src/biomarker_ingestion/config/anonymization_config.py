# ============================================================================
# src/biomarker_ingestion/config/anonymization_config.py
# ============================================================================
"""
Anonymization Settings
- Plausibility bounds for demographic fields
- Accepted test date year window
"""

from pydantic import Field
from pydantic_settings import BaseSettings

class AnonymizationSettings(BaseSettings):
    AGE_MIN: int = Field(
        default=1,
        ge=0,
        description="Smallest age (years) accepted from document text"
    )
    AGE_MAX: int = Field(
        default=120,
        ge=1,
        description="Largest age (years) accepted from document text"
    )
    WEIGHT_MIN_KG: float = Field(
        default=20.0,
        ge=0.0,
        description="Smallest body weight (kg) accepted from document text"
    )
    WEIGHT_MAX_KG: float = Field(
        default=300.0,
        ge=0.0,
        description="Largest body weight (kg) accepted from document text"
    )
    HEIGHT_MIN_CM: int = Field(
        default=100,
        ge=0,
        description="Smallest height (cm) accepted from document text"
    )
    HEIGHT_MAX_CM: int = Field(
        default=250,
        ge=0,
        description="Largest height (cm) accepted from document text"
    )
    TEST_DATE_MIN_YEAR: int = Field(
        default=2000,
        description="Earliest year accepted for a test date"
    )
    TEST_DATE_MAX_YEAR: int = Field(
        default=2100,
        description="Latest year accepted for a test date"
    )

anonymization_settings = AnonymizationSettings()
