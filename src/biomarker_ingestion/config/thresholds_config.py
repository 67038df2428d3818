# ============================================================================
# src/biomarker_ingestion/config/thresholds_config.py
# ============================================================================
"""
Classification Thresholds
- Tolerance margin around the optimal range
- Ceiling for open-ended ("greater than") ranges
"""

from pydantic import Field
from pydantic_settings import BaseSettings

class ThresholdSettings(BaseSettings):
    OPTIMAL_MARGIN_RATIO: float = Field(
        default=0.10,
        ge=0.0, le=1.0,
        description="Fraction of the range width tolerated on each side before a value stops being optimal"
    )
    SUBOPTIMAL_MARGIN_FACTOR: float = Field(
        default=2.0,
        ge=1.0,
        description="Multiplier applied to the optimal margin to get the suboptimal band"
    )
    RANGE_MAX_CEILING: float = Field(
        default=999999.0,
        gt=0.0,
        description="Upper bounds above this are clamped (model output for '> X' ranges)"
    )

threshold_settings = ThresholdSettings()
