# ============================================================================
# src/biomarker_ingestion/core/context/demographics.py
# ============================================================================
"""
Demographic fields pulled from document text before redaction.
Every field is independently optional; a missing field is not an error.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .enums import Sex


@dataclass(frozen=True)
class DemographicProfile:
    age: Optional[int] = None
    weight_kg: Optional[float] = None
    height_cm: Optional[int] = None
    sex: Sex = Sex.UNKNOWN
    test_date: Optional[str] = None  # YYYY-MM-DD

    def to_dict(self) -> Dict[str, Any]:
        return {
            "age": self.age,
            "weightKg": self.weight_kg,
            "heightCm": self.height_cm,
            "sex": self.sex.value,
            "testDate": self.test_date,
        }
