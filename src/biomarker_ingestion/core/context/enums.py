# ============================================================================
# src/biomarker_ingestion/core/context/enums.py
# ============================================================================
"""
Processing Enums
- Measurement status and its severity ordering
- Biological sex
"""

from enum import Enum

class MeasurementStatus(str, Enum):
    OPTIMAL = "optimal"
    SUBOPTIMAL = "suboptimal"
    CONCERNING = "concerning"

    @property
    def severity(self) -> int:
        """Severity rank: concerning > suboptimal > optimal."""
        return _SEVERITY[self]

_SEVERITY = {
    MeasurementStatus.OPTIMAL: 1,
    MeasurementStatus.SUBOPTIMAL: 2,
    MeasurementStatus.CONCERNING: 3,
}

class Sex(str, Enum):
    MALE = "male"
    FEMALE = "female"
    UNKNOWN = "unknown"
