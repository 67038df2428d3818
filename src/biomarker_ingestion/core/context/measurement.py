# ============================================================================
# src/biomarker_ingestion/core/context/measurement.py
# ============================================================================
"""
Measurement representations

RawCandidateRecord is whatever the model handed back for one record, untrusted
and loosely typed. MeasurementRecord is the validated form. The normalizer is
the only place that turns one into the other.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .enums import MeasurementStatus


@dataclass(frozen=True)
class OptimalRange:
    min: float
    max: float

    @property
    def midpoint(self) -> float:
        return (self.min + self.max) / 2

    @property
    def width(self) -> float:
        return self.max - self.min


@dataclass(frozen=True)
class MeasurementRecord:
    name: str  # canonical English label
    value: float
    unit: str
    optimal_range: OptimalRange
    status: MeasurementStatus
    description: str = ""

    def distance_from_midpoint(self) -> float:
        """Absolute distance of the value from its own range midpoint."""
        return abs(self.value - self.optimal_range.midpoint)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "value": self.value,
            "unit": self.unit,
            "optimalRange": {
                "min": self.optimal_range.min,
                "max": self.optimal_range.max,
            },
            "status": self.status.value,
            "description": self.description,
        }


@dataclass(frozen=True)
class RawCandidateRecord:
    """
    One record as recovered from model output.

    Every field keeps whatever type the model produced: numbers, locale
    strings ("184,0"), empty strings or None.
    """
    name: Any = None
    value: Any = None
    unit: Any = None
    range_min: Any = None
    range_max: Any = None
    has_range: bool = False
    description: Any = None

    @classmethod
    def from_json(cls, payload: Any) -> Optional["RawCandidateRecord"]:
        """Wrap a decoded JSON value; anything but an object yields None."""
        if not isinstance(payload, dict):
            return None

        optimal_range = payload.get("optimalRange", payload.get("optimal_range"))
        has_range = isinstance(optimal_range, dict)

        return cls(
            name=payload.get("name"),
            value=payload.get("value"),
            unit=payload.get("unit"),
            range_min=optimal_range.get("min") if has_range else None,
            range_max=optimal_range.get("max") if has_range else None,
            has_range=has_range,
            description=payload.get("description"),
        )
