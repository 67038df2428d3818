# ============================================================================
# src/biomarker_ingestion/core/context/insights.py
# ============================================================================
"""
Insight representations
- Health summary (positives / priorities)
- Recommendations
- Combined insights for one analysis
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ActionType(str, Enum):
    SUPPLEMENTATION = "supplementation"
    HABIT = "habit"
    LIFESTYLE = "lifestyle"


class Impact(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class HealthSummary:
    positives: List[str] = field(default_factory=list)
    priorities: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"positives": list(self.positives), "priorities": list(self.priorities)}


@dataclass(frozen=True)
class Recommendation:
    title: str
    description: str
    action_type: ActionType
    impact: Impact
    priority: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "actionType": self.action_type.value,
            "impact": self.impact.value,
            "priority": self.priority,
        }


@dataclass(frozen=True)
class AnalysisInsights:
    health_summary: HealthSummary
    biological_age: Optional[int]
    recommendations: List[Recommendation] = field(default_factory=list)
    source: str = "local"  # "local" or the model name

    def to_dict(self) -> Dict[str, Any]:
        return {
            "healthSummary": self.health_summary.to_dict(),
            "biologicalAge": self.biological_age,
            "recommendations": [r.to_dict() for r in self.recommendations],
            "source": self.source,
        }
