# ============================================================================
# src/biomarker_ingestion/insights/generator.py
# ============================================================================
"""
Insight Generator

Health summary, biological age and recommendations for a merged measurement
set. With an inference client the model answers and the response parsers
validate; without one the local rules run.

If a model answer for one part is unusable, that part falls back to the
local rule and the result's source says so.
"""

import logging
from typing import List, Optional, Sequence

from ..core.context import AnalysisInsights, HealthSummary, MeasurementRecord, Recommendation
from ..inference.base import BaseInferenceClient
from ..inference.prompts import (
    build_biological_age_request,
    build_health_summary_request,
    build_recommendations_request,
)
from ..utils.exceptions import InferenceError
from .local_insights import (
    calculate_biological_age,
    generate_health_summary,
    generate_recommendations,
)
from .response_parsers import (
    parse_biological_age,
    parse_health_summary,
    parse_recommendations,
)


logger = logging.getLogger(__name__)

LOCAL_SOURCE = "local"


class InsightGenerator:
    """Produce AnalysisInsights, through a model when one is configured."""

    def __init__(self, client: Optional[BaseInferenceClient] = None):
        self.client = client

    async def generate(
        self,
        measurements: Sequence[MeasurementRecord],
        chronological_age: Optional[int] = None
    ) -> AnalysisInsights:
        """
        Generate insights for merged measurements.

        Args:
            measurements: Merged measurement records
            chronological_age: Optional user-provided age

        Returns:
            AnalysisInsights
        """
        measurements = list(measurements)

        if self.client is None:
            biological_age = calculate_biological_age(measurements)
            return AnalysisInsights(
                health_summary=generate_health_summary(measurements),
                biological_age=biological_age,
                recommendations=generate_recommendations(measurements),
                source=LOCAL_SOURCE,
            )

        fallbacks: List[str] = []
        health_summary = await self._model_health_summary(measurements, fallbacks)
        biological_age = await self._model_biological_age(measurements, chronological_age, fallbacks)
        recommendations = await self._model_recommendations(measurements, biological_age, fallbacks)

        source = self.client.model_name
        if fallbacks:
            source = f"{source}+{LOCAL_SOURCE}"
            logger.warning(f"Local fallback used for: {', '.join(fallbacks)}")

        return AnalysisInsights(
            health_summary=health_summary,
            biological_age=biological_age,
            recommendations=recommendations,
            source=source,
        )

    async def _model_health_summary(
        self,
        measurements: List[MeasurementRecord],
        fallbacks: List[str]
    ) -> HealthSummary:
        try:
            text = await self.client.infer(build_health_summary_request(measurements))
        except InferenceError as e:
            logger.warning(f"Health summary inference failed: {e}")
            fallbacks.append("health_summary")
            return generate_health_summary(measurements)

        payload = self.client.extract_json(text)
        if payload is None:
            fallbacks.append("health_summary")
            return generate_health_summary(measurements)

        return parse_health_summary(payload)

    async def _model_biological_age(
        self,
        measurements: List[MeasurementRecord],
        chronological_age: Optional[int],
        fallbacks: List[str]
    ) -> int:
        try:
            text = await self.client.infer(build_biological_age_request(measurements, chronological_age))
            return parse_biological_age(text)
        except InferenceError as e:
            logger.warning(f"Biological age inference failed: {e}")
            fallbacks.append("biological_age")
            return calculate_biological_age(measurements)

    async def _model_recommendations(
        self,
        measurements: List[MeasurementRecord],
        biological_age: Optional[int],
        fallbacks: List[str]
    ) -> List[Recommendation]:
        try:
            text = await self.client.infer(build_recommendations_request(measurements, biological_age))
        except InferenceError as e:
            logger.warning(f"Recommendations inference failed: {e}")
            fallbacks.append("recommendations")
            return generate_recommendations(measurements)

        payload = self.client.extract_json(text)
        if payload is None:
            fallbacks.append("recommendations")
            return generate_recommendations(measurements)

        return parse_recommendations(payload)


async def generate_insights(
    measurements: Sequence[MeasurementRecord],
    client: Optional[BaseInferenceClient] = None,
    chronological_age: Optional[int] = None
) -> AnalysisInsights:
    """
    Convenience function to generate insights.
    """
    return await InsightGenerator(client).generate(measurements, chronological_age)
