# ============================================================================
# src/biomarker_ingestion/inference/__init__.py
# ============================================================================
"""
Inference collaborator contract and prompt templates.

No backend lives here; applications subclass BaseInferenceClient.
"""

from .base import BaseInferenceClient, InferenceRequest
from .prompts import (
    PromptTask,
    PromptTemplate,
    ExtractionPrompts,
    measurements_to_json,
    build_text_extraction_request,
    build_vision_extraction_request,
    build_health_summary_request,
    build_biological_age_request,
    build_recommendations_request,
)

__all__ = [
    'BaseInferenceClient',
    'InferenceRequest',
    'PromptTask',
    'PromptTemplate',
    'ExtractionPrompts',
    'measurements_to_json',
    'build_text_extraction_request',
    'build_vision_extraction_request',
    'build_health_summary_request',
    'build_biological_age_request',
    'build_recommendations_request',
]
