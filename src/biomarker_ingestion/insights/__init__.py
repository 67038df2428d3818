# ============================================================================
# src/biomarker_ingestion/insights/__init__.py
# ============================================================================
"""
Insights Package

- Model response parsers for summary, biological age and recommendations
- Local rule-based generators
- InsightGenerator combining both
"""

from .response_parsers import (
    parse_health_summary,
    parse_recommendations,
    parse_biological_age,
)

from .local_insights import (
    generate_health_summary,
    calculate_biological_age,
    generate_recommendations,
)

from .generator import InsightGenerator, generate_insights

__all__ = [
    # Response parsing
    'parse_health_summary',
    'parse_recommendations',
    'parse_biological_age',

    # Local rules
    'generate_health_summary',
    'calculate_biological_age',
    'generate_recommendations',

    # Generation
    'InsightGenerator',
    'generate_insights',
]
