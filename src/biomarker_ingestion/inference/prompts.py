# ============================================================================
# src/biomarker_ingestion/inference/prompts.py
# ============================================================================
"""
Prompt Templates

Provides:
- Measurement extraction prompts (from redacted text, or from an inline file)
- Health summary, biological age and recommendation prompts
- Builders that fill templates and pick generation settings
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from ..config import extraction_settings
from ..core.context import MeasurementRecord
from .base import InferenceRequest


class PromptTask(Enum):
    """Tasks the inference service is asked to perform"""
    MEASUREMENT_EXTRACTION = "measurement_extraction"
    VISION_EXTRACTION = "vision_extraction"
    HEALTH_SUMMARY = "health_summary"
    BIOLOGICAL_AGE = "biological_age"
    RECOMMENDATIONS = "recommendations"


@dataclass
class PromptTemplate:
    """Prompt template"""
    name: str
    task: PromptTask
    template: str
    description: str
    required_fields: List[str]
    temperature: float = 0.1

    def format(self, **kwargs) -> str:
        """
        Format template with provided values.

        Args:
            **kwargs: Template variables

        Returns:
            Formatted prompt

        Raises:
            ValueError: a required field is missing
        """
        missing = [f for f in self.required_fields if f not in kwargs]
        if missing:
            raise ValueError(f"Missing required fields: {missing}")

        return self.template.format(**kwargs)


_RECORD_SCHEMA = """Return as JSON with this structure:

{{
  "{records_field}": [
    {{
      "name": "Biomarker name (use English name, e.g., 'Total Cholesterol' or 'RBC')",
      "value": numeric_value,
      "unit": "unit (e.g., 'mg/dL', 'g/dL', 'mln/μl', 'tys./μl')",
      "optimalRange": {{"min": min_value, "max": max_value}}
    }}
  ]
}}

IMPORTANT: Parse optimal ranges correctly:
- Range format "4,50 – 5,90" → min: 4.50, max: 5.90
- Maximum format "< 190,0" → min: 0, max: 190.0
- Minimum format "> 40,0" → min: 40.0, max: 999999
"""

_COMMON_MARKERS = """Common biomarkers to look for (Polish and English names):
- MORFOLOGIA (CBC): Erytrocyty / RBC, Hemoglobina / HGB, Hematokryt / HCT,
  Leukocyty / WBC, Płytki krwi / PLT, MCV, MCH, MCHC
- BIOCHEMIA: Glukoza na czczo / Fasting Glucose, Cholesterol całkowity / Total Cholesterol,
  Cholesterol LDL / LDL, Cholesterol HDL / HDL, Trójglicerydy / Triglycerides,
  ALT, AST, ALP, Bilirubina / Bilirubin, GGT, Kreatynina / Creatinine, Mocznik / Urea, eGFR
- HORMONY: TSH, Free T4, Free T3, Testosteron / Testosterone, PSA całkowity / Total PSA
- WITAMINY: Witamina D / Vitamin D / 25(OH)D3, Wapń / Calcium, Fosfor / Phosphorus, Magnez / Magnesium
- INNE: CRP / C-Reactive Protein, OB / ESR

Handle Polish decimal separator (comma): "184,0" = 184.0
Handle Polish units: "mln/μl" = million per microliter, "tys./μl" = thousand per microliter
"""


class ExtractionPrompts:
    """Collection of prompt templates."""

    TEXT_EXTRACTION_TEMPLATE = PromptTemplate(
        name="text_extraction",
        task=PromptTask.MEASUREMENT_EXTRACTION,
        template=(
            "You are a medical data extraction assistant. Extract biomarker values from blood "
            "test results and return them as structured JSON. Only extract values that are "
            "clearly present in the document.\n\n"
            "Extract all biomarker values from this blood test result document. The document "
            "may be in Polish or English, and may be in table format.\n\n"
            + _RECORD_SCHEMA + "\n" + _COMMON_MARKERS +
            "\nDocument content:\n{document_text}\n"
        ),
        description="Extract measurements from redacted document text",
        required_fields=["document_text", "records_field"],
        temperature=0.1,
    )

    VISION_EXTRACTION_TEMPLATE = PromptTemplate(
        name="vision_extraction",
        task=PromptTask.VISION_EXTRACTION,
        template=(
            "You are a medical data extraction assistant. Extract biomarker values from blood "
            "test results shown in images or PDFs. The document may be in Polish or English, "
            "and may be in table format.\n\n"
            "IMPORTANT for Polish documents:\n"
            "- Handle Polish decimal separator (comma): \"184,0\" = 184.0\n"
            "- Handle Polish units: \"mln/μl\" = million per microliter, \"tys./μl\" = thousand per microliter\n"
            "- Parse table format: Name | Result | Unit | Normal Range | Status\n"
            "- Handle different range formats: \"4,50 – 5,90\" (range), \"< 190,0\" (maximum), \"> 40,0\" (minimum)\n\n"
            "Only extract values that are clearly visible in the document.\n\n"
            + _RECORD_SCHEMA
        ),
        description="Extract measurements from an attached file",
        required_fields=["records_field"],
        temperature=0.1,
    )

    HEALTH_SUMMARY_TEMPLATE = PromptTemplate(
        name="health_summary",
        task=PromptTask.HEALTH_SUMMARY,
        template="""You are a health analysis assistant. Analyze these biomarkers and provide a health summary in plain language for a non-medical user.

Biomarkers:
{measurements_json}

Return JSON with this structure:
{{
  "positives": ["First positive aspect", "Second positive aspect", "Third positive aspect"],
  "priorities": ["First priority concern", "Second priority concern", "Third priority concern"]
}}

Requirements:
- Exactly 3 positives (focus on optimal biomarkers)
- Exactly 3 priorities (focus on suboptimal or concerning biomarkers)
- Use plain language, avoid medical jargon
- Use English biomarker names (e.g., "Total Cholesterol" not "Cholesterol całkowity")
""",
        description="Summarize strengths and priorities",
        required_fields=["measurements_json"],
        temperature=0.3,
    )

    BIOLOGICAL_AGE_TEMPLATE = PromptTemplate(
        name="biological_age",
        task=PromptTask.BIOLOGICAL_AGE,
        template="""You are a biological age calculation assistant. Calculate biological age based on these biomarkers using validated algorithms (PhenoAge, DunedinPACE, or similar).

Biomarkers:
{measurements_json}
{age_context}
Return ONLY valid JSON in this exact format:
{{
  "biologicalAge": 42
}}

Requirements:
- Consider all available biomarkers and their values relative to optimal ranges
- Return a realistic biological age as a number between 20-100 years
- Do NOT return zeros, empty strings, or invalid values
- Return ONLY the JSON object, nothing else
""",
        description="Estimate biological age",
        required_fields=["measurements_json", "age_context"],
        temperature=0.1,
    )

    RECOMMENDATIONS_TEMPLATE = PromptTemplate(
        name="recommendations",
        task=PromptTask.RECOMMENDATIONS,
        template="""You are a health recommendation assistant. Based on these biomarkers and biological age, provide 3 prioritized actionable recommendations.

Biomarkers:
{measurements_json}

Biological Age: {biological_age}

Return JSON:
{{
  "recommendations": [
    {{
      "title": "Recommendation title",
      "description": "Detailed description with specific guidance (e.g., 'Take 2000-4000 IU Vitamin D3 daily')",
      "actionType": "supplementation" | "habit" | "lifestyle",
      "impact": "high" | "medium" | "low",
      "priority": 1
    }}
  ]
}}

Requirements:
- Exactly 3 recommendations, prioritized by impact
- Use active substance names (e.g., 'Vitamin D3', 'Omega-3'), NOT brand names
- Provide specific dosages/ranges when applicable
- Use English names in your response (e.g., "Vitamin D" not "Witamina D")
""",
        description="Prioritized recommendations",
        required_fields=["measurements_json", "biological_age"],
        temperature=0.4,
    )

    @classmethod
    def get_template(cls, task: PromptTask) -> Optional[PromptTemplate]:
        """Get template by task"""
        template_map = {
            PromptTask.MEASUREMENT_EXTRACTION: cls.TEXT_EXTRACTION_TEMPLATE,
            PromptTask.VISION_EXTRACTION: cls.VISION_EXTRACTION_TEMPLATE,
            PromptTask.HEALTH_SUMMARY: cls.HEALTH_SUMMARY_TEMPLATE,
            PromptTask.BIOLOGICAL_AGE: cls.BIOLOGICAL_AGE_TEMPLATE,
            PromptTask.RECOMMENDATIONS: cls.RECOMMENDATIONS_TEMPLATE,
        }
        return template_map.get(task)


def measurements_to_json(measurements: Sequence[MeasurementRecord]) -> str:
    return json.dumps([m.to_dict() for m in measurements], indent=2, ensure_ascii=False)


def build_text_extraction_request(
    redacted_text: str,
    config: Optional[Dict[str, Any]] = None
) -> InferenceRequest:
    """
    Build the extraction request for redacted document text.

    Text beyond prompt_max_chars is cut off.
    """
    config = config or {}
    max_chars = config.get('prompt_max_chars', extraction_settings.PROMPT_MAX_CHARS)
    template = ExtractionPrompts.TEXT_EXTRACTION_TEMPLATE

    prompt = template.format(
        document_text=redacted_text[:max_chars],
        records_field=config.get('records_field', extraction_settings.RECORDS_FIELD),
    )
    return InferenceRequest(
        prompt=prompt,
        temperature=config.get('temperature', extraction_settings.EXTRACTION_TEMPERATURE),
        max_output_tokens=config.get('max_output_tokens', extraction_settings.MAX_OUTPUT_TOKENS),
    )


def build_vision_extraction_request(
    inline_data: str,
    mime_type: str,
    config: Optional[Dict[str, Any]] = None
) -> InferenceRequest:
    """
    Build the extraction request that carries the original file.

    The attached file is NOT anonymized.
    """
    config = config or {}
    template = ExtractionPrompts.VISION_EXTRACTION_TEMPLATE

    prompt = template.format(
        records_field=config.get('records_field', extraction_settings.RECORDS_FIELD),
    )
    return InferenceRequest(
        prompt=prompt,
        inline_data=inline_data,
        mime_type=mime_type or "image/jpeg",
        temperature=config.get('temperature', extraction_settings.EXTRACTION_TEMPERATURE),
        max_output_tokens=config.get('max_output_tokens', extraction_settings.MAX_OUTPUT_TOKENS),
    )


def build_health_summary_request(measurements: Sequence[MeasurementRecord]) -> InferenceRequest:
    template = ExtractionPrompts.HEALTH_SUMMARY_TEMPLATE
    return InferenceRequest(
        prompt=template.format(measurements_json=measurements_to_json(measurements)),
        temperature=template.temperature,
    )


def build_biological_age_request(
    measurements: Sequence[MeasurementRecord],
    chronological_age: Optional[int] = None
) -> InferenceRequest:
    template = ExtractionPrompts.BIOLOGICAL_AGE_TEMPLATE
    age_context = (
        f"\nChronological age: {chronological_age}\n" if chronological_age is not None else ""
    )
    return InferenceRequest(
        prompt=template.format(
            measurements_json=measurements_to_json(measurements),
            age_context=age_context,
        ),
        temperature=template.temperature,
    )


def build_recommendations_request(
    measurements: Sequence[MeasurementRecord],
    biological_age: Optional[int]
) -> InferenceRequest:
    template = ExtractionPrompts.RECOMMENDATIONS_TEMPLATE
    return InferenceRequest(
        prompt=template.format(
            measurements_json=measurements_to_json(measurements),
            biological_age=biological_age if biological_age is not None else "unknown",
        ),
        temperature=template.temperature,
    )
