# ============================================================================
# FILE: tests/unit/test_prompts.py
# ============================================================================
"""
Unit tests for prompt templates and the inference client base
"""

import pytest

from biomarker_ingestion.inference import (
    ExtractionPrompts,
    PromptTask,
    build_biological_age_request,
    build_recommendations_request,
    build_text_extraction_request,
    build_vision_extraction_request,
)
from biomarker_ingestion.utils.exceptions import InferenceError


def test_template_requires_fields():
    """Test missing template fields"""
    with pytest.raises(ValueError):
        ExtractionPrompts.HEALTH_SUMMARY_TEMPLATE.format()


def test_get_template():
    """Test lookup by task"""
    template = ExtractionPrompts.get_template(PromptTask.BIOLOGICAL_AGE)
    assert template.name == "biological_age"


def test_text_extraction_request():
    """Test redacted text and schema in the prompt"""
    request = build_text_extraction_request("Pacjent: [NAME]\nGlukoza 92 mg/dl")

    assert "Pacjent: [NAME]" in request.prompt
    assert '"biomarkers"' in request.prompt
    assert '"optimalRange"' in request.prompt
    assert request.temperature == 0.1
    assert request.max_output_tokens == 16384
    assert not request.has_attachment


def test_text_extraction_truncates_document():
    """Test prompt_max_chars"""
    request = build_text_extraction_request("A" * 50 + "B" * 50, {"prompt_max_chars": 50})

    assert "A" * 50 in request.prompt
    assert "B" not in request.prompt.split("Document content:")[1]


def test_text_extraction_keeps_braces_in_document():
    """Test document text is inserted verbatim"""
    request = build_text_extraction_request("odd {text} here")
    assert "odd {text} here" in request.prompt


def test_vision_request_carries_file():
    """Test inline data and Polish format guidance"""
    request = build_vision_extraction_request("QUJD", "image/png")

    assert request.has_attachment
    assert request.inline_data == "QUJD"
    assert request.mime_type == "image/png"
    assert '"184,0" = 184.0' in request.prompt


def test_biological_age_request_mentions_age(record_factory):
    """Test optional chronological age"""
    measurements = [record_factory("HDL", 55, 40, 60)]

    with_age = build_biological_age_request(measurements, 42)
    without_age = build_biological_age_request(measurements)

    assert "Chronological age: 42" in with_age.prompt
    assert "Chronological age" not in without_age.prompt
    assert '"HDL"' in with_age.prompt


def test_recommendations_request(record_factory):
    """Test biological age and temperature"""
    request = build_recommendations_request([record_factory("HDL", 55, 40, 60)], 39)

    assert "Biological Age: 39" in request.prompt
    assert request.temperature == 0.4


def test_extract_json_variants(fake_client_factory):
    """Test lenient JSON extraction"""
    client = fake_client_factory()

    assert client.extract_json('{"a": 1}') == {"a": 1}
    assert client.extract_json('```json\n{"a": 1}\n```') == {"a": 1}
    assert client.extract_json('Here you go: {"a": 1} hope it helps') == {"a": 1}
    assert client.extract_json("{'a': 1,}") == {"a": 1}
    assert client.extract_json("") is None


@pytest.mark.asyncio
async def test_infer_records_statistics(fake_client_factory):
    """Test statistics after success and failure"""
    client = fake_client_factory(["ok", InferenceError("backend down")])
    request = build_text_extraction_request("text")

    assert await client.infer(request) == "ok"
    with pytest.raises(InferenceError):
        await client.infer(request)

    stats = client.get_statistics()
    assert stats["model"] == "fake-model"
    assert stats["inference_count"] == 1
    assert stats["failure_count"] == 1


@pytest.mark.asyncio
async def test_health_check(fake_client_factory):
    """Test fake backend health"""
    result = await fake_client_factory().health_check()
    assert result["healthy"] is True
