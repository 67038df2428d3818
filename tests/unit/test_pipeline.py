# ============================================================================
# FILE: tests/unit/test_pipeline.py
# ============================================================================
"""
Unit tests for the multi-document analysis pipeline
"""

import json

import pytest

from biomarker_ingestion import AnalysisPipeline, UploadedDocument, validate_upload
from biomarker_ingestion.anonymization import (
    DEFAULT_REDACTION_RULES,
    Anonymizer,
    IdentifierCategory,
    Redactor,
)
from biomarker_ingestion.core.context import MeasurementStatus
from biomarker_ingestion.utils.exceptions import (
    AnonymizationValidationError,
    InvalidFileFormatError,
    InvalidInputError,
    NoValidMeasurementsError,
    RecoveryExhaustedError,
)


def _response(*records):
    return json.dumps({"biomarkers": list(records)})


def _crp(value):
    return {"name": "CRP", "value": value, "unit": "mg/L", "optimalRange": {"min": 0, "max": 5}}


# ============================================================================
# Upload validation
# ============================================================================

@pytest.mark.parametrize("content_type", ["application/pdf", "image/jpeg", "image/jpg", "image/png", "image/webp"])
def test_validate_upload_accepts_supported(content_type):
    """Test supported MIME types"""
    validate_upload(content_type, 1024)


def test_validate_upload_rejects_type():
    """Test unsupported MIME type"""
    with pytest.raises(InvalidFileFormatError) as exc_info:
        validate_upload("text/plain", 10)
    assert exc_info.value.content_type == "text/plain"


def test_validate_upload_rejects_size():
    """Test 10MB limit"""
    with pytest.raises(InvalidFileFormatError):
        validate_upload("application/pdf", 10 * 1024 * 1024 + 1)


# ============================================================================
# Analysis
# ============================================================================

@pytest.mark.asyncio
async def test_analyze_single_document(sample_lab_text, complete_response, fake_client_factory):
    """Test anonymize -> extract -> merge -> insights"""
    client = fake_client_factory([complete_response])
    pipeline = AnalysisPipeline(client)

    result = await pipeline.analyze([UploadedDocument(text=sample_lab_text, size=2048)], chronological_age=40)

    assert [m.name for m in result.measurements] == ["Total Cholesterol", "Glucose"]
    assert result.demographics[0].age == 42
    assert result.failures == []
    assert result.chronological_age == 40
    assert result.documents_analyzed == 1
    assert result.insights is not None

    extraction_prompt = client.requests[0].prompt
    assert "Jan Kowalski" not in extraction_prompt
    assert "85010112345" not in extraction_prompt
    assert "184,0" in extraction_prompt


@pytest.mark.asyncio
async def test_analyze_merges_across_documents(sample_lab_text, fake_client_factory):
    """Test concerning CRP from the second document wins"""
    responses = {
        "first": _response(_crp(1.0), {"name": "HDL", "value": 55, "unit": "mg/dL",
                                       "optimalRange": {"min": 40, "max": 60}}),
        "second": _response(_crp(12.0)),
    }

    def respond(request):
        return responses["first"] if "FIRST" in request.prompt else responses["second"]

    client = fake_client_factory(respond)
    pipeline = AnalysisPipeline(client)

    docs = [
        UploadedDocument(text=sample_lab_text + "\nFIRST"),
        UploadedDocument(text=sample_lab_text + "\nSECOND"),
    ]
    result = await pipeline.analyze(docs, include_insights=False)

    assert [m.name for m in result.measurements] == ["CRP", "HDL"]
    assert result.measurements[0].value == 12.0
    assert result.measurements[0].status == MeasurementStatus.CONCERNING
    assert result.insights is None


@pytest.mark.asyncio
async def test_extraction_failure_recorded(sample_lab_text, complete_response, fake_client_factory):
    """Test a failed document does not sink the others"""
    def respond(request):
        return "I cannot read this" if "BROKEN" in request.prompt else complete_response

    pipeline = AnalysisPipeline(fake_client_factory(respond))
    docs = [
        UploadedDocument(text=sample_lab_text + "\nBROKEN"),
        UploadedDocument(text=sample_lab_text),
    ]

    result = await pipeline.analyze(docs, include_insights=False)

    assert len(result.measurements) == 2
    assert len(result.failures) == 1
    assert result.failures[0].index == 0
    assert result.failures[0].error_type == "RecoveryExhaustedError"


@pytest.mark.asyncio
async def test_fail_fast_raises(sample_lab_text, fake_client_factory):
    """Test fail_fast turns extraction failures fatal"""
    pipeline = AnalysisPipeline(fake_client_factory(['{"biomarkers": []}']), {"fail_fast": True})

    with pytest.raises(NoValidMeasurementsError):
        await pipeline.analyze([UploadedDocument(text=sample_lab_text)])


@pytest.mark.asyncio
async def test_privacy_failure_is_fatal_before_inference(sample_lab_text, complete_response, fake_client_factory):
    """Test a leak aborts the run and nothing is sent"""
    client = fake_client_factory([complete_response, complete_response])
    pipeline = AnalysisPipeline(client)
    rules = [r for r in DEFAULT_REDACTION_RULES if r.category is not IdentifierCategory.NAME]
    pipeline.anonymizer = Anonymizer(redactor=Redactor(rules))

    with pytest.raises(AnonymizationValidationError):
        await pipeline.analyze([UploadedDocument(text=sample_lab_text)] * 2)

    assert client.requests == []


@pytest.mark.asyncio
async def test_short_text_skipped_without_fallback(fake_client_factory):
    """Test unusable text is not sent anywhere by default"""
    client = fake_client_factory([])
    pipeline = AnalysisPipeline(client)

    result = await pipeline.analyze(
        [UploadedDocument(text="", content_type="image/png", data=b"\x89PNG")],
        include_insights=False,
    )

    assert result.measurements == []
    assert result.failures[0].error_type == "InsufficientText"
    assert result.demographics == [None]
    assert client.requests == []


@pytest.mark.asyncio
async def test_vision_fallback_when_enabled(complete_response, fake_client_factory):
    """Test the original file is sent only when explicitly allowed"""
    client = fake_client_factory([complete_response])
    pipeline = AnalysisPipeline(client, {"allow_unanonymized_vision_fallback": True})

    result = await pipeline.analyze(
        [UploadedDocument(text="", content_type="image/png", data=b"ABC")],
        include_insights=False,
    )

    assert len(result.measurements) == 2
    assert client.requests[0].inline_data == "QUJD"
    assert client.requests[0].mime_type == "image/png"


@pytest.mark.asyncio
async def test_invalid_inputs(fake_client_factory):
    """Test caller contract violations"""
    pipeline = AnalysisPipeline(fake_client_factory([]))

    with pytest.raises(InvalidInputError):
        await pipeline.analyze([])
    with pytest.raises(InvalidInputError):
        await pipeline.analyze([UploadedDocument(text=123)])
    with pytest.raises(InvalidInputError):
        await pipeline.analyze([UploadedDocument(text="x" * 60)], chronological_age=-1)
    with pytest.raises(InvalidFileFormatError):
        await pipeline.analyze([UploadedDocument(text="x" * 60, content_type="text/html")])


@pytest.mark.asyncio
async def test_result_to_dict(sample_lab_text, complete_response, fake_client_factory):
    """Test serialized result"""
    pipeline = AnalysisPipeline(fake_client_factory([complete_response]))
    result = await pipeline.analyze([UploadedDocument(text=sample_lab_text)], include_insights=False)

    data = result.to_dict()
    assert data["filesAnalyzed"] == 1
    assert data["biomarkers"][0]["optimalRange"] == {"min": 0.0, "max": 190.0}
    assert data["demographics"][0]["testDate"] == "2025-01-15"
    assert "analysisDate" in data


@pytest.mark.asyncio
async def test_truncated_response_in_pipeline(sample_lab_text, truncated_response, fake_client_factory):
    """Test truncated model output still yields records"""
    pipeline = AnalysisPipeline(fake_client_factory([truncated_response]))
    result = await pipeline.analyze([UploadedDocument(text=sample_lab_text)], include_insights=False)

    assert len(result.measurements) == 2


def test_recovery_error_is_exported():
    """Test error type used in failure records"""
    assert RecoveryExhaustedError.__name__ == "RecoveryExhaustedError"
