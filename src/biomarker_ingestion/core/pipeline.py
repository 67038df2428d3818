# ============================================================================
# src/biomarker_ingestion/core/pipeline.py
# ============================================================================
"""
Analysis Pipeline

Main entry point for analyzing one or more uploaded lab documents.

Flow:
1. Validate every upload (type, size)
2. Anonymize every document with usable text
3. Extraction requests per document, concurrently
4. Recover and normalize measurements from each response
5. Merge all documents' measurements in upload order
6. Optional insights over the merged set

Steps 1 and 2 finish for all documents before any inference request is sent,
so an input or privacy failure aborts the run without anything leaving the
process.
"""

import asyncio
import base64
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from ..anonymization.anonymizer import Anonymizer
from ..config import extraction_settings
from ..constants import SourceKind, source_kind
from ..inference.base import BaseInferenceClient, InferenceRequest
from ..inference.prompts import build_text_extraction_request, build_vision_extraction_request
from ..insights.generator import InsightGenerator
from ..processors.measurement_extractor import MeasurementExtractor
from ..utils.exceptions import (
    ExtractionError,
    InferenceError,
    InvalidFileFormatError,
    InvalidInputError,
)
from ..validators.conflict_resolver import ConflictResolver
from .context import AnalysisInsights, DemographicProfile, MeasurementRecord


logger = logging.getLogger(__name__)


@dataclass
class UploadedDocument:
    """
    One uploaded file.

    text comes from the text-extraction collaborator and may be empty (e.g. a
    scanned image). data holds the raw file bytes, only needed for the vision
    fallback.
    """
    text: str = ""
    content_type: str = "application/pdf"
    size: int = 0
    data: Optional[bytes] = None

    def metadata(self) -> Dict[str, Any]:
        return {"type": self.content_type, "size": self.size}


@dataclass(frozen=True)
class DocumentFailure:
    """A document that contributed no measurements, and why."""
    index: int
    error_type: str
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"index": self.index, "errorType": self.error_type, "message": self.message}


@dataclass
class AnalysisResult:
    measurements: List[MeasurementRecord]
    demographics: List[Optional[DemographicProfile]]
    failures: List[DocumentFailure] = field(default_factory=list)
    insights: Optional[AnalysisInsights] = None
    chronological_age: Optional[int] = None
    analyzed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    documents_analyzed: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "biomarkers": [m.to_dict() for m in self.measurements],
            "demographics": [d.to_dict() if d is not None else None for d in self.demographics],
            "failures": [f.to_dict() for f in self.failures],
            "insights": self.insights.to_dict() if self.insights is not None else None,
            "chronologicalAge": self.chronological_age,
            "analysisDate": self.analyzed_at.isoformat(),
            "filesAnalyzed": self.documents_analyzed,
        }


def validate_upload(
    content_type: str,
    size: int,
    max_bytes: Optional[int] = None
) -> None:
    """
    Reject unsupported or oversized uploads.

    Raises:
        InvalidFileFormatError
    """
    max_bytes = max_bytes if max_bytes is not None else extraction_settings.MAX_UPLOAD_BYTES

    if size > max_bytes:
        raise InvalidFileFormatError(
            f"File size must be less than {max_bytes // (1024 * 1024)}MB",
            content_type=content_type,
            size=size
        )

    if source_kind(content_type) is SourceKind.UNKNOWN:
        raise InvalidFileFormatError(
            "Invalid file type. Please upload a PDF or image (JPG, PNG, WebP)",
            content_type=content_type,
            size=size
        )


class AnalysisPipeline:
    """
    Multi-document analysis.

    Config keys (all optional; settings provide defaults):
        fail_fast: raise the first extraction failure instead of recording it
        min_text_length: shorter text counts as failed text extraction
        allow_unanonymized_vision_fallback: send the raw file when text is unusable
        max_upload_bytes: upload size limit
    The whole config dict is also handed to the anonymizer, extractor and
    prompt builders.
    """

    def __init__(
        self,
        client: BaseInferenceClient,
        config: Optional[Dict[str, Any]] = None
    ):
        self.client = client
        self.config = config or {}

        self.fail_fast = self.config.get('fail_fast', False)
        self.min_text_length = self.config.get('min_text_length', extraction_settings.MIN_TEXT_LENGTH)
        self.allow_vision_fallback = self.config.get(
            'allow_unanonymized_vision_fallback',
            extraction_settings.ALLOW_UNANONYMIZED_VISION_FALLBACK
        )
        self.max_upload_bytes = self.config.get('max_upload_bytes', extraction_settings.MAX_UPLOAD_BYTES)

        self.anonymizer = Anonymizer(self.config)
        self.extractor = MeasurementExtractor(self.config)
        self.resolver = ConflictResolver()
        self.insight_generator = InsightGenerator(client)

    async def analyze(
        self,
        documents: Sequence[UploadedDocument],
        chronological_age: Optional[int] = None,
        include_insights: bool = True
    ) -> AnalysisResult:
        """
        Analyze uploaded documents.

        Args:
            documents: Uploads in order; later documents only win a merge
                conflict by severity or distance, never by position
            chronological_age: Optional user-provided age, passed through
            include_insights: Generate summary, biological age and recommendations

        Returns:
            AnalysisResult

        Raises:
            InvalidInputError: no documents, or a document with non-string text
            InvalidFileFormatError: unsupported type or oversized upload
            AnonymizationValidationError: personal data survived redaction
            ExtractionError / InferenceError: only with fail_fast
        """
        documents = list(documents)
        if not documents:
            raise InvalidInputError("At least one document is required")

        if chronological_age is not None and (
            isinstance(chronological_age, bool) or not isinstance(chronological_age, int) or chronological_age <= 0
        ):
            raise InvalidInputError("Chronological age must be a positive integer")

        logger.info(f"Analyzing {len(documents)} documents")

        for doc in documents:
            validate_upload(doc.content_type, doc.size, self.max_upload_bytes)

        requests: List[Optional[InferenceRequest]] = []
        demographics: List[Optional[DemographicProfile]] = []
        failures: List[DocumentFailure] = []

        for index, doc in enumerate(documents):
            request, profile = self._prepare(index, doc, failures)
            requests.append(request)
            demographics.append(profile)

        tasks = [self._extract(request) for request in requests]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        per_document: List[List[MeasurementRecord]] = []
        for index, result in enumerate(results):
            if isinstance(result, (ExtractionError, InferenceError)):
                if self.fail_fast:
                    raise result
                logger.warning(f"Document {index} failed: {type(result).__name__}")
                failures.append(DocumentFailure(index, type(result).__name__, str(result)))
                per_document.append([])
            elif isinstance(result, BaseException):
                raise result
            else:
                per_document.append(result)

        failures.sort(key=lambda failure: failure.index)
        measurements = self.resolver.merge(per_document)

        insights = None
        if include_insights and measurements:
            insights = await self.insight_generator.generate(measurements, chronological_age)

        logger.info(
            f"Analysis complete: {len(measurements)} measurements, "
            f"{len(failures)} of {len(documents)} documents failed"
        )

        return AnalysisResult(
            measurements=measurements,
            demographics=demographics,
            failures=failures,
            insights=insights,
            chronological_age=chronological_age,
            documents_analyzed=len(documents),
        )

    def _prepare(
        self,
        index: int,
        doc: UploadedDocument,
        failures: List[DocumentFailure]
    ):
        """
        Decide what, if anything, is sent for one document.

        Returns:
            (InferenceRequest or None, DemographicProfile or None)
        """
        text = doc.text if doc.text is not None else ""
        if not isinstance(text, str):
            raise InvalidInputError(f"Document {index}: text must be a string")

        if len(text.strip()) >= self.min_text_length:
            anonymized = self.anonymizer.anonymize(text, doc.metadata())
            request = build_text_extraction_request(anonymized.redacted_text, self.config)
            return request, anonymized.demographics

        if self.allow_vision_fallback and doc.data:
            logger.warning(
                f"Document {index}: text extraction failed, sending the original "
                f"file ({doc.content_type}) WITHOUT anonymization"
            )
            encoded = base64.b64encode(doc.data).decode("ascii")
            return build_vision_extraction_request(encoded, doc.content_type, self.config), None

        logger.warning(f"Document {index}: no usable text ({len(text)} chars), skipped")
        failures.append(DocumentFailure(
            index,
            "InsufficientText",
            "Text extraction produced too little text and the vision fallback is disabled"
        ))
        return None, None

    async def _extract(self, request: Optional[InferenceRequest]) -> List[MeasurementRecord]:
        if request is None:
            return []

        response_text = await self.client.infer(request)
        return self.extractor.extract(response_text)
