# ============================================================================
# src/biomarker_ingestion/processors/measurement_extractor.py
# ============================================================================
"""
Measurement Extraction

Model response text -> validated MeasurementRecords:
    recovery parser (tolerates truncated JSON) -> normalizer/classifier

Fails when nothing usable comes out: either no record could be recovered
(RecoveryExhaustedError) or every recovered record was rejected
(NoValidMeasurementsError).
"""

import logging
from typing import Any, Dict, List, Optional

from ..core.context import MeasurementRecord
from ..parsing.recovery_parser import StructuredRecoveryParser
from ..utils.exceptions import NoValidMeasurementsError
from ..utils.logging import log_performance
from ..validators.normalizer import MeasurementNormalizer


logger = logging.getLogger(__name__)


class MeasurementExtractor:
    """
    Parse and validate measurement records from one model response.

    Config keys are passed through to the recovery parser
    (records_field, error_tail_chars) and the normalizer
    (margin_ratio, suboptimal_factor, range_ceiling).
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or {}
        self.parser = StructuredRecoveryParser(self.config)
        self.normalizer = MeasurementNormalizer(self.config)

    @log_performance(logger, "Measurement extraction")
    def extract(self, response_text: str) -> List[MeasurementRecord]:
        """
        Extract measurements from a response.

        Args:
            response_text: Raw text returned by the inference service

        Returns:
            Non-empty list of MeasurementRecords

        Raises:
            RecoveryExhaustedError: no complete record in the response
            NoValidMeasurementsError: records found but none valid
        """
        result = self.parser.parse(response_text)
        measurements = self.normalizer.normalize_all(result.records)

        if not measurements:
            raise NoValidMeasurementsError(
                f"No valid measurements could be extracted from the response "
                f"({len(result.records)} records recovered, all rejected)",
                rejected=len(result.records)
            )

        logger.info(
            f"Extracted {len(measurements)} measurements"
            + (" from truncated response" if result.recovered else "")
        )
        return measurements


def extract_measurements(
    response_text: str,
    config: Optional[Dict[str, Any]] = None
) -> List[MeasurementRecord]:
    """
    Convenience function to extract measurements from a model response.

    Args:
        response_text: Raw response text
        config: Optional extractor config

    Returns:
        Non-empty list of MeasurementRecords
    """
    return MeasurementExtractor(config).extract(response_text)
