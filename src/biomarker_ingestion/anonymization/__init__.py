# src/biomarker_ingestion/anonymization/__init__.py

from .patterns import IdentifierCategory
from .demographics_extractor import (
    DemographicsExtractor,
    DateOrder,
    calendar_date,
    extract_demographics,
)
from .redactor import Redactor, RedactionRule, DEFAULT_REDACTION_RULES
from .leak_validator import LeakValidator, LeakCheck, DEFAULT_LEAK_CHECKS
from .anonymizer import Anonymizer, anonymize

__all__ = [
    "IdentifierCategory",
    "DemographicsExtractor",
    "DateOrder",
    "calendar_date",
    "extract_demographics",
    "Redactor",
    "RedactionRule",
    "DEFAULT_REDACTION_RULES",
    "LeakValidator",
    "LeakCheck",
    "DEFAULT_LEAK_CHECKS",
    "Anonymizer",
    "anonymize",
]
