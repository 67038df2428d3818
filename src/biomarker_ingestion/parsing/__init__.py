# src/biomarker_ingestion/parsing/__init__.py

from .numbers import parse_locale_number, is_valid_number
from .recovery_parser import (
    StructuredRecoveryParser,
    RecoveryResult,
    ScanState,
    strip_code_fences,
    recover_records,
)

__all__ = [
    "parse_locale_number",
    "is_valid_number",
    "StructuredRecoveryParser",
    "RecoveryResult",
    "ScanState",
    "strip_code_fences",
    "recover_records",
]
