# ============================================================================
# src/biomarker_ingestion/parsing/recovery_parser.py
# ============================================================================
"""
Structured Recovery Parser

The model is asked for {"biomarkers": [{...}, {...}, ...]}, but long
responses get cut off by the output-token limit, usually in the middle of a
record. Strict parsing then fails for the whole payload even though most
records arrived intact.

Recovery strategy:
1. Strip markdown code fences
2. Strict json.loads - return the array when it works
3. Otherwise find the records array by name and scan it character by
   character, cutting out every brace-balanced object
4. Keep the objects that parse on their own, rebuild the envelope from them

A response truncated after record 7 of 10 yields exactly 7 records. When not a
single record can be recovered, RecoveryExhaustedError is raised with the tail
of the response attached.
"""

import json
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ..config import extraction_settings
from ..utils.exceptions import InvalidInputError, RecoveryExhaustedError


logger = logging.getLogger(__name__)


class ScanState(Enum):
    """Lexical state of the character scanner."""
    NORMAL = "normal"
    IN_STRING = "in_string"
    ESCAPED = "escaped"  # previous char was a backslash inside a string


@dataclass
class RecoveryResult:
    """Decoded records plus how they were obtained."""
    records: List[Any]
    recovered: bool = False  # True when the character scan was needed
    skipped: int = 0  # balanced objects that did not parse on their own


def strip_code_fences(text: str) -> str:
    """Remove ```json ... ``` style wrappers around a payload."""
    cleaned = text.strip()
    cleaned = re.sub(r'^```json\s*', '', cleaned, flags=re.IGNORECASE)
    cleaned = re.sub(r'^```\s*', '', cleaned)
    cleaned = re.sub(r'\s*```$', '', cleaned)
    return cleaned.strip()


class StructuredRecoveryParser:
    """
    Parse a model response into the list of raw record objects it contains.

    Config keys:
        records_field: name of the records array (default: RECORDS_FIELD)
        error_tail_chars: response tail kept on failure (default: ERROR_TAIL_CHARS)
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or {}

        self.records_field = self.config.get('records_field', extraction_settings.RECORDS_FIELD)
        self.error_tail_chars = self.config.get('error_tail_chars', extraction_settings.ERROR_TAIL_CHARS)

        self._array_start = re.compile(r'"%s"\s*:\s*\[' % re.escape(self.records_field))

    def parse(self, text: str) -> RecoveryResult:
        """
        Decode the records array from a response.

        Args:
            text: Raw response text

        Returns:
            RecoveryResult with the decoded (still untrusted) records

        Raises:
            InvalidInputError: text is not a string
            RecoveryExhaustedError: strict parsing failed and no complete
                record could be recovered
        """
        if not isinstance(text, str):
            raise InvalidInputError(
                f"Response text must be a string, got {type(text).__name__}"
            )

        cleaned = strip_code_fences(text)

        try:
            payload = json.loads(cleaned)
        except json.JSONDecodeError as parse_error:
            reason = f"{parse_error.msg} at char {parse_error.pos}"
        except (ValueError, RecursionError) as parse_error:
            # oversized integer literals, pathological nesting
            reason = type(parse_error).__name__
        else:
            return RecoveryResult(records=self._records_from_payload(payload))

        logger.warning(
            f"Strict parse failed ({reason}, {len(cleaned)} chars), attempting record recovery"
        )
        return self._recover(cleaned, reason)

    def _records_from_payload(self, payload: Any) -> List[Any]:
        """Pull the records array out of a strictly parsed payload."""
        if isinstance(payload, list):
            return payload

        if isinstance(payload, dict):
            records = payload.get(self.records_field)
            if isinstance(records, list):
                return records
            logger.warning(f"Response has no '{self.records_field}' array")
            return []

        logger.warning(f"Response decoded to {type(payload).__name__}, expected an object")
        return []

    def _recover(self, cleaned: str, reason: str) -> RecoveryResult:
        """Salvage every complete record from a payload that failed strict parsing."""
        tail = cleaned[-self.error_tail_chars:] if self.error_tail_chars else ""

        match = self._array_start.search(cleaned)
        if not match:
            raise RecoveryExhaustedError(
                f"Failed to parse response: no '{self.records_field}' array found "
                f"({reason}). Response ends with: {tail!r}",
                tail=tail
            )

        candidates, skipped = self.scan_records(cleaned[match.end():])

        if not candidates:
            raise RecoveryExhaustedError(
                f"Failed to parse response: no recoverable records "
                f"({reason}). Response ends with: {tail!r}",
                tail=tail
            )

        envelope = '{%s: [%s]}' % (json.dumps(self.records_field), ','.join(candidates))
        records = json.loads(envelope)[self.records_field]

        logger.info(
            f"Recovered {len(records)} complete records from truncated response "
            f"({skipped} skipped)"
        )
        return RecoveryResult(records=records, recovered=True, skipped=skipped)

    def scan_records(self, array_body: str) -> Tuple[List[str], int]:
        """
        Cut brace-balanced objects out of the text following an array's '['.

        Braces only count outside string literals, and an escaped quote does
        not end a string. Scanning stops at the array's closing ']' or at the
        end of the text; an object still open at that point is dropped.

        Returns:
            (candidate JSON texts that parse on their own, number skipped)
        """
        candidates: List[str] = []
        skipped = 0

        state = ScanState.NORMAL
        depth = 0
        buffer: List[str] = []

        for char in array_body:
            depth_before = depth

            if state is ScanState.ESCAPED:
                state = ScanState.IN_STRING
            elif state is ScanState.IN_STRING:
                if char == '\\':
                    state = ScanState.ESCAPED
                elif char == '"':
                    state = ScanState.NORMAL
            elif char == '"':
                state = ScanState.IN_STRING
            elif char == '{':
                depth += 1
            elif char == '}' and depth > 0:
                depth -= 1
            elif char == ']' and depth == 0:
                break

            # Separators, whitespace and stray tokens between objects are dropped
            if depth_before > 0 or depth > 0:
                buffer.append(char)

            if depth_before > 0 and depth == 0:
                candidate = self._accept_candidate(''.join(buffer))
                if candidate is None:
                    skipped += 1
                else:
                    candidates.append(candidate)
                buffer = []

        if buffer:
            logger.debug(f"Dropped incomplete trailing record ({len(buffer)} chars)")

        return candidates, skipped

    @staticmethod
    def _accept_candidate(raw: str) -> Optional[str]:
        """Return the candidate text if it is a standalone JSON object."""
        candidate = raw.strip()
        if candidate.endswith(','):
            candidate = candidate[:-1].rstrip()

        if not (candidate.startswith('{') and candidate.endswith('}')):
            return None

        try:
            json.loads(candidate)
        except (ValueError, RecursionError):
            logger.warning(f"Skipping invalid record: {candidate[:100]}")
            return None

        return candidate


def recover_records(text: str, config: Optional[Dict[str, Any]] = None) -> List[Any]:
    """
    Convenience function to decode the records array of a response.

    Args:
        text: Raw response text
        config: Optional parser config

    Returns:
        Decoded records (untrusted)
    """
    return StructuredRecoveryParser(config).parse(text).records
