# ============================================================================
# src/biomarker_ingestion/anonymization/redactor.py
# ============================================================================
"""
Redactor

Replaces personal identifiers with category placeholders. Rules form an
ordered table applied one after another over the whole text; a later rule
only ever sees the output of the earlier ones, so it cannot re-match text an
earlier rule already turned into a placeholder.

Adding a category means adding a RedactionRule to the table.
"""

import functools
import logging
from dataclasses import dataclass
from typing import Dict, Optional, Pattern, Sequence, Tuple

from .patterns import (
    IdentifierCategory,
    NAME_PATTERN,
    NATIONAL_ID_PATTERN,
    INSTITUTIONAL_ID_PATTERN,
    ADDRESS_PATTERN,
    PHONE_PATTERN,
    EMAIL_PATTERN,
    INSTITUTION_PATTERN,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RedactionRule:
    category: IdentifierCategory
    pattern: Pattern[str]
    placeholder: str


DEFAULT_REDACTION_RULES: Tuple[RedactionRule, ...] = (
    RedactionRule(IdentifierCategory.NAME, NAME_PATTERN, "[NAME]"),
    RedactionRule(IdentifierCategory.NATIONAL_ID, NATIONAL_ID_PATTERN, "[ID]"),
    RedactionRule(IdentifierCategory.INSTITUTIONAL_ID, INSTITUTIONAL_ID_PATTERN, "[ID]"),
    RedactionRule(IdentifierCategory.ADDRESS, ADDRESS_PATTERN, "[ADDRESS]"),
    RedactionRule(IdentifierCategory.PHONE, PHONE_PATTERN, "[PHONE]"),
    RedactionRule(IdentifierCategory.EMAIL, EMAIL_PATTERN, "[EMAIL]"),
    RedactionRule(IdentifierCategory.INSTITUTION, INSTITUTION_PATTERN, "[INSTITUTION]"),
)


class Redactor:
    """Apply an ordered table of redaction rules to text."""

    def __init__(self, rules: Optional[Sequence[RedactionRule]] = None):
        self.rules = tuple(rules) if rules is not None else DEFAULT_REDACTION_RULES

    def redact(self, text: str) -> str:
        redacted, _ = self.redact_with_counts(text)
        return redacted

    def redact_with_counts(self, text: str) -> Tuple[str, Dict[str, int]]:
        """
        Redact text and count replacements per category.

        Returns:
            (redacted_text, {category: replacements})
        """
        def apply_rule(state: Tuple[str, Dict[str, int]], rule: RedactionRule):
            current, counts = state
            replaced, count = rule.pattern.subn(rule.placeholder, current)
            if count:
                counts[rule.category.value] = counts.get(rule.category.value, 0) + count
            return replaced, counts

        redacted, counts = functools.reduce(apply_rule, self.rules, (text, {}))

        if counts:
            summary = ", ".join(f"{category}={count}" for category, count in counts.items())
            logger.info(f"Redacted identifiers: {summary}")

        return redacted, counts
