# ============================================================================
# src/biomarker_ingestion/anonymization/leak_validator.py
# ============================================================================
"""
Leak Validator

Second, independent scan over redacted text. If a name, ID or email pattern
still matches, anonymization fails as a whole: the caller gets an error and
never the partially redacted text.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Pattern, Sequence, Tuple

from ..utils.exceptions import AnonymizationValidationError
from .patterns import (
    IdentifierCategory,
    NAME_PATTERN,
    NATIONAL_ID_PATTERN,
    INSTITUTIONAL_ID_PATTERN,
    EMAIL_PATTERN,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LeakCheck:
    category: IdentifierCategory
    pattern: Pattern[str]
    label: str  # used in the error message


DEFAULT_LEAK_CHECKS: Tuple[LeakCheck, ...] = (
    LeakCheck(IdentifierCategory.NAME, NAME_PATTERN, "name"),
    LeakCheck(IdentifierCategory.NATIONAL_ID, NATIONAL_ID_PATTERN, "PESEL"),
    LeakCheck(IdentifierCategory.INSTITUTIONAL_ID, INSTITUTIONAL_ID_PATTERN, "ID number"),
    LeakCheck(IdentifierCategory.EMAIL, EMAIL_PATTERN, "email"),
)


class LeakValidator:
    """Fail-closed check that no detectable identifier survived redaction."""

    def __init__(self, checks: Optional[Sequence[LeakCheck]] = None):
        self.checks = tuple(checks) if checks is not None else DEFAULT_LEAK_CHECKS

    def find_leaks(self, text: str) -> List[LeakCheck]:
        return [check for check in self.checks if check.pattern.search(text)]

    def validate(self, redacted_text: str) -> None:
        """
        Raise if any identifier pattern still matches.

        Raises:
            AnonymizationValidationError: names the leaked categories
        """
        leaks = self.find_leaks(redacted_text)
        if not leaks:
            return

        categories = [check.category.value for check in leaks]
        logger.error(f"Anonymization validation failed, leaked categories: {', '.join(categories)}")

        errors = [f"Potential {check.label} detected in anonymized content" for check in leaks]
        raise AnonymizationValidationError(
            f"Anonymization validation failed: {'; '.join(errors)}",
            leaked_categories=categories
        )
