# ============================================================================
# src/biomarker_ingestion/anonymization/patterns.py
# ============================================================================
"""
Identifier detection patterns (Polish and English documents).

Shared by the redactor, which replaces matches, and the leak validator,
which re-scans redacted text with the same patterns.
"""

import re
from enum import Enum

from ..constants import KNOWN_INSTITUTION_FRAGMENTS


class IdentifierCategory(str, Enum):
    NAME = "name"
    NATIONAL_ID = "national_id"
    INSTITUTIONAL_ID = "institutional_id"
    ADDRESS = "address"
    PHONE = "phone"
    EMAIL = "email"
    INSTITUTION = "institution"


_UPPER = "A-ZĄĆĘŁŃÓŚŹŻ"
_LOWER = "a-ząćęłńóśźż"

# "Jan Kowalski", "Anna Nowak"
NAME_PATTERN = re.compile(rf'\b[{_UPPER}][{_LOWER}]{{2,}}\s+[{_UPPER}][{_LOWER}]{{2,}}\b')

# PESEL
NATIONAL_ID_PATTERN = re.compile(r'\b\d{11}\b')

# Patient / order numbers like "AB1234567"
INSTITUTIONAL_ID_PATTERN = re.compile(r'\b[A-Z]{2,3}\d{6,}\b')

# "ul. Długa 5a", "street Main 12" - stays on one line
ADDRESS_PATTERN = re.compile(
    rf'\b(?:ul\.|ulica|street|str\.)[ \t]+[{_UPPER}][{_LOWER} \t]+(?:\d+[A-Za-z]?)?',
    re.IGNORECASE
)

# "+48 600 123 456", "600-123-456"
PHONE_PATTERN = re.compile(r'(?:\+\d{2}\s?)?\b\d{2,3}[\s-]?\d{3}[\s-]?\d{3}\b')

EMAIL_PATTERN = re.compile(r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b')

# Known fragment plus the capitalized words after it on the same line
INSTITUTION_PATTERN = re.compile(
    r'(?i:\b(?:%s)\w*)(?:[ \t]+[%s][\w.-]*)*' % (
        '|'.join(re.escape(fragment) for fragment in KNOWN_INSTITUTION_FRAGMENTS),
        _UPPER,
    )
)
