# ============================================================================
# src/biomarker_ingestion/constants/institutions.py
# ============================================================================
"""
Laboratory and institution name fragments.

Any of these words starts an institution name that gets redacted together
with the capitalized words following it on the same line.
"""

KNOWN_INSTITUTION_FRAGMENTS = (
    "ALAB",
    "Diagnostyka",
    "SYNEVO",
    "Medycyna",
    "Laboratorium",
)
