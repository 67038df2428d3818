# src/biomarker_ingestion/parsing/numbers.py
"""
Parsing utilities for human-written numbers.

Lab documents mix decimal conventions: "184.0" and "184,0" mean the same
value. Model output carries whichever convention the source document used.
"""

import math
import re
from typing import Any

# Leading numeric prefix, the way a lenient float reader sees it:
# "184.0", "5.4 %", "-.5", "1e3 /ul"
_NUMERIC_PREFIX = re.compile(r'^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)')


def parse_locale_number(value: Any) -> float:
    """
    Convert a number or a locale-formatted numeric string into a float.

    Handles values like:
    - 184.0        (already numeric, returned as is)
    - "184,0"      (comma decimal separator)
    - "5.4 %"      (trailing text after the number is ignored)

    Returns:
        The parsed float, or NaN for anything that is not a number or a
        string starting with one. Callers must check with math.isnan().
        Magnitudes beyond float range come back as +/-inf.
    """
    # bool is an int subclass but never a measurement
    if isinstance(value, bool):
        return math.nan

    if isinstance(value, (int, float)):
        try:
            return float(value)
        except OverflowError:
            # JSON integers of any length; same result as float("1e400")
            return math.inf if value > 0 else -math.inf

    if not isinstance(value, str):
        return math.nan

    normalized = value.replace(',', '.', 1)
    match = _NUMERIC_PREFIX.match(normalized)
    if not match:
        return math.nan

    try:
        return float(match.group(1))
    except ValueError:
        return math.nan


def is_valid_number(value: float) -> bool:
    """True for a finite float (not NaN, not +/-inf)."""
    return isinstance(value, float) and math.isfinite(value)
