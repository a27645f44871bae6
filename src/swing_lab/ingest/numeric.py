import math

from swing_lab.domain.errors import ParseRejection
from swing_lab.domain.result import Err, Ok, Result, value_or

_MISSING_MARKERS = frozenset({"", "n/a", "na", "nan", "null", "none", "-", "--"})
_UNICODE_MINUS = "\u2212"


def parse_number(text: str) -> Result[float, ParseRejection]:
    """Parse one spreadsheet cell into a finite float.

    Whitespace is stripped, thousands separators are removed and a unicode
    minus sign is accepted. Empty cells, missing-value markers, NaN,
    infinities and any other non-numeric text are rejected.
    """
    cleaned = text.strip().replace(_UNICODE_MINUS, "-").replace(",", "")
    if cleaned.lower() in _MISSING_MARKERS:
        return Err(ParseRejection(raw=text, reason="empty" if not cleaned else "missing"))
    try:
        value = float(cleaned)
    except ValueError:
        return Err(ParseRejection(raw=text, reason="not a number"))
    if not math.isfinite(value):
        return Err(ParseRejection(raw=text, reason="not finite"))
    return Ok(value)


def parse_optional(text: str | None) -> float | None:
    """Like ``parse_number`` but collapses every rejection to ``None``."""
    if text is None:
        return None
    return value_or(parse_number(text), None)
