"""
Numeric guardrails: decide whether a number can be a payment amount.
Years, IDs, non-finite parses and out-of-range values never become the chosen amount.
"""
from __future__ import annotations

import math
import re
from typing import Iterable, Sequence

# Lines mentioning any of these are amount-bearing (case-insensitive, whole word)
AMOUNT_CONTEXT_WORDS: Sequence[str] = (
    "items",
    "total",
    "paid",
    "bill",
    "price",
    "fee",
    "amount",
    "payable",
)

_AMOUNT_CONTEXT = re.compile(
    r"\b(?:" + "|".join(re.escape(w) for w in AMOUNT_CONTEXT_WORDS) + r")\b",
    re.IGNORECASE,
)

# Default "looks like a payment" window (exclusive bounds)
PLAUSIBLE_MIN, PLAUSIBLE_MAX = 1.0, 10_000.0


def parse_amount(num_str: str) -> float | None:
    """Parse '1,234.50' -> 1234.5. Returns None for empty, non-numeric or non-finite input."""
    cleaned = (num_str or "").strip().replace(",", "")
    if not cleaned:
        return None
    try:
        value = float(cleaned)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def is_plausible_payment(
    value: float | None,
    low: float = PLAUSIBLE_MIN,
    high: float = PLAUSIBLE_MAX,
) -> bool:
    """True if low < value < high."""
    if value is None or not math.isfinite(value):
        return False
    return low < value < high


def is_year_like(value: float, year_min: int, year_max: int) -> bool:
    """True if value is an integer inside [year_min, year_max]."""
    if not math.isfinite(value) or value != int(value):
        return False
    return year_min <= value <= year_max


def is_year_string(digits: str, year_min: int = 1990, year_max: int = 2039) -> bool:
    """True for a bare 4-digit string in the year range (e.g. '2026')."""
    return len(digits) == 4 and digits.isdigit() and year_min <= int(digits) <= year_max


def has_amount_context(line: str) -> bool:
    """True if the line carries an amount-indicating word (total, paid, bill, ...)."""
    return _AMOUNT_CONTEXT.search(line) is not None


def valid_candidates(values: Iterable[float | None]) -> list[float]:
    """Drop None, NaN, inf and non-positive values before any max/selection."""
    return [v for v in values if v is not None and math.isfinite(v) and v > 0]
