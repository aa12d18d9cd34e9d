"""
Amount extraction primitives: currency-glyph patterns, label proximity, misread-digit repair.
Text is expected to be normalized (every rupee marker is the ₹ glyph).
"""
from __future__ import annotations

import logging
import re
from typing import Sequence

from core.models import AmountOptions
from extraction.dates import strip_dates
from extraction.numeric_validator import (
    is_plausible_payment,
    is_year_like,
    is_year_string,
    parse_amount,
    valid_candidates,
)
from extraction.text import line_has_label, noise_keyword_in

logger = logging.getLogger(__name__)

CURRENCY_GLYPH = "₹"

_NUMBER = r"([0-9][0-9,]*(?:\.[0-9]{1,2})?)"
# "₹664.70", "₹ 1,299"
PREFIXED_AMOUNT = re.compile(r"₹\s?" + _NUMBER)
# "664.70₹", "500 ₹"
SUFFIXED_AMOUNT = re.compile(r"(?<![₹\d.,])" + _NUMBER + r"\s?₹")
# Last resort: bare numbers with 3+ digits
BARE_AMOUNT = re.compile(r"(?<![\d.,])\b([0-9]{3,}(?:\.[0-9]{1,2})?)\b(?![.,]?\d)")
# Per-item quantity markers: "2 x", "2x", "x 2"
QUANTITY_MARKER = re.compile(r"^\d+\s*x\b|\b\d+x\b|\bx\s*\d+\b", re.IGNORECASE)


# ---------------------------------------------------------------------------
# Misread repair
# ---------------------------------------------------------------------------


def reinsert_decimal(digits: str) -> float | None:
    """'61200' -> 612.0: put the decimal point two digits from the right."""
    if len(digits) < 3 or not digits.isdigit():
        return None
    return parse_amount(digits[:-2] + "." + digits[-2:])


def fix_misread_amount(raw: str, options: AmountOptions | None = None) -> float | None:
    """
    Recover an amount whose ₹ glyph was read as a leading digit ('2500' -> 500).

    Strip the confusable leading digit when the remainder falls in the misread range and the
    original is implausible or at least misread_ratio times the remainder. Failing that, 5-6 digit
    integers also lost their decimal point ('366470' -> 664.70). Year-like strings are never touched.
    Returns None when no repair applies.
    """
    options = options or AmountOptions()
    raw = (raw or "").strip().replace(",", "")
    if len(raw) < 2 or raw[0] not in options.confusable_digits:
        return None
    int_part, _, frac = raw.partition(".")
    if not int_part.isdigit() or (frac and not frac.isdigit()):
        return None
    if not frac and is_year_string(int_part):
        return None

    original = parse_amount(raw)
    rest = raw[1:]
    remainder = parse_amount(rest)
    if remainder is not None and not rest.startswith("0"):
        if options.misread_min <= remainder <= options.misread_max:
            implausible = not is_plausible_payment(original, options.plausible_min, options.plausible_max)
            if implausible or (original is not None and original >= remainder * options.misread_ratio):
                return remainder

    if not frac and 5 <= len(int_part) <= 6:
        candidate = reinsert_decimal(int_part[1:])
        if is_plausible_payment(candidate, options.plausible_min, options.plausible_max):
            return candidate
    return None


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------


def extract_amounts(text: str, options: AmountOptions | None = None) -> list[float]:
    """
    All amounts in text, in reading order.
    (a) ₹-prefixed, (b) ₹-suffixed; only when neither matched anywhere, (c) bare 3+ digit
    numbers within [bare_min, bare_max]. With fix_misread, bare numbers go through
    fix_misread_amount first: a bare number is the only place a misread glyph can hide.
    """
    options = options or AmountOptions()
    found: list[tuple[int, float | None]] = []
    symbol_matched = False
    for pattern in (PREFIXED_AMOUNT, SUFFIXED_AMOUNT):
        for m in pattern.finditer(text):
            symbol_matched = True
            found.append((m.start(1), parse_amount(m.group(1))))

    if not symbol_matched:
        for m in BARE_AMOUNT.finditer(text):
            value = parse_amount(m.group(1))
            if value is None:
                continue
            if options.fix_misread:
                fixed = fix_misread_amount(m.group(1), options)
                if fixed is not None:
                    logger.debug("Misread ₹ repaired: %s -> %.2f", m.group(1), fixed)
                    value = fixed
            if options.bare_min <= value <= options.bare_max:
                found.append((m.start(1), value))

    found.sort(key=lambda item: item[0])
    return valid_candidates(v for _, v in found)


def extract_amount_near_label(
    lines: Sequence[str],
    labels: Sequence[str],
    options: AmountOptions | None = None,
) -> float | None:
    """
    Walk labels in priority order; for the first label found on a line that also holds an
    amount, return the last amount on that line (the value follows the label).
    """
    for label in labels:
        for line in lines:
            if not line_has_label(line, label):
                continue
            amounts = extract_amounts(line, options)
            if amounts:
                logger.debug("Label %r matched line %r -> %.2f", label, line, amounts[-1])
                return amounts[-1]
    return None


def labeled_amount_pattern(labels: Sequence[str]) -> re.Pattern[str]:
    """'<label> ₹? <amount>' adjacency, labels tried in the given order."""
    alternation = "|".join(re.escape(l) for l in labels)
    return re.compile(
        r"(?<![a-z])(" + alternation + r")\s*[:\-]?\s*₹?\s*" + _NUMBER,
        re.IGNORECASE,
    )


def extract_labeled_amount(lines: Sequence[str], labels: Sequence[str]) -> float | None:
    """First '<label> <amount>' adjacency across lines."""
    pattern = labeled_amount_pattern(labels)
    for line in lines:
        for m in pattern.finditer(line):
            value = parse_amount(m.group(2))
            if valid_candidates([value]):
                return value
    return None


def extract_largest_amount(
    lines: Sequence[str],
    exclude_keywords: Sequence[str],
    *,
    year_min: int = 2020,
    year_max: int = 2030,
    options: AmountOptions | None = None,
) -> float | None:
    """
    Largest amount over lines that carry no noise keyword and no quantity marker.
    Date-shaped substrings are blanked first; year-like integers are dropped.
    """
    candidates: list[float] = []
    for line in lines:
        if any(noise_keyword_in(line, k) for k in exclude_keywords):
            continue
        if QUANTITY_MARKER.search(line):
            continue
        for value in extract_amounts(strip_dates(line), options):
            if is_year_like(value, year_min, year_max):
                continue
            candidates.append(value)
    candidates = valid_candidates(candidates)
    return max(candidates) if candidates else None


def extract_max_in_range(
    text: str,
    low: float,
    high: float,
    *,
    year_min: int = 2020,
    year_max: int = 2030,
    options: AmountOptions | None = None,
) -> float | None:
    """Largest amount anywhere in text within [low, high], year-like values excluded."""
    candidates = [
        v
        for v in extract_amounts(text, options)
        if low <= v <= high and not is_year_like(v, year_min, year_max)
    ]
    return max(candidates) if candidates else None
