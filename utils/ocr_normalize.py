"""
OCR text normalization: fix common misreadings (₹ read as 2/3 or R/I/F, lost decimal points) so that
the extractors see correct amounts, then mask numbers that must never be taken for an amount
(years, phone numbers, long IDs, PIN codes).
"""

from __future__ import annotations

import logging
import re

from extraction.amounts import fix_misread_amount, reinsert_decimal
from extraction.dates import date_spans, in_date_span
from extraction.numeric_validator import (
    has_amount_context,
    is_plausible_payment,
    is_year_string,
    parse_amount,
)
from utils.config import RepairPolicy

logger = logging.getLogger(__name__)

# Longest labels first so "total amount" wins over "total"
REPAIR_LABELS = ("total amount", "bill total", "grand total", "amount paid", "paid", "total")

# "<label> [₹] 61200": integer with no decimal part right after an amount label
_LABEL_INTEGER = re.compile(
    r"(?<![A-Za-z])(" + "|".join(re.escape(l) for l in REPAIR_LABELS) + r")\s*[:\-]?\s*₹?\s*(\d{4,7})(?!\d|[.,]\d)",
    re.IGNORECASE,
)

# ₹ read as a Latin letter: "Total R664.70", "Paid F 299"
_LETTER_AS_RUPEE = re.compile(r"(?<![A-Za-z0-9₹])[RIF]\s?(\d[\d,]*(?:\.\d{1,2})?)(?![\d.,]?\d)")

# Bare 4-6 digit run (optionally with paise) not attached to ₹ or another number
_BARE_RUN = re.compile(r"(?<![\d.,₹])\b(\d{4,6}(?:\.\d{1,2})?)\b(?![.,]?\d)")

# A line holding nothing but a 5-6 digit number
_STANDALONE_RUN = re.compile(r"^\s*(\d{5,6})\s*$")

# Masking patterns; none of them may follow ₹, a digit or a decimal separator
_YEAR = re.compile(r"(?<![\d.,₹])\b(\d{4})\b(?![.,]?\d)")
_LONG_ID = re.compile(r"(?<![\d.,₹])\d{10,}(?!\d)")
_PHONE = re.compile(r"(?<![\d.,₹])\b\d{5}\s?\d{5}\b(?![.,]?\d)")
_PIN = re.compile(r"(?<![\d.,₹])\b\d{6}\b(?![.,]?\d)")

GEO_WORDS = (
    "india",
    "pin",
    "pincode",
    "road",
    "layout",
    "nagar",
    "street",
    "sector",
    "bengaluru",
    "bangalore",
    "mumbai",
    "delhi",
    "chennai",
    "hyderabad",
    "pune",
    "kolkata",
    "karnataka",
    "maharashtra",
    "tamil nadu",
    "telangana",
)
_GEO_CONTEXT = re.compile(r"\b(?:" + "|".join(re.escape(w) for w in GEO_WORDS) + r")\b", re.IGNORECASE)


def _money(value: float) -> str:
    return f"₹{value:.2f}"


# ---------------------------------------------------------------------------
# Repair
# ---------------------------------------------------------------------------


def _repair_labeled_integers(text: str, policy: RepairPolicy) -> str:
    """'total amount 61200' -> 'total amount ₹612.00'."""

    def repl(m: re.Match) -> str:
        label, digits = m.group(1), m.group(2)
        value = int(digits)
        if value < policy.bare_amount_threshold or value > policy.label_value_ceiling:
            return m.group(0)
        candidate = reinsert_decimal(digits)
        if is_plausible_payment(candidate, policy.plausible_min, policy.plausible_max):
            logger.debug("Decimal reinserted: %s -> %.2f", digits, candidate)
            return f"{label} {_money(candidate)}"
        candidate = reinsert_decimal(digits[1:])
        if is_plausible_payment(candidate, policy.plausible_min, policy.plausible_max):
            logger.debug("Leading digit stripped, decimal reinserted: %s -> %.2f", digits, candidate)
            return f"{label} {_money(candidate)}"
        logger.debug("Could not repair %s, keeping as-is", digits)
        return m.group(0)

    return _LABEL_INTEGER.sub(repl, text)


def _repair_letter_glyphs(line: str, policy: RepairPolicy) -> str:
    """On amount lines: 'R664.70' -> '₹664.70' when the number is plausible."""

    def repl(m: re.Match) -> str:
        value = parse_amount(m.group(1))
        if not is_plausible_payment(value, policy.plausible_min, policy.plausible_max):
            return m.group(0)
        return "₹" + m.group(1)

    return _LETTER_AS_RUPEE.sub(repl, line)


def _repair_digit_glyphs(line: str, policy: RepairPolicy) -> str:
    """On amount lines without ₹: '2500' -> '₹500' where the leading 2/3 was the glyph."""
    options = policy.amount_options()

    def repl(m: re.Match) -> str:
        raw = m.group(1)
        if raw[0] not in policy.confusable_digits:
            return m.group(0)
        if is_year_string(raw, policy.year_min, policy.year_max):
            return m.group(0)
        fixed = fix_misread_amount(raw, options)
        if fixed is None:
            return m.group(0)
        logger.debug("Misread ₹ on amount line: %s -> %.2f", raw, fixed)
        return _money(fixed)

    return _BARE_RUN.sub(repl, line)


def _repair_standalone(line: str, policy: RepairPolicy) -> str:
    """A line that is only '366470' -> '₹664.70' (glyph misread and decimal lost)."""
    m = _STANDALONE_RUN.match(line)
    if not m or m.group(1)[0] not in policy.confusable_digits:
        return line
    fixed = fix_misread_amount(m.group(1), policy.amount_options())
    if fixed is None:
        return line
    logger.debug("Standalone misread: %s -> %.2f", m.group(1), fixed)
    return _money(fixed)


def repair_amounts(text: str, policy: RepairPolicy | None = None) -> str:
    """
    Fix amount misreadings. Label-adjacent large integers get their decimal point back;
    on amount-bearing lines (total, paid, bill, price, fee, ...) a ₹ read as R/I/F or as a
    leading 2/3 is restored. Year-like 4-digit numbers are never touched.
    """
    if not text or not text.strip():
        return text
    policy = policy or RepairPolicy()
    text = _repair_labeled_integers(text, policy)

    def process_line(line: str) -> str:
        if has_amount_context(line):
            line = _repair_letter_glyphs(line, policy)
            if "₹" not in line:
                line = _repair_digit_glyphs(line, policy)
            return line
        return _repair_standalone(line, policy)

    return "\n".join(process_line(line) for line in text.split("\n"))


# ---------------------------------------------------------------------------
# Masking
# ---------------------------------------------------------------------------


def _mask_years(text: str, policy: RepairPolicy) -> str:
    spans = date_spans(text)

    def repl(m: re.Match) -> str:
        if not is_year_string(m.group(1), policy.year_min, policy.year_max):
            return m.group(0)
        if in_date_span(spans, m.start(1), m.end(1)):
            return m.group(0)
        logger.debug("Masking year: %s", m.group(1))
        return policy.mask_token

    return _YEAR.sub(repl, text)


def _mask_pins(text: str, policy: RepairPolicy) -> str:
    def process_line(line: str) -> str:
        if not _GEO_CONTEXT.search(line):
            return line
        return _PIN.sub(policy.mask_token, line)

    return "\n".join(process_line(line) for line in text.split("\n"))


def mask_non_amounts(text: str, policy: RepairPolicy | None = None) -> str:
    """
    Replace years (1990-2039, unless part of a date), 10+ digit IDs, phone numbers and
    PIN codes on address lines with a digit-free placeholder. Anything glued to ₹, a digit
    or a decimal separator is left alone, so repaired amounts survive.
    """
    if not text or not text.strip():
        return text
    policy = policy or RepairPolicy()
    text = _mask_years(text, policy)
    text = _LONG_ID.sub(policy.mask_token, text)
    text = _PHONE.sub(policy.mask_token, text)
    return _mask_pins(text, policy)


def normalize_ocr(text: str, policy: RepairPolicy | None = None) -> str:
    """Full OCR post-processing: repair amounts first, then mask non-amount numbers."""
    policy = policy or RepairPolicy()
    result = mask_non_amounts(repair_amounts(text, policy), policy)
    logger.debug("OCR normalization complete, length %d -> %d", len(text or ""), len(result or ""))
    return result
