"""
Bank transaction SMS (credit/debit card, UPI debit alerts).
Works on the raw SMS text: no OCR repair, no lower-casing before the bank-specific layouts run.
"""
from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Callable, Sequence

from core.interfaces import IExtractor
from core.schema import Category, DocumentType, ParsedExpense, UNKNOWN_MERCHANT
from extraction.dates import parse_sms_date
from extraction.numeric_validator import parse_amount
from extraction.text import first_keyword_match, title_case
from extractors.base import Clock, build_expense, utc_now
from extractors.keywords import BANK_CATEGORY_RULES, BANK_DEFAULT_SOURCE, BANKS, MERCHANT_ALIASES

logger = logging.getLogger(__name__)

CONFIDENCE = 0.85
AMOUNT_CEILING = 1_000_000.0

_AMOUNT = re.compile(r"(?:\bINR|\bRs\.?|₹)\s*([\d,]+(?:\.\d+)?)", re.IGNORECASE)

_D_MON_Y = r"\d{1,2}[-/][a-z]{3}[-/]\d{2,4}"
_D_M_Y = r"\d{1,2}[-/]\d{1,2}[-/]\d{2,4}"

# Bank-specific layouts
# ICICI:   INR X spent using ICICI Bank Card XX1234 on 11-Jan-26 on MERCHANT. Avl Limit: ...
_ICICI_DATE = re.compile(r"\bon\s+(" + _D_MON_Y + r")", re.IGNORECASE)
_ICICI_MERCHANT = re.compile(
    r"\bon\s+" + _D_MON_Y + r"\s+on\s+([^.\n]+?)\.?\s*(?:Avl|Available|$)",
    re.IGNORECASE,
)
# Federal: INR X spent on your credit card ending with 1234 at MERCHANT on 13-01-2026
_FEDERAL_DATE = re.compile(r"\bon\s+(" + _D_M_Y + r")", re.IGNORECASE)
_FEDERAL_MERCHANT = re.compile(r"\bat\s+(.+?)\s+on\s+\d{1,2}[-/]", re.IGNORECASE)
# HDFC:    Txn Rs.X On HDFC Bank Card 1234 At MERCHANT by UPI ... On 07-09
_HDFC_DATE = re.compile(r"\bOn\s+(\d{1,2}[-/]\d{1,2}(?:[-/]\d{2,4})?)", re.IGNORECASE)
_HDFC_MERCHANT = re.compile(r"\bAt\s+(.+?)\s+(?:by|On\s+\d|Not)", re.IGNORECASE)

# Generic layouts, most specific first
GENERIC_DATE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\bon\s+(" + _D_MON_Y + r")", re.IGNORECASE),
    re.compile(r"\bon\s+(" + _D_M_Y + r")", re.IGNORECASE),
    re.compile(r"\bdated?\s+(" + _D_M_Y + r")", re.IGNORECASE),
    re.compile(r"(" + _D_M_Y + r")"),
)
GENERIC_MERCHANT_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(
        r"\b(?:at|to|on)\s+([A-Za-z][A-Za-z0-9\s@._-]+?)"
        r"(?:\s+on\s+\d|\.|\s+Avl|\s+Available|\s+Not|\s+by|\s+Info)",
        re.IGNORECASE,
    ),
    re.compile(r"\b(?:at|to)\s+([A-Za-z][A-Za-z0-9\s@._-]{2,30})", re.IGNORECASE),
)

_TXN_ID = re.compile(r"\d{8,}")
_UPI_HANDLE = re.compile(r"@[a-z]+\b", re.IGNORECASE)
_LEADING_PREPOSITION = re.compile(r"^(at|on|to)\s+", re.IGNORECASE)
_SPACES = re.compile(r"\s+")

# (date fragment, raw merchant) found by a bank-specific layout
SmsFields = tuple[str | None, str | None]


def _first_group(pattern: re.Pattern[str], text: str) -> str | None:
    m = pattern.search(text)
    return m.group(1) if m else None


def _parse_icici(text: str) -> SmsFields:
    return _first_group(_ICICI_DATE, text), _first_group(_ICICI_MERCHANT, text)


def _parse_federal(text: str) -> SmsFields:
    return _first_group(_FEDERAL_DATE, text), _first_group(_FEDERAL_MERCHANT, text)


def _parse_hdfc(text: str) -> SmsFields:
    return _first_group(_HDFC_DATE, text), _first_group(_HDFC_MERCHANT, text)


BANK_PARSERS: tuple[tuple[str, Callable[[str], SmsFields]], ...] = (
    ("icici", _parse_icici),
    ("federal bank", _parse_federal),
    ("hdfc", _parse_hdfc),
)


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------


def extract_sms_amount(text: str, ceiling: float = AMOUNT_CEILING) -> float | None:
    """First '(INR|Rs.|₹) <amount>' below ceiling; larger figures are balance displays."""
    for m in _AMOUNT.finditer(text):
        value = parse_amount(m.group(1))
        if value is not None and 0 < value < ceiling:
            return value
        logger.debug("Skipping SMS amount %r (outside (0, %s))", m.group(1), ceiling)
    return None


def detect_bank(text: str) -> str:
    return first_keyword_match(text.lower(), BANKS) or BANK_DEFAULT_SOURCE


def clean_merchant(raw: str | None) -> str:
    """Strip IDs, UPI handles and prepositions; title-case; map known merchant families."""
    if not raw:
        return UNKNOWN_MERCHANT
    cleaned = _TXN_ID.sub("", raw).strip()
    cleaned = _UPI_HANDLE.sub("", cleaned).strip()
    cleaned = _LEADING_PREPOSITION.sub("", cleaned).strip()
    cleaned = _SPACES.sub(" ", cleaned).strip(" .-_")
    if not cleaned:
        return UNKNOWN_MERCHANT
    cleaned = title_case(cleaned)
    return first_keyword_match(cleaned.lower(), MERCHANT_ALIASES) or cleaned


def infer_category(merchant: str) -> Category:
    value = first_keyword_match(merchant.lower(), BANK_CATEGORY_RULES)
    return Category(value) if value else Category.MISCELLANEOUS


def _generic_date(text: str) -> str | None:
    for pattern in GENERIC_DATE_PATTERNS:
        found = _first_group(pattern, text)
        if found:
            return found
    return None


def _generic_merchant(text: str) -> str | None:
    for pattern in GENERIC_MERCHANT_PATTERNS:
        found = _first_group(pattern, text)
        if found:
            return found
    return None


class BankSmsExtractor(IExtractor):
    """Bank SMS: bank-specific layouts first, generic patterns for whatever they miss."""

    document_type = DocumentType.UNKNOWN

    def __init__(self, clock: Clock | None = None, amount_ceiling: float = AMOUNT_CEILING) -> None:
        self._clock = clock or utc_now
        self._amount_ceiling = amount_ceiling

    def _bank_fields(self, text: str) -> SmsFields:
        lower = text.lower()
        for keyword, parser in BANK_PARSERS:
            if keyword in lower:
                logger.debug("Using %s layout", keyword)
                return parser(text)
        return None, None

    def _resolve_date(self, fragment: str | None) -> datetime:
        now = self._clock()
        if fragment:
            parsed = parse_sms_date(fragment, now)
            if parsed is not None:
                return parsed
        return now

    def extract(self, text: str, lines: Sequence[str] | None = None) -> ParsedExpense | None:
        text = (text or "").strip()
        amount = extract_sms_amount(text, self._amount_ceiling)
        if amount is None:
            logger.debug("No transaction amount in SMS")
            return None

        date_fragment, raw_merchant = self._bank_fields(text)
        date_fragment = date_fragment or _generic_date(text)
        merchant = clean_merchant(raw_merchant)
        if merchant == UNKNOWN_MERCHANT:
            merchant = clean_merchant(_generic_merchant(text))

        return build_expense(
            amount=amount,
            merchant=merchant,
            category=infer_category(merchant),
            date=self._resolve_date(date_fragment),
            source=detect_bank(text),
            confidence=CONFIDENCE,
            raw_text=text,
        )
