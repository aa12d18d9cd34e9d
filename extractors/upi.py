"""UPI payment receipts (GPay, PhonePe, Paytm, BHIM): payee, category and a compositional confidence."""
from __future__ import annotations

import logging
import re
from typing import Sequence

from core.models import ReceiptExtractionOptions
from core.schema import Category, DocumentType, ParsedExpense, UNKNOWN_MERCHANT
from extraction.dates import parse_receipt_date
from extraction.text import first_keyword_match, keyword_in, title_case
from extractors.base import Clock, ReceiptExtractor, build_expense, receipt_options
from extractors.keywords import UPI_CATEGORY_RULES, UPI_DEFAULT_SOURCE, UPI_SOURCES

logger = logging.getLogger(__name__)

LABELS = ("total amount", "amount paid", "paid", "amount")
NOISE_KEYWORDS = ("platform fee", "gst", "tax", "cashback", "plan price", "fee for", "inclusive")

# Confidence weights
BASE_CONFIDENCE = 0.4
AMOUNT_WEIGHT = 0.2
MERCHANT_WEIGHT = 0.25
DATE_WEIGHT = 0.15

_TO_PAYEE = re.compile(r"\bto[:\s]+([a-z0-9 .&_-]{2,})", re.IGNORECASE)
_PAID_TO = re.compile(r"\bpaid\s+to\s+([a-z][a-z .&]{2,30})", re.IGNORECASE)
_CHROME_WORDS = ("completed", "paid", "repeat", "transaction", "upi", "google", "payment", "success")
# Payment-app names are screen titles, never the payee
_HEADER_CHROME = re.compile(
    "|".join(_CHROME_WORDS)
    + r"|\b(?:"
    + "|".join(re.escape(k) for keys, _ in UPI_SOURCES for k in keys)
    + r")\b",
    re.IGNORECASE,
)
_DAY_MONTH = re.compile(r"\d{1,2}\s+(jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)", re.IGNORECASE)
_NAME_LINE = re.compile(r"^[a-z][a-z\s.&]{2,30}$", re.IGNORECASE)


def _payee_from_to(lines: Sequence[str]) -> str | None:
    for line in lines:
        m = _TO_PAYEE.search(line)
        if not m:
            continue
        candidate = m.group(1).strip(" .-_")
        # "to abc@okaxis": the capture stops at '@', the payee is a handle
        if line[m.end(1) : m.end(1) + 1] == "@" or "@" in candidate:
            continue
        if candidate.isdigit() or len(candidate) <= 2:
            continue
        return candidate
    return None


def _payee_from_header(lines: Sequence[str], scan_lines: int) -> str | None:
    for line in lines[:scan_lines]:
        line = line.strip()
        if _HEADER_CHROME.search(line) or "₹" in line or _DAY_MONTH.search(line):
            continue
        if _NAME_LINE.match(line):
            return line
    return None


def _payee_from_paid_to(text: str) -> str | None:
    m = _PAID_TO.search(text)
    return m.group(1).strip() if m else None


def extract_merchant(text: str, lines: Sequence[str], scan_lines: int = 10) -> str:
    """'to <name>' -> header name line -> 'paid to <name>' -> Unknown Merchant."""
    for finder in (
        lambda: _payee_from_to(lines),
        lambda: _payee_from_header(lines, scan_lines),
        lambda: _payee_from_paid_to(text),
    ):
        merchant = finder()
        if merchant:
            return title_case(merchant)
    return UNKNOWN_MERCHANT


def infer_category(merchant: str, text: str) -> Category:
    m, t = merchant.lower(), text.lower()
    for category, merchant_keywords, text_keywords in UPI_CATEGORY_RULES:
        if any(keyword_in(m, k) for k in merchant_keywords) or any(keyword_in(t, k) for k in text_keywords):
            return category
    return Category.MISCELLANEOUS


def detect_source(text: str) -> str:
    return first_keyword_match(text.lower(), UPI_SOURCES) or UPI_DEFAULT_SOURCE


def compute_confidence(amount: float | None, merchant: str, has_date: bool) -> float:
    score = BASE_CONFIDENCE
    if amount and amount > 0:
        score += AMOUNT_WEIGHT
    if merchant != UNKNOWN_MERCHANT:
        score += MERCHANT_WEIGHT
    if has_date:
        score += DATE_WEIGHT
    return min(score, 1.0)


def is_rejected(text: str) -> bool:
    """Failed or pending payment with no completion signal."""
    t = text.lower()
    if "completed" in t:
        return False
    return "failed" in t or "pending" in t


class UpiExtractor(ReceiptExtractor):
    """UPI receipt: amount cascade, payee, keyword category, payment-app source."""

    document_type = DocumentType.UPI_RECEIPT

    def __init__(self, options: ReceiptExtractionOptions | None = None, clock: Clock | None = None) -> None:
        super().__init__(options or receipt_options(LABELS, NOISE_KEYWORDS, (50.0, 10_000.0)), clock)

    def accepts(self, text: str) -> bool:
        if is_rejected(text):
            logger.info("Transaction appears failed or pending, skipping")
            return False
        return True

    def build(self, text: str, lines: Sequence[str], amount: float) -> ParsedExpense | None:
        merchant = extract_merchant(text, lines, self.options.header_scan_lines)
        date = parse_receipt_date(text)
        return build_expense(
            amount=amount,
            merchant=merchant,
            category=infer_category(merchant, text),
            date=date or self.now(),
            source=detect_source(text),
            confidence=compute_confidence(amount, merchant, date is not None),
            raw_text=text,
        )
