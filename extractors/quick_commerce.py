"""Quick-commerce grocery receipts (Swiggy Instamart). Fixed merchant, category and source."""
from __future__ import annotations

from typing import Sequence

from core.models import ReceiptExtractionOptions
from core.schema import Category, DocumentType, ParsedExpense
from extraction.dates import parse_receipt_date
from extractors.base import Clock, ReceiptExtractor, build_expense, receipt_options

LABELS = ("grand total", "total", "amount paid", "paid")
NOISE_KEYWORDS = ("delivery fee", "handling", "free", "item bill", "platform fee", "discount", "gst")

MERCHANT = "Swiggy Instamart"
SOURCE = "Instamart"
CONFIDENCE = 0.9


class QuickCommerceExtractor(ReceiptExtractor):
    document_type = DocumentType.QUICK_COMMERCE

    def __init__(self, options: ReceiptExtractionOptions | None = None, clock: Clock | None = None) -> None:
        super().__init__(options or receipt_options(LABELS, NOISE_KEYWORDS, (50.0, 50_000.0)), clock)

    def build(self, text: str, lines: Sequence[str], amount: float) -> ParsedExpense | None:
        return build_expense(
            amount=amount,
            merchant=MERCHANT,
            category=Category.GROCERIES,
            date=parse_receipt_date(text) or self.now(),
            source=SOURCE,
            confidence=CONFIDENCE,
            raw_text=text,
        )
