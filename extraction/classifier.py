"""
Screenshot classifier: keyword signals over lower-cased normalized text -> DocumentType.
First match wins. Food receipts often carry a UPI confirmation too, so the dual-signal
food check runs before the UPI check.
"""
from __future__ import annotations

import logging

from core.models import ClassificationSignals
from core.schema import DocumentType
from extraction.text import has_any, keyword_in

logger = logging.getLogger(__name__)

QUICK_COMMERCE_APPS = ("instamart",)

FOOD_APP_WORDS = (
    "swiggy",
    "zomato",
    "order details",
    "bill summary",
    "reorder",
    "invoice",
    "your order",
    "order summary",
)

FOOD_INDICATORS = (
    "delivery fee",
    "delivery partner",
    "platform fee",
    "taxes",
    "gst",
    "item total",
    "bill total",
    "packaging",
    "delivered",
    "restaurant",
)

UPI_WORDS = (
    "g pay",
    "gpay",
    "google pay",
    "phonepe",
    "paytm",
    "bhim",
    "upi transaction id",
    "upi ref",
    "upi id",
    "paid to",
    "transaction id",
    "upi",
)

UPI_STATUS_WORDS = ("completed", "successful", "success")

BANK_WORDS = (
    "hdfc",
    "icici",
    "sbi",
    "axis",
    "kotak",
    "federal",
    "yes bank",
    "idfc",
    "canara",
    "union bank",
    "bank of baroda",
    "pnb",
    "indusind",
    "bank",
)

GROCERY_BILL_WORDS = ("grand total", "item bill")


def compute_signals(text: str) -> ClassificationSignals:
    """Evaluate every keyword signal once."""
    return ClassificationSignals(
        quick_commerce_app=has_any(text, QUICK_COMMERCE_APPS),
        food_app=has_any(text, FOOD_APP_WORDS),
        food_indicators=has_any(text, FOOD_INDICATORS),
        upi_like=has_any(text, UPI_WORDS),
        upi_indicators=(
            has_any(text, UPI_STATUS_WORDS)
            or "@" in text
            or any(keyword_in(text, b) for b in BANK_WORDS)
        ),
        generic_grocery_bill=has_any(text, GROCERY_BILL_WORDS),
    )


def _decide(s: ClassificationSignals) -> DocumentType:
    if s.quick_commerce_app:
        return DocumentType.QUICK_COMMERCE
    if s.food_app and s.food_indicators:
        return DocumentType.FOOD_DELIVERY
    if s.upi_like and s.upi_indicators:
        return DocumentType.UPI_RECEIPT
    if s.generic_grocery_bill:
        return DocumentType.QUICK_COMMERCE
    if s.upi_like:
        return DocumentType.UPI_RECEIPT
    if s.food_app:
        return DocumentType.FOOD_DELIVERY
    return DocumentType.UNKNOWN


def classify_with_signals(text: str) -> tuple[DocumentType, ClassificationSignals]:
    """Classify and also return the signals that decided it."""
    signals = compute_signals((text or "").lower())
    doc_type = _decide(signals)
    logger.debug("Classified as %s with signals %s", doc_type.value, signals.to_dict())
    return doc_type, signals


def classify(text: str) -> DocumentType:
    """Assign a document type to lower-cased normalized OCR text."""
    return classify_with_signals(text)[0]
