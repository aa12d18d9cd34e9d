"""Food-delivery receipts (Swiggy, Zomato): restaurant name, app source, flat confidence."""
from __future__ import annotations

import logging
import re
from typing import Sequence

from core.models import ReceiptExtractionOptions
from core.schema import Category, DocumentType, FOOD_ORDER_MERCHANT, ParsedExpense
from extraction.classifier import FOOD_APP_WORDS
from extraction.dates import parse_receipt_date
from extraction.text import first_keyword_match, title_case
from extractors.base import Clock, ReceiptExtractor, build_expense, receipt_options
from extractors.keywords import FOOD_DEFAULT_SOURCE, FOOD_SOURCES, RESTAURANT_SUFFIXES

logger = logging.getLogger(__name__)

LABELS = ("bill total", "grand total", "amount paid", "paid", "total")
NOISE_KEYWORDS = (
    "delivery fee",
    "platform fee",
    "gst",
    "taxes",
    "tax",
    "discount",
    "packaging",
    "handling",
    "tip",
    "free",
    "savings",
)
CONFIDENCE = 0.85

_HEADER = re.compile(r"order details|order was|delivered|support|help|bill|summary|invoice", re.IGNORECASE)
_ORDER_ID = re.compile(r"order\s*(id|#|no)|#\d{5,}", re.IGNORECASE)
_PRICE = re.compile(r"₹|\d{3,}")
_ITEM_LINE = re.compile(r"^\d+\s*x\s", re.IGNORECASE)
_DAY_MONTH = re.compile(r"\d{1,2}\s+(jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)", re.IGNORECASE)
_LOCATION = re.compile(
    r"\b(india|road|tower|building|street|nagar|layout|sector|floor|bengaluru|bangalore|"
    r"mumbai|delhi|chennai|hyderabad|pune|kochi|kerala|kakkanad|infopark)\b",
    re.IGNORECASE,
)
_APP_CHROME = re.compile(
    r"swiggy|zomato|reorder|instamart|paid|total|delivery|rate|track|fee|tax|gst|upi|completed|rating",
    re.IGNORECASE,
)
# Screen headings the classifier treats as food-app chrome ("your order", "order summary")
_FOOD_APP_HEADING = re.compile("|".join(re.escape(w) for w in FOOD_APP_WORDS), re.IGNORECASE)
_NAME_LINE = re.compile(r"^[a-z][a-z\s.'&-]{2,34}$", re.IGNORECASE)
# OCR debris around a name: bullets, arrows, bars, stars
_EDGE_DEBRIS = re.compile(r"^[^a-z0-9]+|[^a-z0-9.')]+$", re.IGNORECASE)
_FROM_CONTEXT = re.compile(r"\bfrom\s+([a-z][a-z .&']{2,25})", re.IGNORECASE)
_SUFFIX_NAME = re.compile(
    r"([a-z][a-z .&']{2,30}?(?:" + "|".join(RESTAURANT_SUFFIXES) + r"))\b",
    re.IGNORECASE,
)

_REJECT_PATTERNS = (_HEADER, _ORDER_ID, _PRICE, _DAY_MONTH, _LOCATION, _APP_CHROME, _FOOD_APP_HEADING)


def _looks_like_restaurant(line: str) -> bool:
    if _ITEM_LINE.search(line):
        return False
    if any(p.search(line) for p in _REJECT_PATTERNS):
        return False
    return _NAME_LINE.match(line) is not None


def extract_restaurant(text: str, lines: Sequence[str], scan_lines: int = 15) -> str:
    """Header scan -> 'from <name>' -> '<name> dhaba/hotel/kitchen/...' -> Food Order."""
    for line in lines[:scan_lines]:
        cleaned = _EDGE_DEBRIS.sub("", line.strip()).strip()
        if _looks_like_restaurant(cleaned):
            logger.debug("Restaurant found via header scan: %s", cleaned)
            return title_case(cleaned)

    m = _FROM_CONTEXT.search(text)
    if m:
        logger.debug("Restaurant found via 'from' context: %s", m.group(1))
        return title_case(m.group(1).strip())

    for line in lines:
        m = _SUFFIX_NAME.search(line)
        if m:
            logger.debug("Restaurant found via business suffix: %s", m.group(1))
            return title_case(m.group(1).strip())

    return FOOD_ORDER_MERCHANT


def detect_source(text: str) -> str:
    return first_keyword_match(text.lower(), FOOD_SOURCES) or FOOD_DEFAULT_SOURCE


class FoodDeliveryExtractor(ReceiptExtractor):
    """Food-delivery receipt. Category is always Food & Dining; confidence is a flat 0.85."""

    document_type = DocumentType.FOOD_DELIVERY

    def __init__(
        self,
        options: ReceiptExtractionOptions | None = None,
        clock: Clock | None = None,
        restaurant_scan_lines: int = 15,
    ) -> None:
        super().__init__(options or receipt_options(LABELS, NOISE_KEYWORDS, (50.0, 10_000.0)), clock)
        self._restaurant_scan_lines = restaurant_scan_lines

    def build(self, text: str, lines: Sequence[str], amount: float) -> ParsedExpense | None:
        return build_expense(
            amount=amount,
            merchant=extract_restaurant(text, lines, self._restaurant_scan_lines),
            category=Category.FOOD,
            date=parse_receipt_date(text) or self.now(),
            source=detect_source(text),
            confidence=CONFIDENCE,
            raw_text=text,
        )
