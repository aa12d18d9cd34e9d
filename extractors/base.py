"""
Receipt extraction cascade shared by the UPI, food-delivery and quick-commerce extractors.
Amount strategies are tried in order; the first one that yields a valid amount wins.
"""
from __future__ import annotations

import logging
import math
from abc import abstractmethod
from datetime import datetime, timezone
from typing import Any, Callable, Sequence

from pydantic import ValidationError

from core.interfaces import IExtractor
from core.models import AmountOptions, ReceiptExtractionOptions
from core.schema import ParsedExpense
from extraction.amounts import (
    extract_amount_near_label,
    extract_labeled_amount,
    extract_largest_amount,
    extract_max_in_range,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
AmountStrategy = Callable[[str, Sequence[str], ReceiptExtractionOptions], float | None]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Amount strategies
# ---------------------------------------------------------------------------


def amount_by_label(text: str, lines: Sequence[str], options: ReceiptExtractionOptions) -> float | None:
    """1. Priority-ordered label search; last amount on the first matching line."""
    return extract_amount_near_label(lines, options.labels, options.amount_options)


def amount_by_label_pattern(text: str, lines: Sequence[str], options: ReceiptExtractionOptions) -> float | None:
    """2. Explicit '<label> ₹? <amount>' adjacency."""
    return extract_labeled_amount(lines, options.labels)


def amount_by_largest(text: str, lines: Sequence[str], options: ReceiptExtractionOptions) -> float | None:
    """3. Largest amount over lines free of fee/tax/discount/quantity noise."""
    return extract_largest_amount(
        lines,
        options.noise_keywords,
        year_min=options.year_min,
        year_max=options.year_max,
        options=options.amount_options,
    )


def amount_in_range(text: str, lines: Sequence[str], options: ReceiptExtractionOptions) -> float | None:
    """4. Largest amount anywhere in the text within the extractor's broad range."""
    return extract_max_in_range(
        text,
        options.fallback_min,
        options.fallback_max,
        year_min=options.year_min,
        year_max=options.year_max,
        options=options.amount_options,
    )


RECEIPT_STRATEGIES: tuple[AmountStrategy, ...] = (
    amount_by_label,
    amount_by_label_pattern,
    amount_by_largest,
    amount_in_range,
)


def find_amount(
    text: str,
    lines: Sequence[str],
    options: ReceiptExtractionOptions,
    strategies: Sequence[AmountStrategy] = RECEIPT_STRATEGIES,
) -> float | None:
    """Run strategies in order; return the first finite positive amount."""
    for strategy in strategies:
        amount = strategy(text, lines, options)
        if amount is not None and math.isfinite(amount) and amount > 0:
            logger.debug("Amount %.2f found by %s", amount, strategy.__name__)
            return amount
        logger.debug("Strategy %s found nothing", strategy.__name__)
    return None


def build_expense(**fields: Any) -> ParsedExpense | None:
    """Construct a ParsedExpense; a record that fails validation is treated as no result."""
    try:
        return ParsedExpense(**fields)
    except ValidationError as e:
        logger.warning("Discarding invalid expense record: %s", e)
        return None


def receipt_options(
    labels: Sequence[str],
    noise_keywords: Sequence[str],
    fallback_range: tuple[float, float],
    *,
    year_min: int = 2020,
    year_max: int = 2030,
    header_scan_lines: int = 10,
    amount_options: AmountOptions | None = None,
) -> ReceiptExtractionOptions:
    return ReceiptExtractionOptions(
        labels=tuple(labels),
        noise_keywords=tuple(noise_keywords),
        fallback_min=fallback_range[0],
        fallback_max=fallback_range[1],
        year_min=year_min,
        year_max=year_max,
        header_scan_lines=header_scan_lines,
        amount_options=amount_options or AmountOptions(),
    )


# ---------------------------------------------------------------------------
# Base receipt extractor
# ---------------------------------------------------------------------------


class ReceiptExtractor(IExtractor):
    """
    Amount cascade plus a type-specific record builder. Subclasses implement build().
    Input is lower-cased before matching; keyword tables are lower-case.
    """

    strategies: tuple[AmountStrategy, ...] = RECEIPT_STRATEGIES

    def __init__(self, options: ReceiptExtractionOptions, clock: Clock | None = None) -> None:
        self._options = options
        self._clock = clock or utc_now

    @property
    def options(self) -> ReceiptExtractionOptions:
        return self._options

    def now(self) -> datetime:
        return self._clock()

    def accepts(self, text: str) -> bool:
        """Business-rule gate run before any extraction. Default: accept everything."""
        return True

    def find_amount(self, text: str, lines: Sequence[str]) -> float | None:
        return find_amount(text, lines, self._options, self.strategies)

    def extract(self, text: str, lines: list[str]) -> ParsedExpense | None:
        name = type(self).__name__
        text = text.lower()
        lines = [line.lower() for line in lines]
        if not self.accepts(text):
            logger.info("%s rejected the input", name)
            return None
        amount = self.find_amount(text, lines)
        if amount is None:
            logger.debug("%s: no amount found, parse failed", name)
            return None
        expense = self.build(text, lines, amount)
        if expense is not None:
            logger.debug(
                "%s parsed amount=%.2f merchant=%r category=%s confidence=%.2f",
                name,
                expense.amount,
                expense.merchant,
                expense.category.value,
                expense.confidence,
            )
        return expense

    @abstractmethod
    def build(self, text: str, lines: Sequence[str], amount: float) -> ParsedExpense | None:
        """Resolve the remaining fields around a recovered amount."""
        ...
