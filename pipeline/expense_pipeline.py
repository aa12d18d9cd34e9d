"""
Expense pipeline: single public method parse(raw_ocr_text) -> ParsedExpense | None.
Flow: normalize -> OCR amount repair/masking -> lower-case -> classify -> extractor -> fallback cascade.
Pure and synchronous; an instance holds only immutable config and extractors, so one pipeline
can serve concurrent callers.
"""

from __future__ import annotations

import logging
from typing import Mapping

from core.interfaces import IExtractor
from core.schema import DocumentType, ParsedExpense
from extraction.classifier import classify
from extraction.normalize import normalize, split_lines
from extractors import food_delivery, quick_commerce, upi
from extractors.bank_sms import BankSmsExtractor
from extractors.base import Clock, receipt_options, utc_now
from extractors.food_delivery import FoodDeliveryExtractor
from extractors.quick_commerce import QuickCommerceExtractor
from extractors.upi import UpiExtractor
from pipeline.fallback import fallback_sequence
from utils.config import AppConfig
from utils.logger import log_structured
from utils.ocr_normalize import normalize_ocr

logger = logging.getLogger(__name__)


def build_extractors(config: AppConfig, clock: Clock | None = None) -> dict[DocumentType, IExtractor]:
    """One receipt extractor per document type, configured from AppConfig."""
    ext = config.extraction
    common = {
        "year_min": ext.year_like_min,
        "year_max": ext.year_like_max,
        "header_scan_lines": ext.header_scan_lines,
        "amount_options": config.repair.amount_options(fix_misread=ext.fix_misread_amounts),
    }
    return {
        DocumentType.UPI_RECEIPT: UpiExtractor(
            receipt_options(upi.LABELS, upi.NOISE_KEYWORDS, ext.upi_fallback_range, **common),
            clock,
        ),
        DocumentType.FOOD_DELIVERY: FoodDeliveryExtractor(
            receipt_options(food_delivery.LABELS, food_delivery.NOISE_KEYWORDS, ext.food_fallback_range, **common),
            clock,
            restaurant_scan_lines=ext.restaurant_scan_lines,
        ),
        DocumentType.QUICK_COMMERCE: QuickCommerceExtractor(
            receipt_options(
                quick_commerce.LABELS,
                quick_commerce.NOISE_KEYWORDS,
                ext.quick_commerce_fallback_range,
                **common,
            ),
            clock,
        ),
    }


class ExpensePipeline:
    """
    Production pipeline: parse(raw) -> ParsedExpense | None.
    No global state. Extractors and clock may be injected (tests pin the clock).
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        clock: Clock | None = None,
        extractors: Mapping[DocumentType, IExtractor] | None = None,
        sms_extractor: IExtractor | None = None,
    ) -> None:
        self._config = config or AppConfig()
        self._clock = clock or utc_now
        self._extractors = dict(extractors) if extractors is not None else build_extractors(self._config, self._clock)
        self._sms = sms_extractor or BankSmsExtractor(
            clock=self._clock,
            amount_ceiling=self._config.extraction.sms_amount_ceiling,
        )

    @property
    def config(self) -> AppConfig:
        return self._config

    def _too_short(self, raw: str | None) -> bool:
        return raw is None or len(raw.strip()) < self._config.extraction.min_text_length

    def prepare(self, raw: str) -> tuple[str, list[str]]:
        """Normalized, repaired, masked, lower-cased text and its non-empty lines."""
        text = normalize_ocr(normalize(raw), self._config.repair).lower()
        return text, split_lines(text)

    def _run(self, doc_type: DocumentType, text: str, lines: list[str]) -> ParsedExpense | None:
        extractor = self._extractors.get(doc_type)
        if extractor is None:
            return None
        return extractor.extract(text, lines)

    def parse_with_type(self, raw: str) -> tuple[ParsedExpense | None, DocumentType]:
        """parse() that also reports the classified document type."""
        if self._too_short(raw):
            logger.debug("Input below noise floor (%d chars), skipping", len((raw or "").strip()))
            return None, DocumentType.UNKNOWN
        text, lines = self.prepare(raw)
        doc_type = classify(text)

        tried: DocumentType | None = None
        if doc_type != DocumentType.UNKNOWN:
            tried = doc_type
            expense = self._run(doc_type, text, lines)
            if expense is not None:
                self._log_outcome(expense, doc_type, fallback=False)
                return expense, doc_type
            logger.info("%s extractor found nothing, trying fallbacks", doc_type.value)

        for candidate in fallback_sequence(tried):
            expense = self._run(candidate, text, lines)
            if expense is not None:
                self._log_outcome(expense, candidate, fallback=True)
                return expense, doc_type
        logger.info("No extractor recovered an amount (classified as %s)", doc_type.value)
        return None, doc_type

    def parse(self, raw: str) -> ParsedExpense | None:
        """Raw OCR text -> ParsedExpense, or None when no plausible amount exists."""
        return self.parse_with_type(raw)[0]

    def parse_sms(self, raw: str) -> ParsedExpense | None:
        """Bank SMS text -> ParsedExpense. The OCR repair layer is skipped."""
        if self._too_short(raw):
            return None
        expense = self._sms.extract(raw.strip(), split_lines(raw))
        if expense is not None:
            log_structured(
                logger,
                logging.INFO,
                "Parsed bank SMS",
                source=expense.source,
                amount=expense.amount,
            )
        return expense

    @staticmethod
    def _log_outcome(expense: ParsedExpense, doc_type: DocumentType, *, fallback: bool) -> None:
        log_structured(
            logger,
            logging.INFO,
            "Parsed expense",
            document_type=doc_type.value,
            amount=expense.amount,
            source=expense.source,
            confidence=expense.confidence,
            fallback=fallback,
        )


def parse_expense(raw: str, config: AppConfig | None = None) -> ParsedExpense | None:
    """Parse raw OCR text with a pipeline built from config (defaults when None)."""
    return ExpensePipeline(config).parse(raw)


def parse_bank_sms(raw: str, config: AppConfig | None = None) -> ParsedExpense | None:
    """Parse bank SMS text with a pipeline built from config (defaults when None)."""
    return ExpensePipeline(config).parse_sms(raw)
