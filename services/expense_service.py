"""
Expense service: OCR handle + pipeline -> ScanResult.
The OCR handle is injected and owned by the service once passed in; close() (or leaving the
`with` block) releases it. A sha256 content hash is attached to every result for deduplication.
"""

from __future__ import annotations

import hashlib
import logging
import uuid
from typing import Sequence

from core.exceptions import OCRError
from core.interfaces import IOCRService
from core.models import BatchMetrics, ScanResult
from core.schema import DocumentType
from pipeline.batch_processor import BatchProcessor
from pipeline.expense_pipeline import ExpensePipeline
from pipeline.fallback import ConfidenceReviewStrategy

logger = logging.getLogger(__name__)


def content_hash(data: bytes | str) -> str:
    """sha256 hex digest of image bytes or SMS/receipt text."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    return hashlib.sha256(data).hexdigest()


class ExpenseService:
    """Scan images (through the OCR handle) or texts into ScanResults."""

    def __init__(
        self,
        pipeline: ExpensePipeline,
        ocr_service: IOCRService | None = None,
        review: ConfidenceReviewStrategy | None = None,
    ) -> None:
        self._pipeline = pipeline
        self._ocr = ocr_service
        self._review = review or ConfidenceReviewStrategy(pipeline.config.extraction.review_threshold)
        self._closed = False

    def scan_image(self, image_bytes: bytes, trace_id: str | None = None) -> ScanResult:
        """OCR the image, then parse its text. Raises OCRError when the OCR handle fails."""
        trace_id = trace_id or str(uuid.uuid4())
        if self._ocr is None:
            raise OCRError("No OCR service configured", trace_id=trace_id)
        if self._closed:
            raise OCRError("OCR service already closed", trace_id=trace_id)
        try:
            ocr = self._ocr.recognize(image_bytes)
        except OCRError:
            raise
        except Exception as e:
            raise OCRError(f"OCR failed: {e}", trace_id=trace_id) from e
        logger.info("OCR done trace_id=%s chars=%d confidence=%.3f", trace_id, len(ocr.text), ocr.confidence)
        expense, doc_type = self._pipeline.parse_with_type(ocr.text)
        return ScanResult(
            expense=expense,
            content_hash=content_hash(image_bytes),
            needs_review=self._review.needs_review(expense),
            ocr_confidence=ocr.confidence,
            document_type=doc_type,
        )

    def scan_text(self, text: str, *, sms: bool = False) -> ScanResult:
        """Parse pasted text: a receipt transcript, or a bank SMS when sms=True."""
        if sms:
            expense, doc_type = self._pipeline.parse_sms(text), DocumentType.UNKNOWN
        else:
            expense, doc_type = self._pipeline.parse_with_type(text)
        return ScanResult(
            expense=expense,
            content_hash=content_hash(text),
            needs_review=self._review.needs_review(expense),
            ocr_confidence=1.0,
            document_type=doc_type,
        )

    def scan_batch(
        self,
        texts: Sequence[str],
        *,
        sms: bool = False,
        max_workers: int = 1,
    ) -> tuple[list[ScanResult], BatchMetrics]:
        """Parse many texts through BatchProcessor; ScanResults come back in input order."""
        processor = BatchProcessor(self._pipeline, max_workers=max_workers, review=self._review)
        expenses, metrics = processor.process_batch(texts, sms=sms)
        results = [
            ScanResult(
                expense=expense,
                content_hash=content_hash(text),
                needs_review=self._review.needs_review(expense),
                ocr_confidence=1.0,
            )
            for text, expense in zip(texts, expenses)
        ]
        return results, metrics

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._ocr is not None:
            self._ocr.close()
            logger.debug("OCR service closed")

    def __enter__(self) -> ExpenseService:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
