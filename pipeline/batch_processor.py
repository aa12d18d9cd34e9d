"""
Batch processor: list of texts -> run pipeline per text, collect metrics.
Does not duplicate pipeline logic; uses ExpensePipeline.parse() / parse_sms().
Supports parallel execution via max_workers (ThreadPoolExecutor); results keep input order.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Sequence

from core.models import BatchMetrics
from core.schema import ParsedExpense
from pipeline.expense_pipeline import ExpensePipeline
from pipeline.fallback import ConfidenceReviewStrategy

logger = logging.getLogger(__name__)


def _update_metrics(
    metrics: BatchMetrics,
    expense: ParsedExpense | None,
    review: ConfidenceReviewStrategy,
) -> None:
    """Update counts from a single parse result."""
    metrics.total_processed += 1
    if expense is None:
        metrics.failed_count += 1
        return
    metrics.parsed_count += 1
    if review.needs_review(expense):
        metrics.needs_review_count += 1


class BatchProcessor:
    """
    Parse many texts in parallel (or sequentially when max_workers=1). Collects metrics.
    Injected pipeline; each parse call is independent.
    """

    def __init__(
        self,
        pipeline: ExpensePipeline,
        max_workers: int = 1,
        review: ConfidenceReviewStrategy | None = None,
    ) -> None:
        self._pipeline = pipeline
        self._max_workers = max(1, int(max_workers))
        self._review = review or ConfidenceReviewStrategy(pipeline.config.extraction.review_threshold)

    def _parse_one(self, text: str, sms: bool) -> ParsedExpense | None:
        if sms:
            return self._pipeline.parse_sms(text)
        return self._pipeline.parse(text)

    def process_batch(
        self,
        texts: Sequence[str],
        *,
        sms: bool = False,
        stop_on_first_error: bool = False,
    ) -> tuple[list[ParsedExpense | None], BatchMetrics]:
        """
        Parse every text. Returns (results in input order, metrics); None marks "no result".
        On an unexpected error: if stop_on_first_error, re-raise; else log, record None and continue.
        """
        results: list[ParsedExpense | None] = [None] * len(texts)
        metrics = BatchMetrics()
        start = time.perf_counter()

        if self._max_workers > 1:
            with ThreadPoolExecutor(max_workers=self._max_workers) as executor:
                futures = {executor.submit(self._parse_one, text, sms): i for i, text in enumerate(texts)}
                for future in as_completed(futures):
                    idx = futures[future]
                    try:
                        results[idx] = future.result()
                    except Exception as e:
                        logger.exception("Batch item %d failed: %s", idx, e)
                        if stop_on_first_error:
                            raise
        else:
            for i, text in enumerate(texts):
                try:
                    results[i] = self._parse_one(text, sms)
                except Exception as e:
                    logger.exception("Batch item %d failed: %s", i, e)
                    if stop_on_first_error:
                        raise

        for expense in results:
            _update_metrics(metrics, expense, self._review)
        metrics.total_time_sec = time.perf_counter() - start
        logger.info("Batch complete: %s", metrics.to_dict())
        return results, metrics
