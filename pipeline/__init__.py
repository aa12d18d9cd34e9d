"""Pipeline: single-text and batch expense parsing."""

from pipeline.expense_pipeline import ExpensePipeline, build_extractors, parse_bank_sms, parse_expense
from pipeline.batch_processor import BatchProcessor
from pipeline.fallback import FALLBACK_ORDER, ConfidenceReviewStrategy, fallback_sequence

__all__ = [
    "ExpensePipeline",
    "build_extractors",
    "parse_bank_sms",
    "parse_expense",
    "BatchProcessor",
    "FALLBACK_ORDER",
    "ConfidenceReviewStrategy",
    "fallback_sequence",
]
