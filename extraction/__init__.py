"""Extraction: normalization, classification, and amount/date/text primitives."""

from extraction.amounts import (
    extract_amount_near_label,
    extract_amounts,
    extract_labeled_amount,
    extract_largest_amount,
    extract_max_in_range,
    fix_misread_amount,
)
from extraction.classifier import classify, classify_with_signals
from extraction.dates import parse_receipt_date, parse_sms_date
from extraction.normalize import normalize, split_lines
from extraction.text import title_case

__all__ = [
    "extract_amount_near_label",
    "extract_amounts",
    "extract_labeled_amount",
    "extract_largest_amount",
    "extract_max_in_range",
    "fix_misread_amount",
    "classify",
    "classify_with_signals",
    "parse_receipt_date",
    "parse_sms_date",
    "normalize",
    "split_lines",
    "title_case",
]
