"""
Data models for the extraction pipeline.
Uses dataclasses for option structs and DTOs; Pydantic schemas (ParsedExpense, etc.) in core.schema.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from core.schema import DocumentType, ParsedExpense


@dataclass(frozen=True)
class AmountOptions:
    """Options for one extract_amounts call."""

    fix_misread: bool = False
    bare_min: float = 10.0
    bare_max: float = 100_000.0
    confusable_digits: tuple[str, ...] = ("2", "3")
    misread_min: float = 50.0
    misread_max: float = 5_000.0
    misread_ratio: float = 3.0
    plausible_min: float = 1.0
    plausible_max: float = 10_000.0


@dataclass(frozen=True)
class ReceiptExtractionOptions:
    """Per-extractor cascade settings: labels, noise keywords and fallback range."""

    labels: tuple[str, ...]
    noise_keywords: tuple[str, ...]
    fallback_min: float = 50.0
    fallback_max: float = 10_000.0
    year_min: int = 2020
    year_max: int = 2030
    header_scan_lines: int = 10
    amount_options: AmountOptions = field(default_factory=AmountOptions)


@dataclass(frozen=True)
class ClassificationSignals:
    """Boolean keyword signals computed while classifying one text."""

    quick_commerce_app: bool = False
    food_app: bool = False
    food_indicators: bool = False
    upi_like: bool = False
    upi_indicators: bool = False
    generic_grocery_bill: bool = False

    def to_dict(self) -> dict[str, bool]:
        return {
            "quick_commerce_app": self.quick_commerce_app,
            "food_app": self.food_app,
            "food_indicators": self.food_indicators,
            "upi_like": self.upi_like,
            "upi_indicators": self.upi_indicators,
            "generic_grocery_bill": self.generic_grocery_bill,
        }


@dataclass(frozen=True)
class ScanResult:
    """Result of scanning one image or SMS through the service layer."""

    expense: ParsedExpense | None
    content_hash: str
    needs_review: bool = False
    ocr_confidence: float = 0.0
    document_type: DocumentType = DocumentType.UNKNOWN

    @property
    def parsed(self) -> bool:
        return self.expense is not None


@dataclass
class BatchMetrics:
    """Metrics collected during batch parsing."""

    total_processed: int = 0
    parsed_count: int = 0
    failed_count: int = 0
    needs_review_count: int = 0
    total_time_sec: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Export for logging/serialization."""
        return {
            "total_processed": self.total_processed,
            "parsed_count": self.parsed_count,
            "failed_count": self.failed_count,
            "needs_review_count": self.needs_review_count,
            "total_time_sec": round(self.total_time_sec, 4),
        }
