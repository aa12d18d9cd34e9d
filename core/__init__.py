"""Core layer: interfaces, models, schemas, exceptions."""

from core.interfaces import IExtractor, IOCRService
from core.models import (
    AmountOptions,
    BatchMetrics,
    ClassificationSignals,
    ReceiptExtractionOptions,
    ScanResult,
)
from core.schema import (
    Category,
    DocumentType,
    OCRExtractionResult,
    ParsedExpense,
)
from core.exceptions import (
    ConfigError,
    ExpenseParsingError,
    OCRError,
)

__all__ = [
    "IExtractor",
    "IOCRService",
    "AmountOptions",
    "BatchMetrics",
    "ClassificationSignals",
    "ReceiptExtractionOptions",
    "ScanResult",
    "Category",
    "DocumentType",
    "OCRExtractionResult",
    "ParsedExpense",
    "ConfigError",
    "ExpenseParsingError",
    "OCRError",
]
