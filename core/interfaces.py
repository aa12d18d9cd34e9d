"""
Abstract interfaces for the expense pipeline.
The OCR engine is an external dependency behind an interface; extractors share one contract.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from core.schema import DocumentType, OCRExtractionResult, ParsedExpense


class IOCRService(ABC):
    """Abstract OCR handle: image bytes -> raw text + confidence. Owned and closed by the caller."""

    @abstractmethod
    def recognize(self, image_bytes: bytes) -> OCRExtractionResult:
        """Run OCR on an already preprocessed image. Confidence in [0,1]."""
        ...

    def close(self) -> None:
        """Release engine resources (workers, models). Default: nothing to release."""
        return None


class IExtractor(ABC):
    """Type-specific extractor: normalized text + lines -> ParsedExpense or None."""

    document_type: DocumentType = DocumentType.UNKNOWN

    @abstractmethod
    def extract(self, text: str, lines: list[str]) -> ParsedExpense | None:
        """Return None when no plausible amount can be recovered."""
        ...
