"""Custom exceptions for the expense parser. Soft parse failures return None instead."""

from __future__ import annotations


class ExpenseParsingError(Exception):
    """Base exception for failures outside the normal "no result" path."""

    def __init__(self, message: str, trace_id: str | None = None) -> None:
        self.trace_id = trace_id or ""
        super().__init__(message)


class ConfigError(ExpenseParsingError):
    """Invalid or missing configuration."""

    pass


class OCRError(ExpenseParsingError):
    """The injected OCR engine failed to produce text."""

    pass
