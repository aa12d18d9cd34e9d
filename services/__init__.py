"""Services: expense scanning around an injected OCR handle."""

from services.expense_service import ExpenseService, content_hash

__all__ = [
    "ExpenseService",
    "content_hash",
]
