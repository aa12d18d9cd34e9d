"""Fallback policies: extractor order when classification fails, and the manual-review threshold."""

from __future__ import annotations

from core.schema import DocumentType, ParsedExpense

# Tried in this order when the classifier says UNKNOWN or the matched extractor finds nothing
FALLBACK_ORDER: tuple[DocumentType, ...] = (
    DocumentType.UPI_RECEIPT,
    DocumentType.FOOD_DELIVERY,
    DocumentType.QUICK_COMMERCE,
)


def fallback_sequence(already_tried: DocumentType | None = None) -> tuple[DocumentType, ...]:
    """FALLBACK_ORDER without the extractor that already ran."""
    return tuple(t for t in FALLBACK_ORDER if t != already_tried)


class ConfidenceReviewStrategy:
    """Configurable: needs_review(expense) when confidence < threshold, with a label for the reason."""

    def __init__(self, threshold: float = 0.75, reason_label: str = "low_confidence") -> None:
        self._threshold = threshold
        self._reason_label = reason_label

    @property
    def threshold(self) -> float:
        return self._threshold

    def needs_review(self, expense: ParsedExpense | None) -> bool:
        if expense is None:
            return False
        return expense.confidence < self._threshold

    def get_reason(self) -> str:
        return self._reason_label
