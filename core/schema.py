"""
Pydantic schemas for expense extraction. Used by extractors, pipeline and services.
"""
from __future__ import annotations

import math
from datetime import datetime, timezone
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# Closed vocabularies
# ---------------------------------------------------------------------------


class Category(str, Enum):
    """Expense categories. MISCELLANEOUS is the catch-all."""

    FOOD = "Food & Dining"
    GROCERIES = "Groceries"
    SHOPPING = "Shopping"
    TRANSPORT = "Transport"
    UTILITIES = "Utilities"
    SUBSCRIPTIONS = "Subscriptions"
    ENTERTAINMENT = "Entertainment"
    HEALTH = "Health"
    MISCELLANEOUS = "Miscellaneous"


class DocumentType(str, Enum):
    """Screenshot kind detected by the classifier."""

    UPI_RECEIPT = "UPI_RECEIPT"
    FOOD_DELIVERY = "FOOD_DELIVERY"
    QUICK_COMMERCE = "QUICK_COMMERCE"
    UNKNOWN = "UNKNOWN"


CURRENCY = "INR"
UNKNOWN_MERCHANT = "Unknown Merchant"
FOOD_ORDER_MERCHANT = "Food Order"


# ---------------------------------------------------------------------------
# Parsed expense (sole output of the core)
# ---------------------------------------------------------------------------


class ParsedExpense(BaseModel):
    """Structured expense recovered from one OCR text or SMS. Immutable."""

    model_config = ConfigDict(frozen=True)

    amount: float = Field(..., gt=0)
    currency: Literal["INR"] = CURRENCY
    merchant: str = UNKNOWN_MERCHANT
    category: Category = Category.MISCELLANEOUS
    date: datetime
    source: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    raw_text: str = ""

    @field_validator("amount")
    @classmethod
    def amount_finite_two_places(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("amount must be finite")
        v = round(v, 2)
        if v <= 0:
            raise ValueError("amount must be at least 0.01")
        return v

    @field_validator("merchant", "source")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("date")
    @classmethod
    def date_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    @field_validator("confidence")
    @classmethod
    def confidence_rounded(cls, v: float) -> float:
        return round(v, 4)


# ---------------------------------------------------------------------------
# OCR result (input from the external engine)
# ---------------------------------------------------------------------------


class OCRExtractionResult(BaseModel):
    """Result from OCR engine: raw text and confidence."""

    text: str = ""
    confidence: float = Field(0.0, ge=0.0, le=1.0)
