"""Shared fixtures: a pinned clock and the reference receipts/SMS used across test modules."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

FIXED_NOW = datetime(2025, 10, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
def swiggy_receipt() -> str:
    return "Paid ₹664.70\nSwiggy\nBill Total ₹664.70\nDelivered"


@pytest.fixture
def gpay_receipt() -> str:
    return "Google Pay\nPaid to Vi Prepaid\n₹299\nCompleted\n11 Jan 2026"


@pytest.fixture
def icici_sms() -> str:
    return "INR 2664.00 spent using ICICI Bank Card XX9006 on 11-Jan-26 on AMAZON PAY"
