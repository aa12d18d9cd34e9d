"""
Unit tests for receipt and bank-SMS date parsing.
"""
from __future__ import annotations

from datetime import datetime, timezone

import pytest

from extraction.dates import parse_receipt_date, parse_sms_date, strip_dates

UTC = timezone.utc


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Completed\n11 Jan 2026", datetime(2026, 1, 11, tzinfo=UTC)),
        ("30 August 2025, 8:47 pm", datetime(2025, 8, 30, 20, 47, tzinfo=UTC)),
        ("Jan 11, 2026", datetime(2026, 1, 11, tzinfo=UTC)),
        ("paid on 2026-01-11", datetime(2026, 1, 11, tzinfo=UTC)),
        ("11/01/2026", datetime(2026, 1, 11, tzinfo=UTC)),
    ],
)
def test_receipt_date_shapes(text: str, expected: datetime) -> None:
    assert parse_receipt_date(text) == expected


def test_receipt_date_invalid_calendar_day() -> None:
    assert parse_receipt_date("31/02/2026") is None


def test_receipt_date_absent() -> None:
    assert parse_receipt_date("no date here") is None


def test_sms_date_fragments(fixed_now: datetime) -> None:
    assert parse_sms_date("11-Jan-26", fixed_now) == datetime(2026, 1, 11, tzinfo=UTC)
    assert parse_sms_date("13-01-2026", fixed_now) == datetime(2026, 1, 13, tzinfo=UTC)


def test_sms_day_month_uses_current_year(fixed_now: datetime) -> None:
    assert parse_sms_date("07-09", fixed_now) == datetime(fixed_now.year, 9, 7, tzinfo=UTC)


def test_sms_date_unrecognised(fixed_now: datetime) -> None:
    assert parse_sms_date("garbage", fixed_now) is None
    assert parse_sms_date("", fixed_now) is None


def test_strip_dates_blanks_date_digits() -> None:
    stripped = strip_dates("paid 11 jan 2026 ₹299")
    assert "2026" not in stripped
    assert "₹299" in stripped
