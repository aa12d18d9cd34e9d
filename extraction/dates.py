"""
Date parsing for receipts and bank SMS.
All results are UTC datetimes; receipts rarely carry a zone and the calendar day is what matters.
"""
from __future__ import annotations

import logging
import re
from datetime import datetime, timezone

logger = logging.getLogger(__name__)

MONTHS = ("jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec")
_MON = r"(jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)[a-z]*\.?"

# "11 Jan 2026", "30 August 2025, 8:47 pm"
DAY_MON_YEAR = re.compile(
    r"\b(\d{1,2})(?:st|nd|rd|th)?\s+" + _MON + r",?\s+(\d{4})\b"
    r"(?:,?\s*(?:at\s+)?(\d{1,2}):(\d{2})\s*(am|pm)?)?",
    re.IGNORECASE,
)
# "Jan 11, 2026", "Nov 14th 2024"
MON_DAY_YEAR = re.compile(
    r"\b" + _MON + r"\s+(\d{1,2})(?:st|nd|rd|th)?,?\s+(\d{4})\b",
    re.IGNORECASE,
)
# "2026-01-11", "2026/01/11"
ISO_DATE = re.compile(r"\b(\d{4})[-/](\d{1,2})[-/](\d{1,2})\b")
# "11-Jan-26", "11/Jan/2026"
DAY_MON_YEAR_SHORT = re.compile(
    r"\b(\d{1,2})[-/]" + r"(jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)[a-z]*" + r"[-/](\d{2,4})\b",
    re.IGNORECASE,
)
# "11/01/2026", "11-01-26", "11.01.2026" (day first, Indian order)
NUMERIC_DMY = re.compile(r"\b(\d{1,2})[-/.](\d{1,2})[-/.](\d{2,4})\b")
# "07-09" (day-month, no year)
NUMERIC_DM = re.compile(r"\b(\d{1,2})[-/](\d{1,2})\b")

DATE_SHAPES: tuple[re.Pattern[str], ...] = (
    DAY_MON_YEAR,
    MON_DAY_YEAR,
    ISO_DATE,
    DAY_MON_YEAR_SHORT,
    NUMERIC_DMY,
)


def _month_index(name: str) -> int | None:
    key = name[:3].lower()
    return MONTHS.index(key) + 1 if key in MONTHS else None


def _full_year(year: int) -> int:
    return year + 2000 if year < 100 else year


def _build(year: int, month: int | None, day: int, hour: int = 0, minute: int = 0) -> datetime | None:
    if month is None:
        return None
    try:
        return datetime(_full_year(year), month, day, hour, minute, tzinfo=timezone.utc)
    except ValueError:
        return None


def _clock(hour: str | None, minute: str | None, meridiem: str | None) -> tuple[int, int]:
    if hour is None or minute is None:
        return 0, 0
    h, m = int(hour), int(minute)
    if meridiem:
        meridiem = meridiem.lower()
        if meridiem == "pm" and h < 12:
            h += 12
        elif meridiem == "am" and h == 12:
            h = 0
    if not (0 <= h < 24 and 0 <= m < 60):
        return 0, 0
    return h, m


def date_spans(text: str) -> list[tuple[int, int]]:
    """Character spans of every date-shaped substring in text."""
    spans: list[tuple[int, int]] = []
    for pattern in DATE_SHAPES:
        spans.extend(m.span() for m in pattern.finditer(text))
    return sorted(spans)


def in_date_span(spans: list[tuple[int, int]], start: int, end: int) -> bool:
    return any(s <= start and end <= e for s, e in spans)


def strip_dates(line: str) -> str:
    """Blank out date-shaped substrings so their digits cannot become amounts."""
    for pattern in DATE_SHAPES:
        line = pattern.sub(" ", line)
    return line


def parse_receipt_date(text: str) -> datetime | None:
    """
    Find the first date on a receipt. Priority: day-month-year (with optional time),
    month-day-year, ISO, day-mon-yy, numeric day/month/year.
    """
    m = DAY_MON_YEAR.search(text)
    if m:
        hour, minute = _clock(m.group(4), m.group(5), m.group(6))
        dt = _build(int(m.group(3)), _month_index(m.group(2)), int(m.group(1)), hour, minute)
        if dt:
            return dt
    m = MON_DAY_YEAR.search(text)
    if m:
        dt = _build(int(m.group(3)), _month_index(m.group(1)), int(m.group(2)))
        if dt:
            return dt
    m = ISO_DATE.search(text)
    if m:
        dt = _build(int(m.group(1)), int(m.group(2)), int(m.group(3)))
        if dt:
            return dt
    m = DAY_MON_YEAR_SHORT.search(text)
    if m:
        dt = _build(int(m.group(3)), _month_index(m.group(2)), int(m.group(1)))
        if dt:
            return dt
    for m in NUMERIC_DMY.finditer(text):
        dt = _build(int(m.group(3)), int(m.group(2)), int(m.group(1)))
        if dt:
            return dt
    return None


def parse_sms_date(value: str, now: datetime) -> datetime | None:
    """
    Parse a date fragment captured from a bank SMS: DD-Mon-YY(YY), DD-MM-YY(YY),
    or DD-MM (current year taken from now).
    """
    if not value:
        return None
    value = value.strip()
    m = DAY_MON_YEAR_SHORT.search(value)
    if m:
        return _build(int(m.group(3)), _month_index(m.group(2)), int(m.group(1)))
    m = NUMERIC_DMY.search(value)
    if m:
        return _build(int(m.group(3)), int(m.group(2)), int(m.group(1)))
    m = re.search(r"(\d{1,2})[-/](\d{1,2})$", value)
    if m:
        return _build(now.year, int(m.group(2)), int(m.group(1)))
    logger.debug("Unrecognised SMS date fragment: %r", value)
    return None
