"""
Text normalizer: canonical currency glyph, whitespace cleanup, narrow OCR character fixes.
normalize() is idempotent.
"""
from __future__ import annotations

import re

# Rupee markers: ₹, ₨, Rs, Rs., INR (whole tokens only, so "hours" / "orders" survive)
_CURRENCY = re.compile(
    r"(?:[₹₨]|(?<![A-Za-z])(?:rs\.?|inr)(?![A-Za-z]))[^\S\n]*",
    re.IGNORECASE,
)
_HSPACE = re.compile(r"[^\S\n]+")
_BAR = re.compile(r"\|+")
# Tokens made only of digits, O/o and separators, holding at least one digit
_DIGIT_O_TOKEN = re.compile(r"(?<![A-Za-z0-9])[0-9Oo.,]*[0-9][0-9Oo.,]*(?![A-Za-z0-9])")


def _fix_bar(text: str) -> str:
    """
    Runs of '|' -> 'I' when no neighbour of the run is a digit and at least one is a letter.
    The whole run is decided at once, so "I||" becomes "III" in a single pass.
    """

    def repl(m: re.Match) -> str:
        start, end = m.start(), m.end()
        before = text[start - 1] if start > 0 else ""
        after = text[end] if end < len(text) else ""
        if before.isdigit() or after.isdigit():
            return m.group(0)
        if before.isalpha() or after.isalpha():
            return "I" * (end - start)
        return m.group(0)

    return _BAR.sub(repl, text)


def _fix_letter_o(text: str) -> str:
    """'5OO' -> '500', '1O.5O' -> '10.50'. Tokens with other letters are left alone."""

    def repl(m: re.Match) -> str:
        token = m.group(0)
        if "O" not in token and "o" not in token:
            return token
        return token.replace("O", "0").replace("o", "0")

    return _DIGIT_O_TOKEN.sub(repl, text)


def normalize(raw: str) -> str:
    """Canonicalize raw OCR text. Newlines are preserved for line-based extraction."""
    if not raw:
        return ""
    text = raw.replace("\r\n", "\n").replace("\r", "\n")
    text = _fix_bar(text)
    text = _CURRENCY.sub("₹", text)
    text = _fix_letter_o(text)
    text = _HSPACE.sub(" ", text)
    return "\n".join(line.strip() for line in text.split("\n")).strip()


def split_lines(text: str) -> list[str]:
    """Split text into non-empty trimmed lines."""
    return [line.strip() for line in text.split("\n") if line.strip()]
