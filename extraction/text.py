"""Small text helpers shared by classifier and extractors."""
from __future__ import annotations

import re
from typing import Iterable

_TITLE_WORD = re.compile(r"\w\S*")

# A single-word label preceded by one of these belongs to a compound label ("item total").
LABEL_QUALIFIERS: tuple[str, ...] = ("item", "items", "sub", "cart")

# Keywords this short only match as whole words ("ola" must not hit "cola").
SHORT_KEYWORD_LEN = 3


def title_case(s: str) -> str:
    """Upper-case the first character of each word, lower-case the rest."""
    return _TITLE_WORD.sub(lambda m: m.group(0)[0].upper() + m.group(0)[1:].lower(), s.strip())


def has_any(text: str, words: Iterable[str]) -> bool:
    """True if any of words is a substring of text."""
    return any(w in text for w in words)


def keyword_in(text: str, keyword: str) -> bool:
    """Substring match, or whole-word match for short keywords."""
    keyword = keyword.strip()
    if not keyword:
        return False
    if len(keyword) <= SHORT_KEYWORD_LEN:
        return re.search(r"\b" + re.escape(keyword) + r"\b", text) is not None
    return keyword in text


def noise_keyword_in(line: str, keyword: str) -> bool:
    """
    Noise keyword on a line. Short keywords must end a word, so "tip" skips "multiple"
    and "tax" skips "taxi" while "gst" still hits "cgst".
    """
    keyword = keyword.strip()
    if not keyword:
        return False
    if len(keyword) <= SHORT_KEYWORD_LEN:
        return re.search(re.escape(keyword) + r"\b", line) is not None
    return keyword in line


def first_keyword_match(text: str, table: Iterable[tuple[tuple[str, ...], str]]) -> str | None:
    """Walk an ordered (keywords, value) table; return the value of the first row with a hit."""
    for keywords, value in table:
        if any(keyword_in(text, k) for k in keywords):
            return value
    return None


def line_has_label(line: str, label: str) -> bool:
    """
    Multi-word labels match as substrings. Single-word labels need word boundaries
    and must not be the tail of a compound label ("item total" is not "total").
    """
    label = label.lower()
    line = line.lower()
    if " " in label:
        return label in line
    for m in re.finditer(r"\b" + re.escape(label) + r"\b", line):
        before = line[: m.start()].split()
        if before and before[-1].strip(":-") in LABEL_QUALIFIERS:
            continue
        return True
    return False
