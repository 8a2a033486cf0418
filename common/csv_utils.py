"""
CSV parsing utilities.

Handles the CSV, TSV and Google Sheets copy-paste formats used for
roster and performance imports, plus the score and header helpers
shared by both parsers.
"""

import math
import re
from dataclasses import dataclass
from typing import List, Optional, Union

from constants.performance_ratings import (
    LEGACY_FAIR_SCORE,
    MAX_SCORE,
    MIN_SCORE,
    NUMERIC_RATING_THRESHOLDS,
    STRING_RATING_MAP,
)

QUOTED_SPAN_PATTERN = re.compile(r'"(?:[^"]|"")*"')
MULTI_SPACE_PATTERN = re.compile(r"\s{2,}")
LEADING_NUMBER_PATTERN = re.compile(r"^\d+\s*[.]?\s*")
BRACKETED_SPAN_PATTERN = re.compile(r"\s*\[.*\]\s*")
BRACKET_CONTENT_PATTERN = re.compile(r"\[(.*?)\]")
WHITESPACE_PATTERN = re.compile(r"\s+")
NUMERIC_PATTERN = re.compile(r"^[+-]?\d+(?:[.,]\d+)?$", re.ASCII)

_LOWER_RATING_MAP = {label.lower(): value for label, value in STRING_RATING_MAP.items()}


@dataclass(frozen=True)
class DelimiterInfo:
    delimiter: str
    is_space_delimited: bool


def detect_delimiter(line: str) -> DelimiterInfo:
    """
    Auto-detect the delimiter of a single line.

    Quoted spans are ignored. Priority: tabs, then runs of two or more
    spaces (only when no comma is present), then commas.
    """
    sanitized = QUOTED_SPAN_PATTERN.sub("", line)
    comma_count = sanitized.count(",")
    tab_count = sanitized.count("\t")
    multi_space_count = len(MULTI_SPACE_PATTERN.findall(sanitized))

    if tab_count > 0:
        return DelimiterInfo(delimiter="\t", is_space_delimited=False)
    if multi_space_count > 0 and comma_count == 0:
        return DelimiterInfo(delimiter="", is_space_delimited=True)
    return DelimiterInfo(delimiter=",", is_space_delimited=False)


def parse_csv_line(line: str, drop_empty: bool = True) -> List[str]:
    """
    Split one line into trimmed fields.

    Args:
        line: Raw input line
        drop_empty: Drop fields that are empty after trimming. Positional
            parsers pass False to keep column alignment.

    Returns:
        List of field values
    """
    info = detect_delimiter(line)

    if info.is_space_delimited:
        fields = [field.strip() for field in MULTI_SPACE_PATTERN.split(line)]
        return [field for field in fields if field]

    fields = []
    current = []
    in_quotes = False
    i = 0
    while i < len(line):
        char = line[i]
        if char == '"':
            if in_quotes and i + 1 < len(line) and line[i + 1] == '"':
                current.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == info.delimiter and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1
    fields.append("".join(current).strip())

    if drop_empty:
        return [field for field in fields if field]
    return fields


def split_lines(text: str) -> List[str]:
    """Split a text blob into lines with trailing carriage returns removed."""
    return [line.rstrip("\r") for line in text.split("\n")]


def clean_competency_name(raw_name: str) -> str:
    """Strip leading numbering and the bracketed employee name from a header."""
    name = LEADING_NUMBER_PATTERN.sub("", raw_name.strip(), count=1)
    name = BRACKETED_SPAN_PATTERN.sub(" ", name, count=1)
    return WHITESPACE_PATTERN.sub(" ", name).strip()


def extract_employee_name(raw_header: str) -> Optional[str]:
    """
    Extract the employee name from a bracketed header.

    Returns None when the header has no brackets. An empty bracket
    yields an empty string.
    """
    match = BRACKET_CONTENT_PATTERN.search(raw_header)
    if not match:
        return None
    name = match.group(1).strip()
    name = re.sub(r"^\d+\.\s*", "", name)
    name = re.sub(r"^\d+\s+", "", name)
    return WHITESPACE_PATTERN.sub(" ", name).strip()


def is_string_rating(value: str) -> bool:
    trimmed = value.strip()
    return trimmed in STRING_RATING_MAP or trimmed.lower() in _LOWER_RATING_MAP


def convert_string_rating_to_score(rating: str) -> int:
    """
    Convert a rating label to its numeric score.

    Raises:
        ValueError: If the label is not a known rating
    """
    trimmed = rating.strip()
    if trimmed in STRING_RATING_MAP:
        return STRING_RATING_MAP[trimmed]
    lowered = trimmed.lower()
    if lowered in _LOWER_RATING_MAP:
        return _LOWER_RATING_MAP[lowered]
    raise ValueError(f"Invalid rating: {rating}")


def normalize_numeric_score(score: float) -> float:
    """Remap scores from the legacy form export convention."""
    if score == LEGACY_FAIR_SCORE:
        return NUMERIC_RATING_THRESHOLDS["FAIR"]
    if score == NUMERIC_RATING_THRESHOLDS["FAIR"]:
        return NUMERIC_RATING_THRESHOLDS["FAIR"]
    if score == NUMERIC_RATING_THRESHOLDS["GOOD"]:
        return NUMERIC_RATING_THRESHOLDS["GOOD"]
    if score > NUMERIC_RATING_THRESHOLDS["GOOD"]:
        return NUMERIC_RATING_THRESHOLDS["EXCELLENT"]
    return score


def _parse_number(value: str) -> Optional[float]:
    trimmed = value.strip()
    if not NUMERIC_PATTERN.match(trimmed):
        return None
    return float(trimmed.replace(",", "."))


def parse_score_value(value: Optional[str], legacy_remap: bool = False) -> Optional[float]:
    """
    Parse a score cell strictly.

    Args:
        value: Raw cell content
        legacy_remap: Apply normalize_numeric_score to numeric cells

    Returns:
        The score, or None when the cell is blank or not a score
    """
    if value is None or not value.strip():
        return None

    if is_string_rating(value):
        return float(convert_string_rating_to_score(value))

    number = _parse_number(value)
    if number is None:
        return None
    return normalize_numeric_score(number) if legacy_remap else number


def is_valid_score(score: Optional[float]) -> bool:
    return score is not None and not math.isnan(score) and MIN_SCORE <= score <= MAX_SCORE


def convert_score_to_number(raw_score: Union[str, int, float, None]) -> float:
    """
    Convert a score to a number, falling back to 0.

    Accepts numbers, numeric strings (with ',' as decimal separator) and
    rating labels. Blank or unparseable input gives 0.
    """
    if raw_score is None:
        return 0
    if isinstance(raw_score, (int, float)):
        return raw_score if math.isfinite(raw_score) else 0

    trimmed = raw_score.strip()
    if not trimmed:
        return 0

    if is_string_rating(trimmed):
        return convert_string_rating_to_score(trimmed)

    number = _parse_number(trimmed)
    return number if number is not None else 0
