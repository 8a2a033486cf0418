"""
Golongan (civil-service rank code) parsing.

Supports the formats seen in pasted rosters: "IV/a", "III-b", "II c",
"4/a", "3-b", case-insensitive and with surrounding whitespace.
"""

import re
from typing import Optional

from constants.organizational_levels import OrganizationalCategory
from schemas.employee_schemas import Golongan

GOLONGAN_PATTERN = re.compile(r"^(IV|III|II|I|4|3|2|1)[\s\-/]?([A-E])$")

LEVEL_MAP = {
    "1": "I",
    "2": "II",
    "3": "III",
    "4": "IV",
    "I": "I",
    "II": "II",
    "III": "III",
    "IV": "IV",
}

# The e-grades below IV have no official title and display as their code
GOLONGAN_DISPLAY_NAMES = {
    "I/a": "Juru Muda",
    "I/b": "Juru Muda Tingkat I",
    "I/c": "Juru",
    "I/d": "Juru Tingkat I",
    "I/e": "I/e",
    "II/a": "Pengatur Muda",
    "II/b": "Pengatur Muda Tingkat I",
    "II/c": "Pengatur",
    "II/d": "Pengatur Tingkat I",
    "II/e": "II/e",
    "III/a": "Penata Muda",
    "III/b": "Penata Muda Tingkat I",
    "III/c": "Penata",
    "III/d": "Penata Tingkat I",
    "III/e": "III/e",
    "IV/a": "Pembina",
    "IV/b": "Pembina Tingkat I",
    "IV/c": "Pembina Utama Muda",
    "IV/d": "Pembina Utama Madya",
    "IV/e": "Pembina Utama",
}

# (level, grades) -> category; anything else parseable is Staff
GOLONGAN_LEVEL_RULES = [
    ("IV", ("c", "d", "e"), OrganizationalCategory.ESELON_II),
    ("IV", ("a", "b"), OrganizationalCategory.ESELON_III),
    ("III", ("d",), OrganizationalCategory.ESELON_III),
    ("III", ("b", "c"), OrganizationalCategory.ESELON_IV),
]


def get_golongan_display_name(level: str, grade: str) -> str:
    key = f"{level}/{grade}"
    return GOLONGAN_DISPLAY_NAMES.get(key, key)


def parse_golongan(golongan: Optional[str]) -> Optional[Golongan]:
    """
    Parse a golongan string into structured data.

    Args:
        golongan: Raw golongan text, e.g. "IV/a" or "3-b"

    Returns:
        Golongan, or None when the text is not a valid code
    """
    if not golongan or not isinstance(golongan, str):
        return None

    match = GOLONGAN_PATTERN.match(golongan.strip().upper())
    if not match:
        return None

    level = LEVEL_MAP[match.group(1)]
    grade = match.group(2).lower()
    return Golongan(
        level=level,
        grade=grade,
        formatted=f"{level}/{grade}",
        display_name=get_golongan_display_name(level, grade),
    )


def is_valid_golongan(golongan: Optional[str]) -> bool:
    return parse_golongan(golongan) is not None


def format_golongan(golongan: Optional[str]) -> Optional[str]:
    parsed = parse_golongan(golongan)
    return parsed.formatted if parsed else None


def is_asn_golongan(golongan: Optional[str]) -> bool:
    """Civil servants (ASN) carry a structured golongan; non-ASN staff do not."""
    return is_valid_golongan(golongan)


def infer_level_from_golongan(golongan: Optional[str]) -> OrganizationalCategory:
    """
    Infer the organisational category suggested by a golongan.

    An unparseable golongan carries no signal and maps to Staff.
    """
    parsed = parse_golongan(golongan)
    if parsed is None:
        return OrganizationalCategory.STAFF

    for level, grades, category in GOLONGAN_LEVEL_RULES:
        if parsed.level == level and parsed.grade in grades:
            return category
    return OrganizationalCategory.STAFF
