"""
Position classifier.

Maps an Indonesian government job title (plus optional department or
sub-position text) to an organisational category. Precedence is an
ordered list of rules; the title pattern families are named tables so
each family can be inspected on its own.
"""

import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Pattern

from constants.organizational_levels import (
    DEPARTMENT_CONTEXT_MARKERS,
    POSITION_ABBREVIATIONS,
    STAFF_MARKERS,
    UNKNOWN_POSITION_MARKERS,
    OrganizationalCategory,
)

# Department or agency heads
ESELON_II_PATTERNS: List[Pattern] = [
    re.compile(r"\b(pelaksana tugas\.?\s*)?kepala\s+dinas\b"),
    re.compile(r"\b(pelaksana tugas\.?\s*)?kepala\s+badan\b"),
    re.compile(r"\b(pelaksana tugas\.?\s*)?kepala\s+kantor\b"),
    re.compile(r"\bsekretaris\s+dinas\b"),
    re.compile(r"\b(pelaksana tugas\.?\s*)?direktur\s+utama\b"),
    re.compile(r"\b(pelaksana tugas\.?\s*)?direktur\s+jenderal\b"),
    re.compile(r"\bkepala\s+instansi\b"),
    re.compile(r"\bkepala\s+lembaga\b"),
    re.compile(r"\bwakil\s+(kepala\s+)?(dinas|badan|kantor)\b"),
]

# Division or bureau heads
ESELON_III_PATTERNS: List[Pattern] = [
    re.compile(r"\bsekretaris\s+(dinas|badan|kantor)\b"),
    re.compile(r"\bkepala\s+bidang\b"),
    re.compile(r"\bkepala\s+divisi\b"),
    re.compile(r"\bkepala\s+bureau?\b"),
    re.compile(r"\bkepala\s+bagian\b(?!\s+(umum|keuangan|kepegawaian))"),
    re.compile(r"\bkabag\b(?!\s+(umum|keuangan|kepegawaian))"),
    re.compile(r"\bdirekt(ur|or)\b(?!\s+(utama|jenderal))"),
    re.compile(r"\bwakil\s+direktur\b"),
    re.compile(r"\binspekt(ur|or)\s+(utama|madya)\b"),
    re.compile(r"\bkabid\b"),
]

# Section or sub-division heads
ESELON_IV_PATTERNS: List[Pattern] = [
    re.compile(r"\bkepala\s+sub\s+bagian\b"),
    re.compile(r"\bkepala\s+seksi\b"),
    re.compile(r"\bkepala\s+sub\s+divisi\b"),
    re.compile(r"\bkepala\s+unit\b"),
    re.compile(r"\bkasubag\b"),
    re.compile(r"\bkasi\b"),
    re.compile(r"\bkepala\s+sub\s+bidang\b"),
    re.compile(r"\bkepala\s+bagian\s+(umum|keuangan|kepegawaian|perencanaan|pelaporan)\b"),
    re.compile(r"\bkabag\s+(umum|keuangan|kepegawaian)\b"),
    re.compile(r"\binspekt(ur|or)\s+muda\b"),
    re.compile(r"\bkepala\s+urusan\b"),
]

STAFF_PATTERNS: List[Pattern] = [
    re.compile(r"\bstaf+\b"),
    re.compile(r"\banalis\b"),
    re.compile(r"\bpelaks\b"),
    re.compile(r"\boperator\b"),
    re.compile(r"\badministrasi\b"),
    re.compile(r"\bpengadministrasi\b"),
    re.compile(r"\bfungsional\b"),
]

# Checked in order; the first family with a matching pattern wins
PATTERN_FAMILIES: Dict[OrganizationalCategory, List[Pattern]] = {
    OrganizationalCategory.ESELON_II: ESELON_II_PATTERNS,
    OrganizationalCategory.ESELON_III: ESELON_III_PATTERNS,
    OrganizationalCategory.ESELON_IV: ESELON_IV_PATTERNS,
    OrganizationalCategory.STAFF: STAFF_PATTERNS,
}

_ABBREVIATION_PATTERNS = [
    (re.compile(rf"\b{re.escape(abbrev)}\b"), full)
    for abbrev, full in POSITION_ABBREVIATIONS.items()
]


@dataclass(frozen=True)
class PositionContext:
    position: str
    sub_position: str
    normalized_position: str
    normalized_sub_position: str

    @property
    def full_context(self) -> str:
        return f"{self.normalized_position} {self.normalized_sub_position}".strip()


@dataclass(frozen=True)
class ClassificationRule:
    name: str
    predicate: Callable[[PositionContext], bool]
    result: OrganizationalCategory


def normalize_position(position: Optional[str]) -> str:
    """Lowercase, collapse whitespace and expand common title abbreviations."""
    if not position:
        return ""
    normalized = re.sub(r"\s+", " ", position.strip()).lower()
    for pattern, full in _ABBREVIATION_PATTERNS:
        normalized = pattern.sub(full, normalized)
    return normalized


def is_unknown_position(position: Optional[str]) -> bool:
    if not position:
        return False
    lowered = position.lower()
    return any(marker in lowered for marker in UNKNOWN_POSITION_MARKERS)


def is_staff_sub_position(sub_position: Optional[str]) -> bool:
    if not sub_position:
        return False
    lowered = sub_position.lower()
    return any(marker in lowered for marker in STAFF_MARKERS)


def has_department_context(normalized_sub_position: str) -> bool:
    return any(marker in normalized_sub_position for marker in DEPARTMENT_CONTEXT_MARKERS)


def matches_any_pattern(text: str, patterns: List[Pattern]) -> bool:
    return any(pattern.search(text) for pattern in patterns)


def get_patterns(category: OrganizationalCategory) -> List[Pattern]:
    """Return the title patterns of one family (empty for Other)."""
    return list(PATTERN_FAMILIES.get(category, []))


def _family_rule(category: OrganizationalCategory) -> ClassificationRule:
    patterns = PATTERN_FAMILIES[category]
    return ClassificationRule(
        name=f"{category.value.lower().replace(' ', '_')}_title",
        predicate=lambda ctx: matches_any_pattern(ctx.full_context, patterns),
        result=category,
    )


CLASSIFICATION_RULES: List[ClassificationRule] = [
    ClassificationRule(
        name="empty_position",
        predicate=lambda ctx: not ctx.normalized_position,
        result=OrganizationalCategory.OTHER,
    ),
    ClassificationRule(
        name="unknown_position",
        predicate=lambda ctx: is_unknown_position(ctx.position),
        result=OrganizationalCategory.OTHER,
    ),
    ClassificationRule(
        name="staff_sub_position",
        predicate=lambda ctx: is_staff_sub_position(ctx.sub_position),
        result=OrganizationalCategory.STAFF,
    ),
    *[_family_rule(category) for category in PATTERN_FAMILIES],
    ClassificationRule(
        name="department_context",
        predicate=lambda ctx: has_department_context(ctx.normalized_sub_position),
        result=OrganizationalCategory.STAFF,
    ),
]


def build_position_context(position: Optional[str], sub_position: Optional[str] = None) -> PositionContext:
    position = position if isinstance(position, str) else ""
    sub_position = sub_position if isinstance(sub_position, str) else ""
    return PositionContext(
        position=position,
        sub_position=sub_position,
        normalized_position=normalize_position(position),
        normalized_sub_position=normalize_position(sub_position),
    )


FALLBACK_RULE = ClassificationRule(
    name="fallback",
    predicate=lambda ctx: True,
    result=OrganizationalCategory.OTHER,
)


def classify_position(position: Optional[str], sub_position: Optional[str] = None) -> ClassificationRule:
    """Return the first rule that applies to the title, or FALLBACK_RULE."""
    context = build_position_context(position, sub_position)
    for rule in CLASSIFICATION_RULES:
        if rule.predicate(context):
            return rule
    return FALLBACK_RULE


def determine_organizational_level_from_position(
    position: Optional[str],
    sub_position: Optional[str] = None,
) -> OrganizationalCategory:
    """
    Determine the organisational category from a job title.

    Args:
        position: Job title, e.g. "Plt. Kepala Dinas Sosial"
        sub_position: Department or sub-position text

    Returns:
        The category of the first matching rule, Other when none match
    """
    return classify_position(position, sub_position).result
