"""
Organizational Level Service

Resolves an employee's organisational category from three weakly
correlated signals: the explicit position title, the golongan code and
the free-text sub-position. Disagreements between golongan and
position are reported as DataInconsistencyWarning and logged, never
raised.
"""

import logging
import re
from collections import OrderedDict
from dataclasses import dataclass
from difflib import SequenceMatcher
from typing import Any, Callable, Dict, Iterable, List, Optional

from common.golongan import infer_level_from_golongan, is_asn_golongan
from constants.organizational_levels import (
    HIGH_SEVERITY_THRESHOLD,
    INCONSISTENCY_THRESHOLD,
    LEVEL_ABBREVIATIONS,
    MAX_SUGGESTIONS,
    ORGANIZATIONAL_LEVELS,
    STAFF_ASN_PREFIX,
    STAFF_DEPARTMENTS,
    STAFF_MARKERS,
    STAFF_NON_ASN_PREFIX,
    SUGGESTION_SIMILARITY_THRESHOLD,
    OrganizationalCategory,
    PositionType,
    WarningSeverity,
)
from schemas.employee_schemas import (
    DataInconsistencyWarning,
    LevelResolution,
    LevelValidation,
    OrganizationalSummary,
)
from services.position_classifier import (
    determine_organizational_level_from_position,
    is_unknown_position,
    normalize_position,
)

logger = logging.getLogger(__name__)

ESELON_LABEL_PATTERNS = [
    (re.compile(r"\b(eselon|echelon|es|esl)\s*(ii|2)\b"), OrganizationalCategory.ESELON_II),
    (re.compile(r"\b(eselon|echelon|es|esl)\s*(iii|3)\b"), OrganizationalCategory.ESELON_III),
    (re.compile(r"\b(eselon|echelon|es|esl)\s*(iv|4)\b"), OrganizationalCategory.ESELON_IV),
]

LEADERSHIP_PATTERNS = [
    re.compile(r"\bkepala\b"),
    re.compile(r"\bmanager\b"),
    re.compile(r"\bdirekt(ur|or)\b"),
    re.compile(r"\bkabag\b"),
    re.compile(r"\bkasubag\b"),
    re.compile(r"\bpimpinan\b"),
    re.compile(r"\bkoordinator\b"),
    re.compile(r"\bsupervisor\b"),
    re.compile(r"\bpenanggung jawab\b"),
    re.compile(r"\bpelaksana tugas\b"),
    re.compile(r"\bpelaksana harian\b"),
    re.compile(r"\bwakil\b.*\b(kepala|direktur|manager)\b"),
    re.compile(r"\bassisten\b.*\b(direktur|manager)\b"),
]

SEVERITY_LOG_LEVELS = {
    WarningSeverity.HIGH: logging.ERROR,
    WarningSeverity.MEDIUM: logging.WARNING,
    WarningSeverity.LOW: logging.INFO,
}


def normalize_organizational_level(level: Optional[str]) -> str:
    """Collapse whitespace and expand whole-label abbreviations."""
    if not level:
        return ""
    normalized = re.sub(r"\s+", " ", level.strip())
    return LEVEL_ABBREVIATIONS.get(normalized.lower(), normalized)


def _find_exact_level(normalized: str) -> Optional[str]:
    lowered = normalized.lower()
    for label in ORGANIZATIONAL_LEVELS:
        if label.lower() == lowered:
            return label
    return None


def match_eselon_label(text: str) -> Optional[OrganizationalCategory]:
    """Recognise explicit labels such as 'Eselon III', 'Es 2' or 'Echelon IV'."""
    lowered = text.lower()
    for pattern, category in ESELON_LABEL_PATTERNS:
        if pattern.search(lowered):
            return category
    return None


def determine_position_inference(
    level: Optional[str],
    sub_position: Optional[str] = None,
) -> OrganizationalCategory:
    """
    Infer a category from position text.

    The text may be a known organisational level label ("Staff ASN
    Sekretariat"), an explicit eselon label ("Es III") or a job title,
    which is handed to the position classifier.
    """
    if not level or not isinstance(level, str):
        return OrganizationalCategory.OTHER

    normalized = normalize_organizational_level(level)
    if not normalized:
        return OrganizationalCategory.OTHER

    exact = _find_exact_level(normalized)
    if exact:
        return match_eselon_label(exact) or OrganizationalCategory.STAFF

    eselon = match_eselon_label(normalized)
    if eselon:
        return eselon

    return determine_organizational_level_from_position(level, sub_position)


def check_data_consistency(
    golongan_level: OrganizationalCategory,
    position_level: OrganizationalCategory,
    golongan: str,
) -> Optional[DataInconsistencyWarning]:
    """
    Compare golongan and position inferences.

    Returns:
        A warning when the golongan outranks the position by two or more
        hierarchy steps, otherwise None
    """
    difference = golongan_level.rank - position_level.rank
    if difference < INCONSISTENCY_THRESHOLD:
        return None

    if difference >= HIGH_SEVERITY_THRESHOLD:
        severity = WarningSeverity.HIGH
    elif difference == INCONSISTENCY_THRESHOLD:
        severity = WarningSeverity.MEDIUM
    else:
        severity = WarningSeverity.LOW

    return DataInconsistencyWarning(
        message=(
            f"Golongan {golongan} suggests {golongan_level.value} level, but position "
            f"indicates {position_level.value}. This may indicate a data inconsistency "
            f"or recent promotion/demotion."
        ),
        golongan=golongan,
        position_level=position_level,
        golongan_suggested_level=golongan_level,
        severity=severity,
    )


def log_data_inconsistency_warning(warning: DataInconsistencyWarning) -> None:
    logger.log(
        SEVERITY_LOG_LEVELS[warning.severity],
        f"[Data Inconsistency - {warning.severity.value.upper()}] {warning.message}",
    )


def validate_organizational_data_consistency(
    level: Optional[str],
    golongan: Optional[str],
    sub_position: Optional[str] = None,
) -> Optional[DataInconsistencyWarning]:
    """Check golongan against position without logging or resolving."""
    if not golongan or not level:
        return None
    if not normalize_organizational_level(level):
        return None
    return check_data_consistency(
        infer_level_from_golongan(golongan),
        determine_position_inference(level, sub_position),
        golongan,
    )


@dataclass(frozen=True)
class _ResolutionInputs:
    position: Optional[str]
    position_inference: OrganizationalCategory
    golongan_inference: Optional[OrganizationalCategory]


@dataclass(frozen=True)
class ResolutionRule:
    name: str
    predicate: Callable[[_ResolutionInputs], bool]
    result: Callable[[_ResolutionInputs], OrganizationalCategory]


# Evaluated in order; position dominates, golongan breaks ties for unclear titles
RESOLUTION_RULES: List[ResolutionRule] = [
    ResolutionRule(
        name="unknown_position",
        predicate=lambda r: is_unknown_position(r.position),
        result=lambda r: OrganizationalCategory.OTHER,
    ),
    ResolutionRule(
        name="position",
        predicate=lambda r: r.position_inference != OrganizationalCategory.OTHER,
        result=lambda r: r.position_inference,
    ),
    ResolutionRule(
        name="golongan",
        predicate=lambda r: r.golongan_inference is not None,
        result=lambda r: r.golongan_inference,
    ),
    ResolutionRule(
        name="fallback",
        predicate=lambda r: True,
        result=lambda r: OrganizationalCategory.OTHER,
    ),
]


def resolve_organizational_level(
    position: Optional[str],
    sub_position: Optional[str] = None,
    golongan: Optional[str] = None,
    log_warnings: bool = True,
) -> LevelResolution:
    """
    Resolve an employee's organisational category.

    Args:
        position: Job title or organisational level label
        sub_position: Department or sub-position text
        golongan: Golongan code, used as tie-breaker
        log_warnings: Log inconsistency warnings at their severity level

    Returns:
        LevelResolution with the category, both inferences, the rule
        that decided and any inconsistency warning
    """
    position_text = position if isinstance(position, str) else None
    golongan_text = golongan.strip() if isinstance(golongan, str) and golongan.strip() else None

    if is_unknown_position(position_text):
        return LevelResolution(
            category=OrganizationalCategory.OTHER,
            position_inference=OrganizationalCategory.OTHER,
            rule="unknown_position",
        )

    inputs = _ResolutionInputs(
        position=position_text,
        position_inference=determine_position_inference(position_text, sub_position),
        golongan_inference=infer_level_from_golongan(golongan_text) if golongan_text else None,
    )

    warning = None
    if inputs.golongan_inference is not None:
        warning = check_data_consistency(inputs.golongan_inference, inputs.position_inference, golongan_text)
        if warning and log_warnings:
            log_data_inconsistency_warning(warning)

    rule = next(rule for rule in RESOLUTION_RULES if rule.predicate(inputs))
    return LevelResolution(
        category=rule.result(inputs),
        position_inference=inputs.position_inference,
        golongan_inference=inputs.golongan_inference,
        rule=rule.name,
        warning=warning,
    )


def categorize_organizational_level(
    level: Optional[str],
    golongan: Optional[str] = None,
    sub_position: Optional[str] = None,
) -> OrganizationalCategory:
    """Return only the category of resolve_organizational_level."""
    return resolve_organizational_level(level, sub_position, golongan).category


def is_eselon_level(level: Optional[str]) -> bool:
    return categorize_organizational_level(level).is_eselon


def is_staff_level(level: Optional[str]) -> bool:
    return categorize_organizational_level(level) == OrganizationalCategory.STAFF


def get_position_type(organizational_level: Optional[str], position: Optional[str] = None) -> PositionType:
    """
    Position type for performance weighting.

    Eselon categories map to ESELON; otherwise leadership words in the
    position title (legacy data) also count as ESELON.
    """
    if categorize_organizational_level(organizational_level).is_eselon:
        return PositionType.ESELON

    normalized = normalize_position(position or "")
    if any(pattern.search(normalized) for pattern in LEADERSHIP_PATTERNS):
        return PositionType.ESELON
    return PositionType.STAFF


def get_position_type_by_level(level: Optional[str]) -> PositionType:
    return PositionType.ESELON if is_eselon_level(level) else PositionType.STAFF


def simplify_organizational_level(level: Optional[str], golongan: Optional[str] = None) -> str:
    """Collapse a level to 'Eselon' or 'Staff'."""
    lowered = normalize_organizational_level(level).lower()
    if "eselon" in lowered:
        return "Eselon"
    if any(marker in lowered for marker in STAFF_MARKERS):
        return "Staff"
    if golongan and infer_level_from_golongan(golongan).is_eselon:
        return "Eselon"
    return "Staff"


def is_valid_organizational_level(level: Optional[str]) -> bool:
    if not level:
        return False
    return level in ORGANIZATIONAL_LEVELS or _find_exact_level(normalize_organizational_level(level)) is not None


def _is_asn_status_match(input_text: str, level_text: str) -> bool:
    level_is_non_asn = "non asn" in level_text
    if "non asn" in input_text:
        return level_is_non_asn
    return "asn" in level_text and not level_is_non_asn


def match_organizational_level_from_sub_position(sub_position: Optional[str]) -> Optional[str]:
    """Match a sub-position directly against the known detailed level labels."""
    if not sub_position or not isinstance(sub_position, str):
        return None

    normalized = normalize_organizational_level(sub_position)
    if not normalized:
        return None

    exact = _find_exact_level(normalized)
    if exact:
        return exact

    lowered = normalized.lower()
    if not any(marker in lowered for marker in STAFF_MARKERS):
        return None

    for label in ORGANIZATIONAL_LEVELS:
        label_lower = label.lower()
        if "staff" not in label_lower:
            continue
        for keywords, _ in STAFF_DEPARTMENTS:
            keyword = keywords[0]
            if keyword in lowered and keyword in label_lower:
                if _is_asn_status_match(lowered, label_lower):
                    return label
                break
    return None


def determine_staff_position(position: str, sub_position: str, golongan: Optional[str]) -> str:
    """Detailed staff label, e.g. 'Staff Non ASN Bidang Hukum'."""
    prefix = STAFF_ASN_PREFIX if is_asn_golongan(golongan) else STAFF_NON_ASN_PREFIX
    text = f"{position or ''} {sub_position or ''}".lower()
    for keywords, unit in STAFF_DEPARTMENTS:
        if any(keyword in text for keyword in keywords):
            return f"{prefix} {unit}"
    return f"{prefix} Sekretariat"


def determine_employee_position(position: str, sub_position: str, golongan: Optional[str]) -> str:
    """
    Detailed organisational label for a roster employee.

    Returns the eselon category name for leaders, 'Other' for unknown
    positions and a detailed staff label for everyone else.
    """
    category = resolve_organizational_level(position, sub_position, golongan, log_warnings=False).category
    if category.is_eselon or category == OrganizationalCategory.OTHER:
        return category.value
    return determine_staff_position(position, sub_position, golongan)


def _level_of(employee: Any) -> Optional[str]:
    if isinstance(employee, dict):
        level = employee.get("organizational_level")
    else:
        level = getattr(employee, "organizational_level", None)
    if isinstance(level, OrganizationalCategory):
        return level.value
    return level


def group_employees_by_organizational_level(employees: Iterable[Any]) -> Dict[str, List[Any]]:
    """Group employees (objects or dicts) by organisational category."""
    grouped: Dict[str, List[Any]] = OrderedDict(
        (category.value, []) for category in OrganizationalCategory
    )
    for employee in employees:
        category = categorize_organizational_level(_level_of(employee))
        grouped[category.value].append(employee)
    return grouped


def count_employees_by_organizational_level(employees: Iterable[Any]) -> Dict[str, int]:
    grouped = group_employees_by_organizational_level(employees)
    return {key: len(members) for key, members in grouped.items()}


def get_organizational_summary(employees: Iterable[Any]) -> OrganizationalSummary:
    summary = OrganizationalSummary()
    for employee in employees:
        level = _level_of(employee)
        category = categorize_organizational_level(level)
        summary.total_count += 1
        if category.is_eselon:
            summary.eselon_count += 1
        elif category == OrganizationalCategory.STAFF:
            if "non asn" in (level or "").lower():
                summary.non_asn_staff_count += 1
            else:
                summary.asn_staff_count += 1
        else:
            summary.other_count += 1
    return summary


def validate_organizational_level(level: Optional[str]) -> LevelValidation:
    """Validate a level label and suggest close known labels when invalid."""
    if not level or not isinstance(level, str):
        return LevelValidation(
            is_valid=False,
            normalized="",
            category=OrganizationalCategory.OTHER,
            suggestions=ORGANIZATIONAL_LEVELS[:5],
        )

    normalized = normalize_organizational_level(level)
    is_valid = is_valid_organizational_level(level)
    suggestions = []
    if not is_valid:
        suggestions = [
            label for label in ORGANIZATIONAL_LEVELS
            if SequenceMatcher(None, normalized.lower(), label.lower()).ratio() > SUGGESTION_SIMILARITY_THRESHOLD
        ][:MAX_SUGGESTIONS]

    return LevelValidation(
        is_valid=is_valid,
        normalized=normalized,
        category=categorize_organizational_level(level),
        suggestions=suggestions,
    )
