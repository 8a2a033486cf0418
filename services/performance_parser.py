"""
Performance CSV parser.

The header row binds each score column to a (competency, employee)
pair through cells of the form "1. Kualitas Kinerja [John Doe]". Every
data row contributes scores to those pairs; repeated observations of a
pair are averaged.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from common.csv_utils import (
    clean_competency_name,
    extract_employee_name,
    is_valid_score,
    parse_csv_line,
    parse_score_value,
    split_lines,
)
from common.exceptions import PerformanceParseError
from constants.organizational_levels import STAFF_OTHER_LABEL
from schemas.employee_schemas import CompetencyScore, Employee
from services.organizational_level_service import categorize_organizational_level

logger = logging.getLogger(__name__)

DEFAULT_ORG_LEVEL_COLUMN = 3
EMPTY_LINE_PATTERN = re.compile(r"^[,\s]*$")
ESELON_LABEL_PATTERN = re.compile(r"eselon", re.IGNORECASE)


@dataclass(frozen=True)
class CompetencyBinding:
    competency: str
    employee: str


@dataclass
class EmployeeScores:
    scores: Dict[str, List[float]] = field(default_factory=dict)
    # Level text of the first row that scored this employee; None until then
    level_text: Optional[str] = None


ScoreMap = Dict[str, EmployeeScores]
ColumnBindings = Dict[int, CompetencyBinding]


def extract_competency_employee_mappings(headers: Sequence[str]) -> Tuple[ScoreMap, ColumnBindings]:
    """
    Build the column bindings from the header cells.

    Returns:
        The empty score map keyed by employee (in header order) and the
        column index -> CompetencyBinding map
    """
    score_data: ScoreMap = {}
    bindings: ColumnBindings = {}

    for index, header in enumerate(headers):
        employee = extract_employee_name(header)
        competency = clean_competency_name(header)
        if not employee or not competency:
            continue
        entry = score_data.setdefault(employee, EmployeeScores())
        entry.scores.setdefault(competency, [])
        bindings[index] = CompetencyBinding(competency=competency, employee=employee)

    return score_data, bindings


def is_score_row(values: Sequence[str]) -> bool:
    """True when every cell is blank, numeric or a rating label."""
    return len(values) > 0 and all(
        not value.strip() or parse_score_value(value) is not None
        for value in values
    )


def extract_row_level_text(values: Sequence[str], score_row: bool, column: int = DEFAULT_ORG_LEVEL_COLUMN) -> str:
    if score_row or column >= len(values):
        return ""
    return values[column].strip()


def has_row_label(values: Sequence[str], bindings: ColumnBindings) -> bool:
    first = values[0] if values else ""
    return bool(bindings) and "[" in first and extract_employee_name(first) is not None


def process_data_row(
    values: Sequence[str],
    bindings: ColumnBindings,
    score_data: ScoreMap,
    legacy_remap: bool = False,
    org_level_column: int = DEFAULT_ORG_LEVEL_COLUMN,
) -> int:
    """
    Accumulate the scores of one data row into score_data.

    A row whose first cell is itself a bracketed header is a row label:
    columns shift right by one and the label's competency replaces the
    column competency.

    Returns:
        Number of scores accepted from the row
    """
    if not values:
        return 0

    offset = 0
    row_competency = None
    if has_row_label(values, bindings):
        offset = 1
        row_competency = clean_competency_name(values[0]) or None

    score_row = is_score_row(values[offset:])
    row_level = extract_row_level_text(values, score_row, org_level_column)

    accepted = 0
    for index, binding in bindings.items():
        value_index = index + offset
        if value_index >= len(values):
            continue
        score = parse_score_value(values[value_index], legacy_remap=legacy_remap)
        if score is None or not is_valid_score(score):
            continue

        entry = score_data.setdefault(binding.employee, EmployeeScores())
        entry.scores.setdefault(row_competency or binding.competency, []).append(score)
        if entry.level_text is None:
            entry.level_text = row_level
        accepted += 1
    return accepted


def calculate_competency_averages(scores: Mapping[str, Sequence[float]]) -> List[CompetencyScore]:
    return [
        CompetencyScore(name=competency, score=round(sum(values) / len(values), 2))
        for competency, values in scores.items()
        if values
    ]


def resolve_level_label(
    employee: str,
    dynamic_mapping: Optional[Mapping[str, str]] = None,
    stored_mapping: Optional[Mapping[str, str]] = None,
    row_level: Optional[str] = None,
) -> str:
    """
    Pick an employee's level label from the available sources.

    Candidates are the in-session mapping, the stored mapping and the
    row level text, in that order. A label mentioning "eselon" beats
    every other candidate.
    """
    candidates = [
        candidate.strip()
        for candidate in (
            (dynamic_mapping or {}).get(employee),
            (stored_mapping or {}).get(employee),
            row_level,
        )
        if candidate and candidate.strip()
    ]
    for candidate in candidates:
        if ESELON_LABEL_PATTERN.search(candidate):
            return candidate
    return candidates[0] if candidates else STAFF_OTHER_LABEL


def _data_lines(text) -> List[str]:
    if not isinstance(text, str):
        raise PerformanceParseError(f"Performance data must be text, got {type(text).__name__}")
    return [line for line in split_lines(text) if line.strip() and not EMPTY_LINE_PATTERN.match(line)]


def parse_performance_data(
    text: str,
    dynamic_mapping: Optional[Mapping[str, str]] = None,
    stored_mapping: Optional[Mapping[str, str]] = None,
    legacy_remap: bool = False,
    org_level_column: int = DEFAULT_ORG_LEVEL_COLUMN,
) -> List[Employee]:
    """
    Parse a performance blob into per-employee averaged competency scores.

    Args:
        text: Raw CSV/TSV text with a bracketed header row
        dynamic_mapping: In-session employee name -> level label
        stored_mapping: Persisted employee name -> level label
        legacy_remap: Apply the legacy numeric score remap
        org_level_column: Index of the free-text level column in data rows

    Returns:
        One Employee per name with at least one valid score, in header order

    Raises:
        PerformanceParseError: If text is not a string, has no data rows or
            no header cell binds a competency to an employee
    """
    lines = _data_lines(text)
    if len(lines) < 2:
        raise PerformanceParseError("Data must have a header row and at least one data row.")

    headers = parse_csv_line(lines[0], drop_empty=False)
    score_data, bindings = extract_competency_employee_mappings(headers)
    if not bindings:
        raise PerformanceParseError(
            "No competency columns found. Headers must use the 'Competency [Employee Name]' format."
        )

    skipped_rows = 0
    for line in lines[1:]:
        values = parse_csv_line(line, drop_empty=False)
        if not process_data_row(values, bindings, score_data, legacy_remap, org_level_column):
            skipped_rows += 1
    if skipped_rows:
        logger.debug(f"{skipped_rows} performance rows contributed no scores")

    employees = []
    for name, entry in score_data.items():
        performance = calculate_competency_averages(entry.scores)
        if not performance:
            continue
        label = resolve_level_label(name, dynamic_mapping, stored_mapping, entry.level_text)
        employees.append(Employee(
            name=name,
            organizational_level=categorize_organizational_level(label),
            organizational_level_label=label,
            performance=performance,
        ))

    logger.info(f"Parsed performance data for {len(employees)} of {len(score_data)} employees")
    return employees
