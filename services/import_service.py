"""
Import Service

Orchestrates roster and performance imports: parsing, validation,
storage and level lookups.
"""

import logging
from typing import Mapping, Optional

from common.exceptions import RosterParseError
from schemas.import_schemas import (
    DataTypeDetection,
    PerformanceImportResponse,
    RosterImportResponse,
    RosterPreviewResponse,
)
from services.employee_store import EmployeeLevelProvider, EmployeeRepository
from services.organizational_level_service import resolve_organizational_level
from services.performance_parser import parse_performance_data
from services.roster_parser import (
    HEADER_KEYWORDS,
    extract_roster_rows,
    records_from_rows,
    validate_employee_data,
)
from settings.config import Settings, get_settings

logger = logging.getLogger(__name__)

ROSTER_KEYWORD_MINIMUM = 3


def detect_data_type(text: str) -> DataTypeDetection:
    """
    Guess whether a blob is a roster or performance data from its first line.

    Three or more roster column keywords mean a roster; bracketed names
    mean performance data; anything else defaults to performance data
    with low confidence.
    """
    lines = [line for line in text.strip().split("\n") if len(line.strip()) > 1]
    if not lines:
        return DataTypeDetection(type="performance_data", confidence=0.1)

    header = lines[0].lower()
    found = [keyword for keyword in HEADER_KEYWORDS if keyword in header]
    if len(found) >= ROSTER_KEYWORD_MINIMUM:
        return DataTypeDetection(
            type="employee_roster",
            confidence=max(0.8, len(found) / len(HEADER_KEYWORDS)),
        )
    if "[" in header and "]" in header:
        return DataTypeDetection(type="performance_data", confidence=0.9)
    return DataTypeDetection(type="performance_data", confidence=0.5)


def preview_roster_import(text: str) -> RosterPreviewResponse:
    """Parse and validate a roster without storing it."""
    rows = extract_roster_rows(text)
    records = records_from_rows(rows)
    warnings = []
    for record in records:
        resolution = resolve_organizational_level(
            record.position, record.sub_position, record.gol, log_warnings=False
        )
        if resolution.warning:
            warnings.append(resolution.warning)

    return RosterPreviewResponse(
        employees=records,
        validation=validate_employee_data(rows),
        warnings=warnings,
    )


def commit_roster_import(
    repository: EmployeeRepository,
    text: str,
    replace_existing: bool = False,
) -> RosterImportResponse:
    """
    Parse a roster and store its employees.

    Raises:
        RosterParseError: If no line yields an employee
    """
    rows = extract_roster_rows(text)
    records = records_from_rows(rows)
    if not records:
        raise RosterParseError("Tidak ada data pegawai yang valid untuk diimpor")

    imported = repository.save_employees(records, replace_existing=replace_existing)
    return RosterImportResponse(
        imported=imported,
        skipped=len(rows) - len(records),
        total_stored=repository.count(),
    )


def import_performance_data(
    text: str,
    level_provider: Optional[EmployeeLevelProvider] = None,
    dynamic_mapping: Optional[Mapping[str, str]] = None,
    settings: Optional[Settings] = None,
) -> PerformanceImportResponse:
    """
    Parse performance data using stored and in-session level mappings.

    Employees found in neither mapping are reported as unknown so the
    caller can ask for their level.
    """
    settings = settings or get_settings()
    dynamic_mapping = dynamic_mapping or {}
    stored_mapping = level_provider.get_org_level_mapping() if level_provider else {}

    employees = parse_performance_data(
        text,
        dynamic_mapping=dynamic_mapping,
        stored_mapping=stored_mapping,
        legacy_remap=settings.legacy_score_remap,
        org_level_column=settings.performance_org_level_column,
    )
    unknown = [
        employee.name for employee in employees
        if employee.name not in dynamic_mapping and employee.name not in stored_mapping
    ]
    if unknown:
        logger.info(f"{len(unknown)} employees have no known organisational level")
    return PerformanceImportResponse(employees=employees, unknown_employees=unknown)
