"""
Import API Router

Endpoints for roster and performance imports, organisational level
resolution and stored employee lookups.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from common.exceptions import ImportParseError
from common.golongan import parse_golongan
from schemas.employee_schemas import Golongan, LevelResolution, LevelValidation
from schemas.import_schemas import (
    DataTypeDetection,
    DetectDataTypeRequest,
    EmployeeListResponse,
    OrgLevelMappingResponse,
    PerformanceImportRequest,
    PerformanceImportResponse,
    ResolveLevelRequest,
    RosterImportRequest,
    RosterImportResponse,
    RosterPreviewRequest,
    RosterPreviewResponse,
)
from services.employee_store import EmployeeRepository
from services.import_service import (
    commit_roster_import,
    detect_data_type,
    import_performance_data,
    preview_roster_import,
)
from services.organizational_level_service import (
    categorize_organizational_level,
    count_employees_by_organizational_level,
    resolve_organizational_level,
    validate_organizational_level,
)
from settings.config import get_settings
from settings.database import get_db

logger = logging.getLogger(__name__)

import_router = APIRouter(tags=["Import"])


def parse_error(exc: ImportParseError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={
            "error": "PARSE_ERROR",
            "message": exc.message,
            "recoverable": True
        }
    )


def ensure_within_line_limit(text: str) -> None:
    max_lines = get_settings().max_import_lines
    line_count = text.count("\n") + 1
    if line_count > max_lines:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail={
                "error": "IMPORT_TOO_LARGE",
                "message": f"Import has {line_count} lines; the limit is {max_lines}",
                "recoverable": True
            }
        )


# ==================== Imports ====================

@import_router.post("/import/detect", response_model=DataTypeDetection)
def detect_import_type(request: DetectDataTypeRequest):
    """Guess whether pasted text is a roster or performance data."""
    ensure_within_line_limit(request.text)
    return detect_data_type(request.text)


@import_router.post("/import/roster/preview", response_model=RosterPreviewResponse)
def preview_roster(request: RosterPreviewRequest):
    """
    Parse and validate a roster without storing anything.

    Validation errors are returned for display; they do not fail the request.
    """
    ensure_within_line_limit(request.text)
    try:
        return preview_roster_import(request.text)
    except ImportParseError as e:
        raise parse_error(e)


@import_router.post("/import/roster", response_model=RosterImportResponse)
def import_roster(request: RosterImportRequest, db: Session = Depends(get_db)):
    ensure_within_line_limit(request.text)
    try:
        result = commit_roster_import(
            EmployeeRepository(db), request.text, replace_existing=request.replace_existing
        )
    except ImportParseError as e:
        logger.warning(f"Roster import rejected: {e.message}")
        raise parse_error(e)
    logger.info(f"Roster import stored {result.imported} employees, skipped {result.skipped}")
    return result


@import_router.post("/import/performance", response_model=PerformanceImportResponse)
def import_performance(request: PerformanceImportRequest, db: Session = Depends(get_db)):
    """
    Parse performance scores into averaged competency scores per employee.

    Stored roster levels are used as a tie-breaker unless use_stored_levels is false.
    """
    ensure_within_line_limit(request.text)
    provider = EmployeeRepository(db) if request.use_stored_levels else None
    try:
        return import_performance_data(
            request.text,
            level_provider=provider,
            dynamic_mapping=request.dynamic_mapping,
        )
    except ImportParseError as e:
        logger.warning(f"Performance import rejected: {e.message}")
        raise parse_error(e)


# ==================== Organisational levels ====================

@import_router.post("/organizational-level/resolve", response_model=LevelResolution)
def resolve_level(request: ResolveLevelRequest):
    return resolve_organizational_level(request.position, request.sub_position, request.golongan)


@import_router.get("/organizational-level/validate", response_model=LevelValidation)
def validate_level(level: Optional[str] = Query(default=None)):
    return validate_organizational_level(level)


@import_router.get("/golongan/parse", response_model=Golongan)
def parse_golongan_value(value: str = Query(..., description="Golongan code, e.g. IV/a")):
    parsed = parse_golongan(value)
    if parsed is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Invalid golongan: {value}"
        )
    return parsed


# ==================== Employees ====================

@import_router.get("/employees", response_model=EmployeeListResponse)
def list_employees(db: Session = Depends(get_db)):
    employees = EmployeeRepository(db).list_employees()
    return EmployeeListResponse(
        employees=employees,
        counts=count_employees_by_organizational_level(employees),
    )


@import_router.get("/employees/org-levels", response_model=OrgLevelMappingResponse)
def get_org_levels(db: Session = Depends(get_db)):
    mapping = EmployeeRepository(db).get_org_level_mapping()
    return OrgLevelMappingResponse(
        mapping=mapping,
        categories={name: categorize_organizational_level(label) for name, label in mapping.items()},
    )
