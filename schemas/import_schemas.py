from pydantic import BaseModel, Field
from typing import Dict, List, Literal, Optional

from constants.organizational_levels import OrganizationalCategory
from schemas.employee_schemas import (
    DataInconsistencyWarning,
    Employee,
    EmployeeRecord,
    ValidationResult,
)


class RosterPreviewRequest(BaseModel):
    text: str = Field(..., description="Pasted roster text (CSV, TSV or aligned columns)")


class RosterImportRequest(RosterPreviewRequest):
    replace_existing: bool = Field(default=False, description="Delete stored employees before import")


class PerformanceImportRequest(BaseModel):
    text: str = Field(..., description="Pasted performance text with 'Competency [Employee]' headers")
    dynamic_mapping: Dict[str, str] = Field(
        default_factory=dict,
        description="In-session employee name -> organisational level label"
    )
    use_stored_levels: bool = Field(default=True, description="Use stored roster levels as a tie-breaker")


class ResolveLevelRequest(BaseModel):
    position: Optional[str] = None
    sub_position: Optional[str] = None
    golongan: Optional[str] = None


class DetectDataTypeRequest(BaseModel):
    text: str


class DataTypeDetection(BaseModel):
    type: Literal["employee_roster", "performance_data"]
    confidence: float = Field(ge=0, le=1)


class RosterPreviewResponse(BaseModel):
    employees: List[EmployeeRecord]
    validation: ValidationResult
    warnings: List[DataInconsistencyWarning] = Field(default_factory=list)


class RosterImportResponse(BaseModel):
    imported: int
    skipped: int
    total_stored: int


class PerformanceImportResponse(BaseModel):
    employees: List[Employee]
    unknown_employees: List[str] = Field(default_factory=list)


class EmployeeListResponse(BaseModel):
    employees: List[EmployeeRecord]
    counts: Dict[str, int] = Field(default_factory=dict)


class OrgLevelMappingResponse(BaseModel):
    mapping: Dict[str, str]
    categories: Dict[str, OrganizationalCategory] = Field(default_factory=dict)
