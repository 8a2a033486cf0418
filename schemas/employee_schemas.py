from pydantic import BaseModel, ConfigDict, Field
from typing import List, Literal, Optional

from constants.organizational_levels import (
    OrganizationalCategory,
    STAFF_OTHER_LABEL,
    WarningSeverity,
)

GolonganLevel = Literal["I", "II", "III", "IV"]
GolonganGrade = Literal["a", "b", "c", "d", "e"]

MISSING_VALUE = "-"


class Golongan(BaseModel):
    """Parsed civil-service rank code, e.g. IV/a (Pembina)."""
    model_config = ConfigDict(frozen=True)

    level: GolonganLevel
    grade: GolonganGrade
    formatted: str
    display_name: str


class RosterRow(BaseModel):
    """
    One tokenized roster line before required-field filtering.

    Attributes:
        line_number: 1-based index among the data lines
        name: Employee name
        nip: Raw NIP text
        gol: Raw golongan text
        pangkat: Rank title
        position: Job title (jabatan)
        sub_position: Department or free text (sub-jabatan)
    """
    line_number: int
    name: str = ""
    nip: str = ""
    gol: str = ""
    pangkat: str = ""
    position: str = ""
    sub_position: str = ""


class EmployeeRecord(BaseModel):
    """Employee produced by the roster import."""
    name: str
    nip: str = MISSING_VALUE
    gol: str
    pangkat: str = MISSING_VALUE
    position: str = MISSING_VALUE
    sub_position: str = MISSING_VALUE
    organizational_level: OrganizationalCategory
    detailed_position: str = Field(
        default=STAFF_OTHER_LABEL,
        description="Detailed label, e.g. 'Eselon III' or 'Staff ASN Sekretariat'"
    )


class CompetencyScore(BaseModel):
    name: str
    score: float = Field(ge=0, le=100)


class Employee(BaseModel):
    """Employee produced by the performance import."""
    name: str
    organizational_level: OrganizationalCategory
    organizational_level_label: str = STAFF_OTHER_LABEL
    performance: List[CompetencyScore] = Field(default_factory=list)


class DataInconsistencyWarning(BaseModel):
    type: Literal["golongan_position_mismatch"] = "golongan_position_mismatch"
    message: str
    golongan: str
    position_level: OrganizationalCategory
    golongan_suggested_level: OrganizationalCategory
    severity: WarningSeverity


class LevelResolution(BaseModel):
    """Outcome of resolving one employee's organisational level."""
    category: OrganizationalCategory
    position_inference: OrganizationalCategory
    golongan_inference: Optional[OrganizationalCategory] = None
    rule: str
    warning: Optional[DataInconsistencyWarning] = None


class LevelValidation(BaseModel):
    is_valid: bool
    normalized: str
    category: OrganizationalCategory
    suggestions: List[str] = Field(default_factory=list)


class OrganizationalSummary(BaseModel):
    eselon_count: int = 0
    asn_staff_count: int = 0
    non_asn_staff_count: int = 0
    other_count: int = 0
    total_count: int = 0


class ValidationResult(BaseModel):
    valid: bool
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
