"""
Roster CSV parser.

Turns a pasted employee roster (tab, comma or aligned-space columns,
optional header, optional leading row number) into EmployeeRecord
objects with their organisational level resolved.
"""

import logging
import re
from typing import Dict, Iterable, List, Sequence

from common.csv_utils import parse_csv_line, split_lines
from common.exceptions import RosterParseError
from common.golongan import is_valid_golongan
from schemas.employee_schemas import MISSING_VALUE, EmployeeRecord, RosterRow, ValidationResult
from services.organizational_level_service import (
    determine_employee_position,
    resolve_organizational_level,
)

logger = logging.getLogger(__name__)

HEADER_KEYWORDS = ("nama", "nip", "gol", "pangkat", "jabatan")
HEADER_KEYWORD_THRESHOLD = 2
ROSTER_FIELDS = ("name", "nip", "gol", "pangkat", "position", "sub_position")
ROW_NUMBER_PATTERN = re.compile(r"^\d+\.?$")
NON_DIGIT_PATTERN = re.compile(r"\D")

# (field, label) pairs checked by validate_employee_data, in message order
REQUIRED_FIELD_LABELS = [
    ("name", "Nama"),
    ("nip", "NIP"),
    ("gol", "Golongan"),
    ("pangkat", "Pangkat"),
    ("position", "Jabatan"),
    ("sub_position", "Sub-Jabatan"),
]


def is_header_line(line: str) -> bool:
    lowered = line.lower()
    return sum(1 for keyword in HEADER_KEYWORDS if keyword in lowered) >= HEADER_KEYWORD_THRESHOLD


def _ensure_text(text) -> str:
    if not isinstance(text, str):
        raise RosterParseError(f"Roster data must be text, got {type(text).__name__}")
    return text


def extract_roster_rows(text: str) -> List[RosterRow]:
    """
    Tokenize every data line of a roster blob into a RosterRow.

    No filtering is applied beyond the header and blank lines, so the
    rows can be validated before import.
    """
    lines = [line for line in split_lines(_ensure_text(text)) if line.strip()]
    if lines and is_header_line(lines[0]):
        lines = lines[1:]

    rows = []
    for line_number, line in enumerate(lines, start=1):
        fields = parse_csv_line(line, drop_empty=False)
        # blank leading columns from a spreadsheet paste
        while fields and not fields[0]:
            fields = fields[1:]
        if fields and ROW_NUMBER_PATTERN.match(fields[0]):
            fields = fields[1:]
        values = dict(zip(ROSTER_FIELDS, fields))
        rows.append(RosterRow(line_number=line_number, **values))
    return rows


def sanitize_nip(nip: str) -> str:
    digits = NON_DIGIT_PATTERN.sub("", nip or "")
    return digits or MISSING_VALUE


def _or_missing(value: str) -> str:
    value = (value or "").strip()
    return value or MISSING_VALUE


def build_employee_record(row: RosterRow) -> EmployeeRecord:
    position = _or_missing(row.position)
    sub_position = _or_missing(row.sub_position)
    resolution = resolve_organizational_level(position, sub_position, row.gol)
    return EmployeeRecord(
        name=row.name.strip(),
        nip=sanitize_nip(row.nip),
        gol=row.gol.strip(),
        pangkat=_or_missing(row.pangkat),
        position=position,
        sub_position=sub_position,
        organizational_level=resolution.category,
        detailed_position=determine_employee_position(position, sub_position, row.gol),
    )


def parse_employee_csv(text: str) -> List[EmployeeRecord]:
    """
    Parse a roster blob into employee records.

    Lines without a name or golongan are skipped. Duplicate names are
    kept as separate records in input order.

    Raises:
        RosterParseError: If text is not a string
    """
    return records_from_rows(extract_roster_rows(text))


def records_from_rows(rows: Iterable[RosterRow]) -> List[EmployeeRecord]:
    records = []
    skipped = 0
    for row in rows:
        if not row.name.strip() or not row.gol.strip():
            skipped += 1
            continue
        records.append(build_employee_record(row))

    if skipped:
        logger.debug(f"Skipped {skipped} roster lines without name or golongan")
    logger.info(f"Parsed {len(records)} employees from roster")
    return records


def validate_employee_data(rows: Sequence[RosterRow]) -> ValidationResult:
    """Collect per-line problems in the roster before it is stored."""
    if not rows:
        return ValidationResult(valid=False, errors=["Tidak ada data pegawai yang ditemukan"])

    errors = []
    warnings = []
    for index, row in enumerate(rows, start=1):
        for field, label in REQUIRED_FIELD_LABELS:
            if not getattr(row, field).strip():
                errors.append(f"Baris {index}: {label} tidak boleh kosong")
        if row.gol.strip() and not is_valid_golongan(row.gol):
            warnings.append(f"Baris {index}: Format golongan '{row.gol.strip()}' tidak dikenali")

    return ValidationResult(valid=not errors, errors=errors, warnings=warnings)


def build_level_mapping(records: Iterable[EmployeeRecord]) -> Dict[str, str]:
    """Name -> level label mapping used as a tie-breaker by the performance import."""
    mapping = {}
    for record in records:
        if record.organizational_level.is_eselon:
            mapping[record.name] = record.organizational_level.value
        else:
            mapping[record.name] = record.detailed_position
    return mapping
