"""
Employee Store

Persistence for imported roster employees and the name -> level lookups
consumed by the performance import.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from models.employee import Employee
from schemas.employee_schemas import EmployeeRecord
from services.roster_parser import build_level_mapping

logger = logging.getLogger(__name__)


class EmployeeLevelProvider(ABC):
    @abstractmethod
    def get_org_level_mapping(self) -> Dict[str, str]:
        pass

    def get_level(self, name: str) -> Optional[str]:
        return self.get_org_level_mapping().get(name)


class InMemoryEmployeeLevelProvider(EmployeeLevelProvider):
    def __init__(self, mapping: Optional[Dict[str, str]] = None) -> None:
        """Initialize the provider with a fixed name -> level label mapping"""
        self.mapping = dict(mapping or {})

    @classmethod
    def from_records(cls, records: Iterable[EmployeeRecord]) -> "InMemoryEmployeeLevelProvider":
        return cls(build_level_mapping(records))

    def get_org_level_mapping(self) -> Dict[str, str]:
        return dict(self.mapping)


def to_record(employee: Employee) -> EmployeeRecord:
    return EmployeeRecord(
        name=employee.name,
        nip=employee.nip,
        gol=employee.gol,
        pangkat=employee.pangkat,
        position=employee.position,
        sub_position=employee.sub_position,
        organizational_level=employee.organizational_level,
        detailed_position=employee.detailed_position,
    )


class EmployeeRepository(EmployeeLevelProvider):
    """
    SQLAlchemy-backed employee storage.

    The session is owned by the caller; save_employees commits.
    """

    def __init__(self, db: Session):
        self.db = db

    def save_employees(self, records: List[EmployeeRecord], replace_existing: bool = False) -> int:
        """
        Store roster records.

        Args:
            records: Parsed roster employees
            replace_existing: Delete every stored employee first

        Returns:
            Number of employees stored
        """
        try:
            if replace_existing:
                deleted = self.db.query(Employee).delete()
                logger.info(f"Removed {deleted} stored employees before import")

            self.db.add_all([
                Employee(
                    name=record.name,
                    nip=record.nip,
                    gol=record.gol,
                    pangkat=record.pangkat,
                    position=record.position,
                    sub_position=record.sub_position,
                    organizational_level=record.organizational_level.value,
                    detailed_position=record.detailed_position,
                )
                for record in records
            ])
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Stored {len(records)} employees")
        return len(records)

    def list_employees(self) -> List[EmployeeRecord]:
        employees = self.db.query(Employee).order_by(Employee.id).all()
        return [to_record(employee) for employee in employees]

    def count(self) -> int:
        return self.db.query(Employee).count()

    def get_org_level_mapping(self) -> Dict[str, str]:
        return build_level_mapping(self.list_employees())
