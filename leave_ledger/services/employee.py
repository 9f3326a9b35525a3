# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, Field

UNASSIGNED_DEPARTMENT = "UNASSIGNED"


class EmployeeInfo(BaseModel):
    """Employee metadata from the HR Employee Service."""

    id: uuid.UUID
    employee_code: str
    first_name: str
    surname: str
    department: str | None = None
    leave_entitlement: Decimal = Field(default=Decimal("0"))  # annual days
    leave_accrual_rate: Decimal = Field(default=Decimal("0"))  # days per month
    hire_date: date | None = None
    termination_date: date | None = None
    is_active: bool = True

    @property
    def display_name(self) -> str:
        """Name as printed on leave reports, e.g. ``DOE, Jane``."""
        return f"{self.surname.upper()}, {self.first_name}"

    @property
    def department_key(self) -> str:
        """Department used for grouping; employees without one are UNASSIGNED."""
        return self.department or UNASSIGNED_DEPARTMENT


@runtime_checkable
class EmployeeService(Protocol):
    """Interface for the Employee Service."""

    async def get_employee(self, employee_id: uuid.UUID) -> EmployeeInfo | None:
        """Fetch employee metadata. Returns None if not found."""
        ...


class InMemoryEmployeeService:
    """In-memory stub implementation for development."""

    def __init__(self) -> None:
        self._employees: dict[uuid.UUID, EmployeeInfo] = {}

    def seed(self, employee: EmployeeInfo) -> None:
        """Seed an employee for testing."""
        self._employees[employee.id] = employee

    async def get_employee(self, employee_id: uuid.UUID) -> EmployeeInfo | None:
        """Fetch employee metadata. Returns None if not found."""
        return self._employees.get(employee_id)


_employee_service: EmployeeService = InMemoryEmployeeService()


def get_employee_service() -> EmployeeService:
    """FastAPI dependency for the Employee Service."""
    return _employee_service


def set_employee_service(service: EmployeeService) -> None:
    """Override the service (for testing or production wiring)."""
    global _employee_service
    _employee_service = service
