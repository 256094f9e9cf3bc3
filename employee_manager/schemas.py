from datetime import date
from decimal import Decimal
from typing import Generic, List, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .utils.types import Money
from .utils import validators as rules

T = TypeVar("T")


def _raise_first(violations: List[rules.Violation]) -> None:
    if violations:
        raise ValueError(violations[0].message)


# camelCase on the wire, snake_case in Python
class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Output schema for Company
class CompanyOut(CamelModel):
    company_id: int
    name: str
    founded: int
    industry: str
    description: str
    headquarters: str
    website: str


class CompanyStatistics(CamelModel):
    total_employees: int
    departments: int
    founded_years: int
    projects_completed: int
    client_satisfaction: float
    annual_revenue: str


# Input schemas for Department
class DepartmentUpdate(CamelModel):
    company_id: int
    name: str = Field(max_length=100)

    @field_validator("company_id")
    @classmethod
    def company_exists(cls, v):
        _raise_first(rules.check_company_id(v))
        return v

    @field_validator("name")
    @classmethod
    def name_rules(cls, v):
        _raise_first(rules.check_department_name(v, enforce_pattern=False))
        return v.strip()


class DepartmentCreate(DepartmentUpdate):
    @field_validator("name")
    @classmethod
    def name_pattern(cls, v):
        _raise_first(rules.check_department_name(v, enforce_pattern=True))
        return v


class DepartmentOut(CamelModel):
    department_id: int
    company_id: int
    company_name: str
    name: str


# Input schemas for Employee
class EmployeeUpdate(CamelModel):
    department_id: int
    full_name: str
    birth_date: date
    hire_date: date
    salary: Decimal = Field(max_digits=18, decimal_places=2)

    @field_validator("birth_date", "hire_date", mode="before")
    @classmethod
    def iso_dates(cls, v):
        # Clients send full ISO timestamps; only the calendar date matters
        return rules.parse_date(v)

    @field_validator("department_id")
    @classmethod
    def department_rules(cls, v):
        _raise_first(rules.check_department_id(v))
        return v

    @field_validator("full_name")
    @classmethod
    def full_name_rules(cls, v):
        _raise_first(rules.check_full_name(v))
        return v.strip()

    @field_validator("birth_date")
    @classmethod
    def birth_date_rules(cls, v):
        _raise_first(rules.check_birth_date(v))
        return v

    @field_validator("hire_date")
    @classmethod
    def hire_date_rules(cls, v):
        _raise_first(rules.check_hire_date(v))
        return v

    @field_validator("salary")
    @classmethod
    def salary_rules(cls, v):
        _raise_first(rules.check_salary(v))
        return v


class EmployeeCreate(EmployeeUpdate):
    pass


class EmployeeOut(CamelModel):
    employee_id: int
    department_id: int
    department_name: str
    full_name: str
    birth_date: date
    hire_date: date
    salary: Money


class PaginatedResponse(CamelModel, Generic[T]):
    data: List[T] = Field(default_factory=list)
    page: int
    page_size: int
    total_items: int
    total_pages: int
    has_next: bool
    has_previous: bool


class ViolationOut(BaseModel):
    field: str
    message: str


class SalaryUpdateProblem(BaseModel):
    message: str
    errors: List[ViolationOut]
