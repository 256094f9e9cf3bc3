import re
from datetime import datetime, date
from decimal import Decimal, InvalidOperation
from typing import List, NamedTuple, Optional

from .types import MAX_AGE_YEARS, MAX_DEPARTMENT_NAME_LENGTH, MAX_FULL_NAME_LENGTH, MAX_SALARY

# Latin and Cyrillic letters, whitespace and hyphens
DEPARTMENT_NAME_PATTERN = re.compile(r"^[a-zA-Zа-яА-ЯёЁ\s\-]+$")


class Violation(NamedTuple):
    field: str
    message: str


class SalaryUpdateError(ValueError):
    """Raised when a bulk salary update breaks one of its rules."""

    def __init__(self, violations: List[Violation]):
        self.violations = violations
        super().__init__("; ".join(v.message for v in violations))


def parse_date(s) -> date:
    """
    Accepts ISO 8601: 'YYYY-MM-DD', 'YYYY-MM-DDTHH:MM:SSZ' or with offset '+00:00'.
    Only the calendar date is kept.
    """
    if isinstance(s, datetime):
        return s.date()
    if isinstance(s, date):
        return s
    if s is None or not str(s).strip():
        raise ValueError("Empty or null date.")

    txt = str(s).strip()
    # Normalize Z suffix to +00:00 for fromisoformat
    if txt.endswith("Z"):
        txt = txt[:-1] + "+00:00"

    try:
        return datetime.fromisoformat(txt).date()
    except ValueError:
        # Fallback to common formats
        for fmt in ("%Y-%m-%d %H:%M:%S%z", "%Y-%m-%dT%H:%M:%S.%f%z", "%d.%m.%Y", "%m/%d/%Y"):
            try:
                return datetime.strptime(txt, fmt).date()
            except ValueError:
                continue
    raise ValueError(f"Invalid date: {s}")


def try_parse_date(s: Optional[str]) -> Optional[date]:
    try:
        return parse_date(s)
    except ValueError:
        return None


def parse_decimal(s) -> Decimal:
    """
    Converts the value into a Decimal with 2 decimal places.
    Raises ValueError if the input is not numeric.
    """
    if s is None or s == "":
        raise ValueError("Empty decimal value.")
    try:
        return Decimal(str(s)).quantize(Decimal("0.01"))
    except (InvalidOperation, ValueError) as e:
        raise ValueError(f"Invalid decimal: {s}") from e


def _years_ago(today: date, years: int) -> date:
    try:
        return today.replace(year=today.year - years)
    except ValueError:
        # Feb 29 on a non-leap target year
        return today.replace(year=today.year - years, day=28)


# ----------------------------
# Rule checks, each returns the violations found
# ----------------------------
def check_department_id(department_id: int) -> List[Violation]:
    if department_id is None or department_id <= 0:
        return [Violation("departmentId", "Department ID must be greater than 0")]
    return []


def check_company_id(company_id: int) -> List[Violation]:
    if company_id is None or company_id <= 0:
        return [Violation("companyId", "Company ID must be greater than 0")]
    return []


def check_full_name(full_name: str) -> List[Violation]:
    if not full_name or not full_name.strip() or len(full_name) > MAX_FULL_NAME_LENGTH:
        return [Violation("fullName", "Full name is required and must not exceed 200 characters")]
    return []


def check_birth_date(birth_date: date, today: Optional[date] = None) -> List[Violation]:
    today = today or date.today()
    if birth_date >= today or birth_date <= _years_ago(today, MAX_AGE_YEARS):
        return [Violation("birthDate", "Birth date must be in the past and cannot be more than 100 years ago")]
    return []


def check_hire_date(hire_date: date, today: Optional[date] = None) -> List[Violation]:
    today = today or date.today()
    if hire_date > today:
        return [Violation("hireDate", "Hire date cannot be in the future")]
    return []


def check_salary(salary: Decimal) -> List[Violation]:
    if salary is None or salary <= 0 or salary > MAX_SALARY:
        return [Violation("salary", "Salary must be greater than 0 and cannot exceed 1,000,000")]
    return []


def check_department_name(name: str, enforce_pattern: bool = True) -> List[Violation]:
    if not name or not name.strip() or len(name) > MAX_DEPARTMENT_NAME_LENGTH:
        return [Violation("name", "Department name is required and must not exceed 100 characters")]
    if enforce_pattern and not DEPARTMENT_NAME_PATTERN.match(name):
        return [Violation("name", "Department name can only contain letters, spaces, and hyphens")]
    return []


def check_salary_update(new_salary: Decimal, maximum_current_salary: Decimal) -> List[Violation]:
    violations: List[Violation] = []
    if new_salary <= 0 or new_salary > MAX_SALARY:
        violations.append(Violation("newSalary", "New salary must be greater than 0 and cannot exceed 1,000,000"))
    if maximum_current_salary <= 0 or maximum_current_salary > MAX_SALARY:
        violations.append(Violation(
            "maximumCurrentSalary",
            "Maximum current salary must be greater than 0 and cannot exceed 1,000,000",
        ))
    if new_salary <= maximum_current_salary:
        violations.append(Violation(
            "SalaryUpdateLogic",
            "New salary should be higher than the maximum current salary threshold to avoid salary reductions",
        ))
    return violations
