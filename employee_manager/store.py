"""
Session-bound data access for companies, departments and employees.

Every write commits its own transaction; a failure rolls the whole call back
and re-raises. Reads join the department so callers never trigger lazy loads.
"""
import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, contains_eager

from .models import Company, Department, Employee

logger = logging.getLogger(__name__)


class UnknownDepartmentError(ValueError):
    def __init__(self, department_id: int):
        self.department_id = department_id
        super().__init__(f"Department {department_id} does not exist")


class UnknownCompanyError(ValueError):
    def __init__(self, company_id: int):
        self.company_id = company_id
        super().__init__(f"Company {company_id} does not exist")


class _Store:
    def __init__(self, db: Session):
        self.db = db

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise


class EmployeeStore(_Store):

    def _joined(self):
        return (
            select(Employee)
            .join(Employee.department)
            .options(contains_eager(Employee.department))
        )

    # ----------------------------
    # Reads
    # ----------------------------
    def count(self) -> int:
        return self.db.scalar(select(func.count(Employee.id))) or 0

    def count_matching(self, filters: Iterable) -> int:
        stmt = (
            select(func.count(Employee.id))
            .select_from(Employee)
            .join(Employee.department)
            .where(*filters)
        )
        return self.db.scalar(stmt) or 0

    def fetch_page(self, filters: Iterable, order_by: Iterable, skip: int, take: int) -> List[Employee]:
        stmt = self._joined().where(*filters).order_by(*order_by).offset(skip).limit(take)
        return list(self.db.scalars(stmt).all())

    def list_all(self) -> List[Employee]:
        logger.info("Retrieving all employees with department information")
        return list(self.db.scalars(self._joined().order_by(Employee.id)).all())

    def salary_above(self, minimum_salary: Decimal) -> List[Employee]:
        logger.info("Retrieving employees with salary above %s", minimum_salary)
        stmt = self._joined().where(Employee.salary > minimum_salary).order_by(Employee.id)
        return list(self.db.scalars(stmt).all())

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        stmt = self._joined().where(Employee.id == employee_id)
        return self.db.scalars(stmt).first()

    # ----------------------------
    # Writes
    # ----------------------------
    def _require_department(self, department_id: int) -> None:
        if self.db.get(Department, department_id) is None:
            raise UnknownDepartmentError(department_id)

    def insert(self, employee: Employee) -> Employee:
        self._require_department(employee.department_id)
        logger.info("Creating employee %s", employee.full_name)
        self.db.add(employee)
        self._commit()
        return self.get_by_id(employee.id)

    def update_by_id(self, employee_id: int, changes: dict) -> Optional[Employee]:
        employee = self.db.get(Employee, employee_id)
        if employee is None:
            return None
        if "department_id" in changes:
            self._require_department(changes["department_id"])

        logger.info("Updating employee %s", employee_id)
        for key, value in changes.items():
            setattr(employee, key, value)
        self._commit()
        return self.get_by_id(employee_id)

    def delete_by_id(self, employee_id: int) -> bool:
        employee = self.db.get(Employee, employee_id)
        if employee is None:
            return False

        logger.info("Deleting employee %s", employee_id)
        self.db.delete(employee)
        self._commit()
        return True

    def delete_older_than(self, maximum_age: int, today: Optional[date] = None) -> int:
        """
        Deletes employees whose calendar-year age exceeds ``maximum_age``,
        i.e. ``today.year - birth_date.year > maximum_age``.
        Returns the number of deleted rows.
        """
        today = today or date.today()
        if maximum_age >= today.year:
            # Nobody can be born before year 1
            return 0
        cutoff = date(today.year - maximum_age, 1, 1)
        logger.info("Deleting employees older than %s years (born before %s)", maximum_age, cutoff)

        doomed = self.db.scalars(select(Employee).where(Employee.birth_date < cutoff)).all()
        for employee in doomed:
            self.db.delete(employee)
        if doomed:
            self._commit()
        return len(doomed)

    def update_salary_below(self, maximum_current_salary: Decimal, new_salary: Decimal) -> int:
        """Sets ``new_salary`` on every employee earning less than the threshold."""
        logger.info(
            "Updating salary to %s for employees with salary below %s", new_salary, maximum_current_salary
        )
        low_paid = self.db.scalars(select(Employee).where(Employee.salary < maximum_current_salary)).all()
        for employee in low_paid:
            employee.salary = new_salary
        if low_paid:
            self._commit()
        return len(low_paid)


class DepartmentStore(_Store):

    def count(self) -> int:
        return self.db.scalar(select(func.count(Department.id))) or 0

    def list_all(self) -> List[Department]:
        return list(self.db.scalars(select(Department).order_by(Department.id)).all())

    def get_by_id(self, department_id: int) -> Optional[Department]:
        return self.db.get(Department, department_id)

    def get_by_name(self, name: str) -> Optional[Department]:
        return self.db.scalars(select(Department).where(Department.name == name)).first()

    def _require_company(self, company_id: int) -> None:
        if self.db.get(Company, company_id) is None:
            raise UnknownCompanyError(company_id)

    def insert(self, department: Department) -> Department:
        self._require_company(department.company_id)

        logger.info("Creating department %s for company %s", department.name, department.company_id)
        self.db.add(department)
        self._commit()
        self.db.refresh(department)
        return department

    def update_by_id(self, department_id: int, changes: dict) -> Optional[Department]:
        department = self.db.get(Department, department_id)
        if department is None:
            return None
        if "company_id" in changes:
            self._require_company(changes["company_id"])

        logger.info("Updating department %s", department_id)
        for key, value in changes.items():
            setattr(department, key, value)
        self._commit()
        self.db.refresh(department)
        return department

    def delete_by_id(self, department_id: int) -> bool:
        department = self.db.get(Department, department_id)
        if department is None:
            return False

        logger.info("Deleting department %s", department_id)
        self.db.delete(department)
        self._commit()
        return True


class CompanyStore(_Store):

    def get_first(self) -> Optional[Company]:
        return self.db.scalars(select(Company).order_by(Company.id).limit(1)).first()
