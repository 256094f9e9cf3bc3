"""Explicit conversions between ORM rows and the wire schemas."""
from .models import Company, Department, Employee
from .schemas import (
    CompanyOut,
    DepartmentCreate,
    DepartmentOut,
    DepartmentUpdate,
    EmployeeCreate,
    EmployeeOut,
    EmployeeUpdate,
)


def to_company_out(company: Company) -> CompanyOut:
    return CompanyOut(
        company_id=company.id,
        name=company.name,
        founded=company.founded,
        industry=company.industry,
        description=company.description or "",
        headquarters=company.headquarters or "",
        website=company.website or "",
    )


def to_department_out(department: Department) -> DepartmentOut:
    return DepartmentOut(
        department_id=department.id,
        company_id=department.company_id,
        company_name=department.company.name if department.company is not None else "",
        name=department.name,
    )


def to_employee_out(employee: Employee) -> EmployeeOut:
    return EmployeeOut(
        employee_id=employee.id,
        department_id=employee.department_id,
        department_name=employee.department.name if employee.department is not None else "",
        full_name=employee.full_name,
        birth_date=employee.birth_date,
        hire_date=employee.hire_date,
        salary=employee.salary,
    )


def new_department(payload: DepartmentCreate) -> Department:
    return Department(company_id=payload.company_id, name=payload.name)


def department_changes(payload: DepartmentUpdate) -> dict:
    return {"company_id": payload.company_id, "name": payload.name}


def new_employee(payload: EmployeeCreate) -> Employee:
    return Employee(**employee_changes(payload))


def employee_changes(payload: EmployeeUpdate) -> dict:
    return {
        "department_id": payload.department_id,
        "full_name": payload.full_name,
        "birth_date": payload.birth_date,
        "hire_date": payload.hire_date,
        "salary": payload.salary,
    }
