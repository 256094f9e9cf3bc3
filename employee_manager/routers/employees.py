import logging
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from sqlalchemy.orm import Session

from ..db import get_db
from ..mapping import employee_changes, new_employee, to_employee_out
from ..pagination import EmployeeSearchPaginator, PageRequest, SearchCriteria, SortSpec
from ..schemas import EmployeeCreate, EmployeeOut, EmployeeUpdate, PaginatedResponse, SalaryUpdateProblem
from ..store import EmployeeStore
from ..utils.types import DEFAULT_PAGE, DEFAULT_PAGE_SIZE
from ..utils.validators import SalaryUpdateError, check_salary_update

router = APIRouter(prefix="/employees", tags=["employees"])
logger = logging.getLogger(__name__)


def _require_positive_id(employee_id: int) -> None:
    if employee_id <= 0:
        raise HTTPException(status_code=400, detail="Employee ID must be positive")


@router.get("", response_model=List[EmployeeOut])
def list_employees(db: Session = Depends(get_db)):
    employees = [to_employee_out(e) for e in EmployeeStore(db).list_all()]
    logger.info("Retrieved %s employees", len(employees))
    return employees


# Declared before "/{employee_id}" so the literal segment wins
@router.get("/paginated", response_model=PaginatedResponse[EmployeeOut])
def list_employees_paginated(
    page: int = Query(DEFAULT_PAGE, ge=1),
    page_size: int = Query(DEFAULT_PAGE_SIZE, ge=1, alias="pageSize", description="Values above 50 are clamped to 50"),
    department: Optional[str] = Query(None),
    full_name: Optional[str] = Query(None, alias="fullName"),
    birth_date: Optional[str] = Query(None, alias="birthDate"),
    hire_date: Optional[str] = Query(None, alias="hireDate"),
    salary: Optional[str] = Query(None),
    sort_field: Optional[str] = Query(None, alias="sortField"),
    sort_direction: Optional[str] = Query(None, alias="sortDirection"),
    db: Session = Depends(get_db),
):
    try:
        pagination = PageRequest(page=page, page_size=page_size)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    search = SearchCriteria(
        department=department,
        full_name=full_name,
        birth_date=birth_date,
        hire_date=hire_date,
        salary=salary,
    )
    result = EmployeeSearchPaginator(EmployeeStore(db)).paginate(
        pagination, search, SortSpec(sort_field, sort_direction)
    )
    page_out = result.map(to_employee_out)
    return PaginatedResponse[EmployeeOut](
        data=page_out.data,
        page=page_out.page,
        page_size=page_out.page_size,
        total_items=page_out.total_items,
        total_pages=page_out.total_pages,
        has_next=page_out.has_next,
        has_previous=page_out.has_previous,
    )


@router.get("/salary-above/{minimum_salary}", response_model=List[EmployeeOut])
def list_employees_salary_above(minimum_salary: Decimal, db: Session = Depends(get_db)):
    if minimum_salary < 0:
        raise HTTPException(status_code=400, detail="Minimum salary cannot be negative")
    return [to_employee_out(e) for e in EmployeeStore(db).salary_above(minimum_salary)]


@router.get("/{employee_id}", response_model=EmployeeOut)
def get_employee(employee_id: int, db: Session = Depends(get_db)):
    _require_positive_id(employee_id)
    employee = EmployeeStore(db).get_by_id(employee_id)
    if employee is None:
        logger.warning("Employee with ID %s not found", employee_id)
        raise HTTPException(status_code=404, detail=f"Employee {employee_id} not found")
    return to_employee_out(employee)


@router.post("", response_model=EmployeeOut, status_code=status.HTTP_201_CREATED)
def create_employee(payload: EmployeeCreate, request: Request, response: Response, db: Session = Depends(get_db)):
    created = EmployeeStore(db).insert(new_employee(payload))
    logger.info("Created employee with ID %s: %s", created.id, created.full_name)
    response.headers["Location"] = str(request.url_for("get_employee", employee_id=created.id))
    return to_employee_out(created)


@router.put("/update-salary", response_model=int, responses={400: {"model": SalaryUpdateProblem}})
def update_salary_for_low_paid(
    new_salary: Decimal = Query(..., alias="newSalary"),
    maximum_current_salary: Decimal = Query(..., alias="maximumCurrentSalary"),
    db: Session = Depends(get_db),
):
    violations = check_salary_update(new_salary, maximum_current_salary)
    if violations:
        raise SalaryUpdateError(violations)

    updated = EmployeeStore(db).update_salary_below(maximum_current_salary, new_salary)
    logger.info("Updated salary for %s employees", updated)
    return updated


@router.put("/{employee_id}", response_model=EmployeeOut)
def update_employee(employee_id: int, payload: EmployeeUpdate, db: Session = Depends(get_db)):
    _require_positive_id(employee_id)
    updated = EmployeeStore(db).update_by_id(employee_id, employee_changes(payload))
    if updated is None:
        logger.warning("Employee with ID %s not found for update", employee_id)
        raise HTTPException(status_code=404, detail=f"Employee {employee_id} not found")
    return to_employee_out(updated)


@router.delete("/older-than/{maximum_age}", response_model=int)
def delete_employees_older_than(maximum_age: int, db: Session = Depends(get_db)):
    if maximum_age <= 0:
        raise HTTPException(status_code=400, detail="Maximum age must be positive")
    deleted = EmployeeStore(db).delete_older_than(maximum_age)
    logger.info("Deleted %s employees older than %s years", deleted, maximum_age)
    return deleted


@router.delete("/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_employee(employee_id: int, db: Session = Depends(get_db)):
    _require_positive_id(employee_id)
    if not EmployeeStore(db).delete_by_id(employee_id):
        logger.warning("Employee with ID %s not found for deletion", employee_id)
        raise HTTPException(status_code=404, detail=f"Employee {employee_id} not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
