import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from ..db import get_db
from ..mapping import department_changes, new_department, to_department_out
from ..schemas import DepartmentCreate, DepartmentOut, DepartmentUpdate
from ..store import DepartmentStore

router = APIRouter(prefix="/departments", tags=["departments"])
logger = logging.getLogger(__name__)


def _require_positive_id(department_id: int) -> None:
    if department_id <= 0:
        raise HTTPException(status_code=400, detail="Department ID must be positive")


@router.get("", response_model=List[DepartmentOut])
def list_departments(db: Session = Depends(get_db)):
    return [to_department_out(d) for d in DepartmentStore(db).list_all()]


@router.get("/by-name/{department_name}", response_model=DepartmentOut)
def get_department_by_name(department_name: str, db: Session = Depends(get_db)):
    if not department_name.strip():
        raise HTTPException(status_code=400, detail="Department name cannot be null or empty")
    department = DepartmentStore(db).get_by_name(department_name)
    if department is None:
        logger.warning("Department with name %s not found", department_name)
        raise HTTPException(status_code=404, detail=f"Department '{department_name}' not found")
    return to_department_out(department)


@router.get("/{department_id}", response_model=DepartmentOut)
def get_department(department_id: int, db: Session = Depends(get_db)):
    _require_positive_id(department_id)
    department = DepartmentStore(db).get_by_id(department_id)
    if department is None:
        logger.warning("Department with ID %s not found", department_id)
        raise HTTPException(status_code=404, detail=f"Department {department_id} not found")
    return to_department_out(department)


@router.post("", response_model=DepartmentOut, status_code=status.HTTP_201_CREATED)
def create_department(payload: DepartmentCreate, request: Request, response: Response, db: Session = Depends(get_db)):
    created = DepartmentStore(db).insert(new_department(payload))
    response.headers["Location"] = str(request.url_for("get_department", department_id=created.id))
    return to_department_out(created)


@router.put("/{department_id}", response_model=DepartmentOut)
def update_department(department_id: int, payload: DepartmentUpdate, db: Session = Depends(get_db)):
    _require_positive_id(department_id)
    updated = DepartmentStore(db).update_by_id(department_id, department_changes(payload))
    if updated is None:
        logger.warning("Department with ID %s not found for update", department_id)
        raise HTTPException(status_code=404, detail=f"Department {department_id} not found")
    return to_department_out(updated)


@router.delete("/{department_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_department(department_id: int, db: Session = Depends(get_db)):
    _require_positive_id(department_id)
    if not DepartmentStore(db).delete_by_id(department_id):
        logger.warning("Department with ID %s not found for deletion", department_id)
        raise HTTPException(status_code=404, detail=f"Department {department_id} not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
