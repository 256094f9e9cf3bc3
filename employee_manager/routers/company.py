import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..db import get_db
from ..mapping import to_company_out
from ..schemas import CompanyOut, CompanyStatistics
from ..settings import SETTINGS
from ..store import CompanyStore, DepartmentStore, EmployeeStore

router = APIRouter(prefix="/company", tags=["company"])
logger = logging.getLogger(__name__)


@router.get("", response_model=CompanyOut)
def get_company(db: Session = Depends(get_db)):
    company = CompanyStore(db).get_first()
    if company is None:
        logger.warning("No company found in the database")
        raise HTTPException(status_code=404, detail="No company found in the database")
    return to_company_out(company)


@router.get("/statistics", response_model=CompanyStatistics)
def get_statistics(db: Session = Depends(get_db)):
    figures = SETTINGS["statistics"]
    statistics = CompanyStatistics(
        total_employees=EmployeeStore(db).count(),
        departments=DepartmentStore(db).count(),
        founded_years=date.today().year - int(figures["founded_year"]),
        projects_completed=int(figures["projects_completed"]),
        client_satisfaction=float(figures["client_satisfaction"]),
        annual_revenue=str(figures["annual_revenue"]),
    )
    logger.info(
        "Company statistics: %s employees, %s departments",
        statistics.total_employees, statistics.departments,
    )
    return statistics
