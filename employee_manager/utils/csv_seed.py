import csv
import logging
import os
from typing import Dict, List

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..models import Company, Department, Employee
from .validators import parse_date, parse_decimal

logger = logging.getLogger(__name__)

# Standard expected headers for each seed file
EXPECTED_HEADERS = {
    "companies": ["name", "founded", "industry", "description", "headquarters", "website"],
    "departments": ["company", "name"],
    "employees": ["department", "full_name", "birth_date", "hire_date", "salary"],
}

# ----------------------------
# IO Utilities
# ----------------------------
def _clean_header(h: str) -> str:
    # Remove BOM, strip spaces, and lowercase
    return h.replace("\ufeff", "").strip().lower()

def _read_rows(data_dir: str, table: str) -> List[Dict[str, str]]:
    path = os.path.join(data_dir, f"{table}.csv")
    if not os.path.isfile(path):
        raise FileNotFoundError(f"Seed file not found: {path}")

    with open(path, "r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        headers = [_clean_header(h) for h in (reader.fieldnames or [])]
        missing = [c for c in EXPECTED_HEADERS[table] if c not in headers]
        if missing:
            raise ValueError(f"CSV headers missing {missing} for {table}. Got: {reader.fieldnames}")
        rows = []
        for r in reader:
            rows.append({_clean_header(k): (v or "").strip() for k, v in r.items() if k is not None})
        return rows

def _is_empty(db: Session, model) -> bool:
    return (db.scalar(select(func.count()).select_from(model)) or 0) == 0

# ----------------------------
# Per-table seeding
# ----------------------------
def _seed_companies(db: Session, data_dir: str) -> int:
    rows = _read_rows(data_dir, "companies")
    db.add_all([
        Company(
            name=r["name"],
            founded=int(r["founded"]),
            industry=r["industry"],
            description=r["description"],
            headquarters=r["headquarters"],
            website=r["website"],
        )
        for r in rows
    ])
    return len(rows)

def _seed_departments(db: Session, data_dir: str) -> int:
    companies = {c.name: c.id for c in db.scalars(select(Company)).all()}
    if not companies:
        raise RuntimeError("No company found. Companies must be seeded before departments.")

    rows = _read_rows(data_dir, "departments")
    departments = []
    for idx, r in enumerate(rows, start=2):  # start=2 because of header
        if r["company"] not in companies:
            raise ValueError(f"Error in row {idx}: unknown company '{r['company']}'")
        departments.append(Department(company_id=companies[r["company"]], name=r["name"]))
    db.add_all(departments)
    return len(departments)

def _seed_employees(db: Session, data_dir: str) -> int:
    departments = {d.name: d.id for d in db.scalars(select(Department)).all()}
    if not departments:
        raise RuntimeError("Departments must be seeded before employees")

    rows = _read_rows(data_dir, "employees")
    employees = []
    for idx, r in enumerate(rows, start=2):
        try:
            employees.append(Employee(
                department_id=departments[r["department"]],
                full_name=r["full_name"],
                birth_date=parse_date(r["birth_date"]),
                hire_date=parse_date(r["hire_date"]),
                salary=parse_decimal(r["salary"]),
            ))
        except KeyError as e:
            raise ValueError(f"Error in row {idx}: unknown department {e}") from e
        except ValueError as e:
            raise ValueError(f"Error in row {idx}: {e}") from e
    db.add_all(employees)
    return len(employees)

SEEDERS = [
    ("companies", Company, _seed_companies),
    ("departments", Department, _seed_departments),
    ("employees", Employee, _seed_employees),
]

# ----------------------------
# Main seeding logic
# ----------------------------
def seed_database(db: Session, data_dir: str) -> Dict[str, int]:
    """
    Seeds every empty table from ``<data_dir>/<table>.csv``, in dependency order.
    Tables that already hold rows are left untouched.
    Returns the number of inserted rows per table.
    """
    logger.info("Starting database seeding from %s", data_dir)
    result: Dict[str, int] = {}
    for table, model, seeder in SEEDERS:
        if not _is_empty(db, model):
            logger.info("%s already exist, skipping %s seeding", table.capitalize(), table)
            result[table] = 0
            continue
        try:
            result[table] = seeder(db, data_dir)
            db.commit()
        except Exception:
            db.rollback()
            logger.exception("Error seeding %s", table)
            raise
        logger.info("Seeded %s %s", result[table], table)
    return result
