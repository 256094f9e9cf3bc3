import os

# Point the application at SQLite before it is imported
os.environ.setdefault("TESTING", "1")

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import create_engine, delete
from sqlalchemy.orm import sessionmaker
from employee_manager.db import Base, get_db
from employee_manager.main import app
from employee_manager.models import Company, Department, Employee

# Force the use of SQLite for testing
TEST_DB_URL = "sqlite:///./test.db"

engine = create_engine(TEST_DB_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

API = "/api/v1"

# Fixture for setting up the test database
@pytest.fixture(scope="session", autouse=True)
def setup_test_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)

# Fixture to override the get_db dependency in FastAPI
@pytest.fixture(autouse=True)
def override_get_db():
    def _get_test_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()
    app.dependency_overrides[get_db] = _get_test_db
    yield
    app.dependency_overrides.pop(get_db, None)

# Every test starts from empty tables
@pytest.fixture(autouse=True)
def clean_tables():
    yield
    with TestingSessionLocal() as db:
        db.execute(delete(Employee))
        db.execute(delete(Department))
        db.execute(delete(Company))
        db.commit()

@pytest.fixture
def db_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

@pytest.fixture
def company(db_session):
    company = Company(
        name="Employee Manager Corp",
        founded=2024,
        industry="Software Development",
        description="Leading provider of employee management solutions",
        headquarters="Tech City, Innovation State",
        website="https://employeemanager.com",
    )
    db_session.add(company)
    db_session.commit()
    db_session.refresh(company)
    return company

@pytest.fixture
def departments(db_session, company):
    names = ["IT Department", "HR Department", "Finance Department"]
    rows = {name: Department(company_id=company.id, name=name) for name in names}
    db_session.add_all(rows.values())
    db_session.commit()
    for row in rows.values():
        db_session.refresh(row)
    return rows

@pytest.fixture
def make_employee(db_session, departments):
    """Factory inserting one employee; defaults to the IT department."""
    def _make(full_name, salary="50000", department="IT Department",
              birth_date=date(1985, 3, 15), hire_date=date(2020, 1, 15)):
        employee = Employee(
            department_id=departments[department].id,
            full_name=full_name,
            birth_date=birth_date,
            hire_date=hire_date,
            salary=Decimal(salary),
        )
        db_session.add(employee)
        db_session.commit()
        db_session.refresh(employee)
        return employee
    return _make
