import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from . import models  # noqa: F401  registers tables on Base.metadata
from .db import Base, SessionLocal, engine
from .routers import company, departments, employees
from .settings import SETTINGS
from .utils.csv_seed import seed_database
from .utils.validators import SalaryUpdateError

logging.basicConfig(
    level=SETTINGS["logging"]["level"],
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if SETTINGS["database"]["create_tables"]:
        Base.metadata.create_all(bind=engine)
    if SETTINGS["seed"]["enabled"]:
        db = SessionLocal()
        try:
            seed_database(db, SETTINGS["seed"]["data_dir"])
        finally:
            db.close()
    yield


# Initialize FastAPI application
app = FastAPI(
    title=SETTINGS["api"]["title"],
    version=SETTINGS["api"]["version"],
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=SETTINGS["api"]["cors_origins"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
prefix = SETTINGS["api"]["prefix"]
app.include_router(company.router, prefix=prefix)
app.include_router(departments.router, prefix=prefix)
app.include_router(employees.router, prefix=prefix)


# Error mapping
@app.exception_handler(SalaryUpdateError)
async def salary_update_error(request: Request, exc: SalaryUpdateError):
    logger.warning("Salary update validation failed: %s", exc)
    return JSONResponse(
        status_code=400,
        content={
            "message": "Salary update validation failed",
            "errors": [{"field": v.field, "message": v.message} for v in exc.violations],
        },
    )

@app.exception_handler(ValueError)
async def invalid_argument(request: Request, exc: ValueError):
    logger.warning("Rejected request %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=400, content={"detail": str(exc)})

@app.exception_handler(IntegrityError)
async def integrity_conflict(request: Request, exc: IntegrityError):
    logger.warning("Integrity conflict on %s %s: %s", request.method, request.url.path, exc.orig)
    return JSONResponse(
        status_code=409,
        content={"detail": "The change conflicts with existing data (duplicate name or rows still referencing it)"},
    )

@app.exception_handler(Exception)
async def unexpected_error(request: Request, exc: Exception):
    logger.error("An unhandled exception occurred during request processing", exc_info=exc)
    return JSONResponse(
        status_code=500,
        media_type="application/problem+json",
        content={
            "type": "500",
            "title": "Internal server error",
            "status": 500,
            "detail": "An unexpected error occurred",
            "instance": request.url.path,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )


# Health check endpoint
@app.get("/health")
def health():
    return {"status": "ok"}
