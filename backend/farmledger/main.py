"""
FarmLedger FastAPI Application Entry Point

- Global exception handlers turn domain exceptions into the failure envelope
- Request context middleware adds X-Request-ID and timing headers
- Routers are thin; services own the business rules
"""
import logging
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from farmledger.config import settings
from farmledger.core.exceptions import FarmLedgerException, InsufficientStockException
from farmledger.database import create_tables, get_db
from farmledger.routers import (
    catalog,
    daily_reports,
    farms,
    invoices,
    manufacturing,
    materials,
    medicine_consumption,
    reports,
)
from farmledger.utils.logging import configure_logging

configure_logging(log_level=settings.LOG_LEVEL, log_format=settings.LOG_FORMAT)
logger = logging.getLogger(__name__)


# ── Lifecycle ─────────────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting %s v%s", settings.APP_NAME, settings.APP_VERSION)
    create_tables()
    yield
    logger.info("%s shutting down.", settings.APP_NAME)


app = FastAPI(
    lifespan=lifespan,
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description=(
        "Poultry farm inventory ledger: warehouses, invoices, feed manufacturing, "
        "medicine consumption and daily production reports"
    ),
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS Middleware ───────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    start = time.perf_counter()
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id

    response = await call_next(request)

    duration_ms = (time.perf_counter() - start) * 1000
    if settings.ENABLE_REQUEST_ID:
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time-Ms"] = f"{duration_ms:.2f}"

    if settings.ENABLE_REQUEST_LOGGING:
        logger.info(
            "request_completed method=%s path=%s status=%s duration_ms=%.2f request_id=%s",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            request_id,
            extra={"request_id": request_id, "status_code": response.status_code},
        )
    return response


def failure_response(status_code: int, code: str, message: str, shortages=None) -> JSONResponse:
    content = {
        "success": False,
        "data": None,
        "error": message,
        "code": code,
        "warnings": [],
    }
    if shortages is not None:
        content["shortages"] = shortages
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content))


# ── Global Exception Handlers ─────────────────────────────────────────────────

@app.exception_handler(FarmLedgerException)
async def farmledger_exception_handler(request: Request, exc: FarmLedgerException) -> JSONResponse:
    shortages = exc.shortages if isinstance(exc, InsufficientStockException) else None
    if exc.status_code >= 500:
        logger.error("%s: %s", exc.code, exc.message, extra={"path": request.url.path})
    return failure_response(exc.status_code, exc.code, exc.message, shortages)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return failure_response(422, "VALIDATION_ERROR", "; ".join(messages) or "Invalid request")


@app.exception_handler(SQLAlchemyError)
async def sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Unhandled database error", extra={"path": request.url.path})
    return failure_response(500, "PERSISTENCE_ERROR", "Database operation failed")


# ── API Routers ───────────────────────────────────────────────────────────────
API_PREFIX = "/api/v1"
app.include_router(farms.router, prefix=API_PREFIX)
app.include_router(farms.warehouse_router, prefix=API_PREFIX)
app.include_router(catalog.router, prefix=API_PREFIX)
app.include_router(materials.router, prefix=API_PREFIX)
app.include_router(invoices.router, prefix=API_PREFIX)
app.include_router(manufacturing.router, prefix=API_PREFIX)
app.include_router(medicine_consumption.router, prefix=API_PREFIX)
app.include_router(daily_reports.router, prefix=API_PREFIX)
app.include_router(reports.router, prefix=API_PREFIX)


# ── Health Endpoints ──────────────────────────────────────────────────────────

LEDGER_TABLES = ("warehouses", "materials", "inventory_movements", "invoices", "manufacturing_invoices", "daily_reports")


@app.get("/", tags=["Health"])
def root():
    return {
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "api": API_PREFIX,
        "docs": "/docs",
        "status": "running",
    }


@app.get("/health", tags=["Health"])
def health_check():
    return {"status": "healthy", "app": settings.APP_NAME}


@app.get("/ready", tags=["Health"])
def readiness_check(request: Request, db: Session = Depends(get_db)):
    """Ready once the database answers and the ledger tables exist."""
    database = {"enabled": settings.READINESS_CHECK_DATABASE, "ok": True, "missing_tables": [], "error": None}

    if settings.READINESS_CHECK_DATABASE:
        try:
            db.execute(text("SELECT 1"))
            inspector = inspect(db.connection())
            database["missing_tables"] = [t for t in LEDGER_TABLES if not inspector.has_table(t)]
            database["ok"] = not database["missing_tables"]
        except SQLAlchemyError as exc:
            database["ok"] = False
            database["error"] = str(exc)
        if not database["ok"]:
            logger.warning("Readiness check failed", extra={"checks": database})

    return JSONResponse(
        status_code=200 if database["ok"] else 503,
        content={
            "status": "ready" if database["ok"] else "not_ready",
            "app": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "request_id": getattr(request.state, "request_id", None),
            "checks": {"database": database},
        },
    )
