import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm.exc import StaleDataError

from . import models  # noqa: F401
from .config import FRONTEND_URL, LOG_LEVEL, SEED_DEFAULT_SERVICES
from .database import Base, SessionLocal, engine
from .domain.assignments.router import router as employees_router
from .domain.catalog.router import admin_router as admin_services_router
from .domain.catalog.router import router as services_router
from .domain.dashboard.router import router as dashboard_router
from .domain.progress.router import router as employee_work_router
from .domain.scheduling.router import router as scheduling_router
from .domain.vehicles.router import router as vehicles_router
from .domain.work_items.router import admin_router as admin_work_items_router
from .domain.work_items.router import router as work_items_router
from .seed import seed_services
from .shared.errors import ServiceHubError

# Configure logging
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("Database tables created successfully")
    except Exception as e:
        # Ignore "already exists" errors from race conditions between workers
        error_msg = str(e)
        if "already exists" in error_msg or "duplicate key" in error_msg:
            logger.info("Database tables already exist (created by another worker)")
        else:
            logger.error(f"Failed to create database tables: {e}")
            raise

    if SEED_DEFAULT_SERVICES:
        db = SessionLocal()
        try:
            seed_services(db)
        except Exception as e:
            logger.warning(f"⚠️ Default service seeding skipped: {e}")
            db.rollback()
        finally:
            db.close()

    yield
    logger.info("Application shutting down...")


app = FastAPI(title="ServiceHub API", version="1.0.0", lifespan=lifespan)


@app.exception_handler(ServiceHubError)
async def servicehub_error_handler(request: Request, exc: ServiceHubError):
    """Map domain errors to 422 / 404 / 409 with a user-facing detail"""
    logger.warning(f"{request.method} {request.url.path} - {type(exc).__name__}: {exc.detail}")
    content = {"detail": exc.detail}
    if exc.field:
        content["field"] = exc.field
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(StaleDataError)
async def stale_data_handler(request: Request, exc: StaleDataError):
    """A concurrent request updated the same work item first"""
    logger.warning(f"{request.method} {request.url.path} - concurrent update rejected: {exc}")
    return JSONResponse(
        status_code=409,
        content={"detail": "The work item was modified by another request. Reload and try again."},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(exc.errors())})


@app.middleware("http")
async def log_requests(request: Request, call_next):
    try:
        response = await call_next(request)
        return response
    except Exception as e:
        logger.error(f"{request.method} {request.url.path} - Error: {str(e)}")
        raise


# CORS Configuration
ALLOWED_ORIGINS = [origin.strip() for origin in FRONTEND_URL.split(",") if origin.strip()]
logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

# Routes
app.include_router(services_router)
app.include_router(admin_services_router)
app.include_router(scheduling_router)
app.include_router(vehicles_router)
app.include_router(work_items_router)
app.include_router(admin_work_items_router)
app.include_router(employees_router)
app.include_router(employee_work_router)
app.include_router(dashboard_router)


@app.get("/")
def root():
    return {"message": "ServiceHub API is running"}


@app.get("/health")
def health():
    return {"status": "healthy"}
