import logging
import os
import time
from contextlib import asynccontextmanager

import redis
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from . import config, models, models_billing, models_gallery, models_records  # noqa: F401
from .database import Base, engine
from .domain.appointments import router as appointments_router
from .domain.auth import router as auth_router
from .domain.billing import router as billing_router
from .domain.clients import router as clients_router
from .domain.gallery import router as gallery_router
from .domain.packages import router as packages_router
from .domain.pets import router as pets_router
from .domain.portals import router as portals_router
from .domain.protocols import router as protocols_router
from .domain.records import router as records_router
from .domain.reports import router as reports_router
from .domain.services import router as services_router
from .domain.tasks import router as tasks_router
from .domain.uploads import router as uploads_router
from .domain.users import router as users_router
from .security_headers import SecurityHeadersMiddleware

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("botocore").setLevel(logging.WARNING)
logging.getLogger("urllib3").setLevel(logging.WARNING)

SECURITY_HEADERS_ENABLED = os.getenv("SECURITY_HEADERS_ENABLED", "true").lower() == "true"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("Database tables created successfully")
    except SQLAlchemyError as e:
        # Ignore "already exists" errors from race conditions between workers
        error_msg = str(e)
        if "already exists" in error_msg or "duplicate key" in error_msg:
            logger.info("Database tables already exist (created by another worker)")
        else:
            logger.error(f"Failed to create database tables: {e}")
            raise

    if config.RATE_LIMIT_ENABLED:
        try:
            from .rate_limiter import get_redis_client

            get_redis_client()  # Connection test
            logger.info("Redis connection established")
        except redis.RedisError as e:
            logger.warning(f"Redis connection failed - rate limited endpoints will return 503: {e}")
    else:
        logger.warning("Rate limiting DISABLED - only use in development!")

    logger.info(f"Object storage backend: {config.STORAGE_BACKEND}")
    yield
    logger.info("Application shutting down...")


app = FastAPI(title="PawTrack API", version="1.0.0", lifespan=lifespan)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(exc.errors())})


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()
    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(f"{request.method} {request.url.path} - Error: {str(e)}")
        raise
    duration_ms = (time.time() - start_time) * 1000
    logger.info(f"{request.method} {request.url.path} - {response.status_code} ({duration_ms:.1f}ms)")
    return response


if SECURITY_HEADERS_ENABLED:
    app.add_middleware(
        SecurityHeadersMiddleware, exclude_paths=["/health", "/docs", "/openapi.json"]
    )
    logger.info("Security headers enabled")
else:
    logger.warning("Security headers DISABLED - only use in development!")


# CORS Configuration
ALLOWED_ORIGINS = os.getenv(
    "ALLOWED_ORIGINS",
    "http://localhost:5173,http://localhost:3000",
).split(",")

logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
    expose_headers=["Retry-After", "Content-Disposition"],
)

# Routes
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(clients_router)
app.include_router(pets_router)
app.include_router(services_router)
app.include_router(appointments_router)
app.include_router(billing_router)
app.include_router(packages_router)
app.include_router(records_router)
app.include_router(protocols_router)
app.include_router(tasks_router)
app.include_router(gallery_router)
app.include_router(uploads_router)
app.include_router(reports_router)
app.include_router(portals_router)


@app.get("/")
def root():
    return {"message": "PawTrack API is running"}


@app.get("/health")
def health():
    return {"status": "healthy"}
