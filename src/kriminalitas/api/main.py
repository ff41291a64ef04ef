"""FastAPI application serving the crime dashboard data."""
import os
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from kriminalitas.api.routers import areas, health, incidents, reference, reports
from kriminalitas.models.base import Store
from kriminalitas.services.exceptions import CrimeDataError
from kriminalitas.utils.config import settings
from kriminalitas.utils.logging import get_logger, setup_logging

# Setup logging
setup_logging("api", settings.logging.level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the store at startup and dispose of it at shutdown."""
    logger.info("Starting crime reporting API")

    store: Store = app.state.store
    store.open()

    if os.getenv("CREATE_TABLES", "").lower() in ("1", "true", "yes"):
        # Import models to register all tables with Base.metadata
        from kriminalitas import models  # noqa: F401
        from kriminalitas.models.base import Base

        logger.info("Creating database tables...")
        Base.metadata.create_all(store.engine)

    logger.info("API started successfully", startup_time=datetime.now())

    yield

    logger.info("Shutting down crime reporting API")
    store.close()


# Create FastAPI app
app = FastAPI(
    title="Kriminalitas Crime Reporting API",
    description="REST API for crime incidents, district statistics and area maps",
    version="1.0.0",
    lifespan=lifespan,
)
app.state.store = Store(settings.database)

# Never use "*" in production with allow_credentials=True
allowed_origins = os.getenv(
    "CORS_ORIGINS", "http://localhost:3000,http://localhost:8000"
).split(",")

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)


@app.exception_handler(CrimeDataError)
async def crime_data_error_handler(request: Request, exc: CrimeDataError):
    if exc.status_code >= 500:
        logger.error("Request failed", path=request.url.path, error=exc.message, details=exc.details)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request", "details": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled error", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error", "details": str(exc)},
    )


# Include routers
app.include_router(health.router)
app.include_router(incidents.router, prefix="/api")
app.include_router(reports.router, prefix="/api")
app.include_router(reference.router, prefix="/api")
app.include_router(areas.router, prefix="/api")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "kriminalitas.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True,
        log_level=settings.logging.level.lower(),
    )
