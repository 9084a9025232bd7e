"""
Main FastAPI application.
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder

from app.api.v1 import api_router
from app.core.config import settings
from app.core.exceptions import ContentDefect, ExamEngineError, StoreUnavailable
from app.db.base import engine
from app.models import Base
import logging

# Configure logging BEFORE creating the app
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(levelname)s:\t%(name)s\t%(message)s',
    handlers=[
        logging.StreamHandler()  # Output to console
    ]
)
logging.getLogger("uvicorn").setLevel(logging.INFO)

logger = logging.getLogger(__name__)

# Create database tables
Base.metadata.create_all(bind=engine)

# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Exam composition and scoring engine",
    version="0.1.0",
    openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Configure CORS - Always apply middleware
if settings.BACKEND_CORS_ORIGINS == "*":
    cors_origins = ["*"]
else:
    cors_origins = [str(origin).rstrip("/") for origin in settings.BACKEND_CORS_ORIGINS]
logger.info(f"CORS enabled for origins: {cors_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)


# Global exception handlers
@app.exception_handler(ExamEngineError)
async def exam_engine_exception_handler(request: Request, exc: ExamEngineError):
    """
    Map engine errors to their HTTP status.

    Content defects are logged for administrators; store outages tell the
    client it may retry.
    """
    if isinstance(exc, ContentDefect):
        logger.error(f"Content defect on {request.url.path}: {exc.message}")
    elif isinstance(exc, StoreUnavailable):
        logger.error(f"Store unavailable on {request.url.path}: {exc.message}")

    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": type(exc).__name__},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handle validation errors.

    Args:
        request: Request object
        exc: Validation exception

    Returns:
        JSON response with error details
    """
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=jsonable_encoder({"detail": exc.errors(), "body": exc.body}),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Handle all unhandled exceptions.

    Args:
        request: Request object
        exc: Exception

    Returns:
        JSON response with error message
    """
    logger.exception(f"Unhandled error on {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error", "message": str(exc)},
    )


# Startup and shutdown events
@app.on_event("startup")
async def startup_event():
    """
    Run on application startup.
    """
    logger.info(f"Starting {settings.PROJECT_NAME}")
    logger.info("Documentation available at: http://localhost:8000/docs")


@app.on_event("shutdown")
async def shutdown_event():
    """
    Run on application shutdown.
    """
    logger.info(f"Shutting down {settings.PROJECT_NAME}")


# Health check endpoint
@app.get("/", tags=["Health"])
async def root():
    """
    Root endpoint - Health check.

    Returns:
        Status message
    """
    return {
        "message": "Coona Exam Engine API",
        "status": "healthy",
        "version": "0.1.0",
        "docs": "/docs",
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint.

    Returns:
        Health status
    """
    return {"status": "healthy"}


# Include API routers
app.include_router(api_router, prefix=settings.API_V1_PREFIX)
