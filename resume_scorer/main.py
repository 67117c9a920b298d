from datetime import datetime
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from contextlib import asynccontextmanager
from resume_scorer.routers import upload
from resume_scorer import settings

from resume_scorer.utils.logging_config import configure_for_environment, get_logger
from resume_scorer.middleware.error_handlers import (
    ExceptionHandlerMiddleware,
    RequestLoggingMiddleware,
    PerformanceMiddleware,
    request_validation_handler,
)

# Configure logging first
configure_for_environment()
logger = get_logger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager"""
    logger.info("Resume Scorer API starting up...")
    logger.info(f"Reference catalog: {settings.CATALOG_PATH}")
    logger.info(f"Submission log: {settings.SUBMISSION_LOG_PATH}")

    if not settings.CATALOG_PATH.exists():
        logger.warning(f"Reference catalog {settings.CATALOG_PATH} does not exist - every job role will be reported as not found")

    settings.UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
    logger.info("Resume Scorer API startup completed")

    yield

    logger.info("Resume Scorer API shutting down...")

app = FastAPI(
    title=settings.API_TITLE,
    description=settings.API_DESCRIPTION,
    version=settings.API_VERSION,
    lifespan=lifespan,
)

app.add_exception_handler(RequestValidationError, request_validation_handler)

# Middleware runs LIFO: request logging wraps timing, which wraps error shaping
app.add_middleware(ExceptionHandlerMiddleware)
app.add_middleware(PerformanceMiddleware, slow_request_threshold=settings.SLOW_REQUEST_THRESHOLD)
app.add_middleware(RequestLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/", response_class=PlainTextResponse)
@app.head("/", response_class=PlainTextResponse)
async def root():
    """Liveness acknowledgement - handles both GET and HEAD requests"""
    logger.debug("Root endpoint accessed")
    return "Hello, world!"

@app.get("/health")
@app.head("/health")
async def health_check():
    """Health check endpoint - handles both GET and HEAD requests"""
    return {
        "status": "healthy",
        "version": settings.API_VERSION,
        "catalog_available": settings.CATALOG_PATH.exists(),
        "timestamp": datetime.utcnow().isoformat(),
    }

app.include_router(upload.router, tags=["upload"])

logger.info("Resume Scorer API initialized successfully")


def run():
    """Console entry point: serve the API with uvicorn"""
    import uvicorn

    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == "__main__":
    run()
