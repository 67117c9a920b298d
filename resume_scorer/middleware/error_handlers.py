"""
Exception handling and request logging middleware for the Resume Scorer API
"""
import time
import traceback
import uuid
from datetime import datetime
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.middleware.base import BaseHTTPMiddleware

from resume_scorer.utils.exceptions import ResumeScorerError, ValidationError, map_to_http_exception
from resume_scorer.utils.logging_config import get_logger

logger = get_logger(__name__)

# Multipart parts that must be files; anything else sent under these names counts as no upload
FILE_FIELDS = {"resume": "No file uploaded"}


def _request_id(request: Request) -> str:
    request_id = getattr(request.state, "request_id", None)
    if request_id is None:
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
    return request_id


def _summarize(errors) -> list:
    # ctx/input may hold objects that are not JSON serializable
    return [{"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")} for e in errors]


def create_error_response(request_id: str, status_code: int, detail: Any) -> JSONResponse:
    """Create standardized error response"""

    if isinstance(detail, str):
        detail = {"error": detail}
    elif not isinstance(detail, dict):
        detail = {"error": str(detail)}

    error_response = {
        "success": False,
        "timestamp": datetime.utcnow().isoformat(),
        "request_id": request_id,
        "status_code": status_code,
        **detail
    }

    return JSONResponse(
        status_code=status_code,
        content=error_response,
        headers={"X-Request-ID": request_id}
    )


def _error_response_for(request: Request, exc: ResumeScorerError) -> JSONResponse:
    request_id = _request_id(request)
    logger.error(
        f"Custom exception in {request.method} {request.url.path}: {exc.message}",
        extra={
            "request_id": request_id,
            "exception_type": exc.__class__.__name__,
            "error_code": exc.error_code,
            "details": exc.details,
            "method": request.method,
            "path": request.url.path
        }
    )

    http_exc = map_to_http_exception(exc)
    return create_error_response(request_id, http_exc.status_code, http_exc.detail)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Shape FastAPI request validation failures like every other API error.

    A non-file value posted under a file field is reported as a missing upload.
    """
    errors = exc.errors()
    for error in errors:
        loc = tuple(error.get("loc", ()))
        if len(loc) == 2 and loc[0] == "body" and loc[1] in FILE_FIELDS:
            return _error_response_for(request, ValidationError(FILE_FIELDS[loc[1]], field=loc[1]))

    request_id = _request_id(request)
    logger.error(
        f"Validation error in {request.method} {request.url.path}: {exc}",
        extra={
            "request_id": request_id,
            "validation_errors": _summarize(errors),
            "method": request.method,
            "path": request.url.path
        }
    )
    return create_error_response(request_id, 422, {
        "error": "Request data validation failed",
        "validation_errors": _summarize(errors)
    })


class ExceptionHandlerMiddleware(BaseHTTPMiddleware):
    """Turns exceptions escaping a route into the standard JSON error body"""

    async def dispatch(self, request: Request, call_next):
        request_id = _request_id(request)

        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response

        except ResumeScorerError as exc:
            return _error_response_for(request, exc)

        except Exception as exc:
            logger.error(
                f"Unhandled exception in {request.method} {request.url.path}: {str(exc)}",
                extra={
                    "request_id": request_id,
                    "exception_type": exc.__class__.__name__,
                    "traceback": traceback.format_exc(),
                    "method": request.method,
                    "path": request.url.path
                },
                exc_info=True
            )

            return create_error_response(request_id, 500, {
                "error": f"Error processing request: {exc}",
                "error_code": "INTERNAL_ERROR"
            })


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for detailed request/response logging"""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        request_id = _request_id(request)

        logger.info(
            f"Request started: {request.method} {request.url.path}",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "query_params": dict(request.query_params),
                "client_ip": request.client.host if request.client else "unknown"
            }
        )

        # Uploads are never echoed into the logs, only their size
        request_body = None
        if request.method in ["POST", "PUT", "PATCH"]:
            content_type = request.headers.get("content-type", "")
            if content_type.startswith("multipart/"):
                request_body = f"<Multipart body: {request.headers.get('content-length', 'unknown')} bytes>"
            else:
                try:
                    body = await request.body()
                    if len(body) < 10000:
                        request_body = body.decode('utf-8', errors='ignore')[:1000]
                    else:
                        request_body = f"<Large body: {len(body)} bytes>"
                except Exception:
                    request_body = "<Unable to read body>"

        logger.debug(
            f"Request details: {request.method} {request.url}",
            extra={
                "request_id": request_id,
                "method": request.method,
                "url": str(request.url),
                "body": request_body,
            }
        )

        try:
            response = await call_next(request)
            processing_time = time.time() - start_time

            logger.info(
                f"Request completed: {request.method} {request.url.path} - {response.status_code} in {processing_time:.3f}s",
                extra={
                    "request_id": request_id,
                    "status_code": response.status_code,
                    "processing_time": processing_time
                }
            )

            return response

        except Exception as exc:
            processing_time = time.time() - start_time
            logger.error(
                f"Request failed: {request.method} {request.url.path} after {processing_time:.3f}s",
                extra={
                    "request_id": request_id,
                    "processing_time": processing_time,
                    "exception": str(exc)
                }
            )
            raise


class PerformanceMiddleware(BaseHTTPMiddleware):
    """Middleware for performance monitoring"""

    def __init__(self, app, slow_request_threshold: float = 2.0):
        super().__init__(app)
        self.slow_request_threshold = slow_request_threshold

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        request_id = _request_id(request)

        response = await call_next(request)

        processing_time = time.time() - start_time

        if processing_time > self.slow_request_threshold:
            logger.warning(
                f"Slow request detected: {request.method} {request.url.path} took {processing_time:.3f}s",
                extra={
                    "request_id": request_id,
                    "processing_time": processing_time,
                    "threshold": self.slow_request_threshold,
                    "method": request.method,
                    "path": request.url.path
                }
            )
        else:
            logger.debug(
                f"Request performance: {request.method} {request.url.path} - {processing_time:.3f}s",
                extra={
                    "request_id": request_id,
                    "processing_time": processing_time
                }
            )

        response.headers["X-Processing-Time"] = f"{processing_time:.3f}"

        return response
