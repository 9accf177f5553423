"""
Global Exception Handler Middleware for the Resume Analyzer API
"""
import time
import traceback
import uuid
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from pydantic import ValidationError

from resume_analyzer.utils.exceptions import ResumeAnalyzerError, map_to_http_exception
from resume_analyzer.utils.logging_config import get_logger

logger = get_logger(__name__)

INTERNAL_ERROR = {
    "error": "Internal server error",
    "message": "An unexpected error occurred. Please try again later.",
}


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or str(uuid.uuid4())


def _request_extra(request: Request, **fields) -> Dict[str, Any]:
    return {"request_id": _request_id(request), "method": request.method, "path": request.url.path, **fields}


def error_response(request_id: str, status_code: int, detail: Any) -> JSONResponse:
    """Build the {success: false, ...} envelope every failed request returns"""
    if not isinstance(detail, dict):
        detail = {"message": str(detail)}

    content = {
        "success": False,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "request_id": request_id,
        "status_code": status_code,
        **detail
    }
    return JSONResponse(status_code=status_code, content=content, headers={"X-Request-ID": request_id})


class ExceptionHandlerMiddleware(BaseHTTPMiddleware):
    """Turns pipeline errors into JSON responses; upstream and internal details stay in the logs"""

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        try:
            response = await call_next(request)
        except ResumeAnalyzerError as exc:
            http_exc = map_to_http_exception(exc)
            log = logger.warning if http_exc.status_code < 500 else logger.error
            log(
                f"{exc.__class__.__name__} on {request.method} {request.url.path}: {exc.message}",
                extra=_request_extra(request, error_code=exc.error_code, details=exc.details),
            )
            return error_response(request_id, http_exc.status_code, http_exc.detail)
        except ValidationError as exc:
            logger.error(
                f"Model validation failed on {request.method} {request.url.path}: {exc}",
                extra=_request_extra(request),
            )
            return error_response(request_id, 400, {
                "error": "Data validation failed",
                "message": "Invalid data format or values",
                "validation_errors": exc.errors(include_url=False, include_context=False),
            })
        except HTTPException as exc:
            logger.warning(
                f"HTTP {exc.status_code} on {request.method} {request.url.path}: {exc.detail}",
                extra=_request_extra(request),
            )
            return error_response(request_id, exc.status_code, exc.detail)
        except Exception as exc:
            logger.error(
                f"Unhandled exception in {request.method} {request.url.path}: {exc}",
                extra=_request_extra(request, exception_type=exc.__class__.__name__, traceback=traceback.format_exc()),
                exc_info=True,
            )
            return error_response(request_id, 500, INTERNAL_ERROR)

        response.headers["X-Request-ID"] = request_id
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status and upload size; never the uploaded document or job description"""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        logger.debug(
            f"Request: {request.method} {request.url.path}",
            extra=_request_extra(
                request,
                content_type=request.headers.get("content-type"),
                content_length=request.headers.get("content-length"),
                client_ip=request.client.host if request.client else "unknown",
            ),
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                f"Request failed: {request.method} {request.url.path} after {time.time() - start_time:.3f}s",
                extra=_request_extra(request, exception=str(exc)),
            )
            raise

        processing_time = time.time() - start_time
        logger.info(
            f"Response: {request.method} {request.url.path} - {response.status_code} in {processing_time:.3f}s",
            extra=_request_extra(request, status_code=response.status_code, processing_time=processing_time),
        )
        return response


class PerformanceMiddleware(BaseHTTPMiddleware):
    """Flags slow requests; OCR and upstream reasoning calls dominate latency"""

    def __init__(self, app, slow_request_threshold: float = 2.0):
        super().__init__(app)
        self.slow_request_threshold = slow_request_threshold

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        processing_time = time.time() - start_time

        if processing_time > self.slow_request_threshold:
            logger.warning(
                f"Slow request detected: {request.method} {request.url.path} took {processing_time:.3f}s",
                extra=_request_extra(request, processing_time=processing_time, threshold=self.slow_request_threshold),
            )

        response.headers["X-Processing-Time"] = f"{processing_time:.3f}"
        return response
