"""
Custom Exception Classes for the Resume Analyzer API
"""
from typing import Dict, Any
from fastapi import HTTPException


class ResumeAnalyzerError(Exception):
    """Base exception for the Resume Analyzer API"""

    # Message shown to clients instead of the internal one, when set
    public_message: str = None

    def __init__(
        self,
        message: str,
        error_code: str = None,
        details: Dict[str, Any] = None,
        cause: Exception = None
    ):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        self.cause = cause
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/response"""
        result = {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }
        if self.cause:
            result["cause"] = str(self.cause)
        return result


class ValidationError(ResumeAnalyzerError):
    """Raised when request data fails boundary validation"""

    def __init__(self, message: str, field: str = None, value: Any = None, **kwargs):
        details = kwargs.pop('details', {})
        if field:
            details['field'] = field
        if value is not None:
            details['invalid_value'] = str(value)
        kwargs.setdefault('error_code', "VALIDATION_ERROR")
        super().__init__(message, details=details, **kwargs)


class UploadTooLarge(ValidationError):
    """Raised when an uploaded document exceeds the size limit"""

    def __init__(self, message: str, size: int = None, limit: int = None, **kwargs):
        details = kwargs.pop('details', {})
        if size is not None:
            details['size'] = size
        if limit is not None:
            details['limit'] = limit
        super().__init__(message, field="resume", details=details, error_code="UPLOAD_TOO_LARGE", **kwargs)


class UnsupportedFormat(ResumeAnalyzerError):
    """Raised when an uploaded document is neither a PDF nor an image"""

    def __init__(self, message: str = "Upload PDF or image", filename: str = None, content_type: str = None, **kwargs):
        details = kwargs.pop('details', {})
        if filename:
            details['filename'] = filename
        if content_type:
            details['content_type'] = content_type
        super().__init__(message, error_code="UNSUPPORTED_FORMAT", details=details, **kwargs)


class ExtractionFailure(ResumeAnalyzerError):
    """Raised when document bytes cannot be converted to text"""

    def __init__(self, message: str, document_kind: str = None, **kwargs):
        details = kwargs.pop('details', {})
        if document_kind:
            details['document_kind'] = document_kind
        super().__init__(message, error_code="EXTRACTION_FAILURE", details=details, **kwargs)


class UpstreamServiceFailure(ResumeAnalyzerError):
    """Raised when the reasoning service is unreachable, erroring or timed out"""

    public_message = "Analysis failed. Please try again later."

    def __init__(self, message: str, service_name: str = None, status_code: int = None, **kwargs):
        details = kwargs.pop('details', {})
        if service_name:
            details['service_name'] = service_name
        if status_code:
            details['status_code'] = status_code
        super().__init__(message, error_code="UPSTREAM_SERVICE_FAILURE", details=details, **kwargs)


class MalformedUpstreamResponse(ResumeAnalyzerError):
    """Raised when the reasoning service replied with output of the wrong shape"""

    public_message = "Analysis failed. Please try again later."

    def __init__(self, message: str, raw_response: str = None, **kwargs):
        details = kwargs.pop('details', {})
        if raw_response is not None:
            details['raw_response'] = raw_response[:500]
        super().__init__(message, error_code="MALFORMED_UPSTREAM_RESPONSE", details=details, **kwargs)


class RenderFailure(ResumeAnalyzerError):
    """Raised when the PDF report cannot be generated"""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault('error_code', "RENDER_FAILURE")
        super().__init__(message, **kwargs)


class DatabaseError(ResumeAnalyzerError):
    """Raised when history storage operations fail"""

    def __init__(self, message: str, operation: str = None, collection: str = None, **kwargs):
        details = kwargs.pop('details', {})
        if operation:
            details['operation'] = operation
        if collection:
            details['collection'] = collection
        super().__init__(message, error_code="DATABASE_ERROR", details=details, **kwargs)


# HTTP Exception Mapping
def map_to_http_exception(exc: ResumeAnalyzerError) -> HTTPException:
    """Map custom exceptions to HTTP exceptions"""

    status_code_mapping = {
        ValidationError: 400,
        UploadTooLarge: 413,
        UnsupportedFormat: 415,
        ExtractionFailure: 422,
        UpstreamServiceFailure: 502,
        MalformedUpstreamResponse: 502,
        RenderFailure: 500,
        DatabaseError: 500,
    }

    status_code = status_code_mapping.get(type(exc), 500)

    if exc.public_message:
        detail = {
            "error": {"error_type": exc.__class__.__name__, "error_code": exc.error_code},
            "message": exc.public_message
        }
    else:
        detail = {
            "error": exc.to_dict(),
            "message": exc.message
        }

    return HTTPException(status_code=status_code, detail=detail)


# Exception context manager for better error handling
class ExceptionContext:
    """Context manager that logs a failing operation and re-raises it as a typed error"""

    def __init__(self, operation: str, logger=None, wrap_as=ResumeAnalyzerError, **context):
        self.operation = operation
        self.logger = logger
        self.wrap_as = wrap_as
        self.context = context

    def __enter__(self):
        if self.logger:
            self.logger.debug(f"Starting operation: {self.operation}", extra=self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            if self.logger:
                self.logger.debug(f"Operation completed: {self.operation}", extra=self.context)
            return False

        if self.logger:
            self.logger.error(
                f"Operation failed: {self.operation} - {exc_val}",
                extra={**self.context, "exception_type": exc_type.__name__}
            )

        # Re-raise custom exceptions as-is
        if isinstance(exc_val, ResumeAnalyzerError) or not isinstance(exc_val, Exception):
            return False

        raise self.wrap_as(
            f"{self.operation} failed: {exc_val}",
            details=dict(self.context),
            cause=exc_val
        ) from exc_val
