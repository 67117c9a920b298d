"""
Custom Exception Classes for the Resume Scorer API
"""
from typing import Dict, Any, Type
from fastapi import HTTPException


class ResumeScorerError(Exception):
    """Base exception for the Resume Scorer API"""

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


class ValidationError(ResumeScorerError):
    """Raised when request data validation fails"""

    def __init__(self, message: str, field: str = None, value: Any = None, **kwargs):
        details = kwargs.pop('details', None) or {}
        if field:
            details['field'] = field
        if value is not None:
            details['invalid_value'] = str(value)
        super().__init__(message, error_code="VALIDATION_ERROR", details=details, **kwargs)


class ExtractionError(ResumeScorerError):
    """Raised when text cannot be extracted from an uploaded document"""

    def __init__(self, message: str, filename: str = None, document_type: str = None, **kwargs):
        details = kwargs.pop('details', None) or {}
        if filename:
            details['filename'] = filename
        if document_type:
            details['document_type'] = document_type
        super().__init__(message, error_code="EXTRACTION_ERROR", details=details, **kwargs)


class CatalogError(ResumeScorerError):
    """Raised when the job role catalog is unreadable or malformed"""

    def __init__(self, message: str, path: str = None, missing_columns: list = None, **kwargs):
        details = kwargs.pop('details', None) or {}
        if path:
            details['path'] = path
        if missing_columns:
            details['missing_columns'] = list(missing_columns)
        super().__init__(message, error_code="CATALOG_ERROR", details=details, **kwargs)


class SubmissionLogError(ResumeScorerError):
    """Raised when the submission log cannot be read or written"""

    def __init__(self, message: str, path: str = None, **kwargs):
        details = kwargs.pop('details', None) or {}
        if path:
            details['path'] = path
        super().__init__(message, error_code="SUBMISSION_LOG_ERROR", details=details, **kwargs)


class ConfigurationError(ResumeScorerError):
    """Raised when configuration is invalid or missing"""

    def __init__(self, message: str, config_key: str = None, config_value: Any = None, **kwargs):
        details = kwargs.pop('details', None) or {}
        if config_key:
            details['config_key'] = config_key
        if config_value is not None:
            details['config_value'] = str(config_value)
        super().__init__(message, error_code="CONFIGURATION_ERROR", details=details, **kwargs)


STATUS_CODE_MAPPING: Dict[Type[ResumeScorerError], int] = {
    ValidationError: 400,
    ConfigurationError: 500,
    ExtractionError: 500,
    CatalogError: 500,
    SubmissionLogError: 500,
}


def map_to_http_exception(exc: ResumeScorerError) -> HTTPException:
    """Map custom exceptions to HTTP exceptions"""
    status_code = STATUS_CODE_MAPPING.get(type(exc), 500)

    # Processing failures are reported with the request context prefixed
    if status_code >= 500:
        message = f"Error processing request: {exc.message}"
    else:
        message = exc.message

    detail = {
        "error": message,
        "error_code": exc.error_code,
        "details": exc.to_dict()
    }

    return HTTPException(status_code=status_code, detail=detail)


class ExceptionContext:
    """Context manager that wraps failures of a named operation into a domain exception"""

    def __init__(self, operation: str, error_class: Type[ResumeScorerError] = ResumeScorerError, logger=None, **context):
        self.operation = operation
        self.error_class = error_class
        self.logger = logger
        self.context = context

    def __enter__(self):
        if self.logger:
            self.logger.debug(f"Starting operation: {self.operation}", extra={"context": self.context})
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            if self.logger:
                self.logger.debug(f"Operation completed: {self.operation}", extra={"context": self.context})
            return False

        if self.logger:
            self.logger.error(
                f"Operation failed: {self.operation} - {exc_val}",
                extra={"context": self.context, "exception_type": exc_type.__name__}
            )

        # Re-raise custom exceptions as-is
        if isinstance(exc_val, ResumeScorerError):
            return False

        # Let interpreter-level signals through untouched
        if not isinstance(exc_val, Exception):
            return False

        wrapped_exc = self.error_class(
            f"{self.operation} failed: {exc_val}",
            details=dict(self.context),
            cause=exc_val
        )
        raise wrapped_exc from exc_val
