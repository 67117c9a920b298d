import pytest
from resume_scorer.utils.exceptions import (
    ResumeScorerError, ValidationError, ExtractionError, CatalogError,
    SubmissionLogError, ExceptionContext, map_to_http_exception,
)

class TestExceptionMapping:
    """Test cases for the exception to HTTP status mapping"""

    def test_validation_error_is_bad_request(self):
        http_exc = map_to_http_exception(ValidationError("No file uploaded", field="resume"))

        assert http_exc.status_code == 400
        assert http_exc.detail["error"] == "No file uploaded"
        assert http_exc.detail["error_code"] == "VALIDATION_ERROR"
        assert http_exc.detail["details"]["details"]["field"] == "resume"

    @pytest.mark.parametrize("exc_class", [ExtractionError, CatalogError, SubmissionLogError, ResumeScorerError])
    def test_processing_errors_are_server_errors(self, exc_class):
        http_exc = map_to_http_exception(exc_class("boom"))

        assert http_exc.status_code == 500
        assert http_exc.detail["error"] == "Error processing request: boom"


class TestExceptionContext:
    """Test cases for wrapping library failures"""

    def test_wraps_foreign_exceptions(self):
        with pytest.raises(ExtractionError) as exc_info:
            with ExceptionContext("Reading file", error_class=ExtractionError, filename="cv.pdf"):
                raise OSError("permission denied")

        assert exc_info.value.details == {"filename": "cv.pdf"}
        assert isinstance(exc_info.value.cause, OSError)
        assert "permission denied" in exc_info.value.message

    def test_domain_exceptions_pass_through(self):
        with pytest.raises(CatalogError):
            with ExceptionContext("Loading", error_class=ExtractionError):
                raise CatalogError("bad catalog")

    def test_success_is_untouched(self):
        with ExceptionContext("Nothing") as ctx:
            value = 1
        assert value == 1
        assert ctx.operation == "Nothing"
