import inspect
import pytest
from fastapi.testclient import TestClient
from unittest.mock import patch, MagicMock
from resume_scorer.models.schemas import ROLE_NOT_FOUND_MESSAGE
from resume_scorer.services.submission_log import SubmissionLog
from resume_scorer.utils.exceptions import ExtractionError, SubmissionLogError

CATALOG_CSV = (
    "JOB ROLES,PROGRAMMING SKILLS,FRAMEWORKS\n"
    'Backend Engineer,"Go,SQL",gRPC\n'
)

@pytest.fixture
def test_app():
    from resume_scorer.main import app
    return app

@pytest.fixture
def client(test_app):
    return TestClient(test_app)

@pytest.fixture
def workspace(tmp_path):
    catalog = tmp_path / "catalog.csv"
    catalog.write_text(CATALOG_CSV, encoding="utf-8")
    upload_dir = tmp_path / "uploads"
    log = SubmissionLog(tmp_path / "userdata.xlsx")
    with patch("resume_scorer.routers.upload.CATALOG_PATH", catalog), \
         patch("resume_scorer.routers.upload.UPLOAD_DIR", upload_dir), \
         patch("resume_scorer.routers.upload.submission_log", log):
        yield {"catalog": catalog, "upload_dir": upload_dir, "log": log}

def resume_file(text=b"I used Go and gRPC daily", name="resume.txt"):
    return {"resume": (name, text, "text/plain")}

FORM = {
    "firstName": "Ada",
    "email": "ada@example.com",
    "phone": "555-0100",
    "jobRole": "Backend Engineer",
}

class TestRootEndpoints:
    """Test cases for liveness endpoints"""

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.text == "Hello, world!"
        assert response.headers["content-type"].startswith("text/plain")
        assert "X-Request-ID" in response.headers
        assert "X-Processing-Time" in response.headers

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestUploadRouter:
    """Test cases for the resume upload endpoint"""

    def test_upload_scores_and_logs(self, client, workspace):
        response = client.post("/upload", data=FORM, files=resume_file())

        assert response.status_code == 200
        assert response.json() == {
            "jobRole": "Backend Engineer",
            "probability": 75.0,
            "additionalSkills": "SQL",
            "additionalFrameworks": "None",
            "feedback": "You have some of the required skills and frameworks. Consider improving: SQL",
        }

        records = workspace["log"].read_records()
        assert len(records) == 1
        assert records[0].first_name == "Ada"
        assert records[0].email == "ada@example.com"
        assert records[0].job_role == "Backend Engineer"
        assert records[0].probability_score == 75
        assert records[0].resume_file == "resume.txt"

    def test_upload_removes_temporary_file(self, client, workspace):
        response = client.post("/upload", data=FORM, files=resume_file())

        assert response.status_code == 200
        assert list(workspace["upload_dir"].iterdir()) == []

    def test_missing_contact_fields_logged_as_na(self, client, workspace):
        response = client.post("/upload", data={"jobRole": "Backend Engineer"}, files=resume_file())

        assert response.status_code == 200
        record = workspace["log"].read_records()[0]
        assert record.first_name == "N/A"
        assert record.email == "N/A"
        assert record.phone == "N/A"

    def test_no_file_uploaded(self, client, workspace):
        response = client.post("/upload", data=FORM)

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "No file uploaded"
        assert body["success"] is False
        assert workspace["log"].read_records() == []

    def test_text_part_instead_of_file(self, client, workspace):
        """A plain form value under the resume field counts as no upload"""
        response = client.post("/upload", data=dict(FORM, resume="not a file"))

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "No file uploaded"
        assert body["error_code"] == "VALIDATION_ERROR"
        assert body["success"] is False
        assert "X-Request-ID" in response.headers
        assert workspace["log"].read_records() == []

    def test_file_part_without_filename(self, client, workspace):
        response = client.post("/upload", data=FORM, files={"resume": ("", b"content", "text/plain")})

        assert response.status_code == 400
        assert response.json()["error"] == "No file uploaded"

    def test_unknown_role(self, client, workspace):
        form = dict(FORM, jobRole="Astronaut")
        response = client.post("/upload", data=form, files=resume_file())

        assert response.status_code == 200
        data = response.json()
        assert data["probability"] == 0
        assert data["additionalSkills"] == ROLE_NOT_FOUND_MESSAGE
        assert data["additionalFrameworks"] == ROLE_NOT_FOUND_MESSAGE
        assert data["feedback"] == ROLE_NOT_FOUND_MESSAGE
        assert workspace["log"].read_records()[0].job_role == "Astronaut"

    def test_unreadable_catalog_degrades_to_not_found(self, client, workspace):
        workspace["catalog"].write_text("WRONG,COLUMNS\n", encoding="utf-8")

        response = client.post("/upload", data=FORM, files=resume_file())

        assert response.status_code == 200
        assert response.json()["probability"] == 0
        assert response.json()["feedback"] == ROLE_NOT_FOUND_MESSAGE

    def test_pdf_upload(self, client, workspace, make_pdf):
        files = {"resume": ("resume.pdf", make_pdf("I used Go and gRPC daily"), "application/pdf")}

        response = client.post("/upload", data=FORM, files=files)

        assert response.status_code == 200
        assert response.json()["probability"] == 75
        assert workspace["log"].read_records()[0].resume_file == "resume.pdf"

    def test_corrupt_pdf_is_server_error(self, client, workspace):
        files = {"resume": ("resume.pdf", b"not really a pdf", "application/pdf")}

        response = client.post("/upload", data=FORM, files=files)

        assert response.status_code == 500
        assert response.json()["error"].startswith("Error processing request: ")
        assert list(workspace["upload_dir"].iterdir()) == []
        assert workspace["log"].read_records() == []

    @patch("resume_scorer.routers.upload.extract_text")
    def test_extraction_failure(self, mock_extract, client, workspace):
        mock_extract.side_effect = ExtractionError("corrupt document")

        response = client.post("/upload", data=FORM, files=resume_file())

        assert response.status_code == 500
        assert response.json()["error"] == "Error processing request: corrupt document"
        assert list(workspace["upload_dir"].iterdir()) == []

    def test_logging_failure(self, client, workspace):
        failing_log = MagicMock()
        failing_log.append.side_effect = SubmissionLogError("log is read-only")

        with patch("resume_scorer.routers.upload.submission_log", failing_log):
            response = client.post("/upload", data=FORM, files=resume_file())

        assert response.status_code == 500
        assert response.json()["error"] == "Error processing request: log is read-only"
        failing_log.append.assert_called_once()
        assert list(workspace["upload_dir"].iterdir()) == []

    def test_two_uploads_are_logged_in_order(self, client, workspace):
        client.post("/upload", data=dict(FORM, firstName="Ada"), files=resume_file())
        client.post("/upload", data=dict(FORM, firstName="Grace"), files=resume_file(b"Go SQL gRPC"))

        records = workspace["log"].read_records()
        assert [r.first_name for r in records] == ["Ada", "Grace"]
        assert [r.probability_score for r in records] == [75, 100]

    def test_upload_handler_runs_in_threadpool(self):
        """Blocking parsing and workbook I/O must not run on the event loop"""
        from resume_scorer.routers.upload import upload_resume

        assert not inspect.iscoroutinefunction(upload_resume)
