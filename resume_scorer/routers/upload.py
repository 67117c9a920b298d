import shutil
import uuid
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, Optional

from fastapi import APIRouter, File, Form, UploadFile

from resume_scorer.helpers.parsing import extract_text
from resume_scorer.models.schemas import SubmissionRecord, UploadResponse, NOT_AVAILABLE
from resume_scorer.services.catalog import load_catalog
from resume_scorer.services.scoring import score_resume
from resume_scorer.services.submission_log import SubmissionLog
from resume_scorer.settings import CATALOG_PATH, SUBMISSION_LOG_PATH, UPLOAD_DIR
from resume_scorer.utils.exceptions import CatalogError, ExceptionContext, ExtractionError, ValidationError
from resume_scorer.utils.logging_config import PerformanceMonitor, get_logger

router = APIRouter()
logger = get_logger(__name__)

submission_log = SubmissionLog(SUBMISSION_LOG_PATH)


@contextmanager
def stored_upload(upload: UploadFile, upload_dir: Path = None) -> Iterator[Path]:
    """Persist an upload under a random name for the duration of the block"""
    upload_dir = Path(upload_dir or UPLOAD_DIR)
    path = upload_dir / uuid.uuid4().hex
    try:
        with ExceptionContext(
            f"Storing upload {upload.filename}",
            error_class=ExtractionError,
            logger=logger,
            filename=upload.filename,
        ):
            upload_dir.mkdir(parents=True, exist_ok=True)
            with open(path, "wb") as buffer:
                shutil.copyfileobj(upload.file, buffer)
        yield path
    finally:
        if path.exists():
            path.unlink()
            logger.debug(f"Removed temporary upload {path}")


def load_catalog_or_empty(path):
    """Unreadable catalogs behave like a catalog without the requested role"""
    try:
        return load_catalog(path)
    except CatalogError as e:
        logger.warning(f"Catalog unavailable, treating every job role as not found: {e.message}")
        return []


def build_submission_record(first_name, email, phone, job_role, probability, resume_file, now: datetime = None) -> SubmissionRecord:
    now = now or datetime.now()
    return SubmissionRecord(
        first_name=first_name or NOT_AVAILABLE,
        email=email or NOT_AVAILABLE,
        phone=phone or NOT_AVAILABLE,
        signup_date=now.strftime("%m/%d/%Y"),
        signup_time=now.strftime("%H:%M:%S"),
        job_role=job_role or NOT_AVAILABLE,
        probability_score=probability,
        resume_file=resume_file,
    )


@router.post("/upload", response_model=UploadResponse, response_model_by_alias=True)
def upload_resume(
    resume: Optional[UploadFile] = File(None, description="Resume document (PDF, DOCX or TXT)"),
    first_name: Optional[str] = Form(None, alias="firstName"),
    email: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    job_role: Optional[str] = Form(None, alias="jobRole"),
):
    """
    Score an uploaded resume against the requirements of a job role

    - **resume**: resume file
    - **firstName**, **email**, **phone**: submitter contact data, recorded in the submission log
    - **jobRole**: job role name as listed in the reference catalog

    Returns the match probability, missing skills/frameworks and feedback
    """
    if resume is None or not resume.filename:
        logger.error("No file uploaded")
        raise ValidationError("No file uploaded", field="resume")

    logger.info(f"Scoring resume {resume.filename} for job role '{job_role}'")

    with stored_upload(resume) as path:
        resume_text = extract_text(path, resume.filename)

        catalog = load_catalog_or_empty(CATALOG_PATH)
        with PerformanceMonitor(f"Scoring resume for '{job_role}'", logger=logger, threshold_ms=500):
            result = score_resume(resume_text, job_role, catalog)

        record = build_submission_record(
            first_name, email, phone, job_role, result.probability, resume.filename
        )
        submission_log.append(record)

    logger.info(f"Resume {resume.filename} scored {result.probability} for job role '{job_role}'")
    return UploadResponse.from_result(result)
