import os
from pathlib import Path

from dotenv import load_dotenv

from resume_scorer.utils.exceptions import ConfigurationError

load_dotenv()


def env_int(key: str, default: str) -> int:
    value = os.getenv(key, default)
    try:
        return int(value)
    except ValueError as e:
        raise ConfigurationError(f"{key} must be an integer, got {value!r}", config_key=key, config_value=value, cause=e) from e


def env_float(key: str, default: str) -> float:
    value = os.getenv(key, default)
    try:
        return float(value)
    except ValueError as e:
        raise ConfigurationError(f"{key} must be a number, got {value!r}", config_key=key, config_value=value, cause=e) from e


# Relative paths resolve against the working directory the service is started from
CATALOG_PATH = Path(os.getenv("CATALOG_PATH", "data/job_roles.csv"))
SUBMISSION_LOG_PATH = Path(os.getenv("SUBMISSION_LOG_PATH", "userdata.xlsx"))
UPLOAD_DIR = Path(os.getenv("UPLOAD_DIR", "uploads"))

HOST = os.getenv("HOST", "0.0.0.0")
PORT = env_int("PORT", "3000")
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
SLOW_REQUEST_THRESHOLD = env_float("SLOW_REQUEST_THRESHOLD", "2.0")

ENVIRONMENT = os.getenv("ENVIRONMENT", "development").lower()
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_DIR = Path(os.getenv("LOG_DIR", "logs"))

API_TITLE = "Resume Scorer API"
API_DESCRIPTION = "Scores an uploaded resume against the skills and frameworks required for a job role"
API_VERSION = "1.0.0"
