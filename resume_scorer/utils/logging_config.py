"""
Logging setup for the Resume Scorer API.

Console output always; in development and production also a rotating log file
and an errors-only file under LOG_DIR. uvicorn's loggers share the same handlers
and pdfminer's parser chatter is kept at ERROR.
"""
import functools
import logging
import logging.config
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Dict

from resume_scorer import settings

FORMATS = {
    "simple": "%(levelname)s - %(name)s - %(message)s",
    "detailed": "%(asctime)s | %(levelname)-8s | %(name)-40s | %(funcName)-20s:%(lineno)-4d | %(message)s",
}

# level None means "use LOG_LEVEL"
PROFILES = {
    "production": {"level": None, "enable_file": True, "format_style": "detailed"},
    "development": {"level": "DEBUG", "enable_file": True, "format_style": "detailed"},
    "testing": {"level": "WARNING", "enable_file": False, "format_style": "simple"},
}

MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5


def _rotating_handler(filename: Path, level: str) -> Dict[str, Any]:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": level,
        "formatter": "detailed",
        "filename": str(filename),
        "maxBytes": MAX_LOG_BYTES,
        "backupCount": LOG_BACKUPS,
        "encoding": "utf8",
    }


def build_logging_config(level: str, log_dir: Path, enable_file: bool, format_style: str) -> Dict[str, Any]:
    """dictConfig payload for the given profile"""
    stamp = datetime.now().strftime('%Y%m%d')
    handlers: Dict[str, Any] = {
        "console": {
            "class": "logging.StreamHandler",
            "level": level,
            "formatter": format_style,
            "stream": "ext://sys.stdout",
        }
    }
    if enable_file:
        handlers["file"] = _rotating_handler(log_dir / f"resume_scorer_{stamp}.log", level)
        handlers["error_file"] = _rotating_handler(log_dir / f"resume_scorer_errors_{stamp}.log", "ERROR")

    file_handlers = ["file"] if enable_file else []
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {name: {"format": fmt, "datefmt": "%Y-%m-%d %H:%M:%S"} for name, fmt in FORMATS.items()},
        "handlers": handlers,
        "loggers": {
            "": {"level": level, "handlers": list(handlers), "propagate": False},
            "uvicorn": {"level": "INFO", "handlers": ["console"] + file_handlers, "propagate": False},
            "uvicorn.access": {"level": "INFO", "handlers": ["console"], "propagate": False},
            "pdfminer": {"level": "ERROR", "propagate": True},
        },
    }


def configure_for_environment(environment: str = None) -> None:
    """Apply the logging profile for ENVIRONMENT (unknown names get the production profile)"""
    environment = (environment or settings.ENVIRONMENT).lower()
    profile = PROFILES.get(environment, PROFILES["production"])
    level = profile["level"] or settings.LOG_LEVEL

    if profile["enable_file"]:
        settings.LOG_DIR.mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(build_logging_config(
        level=level,
        log_dir=settings.LOG_DIR,
        enable_file=profile["enable_file"],
        format_style=profile["format_style"],
    ))

    get_logger("logging").info(
        f"Logging configured - Environment: {environment}, Level: {level}, File: {profile['enable_file']}"
    )


def get_logger(name: str) -> logging.Logger:
    """Logger under the resume_scorer namespace (module names already carry it)"""
    if name.startswith("resume_scorer"):
        return logging.getLogger(name)
    return logging.getLogger(f"resume_scorer.{name}")


def log_function_call(func):
    """Debug-log entry and timing of a function, and log failures before re-raising"""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = get_logger(func.__module__)
        start_time = time.time()
        logger.debug(f"Entering {func.__name__} with args={len(args)}, kwargs={list(kwargs.keys())}")
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            logger.error(f"Error in {func.__name__} after {time.time() - start_time:.3f}s: {str(e)}")
            raise
        logger.debug(f"Completed {func.__name__} in {time.time() - start_time:.3f}s")
        return result

    return wrapper


class PerformanceMonitor:
    """Context manager for monitoring performance with logging"""

    def __init__(self, operation_name: str, logger: logging.Logger = None, threshold_ms: float = 1000):
        self.operation_name = operation_name
        self.logger = logger or get_logger("performance")
        self.threshold_ms = threshold_ms
        self.start_time = None

    def __enter__(self):
        self.start_time = time.time()
        self.logger.debug(f"Starting {self.operation_name}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        execution_time = (time.time() - self.start_time) * 1000

        if exc_type is not None:
            self.logger.error(f"{self.operation_name} failed after {execution_time:.2f}ms: {exc_val}")
        elif execution_time > self.threshold_ms:
            self.logger.warning(f"{self.operation_name} completed in {execution_time:.2f}ms (exceeded threshold {self.threshold_ms}ms)")
        else:
            self.logger.info(f"{self.operation_name} completed in {execution_time:.2f}ms")
