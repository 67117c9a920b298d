"""
Append-only submission log stored as an Excel workbook.
"""
import os
import tempfile
import threading
from pathlib import Path
from typing import Dict, List

import openpyxl
from openpyxl.styles import Font

from resume_scorer.models.schemas import SubmissionRecord, SUBMISSION_LOG_HEADERS
from resume_scorer.utils.exceptions import ExceptionContext, SubmissionLogError
from resume_scorer.utils.logging_config import get_logger

logger = get_logger(__name__)

SHEET_TITLE = "UserData"

_locks: Dict[Path, threading.Lock] = {}
_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    """One writer lock per resolved log path, shared by every SubmissionLog in the process"""
    with _locks_guard:
        return _locks.setdefault(path, threading.Lock())


class SubmissionLog:
    """Store one row per processed upload in an .xlsx workbook"""

    def __init__(self, path):
        self.path = Path(path)

    @property
    def lock(self) -> threading.Lock:
        return _lock_for(self.path.resolve())

    def _new_workbook(self):
        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = SHEET_TITLE
        ws.append(SUBMISSION_LOG_HEADERS)
        for cell in ws[1]:
            cell.font = Font(bold=True)
        return wb

    def _save(self, wb) -> None:
        # The previous log stays in place until the new copy is fully written
        fd, tmp_name = tempfile.mkstemp(suffix=".xlsx", prefix=f".{self.path.stem}-", dir=self.path.parent)
        os.close(fd)
        try:
            wb.save(tmp_name)
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def append(self, record: SubmissionRecord) -> None:
        """Append ``record`` as the last row, creating the log with its header if needed"""
        with self.lock, ExceptionContext(
            f"Appending submission to {self.path}",
            error_class=SubmissionLogError,
            logger=logger,
            path=str(self.path),
        ):
            if self.path.exists():
                wb = openpyxl.load_workbook(self.path)
            else:
                logger.info(f"Creating submission log: {self.path}")
                self.path.parent.mkdir(parents=True, exist_ok=True)
                wb = self._new_workbook()

            wb.worksheets[0].append(record.to_row())
            self._save(wb)

        logger.info(f"Submission logged to {self.path} for job role '{record.job_role}'")

    def read_records(self) -> List[SubmissionRecord]:
        """Return every data row in arrival order; an absent log has no records"""
        if not self.path.exists():
            return []
        with ExceptionContext(
            f"Reading submissions from {self.path}",
            error_class=SubmissionLogError,
            logger=logger,
            path=str(self.path),
        ):
            wb = openpyxl.load_workbook(self.path, read_only=True, data_only=True)
            try:
                rows = list(wb.worksheets[0].iter_rows(min_row=2, values_only=True))
            finally:
                wb.close()
        return [SubmissionRecord.from_row(row) for row in rows if any(v not in (None, "") for v in row)]

    def read_headers(self) -> List[str]:
        if not self.path.exists():
            return []
        with ExceptionContext(
            f"Reading submission log header from {self.path}",
            error_class=SubmissionLogError,
            logger=logger,
            path=str(self.path),
        ):
            wb = openpyxl.load_workbook(self.path, read_only=True, data_only=True)
            try:
                header = next(wb.worksheets[0].iter_rows(max_row=1, values_only=True), ())
            finally:
                wb.close()
        return [v for v in header if v is not None]
