"""
Reference catalog of required skills and frameworks per job role.

The catalog is a spreadsheet (.xlsx) or CSV file with one row per job role:

    JOB ROLES | PROGRAMMING SKILLS | FRAMEWORKS
    Backend Engineer | Go, SQL | gRPC
"""
import csv
from pathlib import Path
from typing import Any, Iterable, Iterator, List, Optional

import openpyxl

from resume_scorer.models.schemas import CatalogEntry, RoleFound, RoleLookup, RoleNotFound
from resume_scorer.utils.exceptions import CatalogError, ExceptionContext
from resume_scorer.utils.logging_config import get_logger, log_function_call

logger = get_logger(__name__)

JOB_ROLE_COLUMN = "JOB ROLES"
SKILLS_COLUMN = "PROGRAMMING SKILLS"
FRAMEWORKS_COLUMN = "FRAMEWORKS"
REQUIRED_COLUMNS = [JOB_ROLE_COLUMN, SKILLS_COLUMN, FRAMEWORKS_COLUMN]

EXCEL_SUFFIXES = {".xlsx", ".xlsm"}
CSV_SUFFIXES = {".csv"}


def split_tokens(cell: Any) -> List[str]:
    """Split a comma separated cell into trimmed, non-empty, de-duplicated tokens"""
    if cell is None:
        return []
    tokens = []
    for token in str(cell).split(","):
        token = token.strip()
        if token and token not in tokens:
            tokens.append(token)
    return tokens


def _cell_text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def _read_excel_rows(path: Path) -> Iterator[tuple]:
    wb = openpyxl.load_workbook(path, read_only=True, data_only=True)
    try:
        ws = wb.worksheets[0]
        for row in ws.iter_rows(values_only=True):
            yield row
    finally:
        wb.close()


def _read_csv_rows(path: Path) -> Iterator[tuple]:
    with open(path, newline="", encoding="utf-8-sig") as f:
        for row in csv.reader(f):
            yield tuple(row)


def _entries_from_rows(rows: Iterable[tuple], path: Path) -> List[CatalogEntry]:
    rows = iter(rows)
    header = next(rows, None)
    if header is None:
        raise CatalogError(f"Catalog {path} is empty", path=str(path), missing_columns=REQUIRED_COLUMNS)

    columns = {_cell_text(name): idx for idx, name in enumerate(header) if _cell_text(name)}
    missing = [c for c in REQUIRED_COLUMNS if c not in columns]
    if missing:
        raise CatalogError(
            f"Catalog {path} is missing required columns: {', '.join(missing)}",
            path=str(path),
            missing_columns=missing,
        )

    def cell(row, column):
        idx = columns[column]
        return row[idx] if idx < len(row) else None

    entries: List[CatalogEntry] = []
    seen = set()
    for row in rows:
        job_role = _cell_text(cell(row, JOB_ROLE_COLUMN))
        if not job_role:
            continue
        if job_role in seen:
            logger.warning(f"Duplicate job role '{job_role}' in catalog {path}; keeping the first row")
            continue
        seen.add(job_role)
        entries.append(CatalogEntry(
            job_role=job_role,
            required_skills=split_tokens(cell(row, SKILLS_COLUMN)),
            required_frameworks=split_tokens(cell(row, FRAMEWORKS_COLUMN)),
        ))
    return entries


@log_function_call
def load_catalog(path) -> List[CatalogEntry]:
    """Load every catalog entry from ``path``.

    Raises CatalogError when the file cannot be read, has an unsupported
    extension, or lacks one of the required columns.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix in EXCEL_SUFFIXES:
        reader = _read_excel_rows
    elif suffix in CSV_SUFFIXES:
        reader = _read_csv_rows
    else:
        raise CatalogError(f"Unsupported catalog format: {path.suffix or path.name}", path=str(path))

    with ExceptionContext(f"Reading catalog {path}", error_class=CatalogError, logger=logger, path=str(path)):
        entries = _entries_from_rows(reader(path), path)

    logger.debug(f"Loaded {len(entries)} job roles from {path}")
    return entries


def find_role(catalog: Iterable[CatalogEntry], job_role: Optional[str]) -> RoleLookup:
    """Exact, case-sensitive lookup of a job role"""
    for entry in catalog:
        if entry.job_role == job_role:
            return RoleFound(entry=entry)
    return RoleNotFound(job_role=job_role)
