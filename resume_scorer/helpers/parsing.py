import re
from pathlib import Path
from pdfminer.high_level import extract_text as pdf_extract
from docx import Document
from resume_scorer.utils.exceptions import ExceptionContext, ExtractionError
from resume_scorer.utils.logging_config import get_logger, log_function_call

logger = get_logger(__name__)


def read_txt(p: Path) -> str:
    return p.read_text(encoding="utf-8", errors="ignore")

def read_docx(p: Path) -> str:
    doc = Document(str(p))
    return "\n".join([para.text for para in doc.paragraphs])

def read_pdf(p: Path) -> str:
    return pdf_extract(str(p))

READERS = {
    ".txt": read_txt,
    ".docx": read_docx,
    ".pdf": read_pdf,
}

def clean_text(x: str) -> str:
    x = re.sub(r'\s+', ' ', x).strip()
    return x

@log_function_call
def extract_text(path, filename: str = None) -> str:
    """Extract plain text from a stored upload.

    The reader is picked from the original upload filename (the stored copy has a
    random name); unknown suffixes are parsed as PDF.
    """
    p = Path(path)
    ext = Path(filename or p.name).suffix.lower()
    reader = READERS.get(ext, read_pdf)
    document_type = ext.lstrip(".") if ext in READERS else "pdf"

    with ExceptionContext(
        f"Extracting text from {filename or p.name}",
        error_class=ExtractionError,
        logger=logger,
        filename=filename or p.name,
        document_type=document_type,
    ):
        text = reader(p)

    return clean_text(text or "")
