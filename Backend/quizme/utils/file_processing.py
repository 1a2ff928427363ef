import os
import re
import tempfile
import logging

from langchain_community.document_loaders import Docx2txtLoader, PyPDFLoader

from quizme.errors import ExtractionFailure, UnsupportedFormat
from quizme.schemas import DocumentFormat

logger = logging.getLogger(__name__)

_DISALLOWED_CHARS = re.compile(r"[^\w\s.,;:!?()\-]")
_WHITESPACE_RUN = re.compile(r"\s+")

def clean_text(text) -> str:
    """Normalize extracted text so every format reaches the prompt in the same shape.

    Characters outside word characters, whitespace and basic punctuation are
    dropped first, then whitespace runs (newlines included) collapse to a single
    space. Applying it twice gives the same result as applying it once.
    """
    if not text or not isinstance(text, str):
        return ""
    text = _DISALLOWED_CHARS.sub("", text)
    text = _WHITESPACE_RUN.sub(" ", text)
    return text.strip()

def detect_format(filename: str) -> DocumentFormat:
    """Infer the document format from the declared file name's extension."""
    extension = os.path.splitext(filename or "")[1].lower()
    if extension == ".pdf":
        return DocumentFormat.PDF
    if extension == ".docx":
        return DocumentFormat.DOCX
    if extension == ".pptx":
        raise UnsupportedFormat("PPTX files are not supported. Please use PDF or DOCX files.")
    raise UnsupportedFormat(
        "Invalid file type. Only PDF and DOCX files are supported.",
        details=f"Unsupported file type: {extension or '(none)'}",
    )

def _write_temp(file_bytes: bytes, suffix: str) -> str:
    with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as tmp:
        tmp.write(file_bytes)
        return tmp.name

def _remove_temp(path: str):
    try:
        os.unlink(path)
    except OSError as e:
        logger.warning(f"Could not clean up temporary file {path}: {e}")

def process_pdf(file_bytes: bytes) -> str:
    """Extract raw text from PDF bytes"""
    tmp_path = _write_temp(file_bytes, ".pdf")
    try:
        try:
            logger.info("Trying PyPDFLoader...")
            pages = PyPDFLoader(tmp_path).load()
            return "\n\n".join(p.page_content for p in pages)
        except Exception as e:
            logger.error(f"PyPDFLoader failed: {str(e)}. Trying fallback...")
            primary_error = e

        try:
            import fitz  # PyMuPDF
            logger.info("Trying PyMuPDF...")
            with fitz.open(tmp_path) as doc:
                return "".join(page.get_text() for page in doc)
        except Exception as fallback_e:
            logger.error(f"PyMuPDF failed: {str(fallback_e)}")
            raise ExtractionFailure(
                "Failed to extract text from .pdf file",
                details=f"PDF extraction failed: {primary_error}",
            ) from fallback_e
    finally:
        _remove_temp(tmp_path)

def process_docx(file_bytes: bytes) -> str:
    """Extract raw text from DOCX bytes"""
    tmp_path = _write_temp(file_bytes, ".docx")
    try:
        documents = Docx2txtLoader(tmp_path).load()
        return "\n".join(d.page_content for d in documents)
    except Exception as e:
        logger.error(f"Docx2txtLoader failed: {str(e)}")
        raise ExtractionFailure(
            "Failed to extract text from .docx file",
            details=f"DOCX extraction failed: {e}",
        ) from e
    finally:
        _remove_temp(tmp_path)

EXTRACTORS = {
    DocumentFormat.PDF: process_pdf,
    DocumentFormat.DOCX: process_docx,
}
