import os
import logging
from enum import Enum

from langchain_community.document_loaders import PyPDFLoader

logger = logging.getLogger(__name__)

class DocumentKind(Enum):
    PDF = "pdf"
    PLAIN_TEXT = "txt"
    UNSUPPORTED = "unsupported"

class ExtractionError(Exception):
    """Raised when no text can be extracted from a stored document"""

class UnsupportedDocumentError(ExtractionError):
    pass

def detect_document_kind(filename: str) -> DocumentKind:
    """Map a filename to the extraction path for its extension"""
    name = (filename or "").lower()
    if name.endswith(".pdf"):
        return DocumentKind.PDF
    if name.endswith(".txt"):
        return DocumentKind.PLAIN_TEXT
    return DocumentKind.UNSUPPORTED

def process_pdf(file_path: str) -> str:
    """Extract text page by page, joining pages with a single space"""
    logger.info(f"Extracting PDF text from {file_path}")
    loader = PyPDFLoader(file_path)
    page_texts = []
    for page in loader.lazy_load():
        page_texts.append(page.page_content.strip())
    return " ".join(page_texts).strip()

def read_text_file(file_path: str) -> str:
    with open(file_path, "r", encoding="utf-8", newline="") as f:
        return f.read()

def extract_text(file_path: str, filename: str) -> str:
    """Return the plain-text content of a stored upload.

    The extension of the original filename picks the extractor; anything
    other than .pdf or .txt is rejected rather than read as raw bytes.
    """
    kind = detect_document_kind(filename)
    if kind is DocumentKind.PDF:
        return process_pdf(file_path)
    if kind is DocumentKind.PLAIN_TEXT:
        return read_text_file(file_path)

    extension = os.path.splitext(filename or "")[1] or "(none)"
    raise UnsupportedDocumentError(
        f"Text extraction is not supported for {filename} (extension {extension}); "
        "upload a PDF or TXT file"
    )
