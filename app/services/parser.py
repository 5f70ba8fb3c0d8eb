import io
import logging

import pdfplumber
from docx import Document

logger = logging.getLogger(__name__)

DOCX_MIME_TYPE = "vnd.openxmlformats-officedocument.wordprocessingml.document"


class ExtractionError(Exception):
    """Raised when a PDF or DOCX payload cannot be decoded."""


def _is_pdf(content_type: str, filename: str) -> bool:
    return "pdf" in content_type or filename.endswith(".pdf")


def _is_docx(content_type: str, filename: str) -> bool:
    return (
        "word" in content_type
        or filename.endswith(".docx")
        or DOCX_MIME_TYPE in content_type
    )


def parse_pdf(data: bytes) -> str:
    """Concatenate the text of every page of a PDF."""
    with pdfplumber.open(io.BytesIO(data)) as pdf:
        return "\n".join(page.extract_text() or "" for page in pdf.pages)


def parse_docx(data: bytes) -> str:
    """Extract raw text from a DOCX file: paragraphs first, then tables."""
    doc = Document(io.BytesIO(data))

    blocks = [para.text for para in doc.paragraphs]

    for table in doc.tables:
        rows = []
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells]
            rows.append(" | ".join(cells))
        blocks.append("\n".join(rows))

    return "\n\n".join(blocks)


def parse_txt(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def extract_text(data: bytes, content_type: str | None, filename: str | None) -> str:
    """Turn an uploaded file into plain text.

    The declared content type and the filename are both consulted since
    browsers frequently send ``application/octet-stream`` for documents.
    Anything that is neither PDF nor DOCX is decoded as UTF-8 text.
    """
    mime = (content_type or "").lower()
    name = (filename or "").lower()

    if _is_pdf(mime, name):
        parser, kind = parse_pdf, "PDF"
    elif _is_docx(mime, name):
        parser, kind = parse_docx, "DOCX"
    else:
        return parse_txt(data)

    try:
        return parser(data)
    except Exception as exc:
        logger.warning("Failed to extract %s text from %r: %s", kind, filename, exc)
        raise ExtractionError(f"Could not extract text from {kind} document") from exc
