import io

from docx import Document as Docx
from pypdf import PdfReader

from ..core.errors import ExtractionError, UnsupportedFormat
from ..core.logging import get_logger

logger = get_logger(__name__)

PDF = "application/pdf"
DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
TXT = "text/plain"

SUPPORTED_MIME_TYPES = (PDF, DOCX, TXT)

def _pdf_text(data: bytes) -> str:
    reader = PdfReader(io.BytesIO(data))
    return "\n".join(page.extract_text() or "" for page in reader.pages)

def _docx_text(data: bytes) -> str:
    doc = Docx(io.BytesIO(data))
    lines = [p.text for p in doc.paragraphs if p.text and p.text.strip()]
    for tbl in doc.tables:
        for row in tbl.rows:
            row_txt = " | ".join((c.text or "").strip() for c in row.cells)
            if row_txt.strip(" |"):
                lines.append(row_txt)
    return "\n".join(lines)

def _plain_text(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")

_EXTRACTORS = {PDF: _pdf_text, DOCX: _docx_text, TXT: _plain_text}

def extract_text(data: bytes, mime_type: str) -> str:
    extractor = _EXTRACTORS.get(mime_type)
    if extractor is None:
        raise UnsupportedFormat(mime_type)
    try:
        text = extractor(data)
    except Exception as e:
        logger.exception("Error extracting text from %s document", mime_type)
        raise ExtractionError("Failed to extract text from document") from e
    logger.info("Extracted %d characters from %s document", len(text), mime_type)
    return text
