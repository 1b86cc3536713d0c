##PDF text extraction with PyMuPDF
import logging
from typing import NamedTuple

import fitz

logger = logging.getLogger(__name__)


class DocumentParseError(Exception):
    pass


class ParsedDocument(NamedTuple):
    text: str
    page_count: int


def extract_text(data: bytes) -> ParsedDocument:
    """
    Extract plain text from an in-memory PDF.

    Args:
        data: Raw PDF bytes

    Returns:
        ParsedDocument with the page texts joined by newlines and the page count
    """
    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except Exception as e:
        raise DocumentParseError(f"Could not open PDF: {e}") from e

    try:
        pages = [page.get_text() for page in doc]
        page_count = len(doc)
    except Exception as e:
        raise DocumentParseError(f"Could not read PDF text: {e}") from e
    finally:
        doc.close()

    logger.info("Extracted %d characters from %d page(s)", sum(len(p) for p in pages), page_count)
    return ParsedDocument(text="\n".join(pages), page_count=page_count)
