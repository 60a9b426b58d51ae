"""
Document bytes -> plain text.

Paragraph structure matters downstream (coverage chunks split on blank lines),
so every extractor keeps paragraph breaks as blank lines:

- PDF: pdfplumber word objects grouped into lines by vertical position; a blank
  line is inserted where the vertical gap is clearly larger than the page's
  usual line spacing, and between pages
- DOCX: python-docx paragraphs, empty paragraphs kept as blank lines
- TXT/MD: UTF-8 with replacement characters
"""

import logging
import re
import statistics
from io import BytesIO
from typing import Any, List, Tuple

import pdfplumber
from docx import Document

from resume_bench.core.errors import InputUnreadable, UnsupportedDocument
from resume_bench.core.patterns import MONTH_SRC
from resume_bench.core.schemas import ExtractedText

logger = logging.getLogger(__name__)

DOCX_CONTENT_TYPES = {"application/vnd.openxmlformats-officedocument.wordprocessingml.document"}
PDF_CONTENT_TYPES = {"application/pdf"}
TEXT_CONTENT_TYPES = {"text/plain", "text/markdown"}

# A line gap this many times the median spacing starts a new paragraph
PARAGRAPH_GAP_FACTOR = 1.6
GLUED_MONTH_YEAR_RE = re.compile(rf"\b({MONTH_SRC})((?:19|20)\d{{2}})\b", re.IGNORECASE)


def _words_to_lines(page: Any, *, x_tolerance: float = 3, y_tolerance: float = 2, line_y_tolerance: float = 3) -> List[Tuple[float, str]]:
    """
    Group a page's words into (top, text) lines.

    Words are bucketed by their rounded 'top' coordinate, then ordered left to
    right inside a bucket and joined with single spaces.
    """
    words = page.extract_words(
        x_tolerance=x_tolerance,
        y_tolerance=y_tolerance,
        keep_blank_chars=False,
        use_text_flow=True,
    )
    if not words:
        return []

    words.sort(key=lambda w: (round(w["top"] / line_y_tolerance), w["x0"]))
    lines: List[Tuple[float, str]] = []
    current_key = None
    current_top = 0.0
    current_words: List[str] = []

    for w in words:
        key = round(w["top"] / line_y_tolerance)
        if current_key is None or key == current_key:
            if current_key is None:
                current_top = w["top"]
            current_words.append(w["text"])
            current_key = key
        else:
            lines.append((current_top, " ".join(current_words)))
            current_words = [w["text"]]
            current_key = key
            current_top = w["top"]

    if current_words:
        lines.append((current_top, " ".join(current_words)))
    return lines


def _lines_to_paragraphs(lines: List[Tuple[float, str]]) -> str:
    """Join lines, inserting a blank line at unusually large vertical gaps."""
    if not lines:
        return ""
    gaps = [b[0] - a[0] for a, b in zip(lines, lines[1:]) if b[0] > a[0]]
    typical = statistics.median(gaps) if gaps else 0.0

    out = [lines[0][1]]
    for (prev_top, _), (top, text) in zip(lines, lines[1:]):
        if typical and top - prev_top > typical * PARAGRAPH_GAP_FACTOR:
            out.append("")
        out.append(text)
    return "\n".join(out)


def _tidy_line(line: str) -> str:
    # "January2024" -> "January 2024"
    return GLUED_MONTH_YEAR_RE.sub(r"\1 \2", line)


def extract_pdf_text(pdf_bytes: bytes) -> ExtractedText:
    pages: List[str] = []
    try:
        with pdfplumber.open(BytesIO(pdf_bytes)) as pdf:
            page_count = len(pdf.pages)
            for page_i, page in enumerate(pdf.pages, start=1):
                lines = [(top, _tidy_line(text)) for top, text in _words_to_lines(page)]
                logger.debug(f"pdf page {page_i}: {len(lines)} lines")
                pages.append(_lines_to_paragraphs(lines))
    except Exception as e:
        raise InputUnreadable(f"Could not read PDF: {e}") from e

    text = "\n\n".join(p for p in pages if p)
    if not text.strip():
        raise InputUnreadable("PDF appears to have no extractable text. OCR is not supported.")
    return ExtractedText(text=text, page_count=max(page_count, 1), source="pdf")


def extract_docx_text(docx_bytes: bytes) -> ExtractedText:
    try:
        doc = Document(BytesIO(docx_bytes))
    except Exception as e:
        raise InputUnreadable(f"Could not read DOCX: {e}") from e

    text = "\n".join((p.text or "").strip() for p in doc.paragraphs)
    if not text.strip():
        raise InputUnreadable("DOCX has no text paragraphs.")
    return ExtractedText(text=text, page_count=1, source="docx")


def extract_plain_text(raw: bytes) -> ExtractedText:
    return ExtractedText(text=raw.decode("utf-8", errors="replace"), page_count=1, source="text")


def extract_text(data: bytes, filename: str = "", content_type: str = "") -> ExtractedText:
    """
    Dispatch on file extension / content type.

    Raises:
        InputUnreadable: empty input or a document that cannot be read
        UnsupportedDocument: a format we have no extractor for
    """
    if not data:
        raise InputUnreadable("Empty file uploaded.")

    filename = (filename or "").lower()
    content_type = (content_type or "").lower()

    if filename.endswith(".docx") or content_type in DOCX_CONTENT_TYPES:
        return extract_docx_text(data)
    if filename.endswith(".pdf") or content_type in PDF_CONTENT_TYPES:
        return extract_pdf_text(data)
    if filename.endswith((".txt", ".md")) or content_type in TEXT_CONTENT_TYPES:
        return extract_plain_text(data)

    raise UnsupportedDocument(content_type)
