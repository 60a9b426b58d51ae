"""Tests for turning uploaded documents into text."""

from io import BytesIO

import pytest
from docx import Document

from resume_bench.core.errors import InputUnreadable, UnsupportedDocument
from resume_bench.core.text_extraction import (
    _lines_to_paragraphs,
    _words_to_lines,
    extract_text,
)


class FakePage:
    """Stands in for a pdfplumber page: only extract_words is used."""

    def __init__(self, words):
        self._words = words

    def extract_words(self, **kwargs):
        return [dict(w) for w in self._words]


def test_plain_text_decoded_with_replacement():
    extracted = extract_text(b"Jane Doe\n\nEngineer \xff", "resume.txt", "text/plain")
    assert extracted.source == "text"
    assert extracted.page_count == 1
    assert extracted.text.startswith("Jane Doe\n\nEngineer")
    assert "�" in extracted.text


def test_markdown_by_extension():
    assert extract_text(b"# Jane", "resume.md", "").text == "# Jane"


def test_empty_input_is_unreadable():
    with pytest.raises(InputUnreadable):
        extract_text(b"", "resume.txt", "text/plain")


def test_unsupported_type():
    with pytest.raises(UnsupportedDocument) as exc:
        extract_text(b"{\\rtf1}", "resume.rtf", "application/rtf")
    assert "application/rtf" in str(exc.value)


def test_docx_keeps_empty_paragraphs_as_blank_lines():
    doc = Document()
    doc.add_paragraph("Jane Doe")
    doc.add_paragraph("jane.doe@example.com")
    doc.add_paragraph("")
    doc.add_paragraph("EXPERIENCE")
    buf = BytesIO()
    doc.save(buf)

    extracted = extract_text(buf.getvalue(), "resume.docx", "")
    assert extracted.source == "docx"
    assert "Jane Doe\njane.doe@example.com\n\nEXPERIENCE" in extracted.text


def test_corrupt_documents_are_unreadable():
    with pytest.raises(InputUnreadable):
        extract_text(b"not a pdf at all", "resume.pdf", "application/pdf")
    with pytest.raises(InputUnreadable):
        extract_text(b"not a docx at all", "resume.docx", "")


def test_words_grouped_into_lines_by_top():
    page = FakePage([
        {"text": "Doe", "top": 10.4, "x0": 40.0},
        {"text": "Jane", "top": 10.0, "x0": 0.0},
        {"text": "Engineer", "top": 24.0, "x0": 0.0},
    ])
    assert _words_to_lines(page) == [(10.0, "Jane Doe"), (24.0, "Engineer")]
    assert _words_to_lines(FakePage([])) == []


def test_large_vertical_gap_becomes_paragraph_break():
    lines = [(10.0, "a"), (22.0, "b"), (34.0, "c"), (70.0, "d")]
    assert _lines_to_paragraphs(lines) == "a\nb\nc\n\nd"
    assert _lines_to_paragraphs([]) == ""
