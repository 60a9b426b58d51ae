"""Tests for content-coverage verification."""

from resume_bench.core.coverage import flatten_record, split_chunks, verify
from resume_bench.core.schemas import ResumeRecord

TOOLS = "Kubernetes Terraform Ansible Jenkins"
NATO = "alpha bravo charlie delta echo foxtrot golf hotel india juliet"


def test_empty_text_is_fully_covered():
    report = verify("", ResumeRecord())
    assert report.coverage_percentage == 100.0
    assert report.missing_content == []
    assert report.total_chunks == 0


def test_short_chunks_are_ignored():
    """Chunks of 10 characters or fewer never count."""
    assert split_chunks("Short one\n\nAnother") == []
    assert verify("Short one\n\nAnother", {}).coverage_percentage == 100.0


def test_three_word_chunk_is_always_captured():
    """A chunk with at most 3 qualifying words is captured even if none occur."""
    report = verify("Alpha Bravo Charlie", ResumeRecord())
    assert report.coverage_percentage == 100.0
    assert report.missing_content == []
    assert report.captured_chunks == 1


def test_missing_chunk_reported_verbatim():
    report = verify(TOOLS, ResumeRecord())
    assert report.coverage_percentage == 0.0
    assert report.missing_content == [TOOLS]


def test_capture_threshold_is_seventy_percent():
    words = NATO.split()
    seven = ResumeRecord(summary=" ".join(words[:7]))
    six = ResumeRecord(summary=" ".join(words[:6]))

    assert verify(NATO, seven).coverage_percentage == 100.0
    assert verify(NATO, six).coverage_percentage == 0.0


def test_adding_fields_never_lowers_coverage():
    text = f"{TOOLS}\n\n{NATO}"
    smaller = {"skills": ["Kubernetes"]}
    larger = {"skills": ["Kubernetes", "Terraform", "Ansible", "Jenkins"], "summary": NATO}

    low = verify(text, smaller).coverage_percentage
    high = verify(text, larger).coverage_percentage
    assert high >= low
    assert high == 100.0


def test_substring_matching_vs_whole_words():
    """Default matching is substring based; whole_words=True requires full tokens."""
    text = "Engine Rust Cargo Tokio"
    record = {"summary": "engineers rustaceans cargoes tokios"}

    assert verify(text, record).coverage_percentage == 100.0
    assert verify(text, record, whole_words=True).coverage_percentage == 0.0


def test_crlf_blank_lines_split_chunks():
    text = f"{TOOLS}\r\n\r\nAlpha Bravo Charlie"
    report = verify(text, {})
    assert report.total_chunks == 2
    assert report.coverage_percentage == 50.0
    assert report.missing_content == [TOOLS]


def test_partial_mapping_is_normalized_first():
    report = verify(TOOLS, {"skills": ["Kubernetes", "Terraform", "Ansible", "Jenkins"]})
    assert report.coverage_percentage == 100.0


def test_flatten_record_includes_nested_entries():
    record = ResumeRecord.model_validate({
        "name": "Jane Doe",
        "experience": [{"company": "Acme", "responsibilities": ["Built Things"]}],
    })
    flat = flatten_record(record)
    assert "jane doe" in flat
    assert "acme" in flat
    assert "built things" in flat
