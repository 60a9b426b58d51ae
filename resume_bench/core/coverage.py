"""
Content-coverage verification.

Scores how much of the source document made it into a record:

1. split the source on blank lines (2+ newlines) into chunks, keep chunks
   longer than 10 characters after trimming
2. flatten every string in the record into one lower-cased, whitespace-collapsed blob
3. per chunk, count words longer than 3 characters that occur in the blob
4. a chunk is missing when fewer than 70% of those words occur AND it has more
   than 3 such words (short chunks are always captured)

coverage = captured / total * 100, or 100 when there are no chunks.
"""

import logging
import re
from typing import Any, Iterator, List, Mapping, Union

from resume_bench.core.normalizer import normalize
from resume_bench.core.schemas import CoverageReport, ResumeRecord

logger = logging.getLogger(__name__)

CHUNK_SPLIT_RE = re.compile(r"(?:\r?\n){2,}")
MIN_CHUNK_LENGTH = 10
MIN_WORD_LENGTH = 3
CAPTURE_RATIO = 0.7
SHORT_CHUNK_WORDS = 3


def normalize_text(text: str) -> str:
    return re.sub(r"\s+", " ", text.lower()).strip()


def split_chunks(text: str) -> List[str]:
    """Paragraph-sized chunks worth checking."""
    if not text:
        return []
    chunks = (c.strip() for c in CHUNK_SPLIT_RE.split(text))
    return [c for c in chunks if len(c) > MIN_CHUNK_LENGTH]


def _iter_strings(value: Any) -> Iterator[str]:
    if isinstance(value, str):
        if value:
            yield value
    elif isinstance(value, Mapping):
        for v in value.values():
            yield from _iter_strings(v)
    elif isinstance(value, (list, tuple)):
        for v in value:
            yield from _iter_strings(v)
    elif value is not None and not isinstance(value, bool):
        yield str(value)


def flatten_record(record: ResumeRecord) -> str:
    """Every scalar and list element of the record, joined and normalized."""
    return normalize_text(" ".join(_iter_strings(record.model_dump())))


def _word_found(word: str, content: str, whole_words: bool) -> bool:
    if not whole_words:
        return word in content
    return re.search(rf"(?<!\w){re.escape(word)}(?!\w)", content) is not None


def verify(
    source_text: str,
    record: Union[ResumeRecord, Mapping[str, Any], None],
    *,
    whole_words: bool = False,
) -> CoverageReport:
    """
    Measure what share of ``source_text`` paragraphs is represented in ``record``.

    Args:
        source_text: the text the record was extracted from
        record: a ResumeRecord or any partial mapping (normalized first)
        whole_words: match words as whole tokens instead of substrings

    Returns:
        CoverageReport with the percentage and the missing chunks in source order
    """
    if not isinstance(record, ResumeRecord):
        record = normalize(record)
    content = flatten_record(record)

    chunks = split_chunks(source_text or "")
    missing: List[str] = []

    for chunk in chunks:
        words = [w for w in normalize_text(chunk).split(" ") if len(w) > MIN_WORD_LENGTH]
        captured = sum(1 for w in words if _word_found(w, content, whole_words))
        ratio = captured / len(words) if words else 0.0
        if ratio < CAPTURE_RATIO and len(words) > SHORT_CHUNK_WORDS:
            missing.append(chunk)
            logger.debug(f"Chunk missing ({captured}/{len(words)} words): '{chunk[:60]}'")

    total = len(chunks)
    captured_chunks = total - len(missing)
    percentage = (captured_chunks / total) * 100 if total else 100.0

    return CoverageReport(
        coverage_percentage=percentage,
        missing_content=missing,
        total_chunks=total,
        captured_chunks=captured_chunks,
    )
