"""
Section segmentation: label each resume line with the section it belongs to.

The header tables and match rules are per-profile data. The loop itself is
shared so every profile sees the same state machine:

  - a line matching any header phrase switches the current section and is dropped
  - a content line is re-checked against the whole table (and the profile's
    terminator); a hit there closes the current section instead of switching
  - lines before the first recognized header belong to no section
"""

import logging
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

SECTION_KEYS: Tuple[str, ...] = (
    "summary",
    "experience",
    "education",
    "skills",
    "projects",
    "certifications",
    "languages",
    "honors",
    "references",
)

HeaderTable = Mapping[str, Sequence[str]]
SectionMap = Dict[str, List[str]]
# (lowered line, raw line, phrase) -> bool
MatchRule = Callable[[str, str, str], bool]
Terminator = Callable[[str], bool]


def to_lines(text: str) -> List[str]:
    """Trimmed, non-empty lines in document order."""
    if not text:
        return []
    return [ln.strip() for ln in text.splitlines() if ln.strip()]


# ===== MATCH RULES =====

MATCH_RULES: Dict[str, MatchRule] = {
    "exact": lambda lowered, raw, phrase: lowered == phrase,
    "upper": lambda lowered, raw, phrase: raw == phrase.upper(),
    "colon": lambda lowered, raw, phrase: lowered.startswith(phrase + ":"),
    "space": lambda lowered, raw, phrase: lowered.startswith(phrase + " "),
    "bare": lambda lowered, raw, phrase: lowered.replace(":", "").strip() == phrase,
    "prefix": lambda lowered, raw, phrase: lowered.startswith(phrase),
}


def header_matches(line: str, phrase: str, rules: Sequence[str]) -> bool:
    raw = line.strip()
    lowered = raw.lower()
    return any(MATCH_RULES[name](lowered, raw, phrase) for name in rules)


def match_header(line: str, header_table: HeaderTable, rules: Sequence[str]) -> Optional[str]:
    """Return the first section whose phrase set matches ``line``, else None."""
    for section, phrases in header_table.items():
        for phrase in phrases:
            if header_matches(line, phrase, rules):
                return section
    return None


def all_caps_terminator(min_length: int = 10) -> Terminator:
    """All-caps lines longer than ``min_length`` end the open section (e.g. 'HONORS AND AWARDS')."""
    def _is_terminator(line: str) -> bool:
        t = line.strip()
        return len(t) > min_length and t.isupper()
    return _is_terminator


# ===== SEGMENTATION =====

def empty_section_map() -> SectionMap:
    return {key: [] for key in SECTION_KEYS}


def segment(
    lines: Sequence[str],
    header_table: HeaderTable,
    rules: Sequence[str],
    terminator: Optional[Terminator] = None,
) -> SectionMap:
    """
    Split lines into labeled sections.

    Args:
        lines: trimmed, non-empty resume lines
        header_table: section key -> header phrases (lower-case)
        rules: names from MATCH_RULES, evaluated with OR
        terminator: optional extra predicate that closes the open section

    Returns:
        Mapping with every SECTION_KEYS entry present (possibly empty)
    """
    unknown = [name for name in rules if name not in MATCH_RULES]
    if unknown:
        raise ValueError(f"Unknown header match rules: {unknown}")

    sections = empty_section_map()
    current_section: Optional[str] = None

    for idx, line in enumerate(lines):
        section = match_header(line, header_table, rules)
        if section:
            logger.debug(f"SECTION HEADER DETECTED at line {idx}: '{line}' -> section='{section}'")
            current_section = section
            continue

        if current_section is None:
            continue

        # The header table was already checked above, so only the terminator can close here.
        if terminator and terminator(line):
            logger.debug(f"Section '{current_section}' closed at line {idx}: '{line}'")
            current_section = None
            continue

        sections.setdefault(current_section, []).append(line)

    return sections
