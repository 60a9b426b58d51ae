"""
Per-section field extraction.

Every structured section (experience, education, projects, honors) runs the
same two-phase state machine:

1. Entry boundary detection. A line starts a new entry when one of the
   profile's boundary signals fires. Signals are checked in order and the first
   hit commits the line as an entry start. There is no backtracking.
2. Field attribution. Any other line is offered to the profile's attribution
   rules, which fill a still-empty scalar field (first match wins). Lines no
   rule takes go to the entry's free-text list.

What differs between profiles (signals, date shapes, delimiters, filters) lives
in EntryRules / SkillRules data, not in code forks.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Pattern, Sequence, Tuple

from resume_bench.core.patterns import (
    BULLET_CHARS,
    DATE_RANGE_RE,
    GITHUB_RE,
    MONTH_SRC,
    URL_RE,
    remove_span,
    split_delimited,
    split_title_company,
    strip_bullet,
)

logger = logging.getLogger(__name__)


# Job-title keywords that mark a role line (compact layouts)
ROLE_KEYWORD_RE = re.compile(
    r"\b(?:Senior|Junior|Lead|Principal|Software|Engineer|Developer|Manager|Director|Consultant)\b",
    re.IGNORECASE,
)
# "Acme Corp ...", "Stanford University ..."
PROPER_NOUN_RE = re.compile(r"^[A-Z][a-z]+ [A-Z][a-z]+")
# Short capitalized line without sentence punctuation: "Senior Engineer", "Acme, Inc."
TITLE_LINE_RE = re.compile(r"^[A-Z][A-Za-z0-9\s\-&,\.]+$")
CAPITALIZED_RE = re.compile(r"^[A-Z][ A-Za-z-]+")
INSTITUTION_RE = re.compile(r"\b(?:University|College|School|Institute|Academy)\b")
# "San Francisco, CA", "London, United Kingdom"
CITY_REGION_RE = re.compile(r"^[A-Za-z .'-]+,\s*[A-Za-z .'-]+$")
STATE_CAPS_RE = re.compile(r"[A-Z]{2}")
PAREN_RE = re.compile(r"\(([^)]+)\)|\[([^\]]+)\]")
TIMEFRAME_HINT_RE = re.compile(rf"\d{{4}}|month|year|\b{MONTH_SRC}", re.IGNORECASE)
PROJECT_NAME_STRIP_RE = re.compile(r"[:" + BULLET_CHARS + r"]")

DEFAULT_DEGREE_KEYWORDS: Tuple[str, ...] = (
    r"bachelor'?s?",
    r"master'?s?",
    r"ph\.?\s?d\.?",
    r"doctorate",
    r"mba",
    r"b\.?sc\.?",
    r"b\.?s\.?",
    r"b\.?a\.?",
    r"m\.?sc\.?",
    r"m\.?s\.?",
    r"m\.a\.",
    r"associate'?s?",
)


def build_degree_pattern(keywords: Sequence[str]) -> Pattern[str]:
    """
    Degree keyword followed by the words that qualify it, up to a comma, pipe or digit.

    Examples:
      "Bachelor of Science in Computer Science, Stanford" -> "Bachelor of Science in Computer Science"
      "B.S. Mathematics 2016 - 2020"                       -> "B.S. Mathematics"
    """
    alternation = "|".join(keywords)
    return re.compile(
        rf"\b(?:{alternation})(?![A-Za-z])(?:[ \t]+[A-Za-z&.'()/-]+)*",
        re.IGNORECASE,
    )


DEGREE_RE = build_degree_pattern(DEFAULT_DEGREE_KEYWORDS)


# ===== RULE DATA =====

@dataclass(frozen=True)
class EntryRules:
    """Tuning knobs for one structured section of one profile."""
    signals: Tuple[str, ...]
    date_pattern: Pattern[str] = DATE_RANGE_RE
    # When set, a signal only opens a new entry if the open entry already holds the field it would fill
    fill_mode: bool = False
    attribution: Tuple[str, ...] = ()
    strip_bullets: bool = False
    min_text_length: int = 1
    skip_duplicates: bool = False
    required_any: Tuple[str, ...] = ()
    max_title_length: int = 50
    # Experience
    title_field: str = "title"
    text_field: Optional[str] = None
    delimiters: Tuple[str, ...] = (" at ", " | ", ", ")
    fallback: str = "title"
    undated_delimiters: Tuple[str, ...] = (" at ",)
    # Education
    degree_pattern: Pattern[str] = DEGREE_RE
    degree_from_line: bool = False
    institution_filter: bool = False
    # Line right after an opener fills this field when it is still empty (student layouts)
    next_field: Optional[str] = None
    # Projects: "parenthetical" timeframe "(2021)" or a "date" range match
    timeframe_style: str = "parenthetical"


@dataclass(frozen=True)
class SkillRules:
    """
    mode="any": split every line on all delimiter characters at once.
    mode="first": split on the first delimiter group present in the line, else keep the line whole.
    """
    mode: str = "any"
    groups: Tuple[str, ...] = (",|•·;",)
    min_length: int = 2


@dataclass
class _Entry:
    fields: Dict[str, Any]
    text_field: str
    absorbed: int = 0
    text: List[str] = field(default_factory=list)

    def get(self, key: str) -> str:
        return self.fields.get(key) or ""

    def to_dict(self) -> Dict[str, Any]:
        out = dict(self.fields)
        out[self.text_field] = list(self.text)
        return out


# ===== STATE MACHINE =====

def collect_entries(
    lines: Sequence[str],
    starts_entry: Callable[[int, str, Optional[_Entry]], bool],
    open_entry: Callable[[int, str], _Entry],
    absorb: Callable[[_Entry, str], None],
    keep: Optional[Callable[[_Entry], bool]] = None,
) -> List[Dict[str, Any]]:
    """Run boundary detection + field attribution over a section's lines."""
    entries: List[_Entry] = []
    current: Optional[_Entry] = None

    def _close(entry: Optional[_Entry]) -> None:
        if entry is None:
            return
        if keep is None or keep(entry):
            entries.append(entry)
        else:
            logger.debug(f"Dropping entry without required fields: {entry.fields}")

    for idx, line in enumerate(lines):
        if starts_entry(idx, line, current):
            _close(current)
            current = open_entry(idx, line)
            logger.debug(f"  -> entry start at line {idx}: '{line}'")
        elif current is not None:
            absorb(current, line)
            current.absorbed += 1
        # lines before the first entry start belong to no entry

    _close(current)
    return [e.to_dict() for e in entries]


def _awaiting_next(entry: Optional[_Entry], rules: EntryRules) -> bool:
    return (
        entry is not None
        and rules.next_field is not None
        and entry.absorbed == 0
        and not entry.get(rules.next_field)
    )


SignalFn = Callable[[int, str, Optional[_Entry], EntryRules], bool]

SIGNALS: Dict[str, SignalFn] = {
    "first_line": lambda idx, line, cur, r: idx == 0,
    "short_first_line": lambda idx, line, cur, r: idx == 0 and len(line) < r.max_title_length,
    "date": lambda idx, line, cur, r: bool(r.date_pattern.search(line)),
    "date_new_period": lambda idx, line, cur, r: (
        bool(r.date_pattern.search(line)) and (cur is None or bool(cur.get("period")))
    ),
    "role_keyword": lambda idx, line, cur, r: bool(ROLE_KEYWORD_RE.search(line)),
    "proper_noun": lambda idx, line, cur, r: bool(PROPER_NOUN_RE.match(line)),
    "title_line": lambda idx, line, cur, r: (
        bool(TITLE_LINE_RE.match(line))
        and (idx == 0 or len(line) < r.max_title_length)
        and not r.date_pattern.search(line)
        and not _awaiting_next(cur, r)
    ),
    "degree_keyword": lambda idx, line, cur, r: bool(r.degree_pattern.search(line)),
    "institution_keyword": lambda idx, line, cur, r: bool(INSTITUTION_RE.search(line)),
    "link": lambda idx, line, cur, r: bool(URL_RE.search(line)) or "github" in line.lower(),
    "colon_suffix": lambda idx, line, cur, r: line.rstrip().endswith(":"),
    "capitalized": lambda idx, line, cur, r: bool(CAPITALIZED_RE.match(line)),
    "short_capitalized": lambda idx, line, cur, r: (
        line[:1].isupper() and len(line) < r.max_title_length
    ),
}


def _boundary(targets: Dict[str, str], rules: EntryRules) -> Callable[[int, str, Optional[_Entry]], bool]:
    unknown = [s for s in rules.signals if s not in SIGNALS]
    if unknown:
        raise ValueError(f"Unknown boundary signals: {unknown}")

    def _starts_entry(idx: int, line: str, current: Optional[_Entry]) -> bool:
        for name in rules.signals:
            if not SIGNALS[name](idx, line, current, rules):
                continue
            target = targets.get(name)
            if rules.fill_mode and current is not None and target and not current.get(target):
                continue
            return True
        return False

    return _starts_entry


# ===== FIELD ATTRIBUTION =====

def _add_text(entry: _Entry, line: str, rules: EntryRules) -> None:
    t = strip_bullet(line) if rules.strip_bullets else line.strip()
    if len(t) < rules.min_text_length:
        return
    if rules.skip_duplicates and t in {v for v in entry.fields.values() if isinstance(v, str) and v}:
        return
    entry.text.append(t)


def _place_remainder(entry: _Entry, rest: str, candidates: Sequence[str]) -> None:
    """Put leftover text into the first empty candidate field; location only takes 'City, Region'."""
    for key in candidates:
        if key not in entry.fields or entry.get(key):
            continue
        if key == "location" and not CITY_REGION_RE.match(rest):
            continue
        entry.fields[key] = rest
        return
    entry.text.append(rest)


def _place_title_company(entry: _Entry, rest: str, rules: EntryRules) -> bool:
    """Split a delimited "role at employer" remainder; parts whose field is already set become text."""
    if "company" not in entry.fields or CITY_REGION_RE.match(rest):
        return False
    if not any(d in rest for d in rules.delimiters):
        return False
    title, company = split_title_company(rest, rules.delimiters, rules.fallback)
    for key, value in ((rules.title_field, title), ("company", company)):
        if not value:
            continue
        if entry.get(key):
            entry.text.append(value)
        else:
            entry.fields[key] = value
    return True


def _attr_period(entry: _Entry, line: str, rules: EntryRules) -> bool:
    if entry.get("period"):
        return False
    text = strip_bullet(line)
    m = rules.date_pattern.search(text)
    if not m:
        return False
    entry.fields["period"] = m.group(0).strip()
    rest = remove_span(text, m)
    if rest and not _place_title_company(entry, rest, rules):
        _place_remainder(entry, rest, ("location", "company", "institution"))
    return True


def _attr_location(entry: _Entry, line: str, rules: EntryRules) -> bool:
    if entry.get("location") or "location" not in entry.fields:
        return False
    t = line.strip()
    if t[:1] in BULLET_CHARS or len(t) > rules.max_title_length:
        return False
    if ", " in t and STATE_CAPS_RE.search(t):
        entry.fields["location"] = t
        return True
    return False


def _attr_degree(entry: _Entry, line: str, rules: EntryRules) -> bool:
    if entry.get("degree"):
        return False
    m = rules.degree_pattern.search(line)
    if not m:
        return False
    entry.fields["degree"] = m.group(0).strip(" ,;|")
    rest = remove_span(line, m)
    if rest:
        _place_remainder(entry, rest, ("institution",))
    return True


def _attr_institution(entry: _Entry, line: str, rules: EntryRules) -> bool:
    if entry.get("institution") or not INSTITUTION_RE.search(line):
        return False
    entry.fields["institution"] = strip_bullet(line)
    return True


def _attr_next(entry: _Entry, line: str, rules: EntryRules) -> bool:
    if not _awaiting_next(entry, rules):
        return False
    t = line.strip()
    if len(t) >= rules.max_title_length or rules.date_pattern.search(t):
        return False
    entry.fields[rules.next_field] = t
    return True


ATTRIBUTION: Dict[str, Callable[[_Entry, str, EntryRules], bool]] = {
    "period": _attr_period,
    "location": _attr_location,
    "degree": _attr_degree,
    "institution": _attr_institution,
    "next": _attr_next,
}


def _absorber(rules: EntryRules) -> Callable[[_Entry, str], None]:
    unknown = [a for a in rules.attribution if a not in ATTRIBUTION]
    if unknown:
        raise ValueError(f"Unknown attribution rules: {unknown}")

    def _absorb(entry: _Entry, line: str) -> None:
        for name in rules.attribution:
            if ATTRIBUTION[name](entry, line, rules):
                return
        _add_text(entry, line, rules)

    return _absorb


def _keeper(rules: EntryRules) -> Optional[Callable[[_Entry], bool]]:
    if not rules.required_any:
        return None
    return lambda entry: any(entry.get(k) for k in rules.required_any)


# ===== SECTION EXTRACTORS =====

def extract_experience(lines: Sequence[str], rules: EntryRules) -> List[Dict[str, Any]]:
    """
    Experience entries: {<title_field>, company, location, period, <text_field>}.

    The title key is "title" or "position" and the free-text key is
    "responsibilities" or "description", depending on the profile.
    """
    title_key = rules.title_field
    text_key = rules.text_field or "responsibilities"
    targets = {
        "date": "period",
        "role_keyword": title_key,
        "title_line": title_key,
        "proper_noun": "company",
    }

    def _open(idx: int, line: str) -> _Entry:
        entry = _Entry({title_key: "", "company": "", "location": "", "period": ""}, text_key)
        text = strip_bullet(line)
        m = rules.date_pattern.search(text)
        if m:
            entry.fields["period"] = m.group(0).strip()
            title, company = split_title_company(remove_span(text, m), rules.delimiters, rules.fallback)
        else:
            title, company = split_title_company(text, rules.undated_delimiters, "title")
        entry.fields[title_key] = title
        entry.fields["company"] = company
        return entry

    return collect_entries(lines, _boundary(targets, rules), _open, _absorber(rules), _keeper(rules))


def extract_education(lines: Sequence[str], rules: EntryRules) -> List[Dict[str, Any]]:
    """Education entries: {degree, institution, location, period, details}."""
    targets = {
        "date": "period",
        "degree_keyword": "degree",
        "institution_keyword": "institution",
        "proper_noun": "institution",
    }

    def _open(idx: int, line: str) -> _Entry:
        entry = _Entry({"degree": "", "institution": "", "location": "", "period": ""}, "details")
        text = strip_bullet(line)
        if rules.degree_from_line:
            entry.fields["degree"] = text
            return entry

        m = rules.date_pattern.search(text)
        if m:
            entry.fields["period"] = m.group(0).strip()
            text = remove_span(text, m)
        d = rules.degree_pattern.search(text)
        if d:
            entry.fields["degree"] = d.group(0).strip(" ,;|")
            text = remove_span(text, d)

        rest = " ".join(re.sub(r"[,;|]", " ", text).split())
        if rest:
            if not rules.institution_filter or INSTITUTION_RE.search(rest) or PROPER_NOUN_RE.match(rest):
                entry.fields["institution"] = rest
            else:
                entry.text.append(rest)
        return entry

    return collect_entries(lines, _boundary(targets, rules), _open, _absorber(rules), _keeper(rules))


def extract_projects(lines: Sequence[str], rules: EntryRules) -> List[Dict[str, Any]]:
    """Project entries: {name, timeframe, link, description}."""

    def _open(idx: int, line: str) -> _Entry:
        entry = _Entry({"name": "", "timeframe": "", "link": ""}, "description")
        text = line.strip()

        link = URL_RE.search(text) or GITHUB_RE.search(text)
        if link:
            entry.fields["link"] = link.group(0)
            text = (text[:link.start()] + text[link.end():]).strip()

        if rules.timeframe_style == "date":
            m = rules.date_pattern.search(text)
            if m:
                entry.fields["timeframe"] = m.group(0).strip("()[] ")
                head = text[:m.start()].strip(" ([-–—|,")
                text = head or remove_span(text, m)
        else:
            p = PAREN_RE.search(text)
            if p:
                inner = p.group(1) or p.group(2)
                if TIMEFRAME_HINT_RE.search(inner):
                    entry.fields["timeframe"] = inner.strip()
                    text = (text[:p.start()] + text[p.end():]).strip()

        entry.fields["name"] = " ".join(PROJECT_NAME_STRIP_RE.sub("", text).split()).strip(" -–|,")
        return entry

    return collect_entries(lines, _boundary({}, rules), _open, _absorber(rules), _keeper(rules))


def extract_honors(lines: Sequence[str], rules: EntryRules) -> List[Dict[str, Any]]:
    """Honor/award entries: {title, date, description}."""

    def _open(idx: int, line: str) -> _Entry:
        entry = _Entry({"title": "", "date": ""}, "description")
        text = strip_bullet(line)
        m = rules.date_pattern.search(text)
        if m:
            entry.fields["date"] = m.group(0).strip("()[] ")
            head = text[:m.start()].strip(" ([-–—|,")
            entry.fields["title"] = head or remove_span(text, m)
        else:
            entry.fields["title"] = text
        return entry

    return collect_entries(lines, _boundary({}, rules), _open, _absorber(rules), _keeper(rules))


def extract_skills(lines: Sequence[str], rules: SkillRules) -> List[str]:
    """
    Split skill lines into individual skills.

    Examples:
      "Go, Rust, C++"          -> ["Go", "Rust", "C++"]
      "Python • SQL • Docker"  -> ["Python", "SQL", "Docker"]
    """
    skills: List[str] = []
    for line in lines:
        if rules.mode == "any":
            parts = split_delimited(line, rules.groups[0])
        else:
            parts = [line.strip()]
            for group in rules.groups:
                if any(ch in line for ch in group):
                    parts = split_delimited(line, group)
                    break
        skills.extend(p for p in parts if len(p) >= rules.min_length)
    return skills


def extract_list(lines: Sequence[str]) -> List[str]:
    """Plain list sections (languages, certifications, references): one item per line."""
    return [strip_bullet(line) or line.strip() for line in lines if line.strip()]


def extract_summary(lines: Sequence[str]) -> str:
    return " ".join(line.strip() for line in lines).strip()
