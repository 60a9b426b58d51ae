"""
Pattern primitives shared by every extractor profile.

Profiles differ in *which* date shapes, delimiters and contact regexes they
accept, not in how those patterns are written. Everything here is pure and
compiled once.
"""

import re
from functools import lru_cache
from typing import List, Optional, Pattern, Sequence, Tuple


# ===== DATE RANGE PATTERN FAMILY =====

MONTH_SRC = (
    r"(?:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?"
    r"|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)\.?"
)
# "Jan 2020", "January 2020", "Jan. '20", "Sep-2019"
MONTH_YEAR_SRC = rf"{MONTH_SRC}[\s./'-]+(?:\d{{4}}|\d{{2}})"
# "01/05/2020", "05/2020", "5.2020", "05-2020", "05/20"
NUMERIC_DATE_SRC = r"(?:\d{1,2}/\d{1,2}/\d{2,4}|\d{1,2}[/.-]\d{4}|\d{1,2}/\d{2})"
BARE_YEAR_SRC = r"(?:19|20)\d{2}"
TERMINUS_SRC = r"(?:present|current|now)"
RANGE_JOINER_SRC = r"(?:\s*[-–—]+\s*|\s+(?:to|until)\s+)"


@lru_cache(maxsize=None)
def build_date_pattern(
    month_names: bool = True,
    numeric: bool = False,
    bare_year: bool = True,
    single: bool = True,
) -> Pattern[str]:
    """
    Build one member of the date pattern family.

    A date *point* is any of the enabled shapes (month name + year, numeric
    month/year, bare 4-digit year). A *range* is two points, or a point and
    present/current/now, joined by a hyphen, en/em dash, "to" or "until".
    Ranges are always preferred over single points at the same position;
    single points only match at all when ``single`` is set.
    """
    points = []
    if numeric:
        points.append(NUMERIC_DATE_SRC)
    if month_names:
        points.append(MONTH_YEAR_SRC)
    if bare_year:
        points.append(BARE_YEAR_SRC)
    if not points:
        raise ValueError("date pattern needs at least one point shape")

    point = "(?:" + "|".join(points) + ")"
    date_range = rf"{point}{RANGE_JOINER_SRC}(?:{point}|{TERMINUS_SRC})"
    body = f"{date_range}|{point}" if single else date_range
    return re.compile(rf"\b(?:{body})\b", re.IGNORECASE)


# Full range family, used when a profile does not ask for anything narrower
DATE_RANGE_RE = build_date_pattern(month_names=True, numeric=True, bare_year=True, single=False)


def find_date(text: str, pattern: Pattern[str] = DATE_RANGE_RE) -> Optional[re.Match]:
    return pattern.search(text)


def remove_span(text: str, match: re.Match) -> str:
    """Drop the matched span from text and tidy the seam it leaves behind."""
    remainder = text[:match.start()] + " " + text[match.end():]
    remainder = re.sub(r"[(\[]\s*[)\]]", " ", remainder)  # "()" left by "(2020 - 2021)"
    remainder = re.sub(r"\s+", " ", remainder).strip()
    return remainder.strip(" ,|;:-–—").strip()


# ===== BULLETS & DELIMITERS =====

BULLET_RE = re.compile(r"^[\s•●■◼▪◦‣·\-*>+]+")
BULLET_CHARS = "•●■◼▪◦‣"


def strip_bullet(text: str) -> str:
    return BULLET_RE.sub("", text).strip()


def split_delimited(text: str, delimiters: str) -> List[str]:
    """Split on any single character of ``delimiters``; keep non-empty trimmed parts."""
    parts = re.split("[" + re.escape(delimiters) + "]", text)
    return [p.strip() for p in parts if p.strip()]


def split_title_company(
    text: str,
    delimiters: Sequence[str] = (" at ", " | ", ", "),
    fallback: str = "title",
) -> Tuple[str, str]:
    """
    Split a "role + employer" remainder into (title, company).

    Delimiters are tried in priority order; the first one present wins and
    everything after it is the company. Without any delimiter the whole text
    lands in the ``fallback`` field ("title" or "company").

    Examples:
      "Senior Engineer at Acme"   -> ("Senior Engineer", "Acme")
      "Analyst | Globex, London"  -> ("Analyst", "Globex, London")
      "Initech"  (fallback=company) -> ("", "Initech")
    """
    t = text.strip()
    if not t:
        return "", ""
    for delim in delimiters:
        if delim in t:
            head, _, tail = t.partition(delim)
            return head.strip(), tail.strip()
    if fallback == "company":
        return "", t
    return t, ""


# ===== CONTACT INFO =====

EMAIL_RE = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
# US style with optional country code: (555) 123-4567, 555.123.4567, +1 555 123 4567
PHONE_RE = re.compile(r"(?:\+\d{1,2}\s?)?\(?\d{3}\)?[\s.-]?\d{3}[\s.-]?\d{4}")
PHONE_SHAPE_RE = re.compile(r"\d{3}[-.\s]?\d{3}[-.\s]?\d{4}")
# +XX XXX XXX XXX and similar spaced international numbers
INTL_PHONE_RE = re.compile(r"\+\d{1,3}\s\d{2,3}\s\d{3}\s\d{3,4}")
# Anything phone-ish with at least 7 digits in total; filtered in extract_phone
LOOSE_PHONE_RE = re.compile(r"(?:\+\d{1,3}[-.\s]?)?\(?\d{1,4}\)?(?:[-.\s]?\d{1,4}){1,3}")

LINKEDIN_URL_RE = re.compile(r"linkedin\.com/in/[a-zA-Z0-9-]+", re.IGNORECASE)
LINKEDIN_LABEL_RE = re.compile(r"linkedin:\s*[a-zA-Z0-9/-]+", re.IGNORECASE)
GITHUB_RE = re.compile(r"github\.com/[a-zA-Z0-9-]+", re.IGNORECASE)
URL_RE = re.compile(r"https?://[^\s)>\]]+", re.IGNORECASE)

ADDRESS_STREET_RE = re.compile(
    r"\b(?:St|Ave|Rd|Road|Blvd|Street|Avenue|Lane|Ln|Drive|Dr|Way|Court|Ct)\b\.?"
)
ZIP_RE = re.compile(r"\b\d{5}(?:-\d{4})?\b")
STATE_CODE_RE = re.compile(r"\b[A-Z]{2}\b")


def digit_count(text: str) -> int:
    return sum(c.isdigit() for c in text)


def is_contact_info(line: str) -> bool:
    """Email, phone-shaped digit run, or a linkedin/github mention."""
    lowered = line.lower()
    return (
        "@" in line
        or "linkedin" in lowered
        or "github" in lowered
        or bool(PHONE_SHAPE_RE.search(line))
        or bool(PHONE_RE.search(line))
        or bool(INTL_PHONE_RE.search(line))
    )


def looks_like_address(line: str) -> bool:
    """Street marker + two-letter state + ZIP, e.g. '12 Main St, Springfield, IL 62701'."""
    return bool(
        ADDRESS_STREET_RE.search(line)
        and STATE_CODE_RE.search(line)
        and ZIP_RE.search(line)
    )
