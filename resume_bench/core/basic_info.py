"""
Header-block (contact) field extraction.

Each field has its own function so a profile can run them one at a time and
report a status per field. All of them look only at the first ``scan_limit``
lines; the first match wins.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Pattern, Sequence, Tuple

from resume_bench.core.patterns import (
    EMAIL_RE,
    GITHUB_RE,
    LINKEDIN_URL_RE,
    PHONE_RE,
    STATE_CODE_RE,
    digit_count,
    is_contact_info,
    looks_like_address,
)

logger = logging.getLogger(__name__)

LOCATION_INDICATORS: Tuple[str, ...] = ("located in", "location:", "address:", "city:")
LOCATION_KEYWORDS_RE = re.compile(r"^(?:location|address|based in|located in)\s*:?\s*", re.IGNORECASE)
CITY_REGION_RE = re.compile(r"^[A-Za-z .'-]+,\s*[A-Za-z .'-]+$")


@dataclass(frozen=True)
class BasicInfoRules:
    scan_limit: int = 15
    detect_title: bool = True
    phone_patterns: Tuple[Pattern[str], ...] = (PHONE_RE,)
    min_phone_digits: int = 7
    linkedin_patterns: Tuple[Pattern[str], ...] = (LINKEDIN_URL_RE,)
    # "none", "indicator" (compact headers) or "keyword" (student headers)
    location_style: str = "none"
    location_scan_limit: int = 15
    detect_address: bool = False


def _window(lines: Sequence[str], limit: int) -> Sequence[str]:
    return lines[:limit]


def _first_match(lines: Sequence[str], patterns: Sequence[Pattern[str]]) -> Optional[str]:
    for line in lines:
        for pattern in patterns:
            m = pattern.search(line)
            if m:
                return m.group(0).strip()
    return None


def extract_name(lines: Sequence[str], rules: BasicInfoRules) -> str:
    """First non-empty line, unconditionally."""
    return lines[0].strip() if lines else ""


def extract_title(lines: Sequence[str], rules: BasicInfoRules) -> str:
    """Second line, unless it is contact info."""
    if not rules.detect_title or len(lines) < 2:
        return ""
    candidate = lines[1].strip()
    if is_contact_info(candidate):
        logger.debug(f"Title candidate rejected (contact info): '{candidate}'")
        return ""
    return candidate


def extract_email(lines: Sequence[str], rules: BasicInfoRules) -> str:
    return _first_match(_window(lines, rules.scan_limit), (EMAIL_RE,)) or ""


def extract_phone(lines: Sequence[str], rules: BasicInfoRules) -> str:
    """
    Try each phone pattern in priority order per line; reject runs with fewer
    than ``min_phone_digits`` digits (years, zip codes).
    """
    for line in _window(lines, rules.scan_limit):
        for pattern in rules.phone_patterns:
            for m in pattern.finditer(line):
                value = m.group(0).strip()
                if digit_count(value) >= rules.min_phone_digits:
                    return value
    return ""


def extract_linkedin(lines: Sequence[str], rules: BasicInfoRules) -> str:
    return _first_match(_window(lines, rules.scan_limit), rules.linkedin_patterns) or ""


def extract_github(lines: Sequence[str], rules: BasicInfoRules) -> str:
    return _first_match(_window(lines, rules.scan_limit), (GITHUB_RE,)) or ""


def extract_location(lines: Sequence[str], rules: BasicInfoRules) -> str:
    """
    indicator: a line carrying "location:", "city:" ... or "<text>, <XX>" is taken whole
    keyword:   labelled line with the label stripped, else a bare "City, Region" line
    """
    if rules.location_style == "none":
        return ""
    # name and title lines never hold the location
    window = list(_window(lines, rules.location_scan_limit))[1:]

    if rules.location_style == "indicator":
        for line in window:
            if is_contact_info(line):
                continue
            lowered = line.lower()
            if any(ind in lowered for ind in LOCATION_INDICATORS):
                return line.strip()
            if "," in line and STATE_CODE_RE.search(line):
                return line.strip()
        return ""

    title = extract_title(lines, rules)
    for line in window:
        if LOCATION_KEYWORDS_RE.match(line):
            return LOCATION_KEYWORDS_RE.sub("", line).strip()
    for line in window:
        t = line.strip()
        if t == title or is_contact_info(t) or "university" in t.lower():
            continue
        if CITY_REGION_RE.match(t):
            return t
    return ""


def extract_address(lines: Sequence[str], rules: BasicInfoRules) -> str:
    if not rules.detect_address:
        return ""
    for line in _window(lines, rules.scan_limit):
        if looks_like_address(line):
            return line.strip()
    return ""


BASIC_FIELDS: Dict[str, Callable[[Sequence[str], BasicInfoRules], str]] = {
    "name": extract_name,
    "title": extract_title,
    "email": extract_email,
    "phone": extract_phone,
    "linkedin": extract_linkedin,
    "github": extract_github,
    "location": extract_location,
    "address": extract_address,
}

# How each field is found, reported in FieldStatus.extraction_method
BASIC_METHODS: Dict[str, str] = {
    "name": "first_line",
    "title": "second_line",
    "email": "regex",
    "phone": "regex",
    "linkedin": "regex",
    "github": "regex",
    "location": "header_scan",
    "address": "header_scan",
}
