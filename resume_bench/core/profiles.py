"""
Extractor profiles and the profile registry.

A profile is pure configuration: header phrase table, header match rules,
basic-info rules and one EntryRules/SkillRules per section it extracts. The
ExtractorProfile class runs the shared segmenter and section parsers with that
configuration, one field at a time, so a failing field never sinks the parse.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from resume_bench.core.basic_info import (
    BASIC_FIELDS,
    BASIC_METHODS,
    BasicInfoRules,
)
from resume_bench.core.errors import ProfileNotFound, ResumeParseError
from resume_bench.core.normalizer import normalize
from resume_bench.core.patterns import (
    INTL_PHONE_RE,
    LINKEDIN_LABEL_RE,
    LINKEDIN_URL_RE,
    LOOSE_PHONE_RE,
    PHONE_RE,
    build_date_pattern,
)
from resume_bench.core.schemas import Extraction, FieldStatus, ProfileInfo, ResumeRecord
from resume_bench.core.section_parsers import (
    DEFAULT_DEGREE_KEYWORDS,
    EntryRules,
    SkillRules,
    build_degree_pattern,
    extract_education,
    extract_experience,
    extract_honors,
    extract_list,
    extract_projects,
    extract_skills,
    extract_summary,
)
from resume_bench.core.segmenter import Terminator, all_caps_terminator, segment, to_lines

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProfileConfig:
    id: str
    display_name: str
    description: str
    header_table: Mapping[str, Tuple[str, ...]]
    header_rules: Tuple[str, ...]
    basic_info: BasicInfoRules
    terminator: Optional[Terminator] = None
    summary: bool = True
    experience: Optional[EntryRules] = None
    education: Optional[EntryRules] = None
    skills: Optional[SkillRules] = None
    projects: Optional[EntryRules] = None
    honors: Optional[EntryRules] = None
    list_sections: Tuple[str, ...] = ()


class ExtractorProfile:
    """One heuristic configuration specialized for a resume layout family."""

    def __init__(self, config: ProfileConfig):
        self.config = config

    @property
    def id(self) -> str:
        return self.config.id

    @property
    def display_name(self) -> str:
        return self.config.display_name

    @property
    def description(self) -> str:
        return self.config.description

    def info(self) -> ProfileInfo:
        return ProfileInfo(id=self.id, display_name=self.display_name, description=self.description)

    def extract(self, text: str) -> Extraction:
        """
        Run segmentation and every field extractor over ``text``.

        Returns the raw (pre-normalization) record plus a FieldStatus per field.
        Fields whose extractor raises are logged, marked "failed" and left out
        of ``data`` so the normalizer fills their default.
        """
        cfg = self.config
        lines = to_lines(text or "")
        sections = segment(lines, cfg.header_table, cfg.header_rules, cfg.terminator)
        found = {k: len(v) for k, v in sections.items() if v}
        logger.debug(f"[{self.id}] {len(lines)} lines, sections: {found}")

        data: Dict[str, Any] = {}
        status: Dict[str, FieldStatus] = {}

        def _run(field_name: str, method: str, fn: Callable[[], Any]) -> None:
            try:
                value = fn()
            except Exception as e:
                logger.warning(f"[{self.id}] extractor for '{field_name}' failed: {e}", exc_info=True)
                status[field_name] = FieldStatus(
                    field_name=field_name,
                    status="failed",
                    extraction_method=method,
                    reasons=[f"{type(e).__name__}: {e}"],
                )
                return
            data[field_name] = value
            if value:
                status[field_name] = FieldStatus(field_name=field_name, status="found", extraction_method=method)
            else:
                status[field_name] = FieldStatus(
                    field_name=field_name,
                    status="absent",
                    extraction_method=method,
                    reasons=["no matching line"],
                )

        for field_name, fn in BASIC_FIELDS.items():
            _run(field_name, BASIC_METHODS[field_name], lambda fn=fn: fn(lines, cfg.basic_info))

        if cfg.summary:
            _run("summary", "section:summary", lambda: extract_summary(sections["summary"]))

        section_runs: Sequence[Tuple[str, Any, Callable[[Sequence[str], Any], Any]]] = (
            ("experience", cfg.experience, extract_experience),
            ("education", cfg.education, extract_education),
            ("skills", cfg.skills, extract_skills),
            ("projects", cfg.projects, extract_projects),
            ("honors", cfg.honors, extract_honors),
        )
        for key, rules, extractor in section_runs:
            if rules is None:
                continue
            _run(key, f"section:{key}", lambda key=key, rules=rules, extractor=extractor: extractor(sections[key], rules))

        for key in cfg.list_sections:
            _run(key, f"section:{key}", lambda key=key: extract_list(sections[key]))

        return Extraction(profile=self.id, data=data, field_status=status)

    def parse(self, text: str) -> ResumeRecord:
        return normalize(self.extract(text).data)


# ===== PROFILE CONFIGURATIONS =====

DEFAULT_HEADERS: Dict[str, Tuple[str, ...]] = {
    "summary": ("summary", "professional summary", "profile", "about me", "objective"),
    "experience": (
        "experience",
        "work experience",
        "employment history",
        "work history",
        "professional experience",
    ),
    "education": ("education", "academic background", "academic history"),
    "skills": ("skills", "technical skills", "core competencies", "competencies", "key skills"),
    "languages": ("languages", "language proficiency"),
    "certifications": ("certifications", "certificates", "professional certifications"),
}

COMPACT_HEADERS: Dict[str, Tuple[str, ...]] = {
    "summary": ("summary", "professional summary", "profile", "about me", "about"),
    "experience": (
        "experience",
        "work experience",
        "employment history",
        "work history",
        "professional experience",
    ),
    "education": ("education", "academic background", "academic history", "qualifications"),
    "skills": (
        "skills",
        "technical skills",
        "core competencies",
        "competencies",
        "key skills",
        "technical competencies",
    ),
    "projects": ("projects", "key projects", "personal projects", "professional projects"),
    "certifications": ("certifications", "certificates", "credentials", "professional certifications"),
    "languages": ("languages", "language proficiency", "spoken languages"),
}

STUDENT_HEADERS: Dict[str, Tuple[str, ...]] = {
    "summary": ("summary", "profile", "objective", "about me", "professional summary"),
    "experience": ("experience", "work experience", "professional experience", "employment history"),
    "education": ("education", "educational background", "academic background"),
    "skills": ("skills", "technical skills", "core competencies", "expertise"),
    "projects": ("projects", "key projects", "personal projects", "academic projects"),
    "honors": ("honors", "awards", "achievements", "recognitions", "honours and awards"),
    "references": ("references", "recommendations"),
}

# Range-only month/year + bare-year dates ("Jan 2020 - Present", "2016 - 2020")
RANGE_DATES = build_date_pattern(month_names=True, numeric=False, bare_year=True, single=False)
# Month + year, numeric month/year; single dates count ("05/2021", "May 2021 - 08/2021")
STUDENT_DATES = build_date_pattern(month_names=True, numeric=True, bare_year=False, single=True)

DEFAULT_PROFILE = ProfileConfig(
    id="default",
    display_name="Default Parser",
    description="General-purpose parser for common resume layouts",
    header_table=DEFAULT_HEADERS,
    header_rules=("exact", "upper", "colon", "space"),
    basic_info=BasicInfoRules(scan_limit=15, detect_address=True),
    experience=EntryRules(
        signals=("date",),
        date_pattern=build_date_pattern(month_names=True, numeric=False, bare_year=False, single=True),
        title_field="position",
        text_field="description",
        delimiters=(" at ", " | ", " - ", " – "),
        fallback="company",
    ),
    education=EntryRules(
        signals=("date", "degree_keyword"),
        date_pattern=build_date_pattern(month_names=True, numeric=False, bare_year=True, single=True),
    ),
    skills=SkillRules(mode="any", groups=(",|•·;",), min_length=2),
    list_sections=("languages", "certifications"),
)

COMPACT_PROFILE = ProfileConfig(
    id="compact",
    display_name="Compact Parser",
    description="Parser for compact layouts with a title/company line followed by dates",
    header_table=COMPACT_HEADERS,
    header_rules=("exact", "upper", "colon"),
    basic_info=BasicInfoRules(
        scan_limit=10,
        linkedin_patterns=(LINKEDIN_URL_RE, LINKEDIN_LABEL_RE),
        location_style="indicator",
        location_scan_limit=15,
    ),
    experience=EntryRules(
        signals=("first_line", "date_new_period", "role_keyword", "proper_noun"),
        date_pattern=RANGE_DATES,
        fill_mode=True,
        attribution=("period", "location", "next"),
        next_field="company",
        strip_bullets=True,
        required_any=("title", "company"),
    ),
    education=EntryRules(
        signals=("first_line", "degree_keyword", "date_new_period", "institution_keyword", "proper_noun"),
        date_pattern=RANGE_DATES,
        fill_mode=True,
        attribution=("period", "degree", "institution"),
        degree_pattern=build_degree_pattern(
            DEFAULT_DEGREE_KEYWORDS + (r"b\.e\.", r"m\.e\.", r"b\.?tech", r"m\.?tech")
        ),
        institution_filter=True,
        strip_bullets=True,
        required_any=("degree", "institution"),
    ),
    skills=SkillRules(mode="first", groups=("•●■◼▪◦‣", ",", "|"), min_length=1),
    projects=EntryRules(
        signals=("first_line", "link", "colon_suffix", "capitalized"),
        timeframe_style="parenthetical",
        strip_bullets=True,
        required_any=("name",),
    ),
    list_sections=("certifications", "languages"),
)

STUDENT_PROFILE = ProfileConfig(
    id="student",
    display_name="Student Parser",
    description="Parser for modern student/graduate resumes with projects and honors",
    header_table=STUDENT_HEADERS,
    header_rules=("exact", "bare", "prefix"),
    terminator=all_caps_terminator(10),
    basic_info=BasicInfoRules(
        scan_limit=15,
        phone_patterns=(INTL_PHONE_RE, PHONE_RE, LOOSE_PHONE_RE),
        location_style="keyword",
    ),
    experience=EntryRules(
        signals=("title_line",),
        date_pattern=STUDENT_DATES,
        attribution=("period", "next"),
        next_field="company",
        strip_bullets=True,
        min_text_length=4,
        skip_duplicates=True,
    ),
    education=EntryRules(
        signals=("degree_keyword", "short_first_line"),
        date_pattern=STUDENT_DATES,
        attribution=("period", "next"),
        next_field="institution",
        degree_pattern=build_degree_pattern(
            DEFAULT_DEGREE_KEYWORDS + (r"m\.b\.a\.", r"diploma", r"certificate", r"degree")
        ),
        degree_from_line=True,
        strip_bullets=True,
        min_text_length=4,
        skip_duplicates=True,
    ),
    skills=SkillRules(mode="first", groups=(",", "•"), min_length=1),
    projects=EntryRules(
        signals=("title_line", "date"),
        date_pattern=build_date_pattern(month_names=False, numeric=True, bare_year=False, single=False),
        timeframe_style="date",
        strip_bullets=True,
        required_any=("name",),
    ),
    honors=EntryRules(
        signals=("first_line", "date", "short_capitalized"),
        date_pattern=build_date_pattern(month_names=True, numeric=True, bare_year=True, single=True),
        strip_bullets=True,
        required_any=("title",),
    ),
    list_sections=("references",),
)


# ===== REGISTRY =====

PROFILES: Dict[str, ExtractorProfile] = {
    cfg.id: ExtractorProfile(cfg) for cfg in (DEFAULT_PROFILE, COMPACT_PROFILE, STUDENT_PROFILE)
}


def list_profiles() -> List[ProfileInfo]:
    return [p.info() for p in PROFILES.values()]


def get_profile(profile_id: str) -> ExtractorProfile:
    try:
        return PROFILES[profile_id]
    except KeyError:
        raise ProfileNotFound(profile_id, PROFILES.keys()) from None


def parse_resume(text: str, profile_id: Optional[str] = None) -> ResumeRecord:
    """
    Parse ``text`` into a canonical record.

    With a profile id, that profile is used (unknown id -> ProfileNotFound).
    Without one, every registered profile is tried in order and the first that
    completes wins; ResumeParseError is raised only if all of them failed.
    """
    if profile_id is not None:
        return get_profile(profile_id).parse(text)

    errors: List[str] = []
    for profile in PROFILES.values():
        try:
            return profile.parse(text)
        except Exception as e:
            logger.warning(f"Profile '{profile.id}' failed: {e}")
            errors.append(f"{profile.id}: {e}")
    raise ResumeParseError(f"All parser profiles failed: {'; '.join(errors)}")
