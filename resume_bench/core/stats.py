"""
Per-profile statistics and best-profile ranking for one document.
"""

import logging
from typing import Dict, Iterable, Mapping, Optional

from resume_bench.core.coverage import verify
from resume_bench.core.profiles import PROFILES, get_profile
from resume_bench.core.schemas import (
    CoverageReport,
    ParserStats,
    ProfileComparison,
    ProfileResult,
    ResumeRecord,
)

logger = logging.getLogger(__name__)

CONTACT_FLAGS = ("name", "email", "phone", "linkedin", "github", "location")
# points per extracted item
ENTRY_WEIGHT = 0.5     # experience, education, projects
ITEM_WEIGHT = 0.25     # skills, honors, languages, certifications
COVERAGE_DIVISOR = 5
MISSING_PENALTY = 0.5


def collect_parser_stats(record: ResumeRecord, coverage: Optional[CoverageReport] = None) -> ParserStats:
    stats = ParserStats(
        name=bool(record.name),
        email=bool(record.email),
        phone=bool(record.phone),
        linkedin=bool(record.linkedin),
        github=bool(record.github),
        location=bool(record.location or record.address),
        experience_count=len(record.experience),
        education_count=len(record.education),
        skills_count=len(record.skills),
        projects_count=len(record.projects),
        honors_count=len(record.honors),
        languages_count=len(record.languages),
        certifications_count=len(record.certifications),
    )
    if coverage is not None:
        stats.coverage_percentage = coverage.coverage_percentage
        stats.missing_content_count = len(coverage.missing_content)
    stats.score = score_parser_stats(stats)
    return stats


def score_parser_stats(stats: ParserStats) -> float:
    """
    1 point per found contact field
    + 0.5 per experience/education/project entry
    + 0.25 per skill/honor/language/certification
    + coverage / 5
    - 0.5 per missing chunk
    """
    score = float(sum(1 for flag in CONTACT_FLAGS if getattr(stats, flag)))
    score += ENTRY_WEIGHT * (stats.experience_count + stats.education_count + stats.projects_count)
    score += ITEM_WEIGHT * (
        stats.skills_count + stats.honors_count + stats.languages_count + stats.certifications_count
    )
    score += stats.coverage_percentage / COVERAGE_DIVISOR
    score -= MISSING_PENALTY * stats.missing_content_count
    return score


def determine_best_parser(stats_by_profile: Mapping[str, Optional[ParserStats]]) -> str:
    """
    "none" when no profile produced stats, the only one when one did,
    otherwise the highest score. Ties go to the profile listed first.
    """
    succeeded = [(pid, s) for pid, s in stats_by_profile.items() if s is not None]
    if not succeeded:
        return "none"
    if len(succeeded) == 1:
        return succeeded[0][0]

    best_id, best_score = succeeded[0][0], score_parser_stats(succeeded[0][1])
    for pid, s in succeeded[1:]:
        score = score_parser_stats(s)
        if score > best_score:
            best_id, best_score = pid, score
    return best_id


def compare_profiles(
    text: str,
    profile_ids: Optional[Iterable[str]] = None,
    page_count: int = 1,
) -> ProfileComparison:
    """
    Run several profiles over one text and rank them.

    A profile that raises is recorded with its error and excluded from ranking;
    it never aborts the others. Unknown profile ids raise ProfileNotFound up front.
    """
    ids = list(profile_ids) if profile_ids is not None else list(PROFILES.keys())
    profiles = [get_profile(pid) for pid in ids]

    comparison = ProfileComparison(page_count=page_count)
    stats_by_profile: Dict[str, Optional[ParserStats]] = {}

    for profile in profiles:
        result = ProfileResult(profile=profile.id, display_name=profile.display_name)
        try:
            record = profile.parse(text)
            coverage = verify(text, record)
            result.coverage = coverage
            result.stats = collect_parser_stats(record, coverage)
        except Exception as e:
            logger.warning(f"Profile '{profile.id}' failed during comparison: {e}")
            result.error = str(e) or type(e).__name__
        stats_by_profile[profile.id] = result.stats
        comparison.results[profile.id] = result

    comparison.best_parser = determine_best_parser(stats_by_profile)
    logger.info(f"Best parser: {comparison.best_parser}")
    return comparison
