"""Tests for extractor profiles, the registry and end-to-end parsing."""

import pytest

from resume_bench.core import profiles
from resume_bench.core.coverage import verify
from resume_bench.core.errors import ProfileNotFound, ResumeParseError
from resume_bench.core.profiles import get_profile, list_profiles, parse_resume

SAMPLE = (
    "Jane Doe\nEngineer\njane@x.com | 555-123-4567\n\n"
    "EXPERIENCE\nSenior Engineer at Acme\nJan 2020 - Present\nBuilt things\n\n"
    "SKILLS\nGo, Rust, C++"
)

STUDENT_SAMPLE = """Alex Kim
Computer Science Student
alex.kim@example.edu | (555) 987-6543
Boston, MA
github.com/alexkim

EDUCATION
Bachelor of Science in Computer Science
State University
09/2017 - 05/2021

PROJECTS
Resume Parser (01/2021 - 05/2021)
• Built a parser in Python

HONORS
Dean's List (05/2020)
"""


def test_registry_lists_three_profiles():
    infos = list_profiles()
    assert [p.id for p in infos] == ["default", "compact", "student"]
    assert all(p.display_name and p.description for p in infos)


def test_unknown_profile_raises_with_available_ids():
    with pytest.raises(ProfileNotFound) as exc:
        get_profile("nope")
    assert exc.value.profile_id == "nope"
    assert exc.value.available == ["default", "compact", "student"]

    with pytest.raises(ProfileNotFound):
        parse_resume(SAMPLE, "nope")


@pytest.mark.parametrize("profile_id", [None, "default", "compact"])
def test_end_to_end_sample(profile_id):
    """Name, email, one dated experience entry and split skills."""
    record = parse_resume(SAMPLE, profile_id)

    assert record.name == "Jane Doe"
    assert record.email == "jane@x.com"
    assert record.phone == "555-123-4567"
    assert len(record.experience) == 1
    period = record.experience[0].period
    assert "Jan 2020" in period and "Present" in period
    assert record.experience[0].responsibilities == ["Built things"]
    assert record.skills == ["Go", "Rust", "C++"]


def test_student_profile_treats_short_capitalized_line_as_new_role():
    """Under the student layout "Built things" reads as a title line and opens a second entry."""
    record = parse_resume(SAMPLE, "student")

    assert [e.title for e in record.experience] == ["Senior Engineer", "Built things"]
    first = record.experience[0]
    assert first.company == "Acme"
    assert "Jan 2020" in first.period
    assert first.responsibilities == []
    assert record.skills == ["Go", "Rust", "C++"]


def test_compact_profile_keeps_role_and_employer():
    record = parse_resume(SAMPLE, "compact")
    exp = record.experience[0]
    assert exp.title == "Senior Engineer"
    assert exp.position == "Senior Engineer"
    assert exp.company == "Acme"


def test_empty_text_gives_default_record_and_full_coverage():
    for profile_id in (None, "default", "compact", "student"):
        record = parse_resume("", profile_id)
        data = record.model_dump()
        assert all(v == "" for k, v in data.items() if isinstance(v, str))
        assert all(v == [] for k, v in data.items() if isinstance(v, list))
        assert verify("", record).coverage_percentage == 100.0


def test_student_profile_sections():
    record = parse_resume(STUDENT_SAMPLE, "student")

    assert record.name == "Alex Kim"
    assert record.title == "Computer Science Student"
    assert record.email == "alex.kim@example.edu"
    assert record.phone == "(555) 987-6543"
    assert record.location == "Boston, MA"
    assert record.github == "github.com/alexkim"

    assert len(record.education) == 1
    assert record.education[0].institution == "State University"
    assert record.education[0].period == "09/2017 - 05/2021"

    assert [p.name for p in record.projects] == ["Resume Parser"]
    assert record.projects[0].timeframe == "01/2021 - 05/2021"
    assert [h.title for h in record.honors] == ["Dean's List"]


def test_field_status_reports_found_and_absent():
    extraction = get_profile("default").extract(SAMPLE)
    status = extraction.field_status

    assert status["name"].status == "found"
    assert status["name"].extraction_method == "first_line"
    assert status["email"].status == "found"
    assert status["linkedin"].status == "absent"
    assert status["education"].status == "absent"
    assert status["experience"].extraction_method == "section:experience"


def test_failing_field_is_marked_failed_not_fatal(monkeypatch):
    """One extractor raising leaves that field at its default and the rest intact."""
    def boom(lines, rules):
        raise RuntimeError("boom")

    monkeypatch.setattr(profiles, "extract_experience", boom)
    profile = get_profile("default")
    extraction = profile.extract(SAMPLE)

    assert extraction.field_status["experience"].status == "failed"
    assert extraction.field_status["experience"].reasons == ["RuntimeError: boom"]
    assert "experience" not in extraction.data

    record = profile.parse(SAMPLE)
    assert record.experience == []
    assert record.skills == ["Go", "Rust", "C++"]


def test_parse_without_profile_falls_through_failures(monkeypatch):
    def broken(text):
        raise RuntimeError("broken")

    monkeypatch.setattr(profiles.PROFILES["default"], "parse", broken)
    record = parse_resume(SAMPLE)
    # compact ran instead
    assert record.experience[0].title == "Senior Engineer"

    for profile in profiles.PROFILES.values():
        monkeypatch.setattr(profile, "parse", broken)
    with pytest.raises(ResumeParseError):
        parse_resume(SAMPLE)
