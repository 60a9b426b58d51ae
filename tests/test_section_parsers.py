"""Tests for per-section extraction (experience, education, skills, projects, honors)."""

import pytest

from resume_bench.core.profiles import COMPACT_PROFILE, DEFAULT_PROFILE, STUDENT_PROFILE
from resume_bench.core.section_parsers import (
    EntryRules,
    SkillRules,
    extract_education,
    extract_experience,
    extract_honors,
    extract_list,
    extract_projects,
    extract_skills,
    extract_summary,
)


# ===== EXPERIENCE =====

def test_default_experience_opens_entries_on_dates():
    """Lines before the first dated line belong to no entry; later lines are description."""
    lines = ["Senior Engineer at Acme", "Jan 2020 - Present", "Built things"]
    entries = extract_experience(lines, DEFAULT_PROFILE.experience)

    assert len(entries) == 1
    assert entries[0]["period"] == "Jan 2020 - Present"
    assert entries[0]["description"] == ["Built things"]
    assert entries[0]["position"] == ""


def test_default_experience_one_line_role_and_company():
    lines = [
        "Software Engineer at Google Jan 2019 - Dec 2021",
        "Shipped search features",
        "Initech - Mar 2018 - Dec 2018",
    ]
    entries = extract_experience(lines, DEFAULT_PROFILE.experience)

    assert len(entries) == 2
    assert entries[0]["position"] == "Software Engineer"
    assert entries[0]["company"] == "Google"
    assert entries[0]["period"] == "Jan 2019 - Dec 2021"
    assert entries[0]["description"] == ["Shipped search features"]
    # no delimiter left: the remainder is the company
    assert entries[1]["company"] == "Initech"
    assert entries[1]["position"] == ""


def test_compact_experience_title_company_then_dates():
    lines = [
        "Senior Engineer at Acme",
        "Jan 2020 - Present",
        "Austin, TX",
        "• Built things",
        "Staff Engineer at Globex",
        "2016 - 2019",
        "Led migrations",
    ]
    entries = extract_experience(lines, COMPACT_PROFILE.experience)

    assert len(entries) == 2
    first, second = entries
    assert first["title"] == "Senior Engineer"
    assert first["company"] == "Acme"
    assert first["period"] == "Jan 2020 - Present"
    assert first["location"] == "Austin, TX"
    assert first["responsibilities"] == ["Built things"]
    assert second["title"] == "Staff Engineer"
    assert second["company"] == "Globex"
    assert second["period"] == "2016 - 2019"
    assert second["responsibilities"] == ["Led migrations"]


def test_compact_experience_company_on_next_line():
    lines = ["Software Developer", "Initech", "2018 - 2020", "• Maintained billing"]
    entries = extract_experience(lines, COMPACT_PROFILE.experience)

    assert len(entries) == 1
    assert entries[0]["title"] == "Software Developer"
    assert entries[0]["company"] == "Initech"
    assert entries[0]["period"] == "2018 - 2020"
    assert entries[0]["responsibilities"] == ["Maintained billing"]


def test_student_experience_title_company_dates_location():
    lines = [
        "Software Engineering Intern",
        "Acme Corp",
        "06/2021 - 08/2021 | Austin, TX",
        "• Built internal dashboards",
        "Research Assistant",
        "State University",
        "• Ran experiments",
    ]
    entries = extract_experience(lines, STUDENT_PROFILE.experience)

    assert len(entries) == 2
    first, second = entries
    assert first["title"] == "Software Engineering Intern"
    assert first["company"] == "Acme Corp"
    assert first["period"] == "06/2021 - 08/2021"
    assert first["location"] == "Austin, TX"
    assert first["responsibilities"] == ["Built internal dashboards"]
    assert second["title"] == "Research Assistant"
    assert second["company"] == "State University"
    assert second["responsibilities"] == ["Ran experiments"]


def test_dated_line_remainder_split_into_role_and_employer():
    """Text left beside a date is split on " at " and only fills fields that are still empty."""
    lines = [
        "Research Assistant",
        "09/2019 - 05/2020 | Biology Lab at State University",
        "• Ran experiments",
    ]
    entries = extract_experience(lines, STUDENT_PROFILE.experience)

    assert len(entries) == 1
    entry = entries[0]
    assert entry["title"] == "Research Assistant"
    assert entry["company"] == "State University"
    assert entry["period"] == "09/2019 - 05/2020"
    assert entry["responsibilities"] == ["Biology Lab", "Ran experiments"]


def test_experience_empty_section():
    assert extract_experience([], DEFAULT_PROFILE.experience) == []


def test_unknown_signal_is_rejected():
    with pytest.raises(ValueError):
        extract_experience(["Engineer"], EntryRules(signals=("bogus",)))


# ===== EDUCATION =====

def test_default_education_single_line():
    lines = ["Stanford University, BS Computer Science, 2016 - 2020", "GPA 3.8"]
    entries = extract_education(lines, DEFAULT_PROFILE.education)

    assert len(entries) == 1
    edu = entries[0]
    assert edu["degree"] == "BS Computer Science"
    assert edu["institution"] == "Stanford University"
    assert edu["period"] == "2016 - 2020"
    assert edu["details"] == ["GPA 3.8"]


def test_compact_education_spread_over_lines():
    """Degree, institution and dates on separate lines stay one entry."""
    lines = ["BS Computer Science", "Stanford University", "2016 - 2020"]
    entries = extract_education(lines, COMPACT_PROFILE.education)

    assert len(entries) == 1
    edu = entries[0]
    assert edu["degree"] == "BS Computer Science"
    assert edu["institution"] == "Stanford University"
    assert edu["period"] == "2016 - 2020"
    assert edu["details"] == []


def test_student_education_degree_line_then_school():
    lines = [
        "Bachelor of Science in Computer Science",
        "State University",
        "09/2017 - 05/2021",
        "Dean's List recipient",
    ]
    entries = extract_education(lines, STUDENT_PROFILE.education)

    assert len(entries) == 1
    edu = entries[0]
    assert edu["degree"] == "Bachelor of Science in Computer Science"
    assert edu["institution"] == "State University"
    assert edu["period"] == "09/2017 - 05/2021"
    assert edu["details"] == ["Dean's List recipient"]


# ===== SKILLS / LISTS =====

def test_default_skills_split_on_any_delimiter():
    rules = DEFAULT_PROFILE.skills
    assert extract_skills(["Go, Rust, C++"], rules) == ["Go", "Rust", "C++"]
    assert extract_skills(["Python • SQL • Docker"], rules) == ["Python", "SQL", "Docker"]
    # single characters are dropped
    assert extract_skills(["C, Go"], rules) == ["Go"]


def test_compact_skills_first_delimiter_group_wins():
    rules = COMPACT_PROFILE.skills
    lines = ["• Python", "Go | Rust", "Kubernetes"]
    assert extract_skills(lines, rules) == ["Python", "Go", "Rust", "Kubernetes"]
    assert extract_skills(["Go, Rust | C"], rules) == ["Go", "Rust | C"]


def test_custom_skill_rules():
    rules = SkillRules(mode="any", groups=("/",), min_length=1)
    assert extract_skills(["AWS/GCP/Azure"], rules) == ["AWS", "GCP", "Azure"]


def test_plain_list_and_summary():
    assert extract_list(["English (native)", "• Spanish", "  "]) == ["English (native)", "Spanish"]
    assert extract_summary(["Engineer with", "ten years"]) == "Engineer with ten years"
    assert extract_summary([]) == ""


# ===== PROJECTS / HONORS =====

def test_compact_projects_link_and_timeframe():
    lines = [
        "Resume Parser (2021): https://github.com/jane/parser",
        "• Parses resumes with heuristics",
        "Budget Tracker",
        "• Tracks spending",
    ]
    projects = extract_projects(lines, COMPACT_PROFILE.projects)

    assert len(projects) == 2
    assert projects[0]["name"] == "Resume Parser"
    assert projects[0]["timeframe"] == "2021"
    assert projects[0]["link"] == "https://github.com/jane/parser"
    assert projects[0]["description"] == ["Parses resumes with heuristics"]
    assert projects[1]["name"] == "Budget Tracker"
    assert projects[1]["description"] == ["Tracks spending"]


def test_student_projects_date_range_timeframe():
    lines = [
        "Resume Parser (01/2021 - 05/2021)",
        "• Built a parser in Python",
        "Weather App",
        "• Flask and React frontend",
    ]
    projects = extract_projects(lines, STUDENT_PROFILE.projects)

    assert [p["name"] for p in projects] == ["Resume Parser", "Weather App"]
    assert projects[0]["timeframe"] == "01/2021 - 05/2021"
    assert projects[0]["description"] == ["Built a parser in Python"]
    assert projects[1]["timeframe"] == ""


def test_student_honors():
    lines = [
        "Dean's List (05/2020)",
        "• Top 5% of the class",
        "Hackathon Winner 2021",
        "First Place Award",
    ]
    honors = extract_honors(lines, STUDENT_PROFILE.honors)

    assert [h["title"] for h in honors] == ["Dean's List", "Hackathon Winner", "First Place Award"]
    assert honors[0]["date"] == "05/2020"
    assert honors[0]["description"] == ["Top 5% of the class"]
    assert honors[1]["date"] == "2021"
    assert honors[2]["date"] == ""
