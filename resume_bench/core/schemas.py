from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Literal, Optional


FieldOutcome = Literal["found", "absent", "failed"]
DocumentSource = Literal["pdf", "docx", "text"]


class FieldStatus(BaseModel):
    """Per-field extraction outcome. Tells callers which fields were left at their default and why."""
    field_name: str
    status: FieldOutcome = Field(..., description="found, absent (no matching line) or failed (extractor raised)")
    extraction_method: str = Field(..., description="How it was extracted (e.g., 'first_line', 'regex', 'section:experience')")
    reasons: List[str] = Field(default_factory=list, description="Why the status is what it is")


class ExperienceEntry(BaseModel):
    """Work experience entry. Profiles disagree on title/position and responsibilities/description."""
    model_config = ConfigDict(extra="allow")

    title: str = ""
    position: str = ""
    company: str = ""
    location: str = ""
    period: str = ""  # raw textual range, e.g. "Jan 2020 - Present"
    responsibilities: List[str] = Field(default_factory=list)
    description: List[str] = Field(default_factory=list)


class EducationEntry(BaseModel):
    model_config = ConfigDict(extra="allow")

    degree: str = ""
    institution: str = ""
    location: str = ""
    period: str = ""
    details: List[str] = Field(default_factory=list)  # Major, GPA, coursework, etc.


class ProjectEntry(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str = ""
    timeframe: str = ""
    link: str = ""
    description: List[str] = Field(default_factory=list)


class HonorEntry(BaseModel):
    model_config = ConfigDict(extra="allow")

    title: str = ""
    date: str = ""
    description: List[str] = Field(default_factory=list)


class ResumeRecord(BaseModel):
    """Canonical record every profile converges to after normalization."""
    model_config = ConfigDict(extra="allow")

    name: str = ""
    title: str = ""
    email: str = ""
    phone: str = ""
    linkedin: str = ""
    github: str = ""
    address: str = ""
    location: str = ""
    summary: str = ""
    experience: List[ExperienceEntry] = Field(default_factory=list)
    education: List[EducationEntry] = Field(default_factory=list)
    skills: List[str] = Field(default_factory=list)
    languages: List[str] = Field(default_factory=list)
    certifications: List[str] = Field(default_factory=list)
    projects: List[ProjectEntry] = Field(default_factory=list)
    honors: List[HonorEntry] = Field(default_factory=list)
    references: List[str] = Field(default_factory=list)


class CoverageReport(BaseModel):
    coverage_percentage: float = Field(..., ge=0.0, le=100.0, description="Share of source paragraphs represented in the record")
    missing_content: List[str] = Field(default_factory=list, description="Original chunks judged unrepresented")
    total_chunks: int = 0
    captured_chunks: int = 0


class Extraction(BaseModel):
    """Raw (pre-normalization) output of one extractor profile."""
    profile: str
    data: Dict[str, Any] = Field(default_factory=dict)
    field_status: Dict[str, FieldStatus] = Field(default_factory=dict)


class ProfileInfo(BaseModel):
    id: str
    display_name: str
    description: str


class ExtractedText(BaseModel):
    text: str
    page_count: int = 1
    source: DocumentSource = "text"


class ParseResponse(BaseModel):
    profile: str
    record: ResumeRecord
    coverage: CoverageReport
    field_status: Dict[str, FieldStatus] = Field(default_factory=dict)
    page_count: int = 1
    warnings: List[str] = Field(default_factory=list)


class VerifyRequest(BaseModel):
    text: str
    record: Dict[str, Any] = Field(default_factory=dict, description="Full or partial resume record; normalized before scoring")
    whole_words: bool = Field(default=False, description="Match words as whole tokens instead of substrings")


class ParserStats(BaseModel):
    name: bool = False
    email: bool = False
    phone: bool = False
    linkedin: bool = False
    github: bool = False
    location: bool = False
    experience_count: int = 0
    education_count: int = 0
    skills_count: int = 0
    projects_count: int = 0
    honors_count: int = 0
    languages_count: int = 0
    certifications_count: int = 0
    coverage_percentage: float = 0.0
    missing_content_count: int = 0
    score: float = 0.0


class ProfileResult(BaseModel):
    profile: str
    display_name: str
    stats: Optional[ParserStats] = None
    coverage: Optional[CoverageReport] = None
    error: Optional[str] = None


class ProfileComparison(BaseModel):
    results: Dict[str, ProfileResult] = Field(default_factory=dict)
    best_parser: str = "none"
    page_count: int = 1
