from typing import List, Optional

from fastapi import APIRouter, File, HTTPException, Query, UploadFile

from resume_bench.core import config
from resume_bench.core.coverage import verify
from resume_bench.core.errors import InputUnreadable, ProfileNotFound, UnsupportedDocument
from resume_bench.core.normalizer import normalize
from resume_bench.core.profiles import ExtractorProfile, get_profile
from resume_bench.core.schemas import (
    CoverageReport,
    ExtractedText,
    ParseResponse,
    ProfileComparison,
    VerifyRequest,
)
from resume_bench.core.stats import compare_profiles
from resume_bench.core.text_extraction import extract_text

router = APIRouter(tags=["parse"])


def _resolve_profile(profile_id: str) -> ExtractorProfile:
    try:
        return get_profile(profile_id)
    except ProfileNotFound as e:
        raise HTTPException(
            status_code=404,
            detail={"message": str(e), "available": e.available},
        )


async def _read_upload(file: UploadFile) -> ExtractedText:
    raw = await file.read()
    if not raw:
        raise HTTPException(status_code=400, detail="Empty file uploaded.")
    if len(raw) > config.MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=413,
            detail=f"File exceeds the {config.MAX_UPLOAD_BYTES} byte upload limit.",
        )

    try:
        return extract_text(raw, file.filename or "", file.content_type or "")
    except UnsupportedDocument as e:
        raise HTTPException(status_code=415, detail=str(e))
    except InputUnreadable as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.post(
    "/parse",
    response_model=ParseResponse,
    summary="Parse Resume",
    description="Extract a structured resume record from a DOCX, PDF or TXT file with one parser profile, and score how much of the document the record covers.",
    responses={
        200: {
            "description": "Successfully parsed resume",
            "content": {
                "application/json": {
                    "example": {
                        "profile": "default",
                        "record": {
                            "name": "Jane Doe",
                            "email": "jane@example.com",
                            "phone": "555-123-4567",
                            "experience": [
                                {
                                    "position": "",
                                    "company": "",
                                    "period": "Jan 2020 - Present",
                                    "responsibilities": ["Built things"],
                                }
                            ],
                            "skills": ["Go", "Rust", "C++"],
                        },
                        "coverage": {"coverage_percentage": 100.0, "missing_content": []},
                        "page_count": 1,
                        "warnings": [],
                    }
                }
            },
        },
        400: {"description": "Empty file uploaded"},
        404: {"description": "Unknown parser profile"},
        413: {"description": "File too large"},
        415: {"description": "Unsupported file format"},
        422: {"description": "File has no extractable text"},
    },
)
async def parse_resume(
    file: UploadFile = File(..., description="Resume file (DOCX, PDF, or TXT format)"),
    profile: Optional[str] = Query(None, description="Parser profile id (see GET /parsers)"),
):
    """
    Parse a resume file with one profile.

    **Returns:**
    - **record**: normalized resume record
    - **coverage**: share of source paragraphs represented in the record
    - **field_status**: found / absent / failed per field
    - **warnings**: failed fields and uncovered paragraphs
    """
    extractor = _resolve_profile(profile or config.DEFAULT_PROFILE)
    extracted = await _read_upload(file)

    extraction = extractor.extract(extracted.text)
    record = normalize(extraction.data)
    coverage = verify(extracted.text, record)

    warnings: List[str] = [
        f"Extractor for '{name}' failed: {'; '.join(st.reasons)}"
        for name, st in extraction.field_status.items()
        if st.status == "failed"
    ]
    if coverage.missing_content:
        warnings.append(f"{len(coverage.missing_content)} paragraph(s) not represented in the record")

    return ParseResponse(
        profile=extractor.id,
        record=record,
        coverage=coverage,
        field_status=extraction.field_status,
        page_count=extracted.page_count,
        warnings=warnings,
    )


@router.post(
    "/parse/compare",
    response_model=ProfileComparison,
    summary="Compare Parser Profiles",
    description="Run every parser profile (or the ones named) on one file, score each and name the best.",
    responses={
        400: {"description": "Empty file uploaded"},
        404: {"description": "Unknown parser profile"},
        415: {"description": "Unsupported file format"},
        422: {"description": "File has no extractable text"},
    },
)
async def compare_resume_profiles(
    file: UploadFile = File(..., description="Resume file (DOCX, PDF, or TXT format)"),
    profiles: Optional[List[str]] = Query(None, description="Profile ids to compare (default: all)"),
):
    if profiles:
        for profile_id in profiles:
            _resolve_profile(profile_id)
    extracted = await _read_upload(file)
    return compare_profiles(extracted.text, profiles, page_count=extracted.page_count)


@router.post(
    "/verify",
    response_model=CoverageReport,
    summary="Verify Coverage",
    description="Score how much of a source text is represented in a (possibly partial) resume record.",
)
def verify_record(payload: VerifyRequest):
    return verify(payload.text, payload.record, whole_words=payload.whole_words)
