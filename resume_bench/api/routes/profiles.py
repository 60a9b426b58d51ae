from typing import List

from fastapi import APIRouter

from resume_bench.core.profiles import list_profiles
from resume_bench.core.schemas import ProfileInfo

router = APIRouter(tags=["parsers"])


@router.get(
    "/parsers",
    response_model=List[ProfileInfo],
    summary="List Parser Profiles",
    description="Registered parser profiles with their ids, display names and descriptions.",
)
def get_parsers():
    return list_profiles()
