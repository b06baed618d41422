#!/usr/bin/env python3
"""
API endpoints for Visa Navigator
"""

from functools import lru_cache
from typing import List, Optional

from fastapi import APIRouter, HTTPException

from src.navigator.api.models import (
    EligibilityReportResponse,
    NextVisaOptionResponse,
    ProfileRequest,
    RecommendationResponse,
    ScoresResponse,
    VisaResponse,
)
from src.navigator.errors import InvalidProfileError
from src.navigator.models import ProfileAttributes, RecommendedPath
from src.navigator.navigator_core import NavigatorCore
from src.navigator.profile import normalize_visa_id, profile_from_record

# Create router
router = APIRouter(prefix="/api/v1", tags=["navigator"])

# Initialize dependencies (singleton pattern)
_navigator: Optional[NavigatorCore] = None

NO_PATH_MESSAGE = "No viable path found for this goal under the current profile."


def get_navigator() -> NavigatorCore:
    """Get or create navigator instance (knowledge base loads once per process)"""
    global _navigator
    if _navigator is None:
        _navigator = NavigatorCore.from_config()
    return _navigator


def set_navigator(navigator: Optional[NavigatorCore]) -> None:
    """Swap the process navigator (tests, alternative catalogs) and drop cached results"""
    global _navigator
    _navigator = navigator
    _cached_recommendation.cache_clear()


@lru_cache(maxsize=512)
def _cached_recommendation(profile: ProfileAttributes) -> Optional[RecommendedPath]:
    return get_navigator().recommend(profile)


def _to_profile(request: ProfileRequest) -> ProfileAttributes:
    return profile_from_record(request.model_dump(by_alias=True))


@router.get("/visas", response_model=List[VisaResponse])
async def list_visas():
    """Visa catalog for map rendering."""
    return [node.to_dict() for node in get_navigator().knowledge_base.all_nodes()]


@router.post("/recommendation", response_model=RecommendationResponse)
async def get_recommendation(request: ProfileRequest):
    """
    Recommend a multi-step visa path for a profile.

    - 422 when the immigration goal is missing ("fix your input")
    - found=False when no path exists ("no matching path")
    """
    try:
        path = _cached_recommendation(_to_profile(request))
    except InvalidProfileError as e:
        raise HTTPException(status_code=422, detail=str(e))

    if path is None:
        return RecommendationResponse(found=False, message=NO_PATH_MESSAGE, path=None)
    return RecommendationResponse(found=True, message=path.description, path=path.to_dict())


@router.post("/scores", response_model=ScoresResponse)
async def get_scores(request: ProfileRequest):
    """Match score and status for every visa."""
    scores = get_navigator().score_all(_to_profile(request))
    return ScoresResponse(scores={visa_id: score.to_dict() for visa_id, score in scores.items()})


@router.post("/visas/next", response_model=List[NextVisaOptionResponse])
async def get_next_visa_options(request: ProfileRequest):
    """Direct next steps from the profile's current visa."""
    options = get_navigator().next_visa_options(_to_profile(request))
    return [
        NextVisaOptionResponse(visa_id=o.visa_id, reason=o.reason, score=o.score.to_dict())
        for o in options
    ]


@router.post("/visas/{visa_id}/eligibility", response_model=EligibilityReportResponse)
async def get_eligibility_report(visa_id: str, request: ProfileRequest):
    """Detailed eligibility report for one visa."""
    report = get_navigator().eligibility_report(normalize_visa_id(visa_id), _to_profile(request))
    if report is None:
        raise HTTPException(status_code=404, detail=f"Visa {visa_id} not found")
    return report.to_dict()
