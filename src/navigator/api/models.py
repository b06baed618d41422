#!/usr/bin/env python3
"""
Pydantic models for Visa Navigator API
Request and response schemas (camelCase on the wire)
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProfileRequest(CamelModel):
    """Normalized profile; every attribute is optional except the goal (checked by the engine)."""
    education: Optional[float] = Field(default=None, ge=0, le=5)
    work_experience: Optional[float] = Field(default=None, ge=0, le=5)
    field_of_work: Optional[float] = Field(default=None, ge=0, le=5)
    citizenship: Optional[float] = Field(default=None, ge=0, le=5)
    investment: Optional[float] = Field(default=None, ge=0, le=5)
    language: Optional[float] = Field(default=None, ge=0, le=5)
    current_visa_id: Optional[str] = None
    immigration_goal: Optional[str] = None


class MatchScoreResponse(CamelModel):
    match_percentage: int
    status: str


class VisaSummaryResponse(CamelModel):
    name: str
    code: str


class PathStepResponse(CamelModel):
    visa_id: str
    visa: VisaSummaryResponse
    score: MatchScoreResponse
    estimated_time_months: int
    reason: str


class RecommendedPathResponse(CamelModel):
    steps: List[PathStepResponse]
    confidence: str
    total_estimated_months: int
    description: str
    average_match: float


class RecommendationResponse(CamelModel):
    """found=False with path=None means no viable path (not an input error)."""
    found: bool
    message: str
    path: Optional[RecommendedPathResponse] = None


class VisaResponse(CamelModel):
    id: str
    name: str
    code: str
    requirements: Dict[str, float]
    typical_duration_months: int
    goal_tags: List[str]
    category: str
    description: str


class ScoresResponse(CamelModel):
    scores: Dict[str, MatchScoreResponse]


class UnmetRequirementResponse(CamelModel):
    dimension: str
    required: float
    actual: float


class EligibilityReportResponse(CamelModel):
    visa: VisaResponse
    score: MatchScoreResponse
    unmet_requirements: List[UnmetRequirementResponse]
    requirement_status: Dict[str, Optional[bool]]
    message: str


class NextVisaOptionResponse(CamelModel):
    visa_id: str
    reason: str
    score: MatchScoreResponse
