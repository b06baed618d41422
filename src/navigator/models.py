#!/usr/bin/env python3
"""
Navigator value objects

Knowledge base entities (VisaNode, TransitionEdge), the normalized profile
(ProfileAttributes) and engine output (MatchScore, PathStep, RecommendedPath).

Every object here is immutable and created fresh per request; the only shared
object is the knowledge base that holds the nodes and edges.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple


# Synthetic start node for profiles without a current visa
ENTRY_STATE_ID = "none"

# Attribute dimensions (wire name -> ProfileAttributes field)
DIMENSION_FIELDS = {
    "education": "education",
    "workExperience": "work_experience",
    "fieldOfWork": "field_of_work",
    "citizenship": "citizenship",
    "investment": "investment",
    "language": "language",
}
DIMENSIONS = tuple(DIMENSION_FIELDS)

MIN_LEVEL = 0
MAX_LEVEL = 5


class MatchStatus(str, Enum):
    LOCKED = "locked"
    AVAILABLE = "available"
    RECOMMENDED = "recommended"


class Confidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class VisaNode:
    """Single visa category in the knowledge base."""
    id: str
    name: str
    code: str
    requirements: Mapping[str, float] = field(default_factory=dict)
    typical_duration_months: int = 0
    goal_tags: FrozenSet[str] = frozenset()
    category: str = ""
    description: str = ""

    def __post_init__(self):
        # Read-only view so a shared node can't be edited through a caller
        object.__setattr__(self, "requirements", MappingProxyType(dict(self.requirements)))
        object.__setattr__(self, "goal_tags", frozenset(self.goal_tags))

    def satisfies_goal(self, goal_tag: Optional[str]) -> bool:
        return goal_tag is not None and goal_tag in self.goal_tags

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "code": self.code,
            "requirements": dict(self.requirements),
            "typicalDurationMonths": self.typical_duration_months,
            "goalTags": sorted(self.goal_tags),
            "category": self.category,
            "description": self.description,
        }


@dataclass(frozen=True)
class TransitionEdge:
    """Permitted move from one visa (or the entry state) to another."""
    from_visa_id: str
    to_visa_id: str
    reason: str = ""


@dataclass(frozen=True)
class ProfileAttributes:
    """
    Normalized profile snapshot.

    Attribute levels are on the 0-5 scale; None means "not provided" and is
    scored as 0. current_visa_id None means the entry state.
    """
    education: Optional[float] = None
    work_experience: Optional[float] = None
    field_of_work: Optional[float] = None
    citizenship: Optional[float] = None
    investment: Optional[float] = None
    language: Optional[float] = None
    current_visa_id: Optional[str] = None
    immigration_goal: Optional[str] = None

    @property
    def start_visa_id(self) -> str:
        return self.current_visa_id or ENTRY_STATE_ID

    def level(self, dimension: str) -> float:
        """Attribute level for a wire dimension name, 0 when missing."""
        value = getattr(self, DIMENSION_FIELDS[dimension])
        return value if value is not None else 0

    def advanced_to(self, visa_id: str) -> "ProfileAttributes":
        """Same profile as if the person now held visa_id."""
        return replace(self, current_visa_id=visa_id)


@dataclass(frozen=True)
class MatchScore:
    match_percentage: int
    status: MatchStatus

    def to_dict(self) -> Dict[str, Any]:
        return {"matchPercentage": self.match_percentage, "status": self.status.value}


@dataclass(frozen=True)
class VisaSnapshot:
    """Denormalized display data for a path step."""
    name: str
    code: str


@dataclass(frozen=True)
class PathStep:
    visa_id: str
    visa: VisaSnapshot
    score: MatchScore
    estimated_time_months: int
    reason: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "visaId": self.visa_id,
            "visa": {"name": self.visa.name, "code": self.visa.code},
            "score": self.score.to_dict(),
            "estimatedTimeMonths": self.estimated_time_months,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class RecommendedPath:
    steps: Tuple[PathStep, ...]
    confidence: Confidence
    total_estimated_months: int
    description: str
    average_match: float

    @property
    def visa_ids(self) -> Tuple[str, ...]:
        return tuple(step.visa_id for step in self.steps)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "steps": [step.to_dict() for step in self.steps],
            "confidence": self.confidence.value,
            "totalEstimatedMonths": self.total_estimated_months,
            "description": self.description,
            "averageMatch": self.average_match,
        }
