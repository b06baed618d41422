#!/usr/bin/env python3
"""
Profile normalization

Turns the JSON-shaped profile record, or raw onboarding answers, into the
ProfileAttributes snapshot the engine consumes. Only the immigration goal is
mandatory and that is enforced by the navigator, not here: everything else
degrades gracefully (out-of-range levels are clamped, non-numeric ones dropped).
"""

import math
import re
from typing import Any, Mapping, Optional

from src.navigator.models import DIMENSION_FIELDS, ENTRY_STATE_ID, MAX_LEVEL, MIN_LEVEL, ProfileAttributes

# Onboarding answer -> 0-5 level
EDUCATION_LEVELS = {
    "high_school": 1,
    "other": 2,
    "bachelors": 3,
    "masters": 4,
    "phd": 5,
}
DEFAULT_EDUCATION_LEVEL = 2

YEARS_PER_EXPERIENCE_LEVEL = 6

# Onboarding current-visa choice -> knowledge base id
ONBOARDING_VISA_IDS = {
    "F-1": "f1",
    "J-1": "j1",
    "B-1/B-2": "b2",
    "H-1B": "h1b",
    "O-1": "o1",
    "L-1": "l1b",
    "other": None,
}

# Onboarding goal -> knowledge base goal tag
ONBOARDING_GOAL_TAGS = {
    "study": "study",
    "work": "work",
    "visit": "visit",
    "invest": "invest",
    "immigrate_longterm": "permanent_residency",
}


def _level(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number):
        return None
    number = min(float(MAX_LEVEL), max(float(MIN_LEVEL), number))
    return int(number) if number.is_integer() else number


def normalize_visa_id(value: Any) -> Optional[str]:
    """'F-1', ' h1b ', 'none' -> 'f1', 'h1b', None."""
    if value is None:
        return None
    visa_id = re.sub(r"[\s\-]", "", str(value)).lower()
    if not visa_id or visa_id == ENTRY_STATE_ID:
        return None
    return visa_id


def _goal(value: Any) -> Optional[str]:
    if value is None:
        return None
    goal = str(value).strip()
    return goal or None


def profile_from_record(record: Mapping[str, Any]) -> ProfileAttributes:
    """
    Build ProfileAttributes from the external JSON profile record.

    Args:
        record: {education, workExperience, fieldOfWork, citizenship, investment,
                 language, currentVisaId, immigrationGoal}; any field may be absent

    Returns:
        ProfileAttributes (never raises for incomplete records)
    """
    levels = {field: _level(record.get(dimension)) for dimension, field in DIMENSION_FIELDS.items()}
    return ProfileAttributes(
        current_visa_id=normalize_visa_id(record.get("currentVisaId")),
        immigration_goal=_goal(record.get("immigrationGoal")),
        **levels,
    )


def education_to_level(education_level: Optional[str]) -> int:
    return EDUCATION_LEVELS.get(education_level or "", DEFAULT_EDUCATION_LEVEL)


def experience_to_level(years: Optional[float]) -> int:
    """One level per started block of six years, capped at 5; unreadable answers count as 0."""
    if years is None or isinstance(years, bool):
        return 0
    try:
        years = float(years)
    except (TypeError, ValueError):
        return 0
    if math.isnan(years) or years <= 0:
        return 0
    return min(math.ceil(years / YEARS_PER_EXPERIENCE_LEVEL), MAX_LEVEL)


def profile_from_onboarding(answers: Mapping[str, Any]) -> ProfileAttributes:
    """
    Initial profile from onboarding answers.

    Onboarding only asks for education, experience, visa status and goal, so
    field of work, investment and language get starting levels derived from
    the goal; citizenship and language start at placeholder levels until the
    person edits their qualifications.

    Args:
        answers: {educationLevel, yearsOfExperience, currentVisaStatus
                  ("no_visa" | "has_visa"), currentVisa, immigrationGoal}
    """
    goal = answers.get("immigrationGoal")
    current_visa = None
    if answers.get("currentVisaStatus") == "has_visa" and answers.get("currentVisa"):
        raw_visa = answers["currentVisa"]
        current_visa = ONBOARDING_VISA_IDS.get(raw_visa, normalize_visa_id(raw_visa))

    return ProfileAttributes(
        education=education_to_level(answers.get("educationLevel")),
        work_experience=experience_to_level(answers.get("yearsOfExperience")),
        field_of_work=2 if goal == "work" else 1,
        citizenship=1,
        investment=3 if goal == "invest" else 0,
        language=2,
        current_visa_id=current_visa,
        immigration_goal=ONBOARDING_GOAL_TAGS.get(goal, _goal(goal)),
    )
