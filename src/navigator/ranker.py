#!/usr/bin/env python3
"""
Path Ranker - picks the single best candidate path

Ordering (first wins):
1. Fewer steps (simpler to execute)
2. Higher average match percentage
3. Lower total estimated months
4. Discovery order (keeps the result deterministic)

Confidence comes from the winner's average match via config.ConfidenceThresholds.
"""

from typing import Optional, Sequence

from src.navigator.config import ConfidenceThresholds
from src.navigator.graph_search import PathCandidate
from src.navigator.models import PathStep, RecommendedPath, VisaNode, VisaSnapshot


def total_months(candidate: PathCandidate) -> int:
    return sum(step.visa.typical_duration_months for step in candidate.steps)


def average_match(candidate: PathCandidate) -> float:
    return sum(step.score.match_percentage for step in candidate.steps) / len(candidate.steps)


def describe_path(step_names: Sequence[str], origin_name: Optional[str] = None) -> str:
    """Human-readable one-line summary of a path."""
    if not step_names:
        return ""
    if len(step_names) == 1:
        return f"Your next recommended step: {step_names[0]}"
    joined = " → ".join(step_names)
    if origin_name:
        return f"From {origin_name}, we recommend: {joined}"
    return f"Recommended path: {joined}"


class PathRanker:
    """Ranks candidate paths and builds the RecommendedPath."""

    def __init__(self, confidence_thresholds: Optional[ConfidenceThresholds] = None):
        self.confidence_thresholds = confidence_thresholds or ConfidenceThresholds()

    def rank(
        self,
        candidates: Sequence[PathCandidate],
        origin: Optional[VisaNode] = None,
    ) -> Optional[RecommendedPath]:
        """
        Select the best candidate.

        Args:
            candidates: Paths from graph search (each with at least one step)
            origin: Visa the person currently holds, None for the entry state

        Returns:
            RecommendedPath, or None when there are no candidates
        """
        usable = [c for c in candidates if c.steps]
        if not usable:
            return None

        ordered = sorted(
            enumerate(usable),
            key=lambda item: (
                len(item[1].steps),
                -average_match(item[1]),
                total_months(item[1]),
                item[0],
            ),
        )
        best = ordered[0][1]

        steps = tuple(
            PathStep(
                visa_id=step.visa.id,
                visa=VisaSnapshot(name=step.visa.name, code=step.visa.code),
                score=step.score,
                estimated_time_months=step.visa.typical_duration_months,
                reason=step.reason,
            )
            for step in best.steps
        )
        best_average = average_match(best)

        return RecommendedPath(
            steps=steps,
            confidence=self.confidence_thresholds.confidence_for(best_average),
            total_estimated_months=sum(step.estimated_time_months for step in steps),
            description=describe_path([s.visa.name for s in steps], origin.name if origin else None),
            average_match=round(best_average, 2),
        )
