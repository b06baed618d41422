#!/usr/bin/env python3
"""
Profile Scorer - eligibility of a profile against one visa node

Critical Implementation:
- Per required dimension: fit = min(1, profile level / threshold)
- Weighted mean over REQUIRED dimensions only (threshold 0 = not required)
- Scaled to [0,100], rounded half-up; no requirements = 100
- Status from named thresholds (config.StatusThresholds), never literals
- Missing profile attributes score as 0 - incomplete profiles never raise
"""

import math
from typing import Any, Dict, List, Optional

from src.navigator.config import NavigatorConfig
from src.navigator.models import DIMENSIONS, MatchScore, ProfileAttributes, VisaNode

FULL_MATCH = 100


class ProfileScorer:
    """Scores a ProfileAttributes snapshot against visa requirements."""

    def __init__(self, config: Optional[NavigatorConfig] = None):
        self.config = config or NavigatorConfig()
        self.weights = self.config.dimension_weights
        self.status_thresholds = self.config.status_thresholds

    def score(self, profile: ProfileAttributes, node: VisaNode) -> MatchScore:
        """
        Compute match percentage and status for one visa.

        Args:
            profile: Normalized profile (missing attributes count as 0)
            node: Visa node with requirements on the 0-5 scale

        Returns:
            MatchScore with match_percentage in [0,100] and derived status
        """
        total_weight = 0.0
        weighted_fit = 0.0
        for dimension, threshold in node.requirements.items():
            if threshold <= 0:
                continue
            weight = self.weights[dimension]
            fit = min(1.0, max(0.0, profile.level(dimension)) / threshold)
            weighted_fit += weight * fit
            total_weight += weight

        if total_weight == 0:
            match_percentage = FULL_MATCH
        else:
            # half-up, not banker's rounding
            match_percentage = int(math.floor(weighted_fit / total_weight * 100 + 0.5))

        return MatchScore(
            match_percentage=match_percentage,
            status=self.status_thresholds.status_for(match_percentage),
        )

    def get_unmet_requirements(self, profile: ProfileAttributes, node: VisaNode) -> List[Dict[str, Any]]:
        """
        Get list of requirements the profile falls short on.

        Returns:
            List of unmet requirements [{"dimension": str, "required": float, "actual": float}]
        """
        unmet = []
        for dimension, threshold in node.requirements.items():
            if threshold <= 0:
                continue
            actual = profile.level(dimension)
            if actual < threshold:
                unmet.append({
                    "dimension": dimension,
                    "required": threshold,
                    "actual": actual,
                })
        return unmet

    def requirement_status(self, profile: ProfileAttributes, node: VisaNode) -> Dict[str, Optional[bool]]:
        """Per-dimension met flag for every dimension; None when the visa doesn't require it."""
        status: Dict[str, Optional[bool]] = {}
        for dimension in DIMENSIONS:
            threshold = node.requirements.get(dimension, 0)
            if threshold <= 0:
                status[dimension] = None
            else:
                status[dimension] = profile.level(dimension) >= threshold
        return status
