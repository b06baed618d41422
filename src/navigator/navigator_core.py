#!/usr/bin/env python3
"""
Navigator Core - recommendation facade

One entry point for every presentation surface (map colouring, profile card,
path panel): Profile -> Scorer -> Graph Search -> Ranker -> RecommendedPath.

Key Rules:
- immigration_goal is mandatory: missing goal raises InvalidProfileError
- "No path" is an explicit None result, never an exception
- Pure and deterministic: identical profiles give identical output, so callers
  may memoize on the (hashable) ProfileAttributes
- The knowledge base is the only shared resource and is never mutated
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from src.navigator.config import NavigatorConfig, load_config
from src.navigator.errors import InvalidProfileError
from src.navigator.graph_search import TransitionGraphSearch
from src.navigator.knowledge_base import VisaKnowledgeBase, load_knowledge_base
from src.navigator.knowledge_base_neo4j import KnowledgeBaseNeo4j
from src.navigator.models import (
    MatchScore,
    MatchStatus,
    ProfileAttributes,
    RecommendedPath,
    VisaNode,
)
from src.navigator.ranker import PathRanker
from src.navigator.scorer import ProfileScorer

logger = logging.getLogger(__name__)

DIMENSION_LABELS = {
    "education": "education",
    "workExperience": "work experience",
    "fieldOfWork": "field of work",
    "citizenship": "citizenship",
    "investment": "investment capacity",
    "language": "English proficiency",
}


@dataclass(frozen=True)
class EligibilityReport:
    """Why a profile does or doesn't match one visa."""
    visa: VisaNode
    score: MatchScore
    unmet_requirements: List[Dict[str, Any]]
    requirement_status: Dict[str, Optional[bool]]
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "visa": self.visa.to_dict(),
            "score": self.score.to_dict(),
            "unmetRequirements": list(self.unmet_requirements),
            "requirementStatus": dict(self.requirement_status),
            "message": self.message,
        }


@dataclass(frozen=True)
class NextVisaOption:
    visa_id: str
    reason: str
    score: MatchScore


class NavigatorCore:
    """
    Recommendation facade over the visa knowledge base.

    Args:
        knowledge_base: Loaded, validated knowledge base (shared read-only)
        config: Thresholds, weights and search depth (defaults when omitted)
    """

    def __init__(self, knowledge_base: VisaKnowledgeBase, config: Optional[NavigatorConfig] = None):
        self.knowledge_base = knowledge_base
        self.config = config or NavigatorConfig()
        self.scorer = ProfileScorer(self.config)
        self.search = TransitionGraphSearch(knowledge_base, self.scorer)
        self.ranker = PathRanker(self.config.confidence_thresholds)

    @classmethod
    def from_config(cls, config: Optional[NavigatorConfig] = None) -> "NavigatorCore":
        """
        Load the knowledge base from the configured source (environment by default).

        Raises:
            ConfigurationError: If the source is unreachable or its catalog is inconsistent
        """
        config = config or load_config()
        if config.catalog_source == "neo4j":
            logger.info("Loading visa knowledge base from Neo4j")
            with KnowledgeBaseNeo4j() as source:
                knowledge_base = source.load_knowledge_base()
        else:
            knowledge_base = load_knowledge_base(config.catalog_path)
        return cls(knowledge_base, config)

    def recommend(self, profile: ProfileAttributes, max_depth: Optional[int] = None) -> Optional[RecommendedPath]:
        """
        Best multi-step path from the profile's current visa to its goal.

        Args:
            profile: Normalized profile snapshot (never mutated)
            max_depth: Override for the configured maximum path length

        Returns:
            RecommendedPath, or None when no viable path exists

        Raises:
            InvalidProfileError: If immigration_goal is missing
        """
        goal = (profile.immigration_goal or "").strip()
        if not goal:
            raise InvalidProfileError("immigrationGoal is required to recommend a path")

        depth = max_depth if max_depth is not None else self.config.max_depth
        candidates = self.search.find_candidate_paths(profile, goal, depth)

        origin = self.knowledge_base.get_node(profile.current_visa_id)
        if origin is not None and origin.satisfies_goal(goal):
            logger.info("Current visa '%s' already satisfies goal '%s'", origin.id, goal)

        path = self.ranker.rank(candidates, origin=origin)
        if path is None:
            logger.info("No path from '%s' to goal '%s' within %d steps", profile.start_visa_id, goal, depth)
        else:
            logger.debug("Recommended %s (%s confidence)", " -> ".join(path.visa_ids), path.confidence.value)
        return path

    def score_all(self, profile: ProfileAttributes) -> Dict[str, MatchScore]:
        """Score every visa in the knowledge base (map colouring)."""
        return {node.id: self.scorer.score(profile, node) for node in self.knowledge_base.all_nodes()}

    def eligibility_report(self, visa_id: str, profile: ProfileAttributes) -> Optional[EligibilityReport]:
        """Detailed match for one visa; None if the visa is unknown."""
        visa = self.knowledge_base.get_node(visa_id)
        if visa is None:
            return None

        score = self.scorer.score(profile, visa)
        unmet = self.scorer.get_unmet_requirements(profile, visa)
        return EligibilityReport(
            visa=visa,
            score=score,
            unmet_requirements=unmet,
            requirement_status=self.scorer.requirement_status(profile, visa),
            message=self._report_message(visa, score, unmet),
        )

    def next_visa_options(self, profile: ProfileAttributes) -> List[NextVisaOption]:
        """Direct transitions out of the profile's current visa (or the entry state)."""
        options = []
        for edge in self.knowledge_base.outgoing_edges(profile.start_visa_id):
            node = self.knowledge_base.get_node(edge.to_visa_id)
            options.append(NextVisaOption(
                visa_id=node.id,
                reason=edge.reason,
                score=self.scorer.score(profile, node),
            ))
        return options

    @staticmethod
    def _report_message(visa: VisaNode, score: MatchScore, unmet: List[Dict[str, Any]]) -> str:
        prefix = f"Your profile matches {score.match_percentage}% of requirements for {visa.name}."
        if score.status is MatchStatus.RECOMMENDED:
            return f"{prefix} This may be a strong match."
        gaps = ", ".join(DIMENSION_LABELS[u["dimension"]] for u in unmet[:2])
        if score.status is MatchStatus.AVAILABLE:
            if gaps:
                return f"{prefix} This could be a possible path. Consider strengthening: {gaps}."
            return f"{prefix} This could be a possible path."
        return f"{prefix} You may need to strengthen: {gaps}."


def visas_by_status(scores: Mapping[str, MatchScore], status: MatchStatus) -> List[str]:
    """Visa ids with the given status, sorted for stable display."""
    return sorted(visa_id for visa_id, score in scores.items() if score.status is status)


def run_sample_recommendation() -> bool:
    """Recommend a path for a sample F-1 student against the bundled catalog."""
    print("🧪 Running sample recommendation...")
    try:
        navigator = NavigatorCore.from_config()
        profile = ProfileAttributes(
            education=4, work_experience=2, field_of_work=3, citizenship=3,
            investment=0, language=4, current_visa_id="f1", immigration_goal="permanent_residency",
        )
        path = navigator.recommend(profile)
        if path is None:
            print("❌ No path found for sample profile")
            return False

        print(f"✅ {path.description}")
        print(f"   Confidence: {path.confidence.value}  Total: {path.total_estimated_months} months")
        for step in path.steps:
            print(f"   {step.visa.code:<8} {step.score.match_percentage:>3}% [{step.score.status.value}]")
        return True

    except Exception as e:
        print(f"❌ Sample recommendation failed: {e}")
        return False


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    success = run_sample_recommendation()
    print(f"\n{'✅ Sample passed!' if success else '❌ Sample failed!'}")
