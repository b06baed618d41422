#!/usr/bin/env python3
"""
Transition Graph Search - bounded enumeration of simple visa paths

Critical Implementation:
- Depth-first from the profile's current visa (or the "none" entry state)
- Simple paths only: a visited set travels with the recursion
- Each node is scored against the profile advanced to the PREVIOUS step
  (current_visa_id moves along the path; attributes are never simulated)
- Locked nodes are never expanded; a locked goal node is still recorded as a
  terminal so aspirational goals surface with a locked final status
- No path = empty list, never an error
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Set, Tuple

from src.navigator.knowledge_base import VisaKnowledgeBase
from src.navigator.models import ENTRY_STATE_ID, MatchScore, MatchStatus, ProfileAttributes, VisaNode
from src.navigator.scorer import ProfileScorer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CandidateStep:
    visa: VisaNode
    score: MatchScore
    reason: str = ""


@dataclass(frozen=True)
class PathCandidate:
    """Ordered steps from (excluding) the start node to a goal-bearing node."""
    steps: Tuple[CandidateStep, ...]

    @property
    def visa_ids(self) -> Tuple[str, ...]:
        return tuple(step.visa.id for step in self.steps)


class TransitionGraphSearch:
    """Enumerates goal-reaching paths through the knowledge base."""

    def __init__(self, knowledge_base: VisaKnowledgeBase, scorer: ProfileScorer):
        self.knowledge_base = knowledge_base
        self.scorer = scorer

    def find_candidate_paths(
        self,
        profile: ProfileAttributes,
        goal_tag: str,
        max_depth: int = 4,
    ) -> List[PathCandidate]:
        """
        Enumerate all simple paths of at most max_depth steps ending at a goal node.

        Args:
            profile: Normalized profile; current_visa_id is the start node
            goal_tag: Immigration goal the final node must carry
            max_depth: Maximum number of steps in a path

        Returns:
            Candidates in discovery order (edge definition order); empty if none

        Raises:
            ValueError: If max_depth < 1
        """
        if max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {max_depth}")

        start_id = profile.start_visa_id
        if start_id != ENTRY_STATE_ID and not self.knowledge_base.has_node(start_id):
            logger.warning("Current visa '%s' not found in knowledge base - no paths", start_id)
            return []

        candidates: List[PathCandidate] = []
        self._explore(
            node_id=start_id,
            profile=profile,
            goal_tag=goal_tag,
            path=[],
            visited={start_id},
            remaining=max_depth,
            candidates=candidates,
        )
        logger.debug("Found %d candidate paths from '%s' to goal '%s'", len(candidates), start_id, goal_tag)
        return candidates

    def _explore(
        self,
        node_id: str,
        profile: ProfileAttributes,
        goal_tag: str,
        path: List[CandidateStep],
        visited: Set[str],
        remaining: int,
        candidates: List[PathCandidate],
    ) -> None:
        for edge in self.knowledge_base.outgoing_edges(node_id):
            next_id = edge.to_visa_id
            if next_id in visited:
                continue
            node = self.knowledge_base.get_node(next_id)
            score = self.scorer.score(profile, node)
            step = CandidateStep(visa=node, score=score, reason=edge.reason)

            if node.satisfies_goal(goal_tag):
                candidates.append(PathCandidate(steps=tuple(path) + (step,)))

            if score.status is MatchStatus.LOCKED or remaining <= 1:
                continue

            visited.add(next_id)
            path.append(step)
            self._explore(
                node_id=next_id,
                profile=profile.advanced_to(next_id),
                goal_tag=goal_tag,
                path=path,
                visited=visited,
                remaining=remaining - 1,
                candidates=candidates,
            )
            path.pop()
            visited.discard(next_id)


def path_is_valid(knowledge_base: VisaKnowledgeBase, start_id: str, visa_ids: Tuple[str, ...]) -> bool:
    """True if visa_ids is a simple path of existing transitions starting at start_id."""
    if len(set(visa_ids)) != len(visa_ids) or start_id in visa_ids:
        return False
    previous: Optional[str] = start_id
    for visa_id in visa_ids:
        targets = {e.to_visa_id for e in knowledge_base.outgoing_edges(previous)}
        if visa_id not in targets:
            return False
        previous = visa_id
    return True
