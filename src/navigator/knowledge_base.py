#!/usr/bin/env python3
"""
Visa Knowledge Base - immutable catalog of visa nodes and transitions

Critical Implementation:
- Loaded once per process, read-only afterwards (no update operations)
- Adjacency mapping keyed by visa id; edges keep definition order
- "none" is the synthetic entry state: edges may start there, nodes may not use it
- Fails fast with ConfigurationError on any inconsistency:
  dangling edge, threshold outside [0,5], duplicate id, unknown dimension

Definition format (JSON or YAML):
    {
        "nodes": [{"id", "name", "code", "requirements": {dimension: threshold},
                   "typicalDurationMonths", "goalTags": [tag]}],
        "edges": [{"from", "to", "reason"}]
    }
"""

import json
import logging
import os
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import yaml

from src.navigator.errors import ConfigurationError
from src.navigator.models import (
    DIMENSIONS,
    ENTRY_STATE_ID,
    MAX_LEVEL,
    MIN_LEVEL,
    TransitionEdge,
    VisaNode,
)

logger = logging.getLogger(__name__)


class VisaKnowledgeBase:
    """Validated, read-only visa transition graph."""

    def __init__(self, nodes: Iterable[VisaNode], edges: Iterable[TransitionEdge]):
        node_map: Dict[str, VisaNode] = {}
        for node in nodes:
            self._validate_node(node)
            if node.id in node_map:
                raise ConfigurationError(f"Duplicate visa id '{node.id}' in knowledge base")
            node_map[node.id] = node

        adjacency: Dict[str, List[TransitionEdge]] = {}
        seen = set()
        for edge in edges:
            if edge.from_visa_id != ENTRY_STATE_ID and edge.from_visa_id not in node_map:
                raise ConfigurationError(
                    f"Transition {edge.from_visa_id} -> {edge.to_visa_id} references unknown visa '{edge.from_visa_id}'"
                )
            if edge.to_visa_id not in node_map:
                raise ConfigurationError(
                    f"Transition {edge.from_visa_id} -> {edge.to_visa_id} references unknown visa '{edge.to_visa_id}'"
                )
            key = (edge.from_visa_id, edge.to_visa_id)
            if key in seen:
                logger.warning("Ignoring duplicate transition %s -> %s", *key)
                continue
            seen.add(key)
            adjacency.setdefault(edge.from_visa_id, []).append(edge)

        self._nodes = MappingProxyType(node_map)
        self._adjacency = MappingProxyType({k: tuple(v) for k, v in adjacency.items()})
        logger.info("Visa knowledge base loaded: %d visas, %d transitions", len(node_map), len(seen))

    @staticmethod
    def _validate_node(node: VisaNode) -> None:
        if not node.id:
            raise ConfigurationError("Visa node without id")
        if node.id == ENTRY_STATE_ID:
            raise ConfigurationError(f"Visa id '{ENTRY_STATE_ID}' is reserved for the entry state")
        for dimension, threshold in node.requirements.items():
            if dimension not in DIMENSIONS:
                raise ConfigurationError(f"Visa '{node.id}' requires unknown dimension '{dimension}'")
            if isinstance(threshold, bool) or not isinstance(threshold, (int, float)):
                raise ConfigurationError(f"Visa '{node.id}' threshold for {dimension} is not a number: {threshold!r}")
            if not MIN_LEVEL <= threshold <= MAX_LEVEL:
                raise ConfigurationError(
                    f"Visa '{node.id}' threshold for {dimension} is {threshold}, outside [{MIN_LEVEL},{MAX_LEVEL}]"
                )
        if isinstance(node.typical_duration_months, bool) or not isinstance(node.typical_duration_months, int) \
                or node.typical_duration_months < 0:
            raise ConfigurationError(
                f"Visa '{node.id}' typicalDurationMonths must be a non-negative integer, "
                f"got {node.typical_duration_months!r}"
            )

    def get_node(self, visa_id: Optional[str]) -> Optional[VisaNode]:
        """Node by id, None if not found."""
        if visa_id is None:
            return None
        return self._nodes.get(visa_id)

    def has_node(self, visa_id: Optional[str]) -> bool:
        return visa_id in self._nodes

    def outgoing_edges(self, visa_id: str) -> Tuple[TransitionEdge, ...]:
        """Transitions out of visa_id (or the entry state) in definition order."""
        return self._adjacency.get(visa_id, ())

    def all_nodes(self) -> Tuple[VisaNode, ...]:
        return tuple(self._nodes.values())

    def all_edges(self) -> Tuple[TransitionEdge, ...]:
        return tuple(edge for edges in self._adjacency.values() for edge in edges)

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, visa_id: object) -> bool:
        return visa_id in self._nodes


def node_from_record(record: Mapping[str, Any]) -> VisaNode:
    """Build a VisaNode from a definition record (camelCase keys)."""
    if not isinstance(record, Mapping):
        raise ConfigurationError(f"Visa record must be a mapping, got {type(record).__name__}")
    visa_id = str(record.get("id") or "").strip().lower()
    if not visa_id:
        raise ConfigurationError(f"Visa record without id: {record!r}")

    requirements = record.get("requirements") or {}
    if not isinstance(requirements, Mapping):
        raise ConfigurationError(f"Visa '{visa_id}' requirements must be a mapping")
    goal_tags = record.get("goalTags") or []
    if isinstance(goal_tags, str):
        goal_tags = [goal_tags]

    return VisaNode(
        id=visa_id,
        name=record.get("name") or visa_id,
        code=record.get("code") or visa_id.upper(),
        # threshold 0 means "not required"
        requirements={dim: value for dim, value in requirements.items() if value != 0},
        typical_duration_months=record.get("typicalDurationMonths", 0),
        goal_tags=frozenset(goal_tags),
        category=record.get("category", ""),
        description=record.get("description", ""),
    )


def edge_from_record(record: Mapping[str, Any]) -> TransitionEdge:
    if not isinstance(record, Mapping):
        raise ConfigurationError(f"Transition record must be a mapping, got {type(record).__name__}")
    from_id = str(record.get("from") or "").strip().lower()
    to_id = str(record.get("to") or "").strip().lower()
    # entry-state edges must say "none" explicitly
    if not from_id:
        raise ConfigurationError(f"Transition record without source: {record!r}")
    if not to_id:
        raise ConfigurationError(f"Transition record without target: {record!r}")
    return TransitionEdge(
        from_visa_id=from_id,
        to_visa_id=to_id,
        reason=record.get("reason", ""),
    )


def knowledge_base_from_definition(definition: Mapping[str, Any]) -> VisaKnowledgeBase:
    """
    Build a validated knowledge base from a {"nodes": [...], "edges": [...]} definition.

    Raises:
        ConfigurationError: If the definition is malformed or inconsistent
    """
    if not isinstance(definition, Mapping):
        raise ConfigurationError("Knowledge base definition must be a mapping with 'nodes' and 'edges'")
    nodes = [node_from_record(r) for r in definition.get("nodes") or []]
    edges = [edge_from_record(r) for r in definition.get("edges") or []]
    if not nodes:
        raise ConfigurationError("Knowledge base definition has no visa nodes")
    return VisaKnowledgeBase(nodes, edges)


def load_knowledge_base(path: str) -> VisaKnowledgeBase:
    """
    Load the knowledge base from a JSON or YAML file.

    Args:
        path: Definition file (.json, .yaml, .yml)

    Returns:
        Validated VisaKnowledgeBase

    Raises:
        ConfigurationError: If the file is missing, unreadable or inconsistent
    """
    if not os.path.exists(path):
        raise ConfigurationError(f"Knowledge base file not found: {path}")
    ext = os.path.splitext(path)[1].lower()
    try:
        with open(path, "r", encoding="utf-8") as f:
            if ext == ".json":
                definition = json.load(f)
            elif ext in (".yaml", ".yml"):
                definition = yaml.safe_load(f)
            else:
                raise ConfigurationError(f"Unsupported knowledge base file extension: {ext}. Use .json or .yaml/.yml")
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Failed to parse knowledge base {path}: {e}")

    logger.info("Loading visa knowledge base from %s", path)
    return knowledge_base_from_definition(definition)
