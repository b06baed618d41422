#!/usr/bin/env python3
"""
Knowledge Base Neo4j Interface - visa graph storage

Graph layout:
- (:Visa {id, name, code, requirements_json, typical_duration_months,
          goal_tags, category, description})
- (:EntryState {id: "none"}) - start node for profiles without a visa
- (a)-[:TRANSITIONS_TO {reason, rank}]->(b:Visa), a is a Visa or the EntryState

Critical Implementation:
- Reading builds the same definition records as the JSON/YAML catalog and
  runs them through the same validation (dangling edges fail fast)
- Seeding is idempotent (MERGE + uniqueness constraint)
- Errors raised immediately as ConfigurationError (no fallbacks)
"""

import json
import os
from typing import Any, Dict, List, Optional

from neo4j import GraphDatabase

from src.navigator.errors import ConfigurationError
from src.navigator.knowledge_base import VisaKnowledgeBase, knowledge_base_from_definition
from src.navigator.models import ENTRY_STATE_ID


class KnowledgeBaseNeo4j:
    """Neo4j source for the visa knowledge base."""

    def __init__(self, uri: Optional[str] = None, user: Optional[str] = None, password: Optional[str] = None):
        self.uri = uri or os.getenv("NEO4J_URI")
        self.user = user or os.getenv("NEO4J_USER")
        self.password = password or os.getenv("NEO4J_PASSWORD")

        if not all([self.uri, self.user, self.password]):
            raise ConfigurationError("Missing Neo4j environment variables: NEO4J_URI, NEO4J_USER, NEO4J_PASSWORD")

        self.driver = GraphDatabase.driver(self.uri, auth=(self.user, self.password))
        self.driver.verify_connectivity()

    def close(self):
        """Close Neo4j connection."""
        if self.driver:
            self.driver.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def get_visa_records(self) -> List[Dict[str, Any]]:
        """
        Get all visa nodes as catalog records.

        Raises:
            ConfigurationError: If the query fails or requirements JSON is invalid
        """
        try:
            with self.driver.session() as session:
                result = session.run("MATCH (v:Visa) RETURN v ORDER BY v.id")

                records = []
                for record in result:
                    visa = record["v"]
                    records.append({
                        "id": visa.get("id"),
                        "name": visa.get("name"),
                        "code": visa.get("code"),
                        "requirements": self._parse_requirements(visa.get("id"), visa.get("requirements_json")),
                        "typicalDurationMonths": visa.get("typical_duration_months", 0),
                        "goalTags": list(visa.get("goal_tags") or []),
                        "category": visa.get("category") or "",
                        "description": visa.get("description") or "",
                    })
                return records

        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Failed to get visa nodes: {e}")

    def get_transition_records(self) -> List[Dict[str, Any]]:
        """Get all transitions as catalog edge records, ordered by source then rank."""
        try:
            with self.driver.session() as session:
                query = """
                MATCH (a)-[t:TRANSITIONS_TO]->(b:Visa)
                WHERE a:Visa OR a:EntryState
                RETURN a.id AS from_id, b.id AS to_id, t.reason AS reason
                ORDER BY from_id, coalesce(t.rank, 0), to_id
                """
                result = session.run(query)

                return [
                    {"from": record["from_id"], "to": record["to_id"], "reason": record["reason"] or ""}
                    for record in result
                ]

        except Exception as e:
            raise ConfigurationError(f"Failed to get visa transitions: {e}")

    def load_knowledge_base(self) -> VisaKnowledgeBase:
        """Read the whole graph and validate it into a VisaKnowledgeBase."""
        return knowledge_base_from_definition({
            "nodes": self.get_visa_records(),
            "edges": self.get_transition_records(),
        })

    @staticmethod
    def _parse_requirements(visa_id: str, requirements_json: Optional[str]) -> Dict[str, Any]:
        if not requirements_json:
            return {}
        try:
            requirements = json.loads(requirements_json)
        except (json.JSONDecodeError, TypeError) as e:
            raise ConfigurationError(f"Visa '{visa_id}' has invalid requirements_json: {e}")
        if not isinstance(requirements, dict):
            raise ConfigurationError(f"Visa '{visa_id}' requirements_json must be an object")
        return requirements


def create_constraints(session):
    session.run("CREATE CONSTRAINT visa_id IF NOT EXISTS FOR (v:Visa) REQUIRE v.id IS UNIQUE;")


def seed_visas(session, knowledge_base: VisaKnowledgeBase, catalog_version: str) -> int:
    count = 0
    for visa in knowledge_base.all_nodes():
        session.run("""
            MERGE (v:Visa {id: $id})
            SET v.name = $name,
                v.code = $code,
                v.requirements_json = $requirements_json,
                v.typical_duration_months = $typical_duration_months,
                v.goal_tags = $goal_tags,
                v.category = $category,
                v.description = $description,
                v.catalog_version = $catalog_version,
                v.updated_at = timestamp()
        """, id=visa.id, name=visa.name, code=visa.code,
             requirements_json=json.dumps(dict(visa.requirements), sort_keys=True),
             typical_duration_months=visa.typical_duration_months,
             goal_tags=sorted(visa.goal_tags), category=visa.category, description=visa.description,
             catalog_version=catalog_version)
        count += 1
    return count


def seed_transitions(session, knowledge_base: VisaKnowledgeBase) -> int:
    session.run("MERGE (e:EntryState {id: $id})", id=ENTRY_STATE_ID)
    count = 0
    ranks: Dict[str, int] = {}
    for edge in knowledge_base.all_edges():
        rank = ranks.get(edge.from_visa_id, 0)
        ranks[edge.from_visa_id] = rank + 1
        session.run("""
            MATCH (a {id: $from_id}) WHERE a:Visa OR a:EntryState
            MATCH (b:Visa {id: $to_id})
            MERGE (a)-[t:TRANSITIONS_TO]->(b)
            SET t.reason = $reason,
                t.rank = $rank
        """, from_id=edge.from_visa_id, to_id=edge.to_visa_id, reason=edge.reason, rank=rank)
        count += 1
    return count


def visa_graph_status(session) -> Dict[str, int]:
    """Counts of visa nodes, entry states and transitions currently stored."""
    visas = session.run("MATCH (v:Visa) RETURN count(v) AS count").single()["count"]
    entry_states = session.run("MATCH (e:EntryState) RETURN count(e) AS count").single()["count"]
    transitions = session.run("MATCH ()-[t:TRANSITIONS_TO]->() RETURN count(t) AS count").single()["count"]
    return {"visas": visas, "entry_states": entry_states, "transitions": transitions}


def clear_visa_graph(session) -> None:
    """Remove the visa graph; constraints and unrelated nodes are kept."""
    session.run("MATCH ()-[t:TRANSITIONS_TO]->() DELETE t")
    session.run("MATCH (n) WHERE n:Visa OR n:EntryState DETACH DELETE n")
