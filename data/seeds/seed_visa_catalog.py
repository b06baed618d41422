#!/usr/bin/env python3
"""
Seed the visa knowledge base (Visa nodes + TRANSITIONS_TO edges) into Neo4j.

- Idempotent: uses MERGE and IF NOT EXISTS constraints.
- Accepts JSON or YAML.
- The catalog is validated before anything is written (dangling edges,
  out-of-range thresholds and duplicate ids abort the run).

Usage:
  export NEO4J_URI=bolt://localhost:7687
  export NEO4J_USER=neo4j
  export NEO4J_PASSWORD=pass
  python seed_visa_catalog.py \
    --catalog src/navigator/data/visa_catalog.json \
    --catalog-version v1

If --catalog is omitted, the catalog bundled with the package is used.
"""

import argparse
import os
import sys

from dotenv import load_dotenv
from neo4j import GraphDatabase

from src.navigator.config import DEFAULT_CATALOG_PATH
from src.navigator.errors import ConfigurationError
from src.navigator.knowledge_base import load_knowledge_base
from src.navigator.knowledge_base_neo4j import create_constraints, seed_transitions, seed_visas

load_dotenv()


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument(
        "--catalog",
        default=DEFAULT_CATALOG_PATH,
        help="Path to visa catalog JSON/YAML (defaults to the bundled catalog)",
    )
    parser.add_argument("--catalog-version", default="v1", help="Catalog version label to stamp")
    args = parser.parse_args()

    uri = os.getenv("NEO4J_URI")
    user = os.getenv("NEO4J_USER")
    pwd = os.getenv("NEO4J_PASSWORD")

    if not (uri and user and pwd):
        print("❌ Missing NEO4J env vars. Please set NEO4J_URI, NEO4J_USER, NEO4J_PASSWORD.")
        sys.exit(1)

    try:
        knowledge_base = load_knowledge_base(args.catalog)
    except ConfigurationError as e:
        print(f"❌ Invalid catalog: {e}")
        sys.exit(1)

    with GraphDatabase.driver(uri, auth=(user, pwd)) as driver:
        with driver.session() as session:
            create_constraints(session)
            v_count = seed_visas(session, knowledge_base, args.catalog_version)
            t_count = seed_transitions(session, knowledge_base)

    print("\n✅ Seeding complete")
    print(f"   Visas upserted:       {v_count}")
    print(f"   Transitions upserted: {t_count}")


if __name__ == "__main__":
    main()
