#!/usr/bin/env python3
"""
Neo4j Visa Graph Cleaner

Removes the visa knowledge base (Visa + EntryState nodes, TRANSITIONS_TO
relationships) so the catalog can be reseeded from scratch. Constraints and
indexes are preserved.

Usage:
    python clean_visa_graph.py            # Remove the visa graph
    python clean_visa_graph.py --status   # Show counts without cleaning
"""

import argparse
import os
import sys

from dotenv import load_dotenv
from neo4j import GraphDatabase

from src.navigator.knowledge_base_neo4j import clear_visa_graph, visa_graph_status

load_dotenv()


def show_status(driver):
    print("\n📊 Current Visa Graph Status:")
    print("=" * 40)
    with driver.session() as session:
        status = visa_graph_status(session)
    print(f"   Visa nodes:        {status['visas']}")
    print(f"   Entry states:      {status['entry_states']}")
    print(f"   🔗 Transitions:    {status['transitions']}")


def main():
    parser = argparse.ArgumentParser(description="Remove the visa knowledge base from Neo4j")
    parser.add_argument("--status", action="store_true", help="Show graph status without cleaning")
    args = parser.parse_args()

    # Fail fast if any required environment variables are missing
    required_env_vars = {
        'NEO4J_URI': 'Neo4j database connection URI',
        'NEO4J_USER': 'Neo4j database username',
        'NEO4J_PASSWORD': 'Neo4j database password'
    }
    missing_vars = [f"   {var}: {description}" for var, description in required_env_vars.items() if not os.getenv(var)]
    if missing_vars:
        print("❌ Missing required environment variables:")
        for var in missing_vars:
            print(var)
        print("\nPlease set these in your .env file or environment.")
        sys.exit(1)

    driver = GraphDatabase.driver(os.getenv("NEO4J_URI"), auth=(os.getenv("NEO4J_USER"), os.getenv("NEO4J_PASSWORD")))
    try:
        driver.verify_connectivity()
        print("✅ Connected to Neo4j")
        show_status(driver)

        if args.status:
            print("\n✅ Status check complete")
            return

        print("\n🧹 Removing visa graph...")
        with driver.session() as session:
            clear_visa_graph(session)
        show_status(driver)

        print("\n💡 Next step:")
        print("   Run: python data/seeds/seed_visa_catalog.py")

    except Exception as e:
        print(f"\n❌ ERROR: {e}")
        sys.exit(1)
    finally:
        driver.close()


if __name__ == "__main__":
    main()
