#!/usr/bin/env python3
"""
Enrich one person from the command line.
Usage:
  python scripts/enrich_person.py "Ted Kummert" ted@madrona.com
Uses GOOGLE_SEARCH_API_KEY / GOOGLE_SEARCH_ENGINE_ID from the environment or .env;
without them the stub search provider returns nothing.
"""
import argparse
import logging
import os
import sys

from dotenv import load_dotenv

logging.basicConfig(level=logging.WARNING)  # Reduce noise

load_dotenv()
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ace.core.config import load_config
from ace.enrichment.service import EnrichmentService
from ace.research.orchestrator import SearchOrchestrator
from ace.research.provider import select_search_provider


def main() -> int:
    parser = argparse.ArgumentParser(description="Resolve a person's profile and company.")
    parser.add_argument("name", help="Display name (or the email when unknown)")
    parser.add_argument("email", help="Email address")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show search and validation logs")
    args = parser.parse_args()

    if args.verbose:
        logging.getLogger("ace").setLevel(logging.INFO)

    config = load_config()
    service = EnrichmentService(SearchOrchestrator(select_search_provider(config)))
    result = service.process_enrichment(args.name, args.email)

    print("=" * 80)
    print(f"ENRICHMENT: {args.name} <{args.email}>")
    print("=" * 80)
    print(f"Company:        {result.company_name or '-'}")
    print(f"LinkedIn title: {result.linkedin_title or '-'}")
    print(f"LinkedIn URL:   {result.linkedin_url or '-'}")
    print()
    print(result.research_summary or "No research found.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
