#!/usr/bin/env python3
"""
CLI tool for running deep searches and enriching the catalog.

Usage:
    killphilosophy-enrich "Who influenced Judith Butler?"
    killphilosophy-enrich --academic "Michel Foucault" --depth deep
    killphilosophy-enrich --compare "Michel Foucault" "Jacques Derrida" --no-events
    killphilosophy-enrich --academic "Hannah Arendt" --provider gemini --yes
"""
import argparse
import logging
import sys

from ..core.catalog import AcademicCatalog
from ..core.config import SEARCH_DEPTHS
from ..core.enrichment.providers import create_provider
from ..core.exceptions import ProviderError
from ..core.storage.models import Academic
from ..utils.logger import setup_logging


def print_academic(academic: Academic):
    """Show an extracted record."""
    print(f"Name: {academic.name}")
    if academic.bio:
        print(f"Bio:  {academic.bio}")
    if academic.papers:
        print(f"\nPapers ({len(academic.papers)}):")
        for p in academic.papers:
            year = f" ({p.year})" if p.year else ""
            with_clause = f" with {', '.join(p.coauthors)}" if p.coauthors else ""
            print(f"  - {p.title}{year}{with_clause}")
    if academic.events:
        print(f"\nEvents ({len(academic.events)}):")
        for e in academic.events:
            year = f" ({e.year})" if e.year else ""
            location = f", {e.location}" if e.location else ""
            print(f"  - {e.title}{year}{location}")
    if academic.connections:
        print(f"\nConnections: {', '.join(academic.connections)}")
    for category, values in academic.taxonomies.items():
        print(f"  {category}: {', '.join(values)}")


def confirm(prompt: str) -> bool:
    try:
        return input(prompt).strip().lower() in ('y', 'yes')
    except EOFError:
        return False


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Run a deep search and add the result to the academic catalog'
    )
    parser.add_argument(
        'query',
        nargs='?',
        default='',
        help='Free-text search query'
    )
    parser.add_argument(
        '--catalog', '-c',
        default='default',
        help='Catalog name (default: default)'
    )
    parser.add_argument(
        '--academic', '-a',
        metavar='NAME',
        help='Search for detailed information about one academic'
    )
    parser.add_argument(
        '--compare',
        nargs=2,
        metavar=('NAME1', 'NAME2'),
        help='Analyze the connections between two academics'
    )
    parser.add_argument(
        '--depth', '-d',
        choices=SEARCH_DEPTHS,
        default='medium',
        help='Search depth (default: medium)'
    )
    parser.add_argument('--no-papers', action='store_true', help='Exclude papers and publications')
    parser.add_argument('--no-events', action='store_true', help='Exclude events and appearances')
    parser.add_argument('--no-citations', action='store_true', help='Exclude citation information')
    parser.add_argument('--no-influences', action='store_true', help='Exclude academic influences')
    parser.add_argument(
        '--provider', '-p',
        choices=['jina', 'gemini'],
        help='Text provider (default: from DEEPSEARCH_PROVIDER)'
    )
    parser.add_argument(
        '--no-stream',
        action='store_true',
        help='Request a single response instead of a stream'
    )
    parser.add_argument(
        '--yes', '-y',
        action='store_true',
        help='Save the extracted record without asking'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Show log output'
    )

    args = parser.parse_args(argv)
    setup_logging(level=logging.DEBUG if args.verbose else logging.WARNING)

    name1, name2 = (args.compare if args.compare else (args.academic, None))
    if not (args.query or name1):
        parser.print_help()
        return 1

    print("=" * 60)
    print("KillPhilosophy DeepSearch")
    print("=" * 60)
    print(f"Catalog: {args.catalog}")
    print(f"Depth:   {args.depth}")
    print()

    try:
        catalog = AcademicCatalog(
            args.catalog,
            provider=create_provider(args.provider),
            background_seed=False
        )
    except Exception as e:
        print(f"Error initializing catalog: {e}")
        return 1

    filters = {
        'papers': not args.no_papers,
        'events': not args.no_events,
        'citations': not args.no_citations,
        'influences': not args.no_influences,
    }

    try:
        result = catalog.deep_search(
            args.query,
            depth=args.depth,
            filters=filters,
            academic_name1=name1,
            academic_name2=name2,
            stream=not args.no_stream,
            on_chunk=lambda text: print(text, end='', flush=True)
        )
    except ProviderError as e:
        print(f"\nSearch failed: {e}")
        catalog.close()
        return 1

    print("\n" + "-" * 60)

    candidate = result.candidate
    if candidate is None:
        print("No academic record could be extracted from the result.")
        catalog.close()
        return 0

    print_academic(candidate)
    print("-" * 60)

    exit_code = 0
    if args.yes or confirm(f"Save {candidate.name} to database? [y/N] "):
        if catalog.enrich_database(candidate):
            print(f"Database enriched with information about {candidate.name}")
        else:
            print(f"Failed to enrich database with {candidate.name}")
            exit_code = 1
    else:
        print("Not saved.")

    catalog.close()
    return exit_code


if __name__ == '__main__':
    sys.exit(main())
