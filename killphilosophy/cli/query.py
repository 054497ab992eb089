#!/usr/bin/env python3
"""
CLI tool for querying the academic catalog.

Usage:
    killphilosophy-query --get "Foucault"
    killphilosophy-query --search Michel --tradition post-structuralism
    killphilosophy-query --connected-to "Jacques Derrida"
    killphilosophy-query --stats
    killphilosophy-query --add-favorite "Simone de Beauvoir"
"""
import argparse
import logging
import sys

from ..core.catalog import AcademicCatalog
from ..core.config import TAXONOMY_FIELDS
from ..utils.logger import setup_logging


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Query the academic catalog'
    )
    parser.add_argument(
        '--catalog', '-c',
        default='default',
        help='Catalog name (default: default)'
    )
    parser.add_argument(
        '--get', '-g',
        metavar='NAME',
        help='Show one academic (exact, case-insensitive or partial name)'
    )
    parser.add_argument(
        '--search', '-s',
        metavar='NAME',
        help='Search academics by name (combine with taxonomy filters)'
    )
    for field in TAXONOMY_FIELDS:
        parser.add_argument(
            f'--{field}',
            metavar='VALUE',
            help=f'Filter by {field}'
        )
    parser.add_argument(
        '--connected-to',
        metavar='NAME',
        help='List academics whose connections include NAME'
    )
    parser.add_argument('--stats', action='store_true', help='Show catalog statistics')
    parser.add_argument('--novelty', action='store_true', help='Show recent novelty tiles')
    parser.add_argument('--favorites', action='store_true', help='List favorites')
    parser.add_argument('--add-favorite', metavar='NAME', help='Add an academic to favorites')
    parser.add_argument('--remove-favorite', metavar='NAME', help='Remove an academic from favorites')
    parser.add_argument('--pending', action='store_true', help='List pending submissions')
    parser.add_argument('--verbose', '-v', action='store_true', help='Show log output')

    args = parser.parse_args(argv)
    setup_logging(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        catalog = AcademicCatalog(args.catalog, background_seed=False)
    except Exception as e:
        print(f"Error initializing catalog: {e}")
        return 1

    criteria = {field: getattr(args, field) for field in TAXONOMY_FIELDS if getattr(args, field)}
    if args.search:
        criteria['name'] = args.search

    if args.stats:
        stats = catalog.get_stats()
        print("=" * 50)
        print(f"Academic Catalog: {args.catalog}")
        print("=" * 50)
        print(f"Academics:   {stats['academics']}")
        print(f"Links:       {stats['links']}")
        print(f"Dangling:    {stats['dangling_connections']}")
        print(f"Papers:      {stats['papers']}")
        print(f"Events:      {stats['events']}")
        print(f"Favorites:   {stats['favorites']}")
        print(f"Pending:     {stats['pending_submissions']}")
        print("\nBy discipline:")
        for discipline, count in stats['academics_by_discipline'].items():
            print(f"  {discipline}: {count}")

    elif args.get:
        academic = catalog.get_academic(args.get)
        if academic is None:
            print(f"No academic found for '{args.get}'")
        else:
            print("=" * 50)
            print(academic.name)
            print("=" * 50)
            if academic.bio:
                print(academic.bio)
            for category, values in academic.taxonomies.items():
                print(f"  {category}: {', '.join(values)}")
            if academic.papers:
                print(f"\nPapers ({len(academic.papers)}):")
                for p in academic.papers:
                    print(f"  - {p.title}" + (f" ({p.year})" if p.year else ""))
            if academic.events:
                print(f"\nEvents ({len(academic.events)}):")
                for e in academic.events:
                    print(f"  - {e.title}" + (f" ({e.year})" if e.year else "")
                          + (f", {e.location}" if e.location else ""))
            if academic.connections:
                print(f"\nConnections: {', '.join(academic.connections)}")

    elif criteria:
        results = catalog.search_academics(criteria)
        print(f"\nSearch results ({len(results)} found):")
        print("-" * 50)
        for a in results:
            print(f"  - [{a.first_discipline() or 'Unknown'}] {a.name}")

    elif args.connected_to:
        results = catalog.get_academics_by_connection(args.connected_to)
        print(f"\nAcademics connected to '{args.connected_to}' ({len(results)} found):")
        print("-" * 50)
        for a in results:
            print(f"  - {a.name}")

    elif args.novelty:
        print("\nRecent novelty tiles:")
        print("-" * 50)
        for tile in catalog.get_recent_novelty_tiles():
            print(f"  [{tile.type}] {tile.date[:10]}  {tile.title}")
            if tile.content:
                print(f"      {tile.content}")

    elif args.add_favorite:
        if catalog.add_favorite(args.add_favorite):
            print(f"Added {args.add_favorite} to favorites")

    elif args.remove_favorite:
        if catalog.remove_favorite(args.remove_favorite):
            print(f"Removed {args.remove_favorite} from favorites")

    elif args.favorites:
        favorites = catalog.get_favorites()
        print(f"\nFavorites ({len(favorites)}):")
        for name in favorites:
            print(f"  - {name}")

    elif args.pending:
        pending = catalog.get_pending_submissions()
        print(f"\nPending submissions ({len(pending)}):")
        for i, submission in enumerate(pending):
            print(f"  {i}. [{submission.type}] {submission.academic_name}")

    else:
        parser.print_help()

    catalog.close()
    return 0


if __name__ == '__main__':
    sys.exit(main())
