#!/usr/bin/env python3
"""
CLI tool for exporting, importing and clearing catalog data.

Usage:
    killphilosophy-export --output catalog.json
    killphilosophy-export --format d3 --output viz.json
    killphilosophy-export --format csv-academics --output academics.csv
    killphilosophy-export --import catalog.json
    killphilosophy-export --clear
"""
import argparse
import csv
import json
import logging
import sys

from ..core.catalog import AcademicCatalog
from ..core.config import TAXONOMY_FIELDS
from ..utils.logger import setup_logging


def export_json(catalog: AcademicCatalog, output_path: str):
    """Export the full catalog to JSON."""
    data = catalog.export_to_json()
    if data is None:
        raise ValueError("catalog could not be serialized")
    with open(output_path, 'w', encoding='utf-8') as f:
        f.write(data)
    print(f"Exported full catalog to: {output_path}")


def export_network(catalog: AcademicCatalog, output_path: str):
    """Export name-keyed nodes and links."""
    data = catalog.get_network_data()
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)

    print(f"Exported network data to: {output_path}")
    print(f"  Nodes: {len(data['nodes'])}")
    print(f"  Links: {len(data['links'])}")


def export_d3(catalog: AcademicCatalog, output_path: str, max_nodes: int = 500):
    """Export graph in D3.js compatible format."""
    data = catalog.exporter.get_graph_data(limit_nodes=max_nodes)
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)

    print(f"Exported D3 visualization data to: {output_path}")
    print(f"  Nodes: {len(data['nodes'])}")
    print(f"  Links: {len(data['links'])}")


def export_csv_academics(catalog: AcademicCatalog, output_path: str):
    """Export academics to CSV."""
    academics = catalog.get_all_academics()
    fieldnames = ['key', 'name', 'bio'] + TAXONOMY_FIELDS + ['papers', 'events', 'connections']

    with open(output_path, 'w', newline='', encoding='utf-8') as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        for a in academics:
            row = {
                'key': a.key,
                'name': a.name,
                'bio': a.bio,
                'papers': len(a.papers),
                'events': len(a.events),
                'connections': len(a.connections)
            }
            for field in TAXONOMY_FIELDS:
                row[field] = '; '.join(a.taxonomies.get(field, []))
            writer.writerow(row)

    print(f"Exported {len(academics)} academics to: {output_path}")


def export_csv_connections(catalog: AcademicCatalog, output_path: str):
    """Export connections to CSV, flagging names missing from the catalog."""
    rows = []
    for a in catalog.get_all_academics():
        for connection in a.connections:
            target = catalog.get_academic(connection)
            rows.append({
                'source': a.name,
                'target': connection,
                'target_in_catalog': target is not None
            })

    with open(output_path, 'w', newline='', encoding='utf-8') as f:
        writer = csv.DictWriter(f, fieldnames=['source', 'target', 'target_in_catalog'])
        writer.writeheader()
        writer.writerows(rows)

    print(f"Exported {len(rows)} connections to: {output_path}")


EXPORTERS = {
    'json': export_json,
    'network': export_network,
    'd3': export_d3,
    'csv-academics': export_csv_academics,
    'csv-connections': export_csv_connections,
}


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Export, import or clear academic catalog data'
    )
    parser.add_argument(
        '--catalog', '-c',
        default='default',
        help='Catalog name (default: default)'
    )
    parser.add_argument(
        '--output', '-o',
        help='Output file path'
    )
    parser.add_argument(
        '--format', '-f',
        choices=list(EXPORTERS),
        default='json',
        help='Export format (default: json)'
    )
    parser.add_argument(
        '--max-nodes',
        type=int,
        default=500,
        help='Maximum nodes for D3 export (default: 500)'
    )
    parser.add_argument(
        '--import',
        dest='import_file',
        metavar='FILE',
        help='Replace the catalog with a JSON export'
    )
    parser.add_argument(
        '--clear',
        action='store_true',
        help='Remove every record (a pre-clear backup is kept)'
    )
    parser.add_argument('--verbose', '-v', action='store_true', help='Show log output')

    args = parser.parse_args(argv)
    setup_logging(level=logging.DEBUG if args.verbose else logging.WARNING)

    if not (args.output or args.import_file or args.clear):
        parser.print_help()
        return 1

    print("=" * 50)
    print("Academic Catalog Exporter")
    print("=" * 50)
    print(f"Catalog: {args.catalog}")

    try:
        catalog = AcademicCatalog(args.catalog, background_seed=False)
    except Exception as e:
        print(f"Error initializing catalog: {e}")
        return 1

    exit_code = 0
    if args.clear:
        if catalog.clear_database():
            print("Catalog cleared")
        else:
            print("Clear failed")
            exit_code = 1

    elif args.import_file:
        try:
            with open(args.import_file, 'r', encoding='utf-8') as f:
                data = f.read()
        except OSError as e:
            print(f"Import error: {e}")
            catalog.close()
            return 1

        if catalog.import_from_json(data):
            print(f"Imported catalog from: {args.import_file}")
            print(f"  Academics: {len(catalog.get_all_academics())}")
        else:
            print("Import failed; the previous catalog was kept")
            exit_code = 1

    else:
        stats = catalog.get_stats()
        print(f"Format:  {args.format}")
        print(f"\nCatalog contains:")
        print(f"  Academics: {stats['academics']}")
        print(f"  Links:     {stats['links']}")
        print()

        try:
            if args.format == 'd3':
                export_d3(catalog, args.output, args.max_nodes)
            else:
                EXPORTERS[args.format](catalog, args.output)
        except (OSError, ValueError) as e:
            print(f"Export error: {e}")
            exit_code = 1

    catalog.close()
    if exit_code == 0:
        print("\nDone!")
    return exit_code


if __name__ == '__main__':
    sys.exit(main())
