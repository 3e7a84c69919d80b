#!/usr/bin/env python3
"""
Command-line interface for Furniture Inventory
"""
import sys
import argparse
from pathlib import Path
from typing import Optional

from . import parser
from .config import settings
from .exceptions import SourceFormatError
from .statistics import compute_statistics, summary_counts, top_entries


def convert_command(source: Optional[Path] = None, output: Optional[Path] = None) -> int:
    """Convert the inventory spreadsheet into the JSON item dump."""
    source = Path(source or settings.source_path)
    output = Path(output or settings.inventory_path)

    print(f"🔄 Reading {source}...")
    try:
        items = parser.read_inventory_data(source)
    except SourceFormatError as e:
        print(f"❌ Error: {e}")
        return 1

    print(f"✅ Found {len(items)} items")

    issues = parser.validate_inventory(items)
    if issues:
        print(f"\n⚠️  Found {len(issues)} issue(s):")
        for issue in issues[:20]:  # Limit to first 20
            print(f"   {issue}")
        if len(issues) > 20:
            print(f"   ... and {len(issues) - 20} more")

    parser.save_json(items, output)
    print(f"\n✅ Success! {output} has been updated.")

    counts = summary_counts(items)
    print(f"   Total items: {len(items)}")
    print(f"   Floors: {counts['floors']}")
    print(f"   Rooms: {counts['rooms']}")
    print(f"   Families: {counts['families']}")

    return 0


def stats_command(dump: Optional[Path] = None, limit: Optional[int] = 10) -> int:
    """Print statistics tables from a JSON item dump."""
    dump = Path(dump or settings.inventory_path)

    if not dump.exists():
        print(f"❌ Error: {dump} not found!")
        print("Run 'furniture-inventory convert' first")
        return 1

    items = parser.load_json(dump)
    stats = compute_statistics(items)

    print(f"📊 {stats.total} items, {stats.floors} floors, {stats.rooms} rooms, {stats.families} families")

    for title, counts, table_limit in (("By floor", stats.by_floor, None),
                                       ("By family", stats.by_family, None),
                                       ("By type", stats.by_type, limit)):
        print(f"\n{title}:")
        for key, count in top_entries(counts, table_limit):
            print(f"   {key:<40} {count:>5}")

    return 0


def api_command(port: int = 8765) -> int:
    """Start the inventory API server."""
    if not settings.inventory_path.exists():
        print(f"❌ {settings.inventory_path} not found")
        print("Run 'furniture-inventory convert' first")
        return 1

    print(f"🚀 Starting Furniture Inventory Server...")
    print(f"📂 Using inventory: {settings.inventory_path}")
    print(f"🌐 Server will run at: http://localhost:{port}")
    print(f"📋 Items: http://localhost:{port}/api/items")
    print(f"📊 Statistics: http://localhost:{port}/api/statistics")
    print(f"📍 Placements: http://localhost:{port}/api/placements")
    print(f"❤️  Health check: http://localhost:{port}/health")
    print(f"Press Ctrl+C to stop\n")

    import uvicorn
    from .server import app

    try:
        uvicorn.run(app, host="0.0.0.0", port=port, log_level="info")
    except KeyboardInterrupt:
        print("\n\n👋 Server stopped")
    return 0


def main(argv=None) -> int:
    """Main entry point for the CLI."""
    parser_cli = argparse.ArgumentParser(
        description="Furniture Inventory - Convert and explore furniture inventories",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Convert the inventory spreadsheet to JSON (paths from INVENTORY_SOURCE / INVENTORY_JSON)
  furniture-inventory convert

  # Convert a specific CSV export
  furniture-inventory convert export.csv -o public/data/inventory.json

  # Show statistics
  furniture-inventory stats --limit 5

  # Start the API server
  furniture-inventory api
        """
    )

    subparsers = parser_cli.add_subparsers(dest='command', help='Command to run')

    # Convert command
    convert_parser = subparsers.add_parser('convert', help='Convert spreadsheet to JSON')
    convert_parser.add_argument('source', type=Path, nargs='?', help='Excel or CSV source (default: INVENTORY_SOURCE)')
    convert_parser.add_argument('--output', '-o', type=Path, help='Output JSON file (default: INVENTORY_JSON)')

    # Stats command
    stats_parser = subparsers.add_parser('stats', help='Show inventory statistics')
    stats_parser.add_argument('dump', type=Path, nargs='?', help='JSON item dump (default: INVENTORY_JSON)')
    stats_parser.add_argument('--limit', '-n', type=int, default=10, help='Rows shown in the by-type table (default: 10)')

    # API command
    api_parser = subparsers.add_parser('api', help='Start API server')
    api_parser.add_argument('--port', '-p', type=int, default=8765, help='Port number (default: 8765)')

    args = parser_cli.parse_args(argv)

    if args.command == 'convert':
        return convert_command(args.source, args.output)
    elif args.command == 'stats':
        return stats_command(args.dump, args.limit)
    elif args.command == 'api':
        return api_command(args.port)
    else:
        parser_cli.print_help()
        return 1


if __name__ == '__main__':
    sys.exit(main())
