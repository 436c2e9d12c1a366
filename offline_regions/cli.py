#!/usr/bin/env python3
"""
Inspect stored offline region definitions.

Usage:
    # Tiles per zoom and estimated download size
    offline-regions estimate region.json
    offline-regions estimate region.json --source-type raster --tile-size 256

    # Every tile the region needs, one z/x/y per line
    offline-regions tiles region.json --max-zoom 14 > tiles.txt

    # Check a region document without covering it
    offline-regions validate region.json

REGION_JSON is a region document as written by offline_regions.codec.encode();
pass '-' to read it from stdin.
"""

import argparse
import logging
import sys
from pathlib import Path

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from offline_regions import config
from offline_regions.codec import decode_document, parse, validate_document
from offline_regions.enumerator import iter_tile_cover, tile_count_by_zoom
from offline_regions.errors import InvalidDefinition, RegionError
from offline_regions.tile_cover import SourceType
from offline_regions.zoom import ZoomRange

logger = logging.getLogger(__name__)

console = Console()


def format_bytes(size: float) -> str:
    """Format bytes to human readable string"""
    for unit in ['B', 'KB', 'MB', 'GB']:
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} TB"


def read_document(path: str):
    if path == '-':
        return parse(sys.stdin.buffer.read())
    return parse(Path(path).read_bytes())


def _source_args(args):
    return SourceType.parse(args.source_type), args.tile_size, ZoomRange.source(args.min_zoom, args.max_zoom)


# ============================================================================
# Commands
# ============================================================================

def cmd_estimate(args) -> int:
    definition = decode_document(read_document(args.region))
    source_type, tile_size, zoom_range = _source_args(args)

    counts = tile_count_by_zoom(definition, source_type, tile_size, zoom_range)
    total = sum(counts.values())
    logger.info(f'{args.region}: {total:,} tiles over {len(counts)} zoom levels')

    table = Table(box=box.ROUNDED, title=escape(args.region), title_justify="left")
    table.add_column("Zoom", style="bold", justify="right")
    table.add_column("Tiles", justify="right")
    table.add_column("Est. size", justify="right")
    for z, count in counts.items():
        table.add_row(f"z{z}", f"{count:,}", format_bytes(count * config.AVG_TILE_BYTES))
    table.add_section()
    table.add_row("Total", f"[bold]{total:,}[/bold]", format_bytes(total * config.AVG_TILE_BYTES))

    console.print(table)
    if not counts:
        console.print(f"[yellow]Region zooms do not overlap source zooms "
                      f"z{zoom_range.min}-z{zoom_range.max}[/yellow]")
    return 0


def cmd_tiles(args) -> int:
    definition = decode_document(read_document(args.region))
    source_type, tile_size, zoom_range = _source_args(args)

    written = 0
    for tile in iter_tile_cover(definition, source_type, tile_size, zoom_range):
        sys.stdout.write(f'{tile}\n')
        written += 1
    logger.info(f'Wrote {written:,} tiles')
    return 0


def cmd_validate(args) -> int:
    doc = read_document(args.region)
    check = validate_document(doc)
    if not check.ok:
        console.print(f"[red]✗[/red] {escape(args.region)}: malformed region document")
        for problem in check.problems:
            console.print(f"  • {escape(problem)}")
        return 1

    try:
        definition = decode_document(doc)
    except InvalidDefinition as e:
        console.print(f"[red]✗[/red] {escape(args.region)}: {escape(str(e))}")
        return 1

    kind = 'geometry' if check.variant == 'geometry' else 'tile pyramid'
    max_zoom = 'unbounded' if definition.is_unbounded else f'{definition.max_zoom:g}'
    console.print(f"[green]✓[/green] {escape(args.region)}: {kind} region, "
                  f"zoom {definition.min_zoom:g}-{max_zoom}, pixel ratio {definition.pixel_ratio:g}")
    return 0


# ============================================================================
# Entry point
# ============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='offline-regions',
        description="Inspect offline region definitions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    offline-regions estimate region.json
    offline-regions estimate region.json --source-type raster --tile-size 256
    offline-regions tiles region.json --max-zoom 14 > tiles.txt
    offline-regions validate region.json
        """
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Log per-zoom details')
    subparsers = parser.add_subparsers(dest='command', required=True)

    source = argparse.ArgumentParser(add_help=False)
    source.add_argument('region', help="Region document (JSON file, or '-' for stdin)")
    source.add_argument(
        '--source-type', default=config.DEFAULT_SOURCE_TYPE,
        help=f'Tile source type (default: {config.DEFAULT_SOURCE_TYPE})'
    )
    source.add_argument(
        '--tile-size', type=int, default=config.DEFAULT_TILE_SIZE,
        help=f'Source tile size in pixels (default: {config.DEFAULT_TILE_SIZE})'
    )
    source.add_argument(
        '--min-zoom', type=int, default=config.DEFAULT_MIN_ZOOM,
        help=f'Minimum zoom the source provides (default: {config.DEFAULT_MIN_ZOOM})'
    )
    source.add_argument(
        '--max-zoom', type=int, default=config.DEFAULT_MAX_ZOOM,
        help=f'Maximum zoom the source provides (default: {config.DEFAULT_MAX_ZOOM})'
    )

    estimate = subparsers.add_parser('estimate', parents=[source], help='Tile counts per zoom')
    estimate.set_defaults(func=cmd_estimate)

    tiles = subparsers.add_parser('tiles', parents=[source], help='List every tile as z/x/y')
    tiles.set_defaults(func=cmd_tiles)

    validate = subparsers.add_parser('validate', help='Check a region document')
    validate.add_argument('region', help="Region document (JSON file, or '-' for stdin)")
    validate.set_defaults(func=cmd_validate)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.LOG_LEVEL,
        format=config.LOG_FORMAT,
        stream=sys.stderr,
    )

    try:
        return args.func(args)
    except (RegionError, ValueError, OSError) as e:
        logger.error(f'{args.command} failed for {args.region}: {e}')
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
