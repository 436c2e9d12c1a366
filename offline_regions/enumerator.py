"""
Tile enumeration across a region's clamped zoom range.

enumerate_tiles() / count_tiles() are the one implementation of the
per-zoom loop. They take the region's zoom bounds plus a cover object
exposing tiles(zoom) and count(zoom), so bounding-box and geometry regions
share it. tile_cover() / tile_count() are the definition-level entry points.

Results are grouped by zoom ascending, and within a zoom keep the order the
cover produced. The same inputs always give the same list; callers diff
downloads by it.
"""

import logging
from typing import Dict, Iterator, List

from offline_regions.tile_cover import SourceType, TileID, cover_for
from offline_regions.zoom import ZoomRange, covering_zoom_range

logger = logging.getLogger(__name__)


def _as_zoom_range(zoom_range) -> ZoomRange:
    if isinstance(zoom_range, ZoomRange):
        return zoom_range
    min_zoom, max_zoom = zoom_range
    return ZoomRange.source(min_zoom, max_zoom)


def _clamped(min_zoom, max_zoom, source_type, tile_size, zoom_range) -> ZoomRange:
    clamped = covering_zoom_range(
        min_zoom, max_zoom, SourceType.parse(source_type), tile_size, _as_zoom_range(zoom_range)
    )
    if clamped.is_empty:
        logger.debug(f'Zoom {min_zoom}-{max_zoom} is outside the source range, nothing to cover')
    return clamped


def iter_tiles(min_zoom, max_zoom, cover, source_type, tile_size, zoom_range) -> Iterator[TileID]:
    """Yield the tiles `cover` gives at each zoom of the clamped range, zoom ascending."""
    for z in _clamped(min_zoom, max_zoom, source_type, tile_size, zoom_range).zooms():
        tiles = cover.tiles(z)
        logger.debug(f'  z{z}: {len(tiles):,} tiles')
        yield from tiles


def enumerate_tiles(min_zoom, max_zoom, cover, source_type, tile_size, zoom_range) -> List[TileID]:
    return list(iter_tiles(min_zoom, max_zoom, cover, source_type, tile_size, zoom_range))


def count_tiles_by_zoom(min_zoom, max_zoom, cover, source_type, tile_size, zoom_range) -> Dict[int, int]:
    """Per-zoom tile counts over the clamped range, without building tile lists."""
    counts = {}
    for z in _clamped(min_zoom, max_zoom, source_type, tile_size, zoom_range).zooms():
        counts[z] = cover.count(z)
        logger.debug(f'  z{z}: {counts[z]:,} tiles')
    return counts


def count_tiles(min_zoom, max_zoom, cover, source_type, tile_size, zoom_range) -> int:
    return sum(count_tiles_by_zoom(min_zoom, max_zoom, cover, source_type, tile_size, zoom_range).values())


# ============================================================================
# Definition entry points
# ============================================================================

def tile_cover(definition, source_type, tile_size, zoom_range) -> List[TileID]:
    """All tiles a region definition needs from a source, zoom ascending."""
    return enumerate_tiles(
        definition.min_zoom, definition.max_zoom, cover_for(definition.area()),
        source_type, tile_size, zoom_range,
    )


def iter_tile_cover(definition, source_type, tile_size, zoom_range) -> Iterator[TileID]:
    """tile_cover() one zoom at a time, for callers writing tiles out as they go."""
    return iter_tiles(
        definition.min_zoom, definition.max_zoom, cover_for(definition.area()),
        source_type, tile_size, zoom_range,
    )


def tile_count(definition, source_type, tile_size, zoom_range) -> int:
    """Number of tiles tile_cover() would return for the same arguments."""
    return count_tiles(
        definition.min_zoom, definition.max_zoom, cover_for(definition.area()),
        source_type, tile_size, zoom_range,
    )


def tile_count_by_zoom(definition, source_type, tile_size, zoom_range) -> Dict[int, int]:
    return count_tiles_by_zoom(
        definition.min_zoom, definition.max_zoom, cover_for(definition.area()),
        source_type, tile_size, zoom_range,
    )
