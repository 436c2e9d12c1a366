"""
Offline region definitions: which map tiles a region needs for offline use.

A definition pairs a style with an area (bounding box or geometry), a zoom
range and a pixel ratio. It can enumerate or count the tiles it needs from a
source, and round-trips through a JSON document for storage.
"""

from offline_regions.codec import decode, decode_document, encode, encode_document, validate_document
from offline_regions.definitions import (
    GeometryRegionDefinition,
    RegionDefinition,
    TilePyramidRegionDefinition,
    match_definition,
)
from offline_regions.errors import InvalidDefinition, MalformedRegionDocument, RegionError
from offline_regions.geometry import LatLng, LatLngBounds
from offline_regions.region import OfflineRegion
from offline_regions.tile_cover import SourceType, TileID, covering_zoom_level
from offline_regions.zoom import ZoomRange, covering_zoom_range

__all__ = [
    'GeometryRegionDefinition',
    'InvalidDefinition',
    'LatLng',
    'LatLngBounds',
    'MalformedRegionDocument',
    'OfflineRegion',
    'RegionDefinition',
    'RegionError',
    'SourceType',
    'TileID',
    'TilePyramidRegionDefinition',
    'ZoomRange',
    'covering_zoom_level',
    'covering_zoom_range',
    'decode',
    'decode_document',
    'encode',
    'encode_document',
    'match_definition',
    'validate_document',
]
