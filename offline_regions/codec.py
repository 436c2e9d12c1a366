"""
Stored form of region definitions.

A definition is persisted as a JSON object:

  {
    "style_url": "mapbox://styles/...",   // required
    "min_zoom": 0.0,                      // required
    "max_zoom": 14.0,                     // omitted when unbounded
    "pixel_ratio": 2.0,                   // required
    "bounds": [south, west, north, east]  // tile pyramid regions
    "geometry": {...}                     // geometry regions (GeoJSON)
  }

Decoding is strict. The document is first checked field by field
(validate_document); any structural problem raises MalformedRegionDocument
before a definition is built. The definition constructor then re-checks the
zoom and pixel ratio invariants and may still raise InvalidDefinition.
"""

import json
import math
from dataclasses import dataclass
from typing import Optional, Tuple

from offline_regions.definitions import (
    GeometryRegionDefinition,
    RegionDefinition,
    TilePyramidRegionDefinition,
    match_definition,
)
from offline_regions.errors import InvalidDefinition, MalformedRegionDocument
from offline_regions.geometry import LatLng, LatLngBounds, to_geojson, to_geometry

STYLE_URL = 'style_url'
MIN_ZOOM = 'min_zoom'
MAX_ZOOM = 'max_zoom'
PIXEL_RATIO = 'pixel_ratio'
BOUNDS = 'bounds'
GEOMETRY = 'geometry'


# ============================================================================
# Encoding
# ============================================================================

def _common_fields(definition) -> dict:
    doc = {
        STYLE_URL: definition.style_url,
        MIN_ZOOM: definition.min_zoom,
    }
    if math.isfinite(definition.max_zoom):
        doc[MAX_ZOOM] = definition.max_zoom
    doc[PIXEL_RATIO] = definition.pixel_ratio
    return doc


def encode_document(definition: RegionDefinition) -> dict:
    """The JSON object for a definition, as a fresh dict."""
    return match_definition(
        definition,
        tile_pyramid=lambda d: {**_common_fields(d), BOUNDS: d.bounds.as_list()},
        geometry=lambda d: {**_common_fields(d), GEOMETRY: to_geojson(d.geometry)},
    )


def encode(definition: RegionDefinition) -> str:
    """Compact JSON text for a definition."""
    return json.dumps(encode_document(definition), separators=(',', ':'), allow_nan=False)


# ============================================================================
# Validation
# ============================================================================

@dataclass(frozen=True)
class DocumentCheck:
    """Outcome of validate_document(): problems found and the region kind chosen."""
    problems: Tuple[str, ...]
    variant: Optional[str] = None

    @property
    def ok(self) -> bool:
        return not self.problems


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _valid_bounds(doc) -> bool:
    bounds = doc.get(BOUNDS)
    return isinstance(bounds, list) and len(bounds) == 4 and all(_is_number(v) for v in bounds)


def _valid_geometry(doc) -> bool:
    return isinstance(doc.get(GEOMETRY), dict)


def validate_document(doc) -> DocumentCheck:
    """
    Check the structure of a parsed region document.

    A valid 'bounds' array makes it a tile pyramid region even if a
    'geometry' is also present; otherwise a 'geometry' object makes it a
    geometry region.
    """
    if not isinstance(doc, dict):
        return DocumentCheck(problems=(f'document must be a JSON object, got {type(doc).__name__}',))

    problems = []
    if not isinstance(doc.get(STYLE_URL), str):
        problems.append(f'{STYLE_URL} must be a string' if STYLE_URL in doc else f'missing {STYLE_URL}')
    for key in (MIN_ZOOM, PIXEL_RATIO):
        if key not in doc:
            problems.append(f'missing {key}')
        elif not _is_number(doc[key]):
            problems.append(f'{key} must be a number')
    if MAX_ZOOM in doc and not _is_number(doc[MAX_ZOOM]):
        problems.append(f'{MAX_ZOOM} must be a number')

    variant = None
    if _valid_bounds(doc):
        variant = BOUNDS
    elif _valid_geometry(doc):
        variant = GEOMETRY
    elif BOUNDS in doc:
        problems.append(f'{BOUNDS} must be an array of 4 numbers [south, west, north, east]')
    elif GEOMETRY in doc:
        problems.append(f'{GEOMETRY} must be a GeoJSON geometry object')
    else:
        problems.append(f'missing {BOUNDS} or {GEOMETRY}')

    return DocumentCheck(problems=tuple(problems), variant=variant if not problems else None)


# ============================================================================
# Decoding
# ============================================================================

def _reject_constant(name):
    raise ValueError(f'{name} is not valid JSON')


def parse(text):
    """Parse region JSON text (str or UTF-8 bytes) into a document."""
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except ValueError as e:
        raise MalformedRegionDocument(f'Malformed offline region definition: {e}', [str(e)]) from e


def decode_document(doc) -> RegionDefinition:
    """Build a definition from a parsed region document."""
    check = validate_document(doc)
    if not check.ok:
        raise MalformedRegionDocument(
            'Malformed offline region definition: ' + '; '.join(check.problems), check.problems
        )

    style_url = doc[STYLE_URL]
    min_zoom = doc[MIN_ZOOM]
    max_zoom = doc.get(MAX_ZOOM, math.inf)
    pixel_ratio = doc[PIXEL_RATIO]

    if check.variant == BOUNDS:
        south, west, north, east = doc[BOUNDS]
        try:
            bounds = LatLngBounds.hull(LatLng(south, west), LatLng(north, east))
        except ValueError as e:
            raise InvalidDefinition(f'Invalid region bounds: {e}') from e
        return TilePyramidRegionDefinition(style_url, bounds, min_zoom, max_zoom, pixel_ratio)

    try:
        geometry = to_geometry(doc[GEOMETRY])
    except ValueError as e:
        raise MalformedRegionDocument(f'Malformed region geometry: {e}', [str(e)]) from e
    return GeometryRegionDefinition(style_url, geometry, min_zoom, max_zoom, pixel_ratio)


def decode(text) -> RegionDefinition:
    """Definition from stored JSON text."""
    return decode_document(parse(text))
