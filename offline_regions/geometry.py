"""
Geographic primitives used by region definitions.

LatLng / LatLngBounds describe tile pyramid areas in degrees. Longitudes are
allowed outside [-180, 180] so that boxes crossing the antimeridian can be
written as one continuous range (e.g. west=170, east=190); the covering
service wraps them back onto the tile grid.

Arbitrary areas are shapely geometries limited to the six GeoJSON geometry
types an offline region can cover.
"""

import math
from dataclasses import dataclass
from typing import Tuple

from shapely.errors import ShapelyError
from shapely.geometry import mapping, shape
from shapely.geometry.base import BaseGeometry

# Web Mercator latitude limit (tile grid is square)
LATITUDE_MAX = 85.051128779806604

GEOMETRY_TYPES = (
    'Point',
    'MultiPoint',
    'LineString',
    'MultiLineString',
    'Polygon',
    'MultiPolygon',
)


@dataclass(frozen=True)
class LatLng:
    """A coordinate in degrees. Latitude is bounded, longitude may wrap."""
    lat: float
    lng: float

    def __post_init__(self):
        try:
            object.__setattr__(self, 'lat', float(self.lat))
            object.__setattr__(self, 'lng', float(self.lng))
        except OverflowError:
            raise ValueError(f'coordinate out of range: ({self.lat}, {self.lng})') from None
        if math.isnan(self.lat):
            raise ValueError('latitude must not be NaN')
        if math.isnan(self.lng):
            raise ValueError('longitude must not be NaN')
        if abs(self.lat) > 90.0:
            raise ValueError(f'latitude must be between -90 and 90, got {self.lat}')
        if not math.isfinite(self.lng):
            raise ValueError(f'longitude must be finite, got {self.lng}')


@dataclass(frozen=True)
class LatLngBounds:
    """
    Geographic rectangle (south, west, north, east) in degrees.

    Build one with hull() from two corners rather than assigning edges
    directly; hull() orders the corners so south <= north and west <= east.
    The empty() sentinel is inverted on purpose and covers no tiles.
    """
    south: float
    west: float
    north: float
    east: float

    @classmethod
    def hull(cls, a: LatLng, b: LatLng) -> 'LatLngBounds':
        return cls(
            south=min(a.lat, b.lat),
            west=min(a.lng, b.lng),
            north=max(a.lat, b.lat),
            east=max(a.lng, b.lng),
        )

    @classmethod
    def empty(cls) -> 'LatLngBounds':
        return cls(south=90.0, west=180.0, north=-90.0, east=-180.0)

    @classmethod
    def world(cls) -> 'LatLngBounds':
        return cls(south=-90.0, west=-180.0, north=90.0, east=180.0)

    @property
    def southwest(self) -> LatLng:
        return LatLng(self.south, self.west)

    @property
    def northeast(self) -> LatLng:
        return LatLng(self.north, self.east)

    @property
    def center(self) -> Tuple[float, float]:
        """(lat, lng) of the box centre."""
        return ((self.south + self.north) / 2, (self.west + self.east) / 2)

    def is_empty(self) -> bool:
        return self.south > self.north or self.west > self.east

    def as_list(self):
        """Edges in stored-document order: [south, west, north, east]."""
        return [self.south, self.west, self.north, self.east]


# ============================================================================
# GeoJSON geometry conversion
# ============================================================================

def to_geometry(value) -> BaseGeometry:
    """
    Normalise a region geometry to a shapely geometry.

    Accepts a shapely geometry, a GeoJSON geometry mapping, or anything
    exposing __geo_interface__. Raises ValueError for features, collections,
    unsupported types and unparseable coordinates.
    """
    if isinstance(value, BaseGeometry):
        geom = value
    else:
        if hasattr(value, '__geo_interface__'):
            value = value.__geo_interface__
        if not isinstance(value, dict):
            raise ValueError(f'geometry must be a GeoJSON geometry object, got {type(value).__name__}')

        geom_type = value.get('type')
        if geom_type not in GEOMETRY_TYPES:
            raise ValueError(f'unsupported geometry type: {geom_type!r}')
        if 'coordinates' not in value:
            raise ValueError(f'{geom_type} geometry has no coordinates')

        try:
            geom = shape(value)
        except (ShapelyError, ValueError, TypeError, IndexError, KeyError) as e:
            raise ValueError(f'invalid {geom_type} coordinates: {e}') from e

    if geom.geom_type not in GEOMETRY_TYPES:
        raise ValueError(f'unsupported geometry type: {geom.geom_type!r}')
    return geom


def to_geojson(geom: BaseGeometry) -> dict:
    """GeoJSON geometry object for a shapely geometry, coordinates as lists."""
    return _listify(mapping(geom))


def _listify(value):
    if isinstance(value, dict):
        return {k: _listify(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_listify(v) for v in value]
    return value
