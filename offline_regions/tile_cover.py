"""
Tile covering service: which XYZ tiles an area needs at a given zoom.

Region definitions only know their area (a LatLngBounds or a shapely
geometry). This module turns an area into per-zoom tile lists and counts,
and converts a fractional region zoom into the integer zoom a source of a
given kind and tile size is actually fetched at.

Tile coordinates follow the XYZ scheme (y grows southward) on the Web
Mercator grid of 2^z x 2^z tiles.
"""

import math
from enum import Enum
from typing import List, NamedTuple, Optional, Set, Tuple

import numpy as np
import shapely
from shapely.geometry import LineString
from shapely.geometry import box as shapely_box
from shapely.geometry.base import BaseGeometry
from shapely.prepared import prep
from shapely.validation import make_valid

from offline_regions.config import REFERENCE_TILE_SIZE
from offline_regions.geometry import LATITUDE_MAX, LatLngBounds


class SourceType(Enum):
    VECTOR = 'vector'
    RASTER = 'raster'
    RASTER_DEM = 'raster-dem'
    GEOJSON = 'geojson'
    VIDEO = 'video'
    IMAGE = 'image'

    @classmethod
    def parse(cls, value) -> 'SourceType':
        """Accept a SourceType or its name ('vector', 'RASTER_DEM', 'raster-dem')."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower().replace('_', '-'))
        except ValueError:
            valid = ', '.join(t.value for t in cls)
            raise ValueError(f'Invalid source type: {value!r} (valid: {valid})') from None


# Sources whose tiles are images get the nearest zoom, the rest round down
_ROUNDED_SOURCES = (SourceType.RASTER, SourceType.RASTER_DEM, SourceType.VIDEO, SourceType.IMAGE)


class TileID(NamedTuple):
    z: int
    x: int
    y: int

    def __str__(self):
        return f'{self.z}/{self.x}/{self.y}'


def covering_zoom_level(zoom: float, source_type: SourceType, tile_size: int) -> float:
    """
    Integer zoom at which a source with the given tile size covers `zoom`.

    Zooms are expressed against 512px tiles, so 256px sources need one level
    more. Raster-like sources round to the nearest level (half away from
    zero), the others round down. An infinite zoom is returned unchanged.
    """
    if tile_size <= 0:
        raise ValueError(f'tile size must be positive, got {tile_size}')

    zoom = zoom + math.log2(REFERENCE_TILE_SIZE / tile_size)
    if math.isinf(zoom):
        return zoom
    if source_type in _ROUNDED_SOURCES:
        return int(math.copysign(math.floor(abs(zoom) + 0.5), zoom))
    return math.floor(zoom)


# ============================================================================
# Tile math
# ============================================================================

def _clamp(value, low, high):
    return max(low, min(high, value))


def lng_to_world_x(lng: float) -> float:
    """Longitude to Web Mercator x in world units ([0, 1) for [-180, 180))."""
    return (lng + 180.0) / 360.0


def lat_to_world_y(lat: float) -> float:
    """Latitude to Web Mercator y in world units (0 at the north edge)."""
    lat_rad = math.radians(_clamp(lat, -LATITUDE_MAX, LATITUDE_MAX))
    return (1.0 - math.asinh(math.tan(lat_rad)) / math.pi) / 2.0


def _to_world(coords: np.ndarray) -> np.ndarray:
    """lng_to_world_x / lat_to_world_y over an (N, 2) coordinate array."""
    lng = coords[:, 0]
    lat = np.radians(np.clip(coords[:, 1], -LATITUDE_MAX, LATITUDE_MAX))
    x = (lng + 180.0) / 360.0
    y = (1.0 - np.arcsinh(np.tan(lat)) / np.pi) / 2.0
    # Rounding at the latitude limit can land a hair outside [0, 1]
    return np.column_stack([x, np.clip(y, 0.0, 1.0)])


# ============================================================================
# Bounding box cover
# ============================================================================

class BoundsCover:
    """
    Tiles covering a lat/lng rectangle.

    Tiles are ordered outward from the box centre (then by x, then y), the
    order a map fills in a viewport. Boxes expressed with longitudes shifted
    by a multiple of 360 degrees produce the same tiles in the same order.
    """

    def __init__(self, bounds: LatLngBounds):
        self.bounds = bounds

    def _spans(self, zoom: int) -> Optional[Tuple[int, int, int, int, float, float]]:
        b = self.bounds
        if b.is_empty() or b.south > LATITUDE_MAX or b.north < -LATITUDE_MAX:
            return None

        # Bring the west edge into [-180, 180); the east edge follows
        shift = math.floor((b.west + 180.0) / 360.0) * 360.0
        west, east = b.west - shift, b.east - shift

        n = 1 << zoom
        west_x = lng_to_world_x(west) * n
        east_x = lng_to_world_x(east) * n
        north_y = lat_to_world_y(b.north) * n
        south_y = lat_to_world_y(b.south) * n

        x_min = math.floor(west_x)
        x_max = max(x_min, math.ceil(east_x) - 1)
        if x_max - x_min + 1 > n:
            x_max = x_min + n - 1
        y_min = _clamp(math.floor(north_y), 0, n - 1)
        y_max = _clamp(math.floor(south_y), 0, n - 1)

        center_lat, center_lng = (b.south + b.north) / 2, (west + east) / 2
        center_x = lng_to_world_x(center_lng) * n
        center_y = lat_to_world_y(center_lat) * n
        return x_min, x_max, y_min, y_max, center_x, center_y

    def tiles(self, zoom: int) -> List[TileID]:
        spans = self._spans(zoom)
        if spans is None:
            return []
        x_min, x_max, y_min, y_max, center_x, center_y = spans

        ranked = []
        for x in range(x_min, x_max + 1):
            for y in range(y_min, y_max + 1):
                dx = x + 0.5 - center_x
                dy = y + 0.5 - center_y
                ranked.append((dx * dx + dy * dy, x, y))
        ranked.sort()

        n = 1 << zoom
        return [TileID(zoom, x % n, y) for _, x, y in ranked]

    def count(self, zoom: int) -> int:
        spans = self._spans(zoom)
        if spans is None:
            return 0
        x_min, x_max, y_min, y_max = spans[:4]
        return (x_max - x_min + 1) * (y_max - y_min + 1)


# ============================================================================
# Geometry cover
# ============================================================================

class GeometryCover:
    """
    Tiles covering a point, line or polygon geometry.

    Points map to the tile containing them. Lines and polygons cover every
    tile whose interior they cross; merely touching a tile edge does not
    count. A line running along a tile edge belongs to the tile east or
    south of that edge, the tile its coordinates floor into. Tiles come out
    row by row (y, then x).
    """

    def __init__(self, geometry: BaseGeometry):
        self.geometry = geometry
        self._world = shapely.transform(geometry, _to_world)
        # Multipolygons whose parts share an edge are invalid to GEOS
        if self._world.geom_type in ('Polygon', 'MultiPolygon') and not self._world.is_valid:
            self._world = make_valid(self._world)
        self._prepared = prep(self._world)
        self._linear = self._world.geom_type in ('LineString', 'MultiLineString')

    def _point_cells(self, zoom: int) -> Set[Tuple[int, int]]:
        n = 1 << zoom
        points = self._world.geoms if self._world.geom_type == 'MultiPoint' else [self._world]
        found = set()
        for point in points:
            if point.is_empty:
                continue
            x = math.floor(point.x * n) % n
            y = _clamp(math.floor(point.y * n), 0, n - 1)
            found.add((x, y))
        return found

    def _runs_along_leading_edge(self, x: int, y: int, n: int) -> bool:
        west = LineString([(x / n, y / n), (x / n, (y + 1) / n)])
        north = LineString([(x / n, y / n), ((x + 1) / n, y / n)])
        edges = [west, north]
        # Nothing lies south of the bottom row
        if y == n - 1:
            edges.append(LineString([(x / n, 1.0), ((x + 1) / n, 1.0)]))
        return any(self._world.relate_pattern(edge, '1********') for edge in edges)

    def _shape_cells(self, zoom: int) -> Set[Tuple[int, int]]:
        n = 1 << zoom
        min_x, min_y, max_x, max_y = self._world.bounds
        x_min = math.floor(min_x * n)
        x_max = min(math.floor(max_x * n), x_min + n - 1)
        y_min = _clamp(math.floor(min_y * n), 0, n - 1)
        y_max = _clamp(math.floor(max_y * n), 0, n - 1)

        found = set()
        for y in range(y_min, y_max + 1):
            for x in range(x_min, x_max + 1):
                cell = shapely_box(x / n, y / n, (x + 1) / n, (y + 1) / n)
                if not self._prepared.intersects(cell):
                    continue
                if not self._prepared.touches(cell) or (
                        self._linear and self._runs_along_leading_edge(x, y, n)):
                    found.add((x % n, y))
        return found

    def _cells(self, zoom: int) -> Set[Tuple[int, int]]:
        if self.geometry.is_empty:
            return set()
        if self.geometry.geom_type in ('Point', 'MultiPoint'):
            return self._point_cells(zoom)
        return self._shape_cells(zoom)

    def tiles(self, zoom: int) -> List[TileID]:
        cells = sorted(self._cells(zoom), key=lambda t: (t[1], t[0]))
        return [TileID(zoom, x, y) for x, y in cells]

    def count(self, zoom: int) -> int:
        return len(self._cells(zoom))


def cover_for(area):
    """Covering service for a region area (LatLngBounds or shapely geometry)."""
    if isinstance(area, LatLngBounds):
        return BoundsCover(area)
    if isinstance(area, BaseGeometry):
        return GeometryCover(area)
    raise TypeError(f'No tile cover for area of type {type(area).__name__}')
