"""
Offline region definitions.

A region definition says which part of the map to make available offline:
a style, an area, a zoom range and the pixel ratio tiles are rendered at.
There are exactly two kinds:

- TilePyramidRegionDefinition: the area is a lat/lng bounding box.
- GeometryRegionDefinition: the area is a point, line or polygon geometry
  (single or multi).

RegionDefinition is the union of the two. Code that needs to treat them
differently goes through match_definition(), which requires a handler for
both kinds and rejects anything else.

Definitions are immutable and validated on construction; an invalid one is
never built.
"""

import math
from dataclasses import dataclass
from numbers import Real
from typing import Any, Callable, Dict, List, TypeVar, Union

from shapely.geometry.base import BaseGeometry

from offline_regions import enumerator
from offline_regions.errors import InvalidDefinition
from offline_regions.geometry import LatLngBounds, to_geometry
from offline_regions.tile_cover import TileID

T = TypeVar('T')


def _check_common(style_url, min_zoom, max_zoom, pixel_ratio):
    if not isinstance(style_url, str):
        raise InvalidDefinition(f'style_url must be a string, got {type(style_url).__name__}')

    min_zoom = _number('min_zoom', min_zoom)
    max_zoom = _number('max_zoom', max_zoom)
    pixel_ratio = _number('pixel_ratio', pixel_ratio)

    if not math.isfinite(min_zoom) or min_zoom < 0:
        raise InvalidDefinition(f'min_zoom must be finite and >= 0, got {min_zoom}')
    if math.isnan(max_zoom) or max_zoom < 0:
        raise InvalidDefinition(f'max_zoom must be >= 0, got {max_zoom}')
    if max_zoom < min_zoom:
        raise InvalidDefinition(f'max_zoom ({max_zoom}) is below min_zoom ({min_zoom})')
    if not math.isfinite(pixel_ratio) or pixel_ratio < 0:
        raise InvalidDefinition(f'pixel_ratio must be finite and >= 0, got {pixel_ratio}')
    return min_zoom, max_zoom, pixel_ratio


def _number(name, value) -> float:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidDefinition(f'{name} must be a number, got {value!r}')
    try:
        return float(value)
    except OverflowError:
        raise InvalidDefinition(f'{name} is out of range: {value}') from None


def _set_common(definition, values):
    min_zoom, max_zoom, pixel_ratio = values
    object.__setattr__(definition, 'min_zoom', min_zoom)
    object.__setattr__(definition, 'max_zoom', max_zoom)
    object.__setattr__(definition, 'pixel_ratio', pixel_ratio)


class _Covering:
    """Tile cover / count methods shared by both definition kinds."""

    def area(self):
        raise NotImplementedError

    def tile_cover(self, source_type, tile_size, zoom_range) -> List[TileID]:
        return enumerator.tile_cover(self, source_type, tile_size, zoom_range)

    def tile_count(self, source_type, tile_size, zoom_range) -> int:
        return enumerator.tile_count(self, source_type, tile_size, zoom_range)

    def tile_count_by_zoom(self, source_type, tile_size, zoom_range) -> Dict[int, int]:
        return enumerator.tile_count_by_zoom(self, source_type, tile_size, zoom_range)

    @property
    def is_unbounded(self) -> bool:
        """True when the region has no upper zoom limit."""
        return math.isinf(self.max_zoom)


@dataclass(frozen=True)
class TilePyramidRegionDefinition(_Covering):
    """Every tile of a bounding box between min_zoom and max_zoom."""
    style_url: str
    bounds: LatLngBounds
    min_zoom: float
    max_zoom: float
    pixel_ratio: float

    def __post_init__(self):
        values = _check_common(self.style_url, self.min_zoom, self.max_zoom, self.pixel_ratio)
        if not isinstance(self.bounds, LatLngBounds):
            raise InvalidDefinition(f'bounds must be a LatLngBounds, got {type(self.bounds).__name__}')
        for edge in self.bounds.as_list():
            if isinstance(edge, bool) or not isinstance(edge, Real) or not math.isfinite(edge):
                raise InvalidDefinition(f'bounds edges must be finite numbers, got {self.bounds}')
        _set_common(self, values)

    def area(self) -> LatLngBounds:
        return self.bounds


@dataclass(frozen=True)
class GeometryRegionDefinition(_Covering):
    """Tiles intersecting a geometry between min_zoom and max_zoom."""
    style_url: str
    geometry: BaseGeometry
    min_zoom: float
    max_zoom: float
    pixel_ratio: float

    def __post_init__(self):
        values = _check_common(self.style_url, self.min_zoom, self.max_zoom, self.pixel_ratio)
        try:
            geometry = to_geometry(self.geometry)
        except ValueError as e:
            raise InvalidDefinition(f'Invalid region geometry: {e}') from e
        object.__setattr__(self, 'geometry', geometry)
        _set_common(self, values)

    def area(self) -> BaseGeometry:
        return self.geometry


RegionDefinition = Union[TilePyramidRegionDefinition, GeometryRegionDefinition]


def match_definition(
    definition: RegionDefinition,
    tile_pyramid: Callable[[TilePyramidRegionDefinition], T],
    geometry: Callable[[GeometryRegionDefinition], T],
) -> T:
    """Call the handler for the definition's kind."""
    if isinstance(definition, TilePyramidRegionDefinition):
        return tile_pyramid(definition)
    if isinstance(definition, GeometryRegionDefinition):
        return geometry(definition)
    raise TypeError(f'Not a region definition: {type(definition).__name__}')


def is_region_definition(value: Any) -> bool:
    return isinstance(value, (TilePyramidRegionDefinition, GeometryRegionDefinition))
