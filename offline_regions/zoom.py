"""Clamping a region's fractional zoom range to a source's integer zooms."""

from dataclasses import dataclass

from offline_regions.tile_cover import covering_zoom_level

# Highest zoom a tile id can carry
MAX_ZOOM = 255


@dataclass(frozen=True)
class ZoomRange:
    """
    Inclusive integer zoom range.

    A range with min > max is empty. That only comes out of
    covering_zoom_range(), when a region's zooms miss the source entirely.
    """
    min: int
    max: int

    def __post_init__(self):
        if self.min < 0:
            raise ValueError(f'zoom range minimum must be >= 0, got {self.min}')
        if self.max > MAX_ZOOM:
            raise ValueError(f'zoom range maximum must be <= {MAX_ZOOM}, got {self.max}')

    @classmethod
    def source(cls, min_zoom: int, max_zoom: int) -> 'ZoomRange':
        """A source's valid zoom range; must be non-empty."""
        if min_zoom > max_zoom:
            raise ValueError(f'source zoom range is inverted: {min_zoom} > {max_zoom}')
        return cls(int(min_zoom), int(max_zoom))

    @property
    def is_empty(self) -> bool:
        return self.min > self.max

    def zooms(self):
        return range(self.min, self.max + 1)

    def __len__(self):
        return len(self.zooms())


def covering_zoom_range(min_zoom, max_zoom, source_type, tile_size, zoom_range: ZoomRange) -> ZoomRange:
    """Integer zooms of `zoom_range` a region spanning [min_zoom, max_zoom] needs."""
    low = covering_zoom_level(min_zoom, source_type, tile_size)
    high = covering_zoom_level(max_zoom, source_type, tile_size)
    return ZoomRange(int(max(low, zoom_range.min)), int(min(high, zoom_range.max)))
