"""
Tests for zoom clamping and the shared per-zoom enumeration loop.

The enumerator is exercised with a recording cover so ordering and zoom
selection can be checked independently of tile math.
"""

import math

import pytest

from offline_regions.enumerator import count_tiles, count_tiles_by_zoom, enumerate_tiles, iter_tiles
from offline_regions.tile_cover import SourceType, TileID
from offline_regions.zoom import ZoomRange, covering_zoom_range


class RecordingCover:
    """Cover yielding two tiles per zoom in a fixed, unsorted order."""

    def __init__(self):
        self.zooms = []

    def tiles(self, zoom):
        self.zooms.append(zoom)
        return [TileID(zoom, 3, 1), TileID(zoom, 0, 0)]

    def count(self, zoom):
        self.zooms.append(zoom)
        return 2


class TestZoomRange:

    def test_source_range(self):
        zr = ZoomRange.source(0, 22)
        assert (zr.min, zr.max) == (0, 22)
        assert not zr.is_empty
        assert len(zr) == 23

    def test_source_range_must_not_be_inverted(self):
        with pytest.raises(ValueError):
            ZoomRange.source(5, 1)

    def test_bounds_checked(self):
        with pytest.raises(ValueError):
            ZoomRange(-1, 3)
        with pytest.raises(ValueError):
            ZoomRange(0, 256)

    def test_empty_range_has_no_zooms(self):
        zr = ZoomRange(4, 3)
        assert zr.is_empty
        assert list(zr.zooms()) == []


class TestCoveringZoomRange:

    def test_intersects_source_range(self):
        zr = covering_zoom_range(2, 30, SourceType.VECTOR, 512, ZoomRange(5, 14))
        assert (zr.min, zr.max) == (5, 14)

    def test_unbounded_max_zoom(self):
        zr = covering_zoom_range(0, math.inf, SourceType.VECTOR, 512, ZoomRange(0, 22))
        assert (zr.min, zr.max) == (0, 22)
        assert isinstance(zr.max, int)

    def test_disjoint_ranges_are_empty(self):
        assert covering_zoom_range(2, 2, SourceType.VECTOR, 512, ZoomRange(3, 22)).is_empty

    def test_large_tiles_below_zero_are_empty(self):
        assert covering_zoom_range(0, 0, SourceType.VECTOR, 1024, ZoomRange(0, 22)).is_empty

    def test_fractional_zooms(self):
        zr = covering_zoom_range(0.6, 0.7, SourceType.RASTER, 512, ZoomRange(0, 22))
        assert (zr.min, zr.max) == (1, 1)


class TestEnumerateTiles:

    def test_keeps_cover_order_grouped_by_zoom(self):
        tiles = enumerate_tiles(1.2, 3.9, RecordingCover(), SourceType.VECTOR, 512, ZoomRange(0, 22))
        assert tiles == [
            TileID(1, 3, 1), TileID(1, 0, 0),
            TileID(2, 3, 1), TileID(2, 0, 0),
            TileID(3, 3, 1), TileID(3, 0, 0),
        ]

    def test_accepts_tuple_zoom_range_and_source_name(self):
        cover = RecordingCover()
        enumerate_tiles(0, math.inf, cover, 'vector', 512, (0, 4))
        assert cover.zooms == [0, 1, 2, 3, 4]

    def test_empty_range_never_calls_cover(self):
        cover = RecordingCover()
        assert enumerate_tiles(5, 6, cover, SourceType.VECTOR, 512, ZoomRange(0, 3)) == []
        assert count_tiles(5, 6, cover, SourceType.VECTOR, 512, ZoomRange(0, 3)) == 0
        assert cover.zooms == []

    def test_tile_size_shifts_zooms(self):
        cover = RecordingCover()
        enumerate_tiles(0, 0, cover, SourceType.VECTOR, 256, ZoomRange(0, 22))
        assert cover.zooms == [1]

    def test_deterministic(self):
        first = enumerate_tiles(0, 5, RecordingCover(), SourceType.VECTOR, 512, ZoomRange(0, 22))
        second = enumerate_tiles(0, 5, RecordingCover(), SourceType.VECTOR, 512, ZoomRange(0, 22))
        assert first == second

    def test_iter_tiles_is_lazy(self):
        cover = RecordingCover()
        tiles = iter_tiles(0, 3, cover, SourceType.VECTOR, 512, ZoomRange(0, 22))
        assert cover.zooms == []
        assert next(tiles) == TileID(0, 3, 1)
        assert cover.zooms == [0]


class TestCountTiles:

    def test_sums_per_zoom_counts(self):
        assert count_tiles(0, 3, RecordingCover(), SourceType.VECTOR, 512, ZoomRange(0, 22)) == 8

    def test_breakdown_by_zoom(self):
        counts = count_tiles_by_zoom(2, 4, RecordingCover(), SourceType.VECTOR, 512, ZoomRange(0, 3))
        assert counts == {2: 2, 3: 2}
        assert list(counts) == [2, 3]
