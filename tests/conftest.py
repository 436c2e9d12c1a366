"""
Shared fixtures for offline region tests.

Reference areas are around San Francisco; expected tile ids were taken from
a known-good tile cover of the same areas.
"""

import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from offline_regions.geometry import LatLng, LatLngBounds


SAN_FRANCISCO = LatLngBounds.hull(LatLng(37.6609, -122.5744), LatLng(37.8271, -122.3204))

# Same corners with longitudes pushed past the antimeridian
SAN_FRANCISCO_WRAPPED = LatLngBounds.hull(LatLng(37.6609, 238.5744), LatLng(37.8271, 238.3204))


@pytest.fixture
def sf_bounds():
    return SAN_FRANCISCO


@pytest.fixture
def sf_wrapped_bounds():
    return SAN_FRANCISCO_WRAPPED


@pytest.fixture
def sf_document():
    """Stored form of a San Francisco tile pyramid region, zooms 0-2."""
    return {
        'style_url': 'mapbox://styles/mapbox/streets-v11',
        'min_zoom': 0.0,
        'max_zoom': 2.0,
        'pixel_ratio': 1.0,
        'bounds': [37.6609, -122.5744, 37.8271, -122.3204],
    }


@pytest.fixture
def write_region(tmp_path, monkeypatch):
    """Write a region document to ./region.json inside a temp working dir."""
    monkeypatch.chdir(tmp_path)

    def _write(doc, name='region.json'):
        path = tmp_path / name
        path.write_text(doc if isinstance(doc, str) else json.dumps(doc), encoding='utf-8')
        return name

    return _write
