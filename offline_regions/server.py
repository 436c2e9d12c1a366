#!/usr/bin/env python3
"""
Offline Region Estimator - HTTP service

Answers "how many tiles does this offline region need?" for apps that want
to warn users before they start a large download. Nothing is downloaded or
stored here; the service only covers the region definition.

Endpoints:
  POST /estimate  - Tile counts per zoom for a region document
  POST /validate  - Check a region document
  GET  /          - Health check

Request body for /estimate:
  {
    "region": {"style_url": "...", "min_zoom": 0, "pixel_ratio": 1, "bounds": [...]},
    "sourceType": "vector",   // optional, default from OFFLINE_REGIONS_SOURCE_TYPE
    "tileSize": 512,          // optional
    "minZoom": 0,             // optional, source's valid zoom range
    "maxZoom": 22             // optional
  }
"""

import logging

from flask import Flask, jsonify, request

from offline_regions import config
from offline_regions.codec import decode_document, encode_document, validate_document
from offline_regions.enumerator import tile_count_by_zoom
from offline_regions.errors import RegionError
from offline_regions.tile_cover import SourceType
from offline_regions.zoom import ZoomRange

app = Flask(__name__)
logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
logger = logging.getLogger(__name__)


def _int_param(data, key, default):
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f'{key} must be an integer, got {value!r}')
    return value


# ============================================================================
# Estimate endpoint
# ============================================================================

@app.route('/estimate', methods=['POST'])
def estimate():
    """
    Estimate tile counts for a region document.

    Returns the per-zoom breakdown, the total and the clamped zoom range
    actually covered.
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or 'region' not in data:
        return jsonify({'error': 'Request body must be a JSON object with a "region" document'}), 400

    try:
        definition = decode_document(data['region'])
        source_type = SourceType.parse(data.get('sourceType', config.DEFAULT_SOURCE_TYPE))
        tile_size = _int_param(data, 'tileSize', config.DEFAULT_TILE_SIZE)
        zoom_range = ZoomRange.source(
            _int_param(data, 'minZoom', config.DEFAULT_MIN_ZOOM),
            _int_param(data, 'maxZoom', config.DEFAULT_MAX_ZOOM),
        )
        counts = tile_count_by_zoom(definition, source_type, tile_size, zoom_range)
    except (RegionError, ValueError) as e:
        logger.warning(f'Rejected estimate request: {e}')
        return jsonify({'error': str(e)}), 400

    total = sum(counts.values())
    logger.info(f'Estimate: {total:,} tiles over {len(counts)} zoom levels '
                f'({source_type.value}, {tile_size}px)')

    return jsonify({
        'region': encode_document(definition),
        'sourceType': source_type.value,
        'tileSize': tile_size,
        'zoomRange': {'min': min(counts), 'max': max(counts)} if counts else None,
        'zoomBreakdown': {f'z{z}': count for z, count in counts.items()},
        'tileCount': total,
        'estimatedSizeMB': round(total * config.AVG_TILE_BYTES / (1024 * 1024), 1),
    })


# ============================================================================
# Validate endpoint
# ============================================================================

@app.route('/validate', methods=['POST'])
def validate():
    """Check a region document; always 200 with the problems found."""
    doc = request.get_json(silent=True)
    check = validate_document(doc)
    if not check.ok:
        return jsonify({'valid': False, 'problems': list(check.problems)})

    try:
        decode_document(doc)
    except RegionError as e:
        return jsonify({'valid': False, 'problems': [str(e)]})

    return jsonify({'valid': True, 'problems': [], 'kind': check.variant})


# ============================================================================
# Health check
# ============================================================================

@app.route('/', methods=['GET'])
def health():
    return jsonify({
        'service': 'offline-region-estimator',
        'status': 'healthy',
        'defaultSourceType': config.DEFAULT_SOURCE_TYPE,
        'defaultTileSize': config.DEFAULT_TILE_SIZE,
        'defaultZoomRange': {'min': config.DEFAULT_MIN_ZOOM, 'max': config.DEFAULT_MAX_ZOOM},
        'sourceTypes': [t.value for t in SourceType],
    })


if __name__ == '__main__':
    app.run(host='0.0.0.0', port=config.PORT, debug=False)
