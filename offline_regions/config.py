"""
Environment-driven defaults for the CLI and the estimate service.

The core (definitions, enumerator, codec) never reads these; they only
supply defaults where a caller does not pass a source type, tile size or
valid zoom range explicitly.
"""

import os

# ============================================================================
# Tile source defaults
# ============================================================================

# Reference tile size the covering zoom is computed against
REFERENCE_TILE_SIZE = 512

DEFAULT_SOURCE_TYPE = os.environ.get('OFFLINE_REGIONS_SOURCE_TYPE', 'vector')
DEFAULT_TILE_SIZE = int(os.environ.get('OFFLINE_REGIONS_TILE_SIZE', REFERENCE_TILE_SIZE))

# Valid zoom range of the source being cached
DEFAULT_MIN_ZOOM = int(os.environ.get('OFFLINE_REGIONS_MIN_ZOOM', 0))
DEFAULT_MAX_ZOOM = int(os.environ.get('OFFLINE_REGIONS_MAX_ZOOM', 22))

# Average stored tile size used for download size estimates (~25 KB)
AVG_TILE_BYTES = int(os.environ.get('OFFLINE_REGIONS_AVG_TILE_BYTES', 25 * 1024))

# ============================================================================
# Logging / service
# ============================================================================

LOG_LEVEL = os.environ.get('OFFLINE_REGIONS_LOG_LEVEL', 'INFO').upper()
LOG_FORMAT = '%(asctime)s %(levelname)s %(message)s'

PORT = int(os.environ.get('PORT', 8080))
