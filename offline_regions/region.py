"""A stored offline region: persisted id, definition and caller metadata."""

from dataclasses import dataclass

from offline_regions.definitions import RegionDefinition, is_region_definition

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1


@dataclass(frozen=True)
class OfflineRegion:
    """
    Read-only handle on a region the storage layer has saved.

    `id` is assigned by storage. `metadata` is opaque to this package (apps
    usually keep a name or JSON blob there) and is copied on construction.
    """
    id: int
    definition: RegionDefinition
    metadata: bytes = b''

    def __post_init__(self):
        if isinstance(self.id, bool) or not isinstance(self.id, int):
            raise TypeError(f'region id must be an int, got {type(self.id).__name__}')
        if not INT64_MIN <= self.id <= INT64_MAX:
            raise ValueError(f'region id {self.id} does not fit in 64 bits')
        if not is_region_definition(self.definition):
            raise TypeError(f'Not a region definition: {type(self.definition).__name__}')
        if not isinstance(self.metadata, (bytes, bytearray, memoryview)):
            raise TypeError(f'region metadata must be bytes, got {type(self.metadata).__name__}')
        object.__setattr__(self, 'metadata', bytes(self.metadata))
