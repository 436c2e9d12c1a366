"""Exceptions raised while building, decoding or covering offline regions."""


class RegionError(Exception):
    """Base class for offline region errors."""


class InvalidDefinition(RegionError, ValueError):
    """A region definition violates its zoom / pixel ratio / area invariants."""


class MalformedRegionDocument(RegionError, ValueError):
    """A stored region document is not structurally a region definition."""

    def __init__(self, message, problems=None):
        super().__init__(message)
        self.problems = list(problems or [])
