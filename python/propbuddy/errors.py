"""Exception hierarchy for propbuddy.

Only ``NotFound`` escapes ``QueryOrchestrator.search``. Everything else is
caught by the component that owns the failing resource and degrades a single
field of the result.
"""


class PropBuddyError(Exception):
    """Base exception for all propbuddy errors."""


class NotFound(PropBuddyError):
    """The geocoder returned no candidate for the address text."""

    def __init__(self, query: str, detail: str | None = None):
        self.query = query
        message = f"Address not found: '{query}'"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class GeocoderUnavailable(NotFound):
    """The geocoder could not be reached or returned an unusable payload."""


class StationUnavailable(PropBuddyError):
    """The Overpass query failed (network error, non-2xx, bad payload)."""


class MalformedZoneData(PropBuddyError):
    """A catchment document is missing or is not a polygon FeatureCollection."""

    def __init__(self, path: str, detail: str):
        self.path = path
        super().__init__(f"Malformed zone data at {path}: {detail}")


class MalformedAncestryData(PropBuddyError):
    """The ancestry dataset is missing or does not have the expected shape."""

    def __init__(self, path: str, detail: str):
        self.path = path
        super().__init__(f"Malformed ancestry data at {path}: {detail}")


class AlreadyInitialized(PropBuddyError):
    """ZoneMatcher.initialize() was called more than once."""


class ZonesNotLoaded(PropBuddyError):
    """ZoneMatcher.match() was called before initialize()."""
