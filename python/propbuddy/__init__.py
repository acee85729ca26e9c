"""propbuddy: school zone, nearest station and suburb ancestry lookup for an address."""

from .errors import (
    AlreadyInitialized,
    GeocoderUnavailable,
    MalformedAncestryData,
    MalformedZoneData,
    NotFound,
    PropBuddyError,
    StationUnavailable,
    ZonesNotLoaded,
)
from .models import (
    AddressMatch,
    AddressSuggestion,
    AncestryRecord,
    Coordinate,
    SearchResult,
    StationMatch,
    ZoneMatchResult,
    ZonePolygon,
    ZoneType,
)
from .orchestrator import QueryOrchestrator

__all__ = [
    "AddressMatch",
    "AddressSuggestion",
    "AlreadyInitialized",
    "AncestryRecord",
    "Coordinate",
    "GeocoderUnavailable",
    "MalformedAncestryData",
    "MalformedZoneData",
    "NotFound",
    "PropBuddyError",
    "QueryOrchestrator",
    "SearchResult",
    "StationMatch",
    "StationUnavailable",
    "ZoneMatchResult",
    "ZonePolygon",
    "ZoneType",
    "ZonesNotLoaded",
]
