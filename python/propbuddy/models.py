"""Pydantic v2 domain models shared by every propbuddy component.

Hierarchy:
  Value types
    Coordinate            -- immutable WGS84 (latitude, longitude)

  Address resolution
    AddressMatch          -- single geocoded address with derived suburb
    AddressSuggestion     -- autosuggest entry; place_id is opaque

  Catchments
    ZoneType              -- primary / secondary
    ZonePolygon           -- one school catchment (shapely geometry)
    ZoneCollection        -- immutable, load-once set of one ZoneType
    ZoneMatchResult       -- independent per-collection match

  Stations
    StationCandidate      -- normalised Overpass element
    StationMatch          -- nearest station plus derived distances

  Demographics
    AncestryEntry / AncestryRecord / AncestryCount

  Composed
    SearchResult          -- everything one search produces
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from shapely.geometry import mapping
from shapely.geometry.base import BaseGeometry

# ---------------------------------------------------------------------------
# Value types
# ---------------------------------------------------------------------------


class Coordinate(BaseModel):
    """A WGS84 point in decimal degrees."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)


# ---------------------------------------------------------------------------
# Address resolution
# ---------------------------------------------------------------------------


class AddressMatch(BaseModel):
    """Result of resolving one address string."""

    model_config = ConfigDict(frozen=True)

    coordinate: Coordinate
    display_name: str
    suburb: Optional[str] = None


class AddressSuggestion(BaseModel):
    """One autosuggest entry. ``place_id`` is only used to de-duplicate."""

    model_config = ConfigDict(frozen=True)

    title: str
    coordinate: Coordinate
    place_id: str


# ---------------------------------------------------------------------------
# Catchments
# ---------------------------------------------------------------------------


class ZoneType(str, Enum):
    """Schooling level a catchment collection belongs to."""

    primary = "primary"
    secondary = "secondary"


class ZonePolygon(BaseModel):
    """A single school catchment.

    ``geometry`` is a shapely Polygon or MultiPolygon in (lon, lat) order, as
    read from GeoJSON. It serialises back to a GeoJSON geometry mapping.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    geometry: BaseGeometry
    school_name: str
    zone_type: ZoneType
    properties: dict[str, Any] = Field(default_factory=dict)

    @field_serializer("geometry")
    def _geometry_as_geojson(self, geometry: BaseGeometry) -> dict[str, Any]:
        return mapping(geometry)


class ZoneCollection(BaseModel):
    """All catchments of one ZoneType, in file order."""

    model_config = ConfigDict(frozen=True)

    zone_type: ZoneType
    zones: tuple[ZonePolygon, ...] = ()

    def __len__(self) -> int:
        return len(self.zones)


class ZoneMatchResult(BaseModel):
    """Independent match per collection; either side may be None."""

    model_config = ConfigDict(frozen=True)

    primary: Optional[ZonePolygon] = None
    secondary: Optional[ZonePolygon] = None


# ---------------------------------------------------------------------------
# Stations
# ---------------------------------------------------------------------------


class StationCandidate(BaseModel):
    """A rail station normalised from any Overpass element shape."""

    model_config = ConfigDict(frozen=True)

    name: str
    coordinate: Coordinate
    raw_tags: dict[str, str] = Field(default_factory=dict)


class StationMatch(BaseModel):
    """Nearest station to a coordinate.

    ``walking_meters`` is the straight-line distance in metres, and
    ``eta_minutes_to_cbd`` is ``distance_km * 15`` rounded. Neither follows a
    real path.
    """

    model_config = ConfigDict(frozen=True)

    station: StationCandidate
    distance_km: float
    walking_meters: int
    eta_minutes_to_cbd: int


# ---------------------------------------------------------------------------
# Demographics
# ---------------------------------------------------------------------------


class AncestryEntry(BaseModel):
    """Share of a suburb's population reporting one ancestry."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    group: str
    percent: float


class AncestryRecord(BaseModel):
    """Ancestry profile for one suburb, top groups first."""

    model_config = ConfigDict(frozen=True)

    suburb_key: str
    total_population: int
    ancestries: tuple[AncestryEntry, ...] = ()


class AncestryCount(BaseModel):
    """Aggregated head count for one ancestry from the ABS data API."""

    model_config = ConfigDict(frozen=True)

    ancestry: str
    count: float


# ---------------------------------------------------------------------------
# Composed result
# ---------------------------------------------------------------------------


class SearchResult(BaseModel):
    """Everything produced by one QueryOrchestrator.search() call."""

    model_config = ConfigDict(frozen=True)

    address_match: AddressMatch
    zone_match_result: ZoneMatchResult
    station_match: Optional[StationMatch] = None
    ancestry_record: Optional[AncestryRecord] = None
