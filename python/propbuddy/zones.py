"""School catchment loading and point-in-catchment matching.

Catchments come as two GeoJSON FeatureCollections (primary and secondary),
each feature a Polygon or MultiPolygon with a ``School_Name`` property.
``ZoneRepository`` loads them once at startup; ``ZoneMatcher`` answers
containment queries against that read-only data.

Within one collection catchments are assumed not to overlap, so ``match``
returns the first containing polygon in file order. That assumption has not
been checked against the published data; ``match_all`` reports every
containing polygon for callers that need to detect overlap.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterator

from pydantic import ValidationError
from shapely.errors import GEOSException
from shapely.geometry import shape

from propbuddy.errors import AlreadyInitialized, MalformedZoneData, ZonesNotLoaded
from propbuddy.geometry import Bounds, bounds_contain, point_in_polygon
from propbuddy.models import (
    Coordinate,
    ZoneCollection,
    ZoneMatchResult,
    ZonePolygon,
    ZoneType,
)

logger = logging.getLogger(__name__)

SCHOOL_NAME_PROPERTY = "School_Name"
UNKNOWN_SCHOOL = "Unknown"
_POLYGON_TYPES = {"Polygon", "MultiPolygon"}


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def parse_zone_collection(
    document: Any, zone_type: ZoneType, source: str = "<memory>"
) -> ZoneCollection:
    """Build a ZoneCollection from a decoded GeoJSON FeatureCollection.

    Features without a usable Polygon/MultiPolygon geometry are skipped with
    a warning; the rest keep their file order.

    Raises:
        MalformedZoneData: *document* has no ``features`` array.
    """
    if not isinstance(document, dict) or not isinstance(document.get("features"), list):
        raise MalformedZoneData(source, "expected a FeatureCollection with a features array")

    zones: list[ZonePolygon] = []
    for index, feature in enumerate(document["features"]):
        geometry_json = feature.get("geometry") if isinstance(feature, dict) else None
        if not isinstance(geometry_json, dict) or geometry_json.get("type") not in _POLYGON_TYPES:
            logger.warning("%s: feature %d has no polygon geometry, skipped", source, index)
            continue
        try:
            geometry = shape(geometry_json)
        except (GEOSException, ValueError, TypeError, KeyError, IndexError) as exc:
            logger.warning("%s: feature %d has invalid geometry (%s), skipped", source, index, exc)
            continue
        if geometry.is_empty:
            logger.warning("%s: feature %d has empty geometry, skipped", source, index)
            continue

        properties = feature.get("properties") or {}
        if not isinstance(properties, dict):
            logger.warning("%s: feature %d has non-object properties, skipped", source, index)
            continue
        name = properties.get(SCHOOL_NAME_PROPERTY)
        try:
            zone = ZonePolygon(
                geometry=geometry,
                school_name=str(name) if name not in (None, "") else UNKNOWN_SCHOOL,
                zone_type=zone_type,
                properties=properties,
            )
        except ValidationError as exc:
            logger.warning("%s: feature %d rejected (%s), skipped", source, index, exc)
            continue
        zones.append(zone)

    return ZoneCollection(zone_type=zone_type, zones=tuple(zones))


def load_zone_collection(path: str | Path, zone_type: ZoneType) -> ZoneCollection:
    """Read and parse one catchment GeoJSON file.

    Raises:
        MalformedZoneData: file missing, unreadable, not JSON, or not a
            FeatureCollection.
    """
    path = Path(path)
    if not path.is_file():
        raise MalformedZoneData(str(path), "file not found")
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise MalformedZoneData(str(path), str(exc)) from exc
    return parse_zone_collection(document, zone_type, source=str(path))


class ZoneRepository:
    """Read-only holder for the primary and secondary catchment collections."""

    def __init__(self, primary: ZoneCollection, secondary: ZoneCollection) -> None:
        self.primary = primary
        self.secondary = secondary

    @classmethod
    def from_files(cls, primary_path: str | Path, secondary_path: str | Path) -> "ZoneRepository":
        """Load both collections; a malformed file degrades to an empty collection."""
        return cls(
            primary=_load_or_empty(primary_path, ZoneType.primary),
            secondary=_load_or_empty(secondary_path, ZoneType.secondary),
        )


def _load_or_empty(path: str | Path, zone_type: ZoneType) -> ZoneCollection:
    try:
        collection = load_zone_collection(path, zone_type)
    except MalformedZoneData as exc:
        logger.error("Failed to load %s zones: %s", zone_type.value, exc)
        return ZoneCollection(zone_type=zone_type)
    logger.info("Loaded %d %s zones from %s", len(collection), zone_type.value, path)
    return collection


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------


class ZoneMatcher:
    """Containment queries over two independently loaded collections.

    Each polygon's bounding box is cached at ``initialize`` and checked before
    the exact test; the box test only ever rejects points the exact test would
    also reject.
    """

    def __init__(self) -> None:
        self._indexed: dict[ZoneType, list[tuple[Bounds, ZonePolygon]]] | None = None

    @property
    def initialized(self) -> bool:
        return self._indexed is not None

    def initialize(self, primary: ZoneCollection, secondary: ZoneCollection) -> None:
        """Load the collections once.

        Raises:
            AlreadyInitialized: on every call after the first.
        """
        if self._indexed is not None:
            raise AlreadyInitialized("ZoneMatcher is already initialized")
        self._indexed = {
            ZoneType.primary: [(zone.geometry.bounds, zone) for zone in primary.zones],
            ZoneType.secondary: [(zone.geometry.bounds, zone) for zone in secondary.zones],
        }

    def _containing(self, zone_type: ZoneType, coordinate: Coordinate) -> Iterator[ZonePolygon]:
        if self._indexed is None:
            raise ZonesNotLoaded("ZoneMatcher.initialize() has not been called")
        for bounds, zone in self._indexed[zone_type]:
            if bounds_contain(bounds, coordinate) and point_in_polygon(coordinate, zone.geometry):
                yield zone

    def match(self, coordinate: Coordinate) -> ZoneMatchResult:
        """First containing catchment per collection, or None for each side."""
        return ZoneMatchResult(
            primary=next(self._containing(ZoneType.primary, coordinate), None),
            secondary=next(self._containing(ZoneType.secondary, coordinate), None),
        )

    def match_all(self, coordinate: Coordinate) -> dict[ZoneType, list[ZonePolygon]]:
        """Every containing catchment per collection, in file order."""
        return {
            zone_type: list(self._containing(zone_type, coordinate))
            for zone_type in (ZoneType.primary, ZoneType.secondary)
        }
