"""Query orchestrator: one address in, one SearchResult out.

The orchestrator resolves the address first, then fans out to the zone
matcher, the station locator and the ancestry lookup concurrently and
assembles their answers. Only a failed address resolution aborts a search;
every other branch degrades its own field to "nothing found".

Usage::

    async with QueryOrchestrator.from_settings(get_settings()) as engine:
        result = await engine.search("Flinders Street Station, Melbourne")
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Optional

from propbuddy.ancestry.lookup import AncestryDataset, AncestryLookup
from propbuddy.config import Settings, get_settings
from propbuddy.geocoding.client import NominatimClient
from propbuddy.models import (
    AddressSuggestion,
    AncestryRecord,
    Coordinate,
    SearchResult,
    ZoneMatchResult,
)
from propbuddy.stations.client import OverpassClient
from propbuddy.zones import ZoneMatcher, ZoneRepository

logger = logging.getLogger(__name__)


class QueryOrchestrator:
    """Composes geocoding, zone matching, station search and ancestry lookup.

    Holds no per-search state: zone and ancestry data are read-only after
    startup and every search builds a fresh SearchResult.
    """

    def __init__(
        self,
        geocoder: NominatimClient,
        zone_matcher: ZoneMatcher,
        stations: OverpassClient,
        ancestry: AncestryLookup,
    ) -> None:
        self._geocoder = geocoder
        self._zones = zone_matcher
        self._stations = stations
        self._ancestry = ancestry

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "QueryOrchestrator":
        """Load zone and ancestry data once and wire up the HTTP clients."""
        settings = settings or get_settings()

        repository = ZoneRepository.from_files(
            settings.primary_zones_path, settings.secondary_zones_path
        )
        matcher = ZoneMatcher()
        matcher.initialize(repository.primary, repository.secondary)

        dataset = AncestryDataset.load(settings.ancestry_path)

        return cls(
            geocoder=NominatimClient(settings),
            zone_matcher=matcher,
            stations=OverpassClient(settings),
            ancestry=AncestryLookup(dataset),
        )

    async def __aenter__(self) -> "QueryOrchestrator":
        return self

    async def __aexit__(self, *args: object) -> None:
        try:
            await self._geocoder.aclose()
        finally:
            await self._stations.aclose()

    # ------------------------------------------------------------------
    # Fan-out branches
    # ------------------------------------------------------------------

    async def _match_zones(self, coordinate: Coordinate) -> ZoneMatchResult:
        return self._zones.match(coordinate)

    async def _lookup_ancestry(self, suburb: Optional[str]) -> Optional[AncestryRecord]:
        return self._ancestry.lookup(suburb)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def suggest(self, text: str) -> list[AddressSuggestion]:
        """Debounced address suggestions; see NominatimClient.suggest."""
        return await self._geocoder.suggest(text)

    async def search(self, address_text: str) -> SearchResult:
        """Resolve *address_text* and gather zone, station and ancestry data.

        Raises:
            NotFound: the address could not be resolved. No partial result is
                produced in that case.
        """
        address = await self._geocoder.resolve(address_text)
        coordinate = address.coordinate

        t0 = time.monotonic()
        zones, station, ancestry = await asyncio.gather(
            self._match_zones(coordinate),
            self._stations.locate(coordinate),
            self._lookup_ancestry(address.suburb),
            return_exceptions=True,
        )
        elapsed_ms = round((time.monotonic() - t0) * 1000)

        for outcome in (zones, station, ancestry):
            if isinstance(outcome, BaseException) and not isinstance(outcome, Exception):
                raise outcome

        if isinstance(zones, Exception):
            logger.error("Zone matching failed for %s: %s", coordinate, zones)
            zones = ZoneMatchResult()
        if isinstance(station, Exception):
            logger.error("Station lookup failed for %s: %s", coordinate, station)
            station = None
        if isinstance(ancestry, Exception):
            logger.error("Ancestry lookup failed for %r: %s", address.suburb, ancestry)
            ancestry = None

        logger.info(
            "Search %r -> primary=%s secondary=%s station=%s ancestry=%s (%dms)",
            address_text,
            zones.primary.school_name if zones.primary else None,
            zones.secondary.school_name if zones.secondary else None,
            station.station.name if station else None,
            ancestry.suburb_key if ancestry else None,
            elapsed_ms,
        )

        return SearchResult(
            address_match=address,
            zone_match_result=zones,
            station_match=station,
            ancestry_record=ancestry,
        )
