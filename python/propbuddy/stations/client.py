"""OverpassClient: nearest rail station to a coordinate.

Usage::

    async with OverpassClient(get_settings()) as stations:
        match = await stations.locate(Coordinate(latitude=-37.8183, longitude=144.9671))

Distances are straight-line haversine values. ``walking_meters`` is that
distance in metres and ``eta_minutes_to_cbd`` assumes a flat 15 minutes per
kilometre; neither looks at the rail network or the street grid.

Failure strategy
----------------
Any upstream failure (transport error, non-2xx, malformed JSON) is logged
and ``locate`` returns None, exactly as when no station is in range. Nothing
is retried.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional

import httpx
from pydantic import ValidationError

from propbuddy.config import Settings
from propbuddy.errors import StationUnavailable
from propbuddy.geometry import great_circle_distance_km
from propbuddy.models import Coordinate, StationCandidate, StationMatch
from propbuddy.stations.models import OverpassResponse

logger = logging.getLogger(__name__)

MINUTES_PER_KM_TO_CBD = 15


def build_station_query(coordinate: Coordinate, radius_metres: int) -> str:
    """Overpass QL selecting every railway=station element around *coordinate*."""
    around = f"around:{radius_metres},{coordinate.latitude},{coordinate.longitude}"
    return (
        "[out:json];\n"
        "(\n"
        f'  node["railway"="station"]({around});\n'
        f'  way["railway"="station"]({around});\n'
        f'  relation["railway"="station"]({around});\n'
        ");\n"
        "out center;"
    )


def nearest_station(
    origin: Coordinate, candidates: Iterable[StationCandidate]
) -> Optional[StationMatch]:
    """Pick the candidate closest to *origin*.

    Ties keep the candidate seen first. Returns None for no candidates.
    """
    best: Optional[StationCandidate] = None
    best_km = 0.0
    for candidate in candidates:
        distance = great_circle_distance_km(origin, candidate.coordinate)
        if best is None or distance < best_km:
            best, best_km = candidate, distance

    if best is None:
        return None

    return StationMatch(
        station=best,
        distance_km=best_km,
        walking_meters=round(best_km * 1000),
        eta_minutes_to_cbd=round(best_km * MINUTES_PER_KM_TO_CBD),
    )


class OverpassClient:
    """Async client for the Overpass API interpreter endpoint."""

    def __init__(self, settings: Settings) -> None:
        self._url = settings.overpass_url
        self._radius = settings.station_radius_metres
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(settings.http_timeout_seconds, connect=10.0),
        )

    async def __aenter__(self) -> "OverpassClient":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch_candidates(self, coordinate: Coordinate) -> list[StationCandidate]:
        """Query Overpass and normalise every element that has a position.

        Raises:
            StationUnavailable: transport error, non-2xx or malformed payload.
        """
        query = build_station_query(coordinate, self._radius)
        try:
            response = await self._client.post(self._url, data={"data": query})
            response.raise_for_status()
            parsed = OverpassResponse.model_validate(response.json())
        except (httpx.HTTPError, ValidationError, ValueError) as exc:
            raise StationUnavailable(f"Overpass query failed: {exc}") from exc

        candidates = []
        for element in parsed.elements:
            candidate = element.to_candidate()
            if candidate is None:
                logger.debug("Skipping %s/%s without coordinates", element.type, element.id)
                continue
            candidates.append(candidate)
        return candidates

    async def locate(self, coordinate: Coordinate) -> Optional[StationMatch]:
        """Return the nearest rail station within the configured radius.

        Returns:
            StationMatch, or None when nothing is in range or Overpass failed.
        """
        try:
            candidates = await self.fetch_candidates(coordinate)
        except StationUnavailable as exc:
            logger.warning("Station lookup unavailable near %s: %s", coordinate, exc)
            return None

        match = nearest_station(coordinate, candidates)
        if match is None:
            logger.info("No rail station within %dm of %s", self._radius, coordinate)
        return match
