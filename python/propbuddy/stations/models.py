"""Pydantic v2 models for Overpass API ``[out:json]`` responses.

Nodes carry ``lat``/``lon`` directly; ways and relations only carry them in
``center`` when the query ends with ``out center;``. ``to_candidate``
collapses both shapes into one StationCandidate so nothing downstream ever
branches on element type.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from propbuddy.models import Coordinate, StationCandidate

UNNAMED_STATION = "Unnamed Station"


class OverpassCenter(BaseModel):
    model_config = ConfigDict(extra="ignore")

    lat: float
    lon: float


class OverpassElement(BaseModel):
    """One element of the ``elements`` array."""

    model_config = ConfigDict(extra="ignore")

    type: Optional[str] = None
    id: Optional[int] = None
    lat: Optional[float] = None
    lon: Optional[float] = None
    center: Optional[OverpassCenter] = None
    tags: dict[str, str] = Field(default_factory=dict)

    def coordinate(self) -> Optional[Coordinate]:
        """Direct position if present, else the centroid, else None.

        A position outside WGS84 range counts as absent.
        """
        if self.lat is not None and self.lon is not None:
            position = (self.lat, self.lon)
        elif self.center is not None:
            position = (self.center.lat, self.center.lon)
        else:
            return None
        try:
            return Coordinate(latitude=position[0], longitude=position[1])
        except ValidationError:
            return None

    def to_candidate(self) -> Optional[StationCandidate]:
        coordinate = self.coordinate()
        if coordinate is None:
            return None
        return StationCandidate(
            name=self.tags.get("name") or UNNAMED_STATION,
            coordinate=coordinate,
            raw_tags=self.tags,
        )


class OverpassResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    elements: list[OverpassElement]
