"""Pydantic v2 models mirroring Nominatim's ``format=json`` search response.

Nominatim returns ``lat``/``lon`` as strings; pydantic's lax mode coerces them
to float. Unknown fields are ignored.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from propbuddy.models import AddressMatch, AddressSuggestion, Coordinate

# Locality fields tried in order when deriving a suburb.
SUBURB_FIELDS: tuple[str, ...] = (
    "suburb",
    "town",
    "village",
    "city_district",
    "city",
    "locality",
)


class NominatimPlace(BaseModel):
    """One candidate from ``/search``."""

    model_config = ConfigDict(extra="ignore")

    place_id: str
    display_name: str
    lat: float = Field(ge=-90, le=90)
    lon: float = Field(ge=-180, le=180)
    address: Optional[dict[str, str]] = None

    @field_validator("place_id", mode="before")
    @classmethod
    def coerce_place_id(cls, v: object) -> object:
        """Nominatim sends place_id as an integer; keep it opaque as str."""
        if isinstance(v, int):
            return str(v)
        return v

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(latitude=self.lat, longitude=self.lon)

    def suburb(self) -> Optional[str]:
        """First non-empty locality field by SUBURB_FIELDS priority."""
        if not self.address:
            return None
        for key in SUBURB_FIELDS:
            value = self.address.get(key)
            if value:
                return value
        return None

    def to_address_match(self) -> AddressMatch:
        return AddressMatch(
            coordinate=self.coordinate,
            display_name=self.display_name,
            suburb=self.suburb(),
        )

    def to_suggestion(self) -> AddressSuggestion:
        return AddressSuggestion(
            title=self.display_name,
            coordinate=self.coordinate,
            place_id=self.place_id,
        )
