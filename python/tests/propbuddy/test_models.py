"""Tests for the shared pydantic domain models."""
import pytest
from pydantic import ValidationError
from shapely.geometry import Polygon

from propbuddy.models import Coordinate, ZoneCollection, ZonePolygon, ZoneType


class TestCoordinate:
    def test_is_immutable(self):
        point = Coordinate(latitude=-37.8, longitude=144.9)
        with pytest.raises(ValidationError):
            point.latitude = 0.0

    def test_equal_values_are_equal(self):
        assert Coordinate(latitude=-37.8, longitude=144.9) == Coordinate(latitude=-37.8, longitude=144.9)

    @pytest.mark.parametrize("latitude,longitude", [(-90.1, 0), (90.1, 0), (0, 180.5), (0, -181)])
    def test_out_of_range_rejected(self, latitude, longitude):
        with pytest.raises(ValidationError):
            Coordinate(latitude=latitude, longitude=longitude)


class TestZonePolygon:
    def test_geometry_serialises_as_geojson(self):
        zone = ZonePolygon(
            geometry=Polygon([(0, 0), (1, 0), (1, 1), (0, 0)]),
            school_name="Test School",
            zone_type=ZoneType.secondary,
        )
        dumped = zone.model_dump(mode="json")
        assert dumped["geometry"]["type"] == "Polygon"
        assert dumped["zone_type"] == "secondary"

    def test_rejects_non_geometry(self):
        with pytest.raises(ValidationError):
            ZonePolygon(geometry="POLYGON((0 0, 1 0, 1 1, 0 0))", school_name="x", zone_type="primary")

    def test_collection_len(self):
        assert len(ZoneCollection(zone_type=ZoneType.primary)) == 0
