"""Shared test fixtures for the propbuddy engine tests."""
import json

import pytest
import respx

from propbuddy.ancestry.lookup import AncestryDataset
from propbuddy.config import Settings
from propbuddy.models import Coordinate

NOMINATIM_URL = "https://nominatim.test"
OVERPASS_URL = "https://overpass.test/api/interpreter"
ABS_URL = "https://abs.test"

FLINDERS_STREET = Coordinate(latitude=-37.8182711, longitude=144.9670618)


def make_settings(**overrides) -> Settings:
    """Settings pointed at test hosts; debounce disabled unless overridden."""
    values = dict(
        nominatim_base_url=NOMINATIM_URL,
        nominatim_user_agent="propbuddy-tests",
        overpass_url=OVERPASS_URL,
        abs_base_url=ABS_URL,
        suggest_debounce_seconds=0.0,
        http_timeout_seconds=5.0,
    )
    values.update(overrides)
    return Settings(**values)


def square(min_lon: float, min_lat: float, max_lon: float, max_lat: float) -> list:
    """Closed GeoJSON ring for an axis-aligned box."""
    return [
        [min_lon, min_lat],
        [max_lon, min_lat],
        [max_lon, max_lat],
        [min_lon, max_lat],
        [min_lon, min_lat],
    ]


def polygon_feature(name: str | None, ring: list, holes: list | None = None) -> dict:
    properties = {"School_Name": name} if name is not None else {}
    return {
        "type": "Feature",
        "properties": properties,
        "geometry": {"type": "Polygon", "coordinates": [ring, *(holes or [])]},
    }


@pytest.fixture
def mock_http():
    """respx mock intercepting every httpx.AsyncClient request."""
    with respx.mock(assert_all_called=False) as mock:
        yield mock


@pytest.fixture
def settings() -> Settings:
    return make_settings()


# ---------------------------------------------------------------------------
# Nominatim payloads
# ---------------------------------------------------------------------------


@pytest.fixture
def flinders_street_places():
    """Nominatim /search reply for "Flinders Street Station, Melbourne"."""
    return [
        {
            "place_id": 135127946,
            "licence": "Data © OpenStreetMap contributors, ODbL 1.0.",
            "osm_type": "node",
            "osm_id": 2200370941,
            "lat": "-37.8182711",
            "lon": "144.9670618",
            "class": "railway",
            "type": "station",
            "display_name": "Flinders Street, Flinders Street, Melbourne, City of Melbourne, Victoria, 3000, Australia",
            "address": {
                "railway": "Flinders Street",
                "road": "Flinders Street",
                "suburb": "Melbourne",
                "city": "Melbourne",
                "municipality": "City of Melbourne",
                "state": "Victoria",
                "postcode": "3000",
                "country": "Australia",
                "country_code": "au",
            },
        }
    ]


@pytest.fixture
def suggestion_places():
    return [
        {
            "place_id": 1001,
            "lat": "-37.8182711",
            "lon": "144.9670618",
            "display_name": "Flinders Street, Melbourne, Victoria, 3000, Australia",
            "address": {"suburb": "Melbourne"},
        },
        {
            "place_id": 1002,
            "lat": "-37.8196",
            "lon": "144.9602",
            "display_name": "Flinders Lane, Melbourne, Victoria, 3000, Australia",
            "address": {"suburb": "Melbourne"},
        },
    ]


# ---------------------------------------------------------------------------
# Overpass payloads
# ---------------------------------------------------------------------------


@pytest.fixture
def overpass_stations():
    """Overpass reply around Flinders Street: node, way with center, bare relation."""
    return {
        "version": 0.6,
        "generator": "Overpass API",
        "elements": [
            {
                "type": "way",
                "id": 23093561,
                "center": {"lat": -37.8184, "lon": 144.9525},
                "tags": {"name": "Southern Cross", "railway": "station"},
            },
            {
                "type": "node",
                "id": 2200370941,
                "lat": -37.8182667,
                "lon": 144.9670525,
                "tags": {"name": "Flinders Street", "railway": "station", "operator": "Metro Trains"},
            },
            {
                "type": "relation",
                "id": 9876,
                "tags": {"name": "Ghost Station", "railway": "station"},
            },
            {
                "type": "node",
                "id": 2200370999,
                "lat": -37.8110,
                "lon": 144.9730,
                "tags": {"name": "Parliament", "railway": "station"},
            },
        ],
    }


# ---------------------------------------------------------------------------
# Zone documents
# ---------------------------------------------------------------------------


@pytest.fixture
def primary_zones_document():
    """Two primary catchments; the CBD one contains Flinders Street."""
    return {
        "type": "FeatureCollection",
        "features": [
            polygon_feature("Carlton North Primary School", square(144.96, -37.79, 144.98, -37.77)),
            polygon_feature("Melbourne CBD Primary School", square(144.95, -37.83, 144.98, -37.80)),
        ],
    }


@pytest.fixture
def secondary_zones_document():
    """One secondary catchment well north-east of the CBD."""
    return {
        "type": "FeatureCollection",
        "features": [
            polygon_feature("Northcote High School", square(145.00, -37.78, 145.05, -37.75)),
        ],
    }


@pytest.fixture
def zone_files(tmp_path, primary_zones_document, secondary_zones_document):
    primary = tmp_path / "primary.geojson"
    secondary = tmp_path / "secondary.geojson"
    primary.write_text(json.dumps(primary_zones_document))
    secondary.write_text(json.dumps(secondary_zones_document))
    return primary, secondary


# ---------------------------------------------------------------------------
# Ancestry data
# ---------------------------------------------------------------------------


@pytest.fixture
def ancestry_document():
    """Ancestry dataset in file order; North Melbourne deliberately precedes Melbourne."""
    return {
        "North Melbourne": {
            "total_population": 14940,
            "ancestries": [
                {"group": "English", "percent": 24.1},
                {"group": "Australian", "percent": 18.0},
                {"group": "Chinese", "percent": 12.3},
            ],
        },
        "Melbourne": {
            "total_population": 54941,
            "ancestries": [
                {"group": "Chinese", "percent": 27.5},
                {"group": "English", "percent": 15.2},
                {"group": "Australian", "percent": 11.0},
                {"group": "Indian", "percent": 8.4},
                {"group": "Irish", "percent": 5.1},
                {"group": "Scottish", "percent": 4.0},
                {"group": "Vietnamese", "percent": 3.2},
            ],
        },
        "Richmond": {
            "total_population": 28908,
            "ancestries": [{"group": "English", "percent": 30.2}],
        },
        "North Richmond": {
            "total_population": 1200,
            "ancestries": [{"group": "Vietnamese", "percent": 21.0}],
        },
    }


@pytest.fixture
def ancestry_dataset(ancestry_document) -> AncestryDataset:
    return AncestryDataset.from_mapping(ancestry_document)


@pytest.fixture
def ancestry_file(tmp_path, ancestry_document):
    path = tmp_path / "ancestry.json"
    path.write_text(json.dumps(ancestry_document))
    return path
