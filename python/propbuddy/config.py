"""Application settings loaded from environment."""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine-wide settings loaded from ``PROPBUDDY_*`` variables or .env.

    Attributes:
        nominatim_base_url: Root URL of the Nominatim geocoder.
        nominatim_user_agent: User-Agent sent to Nominatim (required by its
            usage policy).
        geocoder_viewbox: "lon_min,lat_max,lon_max,lat_min" box restricting
            geocoder results to greater Melbourne.
        suggest_limit: Maximum suggestions returned per suggest() call.
        suggest_min_chars: Minimum trimmed input length before suggesting.
        suggest_debounce_seconds: Quiet period before a suggestion request.
        overpass_url: Overpass API interpreter endpoint.
        station_radius_metres: Search radius for rail stations.
        primary_zones_path: GeoJSON FeatureCollection of primary catchments.
        secondary_zones_path: GeoJSON FeatureCollection of secondary catchments.
        ancestry_path: JSON ancestry dataset keyed by suburb.
        abs_base_url: Root URL of the ABS SDMX data API.
        http_timeout_seconds: Read timeout for all outbound HTTP calls.
        log_level: Logging level used by the command-line entry point.
    """

    nominatim_base_url: str = "https://nominatim.openstreetmap.org"
    nominatim_user_agent: str = "propbuddy/0.1 (school-zone lookup)"
    geocoder_viewbox: str = "144.5,-38.5,145.5,-37.5"

    suggest_limit: int = 5
    suggest_min_chars: int = 3
    suggest_debounce_seconds: float = 0.3

    overpass_url: str = "https://overpass-api.de/api/interpreter"
    station_radius_metres: int = 5000

    primary_zones_path: str = "data/Primary_Integrated_2025.geojson"
    secondary_zones_path: str = "data/Secondary_Integrated_Year9_2026.geojson"
    ancestry_path: str = "data/ancestry-vic.json"

    abs_base_url: str = "https://data.api.abs.gov.au"

    http_timeout_seconds: float = 30.0
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="PROPBUDDY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Uses ``lru_cache`` so the .env file is read at most once per process.
    """
    return Settings()
