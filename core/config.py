from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Dict, Any, Optional
from pathlib import Path

class Settings(BaseSettings):
    """Application settings."""

    app_name: str = "Trolling Assistant API"

    # Local database holding cached weather/tide rows, saved locations,
    # the equipment catalog and user data
    database_url: str = "sqlite:///data/trolling_assistant.db"
    equipment_catalog_file: str = str(
        Path(__file__).parent.parent / "features" / "equipment" / "data" / "equipment_catalog.json"
    )

    # OpenWeatherMap settings
    openweathermap_base_url: str = "https://api.openweathermap.org/data/2.5"
    openweathermap_api_key: str = ""
    weather_units: str = "imperial"

    # WorldTides settings
    worldtides_base_url: str = "https://www.worldtides.info/api/v2"
    worldtides_api_key: str = ""
    tide_datum: str = "MLLW"  # Mean Lower Low Water

    # Providers only serve a week of daily data
    max_forecast_days: int = 7

    request: Dict[str, Any] = {
        "timeout": 15,
    }

    # Offline data / synchronisation
    data_freshness_threshold: int = 1800  # seconds
    auto_sync_enabled: bool = True
    sync_interval_minutes: int = 30

    cache: Dict[str, Any] = {
        "prefix": "trolling_assistant"
    }

    def get_cache_ttl(self) -> Dict[str, Optional[int]]:
        """Get cache TTL values in seconds."""
        return {
            "current_weather": 1800,     # 30 minutes
            "weather_forecast": 10800,   # 3 hours
            "current_tide": 1800,        # 30 minutes
            "tide_forecast": 21600,      # 6 hours (tides change less often than weather)
            "recommendations": 900,      # 15 minutes
            "equipment_catalog": None    # Static until the catalog table is edited
        }

    model_config = SettingsConfigDict(
        env_prefix="trolling_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

settings = Settings()
