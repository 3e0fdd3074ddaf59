import logging
import time
from datetime import datetime
from typing import Callable, Dict, List, Optional

from core.config import settings
from features.common.exceptions.provider_exceptions import WeatherError
from features.common.models.location_types import Location
from features.common.utils.conversions import TimeConversions
from features.weather.models.weather_types import WeatherData
from features.weather.services.openweathermap_client import OpenWeatherMapClient
from repositories.weather_repo import WeatherRepository

logger = logging.getLogger(__name__)

class CachedWeatherService:
    """Weather lookups backed by the local weather table.

    Rows younger than their TTL are served without touching the provider.
    When the provider fails, whatever is cached is returned even if stale.
    """

    def __init__(
        self,
        client: OpenWeatherMapClient,
        repository: WeatherRepository,
        ttls: Optional[Dict[str, Optional[int]]] = None,
        clock: Callable[[], float] = time.time
    ):
        self.client = client
        self.repository = repository
        ttls = ttls or settings.get_cache_ttl()
        self.current_ttl = ttls["current_weather"]
        self.forecast_ttl = ttls["weather_forecast"]
        self.clock = clock

    async def get_current_weather(self, location: Location, force_refresh: bool = False) -> WeatherData:
        cached = self.repository.get_current(location.id)
        now = self.clock()

        if cached and not force_refresh and now - cached.cache_timestamp < self.current_ttl:
            logger.debug(f"Serving cached current weather for {location.id}")
            return cached.data

        try:
            weather = await self.client.get_current_weather(location)
        except WeatherError as e:
            if cached:
                logger.warning(f"Using stale current weather for {location.id}: {str(e)}")
                return cached.data
            logger.error(f"No weather available for {location.id}: {str(e)}")
            raise

        self.repository.save_current(location.id, weather, now)
        return weather

    async def get_forecast(self, location: Location, days: int, force_refresh: bool = False) -> List[WeatherData]:
        cached = self.repository.get_forecast(location.id)
        now = self.clock()

        if (
            cached
            and not force_refresh
            and len(cached) >= days
            and now - cached[0].cache_timestamp < self.forecast_ttl
        ):
            logger.debug(f"Serving cached forecast for {location.id}")
            return [entry.data for entry in cached[:days]]

        try:
            forecast = await self.client.get_forecast(location, days)
        except WeatherError as e:
            if cached:
                logger.warning(f"Using stale forecast for {location.id}: {str(e)}")
                return [entry.data for entry in cached[:days]]
            logger.error(f"No forecast available for {location.id}: {str(e)}")
            raise

        self.repository.save_forecast(location.id, forecast, now)
        return forecast

    async def get_weather_for_datetime(self, location: Location, dt: datetime) -> WeatherData:
        dt = TimeConversions.ensure_aware(dt)
        cached = self.repository.get_forecast(location.id)

        if cached and self.clock() - cached[0].cache_timestamp < self.forecast_ttl:
            for entry in cached:
                forecast_time = entry.data.timestamp
                if forecast_time.date() == dt.astimezone(forecast_time.tzinfo).date():
                    return entry.data

        try:
            # Covered by the forecast cache, so not stored separately
            return await self.client.get_weather_for_datetime(location, dt)
        except WeatherError as e:
            if cached:
                logger.warning(f"Using closest cached forecast for {location.id}: {str(e)}")
                target = dt.timestamp()
                closest = min(cached, key=lambda entry: abs(entry.data.timestamp.timestamp() - target))
                return closest.data
            raise

    def clear_cache(self) -> None:
        logger.info("Clearing cached weather data")
        self.repository.delete_all()
