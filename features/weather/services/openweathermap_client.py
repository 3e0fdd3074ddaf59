import asyncio
import logging
import time
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

import aiohttp

from core.config import settings
from features.common.exceptions.provider_exceptions import (
    InvalidLocationError,
    WeatherDecodingError,
    WeatherNetworkError,
    WeatherServerError,
)
from features.common.models.location_types import Location
from features.common.utils.conversions import TimeConversions, UnitConversions
from features.weather.models.weather_types import WeatherData

logger = logging.getLogger(__name__)

# Daily forecasts carry no visibility, assume a clear day
DAILY_VISIBILITY_KM = 10.0

class OpenWeatherMapClient:
    """Client for the OpenWeatherMap current weather and One Call endpoints."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        units: Optional[str] = None,
        clock: Callable[[], float] = time.time
    ):
        self.api_key = api_key if api_key is not None else settings.openweathermap_api_key
        self.base_url = (base_url or settings.openweathermap_base_url).rstrip("/")
        self.units = units or settings.weather_units
        self.clock = clock
        self._session: Optional[aiohttp.ClientSession] = None

    async def _init_session(self) -> aiohttp.ClientSession:
        if not self._session:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=settings.request["timeout"])
            )
        return self._session

    async def close(self):
        if self._session:
            await self._session.close()
            self._session = None

    async def get_current_weather(self, location: Location) -> WeatherData:
        """Get current conditions for a location."""
        payload = await self._get("weather", location)
        return self.parse_current_weather(payload)

    async def get_forecast(self, location: Location, days: int) -> List[WeatherData]:
        """Get up to a week of daily forecasts for a location."""
        payload = await self._get("onecall", location, exclude="minutely,hourly")
        limited_days = min(days, settings.max_forecast_days)
        return self.parse_daily_forecast(payload)[:limited_days]

    async def get_weather_for_datetime(self, location: Location, dt: datetime) -> WeatherData:
        """Get conditions for a point in time.

        Past and present times are answered with current conditions; future
        times with the daily forecast entry closest to ``dt``.
        """
        target = TimeConversions.to_epoch(dt)
        if target <= self.clock():
            return await self.get_current_weather(location)

        payload = await self._get("onecall", location, exclude="minutely,hourly")
        forecast = self.parse_daily_forecast(payload)
        if not forecast:
            return await self.get_current_weather(location)

        return min(forecast, key=lambda w: abs(w.timestamp.timestamp() - target))

    async def _get(self, endpoint: str, location: Location, **extra_params: str) -> Dict[str, Any]:
        if not (-90 <= location.latitude <= 90 and -180 <= location.longitude <= 180):
            raise InvalidLocationError(
                f"Invalid coordinates ({location.latitude}, {location.longitude})"
            )

        params = {
            "lat": location.latitude,
            "lon": location.longitude,
            "units": self.units,
            "appid": self.api_key,
            **extra_params
        }

        try:
            session = await self._init_session()
            async with session.get(f"{self.base_url}/{endpoint}", params=params) as response:
                if response.status == 400:
                    raise InvalidLocationError(
                        f"Weather provider rejected location {location.id}"
                    )
                if response.status != 200:
                    raise WeatherServerError(response.status)
                return await response.json()

        except (aiohttp.ContentTypeError, ValueError) as e:
            logger.error(f"Invalid weather payload for location {location.id}: {str(e)}")
            raise WeatherDecodingError(str(e)) from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Error fetching {endpoint} for location {location.id}: {str(e)}")
            raise WeatherNetworkError(str(e)) from e

    @staticmethod
    def parse_current_weather(payload: Dict[str, Any]) -> WeatherData:
        try:
            return WeatherData(
                timestamp=TimeConversions.from_epoch(payload["dt"], payload.get("timezone", 0)),
                temperature=payload["main"]["temp"],
                wind_speed=payload["wind"]["speed"],
                wind_direction=UnitConversions.degrees_to_compass(payload["wind"].get("deg", 0)),
                precipitation=(payload.get("rain") or {}).get("1h", 0.0),
                cloud_cover=payload["clouds"]["all"],
                visibility=UnitConversions.meters_to_km(payload.get("visibility", 10000)),
                pressure=payload["main"]["pressure"],
                humidity=payload["main"]["humidity"],
                uv_index=0  # not reported by this endpoint
            )
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Error parsing current weather: {str(e)}")
            raise WeatherDecodingError(f"Unexpected current weather payload: {str(e)}") from e

    @staticmethod
    def parse_daily_forecast(payload: Dict[str, Any]) -> List[WeatherData]:
        try:
            utc_offset = payload.get("timezone_offset", 0)
            return [
                WeatherData(
                    timestamp=TimeConversions.from_epoch(daily["dt"], utc_offset),
                    temperature=daily["temp"]["day"],
                    wind_speed=daily["wind_speed"],
                    wind_direction=UnitConversions.degrees_to_compass(daily.get("wind_deg", 0)),
                    precipitation=daily.get("rain") or 0.0,
                    cloud_cover=daily["clouds"],
                    visibility=DAILY_VISIBILITY_KM,
                    pressure=daily["pressure"],
                    humidity=daily["humidity"],
                    uv_index=int(daily.get("uvi", 0))
                )
                for daily in payload.get("daily", [])
            ]
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Error parsing daily forecast: {str(e)}")
            raise WeatherDecodingError(f"Unexpected forecast payload: {str(e)}") from e
