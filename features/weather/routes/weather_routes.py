from datetime import datetime
from fastapi import APIRouter, Depends, Query, Request

from core.config import settings
from features.common.exceptions.domain_exceptions import NotFoundError
from features.common.exceptions.provider_exceptions import WeatherError
from features.common.services.cache_config import clear_recommendation_cache
from features.common.utils.http_errors import to_http_exception
from features.locations.services.location_service import LocationService
from features.weather.models.weather_types import WeatherData, WeatherForecastResponse
from features.weather.services.cached_weather_service import CachedWeatherService

router = APIRouter(
    prefix="/weather",
    tags=["Weather"],
    responses={
        400: {"description": "Invalid location"},
        404: {"description": "Location not found"},
        503: {"description": "Weather provider unavailable and nothing cached"}
    }
)

def get_service(request: Request) -> CachedWeatherService:
    """Dependency to get the CachedWeatherService instance."""
    return request.app.state.weather_service

def get_location_service(request: Request) -> LocationService:
    return request.app.state.location_service

@router.get(
    "/{location_id}/current",
    response_model=WeatherData,
    summary="Get current weather",
    description="Returns current conditions for a saved location, served from cache while fresh"
)
async def get_current_weather(
    location_id: str,
    refresh: bool = False,
    service: CachedWeatherService = Depends(get_service),
    locations: LocationService = Depends(get_location_service)
) -> WeatherData:
    try:
        location = locations.get_location(location_id)
        return await service.get_current_weather(location, force_refresh=refresh)
    except (WeatherError, NotFoundError) as e:
        raise to_http_exception(e)

@router.get(
    "/{location_id}/forecast",
    response_model=WeatherForecastResponse,
    summary="Get daily weather forecast",
    description="Returns up to a week of daily forecasts for a saved location"
)
async def get_forecast(
    location_id: str,
    days: int = Query(default=7, ge=1, le=settings.max_forecast_days),
    service: CachedWeatherService = Depends(get_service),
    locations: LocationService = Depends(get_location_service)
) -> WeatherForecastResponse:
    try:
        location = locations.get_location(location_id)
        forecast = await service.get_forecast(location, days)
    except (WeatherError, NotFoundError) as e:
        raise to_http_exception(e)
    return WeatherForecastResponse(location_id=location_id, days=days, forecast=forecast)

@router.get(
    "/{location_id}/at",
    response_model=WeatherData,
    summary="Get weather for a date and time",
    description="Returns current weather for past times and the matching daily forecast for future ones"
)
async def get_weather_for_datetime(
    location_id: str,
    dt: datetime,
    service: CachedWeatherService = Depends(get_service),
    locations: LocationService = Depends(get_location_service)
) -> WeatherData:
    try:
        location = locations.get_location(location_id)
        return await service.get_weather_for_datetime(location, dt)
    except (WeatherError, NotFoundError) as e:
        raise to_http_exception(e)

@router.delete("/cache", status_code=204, summary="Clear cached weather")
async def clear_cache(service: CachedWeatherService = Depends(get_service)):
    service.clear_cache()
    await clear_recommendation_cache()
