from datetime import datetime
from fastapi import APIRouter, Depends, Query, Request

from core.config import settings
from features.common.exceptions.domain_exceptions import NotFoundError
from features.common.exceptions.provider_exceptions import TideError
from features.common.services.cache_config import clear_recommendation_cache
from features.common.utils.http_errors import to_http_exception
from features.locations.services.location_service import LocationService
from features.tides.models.tide_types import TideData, TidePredictionsResponse
from features.tides.services.cached_tide_service import CachedTideService

router = APIRouter(
    prefix="/tides",
    tags=["Tides"],
    responses={
        400: {"description": "Invalid location"},
        404: {"description": "Location not found or no tide data"},
        503: {"description": "Tide provider unavailable and nothing cached"}
    }
)

def get_service(request: Request) -> CachedTideService:
    """Dependency to get the CachedTideService instance."""
    return request.app.state.tide_service

def get_location_service(request: Request) -> LocationService:
    return request.app.state.location_service

@router.get(
    "/{location_id}/current",
    response_model=TideData,
    summary="Get current tide",
    description="Returns the interpolated tide height and direction for a saved location"
)
async def get_current_tide(
    location_id: str,
    refresh: bool = False,
    service: CachedTideService = Depends(get_service),
    locations: LocationService = Depends(get_location_service)
) -> TideData:
    try:
        location = locations.get_location(location_id)
        return await service.get_current_tide(location, force_refresh=refresh)
    except (TideError, NotFoundError) as e:
        raise to_http_exception(e)

@router.get(
    "/{location_id}/predictions",
    response_model=TidePredictionsResponse,
    summary="Get daily tide predictions",
    description="Returns one tide state per day, computed at 12:00 UTC"
)
async def get_tide_predictions(
    location_id: str,
    days: int = Query(default=7, ge=1, le=settings.max_forecast_days),
    service: CachedTideService = Depends(get_service),
    locations: LocationService = Depends(get_location_service)
) -> TidePredictionsResponse:
    try:
        location = locations.get_location(location_id)
        predictions = await service.get_tide_predictions(location, days)
    except (TideError, NotFoundError) as e:
        raise to_http_exception(e)
    return TidePredictionsResponse(location_id=location_id, days=days, predictions=predictions)

@router.get(
    "/{location_id}/at",
    response_model=TideData,
    summary="Get tide for a date and time",
    description="Returns the tide state at the given time"
)
async def get_tide_for_datetime(
    location_id: str,
    dt: datetime,
    service: CachedTideService = Depends(get_service),
    locations: LocationService = Depends(get_location_service)
) -> TideData:
    try:
        location = locations.get_location(location_id)
        return await service.get_tide_for_datetime(location, dt)
    except (TideError, NotFoundError) as e:
        raise to_http_exception(e)

@router.delete("/cache", status_code=204, summary="Clear cached tides")
async def clear_cache(service: CachedTideService = Depends(get_service)):
    service.clear_cache()
    await clear_recommendation_cache()
