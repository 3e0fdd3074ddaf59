from typing import List
from fastapi import APIRouter, Depends, Request

from features.common.services.cache_config import clear_recommendation_cache
from features.sync.models.sync_types import DataFreshness, SyncState
from features.sync.services.offline_data_service import OfflineDataService
from features.sync.services.sync_service import SyncService

router = APIRouter(
    prefix="/sync",
    tags=["Sync"]
)

def get_service(request: Request) -> SyncService:
    """Dependency to get the SyncService instance."""
    return request.app.state.sync_service

def get_offline_service(request: Request) -> OfflineDataService:
    return request.app.state.offline_data_service

def _next_run(request: Request):
    scheduler = getattr(request.app.state, "scheduler", None)
    return scheduler.get_next_run_time() if scheduler else None

@router.get(
    "/status",
    response_model=SyncState,
    summary="Get synchronisation status",
    description="Returns the last sync result and the next scheduled run, if auto-sync is enabled"
)
async def get_status(
    request: Request,
    service: SyncService = Depends(get_service)
) -> SyncState:
    return service.get_state(next_scheduled_sync=_next_run(request))

@router.post(
    "/now",
    response_model=SyncState,
    summary="Synchronise saved locations",
    description="Refreshes current weather and tide for saved locations. "
                "Without force, locations whose data is still fresh are skipped."
)
async def sync_now(
    request: Request,
    force: bool = False,
    service: SyncService = Depends(get_service)
) -> SyncState:
    await service.sync_now(force=force)
    return service.get_state(next_scheduled_sync=_next_run(request))

@router.get("/locations", response_model=List[str], summary="List locations with cached data")
async def get_cached_locations(
    service: OfflineDataService = Depends(get_offline_service)
) -> List[str]:
    return service.get_locations_with_cached_data()

@router.get(
    "/freshness/{location_id}",
    response_model=DataFreshness,
    summary="Get cached data freshness",
    description="Reports whether cached current conditions exist and how fresh they are"
)
async def get_freshness(
    location_id: str,
    service: OfflineDataService = Depends(get_offline_service)
) -> DataFreshness:
    return service.get_freshness(location_id)

@router.delete("/cache/{location_id}", status_code=204, summary="Clear cached data for a location")
async def clear_location_cache(
    location_id: str,
    service: OfflineDataService = Depends(get_offline_service)
):
    service.clear_cached_data(location_id)
    await clear_recommendation_cache()

@router.delete("/cache", status_code=204, summary="Clear all cached data")
async def clear_all_cache(service: OfflineDataService = Depends(get_offline_service)):
    service.clear_all_cached_data()
    await clear_recommendation_cache()
