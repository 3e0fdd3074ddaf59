from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Request

from features.catches.models.catch_types import CatchData, CatchStatistics, PhotoRequest
from features.catches.services.catch_analytics_service import CatchAnalyticsService
from features.catches.services.catch_log_service import CatchLogService
from features.common.exceptions.domain_exceptions import CatchConflictError, CatchNotFoundError
from features.common.utils.http_errors import to_http_exception
from features.equipment.models.equipment_types import FishSpecies
from features.users.routes.dependencies import get_current_user_id

router = APIRouter(
    prefix="/catches",
    tags=["Catches"],
    responses={
        401: {"description": "Authentication required"},
        404: {"description": "Catch not found"},
        409: {"description": "Catch id belongs to another user"}
    }
)

def get_service(request: Request) -> CatchLogService:
    """Dependency to get the CatchLogService instance."""
    return request.app.state.catch_log_service

def get_analytics_service(request: Request) -> CatchAnalyticsService:
    return request.app.state.catch_analytics_service

@router.get(
    "",
    response_model=List[CatchData],
    summary="List catches",
    description="Returns the current user's catches, newest first, optionally filtered by location or species"
)
async def list_catches(
    location_id: Optional[str] = None,
    species: Optional[FishSpecies] = None,
    user_id: str = Depends(get_current_user_id),
    service: CatchLogService = Depends(get_service)
) -> List[CatchData]:
    if location_id is not None and species is not None:
        return [c for c in service.get_catches_by_location(user_id, location_id) if c.species == species]
    if location_id is not None:
        return service.get_catches_by_location(user_id, location_id)
    if species is not None:
        return service.get_catches_by_species(user_id, species)
    return service.get_catch_history(user_id)

@router.post("", response_model=CatchData, status_code=201, summary="Log a catch")
async def log_catch(
    catch: CatchData,
    user_id: str = Depends(get_current_user_id),
    service: CatchLogService = Depends(get_service)
) -> CatchData:
    try:
        return service.log_catch(user_id, catch)
    except CatchConflictError as e:
        raise to_http_exception(e)

@router.get(
    "/analytics",
    response_model=CatchStatistics,
    summary="Get catch statistics",
    description="Counts, averages, rankings, daily trend and personalised tips over the user's history"
)
async def get_statistics(
    user_id: str = Depends(get_current_user_id),
    service: CatchAnalyticsService = Depends(get_analytics_service)
) -> CatchStatistics:
    return service.get_statistics(user_id)

@router.get("/{catch_id}", response_model=CatchData, summary="Get a catch")
async def get_catch(
    catch_id: str,
    user_id: str = Depends(get_current_user_id),
    service: CatchLogService = Depends(get_service)
) -> CatchData:
    try:
        return service.get_catch(user_id, catch_id)
    except CatchNotFoundError as e:
        raise to_http_exception(e)

@router.put("/{catch_id}", response_model=CatchData, summary="Update a catch")
async def update_catch(
    catch_id: str,
    catch: CatchData,
    user_id: str = Depends(get_current_user_id),
    service: CatchLogService = Depends(get_service)
) -> CatchData:
    if catch.id != catch_id:
        raise HTTPException(status_code=400, detail="Catch id does not match path")
    try:
        return service.update_catch(user_id, catch)
    except CatchNotFoundError as e:
        raise to_http_exception(e)

@router.delete("/{catch_id}", status_code=204, summary="Delete a catch")
async def delete_catch(
    catch_id: str,
    user_id: str = Depends(get_current_user_id),
    service: CatchLogService = Depends(get_service)
):
    try:
        service.delete_catch(user_id, catch_id)
    except CatchNotFoundError as e:
        raise to_http_exception(e)

@router.post("/{catch_id}/photos", response_model=CatchData, summary="Attach a photo URL")
async def add_photo(
    catch_id: str,
    photo: PhotoRequest,
    user_id: str = Depends(get_current_user_id),
    service: CatchLogService = Depends(get_service)
) -> CatchData:
    try:
        return service.add_photo(user_id, catch_id, photo.photo_url)
    except CatchNotFoundError as e:
        raise to_http_exception(e)

@router.delete("/{catch_id}/photos", response_model=CatchData, summary="Detach a photo URL")
async def remove_photo(
    catch_id: str,
    photo_url: str,
    user_id: str = Depends(get_current_user_id),
    service: CatchLogService = Depends(get_service)
) -> CatchData:
    try:
        return service.remove_photo(user_id, catch_id, photo_url)
    except CatchNotFoundError as e:
        raise to_http_exception(e)
