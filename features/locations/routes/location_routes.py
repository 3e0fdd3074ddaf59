from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request

from features.common.exceptions.domain_exceptions import LocationNotFoundError
from features.common.models.location_types import Location
from features.common.utils.http_errors import to_http_exception
from features.locations.services.location_service import LocationService

router = APIRouter(
    prefix="/locations",
    tags=["Locations"],
    responses={404: {"description": "Location not found"}}
)

def get_service(request: Request) -> LocationService:
    """Dependency to get the LocationService instance."""
    return request.app.state.location_service

@router.get("", response_model=List[Location], summary="List saved locations")
async def list_locations(service: LocationService = Depends(get_service)) -> List[Location]:
    return service.get_saved_locations()

@router.post(
    "",
    response_model=Location,
    status_code=201,
    summary="Save a location",
    description="Creates or replaces a saved fishing location"
)
async def save_location(
    location: Location,
    service: LocationService = Depends(get_service)
) -> Location:
    return service.save_location(location)

@router.get("/{location_id}", response_model=Location, summary="Get a saved location")
async def get_location(
    location_id: str,
    service: LocationService = Depends(get_service)
) -> Location:
    try:
        return service.get_location(location_id)
    except LocationNotFoundError as e:
        raise to_http_exception(e)

@router.put("/{location_id}", response_model=Location, summary="Update a saved location")
async def update_location(
    location_id: str,
    location: Location,
    service: LocationService = Depends(get_service)
) -> Location:
    if location.id != location_id:
        raise HTTPException(status_code=400, detail="Location id does not match path")
    return service.save_location(location)

@router.delete("/{location_id}", status_code=204, summary="Delete a saved location")
async def delete_location(
    location_id: str,
    service: LocationService = Depends(get_service)
):
    try:
        service.delete_location(location_id)
    except LocationNotFoundError as e:
        raise to_http_exception(e)
