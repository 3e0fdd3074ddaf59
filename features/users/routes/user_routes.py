from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request

from features.common.exceptions.domain_exceptions import ConflictError, NotFoundError
from features.common.utils.http_errors import to_http_exception
from features.equipment.models.equipment_types import FishSpecies, UserEquipment
from features.users.models.user_types import (
    DataSettings,
    DisplaySettings,
    ExperienceLevel,
    NotificationSettings,
    UserPreferences,
)
from features.users.routes.dependencies import get_current_user_id
from features.users.services.preferences_service import PreferencesService

router = APIRouter(
    prefix="/users/me",
    tags=["Users"],
    responses={
        401: {"description": "Authentication required"},
        404: {"description": "User or equipment not found"},
        409: {"description": "Equipment entry belongs to another user"}
    }
)

def get_service(request: Request) -> PreferencesService:
    """Dependency to get the PreferencesService instance."""
    return request.app.state.preferences_service

def _call(func, *args):
    try:
        return func(*args)
    except (NotFoundError, ConflictError) as e:
        raise to_http_exception(e)

@router.get("/preferences", response_model=UserPreferences, summary="Get preferences")
async def get_preferences(
    user_id: str = Depends(get_current_user_id),
    service: PreferencesService = Depends(get_service)
) -> UserPreferences:
    return _call(service.get_preferences, user_id)

@router.put("/preferences", response_model=UserPreferences, summary="Replace preferences")
async def update_preferences(
    preferences: UserPreferences,
    user_id: str = Depends(get_current_user_id),
    service: PreferencesService = Depends(get_service)
) -> UserPreferences:
    return _call(service.update_preferences, user_id, preferences)

@router.delete("/preferences", response_model=UserPreferences, summary="Reset preferences to defaults")
async def reset_preferences(
    user_id: str = Depends(get_current_user_id),
    service: PreferencesService = Depends(get_service)
) -> UserPreferences:
    return _call(service.reset_preferences, user_id)

@router.put("/preferences/species", response_model=UserPreferences, summary="Set preferred species")
async def update_preferred_species(
    species: List[FishSpecies],
    user_id: str = Depends(get_current_user_id),
    service: PreferencesService = Depends(get_service)
) -> UserPreferences:
    return _call(service.update_preferred_species, user_id, species)

@router.put("/preferences/equipment", response_model=UserPreferences, summary="Set preferred equipment ids")
async def update_preferred_equipment(
    equipment_ids: List[str],
    user_id: str = Depends(get_current_user_id),
    service: PreferencesService = Depends(get_service)
) -> UserPreferences:
    return _call(service.update_preferred_equipment, user_id, equipment_ids)

@router.put("/preferences/experience/{level}", response_model=UserPreferences, summary="Set experience level")
async def update_experience_level(
    level: ExperienceLevel,
    user_id: str = Depends(get_current_user_id),
    service: PreferencesService = Depends(get_service)
) -> UserPreferences:
    return _call(service.update_experience_level, user_id, level)

@router.put("/preferences/notifications", response_model=UserPreferences, summary="Update notification settings")
async def update_notification_settings(
    settings: NotificationSettings,
    user_id: str = Depends(get_current_user_id),
    service: PreferencesService = Depends(get_service)
) -> UserPreferences:
    return _call(service.update_notification_settings, user_id, settings)

@router.put("/preferences/display", response_model=UserPreferences, summary="Update display settings")
async def update_display_settings(
    settings: DisplaySettings,
    user_id: str = Depends(get_current_user_id),
    service: PreferencesService = Depends(get_service)
) -> UserPreferences:
    return _call(service.update_display_settings, user_id, settings)

@router.put("/preferences/data", response_model=UserPreferences, summary="Update data settings")
async def update_data_settings(
    settings: DataSettings,
    user_id: str = Depends(get_current_user_id),
    service: PreferencesService = Depends(get_service)
) -> UserPreferences:
    return _call(service.update_data_settings, user_id, settings)

@router.get(
    "/equipment",
    response_model=List[UserEquipment],
    summary="List owned equipment",
    description="Returns the gear in the current user's tackle box"
)
async def get_user_equipment(
    user_id: str = Depends(get_current_user_id),
    service: PreferencesService = Depends(get_service)
) -> List[UserEquipment]:
    return _call(service.get_user_equipment, user_id)

@router.post("/equipment", response_model=UserEquipment, status_code=201, summary="Add owned equipment")
async def add_user_equipment(
    equipment: UserEquipment,
    user_id: str = Depends(get_current_user_id),
    service: PreferencesService = Depends(get_service)
) -> UserEquipment:
    return _call(service.add_user_equipment, user_id, equipment)

@router.put("/equipment/{entry_id}", response_model=UserEquipment, summary="Update owned equipment")
async def update_user_equipment(
    entry_id: str,
    equipment: UserEquipment,
    user_id: str = Depends(get_current_user_id),
    service: PreferencesService = Depends(get_service)
) -> UserEquipment:
    if equipment.id != entry_id:
        raise HTTPException(status_code=400, detail="Equipment id does not match path")
    return _call(service.update_user_equipment, user_id, equipment)

@router.delete(
    "/equipment/{equipment_id}",
    status_code=204,
    summary="Remove owned equipment",
    description="Removes every tackle box entry referring to the catalog item"
)
async def remove_user_equipment(
    equipment_id: str,
    user_id: str = Depends(get_current_user_id),
    service: PreferencesService = Depends(get_service)
):
    _call(service.remove_user_equipment, user_id, equipment_id)
