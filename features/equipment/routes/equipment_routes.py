from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request

from features.equipment.models.equipment_types import EquipmentItem, EquipmentType
from features.equipment.services.recommendation_service import RecommendationService

router = APIRouter(
    prefix="/equipment",
    tags=["Equipment"]
)

def get_service(request: Request) -> RecommendationService:
    """Dependency to get the RecommendationService instance."""
    return request.app.state.recommendation_service

@router.get(
    "",
    response_model=List[EquipmentItem],
    summary="Get the equipment catalog",
    description="Returns every flasher, lure and leader in the catalog"
)
async def get_catalog(service: RecommendationService = Depends(get_service)) -> List[EquipmentItem]:
    return service.get_equipment_catalog()

@router.get(
    "/type/{equipment_type}",
    response_model=List[EquipmentItem],
    summary="Get catalog items of one type"
)
async def get_by_type(
    equipment_type: EquipmentType,
    service: RecommendationService = Depends(get_service)
) -> List[EquipmentItem]:
    return service.get_equipment_by_type(equipment_type)

@router.get(
    "/{equipment_id}",
    response_model=EquipmentItem,
    summary="Get a catalog item",
    responses={404: {"description": "Equipment not found"}}
)
async def get_by_id(
    equipment_id: str,
    service: RecommendationService = Depends(get_service)
) -> EquipmentItem:
    item = service.get_equipment_by_id(equipment_id)
    if item is None:
        raise HTTPException(status_code=404, detail=f"Equipment {equipment_id} not found")
    return item
