from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, Request

from features.common.exceptions.domain_exceptions import NotFoundError
from features.common.exceptions.provider_exceptions import TideError, WeatherError
from features.common.utils.http_errors import to_http_exception
from features.equipment.models.equipment_types import (
    FishSpecies,
    RecommendationReport,
    RecommendationRequest,
)
from features.equipment.services.recommendation_report_service import RecommendationReportService
from features.users.routes.dependencies import get_optional_user_id

router = APIRouter(
    prefix="/recommendations",
    tags=["Recommendations"],
    responses={
        404: {"description": "Location not found"},
        503: {"description": "Conditions unavailable"}
    }
)

def get_service(request: Request) -> RecommendationReportService:
    """Dependency to get the RecommendationReportService instance."""
    return request.app.state.recommendation_report_service

@router.post(
    "/evaluate",
    response_model=RecommendationReport,
    summary="Recommend equipment for supplied conditions",
    description="Runs the recommendation rules against weather and tide given in the request body"
)
async def evaluate(
    request: RecommendationRequest,
    user_id: Optional[str] = Depends(get_optional_user_id),
    service: RecommendationReportService = Depends(get_service)
) -> RecommendationReport:
    user_equipment = service.preferences_service.get_user_equipment(user_id) if user_id else []
    return service.build_report(
        request.location_id, request.weather, request.tide, request.species, user_equipment
    )

@router.get(
    "/{location_id}",
    response_model=RecommendationReport,
    summary="Recommend equipment for a saved location",
    description="Returns flasher, lure and leader recommendations with explanations. "
                "Owned equipment is prioritised when a bearer token is supplied."
)
async def get_recommendations(
    location_id: str,
    species: Optional[FishSpecies] = None,
    at: Optional[datetime] = None,
    user_id: Optional[str] = Depends(get_optional_user_id),
    service: RecommendationReportService = Depends(get_service)
) -> RecommendationReport:
    try:
        return await service.get_location_recommendations(location_id, species, user_id, at)
    except (WeatherError, TideError, NotFoundError) as e:
        raise to_http_exception(e)
