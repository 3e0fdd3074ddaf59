import logging
from datetime import datetime
from typing import List, Optional

from aiocache import cached

from features.common.services.cache_config import RECOMMENDATIONS_EXPIRE, feature_cache_key_builder
from features.equipment.models.equipment_types import (
    FishSpecies,
    RecommendationDetail,
    RecommendationReport,
    UserEquipment,
)
from features.equipment.services.explanation_service import ExplanationService
from features.equipment.services.recommendation_service import RecommendationService
from features.locations.services.location_service import LocationService
from features.tides.models.tide_types import TideData
from features.tides.services.cached_tide_service import CachedTideService
from features.users.services.preferences_service import PreferencesService
from features.weather.models.condition_types import LightCondition, WaterClarity, WeatherCondition
from features.weather.models.weather_types import WeatherData
from features.weather.services.cached_weather_service import CachedWeatherService

logger = logging.getLogger(__name__)

class RecommendationReportService:
    """Combines conditions, recommendations and explanations for one location."""

    def __init__(
        self,
        location_service: LocationService,
        weather_service: CachedWeatherService,
        tide_service: CachedTideService,
        recommendation_service: RecommendationService,
        explanation_service: ExplanationService,
        preferences_service: PreferencesService
    ):
        self.location_service = location_service
        self.weather_service = weather_service
        self.tide_service = tide_service
        self.recommendation_service = recommendation_service
        self.explanation_service = explanation_service
        self.preferences_service = preferences_service

    @cached(
        ttl=RECOMMENDATIONS_EXPIRE,
        key_builder=feature_cache_key_builder,
        alias="default",
        noself=True
    )
    async def get_location_recommendations(
        self,
        location_id: str,
        species: Optional[FishSpecies] = None,
        user_id: Optional[str] = None,
        at: Optional[datetime] = None
    ) -> RecommendationReport:
        """Recommendations for a saved location, now or at ``at``."""
        location = self.location_service.get_location(location_id)

        if at is None:
            weather = await self.weather_service.get_current_weather(location)
            tide = await self.tide_service.get_current_tide(location)
        else:
            weather = await self.weather_service.get_weather_for_datetime(location, at)
            tide = await self.tide_service.get_tide_for_datetime(location, at)

        user_equipment = self.preferences_service.get_user_equipment(user_id) if user_id else []

        logger.info(f"Building recommendations for {location_id} (species={species}, user={user_id})")
        return self.build_report(location_id, weather, tide, species, user_equipment)

    def build_report(
        self,
        location_id: str,
        weather: WeatherData,
        tide: TideData,
        species: Optional[FishSpecies] = None,
        user_equipment: Optional[List[UserEquipment]] = None
    ) -> RecommendationReport:
        recommendations = self.recommendation_service.get_recommendations(
            weather, tide, species=species, user_equipment=user_equipment
        )

        details = [
            RecommendationDetail(
                recommendation=recommendation,
                detailed_explanation=self.explanation_service.generate_detailed_explanation(
                    recommendation, weather, tide
                ),
                confidence_description=self.explanation_service.generate_confidence_description(
                    recommendation.confidence_score
                ),
                confidence_color=self.explanation_service.get_confidence_color(
                    recommendation.confidence_score
                )
            )
            for recommendation in recommendations
        ]

        return RecommendationReport(
            location_id=location_id,
            species=species,
            water_clarity=WaterClarity.from_visibility(weather.visibility).value,
            light_condition=LightCondition.from_weather(weather).value,
            weather_condition=WeatherCondition.from_weather(weather).value,
            tide_type=tide.type,
            recommendations=details
        )
