import logging
from typing import List, Optional

from features.equipment.models.equipment_types import (
    EquipmentItem,
    EquipmentRecommendation,
    EquipmentType,
    FishSpecies,
    UserEquipment,
)
from features.equipment.services.equipment_service import EquipmentService
from features.equipment.services.recommendation_filter import (
    MAX_CONFIDENCE,
    MIN_CONFIDENCE,
    RecommendationFilter,
)
from features.tides.models.tide_types import TideData, TideType
from features.weather.models.condition_types import LightCondition, WaterClarity, WeatherCondition
from features.weather.models.weather_types import WeatherData

logger = logging.getLogger(__name__)

REASON_PREFIX = "Based on the current conditions: "

FLASHER_CLARITY_REASONS = {
    WaterClarity.CLEAR: "The water is clear, so less flashy and more natural colored flashers will work well. ",
    WaterClarity.MEDIUM: "The water has medium clarity, so moderately bright flashers will be effective. ",
    WaterClarity.MURKY: "The water is murky, so bright, high-visibility flashers are recommended. ",
}

FLASHER_LIGHT_REASONS = {
    LightCondition.BRIGHT: "It's bright outside, so UV enhanced flashers will be more visible. ",
    LightCondition.OVERCAST: "It's overcast, so glow or chrome flashers will provide good contrast. ",
    LightCondition.LOW_LIGHT: "Light conditions are low, so glow flashers will be most effective. ",
}

LURE_CLARITY_REASONS = {
    WaterClarity.CLEAR: "The water is clear, so smaller, more natural colored lures are recommended. ",
    WaterClarity.MEDIUM: "The water has medium clarity, so medium-sized lures with some flash will be effective. ",
    WaterClarity.MURKY: "The water is murky, so larger, brighter lures will help attract fish. ",
}

LURE_LIGHT_REASONS = {
    LightCondition.BRIGHT: "It's bright outside, so silver and blue colors will reflect more light. ",
    LightCondition.OVERCAST: "It's overcast, so green and chartreuse colors will provide good visibility. ",
    LightCondition.LOW_LIGHT: "Light conditions are low, so glow or UV enhanced lures will be most visible. ",
}

LURE_WEATHER_REASONS = {
    WeatherCondition.CALM: "In calm conditions, subtle action lures work well. ",
    WeatherCondition.WINDY: "In windy conditions, lures with more action help attract attention. ",
    WeatherCondition.RAINY: "During rain, darker lures create better silhouettes. ",
}

LEADER_CLARITY_REASONS = {
    WaterClarity.CLEAR: "The water is clear, so fluorocarbon leaders are less visible to fish. ",
    WaterClarity.MEDIUM: "The water has medium clarity, so standard monofilament leaders will work well. ",
    WaterClarity.MURKY: "The water is murky, so leader visibility is less important than strength. ",
}

def is_incoming(tide_type: TideType) -> bool:
    return tide_type in (TideType.HIGH, TideType.RISING)

def is_rough(weather_condition: WeatherCondition) -> bool:
    return weather_condition in (WeatherCondition.WINDY, WeatherCondition.RAINY)

class RecommendationService:
    """Rule-based flasher, lure and leader recommendations.

    Catalog items are matched against the clarity, light, weather and tide
    categories derived from current conditions; the filter chain then
    narrows by species and clarity and promotes the user's own gear.
    """

    def __init__(self, equipment_service: EquipmentService, recommendation_filter: Optional[RecommendationFilter] = None):
        self.equipment_service = equipment_service
        self.recommendation_filter = recommendation_filter or RecommendationFilter()

    def get_recommendations(
        self,
        weather: WeatherData,
        tide: TideData,
        species: Optional[FishSpecies] = None,
        user_equipment: Optional[List[UserEquipment]] = None
    ) -> List[EquipmentRecommendation]:
        water_clarity = WaterClarity.from_visibility(weather.visibility)
        light_condition = LightCondition.from_weather(weather)
        weather_condition = WeatherCondition.from_weather(weather)

        recommendations = [
            self._recommend(
                equipment_type,
                water_clarity,
                light_condition,
                weather_condition,
                tide,
                self._reason(equipment_type, water_clarity, light_condition, weather_condition, tide)
            )
            for equipment_type in (EquipmentType.FLASHER, EquipmentType.LURE, EquipmentType.LEADER)
        ]

        if species is not None:
            recommendations = self.recommendation_filter.filter_by_species(recommendations, species)

        recommendations = self.recommendation_filter.filter_by_water_clarity(recommendations, water_clarity)

        if user_equipment:
            recommendations = self.recommendation_filter.prioritize_user_preferences(recommendations, user_equipment)

        return recommendations

    def get_equipment_catalog(self) -> List[EquipmentItem]:
        return self.equipment_service.get_catalog()

    def get_equipment_by_id(self, equipment_id: str) -> Optional[EquipmentItem]:
        return self.equipment_service.get_by_id(equipment_id)

    def get_equipment_by_type(self, equipment_type: EquipmentType) -> List[EquipmentItem]:
        return self.equipment_service.get_by_type(equipment_type)

    def _recommend(
        self,
        equipment_type: EquipmentType,
        water_clarity: WaterClarity,
        light_condition: LightCondition,
        weather_condition: WeatherCondition,
        tide: TideData,
        reason: str
    ) -> EquipmentRecommendation:
        candidates = self.equipment_service.get_by_type(equipment_type)

        matching = [
            item for item in candidates
            if (item.water_clarity_conditions is None or water_clarity.value in item.water_clarity_conditions)
            and (item.light_conditions is None or light_condition.value in item.light_conditions)
            and (item.weather_conditions is None or weather_condition.value in item.weather_conditions)
            and (item.tide_conditions is None or tide.type in item.tide_conditions)
        ]

        # Nothing suits every condition, offer the whole category
        if not matching:
            logger.debug(f"No {equipment_type.value} matches current conditions, using all")
            matching = candidates

        return EquipmentRecommendation(
            type=equipment_type,
            items=matching,
            reason_for_recommendation=reason,
            confidence_score=self.calculate_confidence_score(len(matching), len(candidates))
        )

    @staticmethod
    def calculate_confidence_score(filtered_count: int, total_count: int) -> float:
        """Fewer surviving items means a more specific, more confident pick."""
        if filtered_count == 0 or total_count == 0:
            return 0.5
        specificity = 1.0 - filtered_count / total_count
        return min(MAX_CONFIDENCE, max(MIN_CONFIDENCE, 0.5 + specificity * 0.5))

    @staticmethod
    def _reason(
        equipment_type: EquipmentType,
        water_clarity: WaterClarity,
        light_condition: LightCondition,
        weather_condition: WeatherCondition,
        tide: TideData
    ) -> str:
        reason = REASON_PREFIX

        if equipment_type == EquipmentType.FLASHER:
            reason += FLASHER_CLARITY_REASONS[water_clarity]
            reason += FLASHER_LIGHT_REASONS[light_condition]
            if is_incoming(tide.type):
                reason += "During high/rising tide, larger flashers create more attraction. "
            else:
                reason += "During low/falling tide, smaller flashers with less drag work better. "

        elif equipment_type == EquipmentType.LURE:
            reason += LURE_CLARITY_REASONS[water_clarity]
            reason += LURE_LIGHT_REASONS[light_condition]
            reason += LURE_WEATHER_REASONS[weather_condition]

        else:
            reason += LEADER_CLARITY_REASONS[water_clarity]
            if is_incoming(tide.type):
                reason += "During high/rising tide, longer leaders allow for more natural presentation. "
            else:
                reason += "During low/falling tide, shorter leaders help maintain control. "
            if is_rough(weather_condition):
                reason += "In rough conditions, heavier leaders provide better durability. "

        return reason
