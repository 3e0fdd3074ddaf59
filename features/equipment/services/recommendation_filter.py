import logging
from typing import List

from features.equipment.models.equipment_types import (
    EquipmentItem,
    EquipmentRecommendation,
    FishSpecies,
    UserEquipment,
)
from features.weather.models.condition_types import WaterClarity

logger = logging.getLogger(__name__)

MIN_CONFIDENCE = 0.3
MAX_CONFIDENCE = 0.95

class RecommendationFilter:
    """Narrows and reorders recommendations after the rule-based pass.

    Each filter keeps the original items when nothing matches, so a
    recommendation is never emptied by filtering.
    """

    def filter_by_species(
        self,
        recommendations: List[EquipmentRecommendation],
        species: FishSpecies
    ) -> List[EquipmentRecommendation]:
        return [
            self._narrow(
                recommendation,
                [
                    item for item in recommendation.items
                    if item.target_species is None or species in item.target_species
                ],
                f" Filtered for {species.value} salmon."
            )
            for recommendation in recommendations
        ]

    def filter_by_water_clarity(
        self,
        recommendations: List[EquipmentRecommendation],
        clarity: WaterClarity
    ) -> List[EquipmentRecommendation]:
        return [
            self._narrow(
                recommendation,
                [
                    item for item in recommendation.items
                    if item.water_clarity_conditions is None or clarity.value in item.water_clarity_conditions
                ],
                f" Optimized for {clarity.value} water clarity."
            )
            for recommendation in recommendations
        ]

    def prioritize_user_preferences(
        self,
        recommendations: List[EquipmentRecommendation],
        user_equipment: List[UserEquipment]
    ) -> List[EquipmentRecommendation]:
        """Move items the user owns to the front, favourites first."""
        owned_ids = {e.equipment_id for e in user_equipment}
        favorite_ids = {e.equipment_id for e in user_equipment if e.is_favorite}

        prioritized = []
        for recommendation in recommendations:
            owned = [item for item in recommendation.items if item.id in owned_ids]
            if not owned:
                prioritized.append(recommendation)
                continue

            # Stable sort keeps catalog order within each group
            owned.sort(key=lambda item: item.id not in favorite_ids)
            rest = [item for item in recommendation.items if item.id not in owned_ids]

            prioritized.append(recommendation.model_copy(update={
                "items": owned + rest,
                "reason_for_recommendation": recommendation.reason_for_recommendation
                + " Prioritized based on your equipment preferences.",
                "confidence_score": min(MAX_CONFIDENCE, recommendation.confidence_score + 0.1)
            }))

        return prioritized

    def _narrow(
        self,
        recommendation: EquipmentRecommendation,
        matching: List[EquipmentItem],
        reason_suffix: str
    ) -> EquipmentRecommendation:
        items = matching or recommendation.items
        return recommendation.model_copy(update={
            "items": items,
            "reason_for_recommendation": recommendation.reason_for_recommendation + reason_suffix,
            "confidence_score": self.adjust_confidence(
                recommendation.confidence_score,
                len(recommendation.items),
                len(items)
            )
        })

    @staticmethod
    def adjust_confidence(confidence: float, original_count: int, kept_count: int) -> float:
        """Raise confidence in proportion to how much filtering narrowed the list."""
        if kept_count == original_count:
            return confidence
        if kept_count == 0:
            return max(MIN_CONFIDENCE, confidence - 0.2)
        increase = (original_count - kept_count) / original_count * 0.2
        return min(MAX_CONFIDENCE, confidence + increase)
