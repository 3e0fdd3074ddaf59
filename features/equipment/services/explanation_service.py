from features.equipment.models.equipment_types import EquipmentRecommendation, EquipmentType
from features.equipment.services.recommendation_service import is_incoming, is_rough
from features.tides.models.tide_types import TideData
from features.weather.models.condition_types import LightCondition, WaterClarity, WeatherCondition
from features.weather.models.weather_types import WeatherData

MAX_LISTED_ITEMS = 3

# (threshold, description, colour), highest first
CONFIDENCE_LEVELS = [
    (0.8, "High confidence recommendation based on current conditions", "#4CAF50"),
    (0.6, "Medium-high confidence recommendation", "#8BC34A"),
    (0.4, "Medium confidence recommendation", "#FFEB3B"),
    (0.2, "Low-medium confidence recommendation", "#FF9800"),
]
LOW_CONFIDENCE = ("Low confidence recommendation - consider trying different options", "#F44336")

def fmt(value: float) -> str:
    """Format with at most one decimal place, dropping a trailing .0."""
    text = f"{value:.1f}"
    return text[:-2] if text.endswith(".0") else text

class ExplanationService:
    """Long-form explanations and confidence labels for display."""

    def generate_detailed_explanation(
        self,
        recommendation: EquipmentRecommendation,
        weather: WeatherData,
        tide: TideData
    ) -> str:
        explanation = recommendation.reason_for_recommendation

        if recommendation.type == EquipmentType.FLASHER:
            explanation += self._flasher_details(weather, tide)
        elif recommendation.type == EquipmentType.LURE:
            explanation += self._lure_details(weather)
        else:
            explanation += self._leader_details(weather, tide)

        if recommendation.items:
            explanation += f"\n\nRecommended {recommendation.type.value.lower()}s include:"

            for item in recommendation.items[:MAX_LISTED_ITEMS]:
                explanation += f"\n• {item.name}: {item.description}"

                if recommendation.type == EquipmentType.LEADER:
                    if item.length and item.material and item.weight:
                        explanation += f" ({item.length}, {item.material}, {item.weight})"
                elif item.size and item.color:
                    explanation += f" ({item.size}, {item.color})"

            remaining = len(recommendation.items) - MAX_LISTED_ITEMS
            if remaining > 0:
                explanation += f"\n• ...and {remaining} more options"

        return explanation

    def generate_confidence_description(self, confidence_score: float) -> str:
        for threshold, description, _ in CONFIDENCE_LEVELS:
            if confidence_score >= threshold:
                return description
        return LOW_CONFIDENCE[0]

    def get_confidence_color(self, confidence_score: float) -> str:
        for threshold, _, color in CONFIDENCE_LEVELS:
            if confidence_score >= threshold:
                return color
        return LOW_CONFIDENCE[1]

    def _flasher_details(self, weather: WeatherData, tide: TideData) -> str:
        text = "\n\nFlashers create visual attraction through reflection and movement in the water. "
        visibility = fmt(weather.visibility)

        clarity = WaterClarity.from_visibility(weather.visibility)
        if clarity == WaterClarity.CLEAR:
            text += f"In clear water conditions (visibility: {visibility} km), fish can see further, so more subtle flashers with natural colors work well. "
        elif clarity == WaterClarity.MEDIUM:
            text += f"In medium water clarity (visibility: {visibility} km), moderately bright flashers provide good visibility without being too aggressive. "
        else:
            text += f"In murky water conditions (visibility: {visibility} km), bright, high-contrast flashers help fish locate your lure from further away. "

        light = LightCondition.from_weather(weather)
        if light == LightCondition.BRIGHT:
            text += f"With bright light conditions (cloud cover: {weather.cloud_cover}%), UV enhanced flashers will reflect more light and create more flash. "
        elif light == LightCondition.OVERCAST:
            text += f"Under overcast conditions (cloud cover: {weather.cloud_cover}%), glow or chrome flashers provide better visibility. "
        else:
            text += "In low light conditions, glow flashers will be most visible to fish. "

        tide_name = tide.type.value.lower()
        if is_incoming(tide.type):
            text += f"During {tide_name} tide (height: {fmt(tide.height)} meters), larger flashers create more attraction in deeper water. "
        else:
            text += f"During {tide_name} tide (height: {fmt(tide.height)} meters), smaller flashers with less drag work better in shallower water. "

        return text

    def _lure_details(self, weather: WeatherData) -> str:
        text = "\n\nLures mimic prey fish and attract salmon through their appearance and action. "
        visibility = fmt(weather.visibility)

        clarity = WaterClarity.from_visibility(weather.visibility)
        if clarity == WaterClarity.CLEAR:
            text += f"In clear water conditions (visibility: {visibility} km), smaller, more natural colored lures that closely resemble actual prey fish are most effective. "
        elif clarity == WaterClarity.MEDIUM:
            text += f"In medium water clarity (visibility: {visibility} km), medium-sized lures with some flash will attract fish without spooking them. "
        else:
            text += f"In murky water conditions (visibility: {visibility} km), larger, brighter lures create more vibration and visibility to help salmon find them. "

        light = LightCondition.from_weather(weather)
        if light == LightCondition.BRIGHT:
            text += f"With bright light conditions (cloud cover: {weather.cloud_cover}%), silver and blue colors reflect more light and create attractive flashes. "
        elif light == LightCondition.OVERCAST:
            text += f"Under overcast conditions (cloud cover: {weather.cloud_cover}%), green and chartreuse colors provide good visibility and contrast. "
        else:
            text += "In low light conditions, glow or UV enhanced lures will be most visible to fish. "

        condition = WeatherCondition.from_weather(weather)
        if condition == WeatherCondition.CALM:
            text += f"In calm conditions (wind speed: {fmt(weather.wind_speed)} mph), subtle action lures work well as fish can detect minor movements. "
        elif condition == WeatherCondition.WINDY:
            text += f"In windy conditions (wind speed: {fmt(weather.wind_speed)} mph), lures with more action help attract attention in choppy water. "
        else:
            text += f"During rainy conditions (precipitation: {fmt(weather.precipitation)} mm), darker lures create better silhouettes against the surface. "

        return text

    def _leader_details(self, weather: WeatherData, tide: TideData) -> str:
        text = "\n\nLeaders connect your flasher to your lure and affect how your lure moves in the water. "
        visibility = fmt(weather.visibility)

        clarity = WaterClarity.from_visibility(weather.visibility)
        if clarity == WaterClarity.CLEAR:
            text += f"In clear water conditions (visibility: {visibility} km), fluorocarbon leaders are nearly invisible to fish, making them less likely to spook. "
        elif clarity == WaterClarity.MEDIUM:
            text += f"In medium water clarity (visibility: {visibility} km), standard monofilament leaders provide a good balance of invisibility and strength. "
        else:
            text += f"In murky water conditions (visibility: {visibility} km), leader visibility is less important than strength and durability. "

        tide_name = tide.type.value.lower()
        if is_incoming(tide.type):
            text += f"During {tide_name} tide (height: {fmt(tide.height)} meters), longer leaders (36-42 inches) allow for more natural presentation and movement of your lure. "
        else:
            text += f"During {tide_name} tide (height: {fmt(tide.height)} meters), shorter leaders (24-30 inches) help maintain control in shallower water. "

        if is_rough(WeatherCondition.from_weather(weather)):
            text += f"In rough conditions (wind speed: {fmt(weather.wind_speed)} mph, precipitation: {fmt(weather.precipitation)} mm), heavier leaders (40-60 lb) provide better durability and control. "
        else:
            text += f"In calm conditions (wind speed: {fmt(weather.wind_speed)} mph), lighter leaders (20-30 lb) allow for more natural lure action. "

        return text
