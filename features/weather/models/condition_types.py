from enum import Enum

from features.weather.models.weather_types import WeatherData

class WaterClarity(Enum):
    """Water clarity inferred from atmospheric visibility."""
    CLEAR = "clear"
    MEDIUM = "medium"
    MURKY = "murky"

    @classmethod
    def from_visibility(cls, visibility: float) -> 'WaterClarity':
        """Get the clarity for a visibility in km."""
        if visibility > 5.0:
            return cls.CLEAR
        if visibility > 2.0:
            return cls.MEDIUM
        return cls.MURKY

class LightCondition(Enum):
    BRIGHT = "bright"
    OVERCAST = "overcast"
    LOW_LIGHT = "low_light"

    @classmethod
    def from_weather(cls, weather: WeatherData) -> 'LightCondition':
        # Early morning and evening hours at the location
        hour = weather.timestamp.hour
        if hour < 6 or hour > 18:
            return cls.LOW_LIGHT
        if weather.cloud_cover > 70:
            return cls.OVERCAST
        return cls.BRIGHT

class WeatherCondition(Enum):
    CALM = "calm"
    WINDY = "windy"
    RAINY = "rainy"

    @classmethod
    def from_weather(cls, weather: WeatherData) -> 'WeatherCondition':
        if weather.precipitation > 1.0:
            return cls.RAINY
        if weather.wind_speed > 15.0:
            return cls.WINDY
        return cls.CALM
