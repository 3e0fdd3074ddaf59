from datetime import datetime

from features.tides.models.tide_types import TideType
from features.weather.models.condition_types import LightCondition, WaterClarity, WeatherCondition
from tests.conftest import PACIFIC, make_tide, make_weather


def test_water_clarity_thresholds():
    assert WaterClarity.from_visibility(10.0) == WaterClarity.CLEAR
    assert WaterClarity.from_visibility(5.1) == WaterClarity.CLEAR
    assert WaterClarity.from_visibility(5.0) == WaterClarity.MEDIUM
    assert WaterClarity.from_visibility(2.1) == WaterClarity.MEDIUM
    assert WaterClarity.from_visibility(2.0) == WaterClarity.MURKY
    assert WaterClarity.from_visibility(0.0) == WaterClarity.MURKY


def test_light_condition_uses_local_hour():
    dawn = make_weather(timestamp=datetime(2024, 6, 15, 5, 59, tzinfo=PACIFIC))
    evening = make_weather(timestamp=datetime(2024, 6, 15, 19, 0, tzinfo=PACIFIC))
    six_pm = make_weather(timestamp=datetime(2024, 6, 15, 18, 30, tzinfo=PACIFIC))

    assert LightCondition.from_weather(dawn) == LightCondition.LOW_LIGHT
    assert LightCondition.from_weather(evening) == LightCondition.LOW_LIGHT
    assert LightCondition.from_weather(six_pm) == LightCondition.BRIGHT


def test_light_condition_cloud_cover():
    assert LightCondition.from_weather(make_weather(cloud_cover=70)) == LightCondition.BRIGHT
    assert LightCondition.from_weather(make_weather(cloud_cover=71)) == LightCondition.OVERCAST
    # Low light wins over cloud cover
    night = make_weather(timestamp=datetime(2024, 6, 15, 23, 0, tzinfo=PACIFIC), cloud_cover=100)
    assert LightCondition.from_weather(night) == LightCondition.LOW_LIGHT


def test_weather_condition_rain_before_wind():
    assert WeatherCondition.from_weather(make_weather()) == WeatherCondition.CALM
    assert WeatherCondition.from_weather(make_weather(wind_speed=15.0)) == WeatherCondition.CALM
    assert WeatherCondition.from_weather(make_weather(wind_speed=15.5)) == WeatherCondition.WINDY
    assert WeatherCondition.from_weather(make_weather(precipitation=1.0)) == WeatherCondition.CALM
    assert WeatherCondition.from_weather(make_weather(precipitation=2.5, wind_speed=25.0)) == WeatherCondition.RAINY


def test_value_objects_compare_by_value():
    weather = make_weather()
    assert weather == weather.model_copy()
    assert weather != weather.model_copy(update={"temperature": 60.0})

    tide = make_tide()
    assert tide == tide.model_copy()
    assert tide.model_copy(update={"type": TideType.FALLING}).type == TideType.FALLING
