import asyncio
from datetime import datetime, timezone

import pytest

from features.common.exceptions.provider_exceptions import WeatherNetworkError
from features.weather.services.cached_weather_service import CachedWeatherService
from repositories.weather_repo import WeatherRepository
from tests.conftest import PACIFIC, make_weather


@pytest.fixture
def repository(session_factory):
    return WeatherRepository(session_factory)


@pytest.fixture
def service(weather_client, repository, clock):
    return CachedWeatherService(weather_client, repository, clock=clock)


def test_current_weather_served_from_cache_within_ttl(service, weather_client, location, clock):
    first = asyncio.run(service.get_current_weather(location))
    clock.advance(29 * 60)
    second = asyncio.run(service.get_current_weather(location))

    assert second == first
    assert weather_client.calls == [("current", location.id)]


def test_current_weather_refetched_after_ttl(service, weather_client, location, clock):
    asyncio.run(service.get_current_weather(location))
    clock.advance(30 * 60)
    weather_client.current = make_weather(temperature=61.0)

    refreshed = asyncio.run(service.get_current_weather(location))

    assert refreshed.temperature == 61.0
    assert len(weather_client.calls) == 2


def test_force_refresh_bypasses_cache(service, weather_client, location):
    asyncio.run(service.get_current_weather(location))
    asyncio.run(service.get_current_weather(location, force_refresh=True))
    assert len(weather_client.calls) == 2


def test_cached_row_keeps_local_offset(service, repository, location):
    asyncio.run(service.get_current_weather(location))

    cached = repository.get_current(location.id)
    assert cached.data.timestamp == datetime(2024, 6, 15, 12, 0, tzinfo=PACIFIC)
    assert cached.data.timestamp.utcoffset() == PACIFIC.utcoffset(None)


def test_stale_data_returned_when_provider_fails(service, weather_client, location, clock):
    original = asyncio.run(service.get_current_weather(location))
    clock.advance(6 * 3600)
    weather_client.error = WeatherNetworkError("offline")

    assert asyncio.run(service.get_current_weather(location)) == original


def test_error_raised_when_nothing_cached(service, weather_client, location):
    weather_client.error = WeatherNetworkError("offline")
    with pytest.raises(WeatherNetworkError):
        asyncio.run(service.get_current_weather(location))


def test_forecast_cache_needs_enough_days(service, weather_client, location):
    three = asyncio.run(service.get_forecast(location, 3))
    assert len(three) == 3

    two = asyncio.run(service.get_forecast(location, 2))
    assert len(two) == 2
    assert len(weather_client.calls) == 1

    five = asyncio.run(service.get_forecast(location, 5))
    assert len(five) == 5
    assert len(weather_client.calls) == 2


def test_forecast_ttl_is_three_hours(service, weather_client, location, clock):
    asyncio.run(service.get_forecast(location, 7))
    clock.advance(3 * 3600 - 1)
    asyncio.run(service.get_forecast(location, 7))
    assert len(weather_client.calls) == 1

    clock.advance(1)
    asyncio.run(service.get_forecast(location, 7))
    assert len(weather_client.calls) == 2


def test_weather_for_datetime_uses_fresh_forecast(service, weather_client, location):
    asyncio.run(service.get_forecast(location, 7))

    target = datetime(2024, 6, 17, 22, 0, tzinfo=timezone.utc)  # 15:00 Pacific
    weather = asyncio.run(service.get_weather_for_datetime(location, target))

    assert weather.timestamp.day == 17
    assert len(weather_client.calls) == 1


def test_weather_for_datetime_falls_back_to_closest_cached(service, weather_client, location, clock):
    asyncio.run(service.get_forecast(location, 3))
    clock.advance(4 * 3600)
    weather_client.error = WeatherNetworkError("offline")

    weather = asyncio.run(service.get_weather_for_datetime(location, datetime(2024, 6, 30, tzinfo=timezone.utc)))

    assert weather.timestamp.day == 17


def test_clear_cache(service, repository, location):
    asyncio.run(service.get_current_weather(location))
    asyncio.run(service.get_forecast(location, 2))
    service.clear_cache()
    assert repository.count() == 0
