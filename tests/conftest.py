from datetime import datetime, timedelta, timezone

import pytest

from core.config import settings
from core.database import build_engine, create_session_factory, init_database
from features.common.models.location_types import Location
from features.tides.models.tide_types import TideData, TideEvent, TideType
from features.weather.models.weather_types import WeatherData

PACIFIC = timezone(timedelta(hours=-7))

# 2024-06-15 19:00 UTC, noon in Seattle
NOW = datetime(2024, 6, 15, 19, 0, tzinfo=timezone.utc).timestamp()


class FixedClock:
    """Callable clock that tests can move forward."""

    def __init__(self, now: float = NOW):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_weather(**overrides) -> WeatherData:
    values = dict(
        timestamp=datetime(2024, 6, 15, 12, 0, tzinfo=PACIFIC),
        temperature=58.0,
        wind_speed=5.0,
        wind_direction="NW",
        precipitation=0.0,
        cloud_cover=20,
        visibility=10.0,
        pressure=1016.0,
        humidity=70
    )
    values.update(overrides)
    return WeatherData(**values)


def make_tide(**overrides) -> TideData:
    values = dict(
        timestamp=datetime(2024, 6, 15, 19, 0, tzinfo=timezone.utc),
        height=1.4,
        type=TideType.RISING,
        next_high_tide=TideEvent(timestamp=datetime(2024, 6, 15, 22, 0, tzinfo=timezone.utc), height=2.9),
        next_low_tide=TideEvent(timestamp=datetime(2024, 6, 16, 4, 0, tzinfo=timezone.utc), height=0.2)
    )
    values.update(overrides)
    return TideData(**values)


class FakeWeatherClient:
    """Stands in for OpenWeatherMapClient; set ``error`` to make calls fail."""

    def __init__(self):
        self.current = make_weather()
        self.forecast = [
            make_weather(timestamp=datetime(2024, 6, 15 + i, 12, 0, tzinfo=PACIFIC), temperature=58.0 + i)
            for i in range(7)
        ]
        self.error = None
        self.calls = []

    async def get_current_weather(self, location):
        self.calls.append(("current", location.id))
        if self.error:
            raise self.error
        return self.current

    async def get_forecast(self, location, days):
        self.calls.append(("forecast", location.id, days))
        if self.error:
            raise self.error
        return self.forecast[:days]

    async def get_weather_for_datetime(self, location, dt):
        self.calls.append(("at", location.id, dt))
        if self.error:
            raise self.error
        return min(self.forecast, key=lambda w: abs(w.timestamp.timestamp() - dt.timestamp()))

    async def close(self):
        pass


class FakeTideClient:
    """Stands in for WorldTidesClient; set ``error`` to make calls fail."""

    def __init__(self):
        self.current = make_tide()
        self.predictions = [
            make_tide(timestamp=datetime(2024, 6, 15 + i, 12, 0, tzinfo=timezone.utc), height=1.0 + i / 10)
            for i in range(7)
        ]
        self.error = None
        self.calls = []

    async def get_current_tide(self, location):
        self.calls.append(("current", location.id))
        if self.error:
            raise self.error
        return self.current

    async def get_tide_predictions(self, location, days):
        self.calls.append(("predictions", location.id, days))
        if self.error:
            raise self.error
        return self.predictions[:days]

    async def get_tide_for_datetime(self, location, dt):
        self.calls.append(("at", location.id, dt))
        if self.error:
            raise self.error
        return self.current

    async def close(self):
        pass


class StubResponse:
    """Canned aiohttp response usable as an async context manager."""

    def __init__(self, status=200, payload=None, json_error=None):
        self.status = status
        self.payload = payload
        self.json_error = json_error

    async def json(self, content_type="application/json"):
        if self.json_error:
            raise self.json_error
        return self.payload

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False


class StubSession:
    """Replaces a client's aiohttp session; records every GET."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def get(self, url, params=None):
        self.requests.append((url, params))
        if self.error:
            raise self.error
        return self.response

    async def close(self):
        pass


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def session_factory():
    engine = build_engine("sqlite://")
    factory = create_session_factory(engine)
    init_database(engine, factory, settings.equipment_catalog_file)
    yield factory
    engine.dispose()


@pytest.fixture
def location():
    return Location(id="possession-bar", name="Possession Bar", latitude=47.9, longitude=-122.38, is_saved=True)


@pytest.fixture
def weather_client():
    return FakeWeatherClient()


@pytest.fixture
def tide_client():
    return FakeTideClient()
