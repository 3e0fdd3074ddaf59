import uuid
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field

class WeatherData(BaseModel):
    """Weather conditions at a location for a single point in time."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime  # aware, in the location's local offset
    temperature: float  # Fahrenheit
    wind_speed: float  # mph
    wind_direction: str  # 16-point compass
    precipitation: float = 0.0  # mm
    cloud_cover: int  # percent
    visibility: float  # km
    pressure: float  # hPa
    humidity: int  # percent
    uv_index: int = 0
    water_temperature: Optional[float] = None

    class Config:
        frozen = True

class WeatherForecastResponse(BaseModel):
    """Daily forecast for a location."""
    location_id: str
    days: int
    forecast: List[WeatherData]
