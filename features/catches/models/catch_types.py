import time
import uuid
from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from features.equipment.models.equipment_types import FishSpecies

class CatchData(BaseModel):
    """A logged catch."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: float = Field(default_factory=time.time)  # epoch seconds
    location_id: str
    species: FishSpecies
    size: Optional[float] = None  # inches
    weight: Optional[float] = None  # pounds
    equipment_used: List[str] = []  # equipment ids
    weather_conditions_id: Optional[str] = None
    tide_conditions_id: Optional[str] = None
    notes: Optional[str] = None
    photo_urls: List[str] = []

    class Config:
        frozen = True

class PhotoRequest(BaseModel):
    photo_url: str

class RankedCount(BaseModel):
    key: str
    count: int

class DailyCount(BaseModel):
    date: str  # YYYY-MM-DD
    count: int

class CatchStatistics(BaseModel):
    """Aggregates over a user's catch history."""
    total_catches: int
    by_species: Dict[FishSpecies, int]
    by_location: Dict[str, int]
    by_month: Dict[int, int]
    average_size_by_species: Dict[FishSpecies, float]
    average_weight_by_species: Dict[FishSpecies, float]
    most_successful_equipment: List[RankedCount]
    most_successful_locations: List[RankedCount]
    catch_trend: List[DailyCount]
    tips: List[str]
