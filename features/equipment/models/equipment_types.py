import time
import uuid
from enum import Enum
from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from features.tides.models.tide_types import TideData, TideType
from features.weather.models.weather_types import WeatherData

class EquipmentType(str, Enum):
    FLASHER = "FLASHER"
    LURE = "LURE"
    LEADER = "LEADER"

class FishSpecies(str, Enum):
    CHINOOK = "CHINOOK"
    COHO = "COHO"
    SOCKEYE = "SOCKEYE"
    PINK = "PINK"
    CHUM = "CHUM"
    STEELHEAD = "STEELHEAD"
    ATLANTIC = "ATLANTIC"

class EquipmentItem(BaseModel):
    """Catalog entry with the conditions it is suited to.

    A condition list left as None matches every condition of that kind.
    """
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    description: str
    type: EquipmentType
    image_url: Optional[str] = None
    specifications: Dict[str, str] = {}
    target_species: Optional[List[FishSpecies]] = None
    water_clarity_conditions: Optional[List[str]] = None
    light_conditions: Optional[List[str]] = None
    weather_conditions: Optional[List[str]] = None
    tide_conditions: Optional[List[TideType]] = None

    class Config:
        frozen = True
        from_attributes = True

    @property
    def size(self) -> Optional[str]:
        return self.specifications.get("size")

    @property
    def color(self) -> Optional[str]:
        return self.specifications.get("color")

    @property
    def length(self) -> Optional[str]:
        return self.specifications.get("length")

    @property
    def material(self) -> Optional[str]:
        return self.specifications.get("material")

    @property
    def weight(self) -> Optional[str]:
        return self.specifications.get("weight")

class EquipmentRecommendation(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    type: EquipmentType
    items: List[EquipmentItem]
    reason_for_recommendation: str
    confidence_score: float = Field(..., ge=0.0, le=1.0)

    class Config:
        frozen = True

class UserEquipment(BaseModel):
    """A piece of gear in a user's tackle box."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    equipment_id: str
    equipment_type: EquipmentType = EquipmentType.FLASHER
    name: str = ""
    color: Optional[str] = None
    size: Optional[str] = None
    brand: Optional[str] = None
    is_favorite: bool = False
    notes: Optional[str] = None
    date_added: float = Field(default_factory=time.time)  # epoch seconds

    class Config:
        frozen = True

class RecommendationDetail(BaseModel):
    """Recommendation with its display explanation and confidence labels."""
    recommendation: EquipmentRecommendation
    detailed_explanation: str
    confidence_description: str
    confidence_color: str

class RecommendationReport(BaseModel):
    location_id: str
    species: Optional[FishSpecies] = None
    water_clarity: str
    light_condition: str
    weather_condition: str
    tide_type: TideType
    recommendations: List[RecommendationDetail]

class RecommendationRequest(BaseModel):
    """Conditions supplied by the caller instead of looked up for a location."""
    location_id: str = "custom"
    weather: WeatherData
    tide: TideData
    species: Optional[FishSpecies] = None
