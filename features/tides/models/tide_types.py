import uuid
from datetime import datetime
from enum import Enum
from typing import Optional, List
from pydantic import BaseModel, Field

class TideType(str, Enum):
    HIGH = "HIGH"
    LOW = "LOW"
    RISING = "RISING"
    FALLING = "FALLING"

class TideEvent(BaseModel):
    """A predicted high or low water."""
    timestamp: datetime
    height: float  # meters above datum

    class Config:
        frozen = True

class TideData(BaseModel):
    """Tide state at a location for a single point in time."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime
    height: float  # meters above datum
    type: TideType
    next_high_tide: Optional[TideEvent] = None
    next_low_tide: Optional[TideEvent] = None

    class Config:
        frozen = True

class TideExtreme(BaseModel):
    """Single entry of the provider's extremes list."""
    dt: int  # epoch seconds
    height: float
    type: str  # "High" or "Low"

class TidePredictionsResponse(BaseModel):
    location_id: str
    days: int
    predictions: List[TideData]
