import uuid
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field

from features.equipment.models.equipment_types import FishSpecies, UserEquipment

class ExperienceLevel(str, Enum):
    BEGINNER = "BEGINNER"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"
    EXPERT = "EXPERT"

class FontSize(str, Enum):
    SMALL = "SMALL"
    MEDIUM = "MEDIUM"
    LARGE = "LARGE"
    EXTRA_LARGE = "EXTRA_LARGE"

class ImageQuality(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"

class NotificationSettings(BaseModel):
    enable_weather_alerts: bool = False
    enable_tide_alerts: bool = False
    enable_optimal_condition_alerts: bool = False

    class Config:
        frozen = True

class DisplaySettings(BaseModel):
    use_dark_mode: bool = False
    use_high_contrast_mode: bool = False
    use_metric_system: bool = False
    font_size: FontSize = FontSize.MEDIUM

    class Config:
        frozen = True

class DataSettings(BaseModel):
    data_refresh_interval: int = 30  # minutes
    wifi_only_downloads: bool = True
    image_quality: ImageQuality = ImageQuality.MEDIUM
    prefetch_data: bool = True
    location_update_frequency: int = 5  # minutes

    class Config:
        frozen = True

class UserPreferences(BaseModel):
    preferred_species: List[FishSpecies] = []
    preferred_equipment: List[str] = []  # equipment ids
    experience_level: ExperienceLevel = ExperienceLevel.BEGINNER
    notification_settings: NotificationSettings = NotificationSettings()
    display_settings: DisplaySettings = DisplaySettings()
    data_settings: DataSettings = DataSettings()

    class Config:
        frozen = True

class UserProfile(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: Optional[str] = None
    email: Optional[str] = None
    preferences: UserPreferences = UserPreferences()
    equipment_inventory: List[UserEquipment] = []
    is_anonymous: bool = True

    class Config:
        frozen = True

class AuthCredentials(BaseModel):
    email: str
    password: str

class AuthResult(BaseModel):
    """Outcome of an authentication action; failures carry a user-facing error."""
    success: bool
    user_id: Optional[str] = None
    token: Optional[str] = None
    error: Optional[str] = None

class ConvertAccountRequest(BaseModel):
    email: str
    password: str
    name: Optional[str] = None

class CreateAccountRequest(BaseModel):
    email: str
    password: str
    name: Optional[str] = None
