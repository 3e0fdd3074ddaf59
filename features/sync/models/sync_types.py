from datetime import datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel

class SyncStatus(str, Enum):
    IDLE = "IDLE"
    SYNCING = "SYNCING"
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"

class SyncState(BaseModel):
    status: SyncStatus
    last_sync_time: Optional[datetime] = None
    next_scheduled_sync: Optional[str] = None
    failed_locations: List[str] = []

class DataFreshness(BaseModel):
    """Freshness of cached current conditions for one location."""
    location_id: str
    has_cached_data: bool
    is_fresh: bool
    freshness_percentage: int
    expires_at: Optional[datetime] = None
