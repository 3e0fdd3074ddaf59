from typing import Optional
from pydantic import BaseModel, Field

class Location(BaseModel):
    """A fishing spot, optionally saved by the user."""
    id: str
    name: str
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    is_saved: bool = False
    notes: Optional[str] = None

    class Config:
        frozen = True
