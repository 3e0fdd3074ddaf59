import logging
from typing import List

from features.common.exceptions.domain_exceptions import LocationNotFoundError
from features.common.models.location_types import Location
from repositories.location_repo import LocationRepository

logger = logging.getLogger(__name__)

class LocationService:
    """Saved fishing locations."""

    def __init__(self, repository: LocationRepository):
        self.repository = repository

    def get_saved_locations(self) -> List[Location]:
        return self.repository.list_locations()

    def get_location(self, location_id: str) -> Location:
        location = self.repository.get_location(location_id)
        if location is None:
            raise LocationNotFoundError(f"Location {location_id} not found")
        return location

    def save_location(self, location: Location) -> Location:
        saved = location.model_copy(update={"is_saved": True})
        self.repository.upsert(saved)
        logger.info(f"Saved location {saved.id} ({saved.name})")
        return saved

    def delete_location(self, location_id: str) -> None:
        if not self.repository.delete(location_id):
            raise LocationNotFoundError(f"Location {location_id} not found")
        logger.info(f"Deleted location {location_id}")
