import logging
from typing import List, Optional

from features.catches.models.catch_types import CatchData
from features.common.exceptions.domain_exceptions import CatchConflictError, CatchNotFoundError
from features.equipment.models.equipment_types import FishSpecies
from repositories.catch_repo import CatchRepository

logger = logging.getLogger(__name__)

class CatchLogService:
    def __init__(self, repository: CatchRepository):
        self.repository = repository

    def log_catch(self, user_id: str, catch: CatchData) -> CatchData:
        owner = self.repository.get_owner(catch.id)
        if owner is not None and owner != user_id:
            raise CatchConflictError(f"Catch id {catch.id} is already in use")
        self.repository.upsert(user_id, catch)
        logger.info(f"Logged {catch.species.value} catch {catch.id} for {user_id}")
        return catch

    def get_catch_history(self, user_id: str) -> List[CatchData]:
        return self.repository.list_catches(user_id)

    def get_catches_by_location(self, user_id: str, location_id: str) -> List[CatchData]:
        return self.repository.list_catches(user_id, location_id=location_id)

    def get_catches_by_species(self, user_id: str, species: FishSpecies) -> List[CatchData]:
        return self.repository.list_catches(user_id, species=species.value)

    def get_catch(self, user_id: str, catch_id: str) -> CatchData:
        catch = self.repository.get_catch(user_id, catch_id)
        if catch is None:
            raise CatchNotFoundError(f"Catch {catch_id} not found")
        return catch

    def update_catch(self, user_id: str, catch: CatchData) -> CatchData:
        self.get_catch(user_id, catch.id)
        self.repository.upsert(user_id, catch)
        return catch

    def delete_catch(self, user_id: str, catch_id: str) -> None:
        if not self.repository.delete(user_id, catch_id):
            raise CatchNotFoundError(f"Catch {catch_id} not found")
        logger.info(f"Deleted catch {catch_id}")

    def add_photo(self, user_id: str, catch_id: str, photo_url: str) -> CatchData:
        catch = self.get_catch(user_id, catch_id)
        if photo_url in catch.photo_urls:
            return catch
        updated = catch.model_copy(update={"photo_urls": [*catch.photo_urls, photo_url]})
        self.repository.upsert(user_id, updated)
        return updated

    def remove_photo(self, user_id: str, catch_id: str, photo_url: str) -> CatchData:
        catch = self.get_catch(user_id, catch_id)
        updated = catch.model_copy(update={"photo_urls": [u for u in catch.photo_urls if u != photo_url]})
        self.repository.upsert(user_id, updated)
        return updated
