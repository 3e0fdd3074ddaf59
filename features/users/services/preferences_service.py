import logging
from typing import List

from features.common.exceptions.domain_exceptions import (
    EquipmentNotFoundError,
    UserEquipmentConflictError,
    UserNotFoundError,
)
from features.equipment.models.equipment_types import FishSpecies, UserEquipment
from features.users.models.user_types import (
    DataSettings,
    DisplaySettings,
    ExperienceLevel,
    NotificationSettings,
    UserPreferences,
)
from repositories.user_repo import UserRepository

logger = logging.getLogger(__name__)

class PreferencesService:
    """Per-user preferences and equipment inventory."""

    def __init__(self, repository: UserRepository):
        self.repository = repository

    def get_preferences(self, user_id: str) -> UserPreferences:
        preferences = self.repository.get_preferences(user_id)
        if preferences is None:
            raise UserNotFoundError(f"User {user_id} not found")
        return preferences

    def update_preferences(self, user_id: str, preferences: UserPreferences) -> UserPreferences:
        if not self.repository.save_preferences(user_id, preferences):
            raise UserNotFoundError(f"User {user_id} not found")
        logger.debug(f"Updated preferences for {user_id}")
        return preferences

    def reset_preferences(self, user_id: str) -> UserPreferences:
        return self.update_preferences(user_id, UserPreferences())

    def update_preferred_species(self, user_id: str, species: List[FishSpecies]) -> UserPreferences:
        return self._update(user_id, preferred_species=species)

    def update_preferred_equipment(self, user_id: str, equipment_ids: List[str]) -> UserPreferences:
        return self._update(user_id, preferred_equipment=equipment_ids)

    def update_experience_level(self, user_id: str, experience_level: ExperienceLevel) -> UserPreferences:
        return self._update(user_id, experience_level=experience_level)

    def update_notification_settings(self, user_id: str, settings: NotificationSettings) -> UserPreferences:
        return self._update(user_id, notification_settings=settings)

    def update_display_settings(self, user_id: str, settings: DisplaySettings) -> UserPreferences:
        return self._update(user_id, display_settings=settings)

    def update_data_settings(self, user_id: str, settings: DataSettings) -> UserPreferences:
        return self._update(user_id, data_settings=settings)

    def get_user_equipment(self, user_id: str) -> List[UserEquipment]:
        self.get_preferences(user_id)
        return self.repository.get_equipment(user_id)

    def add_user_equipment(self, user_id: str, equipment: UserEquipment) -> UserEquipment:
        self.get_preferences(user_id)
        owner = self.repository.get_equipment_owner(equipment.id)
        if owner is not None and owner != user_id:
            raise UserEquipmentConflictError(f"Equipment entry {equipment.id} is already in use")
        self.repository.upsert_equipment(user_id, equipment)
        return equipment

    def update_user_equipment(self, user_id: str, equipment: UserEquipment) -> UserEquipment:
        existing = self.get_user_equipment(user_id)
        if not any(e.id == equipment.id for e in existing):
            raise EquipmentNotFoundError(f"User equipment {equipment.id} not found")
        self.repository.upsert_equipment(user_id, equipment)
        return equipment

    def remove_user_equipment(self, user_id: str, equipment_id: str) -> None:
        """Remove every inventory entry referring to catalog item ``equipment_id``."""
        if not self.repository.delete_equipment(user_id, equipment_id):
            raise EquipmentNotFoundError(f"Equipment {equipment_id} not in inventory")

    def _update(self, user_id: str, **changes) -> UserPreferences:
        current = self.get_preferences(user_id)
        return self.update_preferences(user_id, current.model_copy(update=changes))
