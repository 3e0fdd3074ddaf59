import logging
from typing import List, Optional

from features.common.exceptions.domain_exceptions import EquipmentNotFoundError
from features.equipment.models.equipment_types import EquipmentItem, EquipmentType
from repositories.equipment_repo import EquipmentRepository

logger = logging.getLogger(__name__)

class EquipmentService:
    """Read-mostly access to the equipment catalog.

    The catalog is static between edits, so it is loaded once and kept in
    memory until the next write.
    """

    def __init__(self, repository: EquipmentRepository):
        self.repository = repository
        self._catalog: Optional[List[EquipmentItem]] = None

    def get_catalog(self) -> List[EquipmentItem]:
        if self._catalog is None:
            self._catalog = self.repository.get_all()
            logger.info(f"Loaded {len(self._catalog)} equipment items")
        return self._catalog

    def get_by_id(self, equipment_id: str) -> Optional[EquipmentItem]:
        return next((item for item in self.get_catalog() if item.id == equipment_id), None)

    def require(self, equipment_id: str) -> EquipmentItem:
        item = self.get_by_id(equipment_id)
        if item is None:
            raise EquipmentNotFoundError(f"Equipment {equipment_id} not found")
        return item

    def get_by_type(self, equipment_type: EquipmentType) -> List[EquipmentItem]:
        return [item for item in self.get_catalog() if item.type == equipment_type]

    def save(self, item: EquipmentItem) -> EquipmentItem:
        self.repository.upsert(item)
        self._catalog = None
        return item

    def delete(self, equipment_id: str) -> None:
        if not self.repository.delete(equipment_id):
            raise EquipmentNotFoundError(f"Equipment {equipment_id} not found")
        self._catalog = None
