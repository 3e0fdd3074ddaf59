from typing import List, Optional

from sqlalchemy import delete, func, select

from core.database import SessionFactory
from core.db_models import EquipmentRecord
from features.equipment.models.equipment_types import EquipmentItem, EquipmentType

class EquipmentRepository:
    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def get_all(self) -> List[EquipmentItem]:
        with self.session_factory() as session:
            records = session.scalars(select(EquipmentRecord).order_by(EquipmentRecord.position)).all()
            return [self._to_domain(r) for r in records]

    def get_by_id(self, equipment_id: str) -> Optional[EquipmentItem]:
        with self.session_factory() as session:
            record = session.get(EquipmentRecord, equipment_id)
            return self._to_domain(record) if record else None

    def get_by_type(self, equipment_type: EquipmentType) -> List[EquipmentItem]:
        with self.session_factory() as session:
            records = session.scalars(
                select(EquipmentRecord)
                .where(EquipmentRecord.type == equipment_type.value)
                .order_by(EquipmentRecord.position)
            ).all()
            return [self._to_domain(r) for r in records]

    def upsert(self, item: EquipmentItem) -> None:
        with self.session_factory() as session:
            existing = session.get(EquipmentRecord, item.id)
            if existing is not None:
                position = existing.position
            else:
                # New items go to the end of the catalog
                last = session.scalar(select(func.max(EquipmentRecord.position)))
                position = 0 if last is None else last + 1

            session.merge(EquipmentRecord(
                equipment_id=item.id,
                name=item.name,
                description=item.description,
                type=item.type.value,
                image_url=item.image_url,
                specifications=dict(item.specifications),
                target_species=[s.value for s in item.target_species] if item.target_species is not None else None,
                water_clarity_conditions=item.water_clarity_conditions,
                light_conditions=item.light_conditions,
                weather_conditions=item.weather_conditions,
                tide_conditions=[t.value for t in item.tide_conditions] if item.tide_conditions is not None else None,
                position=position
            ))
            session.commit()

    def delete(self, equipment_id: str) -> bool:
        with self.session_factory() as session:
            result = session.execute(delete(EquipmentRecord).where(EquipmentRecord.equipment_id == equipment_id))
            session.commit()
            return result.rowcount > 0

    @staticmethod
    def _to_domain(record: EquipmentRecord) -> EquipmentItem:
        return EquipmentItem(
            id=record.equipment_id,
            name=record.name,
            description=record.description,
            type=record.type,
            image_url=record.image_url,
            specifications=record.specifications or {},
            target_species=record.target_species,
            water_clarity_conditions=record.water_clarity_conditions,
            light_conditions=record.light_conditions,
            weather_conditions=record.weather_conditions,
            tide_conditions=record.tide_conditions
        )
