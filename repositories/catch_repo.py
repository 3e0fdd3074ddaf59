from typing import List, Optional

from sqlalchemy import delete, select

from core.database import SessionFactory
from core.db_models import CatchRecord
from features.catches.models.catch_types import CatchData

class CatchRepository:
    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def list_catches(self, user_id: str, location_id: Optional[str] = None,
                     species: Optional[str] = None) -> List[CatchData]:
        query = select(CatchRecord).where(CatchRecord.user_id == user_id)
        if location_id is not None:
            query = query.where(CatchRecord.location_id == location_id)
        if species is not None:
            query = query.where(CatchRecord.species == species)

        with self.session_factory() as session:
            records = session.scalars(query.order_by(CatchRecord.timestamp.desc())).all()
            return [self._to_domain(r) for r in records]

    def get_catch(self, user_id: str, catch_id: str) -> Optional[CatchData]:
        with self.session_factory() as session:
            record = session.get(CatchRecord, catch_id)
            if record is None or record.user_id != user_id:
                return None
            return self._to_domain(record)

    def get_owner(self, catch_id: str) -> Optional[str]:
        with self.session_factory() as session:
            record = session.get(CatchRecord, catch_id)
            return record.user_id if record else None

    def upsert(self, user_id: str, catch: CatchData) -> None:
        with self.session_factory() as session:
            session.merge(CatchRecord(
                catch_id=catch.id,
                user_id=user_id,
                timestamp=catch.timestamp,
                location_id=catch.location_id,
                species=catch.species.value,
                size=catch.size,
                weight=catch.weight,
                equipment_used=list(catch.equipment_used),
                weather_conditions_id=catch.weather_conditions_id,
                tide_conditions_id=catch.tide_conditions_id,
                notes=catch.notes,
                photo_urls=list(catch.photo_urls)
            ))
            session.commit()

    def delete(self, user_id: str, catch_id: str) -> bool:
        with self.session_factory() as session:
            result = session.execute(
                delete(CatchRecord).where(CatchRecord.catch_id == catch_id, CatchRecord.user_id == user_id)
            )
            session.commit()
            return result.rowcount > 0

    @staticmethod
    def _to_domain(record: CatchRecord) -> CatchData:
        return CatchData(
            id=record.catch_id,
            timestamp=record.timestamp,
            location_id=record.location_id,
            species=record.species,
            size=record.size,
            weight=record.weight,
            equipment_used=record.equipment_used or [],
            weather_conditions_id=record.weather_conditions_id,
            tide_conditions_id=record.tide_conditions_id,
            notes=record.notes,
            photo_urls=record.photo_urls or []
        )
