from typing import List, Optional

from sqlalchemy import delete, select

from core.database import SessionFactory
from core.db_models import LocationRecord
from features.common.models.location_types import Location

class LocationRepository:
    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def list_locations(self) -> List[Location]:
        with self.session_factory() as session:
            records = session.scalars(select(LocationRecord).order_by(LocationRecord.name)).all()
            return [self._to_domain(r) for r in records]

    def get_location(self, location_id: str) -> Optional[Location]:
        with self.session_factory() as session:
            record = session.get(LocationRecord, location_id)
            return self._to_domain(record) if record else None

    def upsert(self, location: Location) -> None:
        with self.session_factory() as session:
            session.merge(LocationRecord(
                location_id=location.id,
                name=location.name,
                latitude=location.latitude,
                longitude=location.longitude,
                notes=location.notes
            ))
            session.commit()

    def delete(self, location_id: str) -> bool:
        with self.session_factory() as session:
            result = session.execute(delete(LocationRecord).where(LocationRecord.location_id == location_id))
            session.commit()
            return result.rowcount > 0

    @staticmethod
    def _to_domain(record: LocationRecord) -> Location:
        # Everything in this table has been saved by the user
        return Location(
            id=record.location_id,
            name=record.name,
            latitude=record.latitude,
            longitude=record.longitude,
            is_saved=True,
            notes=record.notes
        )
