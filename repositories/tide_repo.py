from typing import List, Optional

from sqlalchemy import delete, select

from core.database import SessionFactory
from core.db_models import TideRecord
from features.common.utils.conversions import TimeConversions
from features.tides.models.tide_types import TideData, TideEvent, TideType
from repositories.cached_entry import CachedEntry

class TideRepository:
    """Cached current tide state and daily tide predictions, keyed by location."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def get_current(self, location_id: str) -> Optional[CachedEntry]:
        with self.session_factory() as session:
            record = session.scalars(
                select(TideRecord)
                .where(TideRecord.location_id == location_id, TideRecord.is_forecast.is_(False))
                .order_by(TideRecord.cache_timestamp.desc())
            ).first()
            if record is None:
                return None
            return CachedEntry(self._to_domain(record), record.cache_timestamp)

    def save_current(self, location_id: str, tide: TideData, cache_timestamp: float) -> None:
        with self.session_factory() as session:
            session.execute(
                delete(TideRecord)
                .where(TideRecord.location_id == location_id, TideRecord.is_forecast.is_(False))
            )
            session.add(self._to_record(location_id, tide, False, cache_timestamp))
            session.commit()

    def get_predictions(self, location_id: str) -> List[CachedEntry]:
        with self.session_factory() as session:
            records = session.scalars(
                select(TideRecord)
                .where(TideRecord.location_id == location_id, TideRecord.is_forecast.is_(True))
                .order_by(TideRecord.timestamp)
            ).all()
            return [CachedEntry(self._to_domain(r), r.cache_timestamp) for r in records]

    def save_predictions(self, location_id: str, predictions: List[TideData], cache_timestamp: float) -> None:
        with self.session_factory() as session:
            session.execute(
                delete(TideRecord)
                .where(TideRecord.location_id == location_id, TideRecord.is_forecast.is_(True))
            )
            session.add_all([
                self._to_record(location_id, tide, True, cache_timestamp)
                for tide in predictions
            ])
            session.commit()

    def delete_for_location(self, location_id: str) -> None:
        with self.session_factory() as session:
            session.execute(delete(TideRecord).where(TideRecord.location_id == location_id))
            session.commit()

    def delete_all(self) -> None:
        with self.session_factory() as session:
            session.execute(delete(TideRecord))
            session.commit()

    def get_location_ids(self) -> List[str]:
        with self.session_factory() as session:
            return list(session.scalars(select(TideRecord.location_id).distinct()).all())

    @staticmethod
    def _to_domain(record: TideRecord) -> TideData:
        next_high = None
        if record.next_high_time is not None:
            next_high = TideEvent(
                timestamp=TimeConversions.from_epoch(record.next_high_time),
                height=record.next_high_height
            )
        next_low = None
        if record.next_low_time is not None:
            next_low = TideEvent(
                timestamp=TimeConversions.from_epoch(record.next_low_time),
                height=record.next_low_height
            )
        return TideData(
            id=record.tide_id,
            timestamp=TimeConversions.from_epoch(record.timestamp),
            height=record.height,
            type=TideType(record.type),
            next_high_tide=next_high,
            next_low_tide=next_low
        )

    @staticmethod
    def _to_record(location_id: str, tide: TideData, is_forecast: bool, cache_timestamp: float) -> TideRecord:
        return TideRecord(
            tide_id=tide.id,
            location_id=location_id,
            timestamp=TimeConversions.to_epoch(tide.timestamp),
            height=tide.height,
            type=tide.type.value,
            next_high_time=TimeConversions.to_epoch(tide.next_high_tide.timestamp) if tide.next_high_tide else None,
            next_high_height=tide.next_high_tide.height if tide.next_high_tide else None,
            next_low_time=TimeConversions.to_epoch(tide.next_low_tide.timestamp) if tide.next_low_tide else None,
            next_low_height=tide.next_low_tide.height if tide.next_low_tide else None,
            is_forecast=is_forecast,
            cache_timestamp=cache_timestamp
        )
