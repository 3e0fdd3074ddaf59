from typing import List, Optional

from sqlalchemy import delete, func, select

from core.database import SessionFactory
from core.db_models import WeatherRecord
from features.common.utils.conversions import TimeConversions
from features.weather.models.weather_types import WeatherData
from repositories.cached_entry import CachedEntry

class WeatherRepository:
    """Cached current and forecast weather rows, keyed by location."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def get_current(self, location_id: str) -> Optional[CachedEntry]:
        with self.session_factory() as session:
            record = session.scalars(
                select(WeatherRecord)
                .where(WeatherRecord.location_id == location_id, WeatherRecord.is_forecast.is_(False))
                .order_by(WeatherRecord.cache_timestamp.desc())
            ).first()
            if record is None:
                return None
            return CachedEntry(self._to_domain(record), record.cache_timestamp)

    def save_current(self, location_id: str, weather: WeatherData, cache_timestamp: float) -> None:
        with self.session_factory() as session:
            session.execute(
                delete(WeatherRecord)
                .where(WeatherRecord.location_id == location_id, WeatherRecord.is_forecast.is_(False))
            )
            session.add(self._to_record(location_id, weather, False, cache_timestamp))
            session.commit()

    def get_forecast(self, location_id: str) -> List[CachedEntry]:
        with self.session_factory() as session:
            records = session.scalars(
                select(WeatherRecord)
                .where(WeatherRecord.location_id == location_id, WeatherRecord.is_forecast.is_(True))
                .order_by(WeatherRecord.timestamp)
            ).all()
            return [CachedEntry(self._to_domain(r), r.cache_timestamp) for r in records]

    def save_forecast(self, location_id: str, forecast: List[WeatherData], cache_timestamp: float) -> None:
        with self.session_factory() as session:
            session.execute(
                delete(WeatherRecord)
                .where(WeatherRecord.location_id == location_id, WeatherRecord.is_forecast.is_(True))
            )
            session.add_all([
                self._to_record(location_id, weather, True, cache_timestamp)
                for weather in forecast
            ])
            session.commit()

    def delete_for_location(self, location_id: str) -> None:
        with self.session_factory() as session:
            session.execute(delete(WeatherRecord).where(WeatherRecord.location_id == location_id))
            session.commit()

    def delete_all(self) -> None:
        with self.session_factory() as session:
            session.execute(delete(WeatherRecord))
            session.commit()

    def get_location_ids(self) -> List[str]:
        with self.session_factory() as session:
            return list(session.scalars(select(WeatherRecord.location_id).distinct()).all())

    def count(self) -> int:
        with self.session_factory() as session:
            return session.scalar(select(func.count()).select_from(WeatherRecord)) or 0

    @staticmethod
    def _to_domain(record: WeatherRecord) -> WeatherData:
        return WeatherData(
            id=record.weather_id,
            timestamp=TimeConversions.from_epoch(record.timestamp, record.utc_offset),
            temperature=record.temperature,
            wind_speed=record.wind_speed,
            wind_direction=record.wind_direction,
            precipitation=record.precipitation,
            cloud_cover=record.cloud_cover,
            visibility=record.visibility,
            pressure=record.pressure,
            humidity=record.humidity,
            uv_index=record.uv_index,
            water_temperature=record.water_temperature
        )

    @staticmethod
    def _to_record(location_id: str, weather: WeatherData, is_forecast: bool, cache_timestamp: float) -> WeatherRecord:
        return WeatherRecord(
            weather_id=weather.id,
            location_id=location_id,
            timestamp=TimeConversions.to_epoch(weather.timestamp),
            utc_offset=TimeConversions.utc_offset_seconds(weather.timestamp),
            temperature=weather.temperature,
            wind_speed=weather.wind_speed,
            wind_direction=weather.wind_direction,
            precipitation=weather.precipitation,
            cloud_cover=weather.cloud_cover,
            visibility=weather.visibility,
            pressure=weather.pressure,
            humidity=weather.humidity,
            uv_index=weather.uv_index,
            water_temperature=weather.water_temperature,
            is_forecast=is_forecast,
            cache_timestamp=cache_timestamp
        )
