import logging
import time
from datetime import datetime, timezone
from typing import Callable, List, Optional

from core.config import settings
from features.sync.models.sync_types import DataFreshness
from repositories.tide_repo import TideRepository
from repositories.weather_repo import WeatherRepository

logger = logging.getLogger(__name__)

class OfflineDataService:
    """Freshness tracking over the cached current weather and tide rows."""

    def __init__(
        self,
        weather_repository: WeatherRepository,
        tide_repository: TideRepository,
        freshness_threshold: Optional[int] = None,
        clock: Callable[[], float] = time.time
    ):
        self.weather_repository = weather_repository
        self.tide_repository = tide_repository
        self.freshness_threshold = freshness_threshold or settings.data_freshness_threshold
        self.clock = clock

    def _cache_timestamps(self, location_id: str) -> List[Optional[float]]:
        weather = self.weather_repository.get_current(location_id)
        tide = self.tide_repository.get_current(location_id)
        return [
            weather.cache_timestamp if weather else None,
            tide.cache_timestamp if tide else None
        ]

    def is_data_fresh(self, location_id: str) -> bool:
        """Both current weather and current tide exist and are within the threshold."""
        now = self.clock()
        return all(
            ts is not None and now - ts < self.freshness_threshold
            for ts in self._cache_timestamps(location_id)
        )

    def get_data_freshness_percentage(self, location_id: str) -> int:
        """100 for just-fetched data, 0 for missing or fully stale data."""
        now = self.clock()
        percentages = []
        for ts in self._cache_timestamps(location_id):
            age = now - ts if ts is not None else self.freshness_threshold
            remaining = max(0.0, self.freshness_threshold - age)
            percentages.append(int(remaining * 100 // self.freshness_threshold))
        return sum(percentages) // len(percentages)

    def get_data_expiration_time(self, location_id: str) -> Optional[datetime]:
        timestamps = [ts for ts in self._cache_timestamps(location_id) if ts is not None]
        if not timestamps:
            return None
        return datetime.fromtimestamp(max(timestamps) + self.freshness_threshold, tz=timezone.utc)

    def has_cached_data(self, location_id: str) -> bool:
        return any(ts is not None for ts in self._cache_timestamps(location_id))

    def get_freshness(self, location_id: str) -> DataFreshness:
        return DataFreshness(
            location_id=location_id,
            has_cached_data=self.has_cached_data(location_id),
            is_fresh=self.is_data_fresh(location_id),
            freshness_percentage=self.get_data_freshness_percentage(location_id),
            expires_at=self.get_data_expiration_time(location_id)
        )

    def clear_cached_data(self, location_id: str) -> None:
        logger.info(f"Clearing cached data for {location_id}")
        self.weather_repository.delete_for_location(location_id)
        self.tide_repository.delete_for_location(location_id)

    def clear_all_cached_data(self) -> None:
        logger.info("Clearing all cached weather and tide data")
        self.weather_repository.delete_all()
        self.tide_repository.delete_all()

    def get_locations_with_cached_data(self) -> List[str]:
        location_ids = set(self.weather_repository.get_location_ids())
        location_ids.update(self.tide_repository.get_location_ids())
        return sorted(location_ids)
