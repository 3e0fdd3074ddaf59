import logging
import time
from datetime import datetime, timezone
from typing import Callable, List, Optional

from features.common.exceptions.provider_exceptions import TideError, WeatherError
from features.locations.services.location_service import LocationService
from features.sync.models.sync_types import SyncState, SyncStatus
from features.sync.services.offline_data_service import OfflineDataService
from features.tides.services.cached_tide_service import CachedTideService
from features.weather.services.cached_weather_service import CachedWeatherService

logger = logging.getLogger(__name__)

class SyncService:
    """Refreshes current conditions for every saved location."""

    def __init__(
        self,
        location_service: LocationService,
        weather_service: CachedWeatherService,
        tide_service: CachedTideService,
        offline_data_service: OfflineDataService,
        clock: Callable[[], float] = time.time
    ):
        self.location_service = location_service
        self.weather_service = weather_service
        self.tide_service = tide_service
        self.offline_data_service = offline_data_service
        self.clock = clock
        self.status = SyncStatus.IDLE
        self.last_sync_time: Optional[datetime] = None
        self.failed_locations: List[str] = []

    async def sync_now(self, force: bool = False) -> SyncState:
        """Refresh stale locations, or every saved location when ``force`` is set."""
        if self.status == SyncStatus.SYNCING:
            logger.info("Sync already in progress")
            return self.get_state()

        self.status = SyncStatus.SYNCING
        failed = []

        try:
            locations = self.location_service.get_saved_locations()
            logger.info(f"Syncing {len(locations)} saved locations (force={force})")

            for location in locations:
                if not force and self.offline_data_service.is_data_fresh(location.id):
                    continue
                try:
                    await self.weather_service.get_current_weather(location, force_refresh=True)
                    await self.tide_service.get_current_tide(location, force_refresh=True)
                except (WeatherError, TideError) as e:
                    logger.error(f"Sync failed for location {location.id}: {str(e)}")
                    failed.append(location.id)

        except Exception as e:
            logger.error(f"Sync aborted: {str(e)}")
            self.status = SyncStatus.ERROR
            raise

        self.failed_locations = failed
        if failed:
            self.status = SyncStatus.ERROR
        else:
            self.status = SyncStatus.SUCCESS
            self.last_sync_time = datetime.fromtimestamp(self.clock(), tz=timezone.utc)

        return self.get_state()

    def get_state(self, next_scheduled_sync: Optional[str] = None) -> SyncState:
        return SyncState(
            status=self.status,
            last_sync_time=self.last_sync_time,
            next_scheduled_sync=next_scheduled_sync,
            failed_locations=list(self.failed_locations)
        )
