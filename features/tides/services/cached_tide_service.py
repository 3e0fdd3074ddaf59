import logging
import time
from datetime import datetime
from typing import Awaitable, Callable, Dict, List, Optional, TypeVar

from core.config import settings
from features.common.exceptions.provider_exceptions import TideError, TideUnknownError
from features.common.models.location_types import Location
from features.common.utils.conversions import TimeConversions
from features.tides.models.tide_types import TideData
from features.tides.services.worldtides_client import WorldTidesClient
from repositories.tide_repo import TideRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")

class CachedTideService:
    """Tide lookups backed by the local tides table, with stale fallback."""

    def __init__(
        self,
        client: WorldTidesClient,
        repository: TideRepository,
        ttls: Optional[Dict[str, Optional[int]]] = None,
        clock: Callable[[], float] = time.time
    ):
        self.client = client
        self.repository = repository
        ttls = ttls or settings.get_cache_ttl()
        self.current_ttl = ttls["current_tide"]
        self.forecast_ttl = ttls["tide_forecast"]
        self.clock = clock

    async def get_current_tide(self, location: Location, force_refresh: bool = False) -> TideData:
        cached = self.repository.get_current(location.id)
        now = self.clock()

        if cached and not force_refresh and now - cached.cache_timestamp < self.current_ttl:
            return cached.data

        try:
            tide = await self._call(self.client.get_current_tide(location))
        except TideError as e:
            if cached:
                logger.warning(f"Using stale current tide for {location.id}: {str(e)}")
                return cached.data
            logger.error(f"No tide available for {location.id}: {str(e)}")
            raise

        self.repository.save_current(location.id, tide, now)
        return tide

    async def get_tide_predictions(self, location: Location, days: int, force_refresh: bool = False) -> List[TideData]:
        cached = self.repository.get_predictions(location.id)
        now = self.clock()

        if (
            cached
            and not force_refresh
            and len(cached) >= days
            and now - cached[0].cache_timestamp < self.forecast_ttl
        ):
            return [entry.data for entry in cached[:days]]

        try:
            predictions = await self._call(self.client.get_tide_predictions(location, days))
        except TideError as e:
            if cached:
                logger.warning(f"Using stale tide predictions for {location.id}: {str(e)}")
                return [entry.data for entry in cached[:days]]
            logger.error(f"No tide predictions available for {location.id}: {str(e)}")
            raise

        self.repository.save_predictions(location.id, predictions, now)
        return predictions

    async def get_tide_for_datetime(self, location: Location, dt: datetime) -> TideData:
        dt = TimeConversions.ensure_aware(dt)
        cached = self.repository.get_predictions(location.id)

        if cached and self.clock() - cached[0].cache_timestamp < self.forecast_ttl:
            for entry in cached:
                tide_time = entry.data.timestamp
                if tide_time.date() == dt.astimezone(tide_time.tzinfo).date():
                    return entry.data

        try:
            # Covered by the predictions cache, so not stored separately
            return await self._call(self.client.get_tide_for_datetime(location, dt))
        except TideError as e:
            if cached:
                logger.warning(f"Using closest cached tide prediction for {location.id}: {str(e)}")
                target = dt.timestamp()
                closest = min(cached, key=lambda entry: abs(entry.data.timestamp.timestamp() - target))
                return closest.data
            raise

    def clear_cache(self) -> None:
        logger.info("Clearing cached tide data")
        self.repository.delete_all()

    @staticmethod
    async def _call(request: Awaitable[T]) -> T:
        """Await a provider call, surfacing unexpected failures as TideUnknownError."""
        try:
            return await request
        except TideError:
            raise
        except Exception as e:
            logger.error(f"Unexpected error on tide request: {str(e)}")
            raise TideUnknownError(str(e)) from e
