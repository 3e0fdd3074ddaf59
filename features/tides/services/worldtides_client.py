import asyncio
import logging
import time
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

import aiohttp

from core.config import settings
from features.common.exceptions.provider_exceptions import (
    InvalidTideLocationError,
    NoTideDataError,
    TideError,
    TideNetworkError,
    TideServerError,
    TideUnknownError,
)
from features.common.models.location_types import Location
from features.common.utils.conversions import TimeConversions
from features.tides.models.tide_types import TideData, TideEvent, TideExtreme, TideType

logger = logging.getLogger(__name__)

def calculate_tide_state(at: datetime, extremes: List[TideExtreme]) -> TideData:
    """Interpolate the tide at ``at`` from a list of high/low extremes.

    The state between a High and the following Low is FALLING, between a Low
    and the following High is RISING. Outside the covered window the nearest
    extreme's type (HIGH or LOW) is used.
    """
    at = TimeConversions.ensure_aware(at)
    target = at.timestamp()
    ordered = sorted(extremes, key=lambda e: e.dt)

    previous: Optional[TideExtreme] = None
    following: Optional[TideExtreme] = None
    for extreme in ordered:
        if extreme.dt < target:
            previous = extreme
        else:
            following = extreme
            break

    if previous is None and ordered:
        previous = ordered[0]
    if following is None and ordered:
        following = ordered[-1]

    if previous is not None and following is not None:
        total = following.dt - previous.dt
        if total > 0:
            ratio = (target - previous.dt) / total
            height = previous.height + (following.height - previous.height) * ratio
        else:
            height = previous.height

        if previous.type == "High" and following.type == "Low":
            tide_type = TideType.FALLING
        elif previous.type == "Low" and following.type == "High":
            tide_type = TideType.RISING
        elif previous.type == "High":
            tide_type = TideType.HIGH
        else:
            tide_type = TideType.LOW
    else:
        height = 0.0
        tide_type = TideType.LOW

    next_high = next((e for e in ordered if e.type == "High" and e.dt > target), None)
    next_low = next((e for e in ordered if e.type == "Low" and e.dt > target), None)

    return TideData(
        timestamp=at,
        height=height,
        type=tide_type,
        next_high_tide=_to_event(next_high),
        next_low_tide=_to_event(next_low)
    )

def group_extremes_by_day(extremes: List[TideExtreme]) -> List[TideData]:
    """One tide state per UTC day, evaluated at noon from that day's extremes."""
    by_day: Dict[Any, List[TideExtreme]] = defaultdict(list)
    for extreme in extremes:
        day = datetime.fromtimestamp(extreme.dt, tz=timezone.utc).date()
        by_day[day].append(extreme)

    predictions = [
        calculate_tide_state(
            datetime(day.year, day.month, day.day, 12, tzinfo=timezone.utc),
            day_extremes
        )
        for day, day_extremes in by_day.items()
    ]
    return sorted(predictions, key=lambda t: t.timestamp)

def _to_event(extreme: Optional[TideExtreme]) -> Optional[TideEvent]:
    if extreme is None:
        return None
    return TideEvent(
        timestamp=datetime.fromtimestamp(extreme.dt, tz=timezone.utc),
        height=extreme.height
    )

class WorldTidesClient:
    """Client for the WorldTides v2 extremes API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        datum: Optional[str] = None,
        clock: Callable[[], float] = time.time
    ):
        self.api_key = api_key if api_key is not None else settings.worldtides_api_key
        self.base_url = base_url or settings.worldtides_base_url
        self.datum = datum or settings.tide_datum
        self.clock = clock
        self._session: Optional[aiohttp.ClientSession] = None

    async def _init_session(self) -> aiohttp.ClientSession:
        if not self._session:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=settings.request["timeout"])
            )
        return self._session

    async def close(self):
        if self._session:
            await self._session.close()
            self._session = None

    def _now(self) -> datetime:
        return datetime.fromtimestamp(self.clock(), tz=timezone.utc)

    async def get_current_tide(self, location: Location) -> TideData:
        now = self._now()
        extremes = await self._get_extremes(location, now, days=2)
        return calculate_tide_state(now, extremes)

    async def get_tide_predictions(self, location: Location, days: int) -> List[TideData]:
        limited_days = min(days, settings.max_forecast_days)
        extremes = await self._get_extremes(location, self._now(), days=limited_days)
        return group_extremes_by_day(extremes)

    async def get_tide_for_datetime(self, location: Location, dt: datetime) -> TideData:
        # Cover the day before and after so both neighbouring extremes are present
        dt = TimeConversions.ensure_aware(dt)
        extremes = await self._get_extremes(location, dt - timedelta(days=1), days=3)
        return calculate_tide_state(dt, extremes)

    async def _get_extremes(self, location: Location, start: datetime, days: int) -> List[TideExtreme]:
        params = {
            "extremes": "",
            "lat": location.latitude,
            "lon": location.longitude,
            "date": start.astimezone(timezone.utc).strftime("%Y-%m-%d"),
            "days": days,
            "datum": self.datum,
            "key": self.api_key
        }

        try:
            session = await self._init_session()
            async with session.get(self.base_url, params=params) as response:
                try:
                    payload = await response.json(content_type=None)
                except ValueError:
                    payload = {}
                status = payload.get("status", response.status) if isinstance(payload, dict) else response.status

            if status != 200:
                raise self._error_for_status(status, payload.get("error") if isinstance(payload, dict) else None)

            extremes = payload.get("extremes") or []
            if not extremes:
                raise NoTideDataError(f"No tide extremes available for location {location.id}")

            return [TideExtreme(dt=e["dt"], height=e["height"], type=e["type"]) for e in extremes]

        except TideError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Error fetching tides for location {location.id}: {str(e)}")
            raise TideNetworkError(str(e)) from e
        except Exception as e:
            logger.error(f"Error processing tides for location {location.id}: {str(e)}")
            raise TideUnknownError(str(e)) from e

    @staticmethod
    def _error_for_status(status: int, message: Optional[str] = None) -> TideError:
        if status == 400:
            return InvalidTideLocationError(message or "Invalid location for tide data")
        if status == 404:
            return NoTideDataError(message or "No tide data available")
        return TideServerError(status, message or "")
