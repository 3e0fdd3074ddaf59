from datetime import datetime, timedelta, timezone
from typing import Optional

COMPASS_POINTS = [
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW"
]

class UnitConversions:
    """Centralized utility for unit conversions across the application."""

    @staticmethod
    def meters_to_km(meters: Optional[float]) -> Optional[float]:
        if meters is None:
            return None
        return meters / 1000.0

    @staticmethod
    def degrees_to_compass(degrees: float) -> str:
        """Convert a wind bearing to one of the 16 compass points."""
        index = int(degrees / 22.5 + 0.5) % 16
        return COMPASS_POINTS[index]

class TimeConversions:
    """Epoch/offset helpers for storing aware datetimes in the database."""

    @staticmethod
    def from_epoch(seconds: float, utc_offset: int = 0) -> datetime:
        """Epoch seconds to an aware datetime at the given offset (seconds east of UTC)."""
        tz = timezone.utc if utc_offset == 0 else timezone(timedelta(seconds=utc_offset))
        return datetime.fromtimestamp(seconds, tz=tz)

    @staticmethod
    def to_epoch(dt: datetime) -> float:
        # Naive datetimes are taken as UTC
        return TimeConversions.ensure_aware(dt).timestamp()

    @staticmethod
    def utc_offset_seconds(dt: datetime) -> int:
        offset = dt.utcoffset()
        return int(offset.total_seconds()) if offset else 0

    @staticmethod
    def ensure_aware(dt: datetime) -> datetime:
        if dt.tzinfo is None:
            return dt.replace(tzinfo=timezone.utc)
        return dt
