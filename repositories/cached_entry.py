from typing import Any, NamedTuple

class CachedEntry(NamedTuple):
    """A cached domain value and the epoch second it was stored."""
    data: Any
    cache_timestamp: float
