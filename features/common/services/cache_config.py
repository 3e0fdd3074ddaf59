import inspect
from datetime import datetime
from typing import Any, Callable

from aiocache import SimpleMemoryCache, caches

from core.config import settings

# Cache expiration times (in seconds)
RECOMMENDATIONS_EXPIRE = settings.get_cache_ttl()["recommendations"]

# Recommendation reports live in the default cache
caches.set_config({
    'default': {
        'cache': "aiocache.SimpleMemoryCache",
        'namespace': "recommendations",
        'serializer': {
            'class': "aiocache.serializers.PickleSerializer"
        },
        'ttl': RECOMMENDATIONS_EXPIRE,
    }
})

def get_cache() -> SimpleMemoryCache:
    """Get the default cache instance."""
    return caches.get('default')  # type: ignore

async def clear_recommendation_cache() -> None:
    """Drop every cached recommendation report."""
    await get_cache().clear()

def feature_cache_key_builder(func: Callable, *args: Any, **kwargs: Any) -> str:
    """Cache key built from every argument of the cached call except ``self``.

    Returns:
        str: Key in format {prefix}:{function}:{name}={value}:...
    """
    bound = inspect.signature(func).bind(*args, **kwargs)
    bound.apply_defaults()

    parts = []
    for name, value in bound.arguments.items():
        if name == "self":
            continue
        if isinstance(value, datetime):
            value = value.isoformat()
        elif hasattr(value, "value"):
            value = value.value  # enums
        parts.append(f"{name}={value}")

    return ":".join([settings.cache["prefix"], func.__name__, *parts])
