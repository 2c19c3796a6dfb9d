"""In-process package cache with a decorator for datasource lookups."""

import functools
import logging
import time
from collections.abc import Callable
from typing import Any

from .config import get_global_config

logger = logging.getLogger(__name__)

_MISSING = object()

# namespace -> key -> (expires_at, value)
_store: dict[str, dict[str, tuple[float, Any]]] = {}


def get(namespace: str, key: str) -> Any:
    """Return the cached value, or ``_MISSING`` when absent or expired."""
    bucket = _store.get(namespace)
    if not bucket or key not in bucket:
        return _MISSING
    expires_at, value = bucket[key]
    if expires_at <= time.monotonic():
        del bucket[key]
        return _MISSING
    return value


def set(namespace: str, key: str, value: Any, ttl_minutes: float) -> None:
    """Store ``value`` and drop every expired entry of the namespace."""
    now = time.monotonic()
    bucket = _store.setdefault(namespace, {})
    expired = [k for k, (expires_at, _) in bucket.items() if expires_at <= now]
    for k in expired:
        del bucket[k]
    if expired:
        logger.debug("Evicted %d expired entries from %s", len(expired), namespace)
    bucket[key] = (now + ttl_minutes * 60, value)


def clear() -> None:
    _store.clear()


def cache(
    namespace: str,
    key: Callable[..., str],
    ttl_minutes: float | None = None,
):
    """Cache the result of an async method.

    Args:
        namespace: Cache namespace, e.g. ``datasource-conan``
        key: Builds the cache key from the method's arguments (without ``self``)
        ttl_minutes: Entry lifetime; defaults to ``Settings.cache_ttl_minutes``

    Instances with ``caching = False`` bypass the cache. ``None`` results are
    cached like any other value.
    """

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(self, *args, **kwargs):
            if not getattr(self, "caching", True):
                return await func(self, *args, **kwargs)

            cache_key = key(*args, **kwargs)
            cached = get(namespace, cache_key)
            if cached is not _MISSING:
                logger.debug("Cache hit for %s:%s", namespace, cache_key)
                return cached

            result = await func(self, *args, **kwargs)
            ttl = ttl_minutes if ttl_minutes is not None else get_global_config().cache_ttl_minutes
            set(namespace, cache_key, result, ttl)
            return result

        return wrapper

    return decorator
