# =============================================================================
# lib/cache.py - Read-Through Cache
# =============================================================================
# A small keyed cache with an explicit staleness policy:
#
#   age < ttl_seconds         -> served from cache, loader not called
#   age >= ttl_seconds        -> loader called, result cached
#   loader raises one of `serve_stale_on`
#       and age < max_stale   -> last good value served (logged)
#       otherwise             -> the error propagates
#
# Used for the public catalog snapshot (last-known-good data when Supabase is
# unreachable) and for the Supabase JWKS document.
# =============================================================================

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Generic, Hashable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class CacheEntry(Generic[T]):
    value: T
    stored_at: float
    expired: bool = False


class ReadThroughCache(Generic[T]):
    """
    Keyed read-through cache.

    Args:
        ttl_seconds: How long a value is served without reloading
        max_stale_seconds: How old a value may be and still be served when
            the loader fails (None means no upper bound)
        serve_stale_on: Loader exception types that allow serving stale data
        clock: Monotonic time source (injectable for tests)

    Example:
        cache = ReadThroughCache(ttl_seconds=60, serve_stale_on=(StoreUnavailableError,))
        products = cache.get("products", lambda: store.select("products"))
    """

    def __init__(
        self,
        ttl_seconds: float,
        max_stale_seconds: float | None = None,
        serve_stale_on: tuple[type[BaseException], ...] = (),
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self.max_stale_seconds = max_stale_seconds
        self.serve_stale_on = serve_stale_on
        self._clock = clock
        self._entries: dict[Hashable, CacheEntry[T]] = {}
        self._lock = threading.Lock()

    def _age(self, entry: CacheEntry[T]) -> float:
        return self._clock() - entry.stored_at

    def peek(self, key: Hashable) -> T | None:
        """Return the cached value regardless of age, or None."""
        with self._lock:
            entry = self._entries.get(key)
        return entry.value if entry else None

    def put(self, key: Hashable, value: T) -> None:
        with self._lock:
            self._entries[key] = CacheEntry(value=value, stored_at=self._clock())

    def get(self, key: Hashable, loader: Callable[[], T]) -> T:
        """Return a fresh value for `key`, loading it when needed."""
        with self._lock:
            entry = self._entries.get(key)

        if entry is not None and not entry.expired and self._age(entry) < self.ttl_seconds:
            return entry.value

        try:
            value = loader()
        except self.serve_stale_on as e:
            if entry is not None and (
                self.max_stale_seconds is None or self._age(entry) < self.max_stale_seconds
            ):
                logger.warning(
                    f"Serving stale cache entry for {key!r} "
                    f"({self._age(entry):.0f}s old) after load failure: {e}"
                )
                return entry.value
            raise

        self.put(key, value)
        return value

    def expire(self, key: Hashable | None = None) -> None:
        """Force a reload on next access, keeping the value as a stale fallback."""
        with self._lock:
            keys = list(self._entries) if key is None else [key]
            for k in keys:
                if k in self._entries:
                    self._entries[k].expired = True

    def invalidate(self, key: Hashable | None = None) -> None:
        """Forget one key, or everything when no key is given."""
        with self._lock:
            if key is None:
                self._entries.clear()
            else:
                self._entries.pop(key, None)

    def stats(self) -> dict[str, Any]:
        with self._lock:
            return {
                "entries": len(self._entries),
                "ttl_seconds": self.ttl_seconds,
                "max_stale_seconds": self.max_stale_seconds,
            }
