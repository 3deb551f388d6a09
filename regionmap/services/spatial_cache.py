from __future__ import annotations

import asyncio
import logging
import threading
from concurrent.futures import Future
from typing import Any, Dict, Optional

from regionmap.domain.regions import empty_collection, filter_named_features
from regionmap.storage.features import FeatureSourceError
from regionmap.storage.protocols import FeatureSource

logger = logging.getLogger(__name__)


class SpatialDataCache:
    """
    Memoizes feature collections per level key.

    Concurrent loads of the same key share a single fetch, even when the
    callers run on different threads or event loops. A failed fetch is not
    cached: every waiter receives an empty collection and the next load
    retries.
    """

    def __init__(self, source: FeatureSource) -> None:
        self._source = source
        self._entries: Dict[str, Dict[str, Any]] = {}
        self._pending: Dict[str, Future] = {}
        self._lock = threading.Lock()

    def is_cached(self, level_key: str) -> bool:
        with self._lock:
            return level_key in self._entries

    def invalidate(self, level_key: Optional[str] = None) -> None:
        with self._lock:
            if level_key is None:
                self._entries.clear()
            else:
                self._entries.pop(level_key, None)

    async def load(self, level_key: str) -> Dict[str, Any]:
        with self._lock:
            cached = self._entries.get(level_key)
            if cached is not None:
                return cached
            pending = self._pending.get(level_key)
            owner = pending is None
            if owner:
                pending = Future()
                self._pending[level_key] = pending

        if not owner:
            return await asyncio.wrap_future(pending)

        collection = empty_collection()
        try:
            raw = await self._source.fetch(level_key)
            collection = filter_named_features(raw)
        except FeatureSourceError as exc:
            logger.warning("Failed to load features for %s: %s", level_key, exc)
        except Exception:
            logger.exception("Unexpected error loading features for %s", level_key)
        else:
            with self._lock:
                self._entries[level_key] = collection
            logger.debug("Cached %d feature(s) for %s", len(collection["features"]), level_key)
        finally:
            with self._lock:
                self._pending.pop(level_key, None)
            # Waiters never inherit the owner's failure or cancellation.
            pending.set_result(collection)
        return collection
