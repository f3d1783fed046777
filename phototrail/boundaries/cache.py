"""Single-flight cache for boundary polygon data."""
import threading
from concurrent.futures import Future
from typing import Callable, Dict, List, Optional, Sequence, Tuple
from phototrail.core.exceptions import BoundarySourceError
from phototrail.core.models import RawFeature
from phototrail.utils.logging import log_error, log_structured

FeatureList = Tuple[RawFeature, ...]


class BoundaryCache:
    """
    Cache of parsed boundary features keyed by source and region code.

    Entries never expire and are stored as tuples so callers cannot mutate
    them. Concurrent requests for a key that is already being fetched wait
    on the first caller's future instead of fetching again. A failed fetch
    is not cached, so a later call retries.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._entries: Dict[str, FeatureList] = {}
        self._inflight: Dict[str, Future] = {}

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    def get(self, key: str) -> Optional[FeatureList]:
        with self._lock:
            return self._entries.get(key)

    def get_or_fetch(
        self,
        key: str,
        fetch: Callable[[], Sequence[RawFeature]]
    ) -> Optional[FeatureList]:
        """
        Return cached features for ``key``, fetching them at most once.

        Args:
            key: Cache key (source name and region code)
            fetch: Loads the features; may raise BoundarySourceError

        Returns:
            Cached features, or None when the fetch failed
        """
        with self._lock:
            if key in self._entries:
                return self._entries[key]
            future = self._inflight.get(key)
            is_owner = future is None
            if is_owner:
                future = Future()
                self._inflight[key] = future

        if not is_owner:
            log_structured("debug", "Awaiting in-flight boundary fetch", key=key)
            return future.result()

        try:
            features: Optional[FeatureList] = tuple(fetch())
        except BoundarySourceError as e:
            log_error(e, {"module": "boundaries.cache", "function": "get_or_fetch", "key": key})
            features = None
        except BaseException as e:
            # Waiters must be released even on KeyboardInterrupt or SystemExit
            self._finish(key, future, None)
            future.set_exception(e)
            raise

        self._finish(key, future, features)
        future.set_result(features)
        return features

    def _finish(self, key: str, future: Future, features: Optional[FeatureList]):
        with self._lock:
            # A clear() during the fetch drops the result
            if self._inflight.get(key) is not future:
                return
            del self._inflight[key]
            if features is not None:
                self._entries[key] = features

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._entries)

    def clear(self):
        """Drop all cached entries and forget in-flight fetches."""
        with self._lock:
            self._entries.clear()
            self._inflight.clear()
