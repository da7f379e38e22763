"""
Shared in-memory cache of market cap snapshots, keyed by token id.

Dash serves callbacks from several threads, and every token card on the list
page asks for its snapshots at once. The cache makes sure each token is
fetched at most once at a time: later callers wait for the in-flight request
and share its result.
"""
import threading
import time
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from focus.config import MARKET_CAP_CACHE_TTL, MAX_CONCURRENT, REQUEST_TIMEOUT, USE_ASYNC
from focus.data.fetcher import ApiClient
from focus.data.models import MarketCapSnapshot
from focus.exceptions import FocusError
from focus.utils import setup_logger

logger = setup_logger(__name__)


@dataclass
class _Entry:
    snapshots: List[MarketCapSnapshot]
    loaded_at: float


class MarketCapCache:
    """
    Thread-safe map of token id to its market cap snapshots.

    A failed fetch is cached as an empty list so the page renders "N/A"
    instead of retrying on every render. Entries go stale after
    ``ttl_seconds``; 0 keeps them for the life of the process.

    Example:
        cache = MarketCapCache(client)
        cache.prefetch(["tok1", "tok2"])
        snapshots = cache.load("tok1")  # served from memory
    """

    def __init__(
        self,
        client: ApiClient,
        ttl_seconds: float = MARKET_CAP_CACHE_TTL,
        use_async: bool = USE_ASYNC,
        max_concurrent: int = MAX_CONCURRENT,
        wait_timeout: Optional[float] = None,
    ):
        self.client = client
        self.ttl_seconds = ttl_seconds
        self.use_async = use_async
        self.max_concurrent = max_concurrent
        # Waiters give up after the worst case of one fetch with all retries
        if wait_timeout is None:
            wait_timeout = REQUEST_TIMEOUT * max(1, client.max_retries) + 5
        self.wait_timeout = wait_timeout
        self._lock = threading.Lock()
        self._entries: Dict[str, _Entry] = {}
        self._inflight: Dict[str, threading.Event] = {}

    def _is_fresh(self, entry: _Entry) -> bool:
        if self.ttl_seconds <= 0:
            return True
        return time.monotonic() - entry.loaded_at < self.ttl_seconds

    def _fresh_locked(self, token_id: str) -> Optional[List[MarketCapSnapshot]]:
        entry = self._entries.get(token_id)
        if entry is None:
            return None
        if not self._is_fresh(entry):
            del self._entries[token_id]
            return None
        return entry.snapshots

    def get(self, token_id: str) -> Optional[List[MarketCapSnapshot]]:
        """Cached snapshots, or None when absent or stale."""
        with self._lock:
            snapshots = self._fresh_locked(token_id)
            return list(snapshots) if snapshots is not None else None

    def is_loading(self, token_id: str) -> bool:
        with self._lock:
            return token_id in self._inflight

    def _store(self, token_id: str, snapshots: List[MarketCapSnapshot]) -> None:
        with self._lock:
            self._entries[token_id] = _Entry(list(snapshots), time.monotonic())
            event = self._inflight.pop(token_id, None)
        if event is not None:
            event.set()

    def _claim(self, token_ids: Iterable[str]) -> List[str]:
        """Mark tokens as in flight; returns only those this caller must fetch."""
        claimed = []
        with self._lock:
            for token_id in token_ids:
                if token_id in self._inflight or self._fresh_locked(token_id) is not None:
                    continue
                self._inflight[token_id] = threading.Event()
                claimed.append(token_id)
        return claimed

    def load(self, token_id: str) -> List[MarketCapSnapshot]:
        """Return snapshots for a token, fetching them only when nobody else is."""
        with self._lock:
            cached = self._fresh_locked(token_id)
            if cached is not None:
                return list(cached)
            event = self._inflight.get(token_id)
            owner = event is None
            if owner:
                event = threading.Event()
                self._inflight[token_id] = event

        if not owner:
            logger.debug(f"{token_id}: market caps already loading, waiting")
            if not event.wait(self.wait_timeout):
                logger.warning(f"{token_id}: timed out waiting for in-flight market cap fetch")
            return self.get(token_id) or []

        return self._fetch_claimed(token_id)

    def prefetch(self, token_ids: Iterable[str]) -> None:
        """Warm the cache for every token that is neither cached nor loading."""
        claimed = self._claim(dict.fromkeys(token_ids))
        if not claimed:
            return

        logger.info(f"Prefetching market caps for {len(claimed)} token(s) (async={self.use_async})")
        if not self.use_async:
            done = 0
            try:
                for token_id in claimed:
                    self._fetch_claimed(token_id)
                    done += 1
            except Exception as e:
                logger.error(f"Sequential market cap prefetch failed: {e}")
            finally:
                # Release every claim the loop never reached
                for token_id in claimed[done + 1:]:
                    self._store(token_id, [])
            return

        results = {}
        try:
            results = self.client.fetch_market_caps_many(claimed, self.max_concurrent)
        except Exception as e:
            logger.error(f"Async market cap prefetch failed: {e}")
        finally:
            for token_id in claimed:
                result = results.get(token_id, [])
                if isinstance(result, Exception):
                    result = []
                self._store(token_id, result)

    def _fetch_claimed(self, token_id: str) -> List[MarketCapSnapshot]:
        snapshots: List[MarketCapSnapshot] = []
        try:
            logger.info(f"Loading market caps for token: {token_id}")
            snapshots = self.client.fetch_token_market_caps(token_id)
        except FocusError as e:
            logger.error(f"Error loading market caps for token {token_id}: {e}")
        finally:
            self._store(token_id, snapshots)
        return list(snapshots)

    def invalidate(self, token_id: Optional[str] = None) -> None:
        """Drop one token's entry, or everything when no token is given."""
        with self._lock:
            if token_id is None:
                self._entries.clear()
            else:
                self._entries.pop(token_id, None)

    def snapshot(self) -> Dict[str, List[MarketCapSnapshot]]:
        """Copy of the current map, for diagnostics."""
        with self._lock:
            return {
                token_id: list(entry.snapshots)
                for token_id, entry in self._entries.items()
                if self._is_fresh(entry)
            }
