"""Explicit query cache keyed by query identity."""
import enum
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Hashable, Optional, Tuple

logger = logging.getLogger(__name__)

QueryKey = Tuple[Hashable, ...]
Fetcher = Callable[[], Awaitable[Any]]


class QueryStatus(str, enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class QueryResult:
    """Snapshot of one cache entry."""
    status: QueryStatus = QueryStatus.IDLE
    data: Any = None
    error: Optional[Exception] = None
    is_stale: bool = True
    updated_at: Optional[datetime] = None

    @property
    def is_loading(self) -> bool:
        return self.status == QueryStatus.LOADING

    @property
    def is_error(self) -> bool:
        return self.status == QueryStatus.ERROR


@dataclass
class _Entry:
    result: QueryResult = field(default_factory=QueryResult)
    # Bumped by every invalidate(); a fetch started under an older generation stays stale
    generation: int = 0
    # Generation the stored result was fetched under
    result_generation: int = 0
    fetcher: Optional[Fetcher] = None
    observers: int = 0


class QueryCache:
    """
    Holds the last result of each query and re-fetches on invalidation.

    Invariants:
        - A failed fetch leaves no data behind (the entry carries the error only).
        - A fetch that started before an invalidate() never marks the entry
          fresh; its data is stored but the entry stays stale.
        - A fetch never replaces a result fetched under a newer generation,
          so the last re-fetch wins even when an older one finishes later.
        - invalidate() re-runs the query immediately when it is observed,
          otherwise the next fetch() goes to the store.
    """

    def __init__(self):
        self._entries: Dict[QueryKey, _Entry] = {}

    def _entry(self, key: QueryKey) -> _Entry:
        return self._entries.setdefault(tuple(key), _Entry())

    def get(self, key: QueryKey) -> QueryResult:
        """Current snapshot for ``key`` without touching the store."""
        return self._entry(key).result

    def observe(self, key: QueryKey, fetcher: Fetcher) -> Callable[[], None]:
        """Register an active observer; returns a function that removes it."""
        entry = self._entry(key)
        entry.fetcher = fetcher
        entry.observers += 1

        def unobserve():
            entry.observers = max(0, entry.observers - 1)

        return unobserve

    async def fetch(self, key: QueryKey, fetcher: Optional[Fetcher] = None, force: bool = False) -> QueryResult:
        """
        Return the cached result, running ``fetcher`` when the entry is stale.

        Errors raised by the fetcher are captured in the returned result.
        """
        entry = self._entry(key)
        fetcher = fetcher or entry.fetcher
        if fetcher is None:
            raise LookupError(f"No fetcher registered for query {key}")
        if not force and not entry.result.is_stale and entry.result.status == QueryStatus.SUCCESS:
            return entry.result

        generation = entry.generation
        entry.result.status = QueryStatus.LOADING
        try:
            data = await fetcher()
        except Exception as e:
            logger.error(f"Query {key} failed: {e}")
            if generation < entry.result_generation:
                return entry.result
            entry.result = QueryResult(status=QueryStatus.ERROR, error=e, is_stale=True)
            entry.result_generation = generation
            return entry.result

        if generation < entry.result_generation:
            logger.debug(f"Discarding result of query {key} from generation {generation}")
            return entry.result
        entry.result_generation = generation
        entry.result = QueryResult(
            status=QueryStatus.SUCCESS,
            data=data,
            is_stale=generation != entry.generation,
            updated_at=datetime.now(timezone.utc)
        )
        return entry.result

    async def invalidate(self, key: QueryKey) -> Optional[QueryResult]:
        """Mark ``key`` stale and re-fetch it if it is being observed."""
        entry = self._entry(key)
        entry.generation += 1
        entry.result.is_stale = True
        logger.debug(f"Invalidated query {key}")
        if entry.observers and entry.fetcher is not None:
            return await self.fetch(key, entry.fetcher, force=True)
        return None
