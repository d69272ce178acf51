"""Cancellation registry for in-flight paginated reads.

A read registers its query id when it starts and clears it on every exit path.
Cancellation is cooperative: the read checks the registry once per page, so a
request is honoured after the page currently being fetched completes.

The registry also hands out query ids. Every executor sharing a registry
draws from the same counter, so two reads never get the same generated id.
"""

import itertools
import logging
import threading

from dynamodesk.exceptions import QueryIdInUseError

logger = logging.getLogger(__name__)


class CancellationRegistry:
    """Thread-safe table of live query ids and the ones asked to stop.

    Example:
        registry = CancellationRegistry()
        executor = PaginatedReadExecutor(store, registry=registry)

        # From the UI's cancel button:
        registry.request_cancel("query-3")

    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._live: set[str] = set()
        self._cancelled: set[str] = set()

    def new_query_id(self, prefix: str) -> str:
        """Return an id of the form ``{prefix}-{n}`` that is not currently live."""
        with self._lock:
            while True:
                query_id = f"{prefix}-{next(self._ids)}"
                if query_id not in self._live:
                    return query_id

    def register(self, query_id: str) -> None:
        """Mark query_id as a live, cancellable read.

        Raises:
            QueryIdInUseError: If a read with this id is still running.

        """
        with self._lock:
            if query_id in self._live:
                raise QueryIdInUseError(query_id=query_id)
            self._live.add(query_id)
            self._cancelled.discard(query_id)

    def request_cancel(self, query_id: str) -> bool:
        """Ask the read with query_id to stop.

        Always succeeds. Requests for ids that are not live (unknown, or already
        finished) are ignored, so a cancel racing the read's natural completion
        never errors and never leaves a stale entry behind.
        """
        with self._lock:
            if query_id in self._live:
                self._cancelled.add(query_id)
                logger.info("Cancellation requested for %s", query_id)
            else:
                logger.debug("Ignoring cancellation for inactive read %s", query_id)
        return True

    def is_cancelled(self, query_id: str) -> bool:
        with self._lock:
            return query_id in self._cancelled

    def clear(self, query_id: str) -> None:
        """Forget query_id entirely; safe to call more than once."""
        with self._lock:
            self._live.discard(query_id)
            self._cancelled.discard(query_id)

    def __contains__(self, query_id: object) -> bool:
        with self._lock:
            return query_id in self._live

    def __len__(self) -> int:
        with self._lock:
            return len(self._live)


_default_registry = CancellationRegistry()


def get_default_registry() -> CancellationRegistry:
    """Return the process-wide registry used when none is injected."""
    return _default_registry


__all__ = [
    "CancellationRegistry",
    "get_default_registry",
]
