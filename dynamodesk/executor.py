"""Paginated Read Executor.

Drives repeated query or scan page fetches until the target number of items is
reached, the store has no more pages, or the caller cancels the read, pushing
throttled progress events along the way.
"""

import logging
import time
from collections.abc import Callable

from dynamodesk.cancellation import CancellationRegistry, get_default_registry
from dynamodesk.config import DynamoDeskSettings
from dynamodesk.keys import Item, LastEvaluatedKey
from dynamodesk.models import (
    BatchQueryResult,
    PageResult,
    QueryDescription,
    QueryProgress,
    QueryStarted,
    ScanDescription,
)
from dynamodesk.progress import NullProgressSink, ProgressBuffer, ProgressSink
from dynamodesk.requests import PageRequest, build_query_request, build_scan_request
from dynamodesk.store import StoreClient

logger = logging.getLogger(__name__)

RequestFactory = Callable[[LastEvaluatedKey | None], PageRequest]


class PaginatedReadExecutor:
    """Runs paginated queries and scans against a store client.

    Pages are fetched strictly one after another, each with the continuation
    token of the previous page. Each call owns its accumulated items; the only
    state shared between concurrent reads is the cancellation registry.

    Example:
        executor = PaginatedReadExecutor(store)
        channel = ProgressChannel()
        result = await executor.execute_scan(
            ScanDescription(table_name="orders"),
            max_results=1000,
            sink=channel,
        )

    """

    def __init__(
        self,
        store: StoreClient,
        *,
        registry: CancellationRegistry | None = None,
        settings: DynamoDeskSettings | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._store = store
        self._registry = registry if registry is not None else get_default_registry()
        self._settings = settings or DynamoDeskSettings()
        self._clock = clock

    @property
    def registry(self) -> CancellationRegistry:
        return self._registry

    def _next_query_id(self, prefix: str) -> str:
        return self._registry.new_query_id(prefix)

    async def query_page(self, description: QueryDescription) -> PageResult:
        """Fetch a single page of a query, without progress or cancellation."""
        return await self._store.get_page(build_query_request(description))

    async def scan_page(self, description: ScanDescription) -> PageResult:
        """Fetch a single page of a scan, without progress or cancellation."""
        return await self._store.get_page(build_scan_request(description))

    async def execute_query(
        self,
        description: QueryDescription,
        max_results: int,
        sink: ProgressSink | None = None,
        *,
        query_id: str | None = None,
    ) -> BatchQueryResult:
        """Run a query across pages until max_results items are collected.

        Args:
            description: The query to run. Its exclusive_start_key, if any, is
                where the first page starts.
            max_results: Target item count. The last page may overshoot it.
            sink: Receives QueryStarted, then QueryProgress events.
            query_id: Id to register for cancellation; drawn from the registry
                when omitted, so it is unique among reads sharing the registry.

        Returns:
            The accumulated result, with cancelled=True if the read was cancelled.

        Raises:
            QueryIdInUseError: If query_id belongs to a read still running.
            StoreError: If a page fetch fails. No partial result is returned.

        """

        def request_for(start_key: LastEvaluatedKey | None) -> PageRequest:
            return build_query_request(description, exclusive_start_key=start_key)

        return await self._execute_paginated(
            query_id=query_id or self._next_query_id("query"),
            request_for=request_for,
            start_key=description.exclusive_start_key,
            max_results=max_results,
            sink=sink,
        )

    async def execute_scan(
        self,
        description: ScanDescription,
        max_results: int,
        sink: ProgressSink | None = None,
        *,
        query_id: str | None = None,
    ) -> BatchQueryResult:
        """Run a scan across pages until max_results items are collected.

        Same contract as execute_query.
        """

        def request_for(start_key: LastEvaluatedKey | None) -> PageRequest:
            return build_scan_request(description, exclusive_start_key=start_key)

        return await self._execute_paginated(
            query_id=query_id or self._next_query_id("scan"),
            request_for=request_for,
            start_key=description.exclusive_start_key,
            max_results=max_results,
            sink=sink,
        )

    async def _execute_paginated(
        self,
        *,
        query_id: str,
        request_for: RequestFactory,
        start_key: LastEvaluatedKey | None,
        max_results: int,
        sink: ProgressSink | None,
    ) -> BatchQueryResult:
        sink = sink or NullProgressSink()
        registry = self._registry

        registry.register(query_id)
        try:
            sink.emit(QueryStarted(query_id=query_id))

            started_at = self._clock()
            buffer = ProgressBuffer(
                throttle_ms=self._settings.progress_throttle_ms,
                clock=self._clock,
            )
            items: list[Item] = []
            total_count = 0
            total_scanned = 0
            last_key = start_key
            cancelled = False

            while len(items) < max_results:
                if registry.is_cancelled(query_id):
                    logger.info("Read %s cancelled after %d items", query_id, len(items))
                    cancelled = True
                    break

                page = await self._store.get_page(request_for(last_key))
                logger.debug(
                    "Read %s fetched %d items (%d scanned)",
                    query_id,
                    page.count,
                    page.scanned_count,
                )

                items.extend(page.items)
                buffer.add(page.items)
                total_count += page.count
                total_scanned += page.scanned_count
                last_key = page.last_evaluated_key

                pending = buffer.take_if_due()
                if pending is not None:
                    sink.emit(
                        QueryProgress(
                            query_id=query_id,
                            count=len(items),
                            scanned_count=total_scanned,
                            elapsed_ms=self._elapsed_ms(started_at),
                            items=pending,
                        )
                    )

                if not last_key:
                    break

            elapsed_ms = self._elapsed_ms(started_at)
            sink.emit(
                QueryProgress(
                    query_id=query_id,
                    count=len(items),
                    scanned_count=total_scanned,
                    elapsed_ms=elapsed_ms,
                    items=buffer.take(),
                    is_complete=True,
                    cancelled=cancelled,
                )
            )

            return BatchQueryResult(
                items=items,
                last_evaluated_key=last_key or None,
                count=total_count,
                scanned_count=total_scanned,
                elapsed_ms=elapsed_ms,
                cancelled=cancelled,
            )
        except Exception:
            logger.exception("Paginated read %s failed", query_id)
            raise
        finally:
            registry.clear(query_id)

    def _elapsed_ms(self, started_at: float) -> int:
        return round((self._clock() - started_at) * 1000)


__all__ = [
    "PaginatedReadExecutor",
]
