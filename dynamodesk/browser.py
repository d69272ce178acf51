"""TableBrowser: the operations a table-browsing UI calls.

This is the seam between the execution core and the UI bridge. It wires one
store client to a PaginatedReadExecutor and a WriteBatcher that share the
same settings and cancellation registry.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from dynamodesk.batcher import WriteBatcher
from dynamodesk.cancellation import CancellationRegistry, get_default_registry
from dynamodesk.config import DynamoDeskSettings
from dynamodesk.executor import PaginatedReadExecutor
from dynamodesk.expressions import build_update_expression
from dynamodesk.keys import DynamoDBKey, Item
from dynamodesk.models import (
    BatchQueryResult,
    PageResult,
    QueryDescription,
    ScanDescription,
    TableInfo,
)
from dynamodesk.operations import BatchOperation, WriteOutcome
from dynamodesk.progress import ProgressSink
from dynamodesk.store import StoreClient


class TableBrowser:
    """Facade over reads, writes and cancellation for one store client.

    Example:
        browser = TableBrowser(await factory.get_client("dev"))
        channel = ProgressChannel()
        result = await browser.query_batch(
            QueryDescription.model_validate(payload),
            max_results=500,
            sink=channel,
        )

    """

    def __init__(
        self,
        store: StoreClient,
        *,
        registry: CancellationRegistry | None = None,
        settings: DynamoDeskSettings | None = None,
    ) -> None:
        self._store = store
        self._registry = registry if registry is not None else get_default_registry()
        self._settings = settings or DynamoDeskSettings()
        self._executor = PaginatedReadExecutor(
            store,
            registry=self._registry,
            settings=self._settings,
        )
        self._batcher = WriteBatcher(store, settings=self._settings)

    async def list_tables(self) -> list[str]:
        return await self._store.list_tables()

    async def describe_table(self, table_name: str) -> TableInfo:
        return await self._store.describe_table(table_name)

    async def query(self, description: QueryDescription) -> PageResult:
        return await self._executor.query_page(description)

    async def scan(self, description: ScanDescription) -> PageResult:
        return await self._executor.scan_page(description)

    async def query_batch(
        self,
        description: QueryDescription,
        max_results: int,
        sink: ProgressSink | None = None,
        *,
        query_id: str | None = None,
    ) -> BatchQueryResult:
        return await self._executor.execute_query(
            description, max_results, sink, query_id=query_id
        )

    async def scan_batch(
        self,
        description: ScanDescription,
        max_results: int,
        sink: ProgressSink | None = None,
        *,
        query_id: str | None = None,
    ) -> BatchQueryResult:
        return await self._executor.execute_scan(
            description, max_results, sink, query_id=query_id
        )

    def cancel_query(self, query_id: str) -> bool:
        """Request cancellation of a running query or scan; always returns True."""
        return self._registry.request_cancel(query_id)

    async def put_item(self, table_name: str, item: Item) -> None:
        await self._store.put_item(table_name, item)

    async def update_item(
        self,
        table_name: str,
        key: DynamoDBKey,
        updates: Mapping[str, Any],
    ) -> None:
        """Set each field of updates on the item at key.

        Raises:
            EmptyUpdateError: If updates is empty.

        """
        await self._store.update_item(table_name, key, build_update_expression(updates))

    async def delete_item(self, table_name: str, key: DynamoDBKey) -> None:
        await self._store.delete_item(table_name, key)

    async def batch_write(
        self,
        operations: Sequence[BatchOperation],
        sink: ProgressSink | None = None,
    ) -> WriteOutcome:
        return await self._batcher.apply_batch(operations, sink)


__all__ = [
    "TableBrowser",
]
