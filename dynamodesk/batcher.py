"""Write Batcher.

Applies a mixed list of put, delete and primary-key-change operations:

- Primary-key changes run one at a time as a two-item transaction (delete the
  old key, put the new item), since DynamoDB cannot update a key in place.
- Puts and deletes go through BatchWriteItem in chunks of 25, grouped by table.
  Unprocessed (throttled) requests are retried with exponential backoff. If the
  bulk call fails outright, the still-pending requests are applied one by one.

Failures never abort the remaining operations; each one is recorded in the
returned WriteOutcome.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from dynamodesk.config import DynamoDeskSettings
from dynamodesk.keys import RequestItems, WriteRequest
from dynamodesk.operations import (
    BatchOperation,
    DeleteOperation,
    PkChangeOperation,
    PutOperation,
    WriteOutcome,
    WriteProgress,
)
from dynamodesk.progress import NullProgressSink, ProgressSink
from dynamodesk.store import StoreClient

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[Any]]


def _count_requests(request_items: RequestItems) -> int:
    return sum(len(requests) for requests in request_items.values())


def group_by_table(operations: Sequence[PutOperation | DeleteOperation]) -> RequestItems:
    """Group operations into BatchWriteItem request items, keeping their order."""
    request_items: RequestItems = {}
    for operation in operations:
        request_items.setdefault(operation.table_name, []).append(operation.to_write_request())
    return request_items


class WriteBatcher:
    """Applies batches of write operations against a store client.

    Example:
        batcher = WriteBatcher(store)
        outcome = await batcher.apply_batch(
            [
                PutOperation(table_name="users", item={"id": "1", "name": "Homer"}),
                DeleteOperation(table_name="users", key={"id": "2"}),
                PkChangeOperation(
                    table_name="users",
                    old_key={"id": "3"},
                    new_item={"id": "4", "name": "Bart"},
                ),
            ]
        )
        if not outcome.success:
            for error in outcome.errors:
                print(error)

    """

    def __init__(
        self,
        store: StoreClient,
        *,
        settings: DynamoDeskSettings | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._store = store
        self._settings = settings or DynamoDeskSettings()
        self._sleep = sleep

    async def apply_batch(
        self,
        operations: Sequence[BatchOperation],
        sink: ProgressSink | None = None,
    ) -> WriteOutcome:
        """Apply all operations, isolating failures per operation.

        Args:
            operations: Operations to apply. Relative order is preserved within
                primary-key changes and within regular puts/deletes.
            sink: Receives a WriteProgress event after each internal batch.

        Returns:
            WriteOutcome with success=True only when no error was recorded.

        """
        sink = sink or NullProgressSink()
        total = len(operations)
        errors: list[str] = []
        processed = 0

        pk_changes = [op for op in operations if isinstance(op, PkChangeOperation)]
        regular = [op for op in operations if not isinstance(op, PkChangeOperation)]

        for pk_change in pk_changes:
            if await self._apply_pk_change(pk_change, errors):
                processed += 1

        batch_size = self._settings.write_batch_size
        for start in range(0, len(regular), batch_size):
            chunk = regular[start : start + batch_size]
            processed += await self._apply_chunk(group_by_table(chunk), errors)
            sink.emit(WriteProgress(processed=processed, total=total))

        logger.debug(
            "Batch write applied %d of %d operations with %d errors",
            processed,
            total,
            len(errors),
        )
        return WriteOutcome(success=not errors, processed=processed, errors=errors)

    async def _apply_pk_change(self, operation: PkChangeOperation, errors: list[str]) -> bool:
        try:
            await self._store.transact_write(
                [
                    {"Delete": {"TableName": operation.table_name, "Key": operation.old_key}},
                    {"Put": {"TableName": operation.table_name, "Item": operation.new_item}},
                ]
            )
        except Exception as e:
            logger.warning("Primary key change on %s failed: %s", operation.table_name, e)
            errors.append(
                f"PK change failed for {operation.table_name} key {operation.old_key}: {e}"
            )
            return False
        return True

    async def _apply_chunk(self, request_items: RequestItems, errors: list[str]) -> int:
        """Write one chunk with retry and fallback; return how many were applied."""
        max_attempts = self._settings.max_write_attempts
        processed = 0
        pending = request_items

        for attempt in range(1, max_attempts + 1):
            submitted = _count_requests(pending)
            try:
                unprocessed = await self._store.batch_write(pending)
            except Exception as e:
                logger.warning(
                    "Batch write failed, applying %d requests one by one: %s", submitted, e
                )
                return processed + await self._apply_individually(pending, errors)

            processed += submitted - _count_requests(unprocessed)
            pending = {table: requests for table, requests in unprocessed.items() if requests}
            if not pending:
                return processed

            if attempt < max_attempts:
                delay_ms = self._settings.backoff_base_ms * 2 ** (attempt - 1)
                logger.warning(
                    "%d requests unprocessed on attempt %d, retrying in %d ms",
                    _count_requests(pending),
                    attempt,
                    delay_ms,
                )
                await self._sleep(delay_ms / 1000)

        for table_name, requests in pending.items():
            errors.append(
                f"{len(requests)} operations on {table_name} remained unprocessed "
                f"after {max_attempts} attempts"
            )
        return processed

    async def _apply_individually(self, request_items: RequestItems, errors: list[str]) -> int:
        processed = 0
        for table_name, requests in request_items.items():
            for request in requests:
                try:
                    await self._apply_request(table_name, request)
                except Exception as e:
                    errors.append(_describe_failure(table_name, request, e))
                else:
                    processed += 1
        return processed

    async def _apply_request(self, table_name: str, request: WriteRequest) -> None:
        if "PutRequest" in request:
            await self._store.put_item(table_name, request["PutRequest"]["Item"])
        else:
            await self._store.delete_item(table_name, request["DeleteRequest"]["Key"])


def _describe_failure(table_name: str, request: WriteRequest, error: Exception) -> str:
    if "PutRequest" in request:
        return f"Put failed for {table_name}: {error}"
    return f"Delete failed for {table_name} key {request['DeleteRequest']['Key']}: {error}"


__all__ = [
    "WriteBatcher",
    "group_by_table",
]
