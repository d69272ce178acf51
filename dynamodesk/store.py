"""The store client boundary consumed by the execution core.

Any object implementing StoreClient can back the executor and the batcher:
DynamoStoreClient talks to DynamoDB through aioboto3, and tests use in-memory
stubs. All methods are coroutines and may raise StoreError subclasses.
"""

from collections.abc import Sequence
from typing import Any, Protocol

from dynamodesk.expressions import UpdateExpression
from dynamodesk.keys import DynamoDBKey, Item, RequestItems
from dynamodesk.models import PageResult, TableInfo
from dynamodesk.requests import PageRequest


class StoreClient(Protocol):
    async def list_tables(self) -> list[str]: ...

    async def describe_table(self, table_name: str) -> TableInfo: ...

    async def get_page(self, request: PageRequest) -> PageResult: ...

    async def put_item(self, table_name: str, item: Item) -> None: ...

    async def delete_item(self, table_name: str, key: DynamoDBKey) -> None: ...

    async def update_item(
        self,
        table_name: str,
        key: DynamoDBKey,
        update: UpdateExpression,
    ) -> None: ...

    async def transact_write(self, transact_items: Sequence[dict[str, Any]]) -> None:
        """Apply all items atomically (TransactWriteItems shape)."""
        ...

    async def batch_write(self, request_items: RequestItems) -> RequestItems:
        """Submit a BatchWriteItem call and return the unprocessed requests."""
        ...


__all__ = [
    "StoreClient",
]
