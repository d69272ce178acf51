"""aioboto3-backed implementation of the StoreClient boundary.

DynamoStoreClient wraps an aioboto3 DynamoDB service resource. Items, keys and
expression values are plain Python values: the resource layer handles the
DynamoDB attribute-value marshalling, including for the transactional and
batch calls made through the resource's client.
"""

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from botocore.exceptions import ClientError

from dynamodesk.exceptions import TableNotFoundError, wrap_client_error
from dynamodesk.expressions import UpdateExpression
from dynamodesk.keys import DynamoDBKey, Item, RequestItems
from dynamodesk.models import (
    AttributeDefinition,
    KeySchemaElement,
    PageResult,
    Projection,
    SecondaryIndex,
    TableInfo,
)
from dynamodesk.requests import PageRequest

if TYPE_CHECKING:
    from types_aiobotocore_dynamodb.service_resource import (
        DynamoDBServiceResource,
        Table,
    )
else:
    DynamoDBServiceResource = Any
    Table = Any


@contextmanager
def _store_errors(operation: str, table_name: str | None = None) -> Iterator[None]:
    try:
        yield
    except ClientError as e:
        raise wrap_client_error(e, operation=operation, table_name=table_name) from e


def to_dynamo_value(value: Any) -> Any:
    """Convert floats (anywhere in a value) to Decimal, which boto3 requires.

    Example:
        to_dynamo_value({"price": 9.99, "tags": [1.5]})
        Returns {"price": Decimal("9.99"), "tags": [Decimal("1.5")]}.

    """
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {key: to_dynamo_value(inner) for key, inner in value.items()}
    if isinstance(value, list):
        return [to_dynamo_value(inner) for inner in value]
    if isinstance(value, (set, frozenset)):
        return {to_dynamo_value(inner) for inner in value}
    return value


def _key_schema(elements: Sequence[Any]) -> list[KeySchemaElement]:
    return [
        KeySchemaElement(attribute_name=element["AttributeName"], key_type=element["KeyType"])
        for element in elements
    ]


def _secondary_indexes(indexes: Sequence[Any] | None) -> list[SecondaryIndex] | None:
    if indexes is None:
        return None
    return [
        SecondaryIndex(
            index_name=index.get("IndexName", ""),
            key_schema=_key_schema(index.get("KeySchema", [])),
            projection=Projection(
                projection_type=index.get("Projection", {}).get("ProjectionType", "ALL"),
                non_key_attributes=index.get("Projection", {}).get("NonKeyAttributes"),
            ),
        )
        for index in indexes
    ]


def parse_table_description(table: dict[str, Any], *, table_name: str) -> TableInfo:
    """Map a DescribeTable ``Table`` payload onto TableInfo."""
    return TableInfo(
        table_name=table.get("TableName") or table_name,
        key_schema=_key_schema(table.get("KeySchema", [])),
        attribute_definitions=[
            AttributeDefinition(
                attribute_name=definition["AttributeName"],
                attribute_type=definition["AttributeType"],
            )
            for definition in table.get("AttributeDefinitions", [])
        ],
        item_count=table.get("ItemCount"),
        table_size_bytes=table.get("TableSizeBytes"),
        table_status=table.get("TableStatus"),
        global_secondary_indexes=_secondary_indexes(table.get("GlobalSecondaryIndexes")),
        local_secondary_indexes=_secondary_indexes(table.get("LocalSecondaryIndexes")),
    )


class DynamoStoreClient:
    """StoreClient talking to DynamoDB through an aioboto3 service resource.

    Every botocore ClientError is re-raised as the matching StoreError subclass.

    Example:
        session = aioboto3.Session(profile_name="dev")
        async with session.resource("dynamodb") as dynamodb:
            store = DynamoStoreClient(dynamodb)
            tables = await store.list_tables()

    """

    def __init__(self, resource: DynamoDBServiceResource) -> None:
        self._resource = resource

    async def _table(self, table_name: str) -> Table:
        return await self._resource.Table(table_name)

    async def list_tables(self) -> list[str]:
        """List every table name, following pagination, sorted case-insensitively."""
        client = self._resource.meta.client
        table_names: list[str] = []
        list_kwargs: dict[str, Any] = {}

        while True:
            with _store_errors("list_tables"):
                response = await client.list_tables(**list_kwargs)
            table_names.extend(response.get("TableNames", []))

            last_table_name = response.get("LastEvaluatedTableName")
            if not last_table_name:
                break
            list_kwargs["ExclusiveStartTableName"] = last_table_name

        return sorted(table_names, key=str.casefold)

    async def describe_table(self, table_name: str) -> TableInfo:
        """Describe a table.

        Raises:
            TableNotFoundError: If the table does not exist.

        """
        with _store_errors("describe_table", table_name):
            response = await self._resource.meta.client.describe_table(TableName=table_name)

        table = response.get("Table")
        if not table:
            raise TableNotFoundError(table_name=table_name, operation="describe_table")
        return parse_table_description(dict(table), table_name=table_name)

    async def get_page(self, request: PageRequest) -> PageResult:
        table = await self._table(request.table_name)

        with _store_errors(request.operation, request.table_name):
            if request.operation == "query":
                response = await table.query(**request.params)
            else:
                response = await table.scan(**request.params)

        items = list(response.get("Items", []))
        return PageResult(
            items=items,
            last_evaluated_key=response.get("LastEvaluatedKey"),
            count=response.get("Count", len(items)),
            scanned_count=response.get("ScannedCount", len(items)),
        )

    async def put_item(self, table_name: str, item: Item) -> None:
        table = await self._table(table_name)
        with _store_errors("put_item", table_name):
            await table.put_item(Item=to_dynamo_value(item))

    async def delete_item(self, table_name: str, key: DynamoDBKey) -> None:
        table = await self._table(table_name)
        with _store_errors("delete_item", table_name):
            await table.delete_item(Key=to_dynamo_value(key))

    async def update_item(
        self,
        table_name: str,
        key: DynamoDBKey,
        update: UpdateExpression,
    ) -> None:
        table = await self._table(table_name)
        with _store_errors("update_item", table_name):
            await table.update_item(
                Key=to_dynamo_value(key),
                UpdateExpression=update.expression,
                ExpressionAttributeNames=update.attribute_names,
                ExpressionAttributeValues=to_dynamo_value(update.attribute_values),
            )

    async def transact_write(self, transact_items: Sequence[dict[str, Any]]) -> None:
        table_names = {
            action["TableName"] for item in transact_items for action in item.values()
        }
        table_name = next(iter(table_names)) if len(table_names) == 1 else None

        with _store_errors("transact_write", table_name):
            await self._resource.meta.client.transact_write_items(
                TransactItems=to_dynamo_value(list(transact_items)),
            )

    async def batch_write(self, request_items: RequestItems) -> RequestItems:
        table_name = next(iter(request_items)) if len(request_items) == 1 else None

        with _store_errors("batch_write", table_name):
            response = await self._resource.batch_write_item(
                RequestItems=to_dynamo_value(request_items),
            )

        return dict(response.get("UnprocessedItems") or {})


__all__ = [
    "DynamoStoreClient",
    "parse_table_description",
    "to_dynamo_value",
]
