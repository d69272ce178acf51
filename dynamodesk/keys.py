"""Type aliases for DynamoDB items, keys and write requests.

Type aliases:
    KeyValue: The types allowed as partition key or sort key values in DynamoDB.
        Includes str, bytes, bytearray, int, and Decimal.

    Item: A full item as returned by the boto3 resource layer (attribute name to
        Python value).

    DynamoDBKey: A dictionary mapping key attribute names to key values. This is
        the format required by put/delete and by transactional writes.
        Example: {"user_id": "123", "timestamp": 1234567890}

    LastEvaluatedKey: The continuation token returned by a query or scan page.
        Pass it as exclusive_start_key to resume. Absent means no more pages.

    WriteRequest: One entry of a BatchWriteItem request, either
        {"PutRequest": {"Item": ...}} or {"DeleteRequest": {"Key": ...}}.

    RequestItems: Write requests grouped by table name, as sent to and returned
        (as unprocessed items) by BatchWriteItem.
"""

from decimal import Decimal
from typing import Any, TypeAlias

from typing_extensions import TypeAliasType

KeyValue: TypeAlias = str | bytes | bytearray | int | Decimal
Item: TypeAlias = dict[str, Any]
DynamoDBKey: TypeAlias = dict[str, Any]
LastEvaluatedKey = TypeAliasType("LastEvaluatedKey", DynamoDBKey)
WriteRequest: TypeAlias = dict[str, dict[str, Any]]
RequestItems: TypeAlias = dict[str, list[WriteRequest]]


__all__ = [
    "DynamoDBKey",
    "Item",
    "KeyValue",
    "LastEvaluatedKey",
    "RequestItems",
    "WriteRequest",
]
