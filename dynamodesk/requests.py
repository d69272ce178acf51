"""Shape query and scan descriptions into DynamoDB request parameters."""

from typing import Any, Literal, NamedTuple

from dynamodesk.expressions import build_filter, build_key_and_filter
from dynamodesk.keys import LastEvaluatedKey
from dynamodesk.models import QueryDescription, ScanDescription

_UNSET: Any = object()


class PageRequest(NamedTuple):
    """A single page read, ready to send to the store.

    Attributes:
        operation: "query" or "scan".
        table_name: The table to read.
        params: Keyword arguments for Table.query() / Table.scan().

    """

    operation: Literal["query", "scan"]
    table_name: str
    params: dict[str, Any]


def build_query_request(
    description: QueryDescription,
    *,
    exclusive_start_key: LastEvaluatedKey | None = _UNSET,
) -> PageRequest:
    """Build the request for one page of a query.

    Args:
        description: The query to run.
        exclusive_start_key: Continuation token overriding the one in the
            description. Pass None explicitly to start from the beginning.

    Returns:
        The PageRequest for Table.query().

    """
    expressions = build_key_and_filter(description.key_condition, description.filters)

    params: dict[str, Any] = {
        "KeyConditionExpression": expressions.key_condition_expression,
        "ExpressionAttributeNames": expressions.attribute_names,
        "ExpressionAttributeValues": expressions.attribute_values,
    }

    if expressions.filter_expression is not None:
        params["FilterExpression"] = expressions.filter_expression

    if description.index_name:
        params["IndexName"] = description.index_name

    if description.limit is not None:
        params["Limit"] = description.limit

    if description.scan_forward is not None:
        params["ScanIndexForward"] = description.scan_forward

    start_key = (
        description.exclusive_start_key if exclusive_start_key is _UNSET else exclusive_start_key
    )
    if start_key:
        params["ExclusiveStartKey"] = start_key

    return PageRequest(operation="query", table_name=description.table_name, params=params)


def build_scan_request(
    description: ScanDescription,
    *,
    exclusive_start_key: LastEvaluatedKey | None = _UNSET,
) -> PageRequest:
    """Build the request for one page of a scan.

    Placeholder maps are only sent when there is a filter expression, since
    DynamoDB rejects unused expression attribute names.
    """
    expressions = build_filter(description.filters)

    params: dict[str, Any] = {}

    if expressions.filter_expression is not None:
        params["FilterExpression"] = expressions.filter_expression
        params["ExpressionAttributeNames"] = expressions.attribute_names
        if expressions.attribute_values:
            params["ExpressionAttributeValues"] = expressions.attribute_values

    if description.index_name:
        params["IndexName"] = description.index_name

    if description.limit is not None:
        params["Limit"] = description.limit

    start_key = (
        description.exclusive_start_key if exclusive_start_key is _UNSET else exclusive_start_key
    )
    if start_key:
        params["ExclusiveStartKey"] = start_key

    return PageRequest(operation="scan", table_name=description.table_name, params=params)


__all__ = [
    "PageRequest",
    "build_query_request",
    "build_scan_request",
]
