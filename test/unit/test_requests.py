from dynamodesk.models import (
    FilterCondition,
    FilterOperator,
    KeyCondition,
    PartitionKeyCondition,
    QueryDescription,
    ScanDescription,
    SortKeyCondition,
    SortKeyOperator,
)
from dynamodesk.requests import PageRequest, build_query_request, build_scan_request


def _query(**kwargs: object) -> QueryDescription:
    return QueryDescription(
        table_name="orders",
        key_condition=KeyCondition(
            partition_key=PartitionKeyCondition(name="user_id", value="u-1"),
        ),
        **kwargs,
    )


class TestBuildQueryRequest:
    def test_minimal_query(self) -> None:
        request = build_query_request(_query())

        assert request == PageRequest(
            operation="query",
            table_name="orders",
            params={
                "KeyConditionExpression": "#pk = :pk",
                "ExpressionAttributeNames": {"#pk": "user_id"},
                "ExpressionAttributeValues": {":pk": "u-1"},
            },
        )

    def test_full_query(self) -> None:
        description = QueryDescription(
            table_name="orders",
            index_name="by-status",
            key_condition=KeyCondition(
                partition_key=PartitionKeyCondition(name="status", value="open"),
                sort_key=SortKeyCondition(
                    name="created_at", operator=SortKeyOperator.GTE, value="2024-01-01"
                ),
            ),
            filters=[
                FilterCondition(
                    id="f", attribute="total", operator=FilterOperator.GT, value="100"
                ),
            ],
            limit=50,
            scan_forward=False,
            exclusive_start_key={"status": "open", "created_at": "2024-02-01"},
        )

        params = build_query_request(description).params

        assert params == {
            "KeyConditionExpression": "#pk = :pk AND #sk >= :sk",
            "FilterExpression": "#f0 > :f0",
            "ExpressionAttributeNames": {
                "#pk": "status",
                "#sk": "created_at",
                "#f0": "total",
            },
            "ExpressionAttributeValues": {
                ":pk": "open",
                ":sk": "2024-01-01",
                ":f0": "100",
            },
            "IndexName": "by-status",
            "Limit": 50,
            "ScanIndexForward": False,
            "ExclusiveStartKey": {"status": "open", "created_at": "2024-02-01"},
        }

    def test_scan_forward_true_is_sent(self) -> None:
        params = build_query_request(_query(scan_forward=True)).params

        assert params["ScanIndexForward"] is True

    def test_start_key_override(self) -> None:
        description = _query(exclusive_start_key={"user_id": "u-1", "sk": "a"})

        overridden = build_query_request(
            description, exclusive_start_key={"user_id": "u-1", "sk": "z"}
        )
        restarted = build_query_request(description, exclusive_start_key=None)

        assert overridden.params["ExclusiveStartKey"] == {"user_id": "u-1", "sk": "z"}
        assert "ExclusiveStartKey" not in restarted.params

    def test_empty_start_key_is_not_sent(self) -> None:
        params = build_query_request(_query(exclusive_start_key={})).params

        assert "ExclusiveStartKey" not in params


class TestBuildScanRequest:
    def test_unfiltered_scan_has_no_placeholders(self) -> None:
        request = build_scan_request(ScanDescription(table_name="orders"))

        assert request == PageRequest(operation="scan", table_name="orders", params={})

    def test_filtered_scan(self) -> None:
        description = ScanDescription(
            table_name="orders",
            index_name="by-status",
            limit=10,
            filters=[
                FilterCondition(
                    id="f", attribute="status", operator=FilterOperator.EQ, value="open"
                ),
            ],
        )

        params = build_scan_request(description).params

        assert params == {
            "FilterExpression": "#f0 = :f0",
            "ExpressionAttributeNames": {"#f0": "status"},
            "ExpressionAttributeValues": {":f0": "open"},
            "IndexName": "by-status",
            "Limit": 10,
        }

    def test_existence_filter_sends_no_values(self) -> None:
        description = ScanDescription(
            table_name="orders",
            filters=[
                FilterCondition(id="f", attribute="deleted_at", operator=FilterOperator.NOT_EXISTS),
            ],
        )

        params = build_scan_request(description).params

        assert params == {
            "FilterExpression": "attribute_not_exists(#f0)",
            "ExpressionAttributeNames": {"#f0": "deleted_at"},
        }

    def test_continuation(self) -> None:
        description = ScanDescription(table_name="orders")

        params = build_scan_request(description, exclusive_start_key={"id": "o-9"}).params

        assert params == {"ExclusiveStartKey": {"id": "o-9"}}
