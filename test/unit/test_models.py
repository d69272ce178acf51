"""Tests for request, result, event and operation models."""

import pytest
from pydantic import TypeAdapter, ValidationError

from dynamodesk.models import (
    BatchQueryResult,
    FilterOperator,
    KeySchemaElement,
    KeyValueType,
    QueryDescription,
    QueryProgress,
    QueryStarted,
    ScanDescription,
    SortKeyOperator,
    TableInfo,
)
from dynamodesk.operations import (
    BatchOperation,
    DeleteOperation,
    PkChangeOperation,
    PutOperation,
    WriteOutcome,
    WriteProgress,
)

operations_adapter = TypeAdapter(list[BatchOperation])


class TestQueryDescription:
    def test_validates_camel_case_payload(self) -> None:
        description = QueryDescription.model_validate(
            {
                "tableName": "orders",
                "indexName": "by-date",
                "keyCondition": {
                    "partitionKey": {"name": "user_id", "value": "7", "valueType": "N"},
                    "sortKey": {
                        "name": "created_at",
                        "operator": "between",
                        "value": "2024-01-01",
                        "value2": "2024-12-31",
                    },
                },
                "filters": [
                    {"id": "f1", "attribute": "status", "operator": "not_exists"},
                ],
                "limit": 100,
                "scanForward": False,
                "exclusiveStartKey": {"user_id": 7, "created_at": "2024-03-01"},
            }
        )

        assert description.table_name == "orders"
        assert description.index_name == "by-date"
        assert description.key_condition.partition_key.value_type is KeyValueType.NUMBER
        assert description.key_condition.sort_key is not None
        assert description.key_condition.sort_key.operator is SortKeyOperator.BETWEEN
        assert description.filters[0].operator is FilterOperator.NOT_EXISTS
        assert description.filters[0].value == ""
        assert description.scan_forward is False
        assert description.exclusive_start_key == {"user_id": 7, "created_at": "2024-03-01"}

    def test_accepts_snake_case_names(self) -> None:
        description = ScanDescription(table_name="orders", exclusive_start_key={"id": "1"})

        assert description.model_dump(by_alias=True) == {
            "tableName": "orders",
            "indexName": None,
            "filters": [],
            "limit": None,
            "exclusiveStartKey": {"id": "1"},
        }

    def test_rejects_unknown_operator(self) -> None:
        with pytest.raises(ValidationError):
            QueryDescription.model_validate(
                {
                    "tableName": "orders",
                    "keyCondition": {
                        "partitionKey": {"name": "id", "value": "1"},
                        "sortKey": {"name": "sk", "operator": "like", "value": "x"},
                    },
                }
            )

    def test_requires_key_condition(self) -> None:
        with pytest.raises(ValidationError):
            QueryDescription.model_validate({"tableName": "orders"})


class TestEvents:
    def test_progress_serializes_with_camel_case(self) -> None:
        event = QueryProgress(
            query_id="query-1",
            count=10,
            scanned_count=12,
            elapsed_ms=40,
            items=[{"id": "1"}],
            is_complete=True,
        )

        assert event.model_dump(by_alias=True) == {
            "kind": "query-progress",
            "queryId": "query-1",
            "count": 10,
            "scannedCount": 12,
            "elapsedMs": 40,
            "items": [{"id": "1"}],
            "isComplete": True,
            "cancelled": False,
        }

    def test_events_are_frozen(self) -> None:
        event = QueryStarted(query_id="scan-1")

        with pytest.raises(ValidationError):
            event.query_id = "scan-2"  # type: ignore[misc]

    def test_event_kinds(self) -> None:
        assert QueryStarted(query_id="q").kind == "query-started"
        assert WriteProgress(processed=1, total=2).kind == "write-progress"


class TestBatchQueryResult:
    def test_defaults(self) -> None:
        result = BatchQueryResult()

        assert result.items == []
        assert result.last_evaluated_key is None
        assert result.count == 0
        assert result.cancelled is False

    def test_dump_by_alias(self) -> None:
        result = BatchQueryResult(
            items=[{"id": "1"}],
            last_evaluated_key={"id": "1"},
            count=1,
            scanned_count=3,
            elapsed_ms=12,
        )

        dumped = result.model_dump(by_alias=True)

        assert dumped["lastEvaluatedKey"] == {"id": "1"}
        assert dumped["scannedCount"] == 3
        assert dumped["elapsedMs"] == 12


class TestBatchOperation:
    def test_discriminates_on_type(self) -> None:
        operations = operations_adapter.validate_python(
            [
                {"type": "put", "tableName": "users", "item": {"id": "1", "name": "Homer"}},
                {"type": "delete", "tableName": "users", "key": {"id": "2"}},
                {
                    "type": "pk-change",
                    "tableName": "users",
                    "oldKey": {"id": "3"},
                    "newItem": {"id": "4", "name": "Marge"},
                },
            ]
        )

        assert operations == [
            PutOperation(table_name="users", item={"id": "1", "name": "Homer"}),
            DeleteOperation(table_name="users", key={"id": "2"}),
            PkChangeOperation(
                table_name="users", old_key={"id": "3"}, new_item={"id": "4", "name": "Marge"}
            ),
        ]

    def test_unknown_type_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            operations_adapter.validate_python(
                [{"type": "upsert", "tableName": "users", "item": {"id": "1"}}]
            )

    def test_variant_fields_are_required(self) -> None:
        with pytest.raises(ValidationError):
            operations_adapter.validate_python([{"type": "delete", "tableName": "users"}])

    def test_write_requests(self) -> None:
        put = PutOperation(table_name="users", item={"id": "1"})
        delete = DeleteOperation(table_name="users", key={"id": "2"})

        assert put.to_write_request() == {"PutRequest": {"Item": {"id": "1"}}}
        assert delete.to_write_request() == {"DeleteRequest": {"Key": {"id": "2"}}}

    def test_write_outcome_defaults(self) -> None:
        outcome = WriteOutcome(success=True, processed=3)

        assert outcome.errors == []


class TestTableInfo:
    def test_key_properties(self) -> None:
        info = TableInfo(
            table_name="orders",
            key_schema=[
                KeySchemaElement(attribute_name="user_id", key_type="HASH"),
                KeySchemaElement(attribute_name="created_at", key_type="RANGE"),
            ],
        )

        assert info.partition_key == "user_id"
        assert info.sort_key == "created_at"

    def test_table_without_sort_key(self) -> None:
        info = TableInfo.model_validate(
            {
                "tableName": "users",
                "keySchema": [{"attributeName": "id", "keyType": "HASH"}],
            }
        )

        assert info.partition_key == "id"
        assert info.sort_key is None
