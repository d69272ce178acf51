"""Request and response values exchanged with the UI layer.

Every model accepts both snake_case field names and the camelCase names used by
the UI layer, so a payload such as::

    {"tableName": "orders", "keyCondition": {"partitionKey": {"name": "id", "value": "1"}}}

validates directly into a QueryDescription.
"""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from dynamodesk.keys import Item, LastEvaluatedKey


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class KeyValueType(str, Enum):
    """DynamoDB scalar type of a key value typed in by the user."""

    STRING = "S"
    NUMBER = "N"
    BINARY = "B"


class SortKeyOperator(str, Enum):
    """Comparison applied to the sort key in a key condition."""

    EQ = "eq"
    BEGINS_WITH = "begins_with"
    BETWEEN = "between"
    LT = "lt"
    LTE = "lte"
    GT = "gt"
    GTE = "gte"


class FilterOperator(str, Enum):
    """Comparison applied by a filter condition."""

    EQ = "eq"
    NE = "ne"
    LT = "lt"
    LTE = "lte"
    GT = "gt"
    GTE = "gte"
    BEGINS_WITH = "begins_with"
    CONTAINS = "contains"
    EXISTS = "exists"
    NOT_EXISTS = "not_exists"
    BETWEEN = "between"


class PartitionKeyCondition(_CamelModel):
    name: str
    value: str
    value_type: KeyValueType | None = None


class SortKeyCondition(_CamelModel):
    """Condition on the sort key.

    value2 is only meaningful for the between operator.
    """

    name: str
    operator: SortKeyOperator
    value: str
    value2: str | None = None
    value_type: KeyValueType | None = None


class KeyCondition(_CamelModel):
    partition_key: PartitionKeyCondition
    sort_key: SortKeyCondition | None = None


class FilterCondition(_CamelModel):
    """A single filter; filters of one request are ANDed together.

    Attributes:
        id: Identifier assigned by the UI; not sent to the store.
        attribute: The attribute to compare.
        operator: The comparison.
        value: Compared value (ignored for exists / not_exists).
        value2: Upper bound for between.

    """

    id: str
    attribute: str
    operator: FilterOperator
    value: str = ""
    value2: str | None = None


class QueryDescription(_CamelModel):
    """A user-composed query against a table or one of its indexes.

    Attributes:
        table_name: Table to query.
        index_name: Optional GSI or LSI name.
        key_condition: Partition key equality plus optional sort key condition.
        filters: Filter conditions applied after the key condition.
        limit: Page size hint passed to the store.
        scan_forward: Ascending sort key order when True, descending when False.
        exclusive_start_key: Continuation token to resume from.

    """

    table_name: str
    index_name: str | None = None
    key_condition: KeyCondition
    filters: list[FilterCondition] = Field(default_factory=list)
    limit: int | None = None
    scan_forward: bool | None = None
    exclusive_start_key: LastEvaluatedKey | None = None


class ScanDescription(_CamelModel):
    """A full-table (or full-index) scan with optional filters."""

    table_name: str
    index_name: str | None = None
    filters: list[FilterCondition] = Field(default_factory=list)
    limit: int | None = None
    exclusive_start_key: LastEvaluatedKey | None = None


class PageResult(_CamelModel):
    """One page returned by the store, or several pages accumulated.

    Attributes:
        items: The returned items.
        last_evaluated_key: Continuation token; None means no more pages.
        count: Items returned after filtering.
        scanned_count: Items evaluated before filtering.

    """

    items: list[Item] = Field(default_factory=list)
    last_evaluated_key: LastEvaluatedKey | None = None
    count: int = 0
    scanned_count: int = 0


class BatchQueryResult(PageResult):
    """Result of a paginated read.

    Attributes:
        elapsed_ms: Wall time of the whole read.
        cancelled: True when the read stopped because cancellation was requested.

    """

    elapsed_ms: int = 0
    cancelled: bool = False


class QueryStarted(_CamelModel):
    """First event of a paginated read, carrying the id to cancel it with."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["query-started"] = "query-started"
    query_id: str


class QueryProgress(_CamelModel):
    """Progress event of a paginated read.

    items holds only the items fetched since the previous event; concatenated
    over all events of one read they give the full result, in order.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["query-progress"] = "query-progress"
    query_id: str
    count: int
    scanned_count: int
    elapsed_ms: int
    items: list[Item] | None = None
    is_complete: bool = False
    cancelled: bool = False


class KeySchemaElement(_CamelModel):
    attribute_name: str
    key_type: Literal["HASH", "RANGE"]


class AttributeDefinition(_CamelModel):
    attribute_name: str
    attribute_type: Literal["S", "N", "B"]


class Projection(_CamelModel):
    projection_type: Literal["ALL", "KEYS_ONLY", "INCLUDE"] = "ALL"
    non_key_attributes: list[str] | None = None


class SecondaryIndex(_CamelModel):
    index_name: str
    key_schema: list[KeySchemaElement]
    projection: Projection = Field(default_factory=Projection)


class TableInfo(_CamelModel):
    """Table metadata as shown in the table details panel."""

    table_name: str
    key_schema: list[KeySchemaElement]
    attribute_definitions: list[AttributeDefinition] = Field(default_factory=list)
    item_count: int | None = None
    table_size_bytes: int | None = None
    table_status: str | None = None
    global_secondary_indexes: list[SecondaryIndex] | None = None
    local_secondary_indexes: list[SecondaryIndex] | None = None

    @property
    def partition_key(self) -> str | None:
        return next((k.attribute_name for k in self.key_schema if k.key_type == "HASH"), None)

    @property
    def sort_key(self) -> str | None:
        return next((k.attribute_name for k in self.key_schema if k.key_type == "RANGE"), None)


class SsoSession(_CamelModel):
    """An ``[sso-session ...]`` block of the AWS config file."""

    name: str
    sso_start_url: str = ""
    sso_region: str = ""
    sso_registration_scopes: str | None = None


class AwsProfile(_CamelModel):
    """A configured AWS profile, as listed in the profile picker."""

    name: str
    region: str
    output: str | None = None
    sso_session: str | None = None
    sso_account_id: str | None = None
    sso_role_name: str | None = None
    sso_session_settings: SsoSession | None = None


__all__ = [
    "AttributeDefinition",
    "AwsProfile",
    "BatchQueryResult",
    "FilterCondition",
    "FilterOperator",
    "KeyCondition",
    "KeySchemaElement",
    "KeyValueType",
    "PageResult",
    "PartitionKeyCondition",
    "Projection",
    "QueryDescription",
    "QueryProgress",
    "QueryStarted",
    "ScanDescription",
    "SecondaryIndex",
    "SortKeyCondition",
    "SortKeyOperator",
    "SsoSession",
    "TableInfo",
]
