"""Query, scan and batch-write execution core for a DynamoDB table browser."""

import logging

from dynamodesk.batcher import WriteBatcher
from dynamodesk.browser import TableBrowser
from dynamodesk.cancellation import CancellationRegistry, get_default_registry
from dynamodesk.client import DynamoStoreClient
from dynamodesk.config import DynamoDeskSettings
from dynamodesk.exceptions import (
    ConditionCheckFailedError,
    DynamoDeskError,
    EmptyUpdateError,
    ProfileNotFoundError,
    QueryIdInUseError,
    StoreClientError,
    StoreError,
    TableNotFoundError,
    ThrottlingError,
    TransactionCanceledError,
    ValidationError,
)
from dynamodesk.executor import PaginatedReadExecutor
from dynamodesk.expressions import build_filter, build_key_and_filter, build_update_expression
from dynamodesk.models import (
    AwsProfile,
    BatchQueryResult,
    FilterCondition,
    FilterOperator,
    KeyCondition,
    KeyValueType,
    PageResult,
    PartitionKeyCondition,
    QueryDescription,
    QueryProgress,
    QueryStarted,
    ScanDescription,
    SortKeyCondition,
    SortKeyOperator,
    SsoSession,
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
from dynamodesk.progress import CallbackProgressSink, NullProgressSink, ProgressChannel
from dynamodesk.sessions import StoreClientFactory, list_profiles
from dynamodesk.store import StoreClient

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "AwsProfile",
    "BatchOperation",
    "BatchQueryResult",
    "CallbackProgressSink",
    "CancellationRegistry",
    "ConditionCheckFailedError",
    "DeleteOperation",
    "DynamoDeskError",
    "DynamoDeskSettings",
    "DynamoStoreClient",
    "EmptyUpdateError",
    "FilterCondition",
    "FilterOperator",
    "KeyCondition",
    "KeyValueType",
    "NullProgressSink",
    "PageResult",
    "PaginatedReadExecutor",
    "PartitionKeyCondition",
    "PkChangeOperation",
    "ProfileNotFoundError",
    "ProgressChannel",
    "PutOperation",
    "QueryDescription",
    "QueryIdInUseError",
    "QueryProgress",
    "QueryStarted",
    "ScanDescription",
    "SortKeyCondition",
    "SortKeyOperator",
    "SsoSession",
    "StoreClient",
    "StoreClientError",
    "StoreClientFactory",
    "StoreError",
    "TableBrowser",
    "TableInfo",
    "TableNotFoundError",
    "ThrottlingError",
    "TransactionCanceledError",
    "ValidationError",
    "WriteBatcher",
    "WriteOutcome",
    "WriteProgress",
    "build_filter",
    "build_key_and_filter",
    "build_update_expression",
    "get_default_registry",
    "list_profiles",
]
