"""dynamodesk exceptions.

This module defines the exception hierarchy for the dynamodesk library.
All custom exceptions inherit from DynamoDeskError, allowing callers to catch
all library-specific errors with a single except clause.

Exception categories:
- DynamoDeskError: Base exception for all dynamodesk errors
- ValidationError: Malformed query, filter or update description
- StoreError: Failure reported by the table store during a read or write
- ProfileNotFoundError: Requested AWS profile is not configured
- QueryIdInUseError: A read was started with the id of a running read

Note: cancelling a paginated read is not an error. A cancelled read returns a
BatchQueryResult with cancelled=True. Pydantic validation errors raised while
parsing request payloads are not wrapped and bubble up as
pydantic.ValidationError.
"""

from typing import Any


class DynamoDeskError(Exception):
    """Base exception for all dynamodesk errors.

    Example:
        try:
            await browser.query_batch(description, max_results=500)
        except DynamoDeskError as e:
            pass

    """


class ValidationError(DynamoDeskError):
    """Base class for errors in a query, filter or update description.

    Raised synchronously while building expressions and never retried.
    """


class EmptyUpdateError(ValidationError):
    """Raised when an update operation has no fields to update.

    At least one field must be specified for an update operation.

    Example:
        build_update_expression({})

    """

    def __init__(self) -> None:
        super().__init__("No updates provided")


class StoreError(DynamoDeskError):
    """Base class for failures returned by the table store.

    Reads propagate a StoreError to the caller. Writes capture it per
    operation in WriteOutcome.errors.

    Attributes:
        operation: The store operation that failed (e.g. "query", "batch_write").
        table_name: The table involved, when known.
        error_code: The store's error code, when known.
        original_error: The underlying botocore exception, if any.

    """

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        table_name: str | None = None,
        error_code: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        self.operation = operation
        self.table_name = table_name
        self.error_code = error_code
        self.original_error = original_error
        super().__init__(message)


class ThrottlingError(StoreError):
    """Raised when the store rejects a request for exceeding throughput.

    The Write Batcher does not see this as an exception for bulk writes: the
    store reports throttled requests as unprocessed items, which are retried
    with exponential backoff.
    """

    def __init__(
        self,
        *,
        operation: str | None = None,
        table_name: str | None = None,
        error_code: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        message = "Request rate exceeded provisioned throughput"
        if operation:
            message = f"{message} in {operation} operation"
        if table_name:
            message = f"{message} on table '{table_name}'"
        super().__init__(
            message,
            operation=operation,
            table_name=table_name,
            error_code=error_code,
            original_error=original_error,
        )


class TableNotFoundError(StoreError):
    """Raised when the requested table (or index) does not exist.

    Example:
        await browser.describe_table("missing-table")
        Raises TableNotFoundError: Table 'missing-table' not found

    """

    def __init__(
        self,
        *,
        table_name: str | None = None,
        operation: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        message = f"Table '{table_name}' not found" if table_name else "Table not found"
        super().__init__(
            message,
            operation=operation,
            table_name=table_name,
            error_code="ResourceNotFoundException",
            original_error=original_error,
        )


class ConditionCheckFailedError(StoreError):
    """Raised when a conditional write is rejected by the store."""

    def __init__(
        self,
        *,
        operation: str | None = None,
        table_name: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        message = "Conditional check failed"
        if operation:
            message = f"{message} in {operation} operation"
        super().__init__(
            message,
            operation=operation,
            table_name=table_name,
            error_code="ConditionalCheckFailedException",
            original_error=original_error,
        )


class TransactionCanceledError(StoreError):
    """Raised when a transactional write is cancelled by the store.

    A primary-key change runs as a two-item transaction; if either the delete
    or the put is rejected, the whole transaction is cancelled and neither
    item changes.

    Attributes:
        reasons: The per-item cancellation reason codes reported by the store.

    """

    def __init__(
        self,
        message: str = "Transaction cancelled",
        *,
        reasons: list[str] | None = None,
        operation: str | None = None,
        table_name: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        self.reasons = reasons or []
        super().__init__(
            message,
            operation=operation,
            table_name=table_name,
            error_code="TransactionCanceledException",
            original_error=original_error,
        )


class StoreClientError(StoreError):
    """Raised for any other error reported by the store.

    Example:
        StoreClientError("One or more parameter values were invalid",
                         error_code="ValidationException")

    """

    def __init__(
        self,
        message: str,
        *,
        error_code: str | None = None,
        operation: str | None = None,
        table_name: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        if error_code:
            message = f"{error_code}: {message}"
        super().__init__(
            message,
            operation=operation,
            table_name=table_name,
            error_code=error_code,
            original_error=original_error,
        )


class ProfileNotFoundError(DynamoDeskError):
    """Raised when a store client is requested for an unknown AWS profile.

    Attributes:
        profile_name: The profile that could not be found.

    """

    def __init__(self, *, profile_name: str) -> None:
        self.profile_name = profile_name
        super().__init__(f"Profile not found: {profile_name}")


class QueryIdInUseError(DynamoDeskError):
    """Raised when a read is started with the id of a read that is still running.

    Attributes:
        query_id: The id that is already registered.

    """

    def __init__(self, *, query_id: str) -> None:
        self.query_id = query_id
        super().__init__(f"Query id already in use: {query_id}")


_THROTTLING_CODES = frozenset(
    {
        "ProvisionedThroughputExceededException",
        "ThrottlingException",
        "RequestLimitExceeded",
    }
)


def wrap_client_error(
    error: Exception,
    *,
    operation: str | None = None,
    table_name: str | None = None,
) -> StoreError:
    """Convert a botocore ClientError into the matching StoreError subclass.

    Args:
        error: The exception raised by the DynamoDB client. Anything with a
            botocore-style ``response["Error"]`` mapping is accepted.
        operation: The store operation that failed.
        table_name: The table involved, when known.

    Returns:
        A StoreError subclass carrying the original error.

    """
    response: dict[str, Any] = getattr(error, "response", None) or {}
    error_info = response.get("Error", {})
    error_code = error_info.get("Code")
    message = error_info.get("Message") or str(error)

    if error_code in _THROTTLING_CODES:
        return ThrottlingError(
            operation=operation,
            table_name=table_name,
            error_code=error_code,
            original_error=error,
        )
    if error_code == "ResourceNotFoundException":
        return TableNotFoundError(
            table_name=table_name,
            operation=operation,
            original_error=error,
        )
    if error_code == "ConditionalCheckFailedException":
        return ConditionCheckFailedError(
            operation=operation,
            table_name=table_name,
            original_error=error,
        )
    if error_code == "TransactionCanceledException":
        reasons = [
            reason.get("Code", "None") for reason in response.get("CancellationReasons", [])
        ]
        return TransactionCanceledError(
            message,
            reasons=reasons,
            operation=operation,
            table_name=table_name,
            original_error=error,
        )
    return StoreClientError(
        message,
        error_code=error_code,
        operation=operation,
        table_name=table_name,
        original_error=error,
    )


__all__ = [
    "ConditionCheckFailedError",
    "DynamoDeskError",
    "EmptyUpdateError",
    "ProfileNotFoundError",
    "QueryIdInUseError",
    "StoreClientError",
    "StoreError",
    "TableNotFoundError",
    "ThrottlingError",
    "TransactionCanceledError",
    "ValidationError",
    "wrap_client_error",
]
