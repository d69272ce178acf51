"""Shared test fixtures and store stubs.

This module provides:
- PagedStore: an in-memory StoreClient serving a fixed item set page by page
- ManualClock: a clock that only moves when a test advances it
- Description fixtures reused across executor and browser tests
"""

from collections.abc import Callable

from pytest import fixture

from dynamodesk.cancellation import CancellationRegistry
from dynamodesk.keys import Item
from dynamodesk.models import (
    KeyCondition,
    PageResult,
    PartitionKeyCondition,
    QueryDescription,
    ScanDescription,
)
from dynamodesk.progress import ProgressEvent
from dynamodesk.requests import PageRequest


class ManualClock:
    """Monotonic clock controlled by the test."""

    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class PagedStore:
    """Serves `total` items in pages of `page_size`.

    The continuation token is {"offset": n}. on_fetch, if set, is called with
    the 1-based fetch number after each page is produced.
    """

    def __init__(
        self,
        *,
        total: int,
        page_size: int,
        on_fetch: Callable[[int], None] | None = None,
    ) -> None:
        self.items: list[Item] = [{"id": f"item-{i:03d}"} for i in range(total)]
        self.page_size = page_size
        self.on_fetch = on_fetch
        self.requests: list[PageRequest] = []

    async def get_page(self, request: PageRequest) -> PageResult:
        self.requests.append(request)
        start = request.params.get("ExclusiveStartKey", {}).get("offset", 0)
        page = self.items[start : start + self.page_size]
        end = start + len(page)

        if self.on_fetch is not None:
            self.on_fetch(len(self.requests))

        return PageResult(
            items=page,
            last_evaluated_key={"offset": end} if end < len(self.items) else None,
            count=len(page),
            scanned_count=len(page),
        )


class RecordingSink:
    """Progress sink keeping every event in order."""

    def __init__(self, on_event: Callable[[ProgressEvent], None] | None = None) -> None:
        self.events: list[ProgressEvent] = []
        self.on_event = on_event

    def emit(self, event: ProgressEvent) -> None:
        self.events.append(event)
        if self.on_event is not None:
            self.on_event(event)


@fixture
def registry() -> CancellationRegistry:
    return CancellationRegistry()


@fixture
def clock() -> ManualClock:
    return ManualClock()


@fixture
def query_description() -> QueryDescription:
    return QueryDescription(
        table_name="orders",
        key_condition=KeyCondition(
            partition_key=PartitionKeyCondition(name="user_id", value="user-123"),
        ),
    )


@fixture
def scan_description() -> ScanDescription:
    return ScanDescription(table_name="orders")


@fixture
def make_paged_store() -> Callable[..., PagedStore]:
    return PagedStore


@fixture
def sink() -> RecordingSink:
    return RecordingSink()
