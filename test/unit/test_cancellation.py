import threading

import pytest

from dynamodesk.cancellation import CancellationRegistry, get_default_registry
from dynamodesk.exceptions import QueryIdInUseError


class TestCancellationRegistry:
    def test_cancel_live_read(self, registry: CancellationRegistry) -> None:
        registry.register("query-1")

        assert registry.request_cancel("query-1") is True
        assert registry.is_cancelled("query-1") is True

    def test_cancel_is_scoped_to_one_id(self, registry: CancellationRegistry) -> None:
        registry.register("query-1")
        registry.register("query-2")

        registry.request_cancel("query-1")

        assert registry.is_cancelled("query-2") is False

    def test_cancel_unknown_id_is_accepted_and_ignored(
        self, registry: CancellationRegistry
    ) -> None:
        assert registry.request_cancel("query-404") is True
        assert registry.is_cancelled("query-404") is False
        assert "query-404" not in registry

    def test_cancel_after_clear_leaves_nothing_behind(
        self, registry: CancellationRegistry
    ) -> None:
        registry.register("query-1")
        registry.clear("query-1")

        registry.request_cancel("query-1")

        assert len(registry) == 0
        assert registry.is_cancelled("query-1") is False

    def test_clear_is_idempotent(self, registry: CancellationRegistry) -> None:
        registry.register("query-1")
        registry.request_cancel("query-1")

        registry.clear("query-1")
        registry.clear("query-1")

        assert "query-1" not in registry
        assert registry.is_cancelled("query-1") is False

    def test_register_rejects_live_id(self, registry: CancellationRegistry) -> None:
        registry.register("query-1")
        registry.request_cancel("query-1")

        with pytest.raises(QueryIdInUseError) as exc_info:
            registry.register("query-1")

        assert exc_info.value.query_id == "query-1"
        assert registry.is_cancelled("query-1") is True

    def test_register_again_after_clear(self, registry: CancellationRegistry) -> None:
        registry.register("query-1")
        registry.request_cancel("query-1")
        registry.clear("query-1")

        registry.register("query-1")

        assert registry.is_cancelled("query-1") is False

    def test_new_query_ids_share_one_counter(self, registry: CancellationRegistry) -> None:
        assert registry.new_query_id("query") == "query-1"
        assert registry.new_query_id("scan") == "scan-2"
        assert registry.new_query_id("query") == "query-3"

    def test_new_query_id_skips_live_ids(self, registry: CancellationRegistry) -> None:
        registry.register("scan-1")

        assert registry.new_query_id("scan") == "scan-2"

    def test_concurrent_cancel_requests(self, registry: CancellationRegistry) -> None:
        ids = [f"scan-{i}" for i in range(50)]
        for query_id in ids:
            registry.register(query_id)

        threads = [threading.Thread(target=registry.request_cancel, args=(q,)) for q in ids]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert all(registry.is_cancelled(query_id) for query_id in ids)
        assert len(registry) == 50


def test_default_registry_is_shared() -> None:
    assert get_default_registry() is get_default_registry()
