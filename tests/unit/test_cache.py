"""Unit tests for the memoizing caches."""

import gc
import threading
import weakref

import pytest

from rosetta.core.cache import CacheInfo, MemoCache, reset_caches
from rosetta.core.parser import parse, parse_cache_info


class TestMemoCache:
    """Tests for MemoCache."""

    def test_computes_once(self) -> None:
        """The factory runs only on the first lookup of a key."""
        cache: MemoCache[str, int] = MemoCache("test")
        calls = []

        def factory() -> int:
            calls.append(1)
            return 42

        assert cache.get_or_compute("a", factory) == 42
        assert cache.get_or_compute("a", factory) == 42
        assert len(calls) == 1
        assert cache.info() == CacheInfo(hits=1, misses=1, size=1)

    def test_failed_factory_stores_nothing(self) -> None:
        """An exception from the factory propagates and leaves no entry."""
        cache: MemoCache[str, int] = MemoCache("test")

        def factory() -> int:
            raise ValueError("boom")

        with pytest.raises(ValueError):
            cache.get_or_compute("a", factory)
        assert "a" not in cache
        assert len(cache) == 0

    def test_put_if_absent_keeps_first(self) -> None:
        """The first value stored under a key wins."""
        cache: MemoCache[str, str] = MemoCache("test")
        assert cache.put_if_absent("k", "first") == "first"
        assert cache.put_if_absent("k", "second") == "first"
        assert cache.get("k") == "first"
        assert cache.get("missing") is None

    def test_concurrent_first_use(self) -> None:
        """Concurrent first lookups observe a single computed value."""
        cache: MemoCache[str, object] = MemoCache("test")
        results: list[object] = []
        barrier = threading.Barrier(8)

        def worker() -> None:
            barrier.wait()
            results.append(cache.get_or_compute("key", object))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(results) == 8
        assert all(result is results[0] for result in results)


class TestResetCaches:
    """Tests for reset_caches."""

    def test_clears_registered_caches(self) -> None:
        """Every cache built so far is emptied."""
        cache: MemoCache[str, int] = MemoCache("test")
        cache.put_if_absent("a", 1)
        parse("java.util.List<T>")
        assert parse_cache_info().size > 0

        reset_caches()

        assert len(cache) == 0
        assert parse_cache_info() == CacheInfo(0, 0, 0)

    def test_parse_after_reset_builds_new_instance(self) -> None:
        """Interned instances do not survive a reset."""
        before = parse("java.util.List<T>")
        reset_caches()
        after = parse("java.util.List<T>")
        assert before == after
        assert before is not after

    def test_discarded_caches_leave_the_registry(self) -> None:
        """The registry does not keep unreachable caches alive."""
        from rosetta.core import cache as cache_module

        cache: MemoCache[str, int] = MemoCache("scratch")
        cache_ref = weakref.ref(cache)
        assert cache in cache_module._REGISTRY

        del cache
        gc.collect()

        assert cache_ref() is None
        assert all(c.name != "scratch" for c in cache_module._REGISTRY)
