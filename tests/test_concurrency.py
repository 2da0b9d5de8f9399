"""Tests for the pipeline worker pool."""

import threading

import pytest
from wikipull.concurrency import ConcurrencyManager


class TestConcurrencyManager:
    @pytest.mark.asyncio
    async def test_runs_on_worker_thread(self):
        async with ConcurrencyManager(max_workers=2) as manager:
            name = await manager.run_cpu_bound(lambda: threading.current_thread().name)

        assert name.startswith("wikipull-cpu-")

    @pytest.mark.asyncio
    async def test_keyword_arguments(self):
        def render(page, output_format="html", use_cache=True):
            return (page, output_format, use_cache)

        async with ConcurrencyManager() as manager:
            result = await manager.run_cpu_bound(render, "Creeper", output_format="markdown", use_cache=False)

        assert result == ("Creeper", "markdown", False)

    @pytest.mark.asyncio
    async def test_exceptions_propagate(self):
        def fail():
            raise KeyError("Creeper")

        async with ConcurrencyManager() as manager:
            with pytest.raises(KeyError):
                await manager.run_cpu_bound(fail)

            assert manager.active == 0

    @pytest.mark.asyncio
    async def test_pool_recreated_after_shutdown(self):
        manager = ConcurrencyManager(max_workers=1)
        assert await manager.run_cpu_bound(len, "abc") == 3

        manager.shutdown()
        assert await manager.run_cpu_bound(len, "abcd") == 4
        manager.shutdown()

    def test_invalid_worker_count(self):
        with pytest.raises(ValueError):
            ConcurrencyManager(max_workers=0)
