"""Worker threads for running the transformation pipeline off the event loop."""

import asyncio
import functools
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ConcurrencyManager:
    """
    Runs CPU-bound pipeline calls on a lazily created thread pool.

    Sanitizing, extracting and rendering a page is pure parsing work with no
    suspension points, so ``PageService.get_page`` hands it to this pool and
    awaits the result.

    Example:
        async with ConcurrencyManager(max_workers=4) as manager:
            output = await manager.run_cpu_bound(service.process, html, info, fmt)
            print(manager.active)  # jobs currently running or queued
    """

    def __init__(self, max_workers: int = 4) -> None:
        """
        Initialize the manager.

        Args:
            max_workers: Number of worker threads
        """
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        self.max_workers = max_workers
        self._executor: Optional[ThreadPoolExecutor] = None
        self._active = 0
        self._lock = threading.Lock()

    @property
    def executor(self) -> ThreadPoolExecutor:
        """Get or create the thread pool executor."""
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.max_workers,
                thread_name_prefix="wikipull-cpu-",
            )
        return self._executor

    @property
    def active(self) -> int:
        """Jobs submitted and not yet finished."""
        with self._lock:
            return self._active

    def _track(self, delta: int) -> None:
        with self._lock:
            self._active += delta

    async def run_cpu_bound(
        self,
        func: Callable[..., T],
        *args: Any,
        **kwargs: Any,
    ) -> T:
        """
        Run a function on a worker thread and await its result.

        Args:
            func: The function to execute
            *args: Positional arguments for the function
            **kwargs: Keyword arguments for the function

        Returns:
            The function's return value (exceptions propagate unchanged)
        """
        loop = asyncio.get_running_loop()
        call = functools.partial(func, *args, **kwargs)

        self._track(1)
        try:
            return await loop.run_in_executor(self.executor, call)
        finally:
            self._track(-1)

    def shutdown(self, wait: bool = True) -> None:
        """
        Stop the worker threads. A later call starts a fresh pool.

        Args:
            wait: Block until queued jobs have finished
        """
        if self._executor is not None:
            logger.debug(f"Shutting down pipeline workers ({self.active} active)")
            self._executor.shutdown(wait=wait)
            self._executor = None

    async def __aenter__(self) -> "ConcurrencyManager":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.shutdown(wait=True)
