"""PageService: cache-aware orchestration of the transformation pipeline."""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Iterable
from dataclasses import replace
from types import TracebackType
from typing import Any, Optional, Union

from ..cache import BoundedCache, CacheKey, normalize_page_name
from ..concurrency import ConcurrencyManager
from ..errors import PageFetchError, WikipullError
from ..models.config import WikipullConfig
from ..models.document import BatchResult, OutputFormat, PageInfo, RawPage, RenderedOutput
from ..models.events import EventType, PipelineEvent, ServiceStats
from ..pipeline.base import EventEmitter, TransformPipeline
from ..pipeline.steps import default_pipeline
from .protocols import PageSource

logger = logging.getLogger(__name__)


class PageService:
    """
    Primary API: turns wiki pages into RenderedOutput, memoized per format.

    ``process`` is synchronous and transforms HTML the caller already has.
    ``get_page`` and ``get_pages`` fetch through a PageSource and run the
    CPU-bound pipeline on a thread pool so the event loop stays free.

    Example:
        async with PageService(WikipullConfig(), source=my_source) as service:
            output = await service.get_page("Creeper", OutputFormat.MARKDOWN)
            print(output.markdown)

            batch = await service.get_pages(["Creeper", "Zombie"])
            print(batch.succeeded, batch.failed)

        print(service.get_cache_stats())

    The optional ``emit`` callback may be invoked from worker threads.
    """

    def __init__(
        self,
        config: Optional[WikipullConfig] = None,
        source: Optional[PageSource] = None,
        pipeline: Optional[TransformPipeline] = None,
        cache: Optional[BoundedCache[RenderedOutput]] = None,
        emit: Optional[EventEmitter] = None,
    ):
        """
        Initialize the service.

        Args:
            config: Service configuration (defaults apply when None)
            source: Fetch layer used by get_page/get_pages
            pipeline: Transformation pipeline (built from config when None)
            cache: Result cache (built from config when None and caching is enabled)
            emit: Optional callback receiving PipelineEvents
        """
        self.config = config or WikipullConfig()
        self._source = source
        self._pipeline = pipeline or default_pipeline(self.config)
        self._emit = emit

        self._cache: Optional[BoundedCache[RenderedOutput]] = cache
        if self._cache is None and self.config.cache.enabled:
            self._cache = BoundedCache(
                max_size=self.config.cache.max_size,
                ttl=self.config.cache.ttl_seconds,
                cleanup_interval=self.config.cache.cleanup_interval,
            )

        self._concurrency = ConcurrencyManager(max_workers=self.config.performance.cpu_workers)
        self._stats = ServiceStats()
        self._stats_lock = threading.Lock()

    @property
    def stats(self) -> ServiceStats:
        """Get cumulative service statistics."""
        return self._stats

    @property
    def cache(self) -> Optional[BoundedCache[RenderedOutput]]:
        return self._cache

    def _emit_event(self, event_type: EventType, page: str, **kwargs: Any) -> None:
        if self._emit:
            self._emit(PipelineEvent(type=event_type, page=page, **kwargs))

    def _count(self, field_name: str) -> None:
        with self._stats_lock:
            setattr(self._stats, field_name, getattr(self._stats, field_name) + 1)

    # Cache

    def _lookup(self, key: CacheKey) -> Optional[RenderedOutput]:
        if self._cache is None:
            return None
        output = self._cache.get(key)
        if output is None:
            self._count("cache_misses")
            self._emit_event(EventType.CACHE_MISS, key.page)
            return None
        self._count("cache_hits")
        self._emit_event(EventType.CACHE_HIT, key.page, message=key.format.value)
        logger.debug(f"Cache hit: {key}")
        return output

    def _store(self, key: CacheKey, output: RenderedOutput) -> None:
        if self._cache is None:
            return
        self._cache.set(key, output)
        self._emit_event(EventType.PAGE_CACHED, key.page, message=key.format.value)

    def clear_cache(self, page_name: Optional[str] = None) -> int:
        """
        Drop cached output.

        Args:
            page_name: Only this page (every format); everything when None

        Returns:
            Number of entries removed
        """
        if self._cache is None:
            return 0
        if page_name is None:
            removed = len(self._cache)
            self._cache.clear()
            logger.info(f"Cleared {removed} cached pages")
            return removed

        name = normalize_page_name(page_name)
        removed = sum(self._cache.delete(CacheKey(name, fmt)) for fmt in OutputFormat)
        logger.info(f"Cleared {removed} cached entries for {name}")
        return removed

    def get_cache_stats(self) -> dict[str, Any]:
        """Observability snapshot: {enabled, current_size, max_size, ttl}."""
        if self._cache is None:
            return {
                "enabled": False,
                "current_size": 0,
                "max_size": self.config.cache.max_size,
                "ttl": self.config.cache.ttl_seconds,
            }
        return self._cache.get_stats(enabled=True)

    # Processing

    def process(
        self,
        raw_html: Union[str, bytes],
        page: Union[PageInfo, str, None] = None,
        output_format: Union[OutputFormat, str] = OutputFormat.HTML,
        use_cache: bool = True,
        force_refresh: bool = False,
    ) -> RenderedOutput:
        """
        Transform one page's HTML.

        Args:
            raw_html: Page HTML (str or bytes)
            page: PageInfo or page title; the normalized title is the cache identity
            output_format: html, markdown or both
            use_cache: Read and write the result cache
            force_refresh: Skip the cache read but still store the fresh result

        Returns:
            RenderedOutput for the page

        Raises:
            InvalidDocument, ExtractionError, ConversionError: the failing stage's error
        """
        info = page if isinstance(page, PageInfo) else PageInfo(title=page or "")
        fmt = OutputFormat(output_format)
        page_name = normalize_page_name(info.title)
        key = CacheKey(page_name, fmt)
        # Anonymous pages have no stable identity to cache under
        cacheable = use_cache and bool(page_name)

        if cacheable and not force_refresh:
            cached = self._lookup(key)
            if cached is not None:
                return cached

        try:
            output = self._pipeline.run(raw_html, info, fmt, page=page_name, emit=self._emit)
        except WikipullError as e:
            self._count("pages_failed")
            logger.warning(f"Failed to process {page_name or 'page'}: {e}")
            raise

        self._count("pages_processed")
        logger.debug(f"Processed {page_name or 'page'} as {fmt.value}")
        if cacheable:
            self._store(key, output)
        return output

    async def _fetch(self, page_name: str) -> RawPage:
        if self._source is None:
            raise PageFetchError("No page source configured", page=page_name)
        try:
            return await self._source.fetch_page(page_name)
        except PageFetchError:
            raise
        except Exception as e:
            raise PageFetchError(f"Failed to fetch page: {e}", page=page_name) from e

    async def get_page(
        self,
        page_name: str,
        output_format: Union[OutputFormat, str] = OutputFormat.HTML,
        use_cache: bool = True,
        force_refresh: bool = False,
    ) -> RenderedOutput:
        """
        Fetch and transform one page, serving from cache when possible.

        Args:
            page_name: Page title in any common spelling ("redstone_dust")
            output_format: html, markdown or both
            use_cache: Read and write the result cache
            force_refresh: Always refetch, then update the cache

        Returns:
            RenderedOutput for the page

        Raises:
            PageFetchError: The page source failed
            WikipullError: A pipeline stage failed
        """
        name = normalize_page_name(page_name)
        fmt = OutputFormat(output_format)

        if use_cache and not force_refresh:
            cached = self._lookup(CacheKey(name, fmt))
            if cached is not None:
                return cached

        try:
            raw = await self._fetch(name)
        except PageFetchError as e:
            self._count("pages_failed")
            self._emit_event(EventType.PAGE_FAILED, name, stage=e.stage, error=e.message)
            logger.error(f"Failed to fetch {name}: {e.message}")
            raise

        # The requested name stays the identity even if the source reports a redirect target
        info = replace(raw.info, title=name)
        return await self._concurrency.run_cpu_bound(
            self.process,
            raw.html,
            info,
            fmt,
            use_cache,
            True,
        )

    async def get_pages(
        self,
        page_names: Iterable[str],
        output_format: Union[OutputFormat, str] = OutputFormat.HTML,
        concurrency: Optional[int] = None,
    ) -> BatchResult:
        """
        Fetch and transform several pages with bounded concurrency.

        Args:
            page_names: Page titles
            output_format: html, markdown or both
            concurrency: Maximum pages in flight (defaults to config)

        Returns:
            BatchResult keyed by the requested names
        """
        limit = concurrency or self.config.performance.batch_concurrency
        semaphore = asyncio.Semaphore(limit)
        names = list(dict.fromkeys(page_names))

        async def fetch_one(name: str) -> tuple[str, Optional[RenderedOutput], Optional[WikipullError]]:
            async with semaphore:
                try:
                    return name, await self.get_page(name, output_format), None
                except WikipullError as e:
                    return name, None, e

        batch = BatchResult()
        for name, output, error in await asyncio.gather(*(fetch_one(name) for name in names)):
            if error is not None:
                batch.errors[name] = error
            elif output is not None:
                batch.results[name] = output

        logger.info(f"Batch complete: {batch.succeeded} succeeded, {batch.failed} failed")
        return batch

    def close(self) -> None:
        """Release the worker threads."""
        self._concurrency.shutdown(wait=True)

    async def __aenter__(self) -> PageService:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
