"""Parallel ingest orchestrator.

Fetches one field's candidates from every configured source concurrently,
scores them against the field, then deduplicates, filters and ranks the pool.
"""

from __future__ import annotations

import asyncio
import logging
import random
import time
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from academic_digest.config import AcademicField, Settings, parse_field
from academic_digest.denoise.filters import FilterOptions, FilterRankPipeline
from academic_digest.denoise.scorer import RelevanceScorer
from academic_digest.errors import SourceError
from academic_digest.models import Article, IngestResult, IngestSummary
from academic_digest.sources.base import SourceAdapter
from academic_digest.sources.factory import build_adapter
from academic_digest.utils import utc_now

logger = logging.getLogger(__name__)

AdapterFactory = Callable[..., SourceAdapter]


class IngestOrchestrator:
    """Orchestrates parallel ingestion from all configured sources.

    Usage:
        orchestrator = IngestOrchestrator(settings)
        articles, summary = await orchestrator.ingest("ai-computing")
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        adapter_factory: AdapterFactory = build_adapter,
        scorer: Optional[RelevanceScorer] = None,
        pipeline: Optional[FilterRankPipeline] = None,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], datetime]] = None,
        logger_: Optional[logging.Logger] = None,
    ) -> None:
        self.settings = settings or Settings()
        self.adapter_factory = adapter_factory
        self.rng = rng or random.Random(self.settings.random_seed)
        self.clock = clock or utc_now
        self.log = logger_ or logger
        self.scorer = scorer or RelevanceScorer(clock=self.clock, logger_=self.log)
        self.pipeline = pipeline or FilterRankPipeline(clock=self.clock, logger_=self.log)
        self.max_concurrent = self.settings.performance.max_concurrent_sources
        self.request_timeout = self.settings.performance.request_timeout_seconds

    async def ingest(
        self,
        field: AcademicField | str,
        limit: Optional[int] = None,
        source_ids: Optional[List[str]] = None,
    ) -> Tuple[List[Article], IngestSummary]:
        """Fetch, score, deduplicate, filter and rank candidates for ``field``.

        A failing source contributes zero articles and an error entry in the
        returned summary; it never aborts the run.
        """
        target = parse_field(field)
        summary = IngestSummary()
        t0 = time.monotonic()

        sources = self._get_sources(source_ids)
        if not sources:
            self.log.warning("No sources to ingest (none configured or none match filter)")
            return [], summary

        per_source = self.settings.ingestion.max_articles_per_source
        sem = asyncio.Semaphore(self.max_concurrent)
        tasks = [self._ingest_source(cfg, target, per_source, sem) for cfg in sources]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        pool: List[Article] = []
        for cfg, result in zip(sources, results):
            if isinstance(result, asyncio.CancelledError):
                raise result
            if isinstance(result, BaseException):
                self.log.error("Ingest task for %s failed: %s", cfg.get("id"), result)
                summary.add(IngestResult(source_id=str(cfg.get("id")), errors=1, error_message=str(result)))
                continue
            source_result, articles = result
            summary.add(source_result)
            pool.extend(articles)

        scored = self.scorer.score(pool, target)
        unique = self.pipeline.deduplicator.dedupe(scored)
        summary.total_unique = len(unique)

        options = FilterOptions.from_settings(self.settings.ingestion)
        if limit is not None:
            options.max_total = limit
        ranked = self.pipeline.filter_unique(unique, options)
        summary.total_selected = len(ranked)
        summary.duration_seconds = time.monotonic() - t0

        self.log.info(
            "Ingest %s complete: %d fetched, %d unique, %d kept, %d errors in %.1fs",
            target.value,
            summary.total_fetched,
            summary.total_unique,
            summary.total_selected,
            summary.total_errors,
            summary.duration_seconds,
        )
        return ranked, summary

    async def _ingest_source(
        self,
        cfg: Dict[str, Any],
        field: AcademicField,
        max_results: int,
        sem: asyncio.Semaphore,
    ) -> Tuple[IngestResult, List[Article]]:
        """Fetch a single source with semaphore-based concurrency control."""
        source_id = str(cfg.get("id"))
        result = IngestResult(source_id=source_id)
        articles: List[Article] = []
        t0 = time.monotonic()

        async with sem:
            try:
                adapter = self.adapter_factory(cfg, rng=self.rng, clock=self.clock)
                articles = await self._fetch_source(adapter, field, max_results)
                result.fetched = len(articles)
                self.log.info("Source %s: fetched=%d for %s", source_id, result.fetched, field.value)
            except (SourceError, TimeoutError) as e:
                result.error_message = str(e)
                result.errors = 1
                articles = []
                self.log.error("Source %s failed: %s", source_id, e)

        result.duration_seconds = time.monotonic() - t0
        return result, articles

    async def _fetch_source(
        self, adapter: SourceAdapter, field: AcademicField, max_results: int
    ) -> List[Article]:
        try:
            return await asyncio.wait_for(
                adapter.fetch(field, max_results),
                timeout=self.request_timeout,
            )
        except asyncio.TimeoutError:
            raise TimeoutError(
                f"Source {adapter.source_id} fetch timed out after {self.request_timeout}s"
            ) from None

    def _get_sources(self, source_ids: Optional[List[str]] = None) -> List[Dict[str, Any]]:
        """Enabled source configs, optionally filtered by ID."""
        sources = []
        for cfg in self.settings.sources:
            if not cfg.get("enabled", True):
                continue
            if source_ids and cfg.get("id") not in source_ids:
                continue
            sources.append(cfg)
        return sources
