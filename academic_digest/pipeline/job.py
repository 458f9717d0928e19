"""Weekly digest job: ingest → compose → validate → persist, per field."""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional

from academic_digest.config import AcademicField, Settings, parse_field
from academic_digest.denoise.selector import ArticleSelector
from academic_digest.digest.composer import CompositionOptions, DigestComposer
from academic_digest.digest.summarizer import build_summarizer
from academic_digest.errors import CompositionError
from academic_digest.pipeline.artifacts import ArtifactStore
from academic_digest.pipeline.orchestrator import IngestOrchestrator
from academic_digest.utils import digest_id, utc_now, week_info
from academic_digest.validation.engine import ValidationEngine

logger = logging.getLogger(__name__)


@dataclass
class JobResult:
    success: bool
    digest_ids: List[str] = field(default_factory=list)
    articles_count: int = 0
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    artifacts: Dict[str, str] = field(default_factory=dict)
    duration_seconds: float = 0.0


class WeeklyDigestJob:
    """Produce one digest per field for the current ISO week.

    Fields run sequentially. A field that cannot produce a digest is recorded
    in ``errors`` and the job moves on to the next one; degradations such as a
    failed source or a digest that misses validation go to ``warnings``.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        orchestrator: Optional[IngestOrchestrator] = None,
        composer: Optional[DigestComposer] = None,
        validator: Optional[ValidationEngine] = None,
        store: Optional[ArtifactStore] = None,
        clock: Optional[Callable[[], datetime]] = None,
        logger_: Optional[logging.Logger] = None,
    ) -> None:
        self.settings = settings or Settings()
        self.clock = clock or utc_now
        self.log = logger_ or logger
        rng = random.Random(self.settings.random_seed)

        self.orchestrator = orchestrator or IngestOrchestrator(
            self.settings, rng=rng, clock=self.clock, logger_=self.log
        )
        summarizer_cfg = self.settings.summarizer
        self.composer = composer or DigestComposer(
            summarizer=build_summarizer(summarizer_cfg, self.settings.content.words_per_minute),
            selector=ArticleSelector(self.settings.content.selection_buffer_minutes, logger_=self.log),
            rng=rng,
            clock=self.clock,
            concurrency=summarizer_cfg.concurrent_requests,
            summary_timeout=summarizer_cfg.timeout_seconds,
            logger_=self.log,
        )
        self.validator = validator or ValidationEngine(self.settings.content, logger_=self.log)
        self.store = store or ArtifactStore(self.settings.artifacts_dir)

    async def run(
        self,
        field: Optional[AcademicField | str] = None,
        force: bool = False,
        dry_run: bool = False,
    ) -> JobResult:
        t0 = time.monotonic()
        fields = [parse_field(field)] if field else list(self.settings.fields)
        result = JobResult(success=False)

        self.log.info(
            "Starting weekly digest job: fields=%s force=%s dry_run=%s",
            ",".join(f.value for f in fields), force, dry_run,
        )
        if not fields:
            result.errors.append("No fields specified for processing")
            return result

        for target in fields:
            await self._process_field(target, force, dry_run, result)

        result.success = not result.errors
        result.duration_seconds = time.monotonic() - t0
        self.log.info(
            "Weekly digest job finished: %d/%d digests, %d articles, %d errors, %d warnings in %.1fs",
            len(result.digest_ids), len(fields), result.articles_count,
            len(result.errors), len(result.warnings), result.duration_seconds,
        )
        return result

    async def _process_field(
        self, target: AcademicField, force: bool, dry_run: bool, result: JobResult
    ) -> None:
        week = week_info(self.clock())
        expected_id = digest_id(target.value, week.week_number, week.year)

        if not force and self.store.exists(expected_id):
            message = f"Digest {expected_id} already exists. Use --force to override."
            self.log.warning(message)
            result.errors.append(message)
            return

        articles, summary = await self.orchestrator.ingest(target)
        for source_error in summary.errors:
            result.warnings.append(f"Source failed for {target.value}: {source_error}")
        if not articles:
            message = f"No articles found for field: {target.value}"
            self.log.error(message)
            result.errors.append(message)
            return

        options = CompositionOptions.from_content(
            self.settings.content,
            max_summary_length=self.settings.summarizer.max_summary_length,
        )
        try:
            digest = await self.composer.compose(articles, target, options)
        except CompositionError as e:
            message = f"Failed to process {target.value}: {e}"
            self.log.error(message)
            result.errors.append(message)
            return

        validation = self.validator.validate_digest(digest, digest.articles)
        if not validation.valid:
            for issue in validation.errors + validation.warnings:
                result.warnings.append(f"Validation ({digest.id}): {issue.code} {issue.message}")
            self.log.warning(
                "Digest %s failed validation with score %d", digest.id, validation.score
            )

        result.digest_ids.append(digest.id)
        result.articles_count += len(digest.featured_articles)

        if dry_run:
            self.log.info("Dry run completed - digest %s not saved", digest.id)
            return

        ingest_stats = {
            "fetched": summary.total_fetched,
            "unique": summary.total_unique,
            "selected": summary.total_selected,
        }
        path = self.store.save(
            digest,
            extra={"validation": validation.to_dict(), "ingest": ingest_stats},
        )
        result.artifacts[digest.id] = str(path)
