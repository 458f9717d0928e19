"""Digest composer: select → summarize in parallel → narrate → measure."""

from __future__ import annotations

import asyncio
import logging
import random
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from academic_digest.config import (
    AcademicField,
    AudienceLevel,
    ContentConfig,
    EditorialStyle,
    parse_field,
    parse_option,
)
from academic_digest.denoise.selector import ArticleSelector, SelectionOptions
from academic_digest.digest.metrics import compute_quality_metrics
from academic_digest.digest.narrative import NarrativeWriter
from academic_digest.digest.summarizer import (
    GeneratedSummary,
    Summarizer,
    SummaryOptions,
    TemplateSummarizer,
)
from academic_digest.errors import CompositionError, SummarizationError
from academic_digest.models import Article, ComposedArticle, ComposedDigest
from academic_digest.utils import digest_id, gather_settled, utc_now, week_info

logger = logging.getLogger(__name__)


@dataclass
class CompositionOptions:
    max_articles: int = 5
    min_articles: int = 3
    target_reading_time: int = 15
    audience_level: AudienceLevel = AudienceLevel.INTERMEDIATE
    include_technical_details: bool = True
    emphasize_applications: bool = True
    editorial_style: EditorialStyle = EditorialStyle.PROFESSIONAL
    max_summary_length: int = 500

    def __post_init__(self) -> None:
        self.audience_level = parse_option(AudienceLevel, self.audience_level, "audience_level")
        self.editorial_style = parse_option(EditorialStyle, self.editorial_style, "editorial_style")

    @classmethod
    def from_content(cls, content: ContentConfig, **overrides) -> CompositionOptions:
        values = dict(
            max_articles=content.max_articles_per_digest,
            min_articles=content.min_articles_per_digest,
            target_reading_time=content.max_reading_time_minutes,
        )
        values.update(overrides)
        return cls(**values)

    def selection(self) -> SelectionOptions:
        return SelectionOptions(
            max_articles=self.max_articles,
            min_articles=self.min_articles,
            target_reading_time=self.target_reading_time,
        )

    def summary(self) -> SummaryOptions:
        return SummaryOptions(
            audience_level=self.audience_level,
            include_technical_details=self.include_technical_details,
            emphasize_applications=self.emphasize_applications,
            max_summary_length=self.max_summary_length,
        )


class DigestComposer:
    """Turn ranked candidates for one field into a :class:`ComposedDigest`.

    Summaries run concurrently (bounded by ``concurrency``). A failed or timed
    out summary drops that article from the digest; the digest only fails when
    nothing survives.
    """

    def __init__(
        self,
        summarizer: Optional[Summarizer] = None,
        selector: Optional[ArticleSelector] = None,
        narrative: Optional[NarrativeWriter] = None,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], datetime]] = None,
        concurrency: int = 5,
        summary_timeout: Optional[float] = None,
        logger_: Optional[logging.Logger] = None,
    ) -> None:
        self.log = logger_ or logger
        self.summarizer: Summarizer = summarizer or TemplateSummarizer()
        self.selector = selector or ArticleSelector(logger_=self.log)
        self.narrative = narrative or NarrativeWriter(rng)
        self.clock = clock or utc_now
        self.concurrency = concurrency
        self.summary_timeout = summary_timeout

    async def compose(
        self,
        articles: list[Article],
        field: AcademicField | str,
        options: Optional[CompositionOptions] = None,
    ) -> ComposedDigest:
        t0 = time.monotonic()
        options = options or CompositionOptions()
        target = parse_field(field)
        week = week_info(self.clock())

        self.log.info(
            "DigestComposer: composing %s %d-W%02d from %d candidates",
            target.value, week.year, week.week_number, len(articles),
        )

        # 1. Select
        selected = self.selector.select(articles, options.selection())
        if not selected:
            raise CompositionError(f"No articles available for {target.value}")

        # 2. Summarize concurrently, keeping selection order
        summary_options = options.summary()
        settled = await gather_settled(
            [self._summarize(article, summary_options) for article in selected],
            limit=self.concurrency,
        )
        for idx, exc in settled.failures:
            self.log.warning("Dropping article %s from digest: %s", selected[idx].id, exc)

        survivors: list[tuple[Article, GeneratedSummary]] = [
            (selected[idx], summary) for idx, summary in settled.successes
        ]
        if not survivors:
            raise CompositionError(
                f"All {len(selected)} selected articles failed summarization for {target.value}"
            )
        if len(survivors) < options.min_articles:
            self.log.warning(
                "DigestComposer: only %d of minimum %d articles survived summarization",
                len(survivors), options.min_articles,
            )

        # 3. Positions and transitions
        composed: list[ComposedArticle] = []
        for i, (article, summary) in enumerate(survivors):
            transition = None
            if i < len(survivors) - 1:
                transition = self.narrative.transition(article.subfield, survivors[i + 1][0].subfield)
            owned = article.copy()
            owned.summary = summary.summary
            owned.why_this_matters = summary.why_this_matters
            owned.key_findings = list(summary.key_findings)
            composed.append(
                ComposedArticle(
                    article=owned,
                    summary=summary.summary,
                    why_this_matters=summary.why_this_matters,
                    key_findings=tuple(summary.key_findings),
                    reading_time=summary.reading_time,
                    position=i + 1,
                    transition=transition,
                )
            )

        # 4. Narrative
        style = options.editorial_style
        introduction = self.narrative.introduction(composed, target, style)
        methodology = self.narrative.methodology(composed, target, style)
        conclusion = self.narrative.conclusion(composed, target, style)

        # 5. Metrics
        metrics = compute_quality_metrics(composed)

        # 6. Stamp
        digest = ComposedDigest(
            id=digest_id(target.value, week.week_number, week.year),
            field=target.value,
            week_number=week.week_number,
            year=week.year,
            introduction=introduction,
            featured_articles=tuple(composed),
            methodology=methodology,
            conclusion=conclusion,
            total_reading_time=sum(ca.reading_time for ca in composed),
            quality_metrics=metrics,
            composed_at=self.clock(),
            composition_time=time.monotonic() - t0,
        )
        self.log.info(
            "DigestComposer: %s ready with %d articles, %d min reading, diversity %d",
            digest.id, len(composed), digest.total_reading_time, metrics.diversity_score,
        )
        return digest

    async def _summarize(self, article: Article, options: SummaryOptions) -> GeneratedSummary:
        call = self.summarizer.summarize(article, options)
        if self.summary_timeout is None:
            return await call
        try:
            return await asyncio.wait_for(call, timeout=self.summary_timeout)
        except asyncio.TimeoutError:
            raise SummarizationError(
                article.id, f"timed out after {self.summary_timeout}s"
            ) from None
