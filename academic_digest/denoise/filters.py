"""Filter/rank pipeline: dedupe, then date, venue and relevance gates, then sort."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

from academic_digest.config import IngestionDefaults, VenueType
from academic_digest.denoise.dedup import Deduplicator
from academic_digest.errors import ConfigurationError
from academic_digest.models import Article
from academic_digest.utils import utc_now

logger = logging.getLogger(__name__)


@dataclass
class FilterOptions:
    max_total: int = 50
    min_relevance_score: float = 60
    exclude_older_than_days: int = 14
    include_preprints: bool = True

    @classmethod
    def from_settings(cls, ingestion: IngestionDefaults) -> FilterOptions:
        return cls(
            max_total=ingestion.max_total_articles,
            min_relevance_score=ingestion.min_relevance_score,
            exclude_older_than_days=ingestion.exclude_older_than_days,
            include_preprints=ingestion.include_preprints,
        )


class FilterRankPipeline:
    """Run every stage in sequence; each stage sees the previous stage's output."""

    def __init__(
        self,
        deduplicator: Optional[Deduplicator] = None,
        clock: Optional[Callable[[], datetime]] = None,
        logger_: Optional[logging.Logger] = None,
    ) -> None:
        self.log = logger_ or logger
        self.deduplicator = deduplicator or Deduplicator(self.log)
        self.clock = clock or utc_now

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def filter_and_rank(self, articles: list[Article], options: FilterOptions) -> list[Article]:
        return self.filter_unique(self.deduplicator.dedupe(articles), options)

    def filter_unique(self, articles: list[Article], options: FilterOptions) -> list[Article]:
        """Gate and rank articles that were already deduplicated."""
        if options.max_total < 0 or options.exclude_older_than_days < 0:
            raise ConfigurationError("max_total and exclude_older_than_days must be non-negative")

        before = len(articles)
        items = self.filter_by_date(articles, options.exclude_older_than_days)
        items = self.filter_by_venue(items, options.include_preprints)
        items = self.filter_by_relevance(items, options.min_relevance_score)
        items = self.rank(items)[: options.max_total]
        self.log.info("FilterRankPipeline: %d → %d articles", before, len(items))
        return items

    def filter_by_date(self, articles: list[Article], max_age_days: int) -> list[Article]:
        """Drop articles published before ``now - max_age_days``."""
        cutoff = self.clock() - timedelta(days=max_age_days)
        return [a for a in articles if a.published_at >= cutoff]

    def filter_by_venue(self, articles: list[Article], include_preprints: bool) -> list[Article]:
        if include_preprints:
            return articles
        return [a for a in articles if a.venue_type is not VenueType.PREPRINT]

    def filter_by_relevance(self, articles: list[Article], min_score: float) -> list[Article]:
        return [a for a in articles if a.relevance_score >= min_score]

    @staticmethod
    def rank(articles: list[Article]) -> list[Article]:
        """Stable sort: relevance, then quality, then most recent first."""
        return sorted(
            articles,
            key=lambda a: (a.relevance_score, a.quality_score, a.published_at),
            reverse=True,
        )
