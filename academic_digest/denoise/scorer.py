"""Relevance scoring for a target field, and digest diversity scoring."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Iterable, Optional

import numpy as np

from academic_digest.config import AcademicField, are_related_fields, parse_field
from academic_digest.errors import ConfigurationError
from academic_digest.models import Article
from academic_digest.utils import utc_now

logger = logging.getLogger(__name__)

FIELD_MATCH_POINTS = 40
RELATED_FIELD_POINTS = 20
INTEREST_POINTS = 5
INTEREST_CAP = 25
QUALITY_WEIGHT = 0.2
# (max age in days, points), checked in order
RECENCY_TIERS = ((7, 15), (14, 10), (30, 5))


class RelevanceScorer:
    """Score articles 0-100 against a target field and optional interests.

    Components: field match (40, or 20 for a related field), interest matches
    (5 each, capped at 25), ``quality_score * 0.2``, and recency (15/10/5 for
    articles at most 7/14/30 days old).
    """

    def __init__(
        self,
        clock: Optional[Callable[[], datetime]] = None,
        logger_: Optional[logging.Logger] = None,
    ) -> None:
        self.clock = clock or utc_now
        self.log = logger_ or logger

    def score(
        self,
        articles: list[Article],
        field: AcademicField | str,
        interests: Iterable[str] = (),
    ) -> list[Article]:
        """Return copies of ``articles`` with ``relevance_score`` populated."""
        if not articles:
            return []
        target = parse_field(field)
        interests = list(interests)
        now = self.clock()

        field_pts = np.array([self._field_points(a, target) for a in articles], dtype=float)
        interest_pts = np.array(
            [min(self._interest_matches(a, interests) * INTEREST_POINTS, INTEREST_CAP) for a in articles],
            dtype=float,
        )
        quality_pts = np.array([a.quality_score for a in articles], dtype=float) * QUALITY_WEIGHT
        age_days = np.array(
            [(now - a.published_at).total_seconds() // 86400 for a in articles], dtype=float
        )
        recency_pts = np.select(
            [age_days <= limit for limit, _ in RECENCY_TIERS],
            [points for _, points in RECENCY_TIERS],
            default=0,
        )

        totals = np.clip(field_pts + interest_pts + quality_pts + recency_pts, 0, 100)

        scored: list[Article] = []
        for article, total in zip(articles, totals):
            rescored = article.copy()
            rescored.relevance_score = float(total)
            scored.append(rescored)

        self.log.info(
            "RelevanceScorer: scored %d articles for %s (mean %.1f)",
            len(scored), target.value, float(totals.mean()),
        )
        return scored

    @staticmethod
    def _field_points(article: Article, target: AcademicField) -> int:
        if article.field == target.value:
            return FIELD_MATCH_POINTS
        try:
            related = are_related_fields(article.field, target)
        except ConfigurationError:
            return 0
        return RELATED_FIELD_POINTS if related else 0

    @staticmethod
    def _interest_matches(article: Article, interests: list[str]) -> int:
        return sum(
            1 for interest in interests
            if interest in article.tags or interest in article.topics or interest in article.subfield
        )


def diversity_score(articles: Iterable[Article]) -> int:
    """Subfield, venue and topic variety on a 0-100 scale.

    ``min(subfields*20, 40) + min(venues*10, 30) + min(topics*2, 30)``.
    """
    articles = list(articles)
    if not articles:
        return 0
    subfields = {a.subfield for a in articles}
    venues = {a.venue for a in articles}
    topics = {t for a in articles for t in a.topics}
    return min(len(subfields) * 20, 40) + min(len(venues) * 10, 30) + min(len(topics) * 2, 30)
