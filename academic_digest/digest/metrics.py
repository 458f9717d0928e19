"""Quality metrics for a composed digest."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from academic_digest.denoise.scorer import diversity_score
from academic_digest.models import ComposedArticle, QualityMetrics, ReadingTimeDistribution


def compute_quality_metrics(articles: Sequence[ComposedArticle]) -> QualityMetrics:
    """Means of the article scores, reading-time spread, and variety counts.

    ``venue_diversity`` and ``topic_diversity`` are raw distinct counts, unlike
    the capped terms inside ``diversity_score``.
    """
    if not articles:
        raise ValueError("cannot compute metrics for an empty digest")

    scores = np.array(
        [
            [ca.article.relevance_score, ca.article.quality_score, ca.article.novelty_score]
            for ca in articles
        ],
        dtype=float,
    )
    relevance, quality, novelty = scores.mean(axis=0)
    reading = np.array([ca.reading_time for ca in articles], dtype=float)

    featured = [ca.article for ca in articles]
    return QualityMetrics(
        average_relevance_score=float(relevance),
        average_quality_score=float(quality),
        average_novelty_score=float(novelty),
        diversity_score=diversity_score(featured),
        reading_time_distribution=ReadingTimeDistribution(
            shortest=int(reading.min()),
            longest=int(reading.max()),
            average=float(reading.mean()),
        ),
        venue_diversity=len({a.venue for a in featured}),
        topic_diversity=len({t for a in featured for t in a.topics}),
    )
