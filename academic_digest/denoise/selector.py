"""Greedy article selection under a reading-time budget."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from academic_digest.config import ContentConfig
from academic_digest.errors import ConfigurationError
from academic_digest.models import Article

logger = logging.getLogger(__name__)

BUFFER_MINUTES = 5
MIN_ESTIMATED_MINUTES = 3
DEFAULT_ESTIMATED_MINUTES = 5


@dataclass
class SelectionOptions:
    max_articles: int = 5
    min_articles: int = 3
    target_reading_time: int = 15

    @classmethod
    def from_content(cls, content: ContentConfig) -> SelectionOptions:
        return cls(
            max_articles=content.max_articles_per_digest,
            min_articles=content.min_articles_per_digest,
            target_reading_time=content.max_reading_time_minutes,
        )

    def validate(self) -> None:
        if self.min_articles < 1:
            raise ConfigurationError(f"min_articles must be >= 1, got {self.min_articles}")
        if self.max_articles < self.min_articles:
            raise ConfigurationError(
                f"max_articles ({self.max_articles}) must be >= min_articles ({self.min_articles})"
            )


def estimated_minutes(article: Article) -> int:
    return max(MIN_ESTIMATED_MINUTES, article.reading_time or DEFAULT_ESTIMATED_MINUTES)


class ArticleSelector:
    """Pick a bounded subset of ranked candidates.

    Walks candidates in rank order, admitting each one whose estimated reading
    time still fits within ``target_reading_time`` plus a fixed 5 minute buffer.
    A candidate that does not fit ends the walk once ``min_articles`` is met and
    is skipped otherwise. Afterwards the selection is backfilled in rank order,
    ignoring the budget, until ``min_articles`` is reached or candidates run out.
    """

    def __init__(self, buffer_minutes: int = BUFFER_MINUTES, logger_: Optional[logging.Logger] = None) -> None:
        self.buffer_minutes = buffer_minutes
        self.log = logger_ or logger

    def select(self, ranked: list[Article], options: SelectionOptions) -> list[Article]:
        options.validate()
        budget = options.target_reading_time + self.buffer_minutes

        chosen: list[int] = []
        minutes = 0
        for idx, article in enumerate(ranked):
            if len(chosen) >= options.max_articles:
                break
            estimate = estimated_minutes(article)
            if minutes + estimate <= budget:
                chosen.append(idx)
                minutes += estimate
            elif len(chosen) >= options.min_articles:
                break

        if len(chosen) < options.min_articles:
            taken = set(chosen)
            for idx in range(len(ranked)):
                if len(chosen) >= options.min_articles:
                    break
                if idx not in taken:
                    chosen.append(idx)
                    minutes += estimated_minutes(ranked[idx])

        selected = [ranked[idx] for idx in sorted(chosen)]
        self.log.info(
            "ArticleSelector: %d candidates → %d selected (~%d min, target %d)",
            len(ranked), len(selected), minutes, options.target_reading_time,
        )
        return selected
