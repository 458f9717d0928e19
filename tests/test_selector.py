"""Tests for reading-time bounded article selection."""

from __future__ import annotations

import pytest

from academic_digest.config import ContentConfig
from academic_digest.denoise.selector import ArticleSelector, SelectionOptions, estimated_minutes
from academic_digest.errors import ConfigurationError

from factories import make_article, make_articles


def ids(articles):
    return [a.id for a in articles]


class TestEstimatedMinutes:
    def test_floor_of_three_and_default_of_five(self):
        assert estimated_minutes(make_article(reading_time=1)) == 3
        assert estimated_minutes(make_article(reading_time=0)) == 5
        assert estimated_minutes(make_article(reading_time=9)) == 9


class TestSelectionOptions:
    def test_from_content(self):
        opts = SelectionOptions.from_content(ContentConfig(max_articles_per_digest=6, max_reading_time_minutes=20))
        assert (opts.max_articles, opts.min_articles, opts.target_reading_time) == (6, 3, 20)

    @pytest.mark.parametrize("max_articles, min_articles", [(5, 0), (2, 3)])
    def test_invalid_bounds(self, max_articles, min_articles):
        with pytest.raises(ConfigurationError):
            ArticleSelector().select(make_articles(5), SelectionOptions(max_articles, min_articles))


class TestArticleSelector:
    def test_buffer_boundary_admits_fourth_article(self):
        ranked = make_articles(20, reading_time=5)
        selected = ArticleSelector().select(ranked, SelectionOptions(5, 3, 15))
        assert ids(selected) == ["article_0", "article_1", "article_2", "article_3"]

    def test_stops_at_max_articles(self):
        ranked = make_articles(10, reading_time=1)
        assert len(ArticleSelector().select(ranked, SelectionOptions(5, 3, 15))) == 5

    def test_skips_long_article_until_minimum_met(self):
        ranked = [make_article(0, reading_time=30)] + [make_article(i, reading_time=5) for i in range(1, 8)]
        selected = ArticleSelector().select(ranked, SelectionOptions(5, 3, 15))
        assert ids(selected) == ["article_1", "article_2", "article_3", "article_4"]

    def test_backfills_in_rank_order_ignoring_budget(self):
        ranked = [
            make_article(0, reading_time=5),
            make_article(1, reading_time=12),
            make_article(2, reading_time=12),
            make_article(3, reading_time=12),
        ]
        selected = ArticleSelector().select(ranked, SelectionOptions(5, 3, 5))
        # budget 10: only article_0 fits, then article_1 and article_2 are backfilled
        assert ids(selected) == ["article_0", "article_1", "article_2"]

    def test_backfilled_result_keeps_rank_order(self):
        ranked = [
            make_article(0, reading_time=5),
            make_article(1, reading_time=20),
            make_article(2, reading_time=5),
        ]
        selected = ArticleSelector().select(ranked, SelectionOptions(5, 3, 5))
        assert ids(selected) == ["article_0", "article_1", "article_2"]

    def test_fewer_candidates_than_minimum_returns_all(self):
        ranked = make_articles(2, reading_time=40)
        assert ids(ArticleSelector().select(ranked, SelectionOptions(5, 3, 15))) == ["article_0", "article_1"]

    def test_empty(self):
        assert ArticleSelector().select([], SelectionOptions()) == []

    @pytest.mark.parametrize("count", [3, 4, 6, 12])
    @pytest.mark.parametrize("reading_time", [1, 5, 9, 25])
    def test_result_size_within_bounds(self, count, reading_time):
        ranked = make_articles(count, reading_time=reading_time)
        selected = ArticleSelector().select(ranked, SelectionOptions(5, 3, 15))
        assert 3 <= len(selected) <= 5

    def test_custom_buffer(self):
        ranked = make_articles(10, reading_time=5)
        selected = ArticleSelector(buffer_minutes=0).select(ranked, SelectionOptions(5, 3, 15))
        assert len(selected) == 3
