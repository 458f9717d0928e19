"""Tests for the filter/rank pipeline."""

from __future__ import annotations

from datetime import timedelta

import pytest

from academic_digest.config import IngestionDefaults, VenueType
from academic_digest.denoise.filters import FilterOptions, FilterRankPipeline
from academic_digest.errors import ConfigurationError

from factories import NOW, fixed_clock, make_article


@pytest.fixture
def pipeline():
    return FilterRankPipeline(clock=fixed_clock)


class TestFilterOptions:
    def test_from_settings(self):
        opts = FilterOptions.from_settings(
            IngestionDefaults(max_total_articles=7, min_relevance_score=42,
                              exclude_older_than_days=3, include_preprints=False)
        )
        assert (opts.max_total, opts.min_relevance_score) == (7, 42)
        assert opts.exclude_older_than_days == 3
        assert opts.include_preprints is False


class TestStages:
    def test_date_filter_drops_old_articles(self, pipeline):
        fresh = make_article(0, published_at=NOW - timedelta(days=13))
        stale = make_article(1, published_at=NOW - timedelta(days=15))
        assert [a.id for a in pipeline.filter_by_date([fresh, stale], 14)] == ["article_0"]

    def test_preprints_excluded_on_request(self, pipeline):
        preprint = make_article(0, venue_type=VenueType.PREPRINT)
        journal = make_article(1)
        assert pipeline.filter_by_venue([preprint, journal], True) == [preprint, journal]
        assert pipeline.filter_by_venue([preprint, journal], False) == [journal]

    def test_relevance_threshold_is_inclusive(self, pipeline):
        at = make_article(0, relevance_score=60.0)
        below = make_article(1, relevance_score=59.9)
        assert pipeline.filter_by_relevance([at, below], 60) == [at]


class TestRank:
    def test_sorted_by_relevance_then_quality(self):
        articles = [
            make_article(0, relevance_score=70.0, quality_score=90.0),
            make_article(1, relevance_score=90.0, quality_score=60.0),
            make_article(2, relevance_score=70.0, quality_score=95.0),
        ]
        ranked = FilterRankPipeline.rank(articles)
        assert [a.id for a in ranked] == ["article_1", "article_2", "article_0"]

    def test_adjacent_pairs_are_ordered(self):
        articles = [
            make_article(i, relevance_score=float(60 + (i * 7) % 30), quality_score=float(50 + (i * 13) % 40))
            for i in range(15)
        ]
        ranked = FilterRankPipeline.rank(articles)
        for a, b in zip(ranked, ranked[1:]):
            assert a.relevance_score > b.relevance_score or (
                a.relevance_score == b.relevance_score and a.quality_score >= b.quality_score
            )


class TestFilterAndRank:
    def test_full_pipeline(self, pipeline):
        articles = [
            make_article(0, doi="10.1/a", relevance_score=80.0),
            make_article(1, doi="10.1/a", relevance_score=80.0),
            make_article(2, relevance_score=95.0),
            make_article(3, relevance_score=30.0),
            make_article(4, published_at=NOW - timedelta(days=40)),
        ]
        result = pipeline.filter_and_rank(articles, FilterOptions())
        assert [a.id for a in result] == ["article_2", "article_0"]

    def test_truncates_to_max_total(self, pipeline):
        articles = [make_article(i, relevance_score=float(70 + i)) for i in range(10)]
        result = pipeline.filter_and_rank(articles, FilterOptions(max_total=3))
        assert [a.id for a in result] == ["article_9", "article_8", "article_7"]

    def test_filter_unique_skips_dedupe(self, pipeline):
        articles = [make_article(0, doi="10.1/a"), make_article(1, doi="10.1/a")]
        assert len(pipeline.filter_unique(articles, FilterOptions())) == 2
        assert len(pipeline.filter_and_rank(articles, FilterOptions())) == 1

    def test_negative_options_rejected(self, pipeline):
        with pytest.raises(ConfigurationError):
            pipeline.filter_and_rank([], FilterOptions(max_total=-1))
