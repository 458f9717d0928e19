"""Tests for digest composition: parallel summaries, narrative, metrics."""

from __future__ import annotations

import asyncio
import random

import pytest

from academic_digest.config import ContentConfig, EditorialStyle
from academic_digest.digest.composer import CompositionOptions, DigestComposer
from academic_digest.digest.metrics import compute_quality_metrics
from academic_digest.digest.narrative import NarrativeWriter
from academic_digest.digest.summarizer import GeneratedSummary, SummaryOptions, TemplateSummarizer
from academic_digest.errors import CompositionError, ConfigurationError, SummarizationError

from factories import fixed_clock, make_article, make_articles


class FakeSummarizer:
    """Summarizer that fails or stalls for chosen article ids."""

    def __init__(self, fail=(), delays=None):
        self.fail = set(fail)
        self.delays = delays or {}
        self.calls = []

    async def summarize(self, article, options: SummaryOptions) -> GeneratedSummary:
        self.calls.append(article.id)
        await asyncio.sleep(self.delays.get(article.id, 0))
        if article.id in self.fail:
            raise SummarizationError(article.id, "model unavailable")
        return GeneratedSummary(
            article_id=article.id,
            summary=f"Summary of {article.id}",
            why_this_matters="Because.",
            key_findings=["finding"],
            reading_time=2,
        )


def make_composer(summarizer=None, **kwargs):
    return DigestComposer(
        summarizer=summarizer or TemplateSummarizer(),
        rng=random.Random(7),
        clock=fixed_clock,
        **kwargs,
    )


class TestCompositionOptions:
    def test_defaults(self):
        opts = CompositionOptions()
        assert (opts.max_articles, opts.min_articles, opts.target_reading_time) == (5, 3, 15)
        assert opts.editorial_style is EditorialStyle.PROFESSIONAL

    def test_from_content_with_overrides(self):
        opts = CompositionOptions.from_content(ContentConfig(max_reading_time_minutes=25), editorial_style="academic")
        assert opts.target_reading_time == 25
        assert opts.editorial_style is EditorialStyle.ACADEMIC
        assert opts.selection().target_reading_time == 25
        assert opts.summary().max_summary_length == 500

    @pytest.mark.parametrize(
        "overrides",
        [{"editorial_style": "casual"}, {"audience_level": "expert"}],
    )
    def test_unknown_style_or_audience_is_a_configuration_error(self, overrides):
        with pytest.raises(ConfigurationError, match="valid"):
            CompositionOptions(**overrides)

    def test_summary_options_reject_unknown_audience(self):
        with pytest.raises(ConfigurationError, match="audience_level"):
            SummaryOptions(audience_level="expert")


class TestDigestComposer:
    @pytest.mark.asyncio
    async def test_compose_full_digest(self):
        articles = make_articles(6, reading_time=3)
        digest = await make_composer().compose(articles, "ai-computing")

        assert digest.id == "ai-computing-2025-W11"
        assert (digest.week_number, digest.year) == (11, 2025)
        assert digest.field == "ai-computing"
        assert [ca.position for ca in digest.featured_articles] == [1, 2, 3, 4, 5]
        assert [ca.article.id for ca in digest.featured_articles] == [f"article_{i}" for i in range(5)]
        assert digest.total_reading_time == sum(ca.reading_time for ca in digest.featured_articles)
        assert digest.composed_at == fixed_clock()
        assert digest.composition_time >= 0
        assert "AI & Computing" in digest.introduction
        assert digest.methodology and digest.conclusion

    @pytest.mark.asyncio
    async def test_transitions_on_all_but_last(self):
        digest = await make_composer().compose(make_articles(5, reading_time=3), "ai-computing")
        transitions = [ca.transition for ca in digest.featured_articles]
        assert all(transitions[:-1])
        assert transitions[-1] is None

    @pytest.mark.asyncio
    async def test_articles_carry_summary_and_inputs_are_untouched(self):
        articles = make_articles(3, summary="", why_this_matters="")
        digest = await make_composer(FakeSummarizer()).compose(articles, "ai-computing")
        first = digest.featured_articles[0]
        assert first.article.summary == "Summary of article_0"
        assert first.article.why_this_matters == "Because."
        assert articles[0].summary == ""

    @pytest.mark.asyncio
    async def test_failed_summary_excludes_article(self):
        summarizer = FakeSummarizer(fail={"article_1"})
        digest = await make_composer(summarizer).compose(make_articles(4, reading_time=3), "ai-computing")
        assert [ca.article.id for ca in digest.featured_articles] == ["article_0", "article_2", "article_3"]
        assert [ca.position for ca in digest.featured_articles] == [1, 2, 3]
        assert summarizer.calls.count("article_1") == 1

    @pytest.mark.asyncio
    async def test_thin_digest_still_composes(self):
        summarizer = FakeSummarizer(fail={"article_0", "article_1"})
        digest = await make_composer(summarizer).compose(make_articles(3), "ai-computing")
        assert len(digest.featured_articles) == 1
        assert digest.featured_articles[0].transition is None

    @pytest.mark.asyncio
    async def test_all_failures_raise(self):
        summarizer = FakeSummarizer(fail={f"article_{i}" for i in range(3)})
        with pytest.raises(CompositionError):
            await make_composer(summarizer).compose(make_articles(3), "ai-computing")

    @pytest.mark.asyncio
    async def test_no_candidates_raise(self):
        with pytest.raises(CompositionError):
            await make_composer().compose([], "ai-computing")

    @pytest.mark.asyncio
    async def test_invalid_field(self):
        with pytest.raises(ConfigurationError):
            await make_composer().compose(make_articles(3), "alchemy")

    @pytest.mark.asyncio
    async def test_positions_follow_selection_not_completion(self):
        delays = {"article_0": 0.05, "article_1": 0.02, "article_2": 0.0}
        digest = await make_composer(FakeSummarizer(delays=delays)).compose(make_articles(3), "ai-computing")
        assert [ca.article.id for ca in digest.featured_articles] == ["article_0", "article_1", "article_2"]

    @pytest.mark.asyncio
    async def test_summary_timeout_excludes_article(self):
        summarizer = FakeSummarizer(delays={"article_2": 1.0})
        composer = make_composer(summarizer, summary_timeout=0.1)
        digest = await composer.compose(make_articles(3), "ai-computing")
        assert [ca.article.id for ca in digest.featured_articles] == ["article_0", "article_1"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("style", list(EditorialStyle))
    async def test_editorial_styles(self, style):
        opts = CompositionOptions(editorial_style=style)
        digest = await make_composer().compose(make_articles(3), "ai-computing", opts)
        assert len(digest.introduction) >= 50
        assert len(digest.conclusion) >= 30

    @pytest.mark.asyncio
    async def test_styles_produce_different_introductions(self):
        articles = make_articles(3)
        intros = set()
        for style in EditorialStyle:
            digest = await make_composer().compose(articles, "ai-computing", CompositionOptions(editorial_style=style))
            intros.add(digest.introduction)
        assert len(intros) == 3


class TestQualityMetrics:
    @pytest.mark.asyncio
    async def test_metrics(self):
        articles = [
            make_article(0, relevance_score=80.0, quality_score=90.0, novelty_score=60.0, venue="V", topics=["a", "b"]),
            make_article(1, relevance_score=60.0, quality_score=70.0, novelty_score=80.0, venue="V", topics=["b"]),
        ]
        digest = await make_composer(FakeSummarizer()).compose(articles, "ai-computing", CompositionOptions(min_articles=1))
        m = digest.quality_metrics
        assert m.average_relevance_score == pytest.approx(70.0)
        assert m.average_quality_score == pytest.approx(80.0)
        assert m.average_novelty_score == pytest.approx(70.0)
        assert m.venue_diversity == 1
        assert m.topic_diversity == 2
        assert (m.reading_time_distribution.shortest, m.reading_time_distribution.longest) == (2, 2)
        assert m.reading_time_distribution.average == pytest.approx(2.0)
        assert 0 <= m.diversity_score <= 100

    def test_empty_metrics_rejected(self):
        with pytest.raises(ValueError):
            compute_quality_metrics([])


class TestNarrativeWriter:
    def test_transition_mentions_subfields(self):
        writer = NarrativeWriter(random.Random(1))
        text = writer.transition("Genetics", "Ecology")
        assert "Genetics" in text or "Ecology" in text

    def test_seeded_transitions_are_repeatable(self):
        first, second = NarrativeWriter(random.Random(3)), NarrativeWriter(random.Random(3))
        a = [first.transition("A", "B") for _ in range(5)]
        b = [second.transition("A", "B") for _ in range(5)]
        assert a == b
