"""Tests for template and LLM summarizers."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, patch

import pytest

from academic_digest.config import AudienceLevel, SummarizerSettings
from academic_digest.digest.summarizer import (
    GENERIC_FINDINGS,
    LLMSummarizer,
    SummaryOptions,
    TemplateSummarizer,
    adjust_complexity,
    build_summarizer,
    key_results,
    main_finding,
    parse_summary_json,
)
from academic_digest.errors import ConfigurationError, SummarizationError

from factories import make_article


class TestTemplateHelpers:
    def test_main_finding_prefers_indicator_sentence(self):
        abstract = "Background sentence here. We found that the effect holds. More text."
        assert main_finding(abstract) == "We found that the effect holds"

    def test_main_finding_falls_back_to_first_sentence(self):
        assert main_finding("First sentence. Second sentence.") == "First sentence"

    def test_key_results_extracts_quantities(self):
        text = "Accuracy rose to 92% accuracy and inference ran 3 times faster."
        assert key_results(text) == "The study achieved 92% accuracy, 3 times faster."

    def test_key_results_default(self):
        assert key_results("Nothing measurable.").startswith("The results show promising outcomes")

    def test_beginner_simplification(self):
        text = "We apply CRISPR-Cas9 to cells."
        assert adjust_complexity(text, AudienceLevel.BEGINNER) == "We apply gene editing technology to cells."
        assert adjust_complexity(text, AudienceLevel.ADVANCED) == text


class TestTemplateSummarizer:
    @pytest.mark.asyncio
    async def test_summary_fields(self):
        article = make_article(methodology="Randomized controlled trial")
        result = await TemplateSummarizer().summarize(article, SummaryOptions())
        assert result.article_id == "article_0"
        assert result.summary
        assert len(result.summary) <= 500
        assert result.reading_time >= 1
        assert 0 <= result.quality_score <= 100
        assert "randomized controlled trial" in result.summary.lower()

    @pytest.mark.asyncio
    async def test_truncates_to_max_length(self):
        result = await TemplateSummarizer().summarize(make_article(), SummaryOptions(max_summary_length=60))
        assert len(result.summary) <= 60
        assert result.summary.endswith("...")

    @pytest.mark.asyncio
    async def test_key_findings_from_abstract(self):
        result = await TemplateSummarizer().summarize(make_article(key_findings=[]), SummaryOptions())
        assert len(result.key_findings) == 2
        assert all(f.endswith(".") for f in result.key_findings)

    @pytest.mark.asyncio
    async def test_existing_key_findings_are_capped_at_three(self):
        article = make_article(key_findings=["a", "b", "c", "d"])
        result = await TemplateSummarizer().summarize(article, SummaryOptions())
        assert result.key_findings == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_generic_findings_when_nothing_matches(self):
        article = make_article(abstract="Short. Plain words only here.", key_findings=[])
        result = await TemplateSummarizer().summarize(article, SummaryOptions())
        assert result.key_findings == GENERIC_FINDINGS

    @pytest.mark.asyncio
    async def test_why_this_matters_uses_field_and_subfield(self):
        article = make_article(subfield="Robotics")
        applied = await TemplateSummarizer().summarize(article, SummaryOptions(emphasize_applications=True))
        fundamental = await TemplateSummarizer().summarize(article, SummaryOptions(emphasize_applications=False))
        assert "Robotics" in applied.why_this_matters
        assert applied.why_this_matters != fundamental.why_this_matters

    @pytest.mark.asyncio
    async def test_why_this_matters_for_unknown_field(self):
        result = await TemplateSummarizer().summarize(make_article(field="astrology"), SummaryOptions())
        assert "astrology" in result.why_this_matters


class TestParseSummaryJson:
    def test_plain_and_fenced(self):
        payload = {"summary": "S", "why_this_matters": "W", "key_findings": ["k"]}
        assert parse_summary_json("a", json.dumps(payload)) == payload
        fenced = "```json\n" + json.dumps(payload) + "\n```"
        assert parse_summary_json("a", fenced) == payload

    @pytest.mark.parametrize("raw", ["no json here", '{"why_this_matters": "x"}', "{not: valid}"])
    def test_bad_replies(self, raw):
        with pytest.raises(SummarizationError):
            parse_summary_json("a", raw)


class TestLLMSummarizer:
    @pytest.mark.asyncio
    async def test_summarize_with_anthropic_reply(self):
        reply = json.dumps({
            "summary": "A concise summary of the work.",
            "why_this_matters": "It matters.",
            "key_findings": ["one", "two", "three", "four"],
        })
        summarizer = LLMSummarizer(SummarizerSettings(provider="anthropic"))
        with patch.object(LLMSummarizer, "_call_anthropic", AsyncMock(return_value=reply)):
            result = await summarizer.summarize(make_article(), SummaryOptions())
        assert result.summary == "A concise summary of the work."
        assert result.key_findings == ["one", "two", "three"]
        assert result.reading_time == 1

    @pytest.mark.asyncio
    async def test_provider_failure_becomes_summarization_error(self):
        summarizer = LLMSummarizer(SummarizerSettings(provider="openai"))
        with patch.object(LLMSummarizer, "_call_openai", AsyncMock(side_effect=RuntimeError("rate limited"))):
            with pytest.raises(SummarizationError, match="rate limited"):
                await summarizer.summarize(make_article(), SummaryOptions())

    def test_unknown_provider(self):
        with pytest.raises(ConfigurationError):
            LLMSummarizer(SummarizerSettings(provider="nope"))


class TestBuildSummarizer:
    def test_template_is_default(self):
        assert isinstance(build_summarizer(SummarizerSettings()), TemplateSummarizer)
        assert isinstance(build_summarizer(SummarizerSettings(provider="mock")), TemplateSummarizer)

    def test_llm_providers(self):
        summarizer = build_summarizer(SummarizerSettings(provider=" Anthropic "))
        assert isinstance(summarizer, LLMSummarizer)
        assert summarizer.provider == "anthropic"

    def test_unknown_provider(self):
        with pytest.raises(ConfigurationError):
            build_summarizer(SummarizerSettings(provider="bogus"))
