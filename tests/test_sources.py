"""Tests for source adapters (mock fixtures and live-response parsing)."""

from __future__ import annotations

import random
from datetime import timedelta
from unittest.mock import AsyncMock, patch

import aiohttp
import pytest

from academic_digest.config import AcademicField, VenueType
from academic_digest.errors import ConfigurationError, SourceError
from academic_digest.sources.arxiv import ArxivAdapter, _arxiv_id
from academic_digest.sources.base import match_topics, source_reading_time
from academic_digest.sources.crossref import CrossrefAdapter, _clean_abstract, _published_date
from academic_digest.sources.factory import build_adapter

from factories import NOW, fixed_clock

ATOM_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>arXiv Query Results</title>
  <entry>
    <id>http://arxiv.org/abs/2503.01234v2</id>
    <published>2025-03-10T17:00:00Z</published>
    <updated>2025-03-11T08:00:00Z</updated>
    <title>Sparse   Attention for
      Long Documents</title>
    <summary>We propose a sparse attention method that scales to long documents.
      It reduces memory use by 40% accuracy loss free.</summary>
    <author><name>Jane Doe</name></author>
    <author><name>John Roe</name></author>
    <link href="http://arxiv.org/abs/2503.01234v2" rel="alternate" type="text/html"/>
    <category term="cs.CL" scheme="http://arxiv.org/schemas/atom"/>
    <category term="cs.LG" scheme="http://arxiv.org/schemas/atom"/>
  </entry>
</feed>
"""


def make_adapter(cls, seed=1, **config):
    return cls({"id": cls.source_type, **config}, rng=random.Random(seed), clock=fixed_clock)


class TestHelpers:
    def test_arxiv_id_strips_version(self):
        assert _arxiv_id("http://arxiv.org/abs/2401.01234v2") == "2401.01234"
        assert _arxiv_id("2401.01234") == "2401.01234"

    def test_clean_abstract(self):
        assert _clean_abstract("<jats:p>Hello <jats:b>world</jats:b></jats:p>") == "Hello world"

    def test_published_date_prefers_print(self):
        work = {"published-print": {"date-parts": [[2024, 5]]}, "issued": {"date-parts": [[2023, 1, 1]]}}
        assert _published_date(work).date().isoformat() == "2024-05-01"
        assert _published_date({}) is None

    def test_source_reading_time_minimum(self):
        assert source_reading_time("") == 3
        assert source_reading_time("word " * 1000) == 4

    def test_match_topics(self):
        assert match_topics("Deep learning for climate change", ["Climate"]) == [
            "Climate", "deep learning", "climate change",
        ]


class TestArxivAdapter:
    @pytest.mark.asyncio
    async def test_mock_fetch(self):
        articles = await make_adapter(ArxivAdapter).fetch(AcademicField.AI_COMPUTING)
        assert len(articles) == 3
        first = articles[0]
        assert first.id == "arxiv_2503.00101"
        assert first.arxiv_id == "2503.00101"
        assert first.venue == "arXiv.org"
        assert first.venue_type is VenueType.PREPRINT
        assert first.field == "ai-computing"
        assert first.subfield == "Artificial Intelligence"
        assert first.relevance_score == 0.0
        for a in articles:
            assert 60 <= a.quality_score <= 90
            assert NOW - timedelta(days=13) <= a.published_at <= NOW
            assert a.reading_time >= 3
            assert a.open_access

    @pytest.mark.asyncio
    async def test_max_results(self):
        articles = await make_adapter(ArxivAdapter).fetch(AcademicField.AI_COMPUTING, max_results=1)
        assert len(articles) == 1

    @pytest.mark.asyncio
    async def test_seeded_rng_is_deterministic(self):
        a = await make_adapter(ArxivAdapter, seed=5).fetch(AcademicField.LIFE_SCIENCES)
        b = await make_adapter(ArxivAdapter, seed=5).fetch(AcademicField.LIFE_SCIENCES)
        assert [x.to_dict() for x in a] == [y.to_dict() for y in b]

    @pytest.mark.asyncio
    async def test_live_feed_is_parsed(self):
        adapter = make_adapter(ArxivAdapter, mock=False)
        with patch.object(ArxivAdapter, "_fetch_feed", AsyncMock(return_value=ATOM_FEED)):
            [article] = await adapter.fetch(AcademicField.AI_COMPUTING)
        assert article.id == "arxiv_2503.01234"
        assert article.title == "Sparse Attention for Long Documents"
        assert [a.name for a in article.authors] == ["Jane Doe", "John Roe"]
        assert article.subfield == "Natural Language Processing"
        assert article.tags == ["natural-language-processing", "machine-learning"]
        assert article.published_at.isoformat().startswith("2025-03-10T17:00")

    @pytest.mark.asyncio
    async def test_live_failure_raises_source_error(self):
        adapter = make_adapter(ArxivAdapter, mock=False)
        failing = AsyncMock(side_effect=aiohttp.ClientConnectionError("refused"))
        with patch.object(ArxivAdapter, "_fetch_feed", failing):
            with pytest.raises(SourceError, match="arxiv"):
                await adapter.fetch(AcademicField.AI_COMPUTING)


class TestCrossrefAdapter:
    @pytest.mark.asyncio
    async def test_mock_fetch(self):
        articles = await make_adapter(CrossrefAdapter).fetch(AcademicField.AI_COMPUTING)
        assert len(articles) == 2
        for a in articles:
            assert a.doi
            assert a.id == f"crossref_{a.doi}"
            assert a.url == f"https://doi.org/{a.doi}"
            assert 65 <= a.quality_score <= 90
            assert 2 <= len(a.authors) <= 5
            assert a.authors[0].affiliation == "University Research Institute"

    @pytest.mark.asyncio
    async def test_live_response(self):
        payload = {
            "message": {
                "items": [
                    {
                        "DOI": "10.5555/abc",
                        "title": ["A   Study of Things"],
                        "abstract": "<jats:p>We show a new method.</jats:p>",
                        "container-title": ["Journal of Things"],
                        "type": "proceedings-article",
                        "subject": ["Robotics", "Computer Science"],
                        "author": [{"given": "Ann", "family": "Lee", "ORCID": "0000-0001"}],
                        "published-online": {"date-parts": [[2025, 3, 5]]},
                    },
                    {"title": ["No DOI here"]},
                    {"DOI": "10.5555/untitled"},
                ]
            }
        }
        adapter = make_adapter(CrossrefAdapter, mock=False)
        with patch.object(CrossrefAdapter, "_fetch_works", AsyncMock(return_value=payload)):
            [article] = await adapter.fetch(AcademicField.AI_COMPUTING)
        assert article.title == "A Study of Things"
        assert article.abstract == "We show a new method."
        assert article.venue == "Journal of Things"
        assert article.venue_type is VenueType.CONFERENCE
        assert article.subfield == "Robotics"
        assert article.authors[0].name == "Ann Lee"
        assert article.methodology is not None

    @pytest.mark.asyncio
    async def test_unexpected_shape(self):
        adapter = make_adapter(CrossrefAdapter, mock=False)
        with patch.object(CrossrefAdapter, "_fetch_works", AsyncMock(return_value=["nope"])):
            with pytest.raises(SourceError):
                await adapter.fetch(AcademicField.AI_COMPUTING)


class TestFactory:
    def test_by_type_and_by_id(self):
        assert isinstance(build_adapter({"id": "papers", "type": "arxiv"}), ArxivAdapter)
        assert isinstance(build_adapter({"id": "crossref"}), CrossrefAdapter)

    def test_source_id_and_mock_flag(self):
        adapter = build_adapter({"id": "papers", "type": "Crossref", "mock": False})
        assert adapter.source_id == "papers"
        assert adapter.mock is False

    def test_unknown_type(self):
        with pytest.raises(ConfigurationError):
            build_adapter({"id": "pubmed"})
