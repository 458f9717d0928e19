"""Article summarizers: an offline template engine and LLM providers (Anthropic, OpenAI)."""

from __future__ import annotations

import dataclasses
import json
import logging
import re
import time
from dataclasses import dataclass, field
from typing import Any, Protocol

from academic_digest.config import AudienceLevel, SummarizerSettings, field_profile, parse_option
from academic_digest.errors import ConfigurationError, SummarizationError
from academic_digest.models import Article
from academic_digest.utils import collapse_whitespace, estimate_reading_time, truncate_text

logger = logging.getLogger(__name__)


@dataclass
class SummaryOptions:
    audience_level: AudienceLevel = AudienceLevel.INTERMEDIATE
    include_technical_details: bool = True
    emphasize_applications: bool = True
    max_summary_length: int = 500

    def __post_init__(self) -> None:
        self.audience_level = parse_option(AudienceLevel, self.audience_level, "audience_level")


@dataclass
class GeneratedSummary:
    article_id: str
    summary: str
    why_this_matters: str
    key_findings: list[str] = field(default_factory=list)
    reading_time: int = 1
    quality_score: float = 0.0
    processing_time: float = 0.0


class Summarizer(Protocol):
    """Anything that can turn one article into a :class:`GeneratedSummary`."""

    async def summarize(self, article: Article, options: SummaryOptions) -> GeneratedSummary:
        """Raise :class:`SummarizationError` on failure."""
        ...


# ---------------------------------------------------------------------------
# Template summarizer
# ---------------------------------------------------------------------------

FINDING_INDICATORS = ("found", "demonstrated", "showed", "revealed", "discovered", "developed")
APPLICATION_INDICATORS = (
    "application", "treatment", "therapy", "tool", "method", "approach",
    "potential", "could", "may", "enables", "provides",
)
RESULT_PATTERNS = [
    re.compile(r"(\d+)%\s*(?:efficiency|accuracy|improvement|reduction)", re.IGNORECASE),
    re.compile(r"(\d+(?:\.\d+)?)\s*times?\s*(?:faster|better|greater)", re.IGNORECASE),
    re.compile(r"significant\s*(?:improvement|increase|decrease|reduction)", re.IGNORECASE),
]
FINDING_PATTERNS = ("significantly", "improved", "reduced", "increased", "demonstrated", "achieved")
GENERIC_FINDINGS = [
    "Novel methodology was developed and validated.",
    "Results show promising outcomes for the field.",
    "This work opens new avenues for future research.",
]
BEGINNER_TERMS = {
    "CRISPR-Cas9": "gene editing technology",
    "cryo-electron microscopy": "advanced imaging techniques",
    "quantum superposition": "quantum properties",
    "parameter-efficient fine-tuning": "efficient model adaptation",
}


class TemplateSummarizer:
    """Deterministic summaries assembled from the abstract and field tables."""

    def __init__(self, words_per_minute: int = 250) -> None:
        self.words_per_minute = words_per_minute

    async def summarize(self, article: Article, options: SummaryOptions) -> GeneratedSummary:
        t0 = time.monotonic()
        summary = self._contextual_summary(article, options)
        return GeneratedSummary(
            article_id=article.id,
            summary=summary,
            why_this_matters=self._why_this_matters(article, options),
            key_findings=self._key_findings(article),
            reading_time=estimate_reading_time(summary, self.words_per_minute),
            quality_score=assess_summary_quality(summary, article),
            processing_time=time.monotonic() - t0,
        )

    def _contextual_summary(self, article: Article, options: SummaryOptions) -> str:
        abstract = article.abstract
        parts = [main_finding(abstract)]
        results = key_results(abstract)
        if options.include_technical_details and article.methodology:
            parts.append(f"Using {article.methodology.lower()}, {results[0].lower()}{results[1:]}")
        else:
            parts.append(results)
        if options.emphasize_applications:
            parts.append(applications(abstract))
        text = _ensure_period(parts[0]) + " " + " ".join(_ensure_period(p) for p in parts[1:])
        text = adjust_complexity(collapse_whitespace(text), options.audience_level)
        return truncate_text(text, options.max_summary_length)

    @staticmethod
    def _why_this_matters(article: Article, options: SummaryOptions) -> str:
        try:
            profile = field_profile(article.field)
        except ConfigurationError:
            return (
                f"This research contributes valuable knowledge to {article.field or 'its field'} "
                "and the broader academic community."
            )
        template = profile.impact_applied if options.emphasize_applications else profile.impact_fundamental
        return template.format(subfield=article.subfield)

    @staticmethod
    def _key_findings(article: Article) -> list[str]:
        if article.key_findings:
            return list(article.key_findings[:3])
        findings: list[str] = []
        for sentence in _sentences(article.abstract):
            if len(findings) >= 3:
                break
            if len(sentence) > 20 and any(p in sentence.lower() for p in FINDING_PATTERNS):
                findings.append(sentence + ".")
        return findings or list(GENERIC_FINDINGS)


def _sentences(text: str) -> list[str]:
    return [s.strip() for s in text.split(".") if s.strip()]


def _ensure_period(text: str) -> str:
    text = text.strip()
    return text if text.endswith((".", "!", "?")) else text + "."


def main_finding(abstract: str) -> str:
    sentences = _sentences(abstract)
    for sentence in sentences:
        lower = sentence.lower()
        if any(ind in lower for ind in FINDING_INDICATORS):
            return sentence
    if sentences:
        return sentences[0]
    return abstract[:100] + "..."


def key_results(abstract: str) -> str:
    results = [m.group(0) for m in (p.search(abstract) for p in RESULT_PATTERNS) if m]
    if results:
        return f"The study achieved {', '.join(results)}."
    return "The results show promising outcomes that advance the field."


def applications(abstract: str) -> str:
    for sentence in _sentences(abstract):
        lower = sentence.lower()
        if any(ind in lower for ind in APPLICATION_INDICATORS):
            return sentence
    return "This work has potential applications in the field."


def adjust_complexity(text: str, audience_level: AudienceLevel) -> str:
    if audience_level == AudienceLevel.BEGINNER:
        for term, plain in BEGINNER_TERMS.items():
            text = text.replace(term, plain)
    return text


def assess_summary_quality(summary: str, article: Article) -> float:
    """Heuristic 0-100 score: length near 200 chars, tag coverage, sentence length."""
    score = 50.0
    score += max(0.0, 20 - abs(len(summary) - 200) / 10)
    lower = summary.lower()
    score += 5 * sum(1 for tag in article.tags[:3] if tag.lower() in lower)
    chunks = summary.split(".")
    words_per_sentence = len(summary.split(" ")) / len(chunks) if len(chunks) > 1 else 20
    if 10 <= words_per_sentence <= 25:
        score += 10
    return min(100.0, max(0.0, score))


# ---------------------------------------------------------------------------
# LLM summarizer
# ---------------------------------------------------------------------------

SYSTEM_PROMPT = (
    "You are a science editor writing a weekly research digest. Reply with a single JSON "
    'object with keys "summary" (string), "why_this_matters" (string) and '
    '"key_findings" (list of at most 3 strings). No prose outside the JSON.'
)


class LLMSummarizer:
    """Summaries from a hosted model. SDKs are imported on first use."""

    PROVIDERS = ("anthropic", "openai")

    def __init__(self, settings: SummarizerSettings, words_per_minute: int = 250) -> None:
        if settings.provider not in self.PROVIDERS:
            raise ConfigurationError(f"Unknown LLM provider {settings.provider!r}")
        self.provider = settings.provider
        self.model = settings.model
        self.max_tokens = settings.max_tokens
        self.temperature = settings.temperature
        self.words_per_minute = words_per_minute
        self._client: Any = None

    async def summarize(self, article: Article, options: SummaryOptions) -> GeneratedSummary:
        t0 = time.monotonic()
        prompt = self._build_prompt(article, options)
        try:
            if self.provider == "anthropic":
                raw = await self._call_anthropic(prompt)
            else:
                raw = await self._call_openai(prompt)
        except SummarizationError:
            raise
        except Exception as e:
            raise SummarizationError(article.id, f"{self.provider} call failed: {e}") from e

        data = parse_summary_json(article.id, raw)
        summary = truncate_text(collapse_whitespace(str(data["summary"])), options.max_summary_length)
        findings = [str(f) for f in data.get("key_findings") or []][:3]
        return GeneratedSummary(
            article_id=article.id,
            summary=summary,
            why_this_matters=str(data.get("why_this_matters") or ""),
            key_findings=findings,
            reading_time=estimate_reading_time(summary, self.words_per_minute),
            quality_score=assess_summary_quality(summary, article),
            processing_time=time.monotonic() - t0,
        )

    async def _call_anthropic(self, prompt: str) -> str:
        from anthropic import AsyncAnthropic

        if self._client is None:
            self._client = AsyncAnthropic()
        resp = await self._client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            system=SYSTEM_PROMPT,
            messages=[{"role": "user", "content": prompt}],
        )
        return resp.content[0].text

    async def _call_openai(self, prompt: str) -> str:
        from openai import AsyncOpenAI

        if self._client is None:
            self._client = AsyncOpenAI()
        resp = await self._client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )
        return resp.choices[0].message.content or ""

    @staticmethod
    def _build_prompt(article: Article, options: SummaryOptions) -> str:
        focus = "practical applications" if options.emphasize_applications else "fundamental contributions"
        detail = "Include" if options.include_technical_details else "Omit"
        return (
            f"Title: {article.title}\n"
            f"Venue: {article.venue}\n"
            f"Field: {article.field} / {article.subfield}\n"
            f"Abstract: {article.abstract[:2000]}\n\n"
            f"Audience: {options.audience_level.value} readers. {detail} methodological detail. "
            f"Emphasize {focus}. Keep the summary under {options.max_summary_length} characters."
        )


def parse_summary_json(article_id: str, raw: str) -> dict[str, Any]:
    """Extract the JSON object from a model reply."""
    text = raw.strip()
    if text.startswith("```"):
        text = text.strip("`")
        if text.lower().startswith("json"):
            text = text[4:]
    start, end = text.find("{"), text.rfind("}")
    if start == -1 or end <= start:
        raise SummarizationError(article_id, "model reply contained no JSON object")
    try:
        data = json.loads(text[start : end + 1])
    except json.JSONDecodeError as e:
        raise SummarizationError(article_id, f"malformed JSON in model reply: {e}") from e
    if not isinstance(data, dict) or not data.get("summary"):
        raise SummarizationError(article_id, "model reply is missing 'summary'")
    return data


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------

def build_summarizer(settings: SummarizerSettings, words_per_minute: int = 250) -> Summarizer:
    """``template`` (offline), ``anthropic`` or ``openai``."""
    provider = (settings.provider or "template").lower().strip()
    if provider in ("template", "mock"):
        return TemplateSummarizer(words_per_minute)
    if provider in LLMSummarizer.PROVIDERS:
        return LLMSummarizer(dataclasses.replace(settings, provider=provider), words_per_minute)
    raise ConfigurationError(
        f"Unknown summarizer provider {settings.provider!r} (valid: template, anthropic, openai)"
    )
