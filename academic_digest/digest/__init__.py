"""Digest composition: summarization, narrative, metrics, and the composer."""

from academic_digest.digest.composer import CompositionOptions, DigestComposer
from academic_digest.digest.metrics import compute_quality_metrics
from academic_digest.digest.narrative import NarrativeWriter
from academic_digest.digest.summarizer import (
    GeneratedSummary,
    LLMSummarizer,
    Summarizer,
    SummaryOptions,
    TemplateSummarizer,
    build_summarizer,
)

__all__ = [
    "CompositionOptions",
    "DigestComposer",
    "compute_quality_metrics",
    "NarrativeWriter",
    "GeneratedSummary",
    "LLMSummarizer",
    "Summarizer",
    "SummaryOptions",
    "TemplateSummarizer",
    "build_summarizer",
]
