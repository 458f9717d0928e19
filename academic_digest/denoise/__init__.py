"""Candidate reduction: relevance scoring, deduplication, filter/rank, and selection."""

from academic_digest.denoise.dedup import Deduplicator, identity_key, normalize_title
from academic_digest.denoise.filters import FilterOptions, FilterRankPipeline
from academic_digest.denoise.scorer import RelevanceScorer, diversity_score
from academic_digest.denoise.selector import ArticleSelector, SelectionOptions

__all__ = [
    "Deduplicator",
    "identity_key",
    "normalize_title",
    "FilterOptions",
    "FilterRankPipeline",
    "RelevanceScorer",
    "diversity_score",
    "ArticleSelector",
    "SelectionOptions",
]
