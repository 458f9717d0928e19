"""Identity-key deduplication with merge-on-repeat."""

from __future__ import annotations

import dataclasses
import logging
import re
import unicodedata
from typing import Optional

from academic_digest.models import Article
from academic_digest.utils import union

logger = logging.getLogger(__name__)

# Fields the first-seen record keeps even when a better duplicate replaces it.
PRESERVED_FIELDS = frozenset({"id", "fetched_at", "processing_status"})
UNIONED_FIELDS = ("tags", "topics", "related_articles")

_PUNCT = re.compile(r"[^\w\s]")
_WS = re.compile(r"\s+")


# ---------------------------------------------------------------------------
# Identity keys
# ---------------------------------------------------------------------------

def normalize_title(title: str) -> str:
    """Lowercase, strip punctuation, collapse whitespace."""
    text = unicodedata.normalize("NFKC", title).lower()
    text = _PUNCT.sub("", text)
    return _WS.sub(" ", text).strip()


def normalize_doi(doi: str) -> str:
    doi = doi.strip().lower()
    for prefix in ("https://doi.org/", "http://doi.org/", "http://dx.doi.org/", "doi:"):
        if doi.startswith(prefix):
            return doi[len(prefix):]
    return doi


def identity_key(article: Article) -> str:
    """DOI, then source-native id (arXiv, PubMed), then normalized title."""
    if article.doi and article.doi.strip():
        return f"doi:{normalize_doi(article.doi)}"
    if article.arxiv_id and article.arxiv_id.strip():
        return f"arxiv:{article.arxiv_id.strip().lower()}"
    if article.pubmed_id and article.pubmed_id.strip():
        return f"pubmed:{article.pubmed_id.strip()}"
    return f"title:{normalize_title(article.title)}"


# ---------------------------------------------------------------------------
# Deduplicator
# ---------------------------------------------------------------------------

class Deduplicator:
    """Collapse articles sharing an identity key into the first-seen record.

    A later duplicate with a strictly higher ``quality_score`` overwrites the
    kept record's content (everything but :data:`PRESERVED_FIELDS`). Tags,
    topics and related articles are unioned either way. Inputs are never
    mutated; the output holds copies in first-seen order.
    """

    def __init__(self, logger_: Optional[logging.Logger] = None) -> None:
        self.log = logger_ or logger

    def dedupe(self, articles: list[Article]) -> list[Article]:
        kept: dict[str, Article] = {}
        merged = 0

        for article in articles:
            key = identity_key(article)
            current = kept.get(key)
            if current is None:
                kept[key] = article.copy()
                continue
            kept[key] = self._merge(current, article)
            merged += 1

        result = list(kept.values())
        self.log.info(
            "Deduplicator: %d → %d articles (%d merged)", len(articles), len(result), merged
        )
        return result

    @staticmethod
    def _merge(kept: Article, duplicate: Article) -> Article:
        if duplicate.quality_score > kept.quality_score:
            replacement = duplicate.copy()
            base = dataclasses.replace(
                replacement, **{name: getattr(kept, name) for name in PRESERVED_FIELDS}
            )
        else:
            base = kept
        for name in UNIONED_FIELDS:
            setattr(base, name, union(getattr(kept, name), getattr(duplicate, name)))
        return base
