"""Academic content sources.

Supported types: arxiv (Atom API), crossref (REST works API). Both run against
canned fixtures when ``mock`` is set.
"""

from academic_digest.sources.base import SourceAdapter
from academic_digest.sources.factory import build_adapter
from academic_digest.sources.arxiv import ArxivAdapter
from academic_digest.sources.crossref import CrossrefAdapter

__all__ = ["SourceAdapter", "build_adapter", "ArxivAdapter", "CrossrefAdapter"]
