"""Base source adapter interface and shared abstract-analysis helpers."""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from academic_digest.config import AcademicField, field_profile
from academic_digest.models import Article
from academic_digest.utils import utc_now

Clock = Callable[[], datetime]

TOPIC_PATTERNS = (
    "machine learning",
    "deep learning",
    "neural network",
    "artificial intelligence",
    "crispr",
    "gene editing",
    "protein structure",
    "drug discovery",
    "climate change",
    "renewable energy",
    "public policy",
    "cultural studies",
)


class SourceAdapter(ABC):
    """Abstract base for academic content sources.

    Adapters return fully populated :class:`Article` records with
    ``relevance_score`` left at 0. Once retries are exhausted a failing adapter
    raises :class:`~academic_digest.errors.SourceError`.
    """

    source_type: str = ""

    def __init__(
        self,
        config: Dict[str, Any],
        rng: Optional[random.Random] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self.source_id: str = config.get("id") or self.source_type
        self.mock: bool = bool(config.get("mock", True))
        self.config = config
        self.rng = rng or random.Random()
        self.clock = clock or utc_now

    @abstractmethod
    async def fetch(self, field: AcademicField, max_results: int = 50) -> List[Article]:
        """Fetch candidate articles for one field, newest first where the source allows."""
        ...


# ---------------------------------------------------------------------------
# Abstract analysis shared by adapters
# ---------------------------------------------------------------------------

def split_sentences(text: str) -> list[str]:
    return [s.strip() for s in text.split(".") if s.strip()]


def source_reading_time(text: str, words_per_minute: int = 250) -> int:
    """Reading time for a source record: at least 3 minutes."""
    if not text.strip():
        return 3
    words = len(text.split())
    return max(3, -(-words // words_per_minute))


def match_topics(abstract: str, subjects: list[str] | None = None) -> list[str]:
    lower = abstract.lower()
    topics: list[str] = []
    for subject in subjects or []:
        if subject.lower() in lower and subject not in topics:
            topics.append(subject)
    for pattern in TOPIC_PATTERNS:
        if pattern in lower and pattern not in topics:
            topics.append(pattern)
    return topics


def abstract_summary(abstract: str, limit: int = 200) -> str:
    if not abstract:
        return "Summary not available"
    return abstract[:limit] + ("..." if len(abstract) > limit else "")


def abstract_key_findings(abstract: str) -> list[str]:
    return [s + "." for s in split_sentences(abstract)[:3]]


def detect_methodology(abstract: str) -> Optional[str]:
    lower = abstract.lower()
    if "method" in lower or "approach" in lower:
        return "Novel methodology described in abstract"
    return None


def detect_limitations(abstract: str) -> Optional[str]:
    lower = abstract.lower()
    if "limitation" in lower or "challenge" in lower:
        return "Limitations acknowledged in abstract"
    return None


def field_impact(field: AcademicField, subfield: str) -> str:
    return field_profile(field).impact_applied.format(subfield=subfield)
