"""Data models for articles, composed digests, users, and ingest bookkeeping."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from dateutil.parser import parse as dateparse

from academic_digest.config import ContentQuality, VenueType


class ProcessingStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class Author:
    name: str
    affiliation: Optional[str] = None
    orcid: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "affiliation": self.affiliation, "orcid": self.orcid}

    @classmethod
    def from_dict(cls, data: Any) -> Author:
        if isinstance(data, str):
            return cls(name=data)
        return cls(name=data["name"], affiliation=data.get("affiliation"), orcid=data.get("orcid"))


@dataclass
class Article:
    """A candidate research article.

    Scores are on a 0-100 scale. ``relevance_score`` starts at 0 and is filled
    in by relevance scoring during ingestion.
    """

    id: str
    title: str
    abstract: str
    url: str
    venue: str
    venue_type: VenueType
    published_at: datetime
    field: str
    subfield: str = "General"
    authors: List[Author] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    topics: List[str] = field(default_factory=list)

    quality: ContentQuality = ContentQuality.NOTABLE
    relevance_score: float = 0.0
    quality_score: float = 0.0
    novelty_score: float = 0.0
    impact_score: float = 0.0

    doi: Optional[str] = None
    arxiv_id: Optional[str] = None
    pubmed_id: Optional[str] = None
    open_access: bool = False

    summary: str = ""
    why_this_matters: str = ""
    key_findings: List[str] = field(default_factory=list)
    methodology: Optional[str] = None
    limitations: Optional[str] = None
    reading_time: int = 5

    source: str = "manual-curation"
    fetched_at: Optional[datetime] = None
    processing_status: ProcessingStatus = ProcessingStatus.COMPLETED
    related_articles: List[str] = field(default_factory=list)

    def copy(self) -> Article:
        """Deep copy, so list attributes are never shared between owners."""
        return copy.deepcopy(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "abstract": self.abstract,
            "url": self.url,
            "venue": self.venue,
            "venue_type": self.venue_type.value,
            "published_at": _iso(self.published_at),
            "field": self.field,
            "subfield": self.subfield,
            "authors": [a.to_dict() for a in self.authors],
            "tags": list(self.tags),
            "topics": list(self.topics),
            "quality": self.quality.value,
            "relevance_score": round(self.relevance_score, 2),
            "quality_score": round(self.quality_score, 2),
            "novelty_score": round(self.novelty_score, 2),
            "impact_score": round(self.impact_score, 2),
            "doi": self.doi,
            "arxiv_id": self.arxiv_id,
            "pubmed_id": self.pubmed_id,
            "open_access": self.open_access,
            "summary": self.summary,
            "why_this_matters": self.why_this_matters,
            "key_findings": list(self.key_findings),
            "methodology": self.methodology,
            "limitations": self.limitations,
            "reading_time": self.reading_time,
            "source": self.source,
            "fetched_at": _iso(self.fetched_at),
            "processing_status": self.processing_status.value,
            "related_articles": list(self.related_articles),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Article:
        """Build an Article from its JSON shape. Missing optional keys get defaults."""
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            abstract=data.get("abstract", ""),
            url=data.get("url", ""),
            venue=data.get("venue", "Unknown Venue"),
            venue_type=VenueType(data.get("venue_type", "journal")),
            published_at=parse_timestamp(data.get("published_at")) or datetime.now(timezone.utc),
            field=data.get("field", ""),
            subfield=data.get("subfield", "General"),
            authors=[Author.from_dict(a) for a in data.get("authors") or []],
            tags=list(data.get("tags") or []),
            topics=list(data.get("topics") or []),
            quality=ContentQuality(data.get("quality", "notable")),
            relevance_score=float(data.get("relevance_score", 0.0)),
            quality_score=float(data.get("quality_score", 0.0)),
            novelty_score=float(data.get("novelty_score", 0.0)),
            impact_score=float(data.get("impact_score", 0.0)),
            doi=data.get("doi"),
            arxiv_id=data.get("arxiv_id"),
            pubmed_id=data.get("pubmed_id"),
            open_access=bool(data.get("open_access", False)),
            summary=data.get("summary", ""),
            why_this_matters=data.get("why_this_matters", ""),
            key_findings=list(data.get("key_findings") or []),
            methodology=data.get("methodology"),
            limitations=data.get("limitations"),
            reading_time=int(data.get("reading_time", 5)),
            source=data.get("source", "manual-curation"),
            fetched_at=parse_timestamp(data.get("fetched_at")),
            processing_status=ProcessingStatus(data.get("processing_status", "completed")),
            related_articles=list(data.get("related_articles") or []),
        )


@dataclass(frozen=True)
class ComposedArticle:
    """An article placed in one digest, with digest-specific prose."""

    article: Article
    summary: str
    why_this_matters: str
    key_findings: tuple[str, ...]
    reading_time: int
    position: int
    transition: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "article_id": self.article.id,
            "title": self.article.title,
            "url": self.article.url,
            "venue": self.article.venue,
            "subfield": self.article.subfield,
            "summary": self.summary,
            "why_this_matters": self.why_this_matters,
            "key_findings": list(self.key_findings),
            "reading_time": self.reading_time,
            "position": self.position,
            "transition": self.transition,
        }


@dataclass(frozen=True)
class ReadingTimeDistribution:
    shortest: int
    longest: int
    average: float


@dataclass(frozen=True)
class QualityMetrics:
    average_relevance_score: float
    average_quality_score: float
    average_novelty_score: float
    diversity_score: float
    reading_time_distribution: ReadingTimeDistribution
    venue_diversity: int
    topic_diversity: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "average_relevance_score": round(self.average_relevance_score, 2),
            "average_quality_score": round(self.average_quality_score, 2),
            "average_novelty_score": round(self.average_novelty_score, 2),
            "diversity_score": self.diversity_score,
            "reading_time_distribution": {
                "shortest": self.reading_time_distribution.shortest,
                "longest": self.reading_time_distribution.longest,
                "average": round(self.reading_time_distribution.average, 2),
            },
            "venue_diversity": self.venue_diversity,
            "topic_diversity": self.topic_diversity,
        }


@dataclass(frozen=True)
class ComposedDigest:
    """The unit of delivery: one field, one ISO week."""

    id: str
    field: str
    week_number: int
    year: int
    introduction: str
    featured_articles: tuple[ComposedArticle, ...]
    methodology: str
    conclusion: str
    total_reading_time: int
    quality_metrics: QualityMetrics
    composed_at: datetime
    composition_time: float

    @property
    def articles(self) -> List[Article]:
        return [ca.article for ca in self.featured_articles]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "field": self.field,
            "week_number": self.week_number,
            "year": self.year,
            "introduction": self.introduction,
            "featured_articles": [ca.to_dict() for ca in self.featured_articles],
            "methodology": self.methodology,
            "conclusion": self.conclusion,
            "total_reading_time": self.total_reading_time,
            "quality_metrics": self.quality_metrics.to_dict(),
            "composed_at": _iso(self.composed_at),
            "composition_time": round(self.composition_time, 4),
        }


@dataclass
class User:
    """Subscriber record; only the parts validation looks at."""

    id: str
    email: str
    field: str
    confirmed: bool = False
    delivery_time: str = "10:00"
    subscription_tier: str = "free"
    subscription_status: str = "trial"
    subfield_interests: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)


@dataclass
class IngestResult:
    """Result from fetching one source."""

    source_id: str
    fetched: int = 0
    errors: int = 0
    duration_seconds: float = 0.0
    error_message: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error_message is None


@dataclass
class IngestSummary:
    """Aggregate result from a multi-source ingest run."""

    results: List[IngestResult] = field(default_factory=list)
    total_fetched: int = 0
    total_unique: int = 0
    total_selected: int = 0
    total_errors: int = 0
    duration_seconds: float = 0.0

    def add(self, result: IngestResult) -> None:
        self.results.append(result)
        self.total_fetched += result.fetched
        self.total_errors += result.errors

    @property
    def errors(self) -> List[str]:
        return [f"{r.source_id}: {r.error_message}" for r in self.results if not r.success]


# --- Helpers ---

def _iso(val: Optional[datetime]) -> Optional[str]:
    return val.isoformat() if val else None


def parse_timestamp(val: Any) -> Optional[datetime]:
    """Parse a timestamp into an aware UTC datetime, or return None."""
    if val is None or val == "":
        return None
    if isinstance(val, datetime):
        ts = val
    else:
        try:
            ts = dateparse(str(val))
        except (ValueError, TypeError, OverflowError):
            return None
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)
