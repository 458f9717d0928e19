"""Rule-based validation for articles, digests and subscribers.

Every rule is checked independently and all findings accumulate. Findings are
values: a failed validation never raises.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
from urllib.parse import urlparse

from academic_digest.config import AcademicField, ContentConfig
from academic_digest.models import Article, ComposedDigest, User

logger = logging.getLogger(__name__)

CRITICAL_PENALTY = 30
ERROR_PENALTY = 15
WARNING_PENALTY = 5

MIN_TITLE_LENGTH = 10
MIN_ABSTRACT_LENGTH = 50
MIN_SUMMARY_LENGTH = 100
MIN_INTRODUCTION_LENGTH = 50
MIN_CONCLUSION_LENGTH = 30
MIN_VENUE_RATIO = 0.7
MIN_AVG_RELEVANCE = 70
DEFAULT_READING_MINUTES = 5

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
DELIVERY_TIME_RE = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")


class Severity(str, Enum):
    CRITICAL = "critical"
    ERROR = "error"


@dataclass
class ValidationIssue:
    """An error (``severity`` set) or a warning (``severity`` is None)."""

    field: str
    message: str
    code: str
    severity: Optional[Severity] = None
    suggestion: Optional[str] = None

    def to_dict(self) -> dict:
        data = {"field": self.field, "message": self.message, "code": self.code}
        if self.severity is not None:
            data["severity"] = self.severity.value
        if self.suggestion:
            data["suggestion"] = self.suggestion
        return data


@dataclass
class ValidationResult:
    valid: bool
    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[ValidationIssue] = field(default_factory=list)
    score: int = 100

    @property
    def codes(self) -> list[str]:
        return [i.code for i in self.errors] + [i.code for i in self.warnings]

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
            "score": self.score,
        }


@dataclass
class BatchValidation:
    results: dict[str, ValidationResult]
    summary: dict[str, float]


def validation_score(errors: list[ValidationIssue], warnings: list[ValidationIssue]) -> int:
    score = 100
    for error in errors:
        score -= CRITICAL_PENALTY if error.severity == Severity.CRITICAL else ERROR_PENALTY
    score -= WARNING_PENALTY * len(warnings)
    return max(0, min(100, score))


def is_valid_url(url: str) -> bool:
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return bool(parsed.scheme and parsed.netloc)


def _result(errors: list[ValidationIssue], warnings: list[ValidationIssue]) -> ValidationResult:
    return ValidationResult(
        valid=not errors,
        errors=errors,
        warnings=warnings,
        score=validation_score(errors, warnings),
    )


class ValidationEngine:
    """Checks thresholds from :class:`ContentConfig` against pipeline output."""

    def __init__(self, content: Optional[ContentConfig] = None, logger_: Optional[logging.Logger] = None) -> None:
        self.content = content or ContentConfig()
        self.log = logger_ or logger

    def validate_article(self, article: Article) -> ValidationResult:
        self.log.debug("Validating article %s", article.id)
        cfg = self.content
        errors: list[ValidationIssue] = []
        warnings: list[ValidationIssue] = []

        if not article.title or len(article.title) < MIN_TITLE_LENGTH:
            errors.append(ValidationIssue(
                "title", f"Article title must be at least {MIN_TITLE_LENGTH} characters",
                "TITLE_TOO_SHORT", Severity.CRITICAL,
            ))
        if not article.abstract or len(article.abstract) < MIN_ABSTRACT_LENGTH:
            errors.append(ValidationIssue(
                "abstract", f"Article abstract must be at least {MIN_ABSTRACT_LENGTH} characters",
                "ABSTRACT_TOO_SHORT", Severity.CRITICAL,
            ))
        if not article.authors:
            errors.append(ValidationIssue(
                "authors", "Article must have at least one author", "NO_AUTHORS", Severity.ERROR,
            ))
        if article.relevance_score < cfg.min_relevance_score:
            warnings.append(ValidationIssue(
                "relevance_score",
                f"Relevance score {article.relevance_score:g} is below threshold {cfg.min_relevance_score}",
                "LOW_RELEVANCE",
                suggestion="Consider excluding this article from the digest",
            ))
        if article.quality_score < cfg.min_quality_score:
            warnings.append(ValidationIssue(
                "quality_score",
                f"Quality score {article.quality_score:g} is below threshold {cfg.min_quality_score}",
                "LOW_QUALITY",
                suggestion="Review article quality before including in digest",
            ))
        if not article.summary or len(article.summary) < MIN_SUMMARY_LENGTH:
            warnings.append(ValidationIssue(
                "summary",
                f"Article summary should be at least {MIN_SUMMARY_LENGTH} characters for better reader experience",
                "SUMMARY_TOO_SHORT",
                suggestion="Generate a more detailed summary",
            ))
        if not article.why_this_matters:
            warnings.append(ValidationIssue(
                "why_this_matters", '"Why This Matters" section is missing',
                "MISSING_WHY_THIS_MATTERS",
                suggestion="Add context about the article's significance",
            ))
        if not is_valid_url(article.url):
            errors.append(ValidationIssue(
                "url", "Article URL is invalid", "INVALID_URL", Severity.ERROR,
            ))

        return _result(errors, warnings)

    def validate_digest(self, digest: ComposedDigest, articles: list[Article]) -> ValidationResult:
        self.log.debug("Validating digest %s", digest.id)
        cfg = self.content
        errors: list[ValidationIssue] = []
        warnings: list[ValidationIssue] = []
        count = len(articles)

        if count < cfg.min_articles_per_digest:
            errors.append(ValidationIssue(
                "articles", f"Digest must contain at least {cfg.min_articles_per_digest} articles",
                "TOO_FEW_ARTICLES", Severity.CRITICAL,
            ))
        if count > cfg.max_articles_per_digest:
            errors.append(ValidationIssue(
                "articles", f"Digest cannot contain more than {cfg.max_articles_per_digest} articles",
                "TOO_MANY_ARTICLES", Severity.ERROR,
            ))

        if len({a.venue for a in articles}) < count * MIN_VENUE_RATIO:
            warnings.append(ValidationIssue(
                "articles", "Digest lacks venue diversity", "LOW_VENUE_DIVERSITY",
                suggestion="Include articles from more varied sources",
            ))
        if len({a.subfield for a in articles}) < cfg.required_subfield_variety:
            warnings.append(ValidationIssue(
                "articles",
                f"Digest should include at least {cfg.required_subfield_variety} different subfields",
                "LOW_SUBFIELD_DIVERSITY",
                suggestion="Include articles from more varied subfields",
            ))

        # Stricter than selection: no buffer on top of the maximum.
        total_minutes = sum(a.reading_time or DEFAULT_READING_MINUTES for a in articles)
        if total_minutes > cfg.max_reading_time_minutes:
            warnings.append(ValidationIssue(
                "reading_time",
                f"Total reading time {total_minutes} minutes exceeds maximum "
                f"{cfg.max_reading_time_minutes} minutes",
                "EXCESSIVE_READING_TIME",
                suggestion="Consider removing or shortening some articles",
            ))

        if digest.quality_metrics.average_relevance_score < MIN_AVG_RELEVANCE:
            warnings.append(ValidationIssue(
                "quality_metrics", "Average relevance score is below recommended threshold",
                "LOW_AVG_RELEVANCE",
                suggestion="Include more relevant articles",
            ))
        if not digest.introduction or len(digest.introduction) < MIN_INTRODUCTION_LENGTH:
            errors.append(ValidationIssue(
                "introduction",
                f"Digest introduction must be at least {MIN_INTRODUCTION_LENGTH} characters",
                "MISSING_INTRODUCTION", Severity.ERROR,
            ))
        if not digest.conclusion or len(digest.conclusion) < MIN_CONCLUSION_LENGTH:
            warnings.append(ValidationIssue(
                "conclusion", f"Digest conclusion should be at least {MIN_CONCLUSION_LENGTH} characters",
                "SHORT_CONCLUSION",
                suggestion="Add a more substantial conclusion",
            ))

        missing = [ca.position for ca in digest.featured_articles[:-1] if not ca.transition]
        if missing:
            warnings.append(ValidationIssue(
                "featured_articles",
                f"{len(missing)} of {len(digest.featured_articles) - 1} articles are missing a transition",
                "MISSING_TRANSITIONS",
                suggestion="Generate transitions between consecutive articles",
            ))

        return _result(errors, warnings)

    def validate_user(self, user: User) -> ValidationResult:
        self.log.debug("Validating user %s", user.id)
        errors: list[ValidationIssue] = []
        warnings: list[ValidationIssue] = []

        if not user.email or not EMAIL_RE.match(user.email):
            errors.append(ValidationIssue(
                "email", "Invalid email address", "INVALID_EMAIL", Severity.CRITICAL,
            ))
        if user.field not in {f.value for f in AcademicField}:
            errors.append(ValidationIssue(
                "field", "Invalid academic field", "INVALID_FIELD", Severity.CRITICAL,
            ))
        if not user.delivery_time or not DELIVERY_TIME_RE.match(user.delivery_time):
            errors.append(ValidationIssue(
                "delivery_time", "Invalid delivery time format (expected HH:MM)",
                "INVALID_DELIVERY_TIME", Severity.ERROR,
            ))
        if not user.confirmed and user.subscription_status == "active":
            warnings.append(ValidationIssue(
                "confirmed", "User subscription is active but email not confirmed",
                "UNCONFIRMED_ACTIVE",
                suggestion="Send confirmation email",
            ))

        return _result(errors, warnings)

    def batch_validate_articles(self, articles: list[Article]) -> BatchValidation:
        checked = [(article.id, self.validate_article(article)) for article in articles]
        results = dict(checked)
        if len(results) < len(checked):
            self.log.warning(
                "ValidationEngine: %d duplicate article ids in batch; results keep the last of each",
                len(checked) - len(results),
            )
        total = len(checked)
        valid = sum(1 for _, r in checked if r.valid)
        avg = sum(r.score for _, r in checked) / total if total else 0.0
        self.log.info("ValidationEngine: %d articles checked, %d valid", total, valid)
        return BatchValidation(
            results=results,
            summary={"total": total, "valid": valid, "invalid": total - valid, "avg_score": avg},
        )
