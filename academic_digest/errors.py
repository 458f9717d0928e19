"""Exception taxonomy for the digest pipeline.

Stage-local failures (sources, summarization) are caught and degraded by the
caller; configuration and composition failures are terminal.
"""

from __future__ import annotations

from typing import Any


class DigestError(Exception):
    """Base class for all pipeline errors."""

    code = "DIGEST_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(DigestError):
    """Invalid field, malformed options or unreadable settings."""

    code = "CONFIGURATION_ERROR"


class SourceError(DigestError):
    """A source adapter could not produce articles."""

    code = "SOURCE_ERROR"

    def __init__(self, source: str, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(f"{source}: {message}", details)
        self.source = source


class SummarizationError(DigestError):
    """Summary generation failed for a single article."""

    code = "SUMMARIZATION_ERROR"

    def __init__(self, article_id: str, message: str) -> None:
        super().__init__(f"Summary generation failed for {article_id}: {message}")
        self.article_id = article_id


class CompositionError(DigestError):
    """No usable articles survived selection and summarization."""

    code = "COMPOSITION_ERROR"
