"""Settings, content limits, and per-field lookup tables.

Settings are loaded explicitly from YAML and passed into each component; there
is no process-wide config singleton.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields as dc_fields
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from academic_digest.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config.yaml"
CONFIG_PATH_ENV = "ACADEMIC_DIGEST_CONFIG"


class AcademicField(str, Enum):
    LIFE_SCIENCES = "life-sciences"
    AI_COMPUTING = "ai-computing"
    HUMANITIES_CULTURE = "humanities-culture"
    POLICY_GOVERNANCE = "policy-governance"
    CLIMATE_EARTH_SYSTEMS = "climate-earth-systems"


class VenueType(str, Enum):
    JOURNAL = "journal"
    CONFERENCE = "conference"
    PREPRINT = "preprint"
    BOOK = "book"
    THESIS = "thesis"


class ContentSource(str, Enum):
    ARXIV = "arxiv"
    CROSSREF = "crossref"
    PUBMED = "pubmed"
    SEMANTIC_SCHOLAR = "semantic-scholar"
    RSS_FEED = "rss-feed"
    MANUAL_CURATION = "manual-curation"


class ContentQuality(str, Enum):
    BREAKTHROUGH = "breakthrough"
    SIGNIFICANT = "significant"
    IMPORTANT = "important"
    NOTABLE = "notable"
    INCREMENTAL = "incremental"


class AudienceLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class EditorialStyle(str, Enum):
    ACADEMIC = "academic"
    CONVERSATIONAL = "conversational"
    PROFESSIONAL = "professional"


# ---------------------------------------------------------------------------
# Field tables
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FieldProfile:
    """Static description of one academic field and its lookup tables."""

    name: str
    emoji: str
    description: str
    related: tuple[AcademicField, ...]
    arxiv_query: str
    arxiv_subfields: dict[str, str]
    methods: tuple[str, ...]
    impact_applied: str
    impact_fundamental: str


FIELD_PROFILES: dict[AcademicField, FieldProfile] = {
    AcademicField.LIFE_SCIENCES: FieldProfile(
        name="Life Sciences",
        emoji="🧬",
        description="Research covering living organisms, biological processes, and health sciences",
        related=(AcademicField.AI_COMPUTING, AcademicField.CLIMATE_EARTH_SYSTEMS),
        arxiv_query="cat:q-bio OR cat:stat.ML OR cat:cs.NE OR cat:physics.bio-ph",
        arxiv_subfields={
            "q-bio.GN": "Genetics",
            "q-bio.MN": "Molecular Networks",
            "q-bio.BM": "Biomolecules",
            "q-bio.CB": "Cell Behavior",
            "q-bio.PE": "Populations and Evolution",
        },
        methods=("experimental studies", "clinical analysis", "molecular techniques"),
        impact_applied=(
            "This research advances {subfield} with potential applications in medicine and "
            "biotechnology, offering new approaches to treating diseases and understanding "
            "biological processes."
        ),
        impact_fundamental=(
            "This work contributes to fundamental understanding of {subfield}, expanding our "
            "knowledge of biological systems and mechanisms."
        ),
    ),
    AcademicField.AI_COMPUTING: FieldProfile(
        name="AI & Computing",
        emoji="🤖",
        description="Advances in artificial intelligence, computer science, and computational systems",
        related=(AcademicField.LIFE_SCIENCES, AcademicField.POLICY_GOVERNANCE),
        arxiv_query="cat:cs.AI OR cat:cs.LG OR cat:cs.CL OR cat:cs.CV OR cat:cs.RO",
        arxiv_subfields={
            "cs.AI": "Artificial Intelligence",
            "cs.LG": "Machine Learning",
            "cs.CL": "Natural Language Processing",
            "cs.CV": "Computer Vision",
            "cs.RO": "Robotics",
        },
        methods=("computational experiments", "algorithm development", "machine learning"),
        impact_applied=(
            "This advancement in {subfield} enables practical applications in industry and "
            "research, making AI systems more capable and accessible for real-world problems."
        ),
        impact_fundamental=(
            "This research pushes the boundaries of {subfield}, contributing to theoretical "
            "foundations and methodological advances in artificial intelligence."
        ),
    ),
    AcademicField.HUMANITIES_CULTURE: FieldProfile(
        name="Humanities & Culture",
        emoji="📚",
        description="Scholarly work exploring human expression, cultural phenomena, and historical contexts",
        related=(AcademicField.POLICY_GOVERNANCE,),
        arxiv_query="cat:cs.CL OR cat:cs.IR OR cat:cs.DL",
        arxiv_subfields={
            "cs.CL": "Computational Linguistics",
            "cs.IR": "Information Retrieval",
            "cs.DL": "Digital Libraries",
        },
        methods=("textual analysis", "historical research", "critical theory"),
        impact_applied=(
            "This work provides valuable insights into {subfield}, deepening our understanding "
            "of human culture and society through scholarly analysis."
        ),
        impact_fundamental=(
            "This work provides valuable insights into {subfield}, deepening our understanding "
            "of human culture and society through scholarly analysis."
        ),
    ),
    AcademicField.POLICY_GOVERNANCE: FieldProfile(
        name="Policy & Governance",
        emoji="🏛️",
        description="Research on public policy, governance systems, and regulatory frameworks",
        related=(AcademicField.HUMANITIES_CULTURE, AcademicField.CLIMATE_EARTH_SYSTEMS),
        arxiv_query="cat:cs.CY OR cat:cs.GT",
        arxiv_subfields={
            "cs.CY": "Computers and Society",
            "cs.GT": "Game Theory",
        },
        methods=("policy analysis", "statistical methods", "case studies"),
        impact_applied=(
            "This research offers evidence-based insights that could inform policy decisions "
            "in {subfield} and governance approaches, potentially improving public outcomes."
        ),
        impact_fundamental=(
            "This work advances our understanding of {subfield}, contributing to academic "
            "discourse on governance and policy."
        ),
    ),
    AcademicField.CLIMATE_EARTH_SYSTEMS: FieldProfile(
        name="Climate & Earth Systems",
        emoji="🌍",
        description="Integrated research on Earth's climate system, environmental changes, and sustainability",
        related=(AcademicField.LIFE_SCIENCES, AcademicField.POLICY_GOVERNANCE),
        arxiv_query="cat:physics.ao-ph OR cat:physics.geo-ph OR cat:q-bio.PE",
        arxiv_subfields={
            "physics.ao-ph": "Atmospheric Physics",
            "physics.geo-ph": "Geophysics",
            "q-bio.PE": "Ecology",
        },
        methods=("climate modeling", "field observations", "data analysis"),
        impact_applied=(
            "This study provides crucial information for addressing environmental challenges "
            "and developing sustainable solutions to climate-related problems."
        ),
        impact_fundamental=(
            "This research advances our understanding of {subfield}, expanding scientific "
            "knowledge of Earth's systems and processes."
        ),
    ),
}


def validate_field_tables() -> None:
    """Fail fast when any field lacks a profile or references an unknown field."""
    missing = [f.value for f in AcademicField if f not in FIELD_PROFILES]
    if missing:
        raise ConfigurationError(f"No field profile for: {', '.join(missing)}")
    for fld, profile in FIELD_PROFILES.items():
        for rel in profile.related:
            if rel not in FIELD_PROFILES or rel is fld:
                raise ConfigurationError(f"Invalid related field {rel!r} for {fld.value}")


validate_field_tables()


def parse_field(value: str | AcademicField) -> AcademicField:
    """Resolve a field id, raising ConfigurationError for anything unknown."""
    if isinstance(value, AcademicField):
        return value
    try:
        return AcademicField(str(value).strip().lower())
    except ValueError:
        valid = ", ".join(f.value for f in AcademicField)
        raise ConfigurationError(f"Invalid field: {value!r} (valid fields: {valid})") from None


def parse_option(enum_cls: type[Enum], value: Any, name: str) -> Any:
    """Coerce an option value to ``enum_cls``, raising ConfigurationError when it is unknown."""
    try:
        return enum_cls(value)
    except ValueError:
        valid = ", ".join(str(m.value) for m in enum_cls)
        raise ConfigurationError(f"Invalid {name}: {value!r} (valid: {valid})") from None


def field_profile(value: str | AcademicField) -> FieldProfile:
    return FIELD_PROFILES[parse_field(value)]


def are_related_fields(a: str | AcademicField, b: str | AcademicField) -> bool:
    fa, fb = parse_field(a), parse_field(b)
    return fb in FIELD_PROFILES[fa].related or fa in FIELD_PROFILES[fb].related


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

@dataclass
class ContentConfig:
    """Content limits shared by selection, composition, and validation."""

    max_articles_per_digest: int = 5
    min_articles_per_digest: int = 3
    max_content_age_days: int = 14
    preferred_content_age_days: int = 7
    min_relevance_score: float = 60
    min_quality_score: float = 70
    words_per_minute: int = 250
    max_reading_time_minutes: int = 15
    required_subfield_variety: int = 2
    selection_buffer_minutes: int = 5


@dataclass
class IngestionDefaults:
    max_articles_per_source: int = 25
    max_total_articles: int = 50
    min_relevance_score: float = 60
    exclude_older_than_days: int = 14
    include_preprints: bool = True


@dataclass
class SummarizerSettings:
    provider: str = "template"
    model: str = "claude-haiku-4-5-20251001"
    max_tokens: int = 600
    temperature: float = 0.3
    concurrent_requests: int = 5
    timeout_seconds: float = 60.0
    max_summary_length: int = 500


@dataclass
class PerformanceSettings:
    max_concurrent_sources: int = 5
    request_timeout_seconds: float = 30.0


DEFAULT_SOURCES: list[dict[str, Any]] = [
    {"id": "arxiv", "type": "arxiv", "mock": True},
    {"id": "crossref", "type": "crossref", "mock": True},
]


@dataclass
class Settings:
    """Top-level settings object handed to the pipeline."""

    content: ContentConfig = field(default_factory=ContentConfig)
    ingestion: IngestionDefaults = field(default_factory=IngestionDefaults)
    summarizer: SummarizerSettings = field(default_factory=SummarizerSettings)
    performance: PerformanceSettings = field(default_factory=PerformanceSettings)
    sources: list[dict[str, Any]] = field(default_factory=lambda: [dict(s) for s in DEFAULT_SOURCES])
    fields: list[AcademicField] = field(default_factory=lambda: list(AcademicField))
    artifacts_dir: str = "artifacts"
    log_level: str = "INFO"
    random_seed: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Settings:
        if not isinstance(data, dict):
            raise ConfigurationError("Configuration root must be a mapping")
        settings = cls(
            content=_section(ContentConfig, data.get("content")),
            ingestion=_section(IngestionDefaults, data.get("ingestion")),
            summarizer=_section(SummarizerSettings, data.get("summarizer")),
            performance=_section(PerformanceSettings, data.get("performance")),
        )
        if "sources" in data:
            sources = data["sources"] or []
            for src in sources:
                if not isinstance(src, dict) or "id" not in src:
                    raise ConfigurationError(f"Source entries need an 'id': {src!r}")
            settings.sources = sources
        if "fields" in data:
            settings.fields = [parse_field(f) for f in data["fields"] or []]
        settings.artifacts_dir = str(data.get("artifacts_dir", settings.artifacts_dir))
        settings.log_level = str(data.get("log_level", settings.log_level)).upper()
        settings.random_seed = data.get("random_seed", settings.random_seed)

        content = settings.content
        if content.min_articles_per_digest < 1 or content.max_articles_per_digest < content.min_articles_per_digest:
            raise ConfigurationError(
                "content.min_articles_per_digest must be >= 1 and <= content.max_articles_per_digest"
            )
        return settings


def _section(cls: type, raw: Any) -> Any:
    """Build a settings dataclass from a YAML mapping, rejecting unknown keys."""
    if raw is None:
        return cls()
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Section for {cls.__name__} must be a mapping")
    known = {f.name for f in dc_fields(cls)}
    unknown = set(raw) - known
    if unknown:
        raise ConfigurationError(f"Unknown {cls.__name__} keys: {', '.join(sorted(unknown))}")
    return cls(**raw)


def load_settings(path: str | os.PathLike[str] | None = None) -> Settings:
    """Load settings from YAML; a missing file yields defaults."""
    config_path = Path(path or os.environ.get(CONFIG_PATH_ENV, DEFAULT_CONFIG_PATH))
    if not config_path.exists():
        logger.info("Config %s not found; using defaults", config_path)
        return Settings()
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Could not parse {config_path}: {e}") from e
    return Settings.from_dict(data)
