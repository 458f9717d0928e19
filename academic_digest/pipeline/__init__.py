"""Pipeline orchestration: ingestion, the weekly job, artifacts, and the CLI."""

from academic_digest.pipeline.artifacts import ArtifactStore
from academic_digest.pipeline.job import JobResult, WeeklyDigestJob
from academic_digest.pipeline.orchestrator import IngestOrchestrator

__all__ = ["ArtifactStore", "JobResult", "WeeklyDigestJob", "IngestOrchestrator"]
