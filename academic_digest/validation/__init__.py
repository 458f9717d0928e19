"""Validation of articles, digests and subscribers."""

from academic_digest.validation.engine import (
    BatchValidation,
    Severity,
    ValidationEngine,
    ValidationIssue,
    ValidationResult,
    validation_score,
)

__all__ = [
    "BatchValidation",
    "Severity",
    "ValidationEngine",
    "ValidationIssue",
    "ValidationResult",
    "validation_score",
]
