"""Fuzzy duplicate detection and record merging for CRM leads, contacts and companies."""

from crm_dedupe.config import AssessmentPolicy, MatchOptions
from crm_dedupe.models import (
    ConfidenceBand,
    DedupeAction,
    DuplicateAssessment,
    ExistingRecord,
    FuzzyMatchResult,
)
from crm_dedupe.schema import FieldKind, MatchField

__all__ = [
    "AssessmentPolicy",
    "MatchOptions",
    "ConfidenceBand",
    "DedupeAction",
    "DuplicateAssessment",
    "ExistingRecord",
    "FuzzyMatchResult",
    "FieldKind",
    "MatchField",
]
