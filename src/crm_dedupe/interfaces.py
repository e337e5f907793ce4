from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Protocol, Sequence

from crm_dedupe.models import DuplicateAssessment, ExistingRecord, FuzzyMatchResult


class FieldMatcher(Protocol):
    """Step 1: score a candidate against existing records, one result per matching field."""

    def match(
        self,
        candidate: Mapping[str, object],
        records: Sequence[ExistingRecord],
    ) -> list[FuzzyMatchResult]:
        ...


class ConfidenceAggregator(Protocol):
    """Step 2: combine per-field matches into a duplicate decision."""

    def assess(self, matches: Sequence[FuzzyMatchResult]) -> DuplicateAssessment:
        ...


class RecordMerger(Protocol):
    """Step 3: fold a confirmed duplicate into the surviving record."""

    def merge(
        self,
        primary: Mapping[str, Any],
        secondary: Mapping[str, Any],
        now: datetime | None = None,
    ) -> dict[str, Any]:
        ...


class DedupePipeline(Protocol):
    """Unified interface for checking candidates against stored records."""

    def run(
        self,
        candidate: Mapping[str, object],
        records: Sequence[ExistingRecord],
    ) -> DuplicateAssessment:
        ...

    def run_batch(
        self,
        candidates: Sequence[Mapping[str, object]],
        records: Sequence[ExistingRecord],
    ) -> list[DuplicateAssessment]:
        ...

    def resolve(
        self,
        candidate: Mapping[str, object],
        records: Sequence[ExistingRecord],
    ) -> tuple[DuplicateAssessment, ExistingRecord | None]:
        ...
