from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from crm_dedupe.interfaces import ConfidenceAggregator, FieldMatcher, RecordMerger
from crm_dedupe.models import DedupeAction, DuplicateAssessment, ExistingRecord
from crm_dedupe.steps.confidence import WeightedConfidenceAggregator
from crm_dedupe.steps.matching import FuzzyFieldMatcher
from crm_dedupe.steps.merge import PrecedenceMerger

logger = logging.getLogger(__name__)


class LocalDedupePipeline:
    """In-process runner: match, assess and optionally merge one candidate at a time."""

    def __init__(
        self,
        matcher: FieldMatcher | None = None,
        aggregator: ConfidenceAggregator | None = None,
        merger: RecordMerger | None = None,
    ) -> None:
        self._matcher = matcher or FuzzyFieldMatcher()
        self._aggregator = aggregator or WeightedConfidenceAggregator()
        self._merger = merger or PrecedenceMerger()

    def run(self, candidate: Mapping[str, object], records: Sequence[ExistingRecord]) -> DuplicateAssessment:
        if not isinstance(candidate, Mapping):
            raise TypeError(f"candidate must be a mapping, got {type(candidate).__name__}")
        matches = self._matcher.match(candidate, records)
        return self._aggregator.assess(matches)

    def run_batch(
        self,
        candidates: Sequence[Mapping[str, object]],
        records: Sequence[ExistingRecord],
    ) -> list[DuplicateAssessment]:
        assessments = [self.run(candidate, records) for candidate in candidates]
        flagged = sum(1 for assessment in assessments if assessment.is_duplicate)
        logger.info("assessed %d candidates against %d records, %d duplicates", len(candidates), len(records), flagged)
        return assessments

    def resolve(
        self,
        candidate: Mapping[str, object],
        records: Sequence[ExistingRecord],
    ) -> tuple[DuplicateAssessment, ExistingRecord | None]:
        """Assess ``candidate`` and, when it is a duplicate, merge it into the matched record."""
        assessment = self.run(candidate, records)
        if assessment.action != DedupeAction.MERGE:
            return assessment, None

        survivor = next(r for r in records if str(r.record_id) == assessment.record_id)
        merged: dict[str, Any] = self._merger.merge(survivor.attributes, candidate)
        logger.info("merged candidate into record %s (confidence=%.3f)", survivor.record_id, assessment.confidence)
        return assessment, ExistingRecord(record_id=survivor.record_id, attributes=merged)
