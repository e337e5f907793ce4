from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Sequence

from crm_dedupe.config import AssessmentPolicy
from crm_dedupe.models import DuplicateAssessment, FuzzyMatchResult

logger = logging.getLogger(__name__)


class WeightedConfidenceAggregator:
    """Blend match strength and field coverage into one confidence per record."""

    def __init__(self, policy: AssessmentPolicy | None = None) -> None:
        self._policy = policy or AssessmentPolicy()

    @property
    def policy(self) -> AssessmentPolicy:
        return self._policy

    def record_scores(self, matches: Sequence[FuzzyMatchResult]) -> dict[str, float]:
        scores_by_record: dict[str, dict[str, float]] = defaultdict(dict)
        for match in matches:
            fields = scores_by_record[match.record_id]
            fields[match.field] = max(match.score, fields.get(match.field, 0.0))

        return {
            record_id: self._confidence(list(fields.values()))
            for record_id, fields in scores_by_record.items()
        }

    def assess(self, matches: Sequence[FuzzyMatchResult]) -> DuplicateAssessment:
        ordered = sorted(matches, key=lambda m: (-m.score, m.record_id, m.field))
        scores = self.record_scores(ordered)
        if not scores:
            return DuplicateAssessment(is_duplicate=False, matches=ordered, confidence=0.0)

        record_id, confidence = min(scores.items(), key=lambda item: (-item[1], item[0]))
        is_duplicate = confidence >= self._policy.duplicate_threshold
        logger.debug(
            "best record %s confidence=%.3f across %d candidate records (duplicate=%s)",
            record_id,
            confidence,
            len(scores),
            is_duplicate,
        )
        return DuplicateAssessment(
            is_duplicate=is_duplicate,
            matches=ordered,
            confidence=confidence,
            record_id=record_id,
        )

    def _confidence(self, field_scores: Sequence[float]) -> float:
        if not field_scores:
            return 0.0
        avg_score = sum(field_scores) / len(field_scores)
        coverage = len(field_scores) / self._policy.expected_fields
        raw = avg_score * self._policy.match_weight + coverage * self._policy.coverage_weight
        # Rounded so sums that land on the threshold compare stably.
        return round(max(0.0, min(1.0, raw)), 10)
