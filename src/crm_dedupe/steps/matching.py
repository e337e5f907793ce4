from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from crm_dedupe.config import MatchOptions
from crm_dedupe.models import ExistingRecord, FuzzyMatchResult
from crm_dedupe.schema import FieldKind, MatchField
from crm_dedupe.steps.normalize import FieldNormalizer
from crm_dedupe.steps.similarity import best_variation_score, bigram_dice
from crm_dedupe.steps.variations import alias_group, generate_variations

logger = logging.getLogger(__name__)

ALIAS_MATCH_SCORE = 0.95


class FuzzyFieldMatcher:
    """Compare a candidate against existing records field by field.

    Every configured field of every record is scored independently; only
    scores at or above ``options.threshold`` are kept, one per
    ``(record_id, field)``.
    """

    def __init__(
        self,
        options: MatchOptions | None = None,
        normalizer: FieldNormalizer | None = None,
    ) -> None:
        self._options = options or MatchOptions()
        self._normalizer = normalizer or FieldNormalizer()

    @property
    def options(self) -> MatchOptions:
        return self._options

    def match(
        self,
        candidate: Mapping[str, object],
        records: Sequence[ExistingRecord],
    ) -> list[FuzzyMatchResult]:
        best: dict[tuple[str, str], FuzzyMatchResult] = {}
        for record in records:
            for result in self.match_one(candidate, record):
                key = (result.record_id, result.field)
                current = best.get(key)
                if current is None or _outranks(result, current):
                    best[key] = result

        results = sorted(best.values(), key=lambda r: (-r.score, r.record_id, r.field))
        logger.debug(
            "scanned %d records x %d fields, %d matches >= %.2f",
            len(records),
            len(self._options.match_fields),
            len(results),
            self._options.threshold,
        )
        return results

    def match_one(self, candidate: Mapping[str, object], record: ExistingRecord) -> list[FuzzyMatchResult]:
        results: list[FuzzyMatchResult] = []
        for match_field in self._options.match_fields:
            candidate_value = match_field.value_for(candidate)
            if not candidate_value:
                continue
            existing_value = match_field.value_for(record.attributes)
            if not existing_value:
                continue

            score = self.score(match_field, candidate_value, existing_value)
            if score is not None and score >= self._options.threshold:
                results.append(
                    FuzzyMatchResult(
                        record_id=str(record.record_id),
                        score=score,
                        field=match_field.name,
                        matched_value=existing_value,
                        candidate_value=candidate_value,
                    )
                )
        return results

    def score(self, match_field: MatchField, candidate_value: str, existing_value: str) -> float | None:
        """Similarity of two raw values, or None when either normalizes to nothing."""
        if not self._options.normalize:
            if match_field.kind == FieldKind.NAME:
                return best_variation_score(
                    generate_variations(candidate_value),
                    generate_variations(existing_value),
                )
            return bigram_dice(candidate_value, existing_value)

        left = self._normalizer.normalize(match_field.kind, candidate_value)
        right = self._normalizer.normalize(match_field.kind, existing_value)
        if not left or not right:
            return None

        if match_field.kind == FieldKind.NAME:
            return self._score_names(left, right)
        if match_field.kind in (FieldKind.EMAIL, FieldKind.PHONE):
            return 1.0 if left == right else bigram_dice(left, right)
        return bigram_dice(left, right)

    def _score_names(self, left: str, right: str) -> float:
        score = best_variation_score(generate_variations(left), generate_variations(right))
        if score < ALIAS_MATCH_SCORE:
            group = alias_group((left,), self._options.aliases)
            if group is not None and group == alias_group((right,), self._options.aliases):
                return ALIAS_MATCH_SCORE
        return score


def _outranks(challenger: FuzzyMatchResult, current: FuzzyMatchResult) -> bool:
    if challenger.score != current.score:
        return challenger.score > current.score
    return (challenger.matched_value, challenger.candidate_value) < (
        current.matched_value,
        current.candidate_value,
    )
