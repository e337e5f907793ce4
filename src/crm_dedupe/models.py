from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

HIGH_BAND_SCORE = 0.8
MEDIUM_BAND_SCORE = 0.7


class ConfidenceBand(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def for_score(cls, score: float) -> "ConfidenceBand":
        if score >= HIGH_BAND_SCORE:
            return cls.HIGH
        if score >= MEDIUM_BAND_SCORE:
            return cls.MEDIUM
        return cls.LOW


class DedupeAction(StrEnum):
    """What the caller should do with the candidate record."""

    CREATE = "create"
    REVIEW = "review"
    MERGE = "merge"


@dataclass(slots=True)
class ExistingRecord:
    """A stored lead, contact or company record that candidates are checked against."""

    record_id: str
    attributes: dict[str, Any]

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any], id_key: str = "id") -> "ExistingRecord":
        if not isinstance(row, Mapping):
            raise TypeError(f"record must be a mapping, got {type(row).__name__}")
        attrs = {k: v for k, v in row.items() if k != id_key}
        return cls(record_id=str(row.get(id_key, "")), attributes=attrs)


@dataclass(slots=True)
class FuzzyMatchResult:
    """One field of one existing record that matched the candidate."""

    record_id: str
    score: float
    field: str
    matched_value: str
    candidate_value: str

    @property
    def band(self) -> ConfidenceBand:
        return ConfidenceBand.for_score(self.score)


@dataclass(slots=True)
class DuplicateAssessment:
    is_duplicate: bool
    matches: list[FuzzyMatchResult] = field(default_factory=list)
    confidence: float = 0.0
    record_id: str | None = None

    @property
    def band(self) -> ConfidenceBand:
        return ConfidenceBand.for_score(self.confidence)

    @property
    def action(self) -> DedupeAction:
        if self.is_duplicate:
            return DedupeAction.MERGE
        if self.matches:
            return DedupeAction.REVIEW
        return DedupeAction.CREATE

    def reasons(self) -> list[str]:
        """Explain the matched fields of the best record, strongest first."""
        lines: list[str] = []
        for match in self.matches:
            if match.record_id != self.record_id:
                continue
            strength = "exact" if match.score >= 1.0 else match.band.value
            lines.append(f"{match.field}: {strength} match ({round(match.score * 100)}%)")
        return lines

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_duplicate": self.is_duplicate,
            "confidence": self.confidence,
            "record_id": self.record_id,
            "band": self.band.value,
            "action": self.action.value,
            "matches": [
                {
                    "record_id": m.record_id,
                    "score": m.score,
                    "field": m.field,
                    "matched_value": m.matched_value,
                    "candidate_value": m.candidate_value,
                }
                for m in self.matches
            ],
        }
