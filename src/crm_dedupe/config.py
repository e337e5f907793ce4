"""Typed configuration for matching and duplicate assessment."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from crm_dedupe.schema import MatchField

DEFAULT_FIELDS = ("name", "company", "email", "phone")

# Canonical company -> spellings seen in CRM data, already normalized.
KNOWN_COMPANY_ALIASES: dict[str, tuple[str, ...]] = {
    "viewpoint": ("viewpoint", "viewpoint vc", "viewpoint ventures", "view point", "vp"),
    "microsoft": ("microsoft", "msft"),
    "google": ("google", "alphabet"),
    "amazon": ("amazon", "amazoncom", "amazon web services", "aws"),
}


@dataclass(slots=True)
class MatchOptions:
    threshold: float = 0.7
    fields: Sequence[MatchField | str] = DEFAULT_FIELDS
    normalize: bool = True
    aliases: Mapping[str, Sequence[str]] = field(default_factory=lambda: dict(KNOWN_COMPANY_ALIASES))

    def __post_init__(self) -> None:
        self.threshold = _clamp(self.threshold)
        self.fields = tuple(MatchField.coerce(f) for f in self.fields)

    @property
    def match_fields(self) -> tuple[MatchField, ...]:
        return tuple(self.fields)  # type: ignore[arg-type]


@dataclass(slots=True)
class AssessmentPolicy:
    """Weights and cut-offs for turning field matches into one confidence.

    The defaults reproduce the historical heuristic:
    ``confidence = 0.6 * avg_score + 0.4 * matched_fields / 4``. The duplicate
    cut-off is inclusive: a record is flagged when
    ``confidence >= duplicate_threshold``, so an exact 0.8 counts.
    """

    match_weight: float = 0.6
    coverage_weight: float = 0.4
    expected_fields: int = 4
    duplicate_threshold: float = 0.8

    def __post_init__(self) -> None:
        self.match_weight = _clamp(self.match_weight)
        self.coverage_weight = _clamp(self.coverage_weight)
        self.duplicate_threshold = _clamp(self.duplicate_threshold)
        self.expected_fields = max(1, int(self.expected_fields))


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, float(value)))
