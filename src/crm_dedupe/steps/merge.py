from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from datetime import datetime, timezone
from typing import Any

logger = logging.getLogger(__name__)

COLLECTION_FIELDS = frozenset({"tags", "categories", "labels"})
TIMESTAMP_FIELD = "updated_at"

_ARRAY_TYPES = (list, tuple, set, frozenset)


def merge_records(
    primary: Mapping[str, Any],
    secondary: Mapping[str, Any],
    prefer_primary: bool = True,
    now: datetime | None = None,
) -> dict[str, Any]:
    return PrecedenceMerger(prefer_primary=prefer_primary).merge(primary, secondary, now=now)


class PrecedenceMerger:
    """Fold a duplicate into a surviving record by field precedence.

    Empty values on the survivor are filled from the duplicate. Conflicting
    values keep the survivor's unless ``prefer_primary`` is off. Collection
    fields are unioned. Inputs are never modified.
    """

    def __init__(
        self,
        prefer_primary: bool = True,
        collection_fields: Iterable[str] = COLLECTION_FIELDS,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._prefer_primary = prefer_primary
        self._collection_fields = frozenset(collection_fields)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def merge(
        self,
        primary: Mapping[str, Any],
        secondary: Mapping[str, Any],
        now: datetime | None = None,
    ) -> dict[str, Any]:
        merged: dict[str, Any] = {key: _copy_value(value) for key, value in primary.items()}
        filled: list[str] = []
        overwritten: list[str] = []

        for key, incoming in secondary.items():
            if key == TIMESTAMP_FIELD:
                continue
            current = merged.get(key)

            if key in self._collection_fields and _is_array(current) and _is_array(incoming):
                merged[key] = _union(current, incoming)
            elif _is_missing(current):
                if not _is_missing(incoming):
                    merged[key] = _copy_value(incoming)
                    filled.append(key)
            elif not self._prefer_primary and not _is_missing(incoming) and incoming != current:
                merged[key] = _copy_value(incoming)
                overwritten.append(key)

        merged[TIMESTAMP_FIELD] = (now or self._clock()).isoformat()
        logger.debug("merged record: filled=%s overwritten=%s", filled, overwritten)
        return merged

    def merge_all(
        self,
        primary: Mapping[str, Any],
        others: Sequence[Mapping[str, Any]],
        now: datetime | None = None,
    ) -> dict[str, Any]:
        stamp = now or self._clock()
        merged = self.merge(primary, {}, now=stamp)
        for other in others:
            merged = self.merge(merged, other, now=stamp)
        return merged


def _is_array(value: object) -> bool:
    return isinstance(value, _ARRAY_TYPES)


def _is_missing(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if _is_array(value) or isinstance(value, Mapping):
        return len(value) == 0  # type: ignore[arg-type]
    return False


def _copy_value(value: Any) -> Any:
    if isinstance(value, list):
        return list(value)
    if isinstance(value, dict):
        return dict(value)
    return value


def _ordered(values: Any) -> list[Any]:
    if isinstance(values, (set, frozenset)):
        return sorted(values, key=str)
    return list(values)


def _union(left: Any, right: Any) -> list[Any]:
    merged: list[Any] = []
    for item in _ordered(left) + _ordered(right):
        if item not in merged:
            merged.append(item)
    return merged
