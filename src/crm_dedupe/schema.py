from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum

CANDIDATE_KEY_PREFIXES = ("", "client_", "contact_")


class FieldKind(StrEnum):
    NAME = "NAME"
    EMAIL = "EMAIL"
    PHONE = "PHONE"
    GENERIC = "GENERIC"


@dataclass(frozen=True)
class MatchField:
    """A configured field plus the comparison kind used for it."""

    name: str
    kind: FieldKind = FieldKind.GENERIC
    aliases: tuple[str, ...] = ()

    @classmethod
    def infer(cls, name: str) -> "MatchField":
        return cls(name=name, kind=infer_kind(name))

    @classmethod
    def coerce(cls, field: "MatchField | str") -> "MatchField":
        if isinstance(field, MatchField):
            return field
        return cls.infer(field)

    @property
    def columns(self) -> tuple[str, ...]:
        prefixed = tuple(f"{prefix}{self.name}" for prefix in CANDIDATE_KEY_PREFIXES)
        return prefixed + tuple(alias for alias in self.aliases if alias not in prefixed)

    def value_for(self, attributes: Mapping[str, object]) -> str:
        for column in self.columns:
            value = attributes.get(column)
            if not isinstance(value, str):
                continue
            text = value.strip()
            if text:
                return text
        return ""


def infer_kind(name: str) -> FieldKind:
    lowered = name.lower()
    if "email" in lowered:
        return FieldKind.EMAIL
    if "phone" in lowered:
        return FieldKind.PHONE
    if "name" in lowered or "company" in lowered:
        return FieldKind.NAME
    return FieldKind.GENERIC
