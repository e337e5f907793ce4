from __future__ import annotations

import re
from collections.abc import Callable

from crm_dedupe.schema import FieldKind

LEGAL_SUFFIXES = (
    "inc",
    "incorporated",
    "llc",
    "llp",
    "ltd",
    "limited",
    "corp",
    "corporation",
    "co",
    "company",
    "gmbh",
    "ag",
    "sa",
    "plc",
    "pty",
    "pvt",
    "bv",
    "nv",
    "srl",
    "sarl",
)

_SUFFIX_RE = re.compile(r"\b(?:" + "|".join(LEGAL_SUFFIXES) + r")\b\.?")
_PUNCT_RE = re.compile(r"[^\w\s]")
_SPACE_RE = re.compile(r"\s+")
_NON_DIGIT_RE = re.compile(r"\D")


def normalize_company_name(value: object) -> str:
    if not isinstance(value, str):
        return ""
    current = value
    # Dropping punctuation can expose a new suffix ("i.n.c"), so run to a fixed point.
    while True:
        rewritten = _company_pass(current)
        if rewritten == current:
            return rewritten
        current = rewritten


def _company_pass(value: str) -> str:
    text = value.lower()
    text = _SUFFIX_RE.sub("", text)
    text = _PUNCT_RE.sub("", text)
    return _SPACE_RE.sub(" ", text).strip()


def normalize_email(value: object) -> str:
    """Reduce an address to its lowercase domain; non-addresses are just lowercased."""
    if not isinstance(value, str):
        return ""
    text = value.strip().lower()
    if "@" not in text:
        return text
    return text.rsplit("@", maxsplit=1)[1].strip()


def normalize_phone(value: object) -> str:
    if not isinstance(value, str):
        return ""
    return _NON_DIGIT_RE.sub("", value)


def normalize_text(value: object) -> str:
    if not isinstance(value, str):
        return ""
    return _SPACE_RE.sub(" ", value.lower()).strip()


DEFAULT_KIND_TRANSFORMS: dict[FieldKind, Callable[[object], str]] = {
    FieldKind.NAME: normalize_company_name,
    FieldKind.EMAIL: normalize_email,
    FieldKind.PHONE: normalize_phone,
    FieldKind.GENERIC: normalize_text,
}


class FieldNormalizer:
    """Per-kind canonicalization, overridable one kind at a time."""

    def __init__(self, kind_transforms: dict[FieldKind, Callable[[object], str]] | None = None) -> None:
        self._transforms = dict(DEFAULT_KIND_TRANSFORMS)
        self._transforms.update(kind_transforms or {})

    def normalize(self, kind: FieldKind, value: object) -> str:
        return self._transforms[kind](value)
